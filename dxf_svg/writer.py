"""
Serialization of converted documents.
"""

import copy
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import BinaryIO, Union

INDENT = "  "


def _indented(element: ET.Element) -> ET.Element:
    element = copy.deepcopy(element)
    ET.indent(element, space=INDENT)
    return element


def to_string(element: ET.Element) -> str:
    """Indented markup without an XML declaration, ready to be embedded or returned."""
    return ET.tostring(_indented(element), encoding="unicode")


def save_to(element: ET.Element, target: Union[str, Path, BinaryIO]) -> None:
    """Write an indented UTF-8 document with XML declaration to a path or binary stream."""
    tree = ET.ElementTree(_indented(element))
    if isinstance(target, (str, Path)):
        with open(target, "wb") as stream:
            tree.write(stream, encoding="utf-8", xml_declaration=True)
    else:
        tree.write(target, encoding="utf-8", xml_declaration=True)
