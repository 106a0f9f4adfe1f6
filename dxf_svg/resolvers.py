"""
Image reference resolution.

A resolver turns the file path stored on an IMAGE entity into the value of the
SVG ``href`` attribute. Resolution is asynchronous so the bytes can come from
disk or over HTTP without blocking the conversion of other images.
"""

import asyncio
import base64
import logging
import os
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union
from urllib.parse import urljoin

import aiohttp

from .errors import ImageResolutionError

logger = logging.getLogger(__name__)

ImageHrefResolver = Callable[[str], Awaitable[str]]
ByteFetcher = Callable[[str], Awaitable[bytes]]

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}
UNKNOWN_MIME_TYPE = "image/unknown"


async def identity_resolver(path: str) -> str:
    """Default resolver: reference the image by its stored path."""
    return path


def mime_type_for(path: str) -> str:
    extension = os.path.splitext(path.replace("\\", "/"))[1].lower()
    return MIME_TYPES.get(extension, UNKNOWN_MIME_TYPE)


def create_data_uri_resolver(fetch_bytes: ByteFetcher) -> ImageHrefResolver:
    """Resolver embedding the fetched bytes as a base64 ``data:`` URI."""

    async def resolve(path: str) -> str:
        mime_type = mime_type_for(path)
        data = await fetch_bytes(path)
        encoded = base64.b64encode(data).decode("ascii")
        logger.debug(f"Embedded image {path} ({len(data)} bytes, {mime_type})")
        return f"data:{mime_type};base64,{encoded}"

    return resolve


def create_file_fetcher(root: Optional[Union[str, Path]] = None,
                        allow_outside_root: bool = False) -> ByteFetcher:
    """
    Read image bytes from disk.

    With a ``root``, relative paths are taken from it and the fetcher refuses
    absolute paths and anything that resolves outside of it, unless
    ``allow_outside_root`` is set (local command line use).
    """
    root_path = Path(root).resolve() if root is not None else None

    async def fetch(path: str) -> bytes:
        file_path = Path(path)
        if root_path is not None:
            if file_path.is_absolute():
                if not allow_outside_root:
                    raise ImageResolutionError(path, "Absolute image paths are not allowed")
            else:
                file_path = root_path / file_path
            if not allow_outside_root:
                file_path = file_path.resolve()
                if file_path != root_path and root_path not in file_path.parents:
                    raise ImageResolutionError(path, "Image path is outside the image root")
        return await asyncio.to_thread(file_path.read_bytes)

    return fetch


def create_http_fetcher(session: aiohttp.ClientSession, base_url: Optional[str] = None) -> ByteFetcher:
    """Download image bytes with an open aiohttp session."""

    async def fetch(path: str) -> bytes:
        url = urljoin(base_url, path) if base_url else path
        async with session.get(url) as response:
            if not response.status < 300:
                raise ImageResolutionError(path, f"HTTP {response.status} from {url}")
            return await response.read()

    return fetch
