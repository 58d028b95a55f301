from __future__ import annotations

import asyncio
import base64
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from io import BytesIO
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import aiohttp
from PIL import Image, UnidentifiedImageError

from botanical_friend import settings
from botanical_friend.constants import DEFAULT_IMAGE_MIME_TYPE, REGEX_DATA_URL
from botanical_friend.exceptions import (
    CrossOriginError,
    FetchError,
    FileReadError,
    ImageProcessingError,
    ImageTooLargeError,
)

if TYPE_CHECKING:
    from fastapi import UploadFile

logger = logging.getLogger(__name__)

# statuses by which image hosts refuse hotlinking or third-party access
BLOCKING_HTTP_STATUSES = frozenset({401, 403, 451})


@dataclass(frozen=True)
class FileSource:
    upload: UploadFile


@dataclass(frozen=True)
class UrlSource:
    url: str


ImageSource = FileSource | UrlSource


@dataclass(frozen=True)
class AcquiredImage:
    preview: str  # self-describing data url, displayable as is
    payload: str  # base64 only, as submitted to the AI model
    mime_type: str


class _NotAnImageError(Exception):
    pass


class _BrokenImageError(Exception):
    pass


def encode_data_url(content: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


def strip_data_url_prefix(data_url: str) -> str:
    """Return the base64 part of a data url, e.g. data:image/png;base64,iVBORw0... ->
    iVBORw0..."""
    match = re.match(REGEX_DATA_URL, data_url)
    if not match or ";base64" not in match.group("params"):
        raise ValueError("Not a base64 data url")
    return data_url[match.end() :]


def _sniff_mime_type(content: bytes, declared_mime_type: str | None) -> str:
    """Determine the image's mime type, preferring what Pillow detects over the declared
    type. Images in formats Pillow does not know are accepted if declared as image."""
    if not content:
        raise _NotAnImageError("empty content")

    declared_is_image = bool(declared_mime_type and declared_mime_type.startswith("image/"))
    try:
        with Image.open(BytesIO(content)) as image:
            image_format = image.format
            image.verify()
    except UnidentifiedImageError as exc:
        if declared_is_image:
            logger.debug(f"Unknown image format, trusting declared type {declared_mime_type}.")
            return declared_mime_type  # type: ignore[return-value]
        raise _NotAnImageError(str(exc)) from exc
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        raise _BrokenImageError(str(exc)) from exc

    detected = Image.MIME.get(image_format) if image_format else None
    return detected or (declared_mime_type if declared_is_image else DEFAULT_IMAGE_MIME_TYPE)


def _to_acquired_image(content: bytes, mime_type: str) -> AcquiredImage:
    data_url = encode_data_url(content, mime_type)
    return AcquiredImage(
        preview=data_url, payload=strip_data_url_prefix(data_url), mime_type=mime_type
    )


class ImageAcquisition:
    """Turns an uploaded file or an image url into the base64 representation submitted
    to the AI model."""

    def __init__(
        self,
        max_image_bytes: int | None = None,
        url_fetch_timeout_seconds: float | None = None,
    ):
        self.max_image_bytes = max_image_bytes or settings.acquisition.max_image_bytes
        self.url_fetch_timeout_seconds = (
            url_fetch_timeout_seconds or settings.acquisition.url_fetch_timeout_seconds
        )

    async def acquire(
        self, source: ImageSource, on_preview: Callable[[str], None] | None = None
    ) -> AcquiredImage:
        if isinstance(source, FileSource):
            return await self.acquire_from_file(source.upload)
        if isinstance(source, UrlSource):
            return await self.acquire_from_url(source.url, on_preview=on_preview)
        raise TypeError(f"Unknown image source: {type(source).__name__}")

    async def acquire_from_file(self, upload: UploadFile) -> AcquiredImage:
        try:
            content = await upload.read()
        except (OSError, ValueError) as exc:
            raise FileReadError(upload.filename, str(exc)) from exc

        if len(content) > self.max_image_bytes:
            raise ImageTooLargeError(upload.filename, len(content), self.max_image_bytes)

        try:
            mime_type = _sniff_mime_type(content, upload.content_type)
        except (_NotAnImageError, _BrokenImageError) as exc:
            raise FileReadError(upload.filename, str(exc)) from exc

        logger.info(f"Read {len(content)} bytes of {mime_type} from file {upload.filename}.")
        return _to_acquired_image(content, mime_type)

    async def acquire_from_url(
        self, url: str, on_preview: Callable[[str], None] | None = None
    ) -> AcquiredImage:
        """Download an image. The url itself is handed to on_preview before the download
        starts so it can be displayed right away."""
        if on_preview:
            on_preview(url)

        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise FetchError(url, "only http(s) urls are supported")

        content, declared_mime_type = await self._download(url)

        try:
            mime_type = _sniff_mime_type(content, declared_mime_type)
        except _NotAnImageError as exc:
            # typically an html page served instead of the image to foreign sites
            raise CrossOriginError(url, f"no image content ({declared_mime_type})") from exc
        except _BrokenImageError as exc:
            raise ImageProcessingError(url, str(exc)) from exc

        logger.info(f"Downloaded {len(content)} bytes of {mime_type} from {url}.")
        return _to_acquired_image(content, mime_type)

    async def _download(self, url: str) -> tuple[bytes, str]:
        timeout = aiohttp.ClientTimeout(total=self.url_fetch_timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session, session.get(
                url
            ) as response:
                if response.status in BLOCKING_HTTP_STATUSES:
                    raise CrossOriginError(url, f"HTTP {response.status}")
                if not response.ok:
                    raise FetchError(url, f"HTTP {response.status}")
                if response.content_length and response.content_length > self.max_image_bytes:
                    raise FetchError(url, f"image too large ({response.content_length} bytes)")
                content = await response.read()
                declared_mime_type = response.content_type
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise FetchError(url, f"{type(exc).__name__}: {exc}") from exc

        if len(content) > self.max_image_bytes:
            raise FetchError(url, f"image too large ({len(content)} bytes)")
        return content, declared_mime_type
