"""Helpers for icon uploads: content types, bounded reads and colour summaries."""

import hashlib
from io import BytesIO
from typing import AsyncIterable

from PIL import Image, UnidentifiedImageError

from collectionhub.core.exceptions import ValidationFailedError
from collectionhub.core.logging import get_logger

logger = get_logger(__name__)

IMAGE_CONTENT_TYPES: dict[str, str] = {
    "bmp": "image/bmp",
    "gif": "image/gif",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "jpe": "image/jpeg",
    "png": "image/png",
    "svg": "image/svg+xml",
    "svgz": "image/svg+xml",
    "rgb": "image/x-rgb",
    "webp": "image/webp",
}


def get_image_content_type(extension: str) -> str | None:
    """Map a file extension to its image content type, if allowed."""
    return IMAGE_CONTENT_TYPES.get(extension.lower())


async def read_from_payload(
    payload: bytes | AsyncIterable[bytes], limit: int, message: str
) -> bytes:
    """Read an upload body, aborting as soon as it exceeds ``limit`` bytes.

    Args:
        payload: The raw bytes, or an async stream of chunks.
        limit: Maximum number of bytes allowed.
        message: Error message used when the limit is exceeded.

    Raises:
        ValidationFailedError: If the payload is larger than ``limit``.
    """
    if isinstance(payload, (bytes, bytearray)):
        if len(payload) > limit:
            raise ValidationFailedError.single("payload", message, "payload_too_large")
        return bytes(payload)

    buffer = bytearray()
    async for chunk in payload:
        buffer.extend(chunk)
        if len(buffer) > limit:
            raise ValidationFailedError.single("payload", message, "payload_too_large")
    return bytes(buffer)


def content_hash(data: bytes) -> str:
    """SHA-1 hex digest of the raw bytes."""
    return hashlib.sha1(data).hexdigest()


def get_color_from_img(data: bytes) -> int | None:
    """Summarise an image by its dominant colour.

    The image is scaled to 256x256 and the 64x64 centre is quantised; the
    most frequent palette entry wins.

    Returns:
        The colour packed as 0xRRGGBB, or None if the image can't be decoded.
    """
    try:
        with Image.open(BytesIO(data)) as image:
            region = (
                image.convert("RGB")
                .resize((256, 256), Image.Resampling.NEAREST)
                .crop((128, 128, 192, 192))
            )
        quantized = region.quantize(colors=4)
        colors = quantized.getcolors()
        palette = quantized.getpalette()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        logger.debug("Could not extract icon colour", error=str(e))
        return None

    if not colors or not palette:
        return None

    _, index = max(colors)
    r, g, b = palette[index * 3 : index * 3 + 3]
    return (r << 16) | (g << 8) | b
