"""Unit tests for icon image helpers."""

import hashlib
from io import BytesIO

import pytest
from PIL import Image

from collectionhub.core.exceptions import ValidationFailedError
from collectionhub.domain.services.image_utils import (
    content_hash,
    get_color_from_img,
    get_image_content_type,
    read_from_payload,
)


def png_bytes(color: tuple[int, int, int], size: tuple[int, int] = (32, 32)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


async def chunks(*parts: bytes):
    for part in parts:
        yield part


class TestContentType:
    @pytest.mark.parametrize(
        "ext,content_type",
        [
            ("png", "image/png"),
            ("jpg", "image/jpeg"),
            ("JPEG", "image/jpeg"),
            ("svg", "image/svg+xml"),
            ("webp", "image/webp"),
        ],
    )
    def test_allowed(self, ext, content_type):
        assert get_image_content_type(ext) == content_type

    @pytest.mark.parametrize("ext", ["exe", "txt", "", "png.exe"])
    def test_rejected(self, ext):
        assert get_image_content_type(ext) is None


class TestReadFromPayload:
    @pytest.mark.asyncio
    async def test_bytes_within_limit(self):
        assert await read_from_payload(b"abc", 3, "too big") == b"abc"

    @pytest.mark.asyncio
    async def test_bytes_over_limit(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            await read_from_payload(b"abcd", 3, "too big")

        assert exc_info.value.errors[0].code == "payload_too_large"
        assert exc_info.value.errors[0].message == "too big"

    @pytest.mark.asyncio
    async def test_stream_within_limit(self):
        assert await read_from_payload(chunks(b"ab", b"cd"), 4, "too big") == b"abcd"

    @pytest.mark.asyncio
    async def test_stream_stops_reading_once_over_limit(self):
        consumed = []

        async def stream():
            for part in (b"aaaa", b"bbbb", b"cccc"):
                consumed.append(part)
                yield part

        with pytest.raises(ValidationFailedError):
            await read_from_payload(stream(), 5, "too big")

        assert consumed == [b"aaaa", b"bbbb"]


def test_content_hash_is_sha1_hex():
    assert content_hash(b"icon") == hashlib.sha1(b"icon").hexdigest()


class TestColor:
    def test_solid_image(self):
        assert get_color_from_img(png_bytes((255, 0, 0))) == 0xFF0000

    def test_dominant_centre_colour_wins(self):
        image = Image.new("RGB", (64, 64), (0, 0, 255))
        for x in range(16, 64):
            for y in range(16, 64):
                image.putpixel((x, y), (0, 255, 0))
        buffer = BytesIO()
        image.save(buffer, format="PNG")

        assert get_color_from_img(buffer.getvalue()) == 0x00FF00

    def test_undecodable_returns_none(self):
        assert get_color_from_img(b"<svg xmlns='http://www.w3.org/2000/svg'/>") is None

    def test_empty_returns_none(self):
        assert get_color_from_img(b"") is None
