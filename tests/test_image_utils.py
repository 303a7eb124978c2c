"""Tests for image validation and compression."""

import base64
import io

import pytest
from PIL import Image

from app.core.enums import ImageFormat
from app.core.exceptions import ImageValidationError
from app.utils.image_utils import (
    decode_base64_image,
    fit_dimensions,
    prepare_image_payload,
    shrink_image,
    validate_image_format,
)


class TestDecode:
    """Tests for base64 decoding."""

    def test_strips_data_url(self, image_bytes: bytes, image_base64: str) -> None:
        assert decode_base64_image(f"data:image/png;base64,{image_base64}") == image_bytes

    def test_too_short(self) -> None:
        with pytest.raises(ImageValidationError):
            decode_base64_image("aGVsbG8=", min_length=1000)

    def test_not_base64(self) -> None:
        with pytest.raises(ImageValidationError):
            decode_base64_image("not base64 at all!")


class TestFormat:
    """Tests for image format validation."""

    def test_png(self, image_bytes: bytes) -> None:
        assert validate_image_format(image_bytes) == ImageFormat.PNG

    def test_unsupported_format(self, gif_bytes: bytes) -> None:
        with pytest.raises(ImageValidationError):
            validate_image_format(gif_bytes)

    def test_not_an_image(self) -> None:
        with pytest.raises(ImageValidationError):
            validate_image_format(b"plain text")


class TestResize:
    """Tests for downscaling oversized photos."""

    @pytest.mark.parametrize(
        "size, expected",
        [
            ((800, 600), (800, 600)),
            ((3200, 2400), (1600, 1200)),
            ((1200, 4000), (480, 1600)),
        ],
    )
    def test_fit_dimensions(self, size, expected) -> None:
        assert fit_dimensions(*size, max_dimension=1600) == expected

    def test_shrink_image(self, image_bytes: bytes) -> None:
        compressed = shrink_image(image_bytes, max_dimension=32)

        with Image.open(io.BytesIO(compressed)) as img:
            assert img.format == "JPEG"
            assert img.size == (32, 32)

    def test_small_image_passed_through(self, image_base64: str) -> None:
        assert prepare_image_payload(image_base64, max_size_mb=5) == image_base64

    def test_large_image_compressed(self, image_base64: str) -> None:
        payload = prepare_image_payload(image_base64, max_size_mb=0, max_dimension=16)

        with Image.open(io.BytesIO(base64.b64decode(payload))) as img:
            assert img.size == (16, 16)
