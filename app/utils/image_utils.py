"""
Утилиты для подготовки фото ценника к отправке в OCR
"""
import base64
import binascii
import io
from typing import Tuple

from PIL import Image

from app.core.exceptions import ImageValidationError
from app.core.enums import ImageFormat
from app.core.logging import get_logger

logger = get_logger(__name__)


def strip_data_url(base64_string: str) -> str:
    """Убрать префикс data:image/...;base64, если есть"""
    if "base64," in base64_string:
        return base64_string.split("base64,", 1)[1]
    return base64_string


def decode_base64_image(base64_string: str, min_length: int = 0) -> bytes:
    """
    Декодирование base64 строки в bytes

    Args:
        base64_string: Изображение в base64 (допускается data URL)
        min_length: Минимальная длина base64 данных

    Returns:
        Декодированные байты изображения

    Raises:
        ImageValidationError: Если данные слишком короткие или не декодируются
    """
    payload = strip_data_url(base64_string.strip())

    if len(payload) < min_length:
        raise ImageValidationError(
            "Invalid or too small base64 image data",
            details={"length": len(payload), "min_length": min_length}
        )

    try:
        image_bytes = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageValidationError(
            f"Failed to decode base64 image: {str(e)}",
            details={"error": str(e)}
        )

    if not image_bytes:
        raise ImageValidationError("Decoded image is empty")

    return image_bytes


def validate_image_format(image_bytes: bytes) -> ImageFormat:
    """
    Проверка формата изображения

    Raises:
        ImageValidationError: Если формат не поддерживается
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            format_lower = img.format.lower() if img.format else "unknown"
    except Exception as e:
        raise ImageValidationError(
            f"Failed to validate image format: {str(e)}",
            details={"error": str(e)}
        )

    try:
        return ImageFormat(format_lower)
    except ValueError:
        raise ImageValidationError(
            f"Unsupported image format: {format_lower}",
            details={
                "format": format_lower,
                "supported_formats": [f.value for f in ImageFormat]
            }
        )


def image_size_mb(image_bytes: bytes) -> float:
    return len(image_bytes) / (1024 * 1024)


def fit_dimensions(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
    """
    Размеры с сохранением пропорций, чтобы большая сторона не превышала max_dimension
    """
    if width <= max_dimension and height <= max_dimension:
        return width, height

    if width > height:
        return max_dimension, max(1, round(height * max_dimension / width))
    return max(1, round(width * max_dimension / height)), max_dimension


def shrink_image(image_bytes: bytes, max_dimension: int = 1600, quality: int = 80) -> bytes:
    """
    Уменьшение изображения для передачи по сети (JPEG)

    Args:
        image_bytes: Байты изображения
        max_dimension: Максимальная сторона в пикселях
        quality: Качество JPEG

    Returns:
        Байты сжатого JPEG
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            original_size = img.size
            new_size = fit_dimensions(img.width, img.height, max_dimension)

            resized = img.convert("RGB")
            if new_size != original_size:
                resized = resized.resize(new_size)

            buffer = io.BytesIO()
            resized.save(buffer, format="JPEG", quality=quality)
    except Exception as e:
        raise ImageValidationError(
            f"Failed to compress image: {str(e)}",
            details={"error": str(e)}
        )

    compressed = buffer.getvalue()
    logger.info(
        "Image compressed",
        original_size=original_size,
        compressed_size=new_size,
        original_kb=len(image_bytes) // 1024,
        compressed_kb=len(compressed) // 1024
    )
    return compressed


def prepare_image_payload(
    base64_string: str,
    min_length: int = 1000,
    max_size_mb: int = 5,
    max_dimension: int = 1600
) -> str:
    """
    Валидация фото и подготовка base64 для OCR сервиса

    Большие изображения уменьшаются, остальные передаются как есть.

    Returns:
        Изображение в base64 без data URL префикса

    Raises:
        ImageValidationError: Если изображение некорректно
    """
    image_bytes = decode_base64_image(base64_string, min_length=min_length)
    validate_image_format(image_bytes)

    if image_size_mb(image_bytes) <= max_size_mb:
        return strip_data_url(base64_string.strip())

    logger.info(
        "Image exceeds size limit, compressing",
        size_mb=round(image_size_mb(image_bytes), 2),
        max_size_mb=max_size_mb
    )
    compressed = shrink_image(image_bytes, max_dimension=max_dimension)
    return base64.b64encode(compressed).decode("utf-8")
