"""
Enums для типобезопасности
"""
from enum import Enum


class Currency(str, Enum):
    """Валюты на ценнике"""
    BGN = "bgn"
    EUR = "eur"


class ImageFormat(str, Enum):
    """Форматы изображений"""
    JPG = "jpg"
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"


class HistoryFilter(str, Enum):
    """Фильтр истории проверок"""
    ALL = "all"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class FallbackReason(str, Enum):
    """Причины, по которым OCR не вернул текст"""
    INVALID_IMAGE = "invalid_image"
    SERVICE_UNAVAILABLE = "service_unavailable"
    NETWORK_ERROR = "network_error"
    REQUEST_TIMEOUT = "request_timeout"
    IMAGE_TOO_LARGE = "image_too_large"
    ENDPOINT_NOT_FOUND = "endpoint_not_found"
    BAD_REQUEST = "bad_request"
    SERVER_ERROR = "server_error"
    INVALID_RESPONSE = "invalid_response"
    PROCESSING_ERROR = "processing_error"
    NO_TEXT_DETECTED = "no_text_detected"
    SERVICE_ERROR = "service_error"
