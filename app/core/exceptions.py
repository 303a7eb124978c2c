"""
Кастомные исключения для сервиса проверки ценников
"""
from app.core.enums import FallbackReason


class PriceCheckerException(Exception):
    """Базовое исключение сервиса"""
    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ImageValidationError(PriceCheckerException):
    """Ошибка валидации изображения"""
    pass


class OCRServiceError(PriceCheckerException):
    """Ошибка удалённого OCR сервиса"""
    def __init__(self, reason: FallbackReason, message: str, details: dict = None):
        self.reason = reason
        super().__init__(message, details)


class NoPricesDetectedError(PriceCheckerException):
    """На ценнике не найдено ни одной цены"""
    pass


class ScanRejectedError(PriceCheckerException):
    """Сканирование отклонено: уже выполняется или слишком часто"""
    pass


class HistoryError(PriceCheckerException):
    """Ошибка чтения/записи истории"""
    pass


class ConfigurationError(PriceCheckerException):
    """Ошибка конфигурации"""
    pass
