"""
FastAPI Dependencies для Dependency Injection
"""
from functools import lru_cache

from app.config import get_settings
from app.infrastructure.ocr_client.paddle_client import PaddleOCRClient
from app.services.history_service import HistoryService
from app.services.scan_service import ScanService


@lru_cache()
def get_ocr_client() -> PaddleOCRClient:
    """
    Получить инстанс клиента PaddleOCR (singleton)
    Состояние доступности сервиса живёт в этом инстансе
    """
    settings = get_settings()

    return PaddleOCRClient(
        api_url=settings.OCR_API_URL,
        health_url=settings.OCR_HEALTH_URL,
        language=settings.OCR_LANGUAGE,
        confidence_threshold=settings.OCR_CONFIDENCE_THRESHOLD,
        request_timeout=settings.OCR_REQUEST_TIMEOUT,
        health_timeout=settings.OCR_HEALTH_TIMEOUT,
        validate_timeout=settings.OCR_VALIDATE_TIMEOUT,
        health_check_interval=settings.OCR_HEALTH_CHECK_INTERVAL
    )


@lru_cache()
def get_history_service() -> HistoryService:
    """Получить инстанс HistoryService (singleton)"""
    settings = get_settings()
    return HistoryService(
        history_file=settings.HISTORY_FILE,
        limit=settings.HISTORY_LIMIT
    )


@lru_cache()
def get_scan_service() -> ScanService:
    """
    Получить инстанс Scan Service (singleton)
    Один инстанс нужен, чтобы сериализовать сканирования и соблюдать интервал между ними
    """
    settings = get_settings()

    return ScanService(
        ocr_client=get_ocr_client(),
        history_service=get_history_service(),
        min_scan_interval=settings.MIN_SCAN_INTERVAL,
        min_image_length=settings.MIN_IMAGE_BASE64_LENGTH,
        max_image_size_mb=settings.MAX_IMAGE_SIZE_MB,
        max_image_dimension=settings.MAX_IMAGE_DIMENSION
    )
