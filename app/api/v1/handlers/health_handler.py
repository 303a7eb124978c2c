"""
Health check handlers
"""
from fastapi import APIRouter, Depends

from app.models.responses import HealthResponse, OCRStatusResponse
from app.infrastructure.ocr_client.paddle_client import PaddleOCRClient
from app.api.dependencies import get_ocr_client
from app.config import get_settings

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", response_model=HealthResponse)
@router.get("/", response_model=HealthResponse, include_in_schema=False)
def health_check(
    ocr_client: PaddleOCRClient = Depends(get_ocr_client)
) -> HealthResponse:
    """
    Базовый health check
    Сервис запущен; доступность OCR берётся из последней проверки без нового запроса
    """
    settings = get_settings()

    return HealthResponse(
        status="healthy",
        version=settings.APP_VERSION,
        ocr_service_available=ocr_client.get_service_status()["available"]
    )


@router.get("/ocr", response_model=OCRStatusResponse)
def validate_ocr_service(
    ocr_client: PaddleOCRClient = Depends(get_ocr_client)
) -> OCRStatusResponse:
    """
    Проверить удалённый OCR сервис
    Выполняет запрос к health endpoint и возвращает подсказку при ошибке
    """
    validation = ocr_client.validate_service()
    return OCRStatusResponse(**ocr_client.get_service_status(), **validation)


@router.post("/ocr/reset", response_model=OCRStatusResponse)
def reset_ocr_status(
    ocr_client: PaddleOCRClient = Depends(get_ocr_client)
) -> OCRStatusResponse:
    """Сбросить состояние доступности; следующее сканирование перепроверит сервис"""
    ocr_client.reset_service_status()
    return OCRStatusResponse(**ocr_client.get_service_status())
