"""
Scan handlers - проверка ценников по фото и по тексту
"""
from fastapi import APIRouter, Depends, HTTPException, status

from app.models.requests import ScanRequest, TextScanRequest
from app.models.responses import ScanResponse
from app.services.scan_service import ScanService
from app.api.dependencies import get_scan_service
from app.core.exceptions import HistoryError, ScanRejectedError
from app.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/scan", tags=["Scan"])


@router.post("", response_model=ScanResponse, status_code=status.HTTP_200_OK)
async def scan_price_tag(
    request: ScanRequest,
    scan_service: ScanService = Depends(get_scan_service)
) -> ScanResponse:
    """
    Проверить ценник по фото

    Распознаёт текст, находит цены в левах и евро и проверяет пересчёт
    по фиксированному курсу. Если OCR недоступен, возвращает результат
    с нулевой уверенностью и подсказкой для пользователя.

    Raises:
        HTTPException 429: Сканирование уже идёт или запрошено слишком рано
        HTTPException 500: Не удалось сохранить историю / внутренняя ошибка
    """
    try:
        logger.info("Received scan request")
        outcome = await scan_service.scan(request.image, location=request.location)
        return ScanResponse(**dict(outcome))

    except ScanRejectedError as e:
        logger.warning("Scan rejected", reason=e.message)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "Scan rejected",
                "message": e.message,
                "details": e.details
            }
        )

    except HistoryError as e:
        logger.error("Failed to save scan", error=e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "History error",
                "message": e.message,
                "details": e.details
            }
        )

    except Exception as e:
        logger.error("Unexpected error", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "message": "An unexpected error occurred"
            }
        )


@router.post("/text", response_model=ScanResponse)
def scan_text(
    request: TextScanRequest,
    scan_service: ScanService = Depends(get_scan_service)
) -> ScanResponse:
    """
    Проверить уже распознанный текст ценника

    Результат не сохраняется в историю.
    """
    outcome = scan_service.check_text(request.text, request.confidence)
    return ScanResponse(**dict(outcome))
