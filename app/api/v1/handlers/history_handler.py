"""
History handlers - история проверок
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.models.domain import HistoryStats
from app.models.responses import HistoryResponse
from app.services.history_service import HistoryService
from app.api.dependencies import get_history_service
from app.core.enums import HistoryFilter
from app.core.exceptions import HistoryError
from app.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/history", tags=["History"])


def _history_error(e: HistoryError) -> HTTPException:
    logger.error("History operation failed", error=e.message)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "History error",
            "message": e.message,
            "details": e.details
        }
    )


@router.get("", response_model=HistoryResponse)
def get_history(
    filter: HistoryFilter = Query(HistoryFilter.ALL, description="Все / верные / неверные"),
    history_service: HistoryService = Depends(get_history_service)
) -> HistoryResponse:
    """История проверок, новые первыми"""
    return HistoryResponse(
        items=history_service.get_history(filter),
        stats=history_service.stats()
    )


@router.get("/stats", response_model=HistoryStats)
def get_stats(
    history_service: HistoryService = Depends(get_history_service)
) -> HistoryStats:
    """Сводка: всего, верных, неверных, доля верных"""
    return history_service.stats()


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_history(
    history_service: HistoryService = Depends(get_history_service)
) -> None:
    """Очистить историю"""
    try:
        history_service.clear()
    except HistoryError as e:
        raise _history_error(e)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_item(
    item_id: str,
    history_service: HistoryService = Depends(get_history_service)
) -> None:
    """Удалить запись из истории"""
    try:
        removed = history_service.remove(item_id)
    except HistoryError as e:
        raise _history_error(e)

    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "Not found",
                "message": f"History item {item_id} not found"
            }
        )
