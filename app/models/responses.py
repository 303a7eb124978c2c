"""
Pydantic модели для ответов API
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.domain import HistoryStats, ScanHistoryItem, ScanOutcome
from app.core.enums import Currency


class ScanResponse(ScanOutcome):
    """Ответ с результатом проверки ценника"""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "result": {
                    "text": "Кашкавал\n12.50 лв\n6.39 €",
                    "confidence": 95.0,
                    "prices": {"bgn": 12.5, "eur": 6.39}
                },
                "check": {
                    "bgn_price": 12.5,
                    "eur_price": 6.39,
                    "expected_eur": 6.39,
                    "is_correct": True,
                    "confidence": 95.0,
                    "timestamp": "2025-09-30T14:35:00"
                }
            }
        }
    )


class ConversionResponse(BaseModel):
    """Ответ калькулятора"""
    amount: float = Field(..., description="Исходная сумма")
    source: Currency = Field(..., description="Исходная валюта")
    converted: float = Field(..., description="Сумма в другой валюте")
    target: Currency = Field(..., description="Валюта результата")
    rate: float = Field(..., description="Фиксированный курс BGN за 1 EUR")


class HistoryResponse(BaseModel):
    """История проверок"""
    items: List[ScanHistoryItem] = Field(default_factory=list)
    stats: HistoryStats = Field(..., description="Сводка по всей истории")


class OCRStatusResponse(BaseModel):
    """Состояние удалённого OCR сервиса"""
    available: bool = Field(..., description="Сервис доступен")
    last_checked: float = Field(..., description="Время последней проверки (unix timestamp)")
    valid: Optional[bool] = Field(None, description="Результат ручной проверки")
    error: Optional[str] = Field(None, description="Ошибка проверки")
    suggestion: Optional[str] = Field(None, description="Что проверить")


class HealthResponse(BaseModel):
    """Ответ health check"""
    status: str = Field(..., description="Статус сервиса")
    version: str = Field(..., description="Версия приложения")
    ocr_service_available: bool = Field(..., description="Доступность OCR сервиса")
