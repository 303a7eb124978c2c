"""
Доменные модели - бизнес-сущности
"""
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field

from app.core.enums import FallbackReason


class PriceCandidate(BaseModel):
    """Предполагаемая пара цен с ценника"""
    bgn: Optional[float] = Field(None, description="Цена в левах")
    eur: Optional[float] = Field(None, description="Цена в евро")

    @property
    def is_empty(self) -> bool:
        return self.bgn is None and self.eur is None


class ScanResult(BaseModel):
    """Результат распознавания одного ценника"""
    text: str = Field(..., description="Распознанный текст")
    confidence: float = Field(..., ge=0.0, le=100.0, description="Уверенность, %")
    prices: PriceCandidate = Field(default_factory=PriceCandidate, description="Найденные цены")


class PriceCheck(BaseModel):
    """Проверка пересчёта BGN → EUR"""
    bgn_price: float = Field(..., description="Цена в левах")
    eur_price: float = Field(..., description="Цена в евро")
    expected_eur: float = Field(..., description="Цена в евро по официальному курсу")
    is_correct: bool = Field(..., description="Пересчёт выполнен верно")
    confidence: Optional[float] = Field(None, description="Уверенность распознавания, %")
    raw_text: Optional[str] = Field(None, description="Исходный распознанный текст")
    timestamp: datetime = Field(default_factory=datetime.now, description="Время проверки")


class ScanHistoryItem(PriceCheck):
    """Запись в истории проверок"""
    id: str = Field(..., description="Идентификатор записи")
    location: Optional[str] = Field(None, description="Место сканирования")


class HistoryStats(BaseModel):
    """Сводка по истории проверок"""
    total: int = Field(0, description="Всего проверок")
    correct: int = Field(0, description="Верных пересчётов")
    incorrect: int = Field(0, description="Неверных пересчётов")
    accuracy_percent: int = Field(0, description="Доля верных, %")


class ScanOutcome(BaseModel):
    """Итог одной проверки: результат OCR, проверка пересчёта и причина отказа"""
    result: ScanResult = Field(..., description="Распознанный текст, уверенность и цены")
    check: Optional[Union[ScanHistoryItem, PriceCheck]] = Field(
        None,
        description="Проверка пересчёта, если цены найдены (с id записи, если сохранена)"
    )
    message: Optional[str] = Field(None, description="Сообщение для пользователя")
    fallback_reason: Optional[FallbackReason] = Field(None, description="Причина, если OCR не дал результата")
