"""
Абстрактный базовый класс для клиентов удалённого OCR
"""
from abc import ABC, abstractmethod
from typing import List, Optional
from dataclasses import dataclass, field


@dataclass
class OCRTextBlock:
    """Блок распознанного текста"""
    text: str
    confidence: float
    bbox: Optional[List[float]] = None


@dataclass
class OCRResult:
    """Результат распознавания OCR"""
    text_blocks: List[OCRTextBlock] = field(default_factory=list)
    raw_text: str = ""
    average_confidence: float = 0.0  # проценты, 0-100
    processing_time_ms: int = 0


@dataclass(frozen=True)
class ServiceHealth:
    """Состояние доступности OCR сервиса"""
    available: bool = True
    last_checked: float = 0.0

    def is_stale(self, now: float, interval: float) -> bool:
        return now - self.last_checked > interval


class BaseOCRClient(ABC):
    """
    Единый интерфейс для удалённых OCR сервисов
    """

    @abstractmethod
    def recognize(self, image_base64: str) -> OCRResult:
        """
        Распознавание текста на изображении

        Args:
            image_base64: Изображение в base64

        Returns:
            OCRResult с распознанным текстом

        Raises:
            OCRServiceError: Если сервис не вернул текст
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Доступен ли сервис (при необходимости выполняет health check)
        """
        pass

    def close(self) -> None:
        """Освобождение ресурсов (опционально)"""
        pass
