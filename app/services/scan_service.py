"""
Главный сервис сканирования - оркестратор
"""
import asyncio
import time
from typing import Callable, Dict, Optional, Tuple

from app.infrastructure.ocr_client.base_client import BaseOCRClient
from app.services.price_extractor import PriceExtractor
from app.services.confidence_scorer import ConfidenceScorer
from app.services.price_checker import PriceChecker
from app.services.history_service import HistoryService
from app.models.domain import PriceCandidate, ScanOutcome, ScanResult
from app.core.enums import FallbackReason
from app.core.exceptions import (
    ImageValidationError,
    NoPricesDetectedError,
    OCRServiceError,
    ScanRejectedError
)
from app.core.logging import get_logger
from app.utils.image_utils import prepare_image_payload

logger = get_logger(__name__)

NO_PRICES_MESSAGE = "No prices detected in the image."

# Причина → (что случилось, что делать)
FALLBACK_MESSAGES: Dict[FallbackReason, Tuple[str, str]] = {
    FallbackReason.INVALID_IMAGE: (
        "Invalid image data.",
        "The captured image data is invalid or too small. Please try taking a new photo with better lighting."
    ),
    FallbackReason.SERVICE_UNAVAILABLE: (
        "OCR service is temporarily unavailable.",
        "The OCR server may be down. Please check that the service is running."
    ),
    FallbackReason.NETWORK_ERROR: (
        "Network connection error.",
        "Please check your internet connection and ensure the OCR server is accessible."
    ),
    FallbackReason.REQUEST_TIMEOUT: (
        "Request timed out.",
        "The OCR service is slow. Please try again with a smaller or clearer image."
    ),
    FallbackReason.IMAGE_TOO_LARGE: (
        "Image file is too large.",
        "Please try with a smaller image. The current image may exceed the server limits."
    ),
    FallbackReason.ENDPOINT_NOT_FOUND: (
        "API endpoint not found.",
        "The OCR API endpoint may be incorrect. Please verify the server configuration."
    ),
    FallbackReason.BAD_REQUEST: (
        "Bad request to OCR API.",
        "The image format or request structure may be incorrect. Please try with a different image."
    ),
    FallbackReason.SERVER_ERROR: (
        "OCR server error.",
        "The OCR service encountered an error. Please check the server logs or try again later."
    ),
    FallbackReason.NO_TEXT_DETECTED: (
        "No text found in image.",
        "Please ensure the price label is clearly visible and well-lit in the image."
    ),
}

DEFAULT_FALLBACK = (
    "OCR service temporarily unavailable.",
    "Please try again later or enter prices manually using the calculator."
)


def fallback_message(reason: FallbackReason) -> str:
    """Текст для пользователя, когда OCR не дал результата"""
    text, suggestion = FALLBACK_MESSAGES.get(reason, DEFAULT_FALLBACK)
    return (
        f"{text}\n\n{suggestion}\n\n"
        "For now, you can enter prices manually using the calculator.\n"
        "Look for numbers followed by 'лв', 'BGN', '€', or 'EUR'\n"
        "Common formats: '12.50 лв', '€6.99', 'BGN 15.00'"
    )


class ScanService:
    """
    Сервис проверки ценников
    Оркестрирует процесс: валидация → OCR → извлечение цен → оценка → проверка → история

    Одновременно выполняется не больше одного сканирования; между
    сканированиями должно пройти не меньше min_scan_interval секунд.
    """

    def __init__(
        self,
        ocr_client: BaseOCRClient,
        history_service: HistoryService,
        price_extractor: Optional[PriceExtractor] = None,
        confidence_scorer: Optional[ConfidenceScorer] = None,
        price_checker: Optional[PriceChecker] = None,
        min_scan_interval: float = 2.0,
        min_image_length: int = 1000,
        max_image_size_mb: int = 5,
        max_image_dimension: int = 1600,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ocr_client = ocr_client
        self.history_service = history_service
        self.price_extractor = price_extractor or PriceExtractor()
        self.confidence_scorer = confidence_scorer or ConfidenceScorer()
        self.price_checker = price_checker or PriceChecker()
        self.min_scan_interval = min_scan_interval
        self.min_image_length = min_image_length
        self.max_image_size_mb = max_image_size_mb
        self.max_image_dimension = max_image_dimension
        self.clock = clock

        self._lock = asyncio.Lock()
        self._last_scan_time: Optional[float] = None

        logger.info(
            "Scan Service initialized",
            min_scan_interval=min_scan_interval,
            max_image_size_mb=max_image_size_mb
        )

    def analyze(self, text: str, ocr_confidence: float) -> ScanResult:
        """
        Извлечение цен и оценка уверенности для уже распознанного текста

        Args:
            text: Распознанный текст
            ocr_confidence: Средняя уверенность OCR, %

        Returns:
            ScanResult
        """
        prices = self.price_extractor.extract(text)
        confidence = self.confidence_scorer.score(prices, text, ocr_confidence)
        return ScanResult(text=text, confidence=confidence, prices=prices)

    def check_text(self, text: str, ocr_confidence: float) -> ScanOutcome:
        """Анализ и проверка текста без сохранения в историю"""
        result = self.analyze(text, ocr_confidence)
        try:
            check = self.price_checker.check(result)
        except NoPricesDetectedError:
            return ScanOutcome(result=result, message=NO_PRICES_MESSAGE)
        return ScanOutcome(result=result, check=check)

    async def scan(self, image_base64: str, location: Optional[str] = None) -> ScanOutcome:
        """
        Полный процесс проверки ценника по фото

        Args:
            image_base64: Фото в base64
            location: Место сканирования (для истории)

        Returns:
            ScanOutcome: result, check (если цены найдены), message и fallback_reason

        Raises:
            ScanRejectedError: Сканирование уже идёт или запрошено слишком рано
            HistoryError: Не удалось сохранить результат
        """
        self._admit()

        async with self._lock:
            start_time = time.time()
            logger.info("Starting price tag scan")

            try:
                payload = prepare_image_payload(
                    image_base64,
                    min_length=self.min_image_length,
                    max_size_mb=self.max_image_size_mb,
                    max_dimension=self.max_image_dimension
                )
            except ImageValidationError as e:
                logger.warning("Image validation failed", error=e.message)
                return self._fallback(FallbackReason.INVALID_IMAGE)

            available = await asyncio.to_thread(self.ocr_client.is_available)
            if not available:
                logger.warning("OCR service is not available, using fallback")
                return self._fallback(FallbackReason.SERVICE_UNAVAILABLE)

            try:
                ocr_result = await asyncio.to_thread(self.ocr_client.recognize, payload)
            except OCRServiceError as e:
                logger.warning("OCR recognition failed", reason=e.reason.value, error=e.message)
                return self._fallback(e.reason)

            outcome = self.check_text(ocr_result.raw_text, ocr_result.average_confidence)
            if outcome.check is not None:
                outcome.check = self.history_service.add(outcome.check, location=location)

            logger.info(
                "Price tag scan completed",
                confidence=outcome.result.confidence,
                prices=outcome.result.prices.model_dump(),
                is_correct=outcome.check.is_correct if outcome.check else None,
                processing_time_ms=int((time.time() - start_time) * 1000)
            )
            return outcome

    def _admit(self) -> None:
        """Проверка, можно ли начать новое сканирование"""
        now = self.clock()
        if self._last_scan_time is not None and now - self._last_scan_time < self.min_scan_interval:
            raise ScanRejectedError(
                "Please wait at least {:g} seconds between scans".format(self.min_scan_interval),
                details={"retry_after": round(self.min_scan_interval - (now - self._last_scan_time), 2)}
            )

        if self._lock.locked():
            raise ScanRejectedError("A scan is already in progress")

        self._last_scan_time = now

    @staticmethod
    def _fallback(reason: FallbackReason) -> ScanOutcome:
        text = fallback_message(reason)
        return ScanOutcome(
            result=ScanResult(text=text, confidence=0.0, prices=PriceCandidate()),
            message=text.split("\n", 1)[0],
            fallback_reason=reason
        )
