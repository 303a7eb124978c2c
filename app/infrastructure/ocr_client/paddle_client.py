"""
HTTP клиент для PaddleOCR hub serving (/predict/ocr_system)
"""
import time
from typing import Any, Callable, Dict, Optional

import requests

from app.infrastructure.ocr_client.base_client import (
    BaseOCRClient,
    OCRResult,
    OCRTextBlock,
    ServiceHealth
)
from app.core.enums import FallbackReason
from app.core.exceptions import ConfigurationError, OCRServiceError
from app.core.logging import get_logger

logger = get_logger(__name__)

USER_AGENT = "BGN-EUR-Checker/1.0"


def check_service_health(
    session: requests.Session,
    health_url: str,
    health: ServiceHealth,
    timeout: float,
    now: float
) -> ServiceHealth:
    """
    Health check удалённого сервиса

    Args:
        session: HTTP сессия
        health_url: URL для проверки
        health: Текущее состояние
        timeout: Таймаут запроса, сек
        now: Текущее время (unix timestamp)

    Returns:
        Новое состояние доступности
    """
    try:
        response = session.get(health_url, timeout=timeout)
    except requests.RequestException as e:
        logger.warning("OCR service health check error", error=str(e))
        return ServiceHealth(available=False, last_checked=now)

    available = response.ok
    if available:
        logger.info("OCR service is healthy")
    else:
        logger.warning(
            "OCR service health check failed",
            status_code=response.status_code,
            was_available=health.available
        )
    return ServiceHealth(available=available, last_checked=now)


def _parse_confidence(value: Any) -> float:
    try:
        return float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0


class PaddleOCRClient(BaseOCRClient):
    """
    Клиент PaddleOCR API на удалённом сервере
    """

    def __init__(
        self,
        api_url: str,
        health_url: str,
        language: str = "en",
        confidence_threshold: float = 0.3,
        request_timeout: float = 45.0,
        health_timeout: float = 10.0,
        validate_timeout: float = 15.0,
        health_check_interval: float = 120.0,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Инициализация клиента

        Args:
            api_url: Эндпоинт распознавания
            health_url: Эндпоинт проверки доступности
            language: Язык распознавания (en лучше распознаёт цифры)
            confidence_threshold: Порог уверенности детекций на сервере
            request_timeout: Таймаут распознавания, сек
            health_timeout: Таймаут health check, сек
            validate_timeout: Таймаут ручной проверки сервиса, сек
            health_check_interval: Как часто перепроверять доступность, сек
            session: HTTP сессия (для тестов)
            clock: Источник времени (для тестов)
        """
        if not api_url:
            raise ConfigurationError("OCR API URL is not configured")

        self.api_url = api_url
        self.health_url = health_url
        self.language = language
        self.confidence_threshold = confidence_threshold
        self.request_timeout = request_timeout
        self.health_timeout = health_timeout
        self.validate_timeout = validate_timeout
        self.health_check_interval = health_check_interval
        self.session = session or requests.Session()
        self.clock = clock
        self.health = ServiceHealth()

        logger.info(
            "PaddleOCR client configured",
            api_url=api_url,
            language=language,
            request_timeout=request_timeout
        )

    def is_available(self) -> bool:
        """Доступен ли сервис; health check выполняется не чаще интервала"""
        now = self.clock()
        if self.health.is_stale(now, self.health_check_interval):
            self.health = check_service_health(
                self.session,
                self.health_url,
                self.health,
                timeout=self.health_timeout,
                now=now
            )
        return self.health.available

    def recognize(self, image_base64: str) -> OCRResult:
        """
        Распознавание текста на фото ценника

        Raises:
            OCRServiceError: С причиной отказа (FallbackReason)
        """
        image = image_base64 if image_base64.startswith("data:") else f"data:image/jpeg;base64,{image_base64}"
        payload = {
            "image": image,
            "language": self.language,
            "confidence_threshold": self.confidence_threshold
        }

        start_time = time.time()
        logger.debug("Sending image to PaddleOCR", base64_length=len(image_base64))

        try:
            response = self.session.post(
                self.api_url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "User-Agent": USER_AGENT,
                },
                timeout=self.request_timeout
            )
        except requests.Timeout as e:
            raise OCRServiceError(FallbackReason.REQUEST_TIMEOUT, "OCR request timed out", {"error": str(e)})
        except requests.ConnectionError as e:
            self._mark_unavailable()
            raise OCRServiceError(FallbackReason.NETWORK_ERROR, "Network error", {"error": str(e)})
        except requests.RequestException as e:
            raise OCRServiceError(FallbackReason.SERVICE_ERROR, "OCR request failed", {"error": str(e)})

        processing_time_ms = int((time.time() - start_time) * 1000)

        if not response.ok:
            self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError:
            logger.error("Failed to parse PaddleOCR response", preview=response.text[:500])
            raise OCRServiceError(FallbackReason.INVALID_RESPONSE, "Invalid response format")

        if not isinstance(data, dict) or data.get("status") != "success" or data.get("results") is None:
            error = data.get("error") if isinstance(data, dict) else None
            raise OCRServiceError(
                FallbackReason.PROCESSING_ERROR,
                error or "Unknown PaddleOCR error",
                {"status": data.get("status") if isinstance(data, dict) else None}
            )

        if not isinstance(data["results"], list):
            logger.error("Unexpected PaddleOCR results type", results_type=type(data["results"]).__name__)
            raise OCRServiceError(FallbackReason.INVALID_RESPONSE, "Invalid response format")

        result = self._build_result(data["results"], processing_time_ms)
        if not result.raw_text:
            raise OCRServiceError(FallbackReason.NO_TEXT_DETECTED, "No text detected")

        logger.info(
            "PaddleOCR recognition completed",
            blocks_count=len(result.text_blocks),
            average_confidence=round(result.average_confidence, 1),
            processing_time_ms=processing_time_ms,
            server_processing_time=data.get("processing_time")
        )
        return result

    def validate_service(self) -> Dict[str, Any]:
        """
        Ручная проверка сервиса для отображения пользователю

        Returns:
            {"valid": bool, "error": str?, "suggestion": str?}
        """
        try:
            response = self.session.get(self.health_url, timeout=self.validate_timeout)
        except requests.Timeout as e:
            return {
                "valid": False,
                "error": str(e),
                "suggestion": "The service request timed out. The server may be slow or unresponsive."
            }
        except requests.RequestException as e:
            return {
                "valid": False,
                "error": str(e),
                "suggestion": f"Network error occurred. Check that the OCR server is reachable at {self.api_url}"
            }

        if response.ok:
            logger.info("OCR service validation successful")
            self.health = ServiceHealth(available=True, last_checked=self.clock())
            return {"valid": True}

        suggestion = "Check if the PaddleOCR service is running."
        if response.status_code == 404:
            suggestion = f"The health endpoint may not be available. Check the service at {self.health_url}"
        elif response.status_code >= 500:
            suggestion = "The PaddleOCR service is experiencing server errors. Check the server logs."

        return {
            "valid": False,
            "error": f"HTTP {response.status_code}: {response.text}",
            "suggestion": suggestion
        }

    def get_service_status(self) -> Dict[str, Any]:
        """Состояние доступности для отображения"""
        return {
            "available": self.health.available,
            "last_checked": self.health.last_checked
        }

    def reset_service_status(self) -> None:
        """Сброс состояния: следующий запрос заново проверит сервис"""
        self.health = ServiceHealth()
        logger.info("Service status reset - will recheck on next request")

    def close(self) -> None:
        self.session.close()

    def _mark_unavailable(self) -> None:
        self.health = ServiceHealth(available=False, last_checked=self.health.last_checked)

    def _raise_for_status(self, response: requests.Response) -> None:
        status_code = response.status_code
        error_text = response.text
        logger.error("PaddleOCR API error", status_code=status_code, body=error_text[:500])

        details = {"status_code": status_code}
        if status_code >= 500:
            self._mark_unavailable()
            raise OCRServiceError(FallbackReason.SERVER_ERROR, "Server error", details)
        if status_code == 413:
            raise OCRServiceError(FallbackReason.IMAGE_TOO_LARGE, "Image too large", details)
        if status_code == 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {}
            if not isinstance(error_data, dict):
                error_data = {}
            message = error_data.get("msg") or error_data.get("message") or "Bad request format"
            raise OCRServiceError(FallbackReason.BAD_REQUEST, f"Bad request: {message}", details)
        if status_code == 404:
            raise OCRServiceError(FallbackReason.ENDPOINT_NOT_FOUND, "API endpoint not found", details)

        raise OCRServiceError(FallbackReason.SERVICE_ERROR, f"HTTP {status_code}: {error_text}", details)

    @staticmethod
    def _build_result(results: list, processing_time_ms: int) -> OCRResult:
        """Объединение детекций: непустые строки через \\n, средняя уверенность в %"""
        blocks = []
        for item in results:
            # Детекции не в формате {text, confidence, bbox} пропускаются
            if not isinstance(item, dict) or not isinstance(item.get("text"), str):
                continue
            text = item["text"].strip()
            if not text:
                continue
            blocks.append(
                OCRTextBlock(
                    text=text,
                    confidence=_parse_confidence(item.get("confidence")),
                    bbox=item.get("bbox")
                )
            )

        average_confidence = (
            sum(block.confidence for block in blocks) / len(blocks) * 100 if blocks else 0.0
        )

        return OCRResult(
            text_blocks=blocks,
            raw_text="\n".join(block.text for block in blocks),
            average_confidence=average_confidence,
            processing_time_ms=processing_time_ms
        )
