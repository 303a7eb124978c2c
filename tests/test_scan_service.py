"""Tests for the scan orchestration service."""

import pytest

from app.core.enums import FallbackReason
from app.core.exceptions import OCRServiceError, ScanRejectedError
from app.models.domain import ScanOutcome
from app.services.scan_service import NO_PRICES_MESSAGE, ScanService, fallback_message


class Clock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def make_service(history_service, ocr_client_factory, clock):
    def _make(**client_kwargs) -> ScanService:
        return ScanService(
            ocr_client=ocr_client_factory(**client_kwargs),
            history_service=history_service,
            min_scan_interval=2.0,
            clock=clock,
        )
    return _make


class TestAnalyze:
    """Tests for text-only analysis."""

    def test_analyze(self, make_service) -> None:
        result = make_service().analyze("12.50 лв / 6.39 €", 40.0)

        assert result.prices.bgn == 12.50
        assert result.prices.eur == 6.39
        assert result.confidence == 76

    def test_analyze_idempotent(self, make_service) -> None:
        service = make_service()

        assert service.analyze("15,00 лв", 70.0) == service.analyze("15,00 лв", 70.0)

    def test_check_text_without_prices(self, make_service, history_service) -> None:
        outcome = make_service().check_text("Кашкавал", 80.0)

        assert isinstance(outcome, ScanOutcome)
        assert outcome.check is None
        assert outcome.message == NO_PRICES_MESSAGE
        assert history_service.get_history() == []


class TestScan:
    """Tests for ScanService.scan."""

    @pytest.mark.asyncio
    async def test_scan_saves_check(self, make_service, history_service, image_base64: str) -> None:
        service = make_service(text="Кашкавал\n12.50 лв\n6.39 €", confidence=88.0)

        outcome = await service.scan(image_base64, location="Sofia")

        assert outcome.fallback_reason is None
        assert outcome.result.prices.bgn == 12.50
        assert outcome.check.is_correct is True
        assert outcome.check.location == "Sofia"
        assert service.ocr_client.calls == [image_base64]
        assert [item.id for item in history_service.get_history()] == [outcome.check.id]

    @pytest.mark.asyncio
    async def test_scan_wrong_conversion(self, make_service, image_base64: str) -> None:
        service = make_service(text="12.50 лв\n6.45 €")

        outcome = await service.scan(image_base64)

        assert outcome.check.is_correct is False
        assert outcome.check.expected_eur == 6.39

    @pytest.mark.asyncio
    async def test_scan_without_prices(self, make_service, history_service, image_base64: str) -> None:
        service = make_service(text="Кашкавал Витоша")

        outcome = await service.scan(image_base64)

        assert outcome.check is None
        assert outcome.message == NO_PRICES_MESSAGE
        assert history_service.get_history() == []

    @pytest.mark.asyncio
    async def test_invalid_image(self, make_service) -> None:
        service = make_service(text="12.50 лв")

        outcome = await service.scan("aGVsbG8=" * 20)

        assert outcome.fallback_reason == FallbackReason.INVALID_IMAGE
        assert outcome.result.confidence == 0
        assert outcome.result.prices.is_empty
        assert service.ocr_client.calls == []

    @pytest.mark.asyncio
    async def test_service_unavailable(self, make_service, image_base64: str) -> None:
        service = make_service(text="12.50 лв", available=False)

        outcome = await service.scan(image_base64)

        assert outcome.fallback_reason == FallbackReason.SERVICE_UNAVAILABLE
        assert outcome.message == "OCR service is temporarily unavailable."
        assert service.ocr_client.calls == []

    @pytest.mark.asyncio
    async def test_ocr_error(self, make_service, image_base64: str) -> None:
        error = OCRServiceError(FallbackReason.REQUEST_TIMEOUT, "OCR request timed out")
        service = make_service(error=error)

        outcome = await service.scan(image_base64)

        assert outcome.fallback_reason == FallbackReason.REQUEST_TIMEOUT
        assert outcome.result.text == fallback_message(FallbackReason.REQUEST_TIMEOUT)
        assert outcome.check is None

    @pytest.mark.asyncio
    async def test_min_interval(self, make_service, clock: Clock, image_base64: str) -> None:
        service = make_service(text="12.50 лв\n6.39 €")
        await service.scan(image_base64)

        clock.now += 1.0
        with pytest.raises(ScanRejectedError) as exc_info:
            await service.scan(image_base64)
        assert exc_info.value.details["retry_after"] == 1.0

        clock.now += 1.5
        outcome = await service.scan(image_base64)
        assert outcome.check is not None

    @pytest.mark.asyncio
    async def test_rejects_concurrent_scan(self, make_service, image_base64: str) -> None:
        service = make_service(text="12.50 лв\n6.39 €")

        async with service._lock:
            with pytest.raises(ScanRejectedError):
                await service.scan(image_base64)


class TestFallbackMessage:
    """Tests for user-facing fallback text."""

    def test_known_reason(self) -> None:
        message = fallback_message(FallbackReason.NO_TEXT_DETECTED)

        assert message.startswith("No text found in image.")
        assert "'12.50 лв'" in message

    def test_unknown_reason_uses_default(self) -> None:
        assert fallback_message(FallbackReason.SERVICE_ERROR).startswith("OCR service temporarily unavailable.")
