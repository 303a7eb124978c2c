import base64
import io
import sys
from pathlib import Path
from typing import List, Optional

import pytest
from PIL import Image

# Add repository root to sys.path to allow importing 'app'
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.infrastructure.ocr_client.base_client import BaseOCRClient, OCRResult, OCRTextBlock  # noqa: E402
from app.services.history_service import HistoryService  # noqa: E402


class FakeOCRClient(BaseOCRClient):
    """OCR client returning a canned result or raising a canned error."""

    def __init__(self, text: str = "", confidence: float = 90.0, available: bool = True,
                 error: Optional[Exception] = None):
        self.text = text
        self.confidence = confidence
        self.available = available
        self.error = error
        self.calls: List[str] = []

    def recognize(self, image_base64: str) -> OCRResult:
        self.calls.append(image_base64)
        if self.error is not None:
            raise self.error
        lines = [line for line in self.text.split("\n") if line]
        return OCRResult(
            text_blocks=[OCRTextBlock(text=line, confidence=self.confidence / 100) for line in lines],
            raw_text=self.text,
            average_confidence=self.confidence,
        )

    def is_available(self) -> bool:
        return self.available


def make_image_bytes(size=(64, 64), fmt="PNG") -> bytes:
    image = Image.effect_noise(size, 64).convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def image_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def image_base64(image_bytes) -> str:
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    assert len(encoded) >= 1000
    return encoded


@pytest.fixture
def history_service(tmp_path) -> HistoryService:
    return HistoryService(history_file=str(tmp_path / "history.json"), limit=100)


@pytest.fixture
def gif_bytes() -> bytes:
    return make_image_bytes(fmt="GIF")


@pytest.fixture
def ocr_client_factory():
    return FakeOCRClient
