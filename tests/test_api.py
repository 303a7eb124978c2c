"""Tests for the HTTP API."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

import app.main as main_module
from app.api.dependencies import get_history_service, get_ocr_client, get_scan_service
from app.infrastructure.ocr_client.paddle_client import PaddleOCRClient
from app.main import app
from app.models.domain import PriceCheck
from app.services.scan_service import ScanService


@pytest.fixture
def ocr_session() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(history_service, ocr_client_factory, ocr_session):
    scan_service = ScanService(
        ocr_client=ocr_client_factory(text="Кашкавал\n12.50 лв\n6.39 €", confidence=85.0),
        history_service=history_service,
        min_scan_interval=60.0,
    )
    paddle_client = PaddleOCRClient(
        api_url="http://ocr.local/predict/ocr_system",
        health_url="http://ocr.local/",
        session=ocr_session,
        clock=lambda: 500.0,
    )

    app.dependency_overrides[get_scan_service] = lambda: scan_service
    app.dependency_overrides[get_history_service] = lambda: history_service
    app.dependency_overrides[get_ocr_client] = lambda: paddle_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def _saved_check(history_service, is_correct: bool = True):
    return history_service.add(
        PriceCheck(bgn_price=12.50, eur_price=6.39, expected_eur=6.39, is_correct=is_correct)
    )


def test_ping(client: TestClient) -> None:
    assert client.get("/ping").json() == {"status": "pong"}


def test_scan(client: TestClient, image_base64: str) -> None:
    response = client.post("/api/v1/scan", json={"image": image_base64, "location": "Plovdiv"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["result"]["prices"] == {"bgn": 12.5, "eur": 6.39}
    assert payload["check"]["is_correct"] is True
    assert payload["check"]["location"] == "Plovdiv"
    assert payload["check"]["id"]
    assert payload["fallback_reason"] is None


def test_scan_too_soon(client: TestClient, image_base64: str) -> None:
    assert client.post("/api/v1/scan", json={"image": image_base64}).status_code == 200

    response = client.post("/api/v1/scan", json={"image": image_base64})

    assert response.status_code == 429
    assert response.json()["detail"]["error"] == "Scan rejected"


def test_scan_rejects_short_payload(client: TestClient) -> None:
    assert client.post("/api/v1/scan", json={"image": "abc"}).status_code == 422


def test_scan_text(client: TestClient, history_service) -> None:
    response = client.post("/api/v1/scan/text", json={"text": "15,00 лв", "confidence": 60})

    assert response.status_code == 200
    payload = response.json()
    assert payload["result"]["prices"] == {"bgn": 15.0, "eur": 7.67}
    # 60 base + 20 for the derived exact pair + 3 for "лв"
    assert payload["result"]["confidence"] == 83
    assert payload["check"]["is_correct"] is True
    assert history_service.get_history() == []


def test_scan_text_without_prices(client: TestClient) -> None:
    payload = client.post("/api/v1/scan/text", json={"text": "ab"}).json()

    assert payload["result"]["prices"] == {"bgn": None, "eur": None}
    assert payload["result"]["confidence"] == 15
    assert payload["check"] is None
    assert payload["message"] == "No prices detected in the image."


@pytest.mark.parametrize(
    "params, converted, target",
    [
        ({"amount": 10, "source": "eur"}, 19.56, "bgn"),
        ({"amount": 100}, 51.13, "eur"),
    ],
)
def test_convert(client: TestClient, params, converted, target) -> None:
    response = client.get("/api/v1/convert", params=params)

    assert response.status_code == 200
    assert response.json()["converted"] == converted
    assert response.json()["target"] == target
    assert response.json()["rate"] == 1.95583


def test_convert_rejects_negative(client: TestClient) -> None:
    assert client.get("/api/v1/convert", params={"amount": -1}).status_code == 422


def test_history(client: TestClient, history_service) -> None:
    _saved_check(history_service, is_correct=True)
    _saved_check(history_service, is_correct=False)

    payload = client.get("/api/v1/history", params={"filter": "incorrect"}).json()

    assert len(payload["items"]) == 1
    assert payload["items"][0]["is_correct"] is False
    assert payload["stats"] == {"total": 2, "correct": 1, "incorrect": 1, "accuracy_percent": 50}
    assert client.get("/api/v1/history/stats").json()["total"] == 2


def test_history_remove(client: TestClient, history_service) -> None:
    item = _saved_check(history_service)

    assert client.delete(f"/api/v1/history/{item.id}").status_code == 204
    assert client.delete(f"/api/v1/history/{item.id}").status_code == 404
    assert history_service.get_history() == []


def test_history_clear(client: TestClient, history_service) -> None:
    _saved_check(history_service)

    assert client.delete("/api/v1/history").status_code == 204
    assert client.get("/api/v1/history").json()["items"] == []


def test_health(client: TestClient, ocr_session: MagicMock) -> None:
    payload = client.get("/api/v1/health").json()

    assert payload["status"] == "healthy"
    assert payload["ocr_service_available"] is True
    ocr_session.get.assert_not_called()


def test_validate_ocr(client: TestClient, ocr_session: MagicMock) -> None:
    ocr_session.get.return_value = MagicMock(ok=False, status_code=503, text="busy")

    payload = client.get("/api/v1/health/ocr").json()

    assert payload["valid"] is False
    assert payload["error"] == "HTTP 503: busy"
    assert "server errors" in payload["suggestion"]


def test_reset_ocr_status(client: TestClient) -> None:
    payload = client.post("/api/v1/health/ocr/reset").json()

    assert payload["available"] is True
    assert payload["last_checked"] == 0.0


def test_lifespan_checks_ocr_and_closes_client(monkeypatch, history_service) -> None:
    ocr_client = MagicMock()
    ocr_client.is_available.return_value = False
    monkeypatch.setattr(main_module, "get_ocr_client", lambda: ocr_client)
    monkeypatch.setattr(main_module, "get_history_service", lambda: history_service)

    with TestClient(app) as client:
        assert client.get("/ping").status_code == 200
        ocr_client.close.assert_not_called()

    ocr_client.is_available.assert_called_once_with()
    ocr_client.close.assert_called_once_with()
