"""
HTTP-level tests for the FastAPI app, backed by in-memory stores.
"""
import datetime
import time
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

import main
from insight_cache import get_insight_cache
from models import DeliveryContext, SenderProfile
from storage import build_stores, set_stores

SENDER = "+919800000001"


@pytest.fixture
def stores(monkeypatch):
    monkeypatch.setenv("ENABLE_AI_INSIGHTS", "false")
    monkeypatch.delenv("EMERGENCY_ALERT_LAMBDA_ARN", raising=False)
    stores = build_stores("memory")
    stores.profiles.add_profile(SenderProfile(sender_id=SENDER, user_id="user-1"))
    set_stores(stores)
    get_insight_cache().clear()
    yield stores
    set_stores(None)


@pytest.fixture
def client(stores):
    return TestClient(main.app)


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers


class TestLifecycle:

    @patch('main.shutdown_background')
    def test_shutdown_drains_background_pool(self, mock_shutdown, stores):
        with TestClient(main.app) as client:
            client.get("/health")
            mock_shutdown.assert_not_called()

        mock_shutdown.assert_called_once_with(wait=True)


class TestSmsInbound:

    def test_red_triage(self, client, stores):
        response = client.post("/sms/inbound", json={"sender_id": SENDER, "raw_text": "bleeding and fever"})

        assert response.status_code == 200
        body = response.json()
        assert body["risk_tier"] == "red"
        assert body["matched_tags"] == ["bleeding", "fever"]
        assert "bleeding" in body["message"]
        assert len(stores.checkins.records) == 1

    def test_help(self, client):
        body = client.post("/sms/inbound", json={"sender_id": SENDER, "raw_text": "HELP"}).json()
        assert body["command"] == "help"
        assert body["risk_tier"] is None

    def test_new_sender_onboarding(self, client):
        body = client.post("/sms/inbound", json={"sender_id": "+910000000000", "raw_text": "hi"}).json()
        assert body["onboarding"] is True

    def test_missing_text_is_422(self, client):
        response = client.post("/sms/inbound", json={"sender_id": SENDER})
        assert response.status_code == 422

    def test_blank_sender_is_400(self, client):
        response = client.post("/sms/inbound", json={"sender_id": "  ", "raw_text": "fever"})
        assert response.status_code == 400

    @patch('main.interpret_inbound_message')
    def test_unexpected_error_returns_generic_reply(self, mock_interpret, client):
        mock_interpret.side_effect = RuntimeError("boom")

        response = client.post("/sms/inbound", json={"sender_id": SENDER, "raw_text": "fever"})

        assert response.status_code == 200
        assert "error processing your message" in response.json()["message"]


class TestRecovery:

    def test_snapshot_without_data(self, client):
        response = client.post("/recovery/snapshot", json={"user_id": "user-1"})

        assert response.status_code == 200
        body = response.json()
        assert body["delivery_type"] == "vaginal"
        assert [p["title"] for p in body["predictions"]] == ["Start Tracking"]
        assert [t["title"] for t in body["tips"]] == ["Start Health Tracking"]
        assert body["todays_focus"]["title"] == "Initial Recovery"

    def test_metrics_then_snapshot(self, client, stores):
        today = datetime.date.today()
        stores.profiles.set_delivery_context(
            "user-1", DeliveryContext(delivery_type="cesarean", delivery_date=today - datetime.timedelta(days=10))
        )
        response = client.post("/recovery/metrics", json={
            "user_id": "user-1",
            "sample": {"date": today.isoformat(), "energy_level": 2, "mood_score": 6, "sleep_hours": 7},
        })
        assert response.status_code == 200

        body = client.post("/recovery/snapshot", json={"user_id": "user-1"}).json()

        assert body["days_since_delivery"] == 10
        assert body["phase"] == "Early Recovery"
        assert body["todays_focus"]["title"] == "Energy Support"
        assert "C-section Care" in [t["title"] for t in body["tips"]]

    def test_metric_out_of_range_is_422(self, client):
        response = client.post("/recovery/metrics", json={
            "user_id": "user-1",
            "sample": {"date": "2024-05-01", "energy_level": 11, "mood_score": 6, "sleep_hours": 7},
        })
        assert response.status_code == 422

    def test_insights_appear_on_later_snapshot(self, client):
        client.post("/recovery/snapshot", json={"user_id": "user-1"})

        # enrichment runs on the background pool
        cache = get_insight_cache()
        deadline = time.time() + 5
        while not cache.get("user-1") and time.time() < deadline:
            time.sleep(0.05)

        body = client.post("/recovery/snapshot", json={"user_id": "user-1"}).json()
        assert [i["title"] for i in body["insights"]] == ["Recovery Progress"]
