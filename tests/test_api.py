"""
Tests for the HTTP endpoints (gateway and audio devices replaced by fakes)
"""
import io
import json
import os
import sys
import time

import pytest
from fastapi.testclient import TestClient
from PIL import Image

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.dirname(__file__))

from agrinexus.config import SETTINGS_KEY
from agrinexus.dependencies import Nexus, get_nexus
from agrinexus.main import app
from agrinexus.services.storage import FileBlobStore
from fakes import FakeGateway, InstantPlayer, RecordingVoice


def png_bytes() -> bytes:
    out = io.BytesIO()
    Image.new("RGB", (32, 32), (40, 160, 60)).save(out, format="PNG")
    return out.getvalue()


@pytest.fixture
def nexus(tmp_path):
    return Nexus(
        FakeGateway(audio=bytes([0x00, 0x40])),
        FileBlobStore(str(tmp_path / "storage")),
        player=InstantPlayer(),
        fallback_voice=RecordingVoice(),
    )


@pytest.fixture
def client(nexus):
    app.dependency_overrides[get_nexus] = lambda: nexus
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["services"]["storage"] == "FileBlobStore"


def test_agent_state_starts_idle(client):
    state = client.get("/api/agent/state").json()
    assert state["isThinking"] is False
    assert state["currentTask"] == "Awaiting User Intent"
    assert state["isSpeaking"] is False


# =============================================================================
# Scan
# =============================================================================
def test_scan_returns_camel_case_diagnosis(client, nexus):
    response = client.post("/api/scan", files={"image": ("leaf.png", png_bytes(), "image/png")})

    assert response.status_code == 200
    body = response.json()
    assert body["disease"] == "Late Blight"
    assert "climateImpact" in body
    assert "sustainabilityScore" in body
    # PNG uploads reach the gateway as JPEG
    assert nexus.gateway.images[0][:2] == b"\xff\xd8"

    current = client.get("/api/scan").json()
    assert current["result"]["disease"] == "Late Blight"
    assert client.delete("/api/scan").status_code == 200
    assert client.get("/api/scan").json()["result"] is None


def test_scan_rejects_unreadable_image(client, nexus):
    response = client.post("/api/scan", files={"image": ("leaf.jpg", b"not an image", "image/jpeg")})
    assert response.status_code == 400
    assert nexus.gateway.images == []


def test_scan_rejects_oversized_image(client, nexus, monkeypatch):
    # 32x32 is over twice this pixel limit, which Pillow treats as a decompression bomb
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    response = client.post("/api/scan", files={"image": ("leaf.png", png_bytes(), "image/png")})
    assert response.status_code == 400
    assert nexus.gateway.images == []


def test_scan_service_failure_is_reported(client, nexus):
    nexus.gateway.fail = True
    response = client.post("/api/scan", files={"image": ("leaf.png", png_bytes(), "image/png")})
    assert response.status_code == 502
    assert response.json()["detail"] == "Core Sync Error"
    assert client.get("/api/agent/state").json()["isThinking"] is False


# =============================================================================
# Chat
# =============================================================================
def test_chat_round_trip(client):
    response = client.post("/api/chat/farm-1", json={"message": "When should I plant maize?"})
    assert response.status_code == 200
    body = response.json()
    assert body["reply"] == {"role": "model", "text": "Use neem oil."}
    assert [m["role"] for m in body["messages"]] == ["user", "model"]

    transcript = client.get("/api/chat/farm-1").json()["messages"]
    assert len(transcript) == 2
    assert client.get("/api/chat/other").json()["messages"] == []


def test_chat_rejects_blank_message(client, nexus):
    assert client.post("/api/chat/farm-1", json={"message": "  "}).status_code == 400
    assert nexus.find_session("farm-1") is None


def test_reading_unknown_transcripts_creates_no_sessions(client, nexus):
    for i in range(50):
        assert client.get(f"/api/chat/s{i}").json() == {"messages": []}
    assert all(nexus.find_session(f"s{i}") is None for i in range(50))


def test_idle_chat_sessions_are_evicted_least_recently_used_first(tmp_path):
    nexus = Nexus(FakeGateway(), FileBlobStore(str(tmp_path / "storage")),
                  player=InstantPlayer(), fallback_voice=RecordingVoice(), max_chat_sessions=2)
    first = nexus.chat_session("a")
    nexus.chat_session("b")
    # Touching "a" makes "b" the oldest
    assert nexus.chat_session("a") is first
    nexus.chat_session("c")

    assert nexus.find_session("a") is first
    assert nexus.find_session("b") is None
    assert nexus.find_session("c") is not None


def test_busy_chat_sessions_are_not_evicted(tmp_path):
    nexus = Nexus(FakeGateway(), FileBlobStore(str(tmp_path / "storage")),
                  player=InstantPlayer(), fallback_voice=RecordingVoice(), max_chat_sessions=1)
    busy = nexus.chat_session("busy")
    busy.loading = True
    nexus.chat_session("new")

    assert nexus.find_session("busy") is busy
    assert nexus.find_session("new") is not None


def test_chat_failure_is_reported(client, nexus):
    nexus.gateway.fail = True
    response = client.post("/api/chat/farm-1", json={"message": "hello"})
    assert response.status_code == 502


# =============================================================================
# Identity / market
# =============================================================================
def test_identity_uses_saved_settings(client, nexus):
    client.put("/api/settings", json={"location": "Bandipur, Tanahun"})
    response = client.post("/api/identity")
    assert response.status_code == 200
    body = response.json()
    assert body["verifiedLocation"] == "Bandipur, Tanahun"
    assert set(body["impactMetrics"]) == {"waterSaved", "chemicalReduction", "yieldBoost"}


def test_market_intelligence(client, nexus):
    trends = [{"name": "Nov", "price": 280, "prediction": 290, "sentiment": "Stable"}]
    response = client.post("/api/market/Maize/intelligence", json={"trends": trends})
    assert response.status_code == 200
    assert response.json() == {"crop": "Maize", "commentary": "Prices are rising."}
    assert nexus.gateway.market_data[0]["crop"] == "Maize"


# =============================================================================
# Settings / alerts
# =============================================================================
def test_settings_are_saved_on_put(client, nexus):
    assert client.get("/api/settings").json()["location"] == "Lumle, Kaski"

    response = client.put("/api/settings", json={"location": "Pokhara", "altitude": 900, "language": "ne"})
    assert response.status_code == 200
    assert client.get("/api/settings").json()["altitude"] == 900
    assert json.loads(nexus.store.get(SETTINGS_KEY))["language"] == "ne"


def test_settings_validation(client):
    assert client.put("/api/settings", json={"language": "fr"}).status_code == 422


def test_alerts_replace_per_crop(client):
    client.put("/api/alerts/Rice", json={"targetPrice": 450})
    client.put("/api/alerts/Rice", json={"targetPrice": 500, "condition": "below"})

    alerts = client.get("/api/alerts").json()
    assert len(alerts) == 1
    assert alerts[0]["targetPrice"] == 500
    assert alerts[0]["condition"] == "below"

    assert client.delete("/api/alerts/Rice").status_code == 200
    assert client.get("/api/alerts").json() == []
    assert client.delete("/api/alerts/Rice").status_code == 404


def test_alert_price_must_be_positive(client):
    assert client.put("/api/alerts/Rice", json={"targetPrice": 0}).status_code == 422


# =============================================================================
# Speech
# =============================================================================
def test_speak_is_accepted(client, nexus):
    response = client.post("/api/speak", json={"text": "Satellite data shows optimal soil moisture."})
    assert response.status_code == 200
    assert response.json()["accepted"] is True

    # Playback runs in the background on the app loop
    for _ in range(200):
        if not nexus.speaker.is_speaking:
            break
        time.sleep(0.01)
    assert nexus.speaker.is_speaking is False
    assert nexus.gateway.speech_texts == ["Satellite data shows optimal soil moisture."]
    assert len(nexus.speaker.player.calls) == 1


def test_speak_rejects_blank_text(client):
    assert client.post("/api/speak", json={"text": ""}).status_code == 400
