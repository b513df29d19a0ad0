"""Integration tests for REST API endpoints with real in-memory SQLite."""

import pytest

from truinsights.core.exceptions import TranscriptionFailed
from truinsights.core.mocks import MOCK_INSIGHTS, MOCK_TRANSCRIPT

# ---------------------------------------------------------------------------
# Health and mock endpoints
# ---------------------------------------------------------------------------


async def test_health(async_client):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_transcribe_mock_golden_payload(async_client):
    resp = await async_client.post("/api/v1/transcribe-mock")
    assert resp.status_code == 200
    assert resp.json() == {"transcript": MOCK_TRANSCRIPT}


async def test_extract_insights_mock_golden_payload(async_client):
    resp = await async_client.post("/api/v1/extract-insights-mock")
    assert resp.status_code == 200
    assert resp.json() == {
        "extracted": {
            "energy_level": 8,
            "difficulty_rating": 7,
            "mood": "energized",
            "highlights": ["Great core work", "Felt strong", "Good energy"],
            "challenges": ["Hip flexors tight", "Balance poses were tough"],
            "body_feelings": ["Core engaged", "Hip flexors tight", "Upper body strong"],
            "instructor_feedback": "Amazing coaching and energy",
            "tags": ["core-focused", "flexibility-challenge", "high-energy"],
        }
    }


# ---------------------------------------------------------------------------
# Auth gate
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("get", "/api/v1/journals"),
        ("get", "/api/v1/journals/stats"),
        ("get", "/api/v1/journals/abc"),
        ("post", "/api/v1/journals/abc/process"),
        ("get", "/api/v1/auth/session"),
        ("post", "/api/v1/extract-insights"),
    ],
)
async def test_protected_routes_require_session(async_client, method, path):
    resp = await getattr(async_client, method)(path)
    assert resp.status_code == 401
    body = resp.json()
    assert body["code"] == "AUTH_REQUIRED"
    assert "timestamp" in body


async def test_session_round_trip(async_client, auth_headers):
    resp = await async_client.get("/api/v1/auth/session", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["email"] == "runner@example.com"

    resp = await async_client.post("/api/v1/auth/sign-out", headers=auth_headers)
    assert resp.status_code == 204

    resp = await async_client.get("/api/v1/auth/session", headers=auth_headers)
    assert resp.status_code == 401


async def test_wrong_password(async_client, auth_headers):
    resp = await async_client.post(
        "/api/v1/auth/sign-in", json={"email": "runner@example.com", "password": "nope"}
    )
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# Transcribe / extract
# ---------------------------------------------------------------------------


async def test_transcribe(async_client, auth_headers, wav_bytes):
    resp = await async_client.post(
        "/api/v1/transcribe",
        headers=auth_headers,
        files={"audio": ("clip.wav", wav_bytes, "audio/wav")},
    )
    assert resp.status_code == 200
    assert resp.json()["transcript"] == MOCK_TRANSCRIPT


async def test_transcribe_missing_audio(async_client, auth_headers):
    resp = await async_client.post("/api/v1/transcribe", headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No audio file provided"


async def test_transcribe_provider_failure(async_client, auth_headers, services, monkeypatch):
    async def fail(audio, mime_type, **kwargs):
        raise TranscriptionFailed("Invalid API Key")

    monkeypatch.setattr(services.stt, "transcribe", fail)
    resp = await async_client.post(
        "/api/v1/transcribe",
        headers=auth_headers,
        files={"audio": ("clip.webm", b"data", "audio/webm")},
    )
    assert resp.status_code == 502
    assert resp.json() == {
        "detail": "Invalid API Key",
        "code": "TRANSCRIPTION_FAILED",
        "timestamp": resp.json()["timestamp"],
    }


async def test_extract_insights(async_client, auth_headers):
    resp = await async_client.post(
        "/api/v1/extract-insights", headers=auth_headers, json={"transcript": MOCK_TRANSCRIPT}
    )
    assert resp.status_code == 200
    assert resp.json()["extracted"] == MOCK_INSIGHTS.model_dump()


@pytest.mark.parametrize("body", [{}, {"transcript": ""}, {"transcript": "   "}])
async def test_extract_insights_missing_transcript(async_client, auth_headers, body):
    resp = await async_client.post("/api/v1/extract-insights", headers=auth_headers, json=body)
    assert resp.status_code == 400
    assert resp.json()["code"] == "MISSING_INPUT"


# ---------------------------------------------------------------------------
# Journals
# ---------------------------------------------------------------------------


async def test_journal_not_found(async_client, auth_headers):
    resp = await async_client.get("/api/v1/journals/does-not-exist", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["code"] == "JOURNAL_NOT_FOUND"


async def test_submit_without_audio(async_client, auth_headers):
    resp = await async_client.post(
        "/api/v1/journals", headers=auth_headers, data={"duration_seconds": "3"}
    )
    assert resp.status_code == 400


async def test_negative_duration_rejected(async_client, auth_headers, wav_bytes):
    resp = await async_client.post(
        "/api/v1/journals",
        headers=auth_headers,
        files={"audio": ("clip.wav", wav_bytes, "audio/wav")},
        data={"duration_seconds": "-1"},
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == "VALIDATION_ERROR"
