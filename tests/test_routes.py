import pytest

from veo_studio.config import settings
from veo_studio.services import job_token
from veo_studio.services.job_token import decode_job_token


def test_health(api_client):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_command_parses_free_text(api_client):
    response = api_client.post("/api/command", json={"message": "make 9:16, 3 minutes, sunrise over mountains"})

    assert response.status_code == 200
    assert response.json() == {
        "reply": 'Okay. I set aspect to 9:16, duration to 180 seconds. Prompt: "sunrise over mountains"',
        "prompt": "sunrise over mountains",
        "durationSeconds": 180,
        "aspectRatio": "9:16",
    }


def test_chat_alias_matches_command(api_client):
    body = {"message": "landscape 250 seconds waves"}

    assert api_client.post("/api/chat", json=body).json() == api_client.post("/api/command", json=body).json()


@pytest.mark.parametrize("body", [{}, {"message": None}, {"message": ""}])
def test_command_without_text_returns_defaults(api_client, body):
    response = api_client.post("/api/command", json=body)

    assert response.status_code == 200
    data = response.json()
    assert data["prompt"] == settings.default_prompt
    assert data["durationSeconds"] == 60
    assert data["aspectRatio"] == "16:9"


def test_generate_returns_processing_token(api_client, slow_jobs):
    response = api_client.post(
        "/api/generate",
        json={"prompt": "forest in rain", "durationSeconds": 180, "aspectRatio": "9:16"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "processing"
    assert set(data) == {"id", "status"}

    payload = decode_job_token(data["id"])
    assert payload.prompt == "forest in rain"
    assert payload.duration_seconds == 180
    assert payload.aspect_ratio == "9:16"
    assert payload.provider == settings.provider_tag
    assert payload.url == settings.mock_video_url


def test_generate_normalizes_request_values(api_client):
    response = api_client.post(
        "/api/generate",
        json={"prompt": "p" * 2500, "durationSeconds": 250, "aspectRatio": "4:3"},
    )

    payload = decode_job_token(response.json()["id"])
    assert len(payload.prompt) == settings.prompt_char_limit
    assert payload.duration_seconds == 300
    assert payload.aspect_ratio == "16:9"


def test_generate_defaults_missing_duration(api_client):
    response = api_client.post("/api/generate", json={"prompt": "a fox"})

    payload = decode_job_token(response.json()["id"])
    assert payload.duration_seconds == 60
    assert payload.aspect_ratio == "16:9"


def test_generate_rejects_blank_prompt(api_client):
    response = api_client.post("/api/generate", json={"prompt": "   ", "durationSeconds": 60})

    assert response.status_code == 400
    assert response.json() == {"detail": "Prompt cannot be empty."}


def test_generate_rejects_unusable_duration(api_client):
    response = api_client.post("/api/generate", json={"prompt": "a fox", "durationSeconds": "long"})

    assert response.status_code == 400
    assert "detail" in response.json()


def test_status_moves_from_processing_to_completed(api_client, slow_jobs, monkeypatch):
    job_id = api_client.post(
        "/api/generate",
        json={"prompt": "forest in rain", "durationSeconds": 600, "aspectRatio": "9:16"},
    ).json()["id"]

    processing = api_client.get("/api/generate", params={"id": job_id})
    assert processing.status_code == 200
    assert processing.json() == {"id": job_id, "status": "processing"}

    payload = decode_job_token(job_id)
    monkeypatch.setattr(job_token, "now_ms", lambda: payload.created_at + payload.ready_after_ms)

    completed = api_client.get("/api/generate", params={"id": job_id})
    assert completed.json() == {
        "id": job_id,
        "status": "completed",
        "url": settings.mock_video_url,
        "durationSeconds": 600,
        "aspectRatio": "9:16",
        "provider": settings.provider_tag,
    }


def test_status_requires_id(api_client):
    response = api_client.get("/api/generate")

    assert response.status_code == 400
    assert response.json() == {"detail": "Missing id"}


def test_status_rejects_invalid_id(api_client):
    response = api_client.get("/api/generate", params={"id": "definitely-not-a-job"})

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid id"}


@pytest.mark.parametrize("duration, expected", [(70.5, 60), (299.9, 300), ("180", 180), ("87.5", 88)])
def test_generate_snaps_fractional_and_numeric_string_durations(api_client, duration, expected):
    response = api_client.post("/api/generate", json={"prompt": "a fox", "durationSeconds": duration})

    assert response.status_code == 200
    assert decode_job_token(response.json()["id"]).duration_seconds == expected


@pytest.mark.parametrize("duration", ["", "nan", [60]])
def test_generate_rejects_non_numeric_durations(api_client, duration):
    response = api_client.post("/api/generate", json={"prompt": "a fox", "durationSeconds": duration})

    assert response.status_code == 400
