"""HTTP facade: validation, provider pass-through, and error envelopes."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.realtime.session_store import compliment_key
from utils.settings import GreeterSettings


@pytest.fixture
def unconfigured_client():
    with TestClient(create_app(GreeterSettings())) as test_client:
        yield test_client


def test_test_endpoint_reports_timestamp(client):
    resp = client.get("/test")
    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Test function is working!"
    assert datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))


def test_health_reports_configured_resources(client, unconfigured_client):
    assert client.get("/health").json() == {"ok": True, "store_initialized": True, "openai_available": True}
    assert unconfigured_client.get("/health").json() == {
        "ok": True,
        "store_initialized": False,
        "openai_available": False,
    }


def test_vision_stores_compliment(client, store, fake_openai, image_b64):
    resp = client.post("/vision", content=image_b64, headers={"x-session-id": "abc123"})

    assert resp.status_code == 204
    assert resp.content == b""
    assert client.portal.call(store.get, compliment_key("abc123")) == "You have a great smile!"

    call = fake_openai.chat.completions.calls[0]
    assert call["model"] == "gpt-4o-mini"
    content = call["messages"][0]["content"]
    assert content[0]["image_url"]["url"].startswith("data:image/jpeg;base64,")


def test_vision_accepts_data_url_bodies(client, store, image_b64):
    resp = client.post("/vision", content=f"data:image/png;base64,{image_b64}", headers={"x-session-id": "d1"})
    assert resp.status_code == 204
    assert client.portal.call(store.get, compliment_key("d1")) is not None


@pytest.mark.parametrize(
    "body, headers",
    [
        ("", {"x-session-id": "abc123"}),
        ("IMAGE", {}),
    ],
)
def test_vision_requires_image_and_session(client, store, fake_openai, image_b64, body, headers):
    resp = client.post("/vision", content=body.replace("IMAGE", image_b64), headers=headers)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing image or sessionId"}
    assert fake_openai.chat.completions.calls == []
    assert client.portal.call(store.get, compliment_key("abc123")) is None


def test_vision_rejects_undecodable_image(client, fake_openai):
    resp = client.post("/vision", content="bm90IGFuIGltYWdl", headers={"x-session-id": "abc"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid image"
    assert fake_openai.chat.completions.calls == []


def test_vision_provider_failure_writes_nothing(client, store, fake_openai, image_b64):
    fake_openai.chat.completions.error = RuntimeError("upstream exploded")

    resp = client.post("/vision", content=image_b64, headers={"x-session-id": "abc123"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to process image", "details": "upstream exploded"}
    assert client.portal.call(store.get, compliment_key("abc123")) is None


def test_vision_empty_compliment_is_not_stored(client, store, fake_openai, image_b64):
    fake_openai.chat.completions.reply = "   "
    resp = client.post("/vision", content=image_b64, headers={"x-session-id": "abc123"})
    assert resp.status_code == 204
    assert client.portal.call(store.get, compliment_key("abc123")) is None


def test_vision_with_unusable_ttl_skips_provider_call(fake_openai, store, image_b64):
    settings = GreeterSettings(openai_api_key="sk-test", compliment_ttl=0)
    app = create_app(settings, openai_client=fake_openai, session_store=store)
    with TestClient(app) as test_client:
        resp = test_client.post("/vision", content=image_b64, headers={"x-session-id": "abc123"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Server configuration error"}
    assert fake_openai.chat.completions.calls == []


def test_speech_to_text_transcribes_raw_body(client, fake_openai):
    resp = client.post(
        "/speech-to-text",
        content=b"\x1aE\xdf\xa3fake-webm",
        headers={"x-session-id": "abc", "content-type": "audio/webm;codecs=opus"},
    )

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "text": "hello there"}
    call = fake_openai.audio.transcriptions.calls[0]
    assert call["model"] == "whisper-1"
    assert call["file"].name == "audio.webm"
    assert call["file"].read() == b"\x1aE\xdf\xa3fake-webm"


def test_speech_to_text_requires_audio_and_session(client, fake_openai):
    assert client.post("/speech-to-text", content=b"audio").status_code == 400
    assert client.post("/speech-to-text", content=b"", headers={"x-session-id": "abc"}).status_code == 400
    assert fake_openai.audio.transcriptions.calls == []


def test_speech_to_text_rejects_unknown_audio_type(client):
    resp = client.post(
        "/speech-to-text",
        content=b"data",
        headers={"x-session-id": "abc", "content-type": "video/quicktime"},
    )
    assert resp.status_code == 400
    assert "Unsupported" in resp.json()["error"]


def test_chat_replies(client, fake_openai):
    fake_openai.chat.completions.reply = "Hi! How is your day going?"
    resp = client.post("/chat", json={"text": "Hello", "sessionId": "abc"})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "response": "Hi! How is your day going?"}
    call = fake_openai.chat.completions.calls[0]
    assert call["max_tokens"] == 100
    assert call["temperature"] == 0.7
    assert call["messages"][1] == {"role": "user", "content": "Hello"}
    assert "compliment you" not in call["messages"][0]["content"]


def test_chat_uses_pending_compliment_without_consuming_it(client, store, fake_openai):
    client.portal.call(store.put, compliment_key("abc"), "Love the hat!", 60)

    client.post("/chat", json={"text": "Hello", "sessionId": "abc"})

    system = fake_openai.chat.completions.calls[0]["messages"][0]["content"]
    assert system.endswith("I can see you right now, and I want to compliment you: Love the hat!")
    assert client.portal.call(store.get, compliment_key("abc")) == "Love the hat!"


def test_chat_falls_back_on_empty_reply(client, fake_openai):
    fake_openai.chat.completions.reply = None
    resp = client.post("/chat", json={"text": "Hello", "sessionId": "abc"})
    assert resp.json()["response"] == "I'm sorry, I didn't understand that."


@pytest.mark.parametrize("payload", [{"text": "Hello"}, {"sessionId": "abc"}, {"text": "", "sessionId": "abc"}])
def test_chat_requires_text_and_session(client, fake_openai, payload):
    resp = client.post("/chat", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing text or session ID"}
    assert fake_openai.chat.completions.calls == []


def test_chat_rejects_malformed_json(client):
    resp = client.post("/chat", content=b"{not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid request body"}


def test_chat_provider_failure(client, fake_openai):
    fake_openai.chat.completions.error = RuntimeError("rate limited")
    resp = client.post("/chat", json={"text": "Hello", "sessionId": "abc"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to get AI response", "details": "rate limited"}


def test_text_to_speech_returns_mp3(client, fake_openai):
    resp = client.post("/text-to-speech", json={"text": "Welcome!"})

    assert resp.status_code == 200
    assert resp.content == b"ID3-fake-mp3"
    assert resp.headers["content-type"] == "audio/mpeg"
    assert resp.headers["cache-control"] == "no-cache"
    call = fake_openai.audio.speech.calls[0]
    assert call["model"] == "tts-1"
    assert call["voice"] == "alloy"
    assert call["input"] == "Welcome!"


def test_text_to_speech_requires_text(client):
    resp = client.post("/text-to-speech", json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing text"}


@pytest.mark.parametrize(
    "method, path, kwargs",
    [
        ("post", "/vision", {"content": "abc", "headers": {"x-session-id": "s"}}),
        ("post", "/speech-to-text", {"content": b"abc", "headers": {"x-session-id": "s"}}),
        ("post", "/chat", {"json": {"text": "hi", "sessionId": "s"}}),
        ("post", "/text-to-speech", {"json": {"text": "hi"}}),
    ],
)
def test_missing_credential_is_a_configuration_error(unconfigured_client, method, path, kwargs):
    resp = getattr(unconfigured_client, method)(path, **kwargs)
    assert resp.status_code == 500
    assert resp.json() == {"error": "Server configuration error"}


def test_vision_without_store_is_a_configuration_error(fake_openai, image_b64):
    app = create_app(GreeterSettings(openai_api_key="sk-test"), openai_client=fake_openai)
    with TestClient(app) as test_client:
        resp = test_client.post("/vision", content=image_b64, headers={"x-session-id": "s"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "KV namespace configuration error"}
