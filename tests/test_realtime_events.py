"""Realtime event model: outbound envelopes and upstream classification."""

import base64
import json

from models.realtime_events import (
    AudioDelta,
    ConversationItemCreate,
    InputAudioAppend,
    OpaqueEvent,
    SessionUpdate,
    encode_event,
    parse_upstream_event,
)


def test_input_audio_append_wraps_base64_payload():
    pcm = bytes(range(256))
    payload = json.loads(encode_event(InputAudioAppend(audio=pcm)))
    assert payload == {"type": "input_audio_buffer.append", "audio": base64.b64encode(pcm).decode("ascii")}


def test_vision_context_message_shape():
    payload = ConversationItemCreate.vision_context("You have a great smile!").to_dict()
    assert payload["type"] == "conversation.item.create"
    assert payload["item"]["role"] == "system"
    assert payload["item"]["content"] == [{"type": "text", "text": "Vision context: You have a great smile!"}]


def test_session_update_declares_audio_configuration():
    session = SessionUpdate(instructions="Be nice.").to_dict()["session"]
    assert session["modalities"] == ["text", "audio"]
    assert session["voice"] == "alloy"
    assert session["input_audio_format"] == "pcm16"
    assert session["output_audio_format"] == "pcm16"
    assert session["input_audio_transcription"] == {"model": "whisper-1"}


def test_session_update_can_disable_transcription():
    session = SessionUpdate(instructions="x", transcription_model=None).to_dict()["session"]
    assert "input_audio_transcription" not in session


def test_audio_delta_is_decoded():
    raw = json.dumps({"type": "response.audio.delta", "delta": base64.b64encode(b"\x01\x02").decode()})
    event = parse_upstream_event(raw)
    assert isinstance(event, AudioDelta)
    assert event.audio_bytes() == b"\x01\x02"


def test_unknown_events_pass_through_untouched():
    raw = '{"type": "response.text.delta", "delta": "hi"}'
    event = parse_upstream_event(raw)
    assert isinstance(event, OpaqueEvent)
    assert event.raw is raw
    assert event.type == "response.text.delta"


def test_audio_delta_without_payload_is_opaque():
    event = parse_upstream_event('{"type": "response.audio.delta"}')
    assert isinstance(event, OpaqueEvent)


def test_non_json_and_binary_frames_are_opaque():
    assert parse_upstream_event("not json").raw == "not json"
    assert parse_upstream_event("[1, 2]").raw == "[1, 2]"
    assert parse_upstream_event(b"\x00\x01").raw == b"\x00\x01"
