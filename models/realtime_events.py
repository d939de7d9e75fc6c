"""Realtime protocol events exchanged with the upstream voice provider."""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

INPUT_AUDIO_APPEND = "input_audio_buffer.append"
AUDIO_DELTA = "response.audio.delta"
SESSION_UPDATE = "session.update"
CONVERSATION_ITEM_CREATE = "conversation.item.create"


@dataclass
class SessionUpdate:
	"""Session configuration sent once the upstream socket is open."""

	instructions: str
	voice: str = "alloy"
	modalities: List[str] = field(default_factory=lambda: ["text", "audio"])
	input_audio_format: str = "pcm16"
	output_audio_format: str = "pcm16"
	transcription_model: Optional[str] = "whisper-1"

	def to_dict(self) -> Dict[str, Any]:
		session: Dict[str, Any] = {
			"modalities": list(self.modalities),
			"instructions": self.instructions,
			"voice": self.voice,
			"input_audio_format": self.input_audio_format,
			"output_audio_format": self.output_audio_format,
		}
		if self.transcription_model:
			session["input_audio_transcription"] = {"model": self.transcription_model}
		return {"type": SESSION_UPDATE, "session": session}


@dataclass
class InputAudioAppend:
	"""Client microphone audio wrapped for the JSON-framed upstream protocol."""

	audio: bytes

	def to_dict(self) -> Dict[str, Any]:
		return {"type": INPUT_AUDIO_APPEND, "audio": base64.b64encode(self.audio).decode("ascii")}


@dataclass
class ConversationItemCreate:
	"""Synthetic conversation message injected into the upstream session."""

	text: str
	role: str = "system"

	@classmethod
	def vision_context(cls, compliment: str) -> "ConversationItemCreate":
		return cls(text=f"Vision context: {compliment}")

	def to_dict(self) -> Dict[str, Any]:
		return {
			"type": CONVERSATION_ITEM_CREATE,
			"item": {
				"type": "message",
				"role": self.role,
				"content": [{"type": "text", "text": self.text}],
			},
		}


@dataclass
class AudioDelta:
	"""Upstream chunk of synthesized audio, base64 encoded on the wire."""

	delta: str

	def audio_bytes(self) -> bytes:
		return base64.b64decode(self.delta)


@dataclass
class OpaqueEvent:
	"""Any upstream frame without special handling; relayed untouched."""

	raw: Union[str, bytes]
	type: Optional[str] = None


UpstreamEvent = Union[AudioDelta, OpaqueEvent]


def encode_event(event: Union[SessionUpdate, InputAudioAppend, ConversationItemCreate]) -> str:
	"""Serialize an outbound event as a JSON text frame."""
	return json.dumps(event.to_dict())


def parse_upstream_event(raw: Union[str, bytes]) -> UpstreamEvent:
	"""Classify an upstream frame by its `type` discriminator.

	Only audio deltas carrying a non-empty `delta` string are modeled; every
	other frame, including non-JSON text and binary frames, becomes an
	`OpaqueEvent` holding the original payload.
	"""
	if isinstance(raw, (bytes, bytearray)):
		return OpaqueEvent(raw=bytes(raw))
	try:
		payload = json.loads(raw)
	except ValueError:
		return OpaqueEvent(raw=raw)
	if not isinstance(payload, dict):
		return OpaqueEvent(raw=raw)
	event_type = payload.get("type")
	delta = payload.get("delta")
	if event_type == AUDIO_DELTA and isinstance(delta, str) and delta:
		return AudioDelta(delta=delta)
	return OpaqueEvent(raw=raw, type=event_type if isinstance(event_type, str) else None)
