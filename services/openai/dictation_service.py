"""Audio transcription helper built on OpenAI's transcription models."""

import io
import logging

from openai import AsyncOpenAI

from utils.media_validation import audio_filename_for_mime

TRANSCRIBE_MODEL = "whisper-1"


class DictationService:
    """Create text transcriptions from audio recordings."""

    def __init__(self, client: AsyncOpenAI) -> None:
        """Initialize the service with a shared OpenAI client."""
        if client is None:
            raise ValueError("OpenAI client is required for dictation.")
        self.client = client

    async def transcribe(self, audio_bytes: bytes, *, mime_type: str = "audio/webm") -> str:
        """Transcribe audio bytes into text using OpenAI.

        The upload is named after `mime_type` so the API can infer the
        container format; unknown types raise ValueError before any request.
        """
        if not audio_bytes:
            raise ValueError("audio_bytes must contain data for transcription.")

        audio_file = io.BytesIO(audio_bytes)
        audio_file.name = audio_filename_for_mime(mime_type)

        try:
            response = await self.client.audio.transcriptions.create(
                model=TRANSCRIBE_MODEL,
                file=audio_file,
            )
        except Exception as exc:
            logging.error("OpenAI transcription request failed: %s", exc)
            raise

        return (getattr(response, "text", None) or "").strip()
