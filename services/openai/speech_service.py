"""Text-to-speech helper returning MP3 bytes."""

import logging

from openai import AsyncOpenAI

TTS_MODEL = "tts-1"
TTS_VOICE = "alloy"


class SpeechService:
    """Synthesize speech for short replies."""

    def __init__(self, client: AsyncOpenAI) -> None:
        if client is None:
            raise ValueError("OpenAI client is required for speech synthesis.")
        self.client = client

    async def synthesize(self, text: str) -> bytes:
        """Return MP3-encoded audio for `text`."""
        if not text:
            raise ValueError("text must not be empty.")
        try:
            response = await self.client.audio.speech.create(
                model=TTS_MODEL,
                voice=TTS_VOICE,
                input=text,
                response_format="mp3",
            )
        except Exception as exc:
            logging.error("OpenAI speech synthesis failed: %s", exc)
            raise
        return response.content
