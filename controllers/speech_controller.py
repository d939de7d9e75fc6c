"""Speech-to-text and text-to-speech pass-throughs."""

from typing import Optional

from fastapi import HTTPException

from services.openai.dictation_service import DictationService
from services.openai.speech_service import SpeechService
from utils.media_validation import audio_filename_for_mime, require_text


async def transcribe_audio(
    audio_bytes: bytes,
    session_id: Optional[str],
    content_type: Optional[str],
    *,
    openai_client,
) -> dict:
    """Return `{success, text}` for a raw audio upload."""
    if not audio_bytes or not require_text(session_id):
        raise HTTPException(status_code=400, detail="Missing audio data or session ID")
    mime_type = content_type or "audio/webm"
    try:
        audio_filename_for_mime(mime_type)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    text = await DictationService(openai_client).transcribe(audio_bytes, mime_type=mime_type)
    return {"success": True, "text": text}


async def synthesize_speech(text: Optional[str], *, openai_client) -> bytes:
    """Return MP3 bytes for `text`."""
    cleaned = require_text(text)
    if not cleaned:
        raise HTTPException(status_code=400, detail="Missing text")
    return await SpeechService(openai_client).synthesize(cleaned)
