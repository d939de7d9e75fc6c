"""FastAPI routes for the greeter's HTTP pass-through endpoints."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel

from controllers.chat_controller import chat_reply
from controllers.speech_controller import synthesize_speech, transcribe_audio
from controllers.vision_controller import store_compliment

router = APIRouter()


class ChatPayload(BaseModel):
    text: Optional[str] = None
    sessionId: Optional[str] = None


class SpeechPayload(BaseModel):
    text: Optional[str] = None


def _get_openai_client(request: Request):
    """Retrieve the shared OpenAI client from the app state."""
    openai_client = getattr(request.app.state, "openai_client", None)
    if openai_client is None:
        raise HTTPException(status_code=500, detail="Server configuration error")
    return openai_client


def _get_session_store(request: Request):
    """Retrieve the shared session store from the app state."""
    store = getattr(request.app.state, "session_store", None)
    if store is None:
        raise HTTPException(status_code=500, detail="KV namespace configuration error")
    return store


def _failure(message: str, exc: Exception) -> HTTPException:
    return HTTPException(status_code=500, detail={"error": message, "details": str(exc) or type(exc).__name__})


@router.post("/vision", status_code=204)
async def post_vision(request: Request, x_session_id: Optional[str] = Header(None)):
    """Generate a compliment for the posted frame and queue it for the voice session."""
    openai_client = _get_openai_client(request)
    store = _get_session_store(request)
    body = (await request.body()).decode("utf-8", errors="replace")
    try:
        await store_compliment(
            body,
            x_session_id,
            openai_client=openai_client,
            store=store,
            ttl_seconds=request.app.state.settings.compliment_ttl,
        )
    except HTTPException:
        raise
    except Exception as exc:
        raise _failure("Failed to process image", exc) from exc
    return Response(status_code=204)


@router.post("/speech-to-text")
async def post_speech_to_text(request: Request, x_session_id: Optional[str] = Header(None)):
    """Transcribe a raw audio body."""
    openai_client = _get_openai_client(request)
    audio_bytes = await request.body()
    try:
        return await transcribe_audio(
            audio_bytes,
            x_session_id,
            request.headers.get("content-type"),
            openai_client=openai_client,
        )
    except HTTPException:
        raise
    except Exception as exc:
        raise _failure("Failed to transcribe audio", exc) from exc


@router.post("/chat")
async def post_chat(request: Request, payload: ChatPayload):
    """Return a short conversational reply."""
    openai_client = _get_openai_client(request)
    try:
        return await chat_reply(
            payload.text,
            payload.sessionId,
            openai_client=openai_client,
            store=getattr(request.app.state, "session_store", None),
        )
    except HTTPException:
        raise
    except Exception as exc:
        raise _failure("Failed to get AI response", exc) from exc


@router.post("/text-to-speech")
async def post_text_to_speech(request: Request, payload: SpeechPayload):
    """Return MP3 audio for the posted text."""
    openai_client = _get_openai_client(request)
    try:
        audio = await synthesize_speech(payload.text, openai_client=openai_client)
    except HTTPException:
        raise
    except Exception as exc:
        raise _failure("Failed to generate speech", exc) from exc
    return Response(content=audio, media_type="audio/mpeg", headers={"Cache-Control": "no-cache"})


@router.get("/test")
async def get_test():
    """Liveness endpoint used by the frontend's connectivity check."""
    return {
        "message": "Test function is working!",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
