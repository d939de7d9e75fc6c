"""Text chat controller."""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException

from services.openai.chat_service import ChatService
from services.realtime.session_store import SessionStore, compliment_key
from utils.media_validation import require_text

logger = logging.getLogger(__name__)


async def chat_reply(
    text: Optional[str],
    session_id: Optional[str],
    *,
    openai_client,
    store: Optional[SessionStore] = None,
) -> Dict[str, Any]:
    """Answer one utterance, grounding the reply in any pending compliment.

    The compliment is only read; the voice bridge remains responsible for
    consuming it.
    """
    text = require_text(text)
    session_id = require_text(session_id)
    if not text or not session_id:
        raise HTTPException(status_code=400, detail="Missing text or session ID")

    compliment = None
    if store is not None:
        try:
            compliment = await store.get(compliment_key(session_id))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.error("Error reading compliment for session %s: %s", session_id, exc)

    reply = await ChatService(openai_client).reply(text, compliment=compliment)
    return {"success": True, "response": reply}
