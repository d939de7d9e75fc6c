"""Vision compliment workflow: frame in, compliment stored for the voice bridge."""

import asyncio
import logging
from typing import Optional

from fastapi import HTTPException

from services.openai.vision_compliment import VisionComplimenter
from services.realtime.session_store import SessionStore, compliment_key

logger = logging.getLogger(__name__)


async def store_compliment(
    image_b64: str,
    session_id: Optional[str],
    *,
    openai_client,
    store: SessionStore,
    ttl_seconds: int,
) -> Optional[str]:
    """Generate a compliment for a frame and store it under the session's key.

    Args:
        image_b64: Base64-encoded image body as sent by the browser.
        session_id: Value of the `x-session-id` header.
        openai_client: Shared AsyncOpenAI client.
        store: Session store shared with the voice bridge.
        ttl_seconds: Expiry applied to the stored compliment.

    Returns:
        The stored compliment, or None when the model returned nothing.

    Raises:
        HTTPException(400) if the image or session id is missing or the image is unreadable.
        HTTPException(500) if `ttl_seconds` is not a positive whole number.
    """
    image_b64 = (image_b64 or "").strip()
    session_id = (session_id or "").strip()
    if not image_b64 or not session_id:
        raise HTTPException(status_code=400, detail="Missing image or sessionId")

    if not isinstance(ttl_seconds, int) or ttl_seconds < 1:
        logger.error("Refusing vision request: compliment TTL is %r", ttl_seconds)
        raise HTTPException(status_code=500, detail="Server configuration error")

    complimenter = VisionComplimenter(openai_client)
    try:
        # Pillow decoding is CPU-bound; keep it off the event loop that runs the relays.
        image_url = await asyncio.to_thread(complimenter.prepare_image, image_b64)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail={"error": "Invalid image", "details": str(exc)}) from exc

    logger.info("Vision request received for session %s (%d chars)", session_id, len(image_b64))
    compliment = await complimenter.compliment(image_url)
    if not compliment:
        return None

    await store.put(compliment_key(session_id), compliment, ttl_seconds)
    return compliment
