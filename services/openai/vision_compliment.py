"""Description: Turn a camera frame into a short compliment using a vision-capable chat model."""

import logging
import time
from typing import Any, Dict, List

from openai import AsyncOpenAI

from services.frame_normalizer import FrameNormalizer
from services.openai.media_inputs import build_vision_messages, to_image_data_url
from services.openai.response_parser import extract_message_text, extract_usage
from services.realtime.prompts import vision_compliment_prompt

VISION_MODEL = "gpt-4o-mini"


class VisionComplimenter:
    """Class for generating compliments from base64 camera frames."""

    def __init__(self, client: AsyncOpenAI, normalizer: FrameNormalizer | None = None) -> None:
        """Initialize the VisionComplimenter with an OpenAI async client."""
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.normalizer = normalizer or FrameNormalizer()
        self.prompt = vision_compliment_prompt()

    def prepare_image(self, image_b64: str | bytes) -> str:
        """Return a data URL for the normalized frame; raises ValueError on bad input."""
        return to_image_data_url(self.normalizer.normalize_base64(image_b64))

    async def compliment(self, image_url: str, *, max_tokens: int = 60) -> str:
        """Return the compliment text for a prepared frame (may be empty)."""
        start_time = time.time()
        completion = await self._create_completion(build_vision_messages(self.prompt, image_url), max_tokens)
        text = extract_message_text(completion)
        usage = extract_usage(completion)
        logging.debug(
            "Vision compliment latency=%.3fs input_tokens=%s output_tokens=%s",
            time.time() - start_time,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        if not text:
            logging.warning("Vision model returned an empty compliment.")
        return text

    async def _create_completion(self, messages: List[Dict[str, Any]], max_tokens: int) -> Any:
        """Send the multimodal request to the Chat Completions API."""
        try:
            return await self.client.chat.completions.create(
                model=VISION_MODEL,
                messages=messages,
                max_tokens=max_tokens,
            )
        except Exception as exc:
            logging.error("Error during OpenAI vision call: %s", exc)
            raise

# end of VisionComplimenter
