"""Single-turn text chat used by the non-realtime conversation path."""

import logging
from typing import Optional

from openai import AsyncOpenAI

from services.openai.response_parser import extract_message_text
from services.realtime.prompts import chat_system_prompt

CHAT_MODEL = "gpt-4o-mini"
FALLBACK_REPLY = "I'm sorry, I didn't understand that."


class ChatService:
    """Answer one user utterance in the greeter's voice."""

    def __init__(self, client: AsyncOpenAI) -> None:
        if client is None:
            raise ValueError("OpenAI client is required for chat.")
        self.client = client

    async def reply(self, text: str, *, compliment: Optional[str] = None) -> str:
        """Return the assistant reply for `text`, falling back to a stock answer when empty."""
        try:
            completion = await self.client.chat.completions.create(
                model=CHAT_MODEL,
                messages=[
                    {"role": "system", "content": chat_system_prompt(compliment)},
                    {"role": "user", "content": text},
                ],
                max_tokens=100,
                temperature=0.7,
            )
        except Exception as exc:
            logging.error("OpenAI chat completion failed: %s", exc)
            raise
        return extract_message_text(completion) or FALLBACK_REPLY
