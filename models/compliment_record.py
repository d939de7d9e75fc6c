from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ComplimentRecord:
    """In-memory representation of a row in the COMPLIMENT table.

    Attributes:
        key: Store key, usually `vision:<sessionId>`.
        value: Provider-generated compliment text.
        expires_at: Unix timestamp (seconds) after which the row reads as absent.
        created_at: Unix timestamp (seconds) of the last write.
    """

    key: str
    value: str
    expires_at: float
    created_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at
