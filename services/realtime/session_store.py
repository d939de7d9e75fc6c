"""Short-lived key/value store shared by the vision endpoint and the voice bridge."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from dal.compliment_dal import ComplimentDAL
from models.compliment_record import ComplimentRecord
from utils.database_init import AsyncDatabaseInitializer

logger = logging.getLogger(__name__)

COMPLIMENT_PREFIX = "vision:"


def compliment_key(session_id: str) -> str:
	"""Return the store key holding the pending compliment for a session."""
	return f"{COMPLIMENT_PREFIX}{session_id}"


class SessionStore:
	"""String values keyed by session, each with its own expiry.

	Writes are last-write-wins per key. Expired rows read as absent and are
	removed lazily on read or by `purge_expired`.
	"""

	def __init__(self, db_initializer: AsyncDatabaseInitializer, clock: Callable[[], float] = time.time) -> None:
		self._dal = ComplimentDAL(db_initializer)
		self._clock = clock

	async def put(self, key: str, value: str, ttl_seconds: int) -> None:
		"""Store `value` under `key` for `ttl_seconds`."""
		if ttl_seconds <= 0:
			raise ValueError("ttl_seconds must be positive.")
		now = self._clock()
		await self._dal.upsert(ComplimentRecord(key=key, value=value, expires_at=now + ttl_seconds, created_at=now))

	async def get(self, key: str) -> Optional[str]:
		"""Return the live value for `key`, or None if absent or expired."""
		record = await self._dal.get(key)
		if record is None:
			return None
		if record.is_expired(self._clock()):
			await self._dal.delete(key)
			return None
		return record.value

	async def delete(self, key: str) -> bool:
		"""Remove `key` and report whether a row was removed; an absent key is a no-op."""
		return await self._dal.delete(key)

	async def purge_expired(self) -> int:
		"""Delete all expired rows and return how many were removed."""
		removed = await self._dal.delete_expired(self._clock())
		if removed:
			logger.debug("Purged %d expired session store rows", removed)
		return removed
