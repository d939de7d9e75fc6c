"""Background loop that removes expired rows from the session store."""

import asyncio
import logging

from services.realtime.session_store import SessionStore

logger = logging.getLogger(__name__)


class StoreCleaner:
    """Purge expired compliments on a fixed interval."""

    def __init__(self, store: SessionStore, interval_seconds: float = 300.0) -> None:
        """
        Args:
            store: Session store to purge.
            interval_seconds: Seconds to sleep between purge runs.
        """
        self._store = store
        self.interval_seconds = interval_seconds

    async def run_periodic_cleanup(self) -> None:
        """Repeatedly purge expired rows until cancelled."""
        while True:
            try:
                await asyncio.sleep(self.interval_seconds)
                await self._store.purge_expired()
            except asyncio.CancelledError:
                raise
            except Exception:
                # Keep the loop alive; the next tick retries.
                logger.exception("Session store purge failed")
