"""Open authenticated websocket connections to the upstream realtime API."""

from __future__ import annotations

import logging

from websockets.asyncio.client import ClientConnection, connect

from utils.settings import GreeterSettings

logger = logging.getLogger(__name__)


class RealtimeUpstreamConnector:
	"""Create one private upstream socket per client connection.

	The credential stays on the server; it only travels in the handshake
	headers of the upstream request.
	"""

	def __init__(self, settings: GreeterSettings) -> None:
		if not settings.openai_api_key:
			raise ValueError("OPENAI_API_KEY is required for the realtime connector.")
		self._api_key = settings.openai_api_key
		self.url = settings.realtime_endpoint
		self.open_timeout = settings.connect_timeout

	async def connect(self) -> ClientConnection:
		"""Return an open upstream connection; raises on handshake failure or timeout."""
		headers = [
			("Authorization", f"Bearer {self._api_key}"),
			("OpenAI-Beta", "realtime=v1"),
		]
		logger.debug("Connecting to realtime upstream %s", self.url)
		return await connect(self.url, additional_headers=headers, open_timeout=self.open_timeout)
