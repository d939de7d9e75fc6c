"""Relay one browser websocket to one upstream realtime voice session."""

from __future__ import annotations

import asyncio
import binascii
import json
import logging
from typing import Any, Optional, Protocol, Union

import anyio
from fastapi import WebSocket
from starlette.websockets import WebSocketState
from websockets.exceptions import ConnectionClosed, ConnectionClosedError
from websockets.protocol import State

from models.realtime_events import (
	AudioDelta,
	ConversationItemCreate,
	InputAudioAppend,
	SessionUpdate,
	encode_event,
	parse_upstream_event,
)
from services.realtime.prompts import greeter_instructions
from services.realtime.session_store import SessionStore, compliment_key

logger = logging.getLogger(__name__)

NORMAL_CLOSURE = 1000


class UpstreamConnector(Protocol):
	async def connect(self) -> Any: ...


class RealtimeVoiceBridge:
	"""Own a client socket, its upstream socket, and the compliment timer.

	All three are released together when `run` returns, whichever side
	ends the conversation first.
	"""

	def __init__(
		self,
		websocket: WebSocket,
		session_id: str,
		store: SessionStore,
		connector: UpstreamConnector,
		*,
		inject_interval: float = 10.0,
		voice: str = "alloy",
	) -> None:
		self.websocket = websocket
		self.session_id = session_id
		self.store = store
		self.connector = connector
		self.inject_interval = inject_interval
		self.voice = voice
		self.upstream: Optional[Any] = None

	async def run(self) -> None:
		"""Relay until either side closes; the client socket must already be accepted."""
		try:
			self.upstream = await self.connector.connect()
		except Exception as exc:
			logger.error("Upstream connection failed for session %s: %s", self.session_id, exc)
			with anyio.CancelScope(shield=True):
				await self._close_client("Upstream connection failed")
			return

		logger.info("Connected to realtime upstream for session %s", self.session_id)
		client_reason = "Upstream disconnected"
		upstream_reason = "Client disconnected"
		tasks: set[asyncio.Task] = set()
		try:
			await self._send_upstream(encode_event(SessionUpdate(instructions=greeter_instructions(), voice=self.voice)))
			client_pump = asyncio.create_task(self._pump_client(), name=f"client-pump-{self.session_id}")
			upstream_pump = asyncio.create_task(self._pump_upstream(), name=f"upstream-pump-{self.session_id}")
			injector = asyncio.create_task(self._inject_loop(), name=f"compliments-{self.session_id}")
			tasks = {client_pump, upstream_pump, injector}

			done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
			for task in done:
				exc = task.exception()
				if exc is not None:
					raise exc
			if upstream_pump in done:
				logger.info("Upstream closed for session %s", self.session_id)
			else:
				logger.info("Client closed session %s", self.session_id)
		except asyncio.CancelledError:
			client_reason = upstream_reason = "Server shutting down"
			raise
		except Exception as exc:
			logger.exception("Relay error for session %s", self.session_id)
			client_reason = upstream_reason = "Relay error"
			await self._send_client_error(str(exc) or "Internal server error")
		finally:
			await self._teardown(tasks, upstream_reason=upstream_reason, client_reason=client_reason)

	async def _teardown(self, tasks: set[asyncio.Task], *, upstream_reason: str, client_reason: str) -> None:
		"""Stop the relay tasks and close both sockets.

		Runs shielded so a cancelled handler still releases the upstream
		socket; the caller's own CancelledError is re-raised afterwards.
		"""
		with anyio.CancelScope(shield=True):
			for task in tasks:
				task.cancel()
			if tasks:
				await asyncio.wait(tasks)
			await self._close_upstream(upstream_reason)
			await self._close_client(client_reason)
		logger.info("Session %s closed", self.session_id)

	async def inject_pending_compliment(self) -> bool:
		"""Send a stored compliment upstream as system context, then clear it.

		Returns True when a message was sent. An absent key or a closed
		upstream socket leaves the store untouched.
		"""
		key = compliment_key(self.session_id)
		compliment = await self.store.get(key)
		if not compliment or not self._upstream_open():
			return False
		logger.info("Injecting vision context for session %s", self.session_id)
		await self._send_upstream(encode_event(ConversationItemCreate.vision_context(compliment)))
		await self.store.delete(key)
		return True

	async def _inject_loop(self) -> None:
		while True:
			await asyncio.sleep(self.inject_interval)
			try:
				await self.inject_pending_compliment()
			except asyncio.CancelledError:
				raise
			except Exception:
				# The side channel is best effort; the relay keeps running.
				logger.exception("Compliment injection failed for session %s", self.session_id)

	async def _pump_client(self) -> None:
		"""Forward client frames upstream until the client disconnects."""
		while True:
			message = await self.websocket.receive()
			if message["type"] == "websocket.disconnect":
				return
			text = message.get("text")
			data = message.get("bytes")
			if text is not None:
				await self._send_upstream(text)
			elif data is not None:
				await self._send_upstream(encode_event(InputAudioAppend(audio=data)))

	async def _pump_upstream(self) -> None:
		"""Forward upstream frames to the client until the upstream socket closes."""
		try:
			async for raw in self.upstream:
				event = parse_upstream_event(raw)
				if isinstance(event, AudioDelta):
					try:
						audio = event.audio_bytes()
					except (binascii.Error, ValueError):
						logger.warning("Dropping undecodable audio delta for session %s", self.session_id)
						continue
					await self._send_client(audio)
				else:
					await self._send_client(event.raw)
		except ConnectionClosedError as exc:
			logger.warning("Upstream closed abnormally for session %s: %s", self.session_id, exc)

	def _client_open(self) -> bool:
		return (
			self.websocket.client_state == WebSocketState.CONNECTED
			and self.websocket.application_state == WebSocketState.CONNECTED
		)

	def _upstream_open(self) -> bool:
		return self.upstream is not None and getattr(self.upstream, "state", None) is State.OPEN

	async def _send_upstream(self, message: str) -> None:
		if not self._upstream_open():
			return
		try:
			await self.upstream.send(message)
		except ConnectionClosed:
			logger.debug("Dropped frame for closed upstream, session %s", self.session_id)

	async def _send_client(self, payload: Union[str, bytes]) -> None:
		if not self._client_open():
			return
		if isinstance(payload, bytes):
			await self.websocket.send_bytes(payload)
		else:
			await self.websocket.send_text(payload)

	async def _send_client_error(self, message: str) -> None:
		if not self._client_open():
			return
		try:
			await self.websocket.send_text(json.dumps({"type": "error", "error": {"message": message}}))
		except Exception as exc:
			logger.debug("Could not deliver error event to session %s: %s", self.session_id, exc)

	async def _close_upstream(self, reason: str) -> None:
		if not self._upstream_open():
			return
		try:
			await self.upstream.close(code=NORMAL_CLOSURE, reason=reason)
		except Exception as exc:
			logger.debug("Upstream close failed for session %s: %s", self.session_id, exc)

	async def _close_client(self, reason: str) -> None:
		if not self._client_open():
			return
		try:
			await self.websocket.close(code=NORMAL_CLOSURE, reason=reason)
		except Exception as exc:
			logger.debug("Client close failed for session %s: %s", self.session_id, exc)
