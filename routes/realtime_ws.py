"""WebSocket endpoints for the realtime voice bridge."""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket
from fastapi.responses import JSONResponse
from starlette.websockets import WebSocketDisconnect

from services.realtime.voice_bridge import RealtimeVoiceBridge

logger = logging.getLogger(__name__)

router = APIRouter()


async def _deny(websocket: WebSocket, status_code: int, message: str) -> None:
	"""Reject an upgrade request before it is accepted."""
	if "websocket.http.response" in websocket.scope.get("extensions", {}):
		await websocket.send_denial_response(JSONResponse({"error": message}, status_code=status_code))
	else:
		await websocket.close(code=1008 if status_code < 500 else 1011, reason=message)


@router.websocket("/ws")
@router.websocket("/")
async def realtime_socket(websocket: WebSocket):
	"""Bridge one browser connection to its own upstream realtime session."""
	session_id = (websocket.query_params.get("sessionId") or websocket.headers.get("x-session-id") or "").strip()
	if not session_id:
		await _deny(websocket, 400, "Missing sessionId")
		return

	state = websocket.app.state
	connector = getattr(state, "upstream_connector", None)
	store = getattr(state, "session_store", None)
	if connector is None or store is None:
		logger.error("Realtime bridge unavailable: connector=%s store=%s", connector is not None, store is not None)
		await _deny(websocket, 500, "Server configuration error")
		return

	await websocket.accept()
	logger.info("WebSocket connection established for session %s", session_id)
	bridge = RealtimeVoiceBridge(
		websocket,
		session_id,
		store,
		connector,
		inject_interval=state.settings.inject_interval,
	)
	await bridge.run()


@router.websocket("/ws-test")
async def echo_socket(websocket: WebSocket):
	"""Diagnostic echo socket used to check websocket plumbing end to end."""
	await websocket.accept()
	while True:
		try:
			message = await websocket.receive_text()
		except WebSocketDisconnect:
			break
		await websocket.send_text(f"Echo: {message}")
