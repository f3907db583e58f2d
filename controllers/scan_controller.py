"""Scan session handlers shared by the JSON API and the HTML page."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import HTTPException, Request, UploadFile

from services.scan.session import ScanSession
from services.scan.session_store import SessionStore
from utils.media_validation import read_image_bytes
from views.presentation import page_view


def get_store(request: Request) -> SessionStore:
	"""Retrieve the shared session store from the app state."""
	store = getattr(request.app.state, "session_store", None)
	if store is None:
		raise HTTPException(status_code=500, detail="Session store unavailable")
	return store


def get_session(request: Request, session_id: str) -> ScanSession:
	try:
		return get_store(request).get(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc


def serialize_session(session: ScanSession) -> Dict[str, Any]:
	return {"session_id": session.session_id, "state": page_view(session.state)}


async def create_session(request: Request) -> Dict[str, Any]:
	"""Create a new idle scan session and return its id and state."""
	session = get_store(request).create()
	return serialize_session(session)


async def get_session_state(request: Request, session_id: str) -> Dict[str, Any]:
	return serialize_session(get_session(request, session_id))


async def submit_scan(request: Request, session: ScanSession, file: UploadFile) -> Dict[str, Any]:
	"""Read the upload and run one decode and analyze cycle.

	Decode and classifier failures end up in the session state, not as
	HTTP errors; only request-shape problems raise `HTTPException`.
	"""
	max_bytes = request.app.state.settings.max_upload_bytes
	image_bytes = await read_image_bytes(file, max_bytes)
	await session.submit(image_bytes)
	return serialize_session(session)


async def restore_history_item(request: Request, session_id: str, item_id: str) -> Dict[str, Any]:
	"""Redisplay a history entry without issuing a new classification."""
	session = get_session(request, session_id)
	if not session.has_history_item(item_id):
		raise HTTPException(status_code=404, detail=f"History item {item_id} not found")
	session.restore(item_id)
	return serialize_session(session)


async def clear_history(request: Request, session_id: str) -> Dict[str, Any]:
	session = get_session(request, session_id)
	session.clear_history()
	return serialize_session(session)
