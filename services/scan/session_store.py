"""Simple in-memory store for scan sessions.

Sessions idle for longer than `ttl_seconds` are dropped, and the store never
holds more than `max_sessions`; the least recently used session goes first.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from models.session_models import HISTORY_LIMIT
from services.image_decoder import ImageDecoder
from services.scan.session import ScanSession

LOGGER = logging.getLogger(__name__)


class SessionStore:
	"""Manage one `ScanSession` per browser session."""

	def __init__(
		self,
		classifier: Any,
		decoder: Optional[ImageDecoder] = None,
		history_limit: int = HISTORY_LIMIT,
		max_sessions: int = 500,
		ttl_seconds: float = 3600.0,
		clock: Callable[[], float] = time.monotonic,
	) -> None:
		if max_sessions < 1:
			raise ValueError("max_sessions must be at least 1")
		self.classifier = classifier
		self.decoder = decoder or ImageDecoder()
		self.history_limit = history_limit
		self.max_sessions = max_sessions
		self.ttl_seconds = ttl_seconds
		self._clock = clock
		self._sessions: "OrderedDict[str, ScanSession]" = OrderedDict()
		self._last_seen: Dict[str, float] = {}

	def create(self) -> ScanSession:
		"""Create a new, idle session, evicting stale or surplus ones first."""
		self._evict(reserve=1)
		session_id = uuid4().hex
		session = ScanSession(
			session_id,
			self.classifier,
			decoder=self.decoder,
			history_limit=self.history_limit,
		)
		self._sessions[session_id] = session
		self._last_seen[session_id] = self._clock()
		return session

	def find(self, session_id: Optional[str]) -> Optional[ScanSession]:
		"""Return the live session for `session_id` and mark it used, or None."""
		if not session_id:
			return None
		session = self._sessions.get(session_id)
		if session is None:
			return None
		now = self._clock()
		if now - self._last_seen[session_id] > self.ttl_seconds:
			self._drop(session_id)
			return None
		self._sessions.move_to_end(session_id)
		self._last_seen[session_id] = now
		return session

	def get(self, session_id: str) -> ScanSession:
		"""Return a session or raise KeyError if missing or expired."""
		session = self.find(session_id)
		if session is None:
			raise KeyError(f"Session {session_id} not found")
		return session

	def get_or_create(self, session_id: Optional[str]) -> ScanSession:
		"""Return the session for `session_id`, creating a fresh one when unknown."""
		return self.find(session_id) or self.create()

	def _evict(self, reserve: int = 0) -> None:
		now = self._clock()
		expired = [sid for sid, seen in self._last_seen.items() if now - seen > self.ttl_seconds]
		for session_id in expired:
			self._drop(session_id)
		while self._sessions and len(self._sessions) + reserve > self.max_sessions:
			oldest = next(iter(self._sessions))
			LOGGER.info("Session store full, evicting least recently used session %s", oldest)
			self._drop(oldest)

	def _drop(self, session_id: str) -> None:
		self._sessions.pop(session_id, None)
		self._last_seen.pop(session_id, None)

	def __len__(self) -> int:
		return len(self._sessions)
