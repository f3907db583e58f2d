"""One browser session's upload, analyze, display cycle."""

from __future__ import annotations

import logging
from typing import Any, Optional

from models.analysis_result import ScanHistoryItem
from models.session_models import (
    HISTORY_LIMIT,
    AnalysisFailed,
    AnalysisSucceeded,
    DecodeFailed,
    FileSelected,
    HistoryCleared,
    HistorySelected,
    ImageDecoded,
    ScanSessionState,
)
from services.errors import AnalysisError, DecodeError
from services.image_decoder import ImageDecoder
from services.scan.state_machine import ScanEvent, reduce

LOGGER = logging.getLogger(__name__)


class ScanSession:
    """Own one session state and drive it through the reducer.

    `classifier` is anything exposing `async analyze(image, mime_type)` that
    returns an `AnalysisResult` or raises `AnalysisError`.
    """

    def __init__(
        self,
        session_id: str,
        classifier: Any,
        decoder: Optional[ImageDecoder] = None,
        history_limit: int = HISTORY_LIMIT,
    ) -> None:
        if classifier is None:
            raise ValueError("A classifier must be provided.")
        self.session_id = session_id
        self.classifier = classifier
        self.decoder = decoder or ImageDecoder()
        self.history_limit = history_limit
        self._state = ScanSessionState()

    @property
    def state(self) -> ScanSessionState:
        return self._state

    def dispatch(self, event: ScanEvent) -> ScanSessionState:
        """Apply `event` and return the new state."""
        self._state = reduce(self._state, event, self.history_limit)
        return self._state

    async def submit(self, image_bytes: bytes) -> ScanSessionState:
        """Run decode then analyze for a newly selected file.

        A later `submit` supersedes this one: its completion events are
        dropped by the reducer once the generation has moved on.
        """
        generation = self.dispatch(FileSelected()).generation

        try:
            decoded = await self.decoder.decode(image_bytes)
        except DecodeError as exc:
            LOGGER.warning("Session %s: upload could not be decoded: %s", self.session_id, exc.__cause__ or exc)
            return self.dispatch(DecodeFailed(generation, exc.message))

        self.dispatch(ImageDecoded(generation, decoded.data_url))

        try:
            result = await self.classifier.analyze(decoded.data_url, decoded.mime_type)
        except AnalysisError as exc:
            return self.dispatch(AnalysisFailed(generation, exc.message))

        item = ScanHistoryItem(image_url=decoded.data_url, result=result)
        return self.dispatch(AnalysisSucceeded(generation, item))

    def restore(self, item_id: str) -> ScanSessionState:
        """Show a history entry again without contacting the classifier."""
        return self.dispatch(HistorySelected(item_id))

    def clear_history(self) -> ScanSessionState:
        return self.dispatch(HistoryCleared())

    def has_history_item(self, item_id: str) -> bool:
        return any(item.id == item_id for item in self._state.history)
