"""Pure transition function for the scan session lifecycle.

Every transition returns a new `ScanSessionState`; nothing here touches I/O.
Completion events carry the generation captured when their file was
selected, and are dropped once a newer selection has been made.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Union

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
    SessionPhase,
)

LOGGER = logging.getLogger(__name__)

ScanEvent = Union[
    FileSelected,
    ImageDecoded,
    DecodeFailed,
    AnalysisSucceeded,
    AnalysisFailed,
    HistorySelected,
    HistoryCleared,
]


def _is_stale(state: ScanSessionState, generation: int) -> bool:
    if generation != state.generation:
        LOGGER.debug("Dropping event from generation %s (current %s)", generation, state.generation)
        return True
    return False


def reduce(state: ScanSessionState, event: ScanEvent, history_limit: int = HISTORY_LIMIT) -> ScanSessionState:
    """Apply one event to the session state and return the next state."""
    if isinstance(event, FileSelected):
        return replace(
            state,
            phase=SessionPhase.AWAITING_IMAGE_DECODE,
            error=None,
            result=None,
            is_analyzing=False,
            generation=state.generation + 1,
        )

    if isinstance(event, ImageDecoded):
        if _is_stale(state, event.generation):
            return state
        return replace(
            state,
            phase=SessionPhase.ANALYZING,
            selected_image=event.image_url,
            is_analyzing=True,
        )

    if isinstance(event, DecodeFailed):
        if _is_stale(state, event.generation):
            return state
        return replace(state, phase=SessionPhase.FAILED, error=event.message, is_analyzing=False)

    if isinstance(event, AnalysisSucceeded):
        if _is_stale(state, event.generation):
            return state
        history = (event.item,) + state.history
        return replace(
            state,
            phase=SessionPhase.RESULT_READY,
            result=event.item.result,
            history=history[:history_limit],
            is_analyzing=False,
        )

    if isinstance(event, AnalysisFailed):
        if _is_stale(state, event.generation):
            return state
        return replace(
            state,
            phase=SessionPhase.FAILED,
            error=event.message,
            result=None,
            is_analyzing=False,
        )

    if isinstance(event, HistorySelected):
        item = next((entry for entry in state.history if entry.id == event.item_id), None)
        if item is None:
            return state
        # An in-flight request keeps the session in ANALYZING until it completes
        return replace(
            state,
            phase=SessionPhase.ANALYZING if state.is_analyzing else SessionPhase.RESULT_READY,
            selected_image=item.image_url,
            result=item.result,
            error=None,
        )

    if isinstance(event, HistoryCleared):
        return replace(state, history=())

    raise TypeError(f"Unsupported scan event: {event!r}")
