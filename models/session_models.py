"""Session domain models for the scan workflow."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from models.analysis_result import AnalysisResult, ScanHistoryItem

HISTORY_LIMIT = 10


class SessionPhase(str, Enum):
	"""Lifecycle phase of the upload, analyze, display cycle."""

	IDLE = "idle"
	AWAITING_IMAGE_DECODE = "awaiting_image_decode"
	ANALYZING = "analyzing"
	RESULT_READY = "result_ready"
	FAILED = "failed"


@dataclass(frozen=True)
class ScanSessionState:
	"""Immutable snapshot of one browser session.

	`generation` increases with every file selection; completions tagged with
	an older generation are ignored by the reducer.
	"""

	phase: SessionPhase = SessionPhase.IDLE
	selected_image: Optional[str] = None
	is_analyzing: bool = False
	result: Optional[AnalysisResult] = None
	history: Tuple[ScanHistoryItem, ...] = ()
	error: Optional[str] = None
	generation: int = 0


# Events consumed by services.scan.state_machine.reduce


@dataclass(frozen=True)
class FileSelected:
	pass


@dataclass(frozen=True)
class ImageDecoded:
	generation: int
	image_url: str


@dataclass(frozen=True)
class DecodeFailed:
	generation: int
	message: str


@dataclass(frozen=True)
class AnalysisSucceeded:
	generation: int
	item: ScanHistoryItem


@dataclass(frozen=True)
class AnalysisFailed:
	generation: int
	message: str


@dataclass(frozen=True)
class HistorySelected:
	item_id: str


@dataclass(frozen=True)
class HistoryCleared:
	pass
