"""Result schema shared by the classifier, the scan session, and the views."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple
from uuid import uuid4


class DisasterType(str, Enum):
    """Classification labels returned for a satellite image."""

    FIRE = "FOREST_FIRE"
    TSUNAMI = "TSUNAMI"
    NORMAL = "NORMAL"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def coerce(cls, value: Any) -> "DisasterType":
        """Map a raw label onto the enum, falling back to UNKNOWN."""
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().upper().replace(" ", "_")
        for member in cls:
            if member.value == normalized:
                return member
        return cls.UNKNOWN


@dataclass(frozen=True)
class AnalysisResult:
    """Structured classification of one satellite image.

    Attributes:
        category: Disaster label chosen by the classifier.
        confidence: Certainty in the label, always within [0.0, 1.0].
        reasoning: Free-text explanation for the label.
        detected_features: Visual indicators, most relevant first.
        recommended_action: Suggested emergency response.
    """

    category: DisasterType
    confidence: float
    reasoning: str
    detected_features: Tuple[str, ...] = ()
    recommended_action: str = ""

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence!r}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the classifier's camelCase field names."""
        return {
            "category": self.category.value,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "detectedFeatures": list(self.detected_features),
            "recommendedAction": self.recommended_action,
        }


@dataclass(frozen=True)
class ScanHistoryItem:
    """Snapshot of one completed scan kept in the session history."""

    image_url: str
    result: AnalysisResult
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "imageUrl": self.image_url,
            "result": self.result.to_dict(),
        }
