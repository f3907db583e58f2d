"""Pure projections from session state to what the page and API render.

Nothing here holds logic beyond formatting: percentages are rounded to one
decimal and timestamps are localized to the server's timezone.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from models.analysis_result import AnalysisResult, DisasterType, ScanHistoryItem
from models.session_models import ScanSessionState

BADGES: Dict[DisasterType, Dict[str, str]] = {
    DisasterType.FIRE: {"label": "Wildfire Detected", "tone": "fire"},
    DisasterType.TSUNAMI: {"label": "Tsunami Detected", "tone": "tsunami"},
    DisasterType.NORMAL: {"label": "Normal Patterns", "tone": "normal"},
    DisasterType.UNKNOWN: {"label": "Scan Required", "tone": "unknown"},
}

CHART_COLORS = ("#3b82f6", "#1e293b")
CHART_RADIUS = 70


def format_confidence(confidence: float) -> str:
    """Render a [0, 1] confidence as a percentage with one decimal."""
    return f"{confidence * 100:.1f}%"


def format_timestamp(timestamp_ms: int) -> str:
    """Render epoch milliseconds in the server's local time."""
    local = datetime.fromtimestamp(timestamp_ms / 1000).astimezone()
    return local.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def category_tag(category: DisasterType) -> str:
    return category.value.replace("_", " ")


def status_badge(category: DisasterType) -> Dict[str, str]:
    badge = BADGES.get(category, BADGES[DisasterType.UNKNOWN])
    return {"category": category.value, "label": badge["label"], "tone": badge["tone"]}


def confidence_chart(confidence: float) -> Dict[str, Any]:
    """Two-slice donut (confidence vs. remainder) as SVG stroke geometry."""
    circumference = 2 * math.pi * CHART_RADIUS
    confidence_length = circumference * confidence
    slices = [
        {
            "name": "Confidence",
            "value": round(confidence * 100, 1),
            "color": CHART_COLORS[0],
            "dasharray": f"{confidence_length:.2f} {circumference - confidence_length:.2f}",
            "dashoffset": "0",
        },
        {
            "name": "Variance",
            "value": round((1 - confidence) * 100, 1),
            "color": CHART_COLORS[1],
            "dasharray": f"{circumference - confidence_length:.2f} {confidence_length:.2f}",
            "dashoffset": f"{-confidence_length:.2f}",
        },
    ]
    return {"radius": CHART_RADIUS, "circumference": round(circumference, 2), "slices": slices}


def dashboard_view(result: AnalysisResult, image_url: str) -> Dict[str, Any]:
    return {
        "image_url": image_url,
        "badge": status_badge(result.category),
        "confidence_text": format_confidence(result.confidence),
        "reasoning": result.reasoning,
        "features": list(result.detected_features),
        "recommended_action": result.recommended_action,
        "chart": confidence_chart(result.confidence),
        "result": result.to_dict(),
    }


def history_card(item: ScanHistoryItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "image_url": item.image_url,
        "category": item.result.category.value,
        "tag": category_tag(item.result.category),
        "tone": status_badge(item.result.category)["tone"],
        "timestamp": item.timestamp,
        "timestamp_text": format_timestamp(item.timestamp),
        "confidence_text": format_confidence(item.result.confidence),
    }


UPLOAD_IDLE_LABEL = "Deploy Satellite Imagery"
UPLOAD_BUSY_LABEL = "Processing Satellite Feed..."


def upload_view(state: ScanSessionState) -> Dict[str, Any]:
    """Upload affordance; `busy_label` is what the page switches to on submit."""
    return {
        "disabled": state.is_analyzing,
        "label": UPLOAD_BUSY_LABEL if state.is_analyzing else UPLOAD_IDLE_LABEL,
        "busy_label": UPLOAD_BUSY_LABEL,
        "overlay_text": "Analyzing Pixels...",
        "hint": "Supports High-Res TIFF, JPG, PNG from Sentinel-2 or Landsat",
    }


def page_view(state: ScanSessionState) -> Dict[str, Any]:
    """Everything the page renders, derived from one state snapshot."""
    dashboard: Optional[Dict[str, Any]] = None
    if state.selected_image and state.result is not None:
        dashboard = dashboard_view(state.result, state.selected_image)
    history: List[Dict[str, Any]] = [history_card(item) for item in state.history]
    return {
        "phase": state.phase.value,
        "is_analyzing": state.is_analyzing,
        "show_hero": state.selected_image is None,
        "upload": upload_view(state),
        "error": state.error or None,
        "dashboard": dashboard,
        "history": history,
        "show_history": bool(history),
    }
