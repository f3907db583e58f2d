"""Helpers to parse Responses API outputs into an `AnalysisResult`."""

import json
import math
from typing import Any, Dict, Optional

from models.analysis_result import AnalysisResult, DisasterType
from services.openai.image_schema import REQUIRED_FIELDS


def parse_function_call(response: Any, *, tool_name: str) -> Dict[str, Any]:
    """Extract the decoded function call arguments for the specified tool name."""
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) == "function_call" and getattr(item, "name", None) == tool_name:
            args = json.loads(getattr(item, "arguments", None) or "{}")
            if not isinstance(args, dict):
                raise ValueError("Function call arguments must be a JSON object.")
            return args
    raise RuntimeError(f"No function_call output for '{tool_name}' found in Responses API output.")


def _clamp_confidence(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"confidence must be a number, got {raw!r}")
    value = float(raw)
    if math.isnan(value):
        raise ValueError("confidence must not be NaN")
    return min(1.0, max(0.0, value))


def build_analysis_result(args: Dict[str, Any]) -> AnalysisResult:
    """Validate the classifier payload and build an immutable result.

    Unknown category strings become `DisasterType.UNKNOWN`; confidence is
    clamped into [0, 1].

    Raises:
        ValueError: If a required field is missing or has the wrong type.
    """
    missing = [name for name in REQUIRED_FIELDS if name not in args]
    if missing:
        raise ValueError(f"Classifier output missing required fields: {', '.join(missing)}")

    features = args["detectedFeatures"]
    if not isinstance(features, list) or not all(isinstance(feature, str) for feature in features):
        raise ValueError("detectedFeatures must be an array of strings.")

    for name in ("reasoning", "recommendedAction"):
        if not isinstance(args[name], str):
            raise ValueError(f"{name} must be a string, got {args[name]!r}")

    return AnalysisResult(
        category=DisasterType.coerce(args["category"]),
        confidence=_clamp_confidence(args["confidence"]),
        reasoning=args["reasoning"],
        detected_features=tuple(features),
        recommended_action=args["recommendedAction"],
    )


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage information from the response, if present."""
    usage = getattr(response, "usage", None)
    return {
        "input_tokens": getattr(usage, "input_tokens", None) if usage else None,
        "output_tokens": getattr(usage, "output_tokens", None) if usage else None,
    }
