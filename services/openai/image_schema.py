"""Schema definitions for the satellite image classification tool."""

from typing import Any, Dict, List

from models.analysis_result import DisasterType

FUNCTION_NAME = "classify_satellite_image"

CATEGORY_CHOICES: List[str] = [
    DisasterType.FIRE.value,
    DisasterType.TSUNAMI.value,
    DisasterType.NORMAL.value,
]

REQUIRED_FIELDS: List[str] = [
    "category",
    "confidence",
    "reasoning",
    "detectedFeatures",
    "recommendedAction",
]

FUNCTION_DEFINITION: Dict[str, Any] = {
    "type": "function",
    "name": FUNCTION_NAME,
    "description": (
        "Return the disaster classification, confidence, reasoning, visual indicators, "
        "and recommended response for the satellite image."
    ),
    "parameters": {
        "type": "object",
        "properties": {
            "category": {
                "type": "string",
                "description": "The classification: " + ", ".join(CATEGORY_CHOICES) + ".",
            },
            "confidence": {
                "type": "number",
                "description": "Confidence score between 0 and 1.",
            },
            "reasoning": {
                "type": "string",
                "description": "Detailed explanation of why this classification was chosen.",
            },
            "detectedFeatures": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Key visual indicators found in the image, most relevant first.",
            },
            "recommendedAction": {
                "type": "string",
                "description": "Suggested emergency response action.",
            },
        },
        "required": REQUIRED_FIELDS,
        "additionalProperties": False,
    },
    "strict": True,
}
