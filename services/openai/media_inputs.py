"""Utilities to build multimodal input payloads for the Responses API."""

import base64
import binascii
from typing import Any, Dict, List, Tuple, Union

DEFAULT_MIME_TYPE = "image/jpeg"


def split_data_url(data_url: str) -> Tuple[str, str]:
    """Return `(mime_type, base64_payload)` for a `data:` URL.

    Raises:
        ValueError: If the string is not a base64 data URL.
    """
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Expected a base64 data URL.")
    mime_type = header[len("data:"):-len(";base64")] or DEFAULT_MIME_TYPE
    return mime_type, payload


def to_image_data_url(image: Union[bytes, str], mime_type: str = DEFAULT_MIME_TYPE) -> str:
    """Normalize an image into a data URL suitable for vision input.

    Accepts a data URL, a bare base64 string, or raw image bytes.
    """
    if isinstance(image, bytes):
        if not image:
            raise ValueError("Image content is required.")
        encoded = base64.b64encode(image).decode("ascii")
        return f"data:{mime_type};base64,{encoded}"

    text = image.strip()
    if not text:
        raise ValueError("Image content is required.")
    if text.startswith("data:"):
        declared, payload = split_data_url(text)
        mime_type = declared
    else:
        payload = text
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Image payload is not valid base64.") from exc
    return f"data:{mime_type};base64,{payload}"


def build_inputs(system_prompt: str, user_prompt: str, *, image_url: str) -> List[Dict[str, Any]]:
    """Build the Responses API input array: instructions first, then the image."""
    return [
        {
            "type": "message",
            "role": "system",
            "content": [{"type": "input_text", "text": system_prompt}],
        },
        {
            "type": "message",
            "role": "user",
            "content": [
                {"type": "input_text", "text": user_prompt},
                {"type": "input_image", "image_url": image_url},
            ],
        },
    ]
