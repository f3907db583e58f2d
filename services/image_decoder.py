"""Image decoder service.

Turns uploaded bytes into a displayable data URL using Pillow. Formats that
browsers render natively are passed through untouched; anything else (TIFF
exports from Sentinel-2 or Landsat, for example) is re-encoded as PNG.

Public class: `ImageDecoder`

Example:
    decoder = ImageDecoder()
    decoded = await decoder.decode(raw_bytes)
    decoded.data_url  # "data:image/png;base64,..."
"""
from __future__ import annotations

import asyncio
import base64
import io
from dataclasses import dataclass
from typing import Tuple

from PIL import Image

from services.errors import DecodeError

WEB_FORMATS = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}


@dataclass(frozen=True)
class DecodedImage:
    """Displayable form of an uploaded image."""

    data_url: str
    mime_type: str
    size: Tuple[int, int]


class ImageDecoder:
    """Decode uploaded image bytes into a data URL.

    Args:
        background: Color used when flattening images with alpha during PNG
            conversion of non-web formats. Defaults to black, which reads
            best against the dashboard.
    """

    def __init__(self, background: Tuple[int, int, int] | None = None):
        self.background = background or (0, 0, 0)

    async def decode(self, raw: bytes) -> DecodedImage:
        """Decode in a worker thread so the event loop stays responsive."""
        return await asyncio.to_thread(self.decode_sync, raw)

    def decode_sync(self, raw: bytes) -> DecodedImage:
        """Decode `raw` image bytes.

        Raises:
            DecodeError: If the bytes are empty or not a supported image format.
        """
        if not raw:
            raise DecodeError()

        try:
            with Image.open(io.BytesIO(raw)) as probe:
                probe.verify()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise DecodeError() from exc

        # verify() leaves the image unusable, so reopen for real work
        with Image.open(io.BytesIO(raw)) as src:
            try:
                src.load()
            except Exception as exc:  # pylint: disable=broad-exception-caught
                raise DecodeError() from exc

            size = src.size
            mime_type = WEB_FORMATS.get((src.format or "").upper())
            if mime_type is not None:
                payload = raw
            else:
                payload = self._to_png(src)
                mime_type = "image/png"

        encoded = base64.b64encode(payload).decode("ascii")
        return DecodedImage(data_url=f"data:{mime_type};base64,{encoded}", mime_type=mime_type, size=size)

    def _to_png(self, src: Image.Image) -> bytes:
        # Flatten alpha against the background color
        if src.mode in ("RGBA", "LA") or "transparency" in src.info:
            rgba = src.convert("RGBA")
            flattened = Image.new("RGB", rgba.size, self.background)
            flattened.paste(rgba, mask=rgba.split()[3])
        else:
            flattened = src.convert("RGB")

        out_io = io.BytesIO()
        flattened.save(out_io, format="PNG", optimize=True)
        return out_io.getvalue()
