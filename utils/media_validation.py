"""Validation helpers for uploaded satellite images."""

from fastapi import HTTPException, UploadFile

ALLOWED_IMAGE_EXTENSIONS = (
    ".jpg",
    ".jpeg",
    ".png",
    ".webp",
    ".gif",
    ".tif",
    ".tiff",
    ".bmp",
)


def validate_image_file(image_file: UploadFile) -> None:
    """Validate that the upload claims to be an image.

    Browsers send `image/*` for anything picked through an `accept="image/*"`
    input; when the content type is missing or generic, fall back to the
    filename extension. Pillow makes the final call during decoding.
    """
    content_type = (image_file.content_type or "").lower().split(";", 1)[0].strip()
    if content_type.startswith("image/"):
        return
    if content_type and content_type != "application/octet-stream":
        raise HTTPException(status_code=415, detail=f"Unsupported image content type: {image_file.content_type}")
    filename = (image_file.filename or "").lower()
    if not filename.endswith(ALLOWED_IMAGE_EXTENSIONS):
        raise HTTPException(status_code=415, detail="Unsupported or missing image content type.")


async def read_image_bytes(image_file: UploadFile, max_bytes: int) -> bytes:
    """Read validated image bytes, ensuring the upload is neither empty nor oversized."""
    validate_image_file(image_file)
    image_bytes = await image_file.read(max_bytes + 1)
    if not image_bytes:
        raise HTTPException(status_code=400, detail="Uploaded image is empty.")
    if len(image_bytes) > max_bytes:
        raise HTTPException(status_code=413, detail=f"Uploaded image exceeds {max_bytes} bytes.")
    return image_bytes
