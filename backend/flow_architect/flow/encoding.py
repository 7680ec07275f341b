"""Turn uploaded image files into base64 frame payloads."""

from __future__ import annotations

import base64
import mimetypes

from .errors import ValidationError
from .models import FramePayload

_MAGIC_PREFIXES = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
)


def sniff_mime_type(data: bytes) -> str | None:
    for prefix, mime_type in _MAGIC_PREFIXES:
        if data.startswith(prefix):
            return mime_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None


def detect_mime_type(data: bytes, mime_type: str | None = None, file_name: str | None = None) -> str | None:
    if mime_type:
        return mime_type
    if file_name:
        guessed, _ = mimetypes.guess_type(file_name)
        if guessed:
            return guessed
    return sniff_mime_type(data)


def encode_image(data: bytes, mime_type: str | None = None, file_name: str | None = None) -> FramePayload:
    """Encode raw upload bytes; anything that is not an image is rejected."""
    if not data:
        raise ValidationError("Uploaded file is empty.")
    resolved = detect_mime_type(data, mime_type, file_name)
    if not resolved or not resolved.startswith("image/"):
        raise ValidationError(f"Unsupported upload type: {resolved or 'unknown'}")
    return FramePayload(data=base64.b64encode(data).decode("ascii"), mime_type=resolved)


def data_url(payload: FramePayload) -> str:
    return f"data:{payload.mime_type};base64,{payload.data}"


def decode_image(payload: FramePayload) -> bytes:
    return base64.b64decode(payload.data)
