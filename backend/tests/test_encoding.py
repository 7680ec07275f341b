"""Upload encoding collaborator."""

import base64

import pytest

from flow_architect.flow.encoding import data_url, decode_image, encode_image, sniff_mime_type
from flow_architect.flow.errors import ValidationError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 16


def test_declared_type_wins():
    payload = encode_image(PNG_BYTES, mime_type="image/png", file_name="frame.jpg")

    assert payload.mime_type == "image/png"
    assert payload.data == base64.b64encode(PNG_BYTES).decode("ascii")
    assert decode_image(payload) == PNG_BYTES


def test_type_from_file_name_then_magic_bytes():
    assert encode_image(JPEG_BYTES, file_name="start.jpeg").mime_type == "image/jpeg"
    assert encode_image(PNG_BYTES).mime_type == "image/png"
    assert sniff_mime_type(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "image/webp"


def test_non_images_are_rejected():
    with pytest.raises(ValidationError):
        encode_image(b"%PDF-1.7", mime_type="application/pdf")
    with pytest.raises(ValidationError):
        encode_image(b"plain text")
    with pytest.raises(ValidationError):
        encode_image(b"", mime_type="image/png")


def test_data_url():
    payload = encode_image(PNG_BYTES)
    assert data_url(payload).startswith("data:image/png;base64,iVBORw0KGgo")
