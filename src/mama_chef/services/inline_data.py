"""Conversion between uploaded images and inline request data."""

import base64
import binascii
import re

from mama_chef.domain.chat import InlineImage
from mama_chef.domain.errors import InvalidImage

_DATA_URL_RE = re.compile(r"^data:(image/[a-zA-Z+.-]+);base64,(.+)$", re.DOTALL)


def encode_image(image_bytes: bytes) -> InlineImage:
    """Wrap raw image bytes as inline data."""
    if not image_bytes:
        raise InvalidImage("Image is empty")
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return InlineImage(mime_type=_detect_mime_type(image_bytes), data=encoded)


def decode_data_url(data_url: str) -> InlineImage:
    """Split a base64 data URL into mime type and payload."""
    match = _DATA_URL_RE.match(data_url.strip())
    if match is None:
        raise InvalidImage("Expected a base64 image data URL")
    mime_type, payload = match.group(1), "".join(match.group(2).split())
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImage("Image payload is not valid base64") from exc
    return InlineImage(mime_type=mime_type, data=payload)


def to_data_url(image: InlineImage) -> str:
    """Render inline data back into a data URL."""
    return f"data:{image.mime_type};base64,{image.data}"


def to_request_part(image: InlineImage) -> dict[str, object]:
    """Return the request part carrying the image."""
    return {"inlineData": {"mimeType": image.mime_type, "data": image.data}}


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
