"""Inline image references: ``data:<mime>;base64,<payload>`` to and from bytes.

An inline ref carries its own type tag. Anything else (``https://...``,
``/data/muses/...``, ``file://...``) is an externalized ref.
"""

import base64
import binascii
import re

from dailymuse.core.exceptions import MalformedAssetError

_DATA_URL_RE = re.compile(r"^data:(?P<mime>image/[a-z0-9.+-]+);base64,(?P<payload>.*)$", re.IGNORECASE | re.DOTALL)

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


def is_inline(ref: str) -> bool:
    return bool(ref) and ref.startswith("data:")


def encode(data: bytes, mime_hint: str = "image/jpeg") -> str:
    """Wrap raw image bytes as an inline data URL."""
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_hint};base64,{payload}"


def _match(ref: str) -> re.Match:
    match = _DATA_URL_RE.match(ref or "")
    if not match:
        raise MalformedAssetError(f"Not an inline image reference: {ref[:40]!r}")
    return match


def decode(ref: str) -> bytes:
    """Decode an inline data URL to raw bytes. Raises MalformedAssetError."""
    payload = _match(ref).group("payload").strip()
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedAssetError(f"Inline image payload is not valid base64: {e}") from e


def mime_type(ref: str) -> str:
    """Declared MIME type of an inline ref."""
    return _match(ref).group("mime").lower()


def extension_for(mime: str) -> str:
    return _EXTENSIONS.get(mime.lower(), "bin")


def sniff_mime(data: bytes) -> str:
    """Guess an image MIME type from magic bytes; defaults to JPEG."""
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    return "image/jpeg"
