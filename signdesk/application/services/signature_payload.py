"""Decoding and validation of captured signature images.

Signature pads deliver a data URL (``data:image/png;base64,...``); bare
base64 is accepted too. Only PNG and JPEG payloads are stored.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

from signdesk.domain.exceptions import InvalidSignaturePayload

_DATA_URL_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[\w-]+=[\w.-]+)*);base64,(?P<data>.*)$",
    re.DOTALL,
)

_PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
_JPEG_MAGIC = b"\xff\xd8\xff"

_DECLARED_ALIASES: dict[str, tuple[str, ...]] = {
    "image/png": ("image/png",),
    "image/jpeg": ("image/jpeg", "image/jpg"),
}


@dataclass(frozen=True)
class SignatureImage:
    """Decoded signature image ready for upload."""

    content: bytes
    content_type: str
    extension: str

    @property
    def size(self) -> int:
        return len(self.content)


def _sniff_image_type(content: bytes) -> tuple[str, str] | None:
    """Return (content_type, extension) from magic bytes, or None if not PNG/JPEG."""
    if content.startswith(_PNG_MAGIC):
        return "image/png", "png"
    if content.startswith(_JPEG_MAGIC):
        return "image/jpeg", "jpg"
    return None


def _split_data_url(data: str) -> tuple[str | None, str]:
    """Return (declared mime type, base64 part). Bare base64 has no mime type."""
    if not data.startswith("data:"):
        return None, data
    match = _DATA_URL_RE.match(data)
    if not match:
        raise InvalidSignaturePayload("malformed data URL")
    return match.group("mime"), match.group("data")


def decode_signature_payload(data: str | None, max_bytes: int) -> SignatureImage:
    """Decode a signature payload and check it is a real image of acceptable size.

    Args:
        data: Data URL or bare base64 string.
        max_bytes: Maximum decoded size in bytes.

    Returns:
        SignatureImage with raw bytes and sniffed content type.

    Raises:
        InvalidSignaturePayload: Empty, not base64, not PNG/JPEG, declared
            type does not match content, or larger than max_bytes.
    """
    if not data or not data.strip():
        raise InvalidSignaturePayload("signature is empty")
    declared, encoded = _split_data_url(data.strip())
    if declared is not None and not declared.startswith("image/"):
        raise InvalidSignaturePayload(f"unsupported media type {declared}")
    encoded = "".join(encoded.split())
    if not encoded:
        raise InvalidSignaturePayload("signature is empty")
    try:
        content = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidSignaturePayload("not valid base64") from e
    if len(content) > max_bytes:
        raise InvalidSignaturePayload(
            f"image is {len(content)} bytes, maximum is {max_bytes}"
        )
    sniffed = _sniff_image_type(content)
    if sniffed is None:
        raise InvalidSignaturePayload("content is not a PNG or JPEG image")
    content_type, extension = sniffed
    if declared is not None and declared not in _DECLARED_ALIASES[content_type]:
        raise InvalidSignaturePayload(
            f"declared {declared} but content is {content_type}"
        )
    return SignatureImage(content=content, content_type=content_type, extension=extension)
