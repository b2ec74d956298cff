"""
Recover readable text from a UserComment value.

Two value shapes reach this module:
- ExifTool JSON (default read backend): the tool already decoded the field,
  so the value is a string. Numbers still come from in-process callers.
- Pillow (library read backend): the raw EXIF bytes, whose first 8 bytes are
  a character-code header (`ASCII\\0\\0\\0`, `UNICODE\\0`, `JIS\\0\\0\\0\\0\\0`).
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Tuple

from ...shared import ErrorCode, get_logger, log_structured

logger = get_logger(__name__)

HEADER_LENGTH = 8

# Header prefix (NULs stripped) -> codec for the bytes after the header
_HEADER_ENCODINGS: Tuple[Tuple[str, str], ...] = (
    ("ASCII", "ascii"),
    ("UNICODE", "utf-16-le"),
    ("JIS", "shift_jis"),
)


def _as_bytes(raw: Any) -> Optional[bytes]:
    """Coerce the byte-like shapes a library may hand back; None if not byte-like."""
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw)
    if isinstance(raw, Mapping):
        # An object of byte values keyed by position: {"0": 85, "1": 78, ...}
        try:
            ordered = sorted(raw.items(), key=lambda kv: int(kv[0]))
            return bytes(int(v) for _, v in ordered)
        except (TypeError, ValueError):
            return None
    if isinstance(raw, (list, tuple)):
        try:
            return bytes(int(v) for v in raw)
        except (TypeError, ValueError):
            return None
    return None


def _split_header(data: bytes) -> Tuple[bytes, str]:
    if len(data) < HEADER_LENGTH:
        return data, "utf-8"
    header = data[:HEADER_LENGTH].replace(b"\x00", b"").decode("latin-1")
    for prefix, encoding in _HEADER_ENCODINGS:
        if header.startswith(prefix):
            return data[HEADER_LENGTH:], encoding
    return data, "utf-8"


def _clean(text: str) -> str:
    return text.strip().strip("\x00").strip()


def decode_comment_bytes(data: bytes) -> str:
    """
    Decode a UserComment byte sequence using its 8-byte character-code header.

    Unknown headers mean the whole sequence is UTF-8. If the selected codec
    fails, the full sequence is retried as UTF-8; if that fails too the
    result is an empty string.
    """
    body, encoding = _split_header(data)
    try:
        return _clean(body.decode(encoding))
    except UnicodeDecodeError as exc:
        logger.warning("Could not decode UserComment bytes with %s: %s", encoding, exc)

    try:
        return _clean(data.decode("utf-8"))
    except UnicodeDecodeError as exc:
        log_structured(
            logger,
            logging.WARNING,
            "UserComment fallback UTF-8 decoding failed",
            code=ErrorCode.DECODE_ERROR.value,
            length=len(data),
            reason=str(exc),
        )
        return ""


def decode_comment(raw: Any) -> str:
    """
    Normalize a raw UserComment value into display text. Never raises.

    Args:
        raw: str, number, bytes-like, list of byte values, or mapping of
             index -> byte value

    Returns:
        Trimmed text, or "" when nothing readable is present
    """
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw.strip()
    if isinstance(raw, bool):
        return ""
    if isinstance(raw, (int, float)):
        return str(raw).strip()

    data = _as_bytes(raw)
    if data is None:
        logger.warning("Unsupported UserComment value type: %s", type(raw).__name__)
        return ""
    if not data:
        return ""
    return decode_comment_bytes(data)


def pick_comment(record: Optional[Mapping[str, Any]]) -> str:
    """Text to show for a metadata record: the UserComment, else the description."""
    if not record:
        return ""
    comment = decode_comment(record.get("userComment"))
    if comment:
        return comment
    return decode_comment(record.get("description"))
