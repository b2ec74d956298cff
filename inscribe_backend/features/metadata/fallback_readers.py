"""
Pillow-based read backend that does not depend on the ExifTool binary.

Unlike ExifTool, Pillow hands back the raw EXIF UserComment bytes, header
included; `decoder.decode_comment` turns them into text.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from PIL import Image, IptcImagePlugin, UnidentifiedImageError

from ...shared import ErrorCode, Result, get_logger

logger = get_logger(__name__)

EXIF_IFD_POINTER = 0x8769
TAG_USER_COMMENT = 0x9286
TAG_IMAGE_DESCRIPTION = 0x010E
IPTC_CAPTION_ABSTRACT = (2, 120)


def _first_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, list):
        value = value[0] if value else None
        if value is None:
            return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _read_iptc_caption(img: Image.Image) -> Optional[str]:
    try:
        iptc = IptcImagePlugin.getiptcinfo(img)
    except (OSError, SyntaxError, ValueError) as exc:
        logger.debug("IPTC block unreadable: %s", exc)
        return None
    if not iptc:
        return None
    return _first_text(iptc.get(IPTC_CAPTION_ABSTRACT))


def read_comment_fields(path: str) -> Result[Dict[str, Any]]:
    """
    Read `userComment` (raw bytes) and `description` from an image with Pillow.

    Returns Ok({}) for images that carry neither field.
    """
    out: Dict[str, Any] = {}
    try:
        with Image.open(path) as img:
            exif = img.getexif()
            exif_ifd = exif.get_ifd(EXIF_IFD_POINTER) if exif else {}
            user_comment = exif_ifd.get(TAG_USER_COMMENT) if exif_ifd else None
            if user_comment:
                out["userComment"] = user_comment

            caption = _read_iptc_caption(img)
            if not caption and exif:
                caption = _first_text(exif.get(TAG_IMAGE_DESCRIPTION))
            if caption:
                out["description"] = caption
    except FileNotFoundError:
        return Result.Err(ErrorCode.NOT_FOUND, f"File not found: {path}")
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        logger.error(f"Pillow failed to read metadata from {path}: {exc}")
        return Result.Err(ErrorCode.PARSE_ERROR, f"Failed to parse image metadata: {exc}")
    return Result.Ok(out)
