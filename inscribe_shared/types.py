"""
Shared types, enums, and constants.
"""
import os
from enum import Enum
from typing import Final


class ErrorCode(str, Enum):
    """Standardized error codes (string enum)."""

    # Client / validation
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_JSON = "INVALID_JSON"
    NOT_FOUND = "NOT_FOUND"

    # Filesystem
    DIR_NOT_FOUND = "DIR_NOT_FOUND"
    LIST_FAILED = "LIST_FAILED"

    # Tool availability / lifecycle
    TOOL_MISSING = "TOOL_MISSING"
    SPAWN_FAILED = "SPAWN_FAILED"
    TIMEOUT = "TIMEOUT"

    # Tool / parsing
    EXIFTOOL_ERROR = "EXIFTOOL_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    DECODE_ERROR = "DECODE_ERROR"

    # Operation errors
    METADATA_FAILED = "METADATA_FAILED"


# Extensions the file browser treats as selectable images
IMAGE_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".tiff", ".tif", ".svg"}
)


def is_image_file(filename: str) -> bool:
    """
    Check whether a file name looks like an image by extension.

    Args:
        filename: File name or path

    Returns:
        True for known image extensions (case-insensitive)
    """
    ext = os.path.splitext(str(filename or ""))[1].lower()
    return ext in IMAGE_EXTENSIONS
