"""
Helpers for sanitizing error messages before they reach the UI.

Whether to sanitize at all is the caller's decision (see the backend's
`config.DEBUG`); these helpers always mask.
"""
from __future__ import annotations

import os
import re
from typing import Any, Optional

_WINDOWS_PATH_RE = re.compile(r"[A-Za-z]:\\[^\s]+")
_UNC_PATH_RE = re.compile(r"\\\\[^\s\\]+\\[^\s]+")
_UNIX_PATH_RE = re.compile(r"(?<![A-Za-z0-9:/?&=#%])/(?!/)[^\s#?]+")


def _mask_paths(value: str) -> str:
    """Mask path-looking substrings to avoid leaking filesystem structure."""
    cleaned = _WINDOWS_PATH_RE.sub("[path]", value)
    cleaned = _UNC_PATH_RE.sub("[path]", cleaned)
    cleaned = _UNIX_PATH_RE.sub("[path]", cleaned)
    return cleaned


def mask_sensitive_text(value: Optional[str]) -> Optional[str]:
    """Replace the working directory and path-looking substrings in `value`."""
    if not value:
        return value
    cwd = os.getcwd()
    # A cwd of "/" would replace every separator.
    if len(cwd) > 1:
        value = value.replace(cwd, "[cwd]")
    return _mask_paths(value)


def sanitize_error_message(exc: Any, fallback: str) -> str:
    """
    Build a safe error message for clients.

    Args:
        exc: Exception or raw value to sanitize.
        fallback: Fallback message to show when nothing meaningful remains.

    Returns:
        A single-line string suitable for inclusion in API responses.
    """
    if not fallback:
        fallback = "An error occurred"

    if exc is None:
        return fallback

    raw = str(exc)
    if not raw:
        return fallback

    sanitized = " ".join(mask_sensitive_text(raw).splitlines()).strip()
    if sanitized:
        return f"{fallback}: {sanitized[:200]}"
    return fallback
