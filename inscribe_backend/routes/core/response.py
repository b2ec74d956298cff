"""
Response utilities for route handlers.
"""

import math

from aiohttp import web

from ...config import DEBUG
from ...shared import Result, mask_sensitive_text, sanitize_error_message


def safe_error_message(exc: Exception, generic_message: str) -> str:
    """
    Return a safe message for clients.

    Paths are masked unless INSCRIBE_DEBUG is enabled.
    """
    if DEBUG:
        return f"{generic_message}: {exc}"
    return sanitize_error_message(exc, generic_message)


def _json_response(result: Result, status: int | None = None) -> web.Response:
    """
    Convert Result to JSON response.

    Unless INSCRIBE_DEBUG is on, the error text and string meta of a failed
    result have paths masked.

    Args:
        result: Result object
        status: HTTP status code (optional, defaults to 200)

    Returns:
        aiohttp web.Response
    """
    # Business / validation errors return HTTP 200 with {ok:false,...}.
    # Use explicit status only for genuine server bugs/unhandled exceptions.
    if status is None:
        status = 200

    error = result.error
    meta = result.meta
    if not result.ok and not DEBUG:
        error = mask_sensitive_text(error)
        meta = {k: mask_sensitive_text(v) if isinstance(v, str) else v for k, v in (meta or {}).items()}

    payload = _sanitize_json_payload(
        {
            "ok": result.ok,
            "data": result.data,
            "error": error,
            "code": result.code,
            "meta": meta,
        }
    )
    return web.json_response(payload, status=status)


def _sanitize_json_payload(value):
    """
    Normalize payload values so they are always valid strict JSON.
    - Converts NaN/Infinity floats to None.
    - Bytes (Pillow backend UserComment) become a list of byte values.
    - Recurses through dict/list/tuple containers.
    """
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    if isinstance(value, dict):
        return {k: _sanitize_json_payload(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize_json_payload(v) for v in value]
    return value
