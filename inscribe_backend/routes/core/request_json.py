"""
Safe JSON request parsing with size limits.

Never raises to handlers (returns Result).
"""

from __future__ import annotations

import json
from typing import Optional

from aiohttp import web

from ...config import MAX_JSON_BYTES
from ...shared import ErrorCode, Result

MIN_JSON_BYTES = 1024
REQUEST_STREAM_CHUNK_BYTES = 64 * 1024


async def _read_json(request: web.Request, *, max_bytes: Optional[int] = None) -> Result[dict]:
    """
    Read and decode a JSON object request body with a strict max size.

    Returns:
        Result.Ok(dict) or Result.Err(code, error, ...)
    """
    limit = max(MIN_JSON_BYTES, int(max_bytes) if max_bytes is not None else MAX_JSON_BYTES)

    content_length = request.content_length
    if content_length is not None and content_length > limit:
        return Result.Err(
            ErrorCode.INVALID_INPUT,
            f"JSON body too large ({content_length} > {limit})",
            limit=limit,
            size=content_length,
        )

    buf = bytearray()
    async for chunk in request.content.iter_chunked(REQUEST_STREAM_CHUNK_BYTES):
        buf.extend(chunk)
        if len(buf) > limit:
            return Result.Err(ErrorCode.INVALID_INPUT, f"JSON body too large (> {limit})", limit=limit)

    if not buf:
        return Result.Ok({})
    try:
        payload = json.loads(bytes(buf).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return Result.Err(ErrorCode.INVALID_JSON, f"Invalid JSON body: {exc}")
    if not isinstance(payload, dict):
        return Result.Err(ErrorCode.INVALID_JSON, "JSON body must be an object")
    return Result.Ok(payload)
