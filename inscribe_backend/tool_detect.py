"""
ExifTool detection for the health endpoint.
Cached per executable to avoid spawning `exiftool -ver` on every request.
"""
from typing import Any, Dict

from .adapters.tools import ExifToolInvoker
from .shared import ErrorCode, get_logger

logger = get_logger(__name__)

# executable -> last detection status
_TOOL_STATUS: Dict[str, Dict[str, Any]] = {}


async def detect_exiftool(invoker: ExifToolInvoker) -> Dict[str, Any]:
    """
    Return {"available", "version", "executable"} for the invoker's ExifTool.
    """
    cached = _TOOL_STATUS.get(invoker.executable)
    if cached is not None:
        return dict(cached)

    status: Dict[str, Any] = {
        "available": False,
        "version": None,
        "executable": invoker.executable,
    }
    if not invoker.is_available():
        logger.warning("ExifTool not found: %s", invoker.executable or "<unset>")
        status["error"] = ErrorCode.TOOL_MISSING.value
        _TOOL_STATUS[invoker.executable] = status
        return dict(status)

    res = await invoker.invoke(["-ver"])
    if res.ok and res.data is not None:
        version = res.data.stdout_text.strip()
        status["available"] = True
        status["version"] = version or None
        logger.info("ExifTool detected: version %s", version or "<unknown>")
    else:
        logger.warning("ExifTool not usable: %s", res.error)
        status["error"] = res.code

    _TOOL_STATUS[invoker.executable] = status
    return dict(status)


def reset_tool_cache() -> None:
    """Reset tool detection cache (for testing or manual refresh)."""
    _TOOL_STATUS.clear()
