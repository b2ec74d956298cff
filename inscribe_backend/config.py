"""
Configuration for the Inscribe backend.

Everything here is read once from the environment at import time and handed
to components as explicit constructor values (see `deps.build_services`).
"""
import logging
import os
import sys
from pathlib import Path

from .utils import env_bool

logger = logging.getLogger(__name__)


def _env_raw(*names: str, default: str | None = None) -> str | None:
    for name in names:
        if not name:
            continue
        val = os.getenv(name)
        if val is not None and str(val).strip() != "":
            return str(val).strip()
    return default


def _env_int(default: int, *names: str, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid integer for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_float(default: float, *names: str, min_value: float | None = None, max_value: float | None = None) -> float:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid float for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_bool(default: bool, *names: str) -> bool:
    for name in names:
        if name and name in os.environ:
            return env_bool(name, default)
    return default


def _default_resources_dir() -> Path:
    # Frozen builds (PyInstaller and friends) unpack bundled resources next to the executable.
    bundle_dir = getattr(sys, "_MEIPASS", None)
    if bundle_dir:
        return Path(bundle_dir)
    return Path(sys.executable).resolve().parent / "resources"


def _resolve_dir(raw: str | None, fallback: Path) -> Path:
    if not raw:
        return fallback
    try:
        return Path(raw).expanduser().resolve()
    except (OSError, RuntimeError):
        logger.warning("Failed to resolve directory %r, using fallback %s", raw, fallback)
        return fallback


# --- Deployment ---
IS_PACKAGED = _env_bool(bool(getattr(sys, "frozen", False)), "INSCRIBE_PACKAGED")
PROJECT_ROOT = _resolve_dir(_env_raw("INSCRIBE_PROJECT_ROOT"), Path(__file__).resolve().parent.parent)
RESOURCES_DIR = _resolve_dir(_env_raw("INSCRIBE_RESOURCES_DIR"), _default_resources_dir())

# --- ExifTool ---
# Explicit override; when unset the path is derived from IS_PACKAGED.
EXIFTOOL_PATH = _env_raw("INSCRIBE_EXIFTOOL_PATH", default=None)
# Seconds; 0 disables the timeout and a stuck tool waits indefinitely.
EXIFTOOL_TIMEOUT = _env_float(0.0, "INSCRIBE_EXIFTOOL_TIMEOUT", min_value=0.0, max_value=600.0)

READ_BACKENDS = ("exiftool", "pillow")
_read_backend_raw = (_env_raw("INSCRIBE_READ_BACKEND", default="exiftool") or "exiftool").lower()
if _read_backend_raw not in READ_BACKENDS:
    logger.warning("Unknown INSCRIBE_READ_BACKEND=%r, using 'exiftool'", _read_backend_raw)
    _read_backend_raw = "exiftool"
READ_BACKEND = _read_backend_raw

# --- HTTP surface ---
SERVER_HOST = _env_raw("INSCRIBE_HOST", default="127.0.0.1") or "127.0.0.1"
SERVER_PORT = _env_int(8765, "INSCRIBE_PORT", min_value=1, max_value=65535)
MAX_JSON_BYTES = _env_int(1024 * 1024, "INSCRIBE_MAX_JSON_SIZE", min_value=1024)
DEBUG = _env_bool(False, "INSCRIBE_DEBUG")
