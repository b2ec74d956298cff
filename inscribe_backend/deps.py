"""
Dependency injection - builds services.
Simple, debug-friendly DI without framework magic.
"""

from typing import Any, Dict, Optional

from .adapters.tools import ExifToolInvoker, resolve_exiftool_path
from .config import (
    EXIFTOOL_PATH,
    EXIFTOOL_TIMEOUT,
    IS_PACKAGED,
    PROJECT_ROOT,
    READ_BACKEND,
    RESOURCES_DIR,
)
from .features.metadata import MetadataReader, MetadataService, MetadataWriter
from .shared import get_logger, log_success

logger = get_logger(__name__)


def exiftool_executable(explicit: Optional[str] = None, *, is_packaged: bool = IS_PACKAGED) -> str:
    """Explicit path wins; otherwise the bundled location for this deployment."""
    if explicit:
        return explicit
    return resolve_exiftool_path(is_packaged, RESOURCES_DIR, PROJECT_ROOT)


def build_services(
    exiftool_path: Optional[str] = None,
    *,
    timeout: Optional[float] = None,
    read_backend: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build all services.

    Args:
        exiftool_path: ExifTool executable (default: INSCRIBE_EXIFTOOL_PATH or the bundled copy)
        timeout: ExifTool timeout in seconds (default: INSCRIBE_EXIFTOOL_TIMEOUT)
        read_backend: "exiftool" or "pillow" (default: INSCRIBE_READ_BACKEND)

    Returns:
        dict of service instances
    """
    executable = exiftool_executable(exiftool_path or EXIFTOOL_PATH)
    invoker = ExifToolInvoker(
        executable,
        timeout=timeout if timeout is not None else EXIFTOOL_TIMEOUT,
    )
    if invoker.is_available():
        log_success(logger, f"ExifTool found at {executable}")
    else:
        logger.warning("ExifTool not found at %s - reads and writes will fail to spawn", executable)

    backend = read_backend or READ_BACKEND
    metadata = MetadataService(MetadataReader(invoker), MetadataWriter(invoker), read_backend=backend)
    logger.info("Metadata read backend: %s", backend)
    return {
        "exiftool": invoker,
        "metadata": metadata,
    }
