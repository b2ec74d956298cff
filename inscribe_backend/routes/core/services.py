"""
Access to the service container attached to the aiohttp application.
"""

from typing import Any, Dict, Optional, Tuple

from aiohttp import web

from ...shared import ErrorCode, Result

APP_KEY_SERVICES: web.AppKey[Dict[str, Any]] = web.AppKey("inscribe_services", dict)


def _require_services(request: web.Request) -> Tuple[Optional[Dict[str, Any]], Optional[Result]]:
    """Return (services, None) or (None, error Result) when the app has none."""
    services = request.app.get(APP_KEY_SERVICES)
    if not services:
        return None, Result.Err(ErrorCode.METADATA_FAILED, "Services are not initialized")
    return services, None
