"""
Route registration.
Builds the aiohttp application the presentation layer talks to.
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable
from typing import Any, Dict, Optional

from aiohttp import web

from ..shared import get_logger, request_id_var
from .core import APP_KEY_SERVICES
from .handlers import (
    register_filesystem_routes,
    register_health_routes,
    register_metadata_routes,
)

API_PREFIX = "/inscribe/"

logger = get_logger(__name__)


@web.middleware
async def request_id_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    """Tag log lines of one request with a correlation id."""
    rid = (request.headers.get("X-Request-ID") or "").strip()[:64] or uuid.uuid4().hex[:12]
    token = request_id_var.set(rid)
    try:
        response = await handler(request)
    finally:
        request_id_var.reset(token)
    response.headers.setdefault("X-Request-ID", rid)
    return response


@web.middleware
async def security_headers_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    """Apply strict headers to API responses; metadata must never be cached."""
    response = await handler(request)
    if not (request.path or "").startswith(API_PREFIX):
        return response

    response.headers.setdefault("Content-Security-Policy", "default-src 'none'")
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Cache-Control", "no-store, no-cache, must-revalidate")
    response.headers.setdefault("Pragma", "no-cache")
    return response


def register_routes(routes: web.RouteTableDef) -> None:
    """Register every handler group on a route table."""
    register_metadata_routes(routes)
    register_filesystem_routes(routes)
    register_health_routes(routes)


def create_app(services: Optional[Dict[str, Any]] = None) -> web.Application:
    """
    Build the aiohttp application.

    Args:
        services: Service container (default: `deps.build_services()`)
    """
    if services is None:
        from ..deps import build_services

        services = build_services()

    app = web.Application(middlewares=[request_id_middleware, security_headers_middleware])
    app[APP_KEY_SERVICES] = services

    routes = web.RouteTableDef()
    register_routes(routes)
    app.add_routes(routes)
    logger.debug("Registered %d routes", len(routes))
    return app
