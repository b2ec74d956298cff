"""
Core utilities for route handlers.
"""
from .request_json import _read_json
from .response import _json_response, safe_error_message
from .services import APP_KEY_SERVICES, _require_services

__all__ = [
    "_json_response",
    "safe_error_message",
    "_read_json",
    "_require_services",
    "APP_KEY_SERVICES",
]
