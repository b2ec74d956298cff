"""
HTTP routes consumed by the presentation layer.
Importing this package is side-effect free; route registration is explicit.
"""
from .registry import API_PREFIX, create_app, register_routes

__all__ = ["API_PREFIX", "create_app", "register_routes"]
