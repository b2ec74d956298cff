"""
Filesystem browsing endpoints for the image picker.
"""
import asyncio

from aiohttp import web

from ...features.browser import list_directory, list_drives
from ...utils import parse_bool
from ..core import _json_response


def register_filesystem_routes(routes: web.RouteTableDef) -> None:
    """Register directory listing and drive routes."""

    @routes.get("/inscribe/fs/list")
    async def list_files(request):
        """
        List a directory.

        Query params:
            path: Absolute directory path
            images_only: Keep folders and image files only
        """
        path_value = request.query.get("path") or ""
        images_only = parse_bool(request.query.get("images_only"), False)
        result = await asyncio.to_thread(list_directory, path_value, images_only=images_only)
        return _json_response(result)

    @routes.get("/inscribe/fs/drives")
    async def get_drives(request):
        """List filesystem roots."""
        result = await asyncio.to_thread(list_drives)
        return _json_response(result)
