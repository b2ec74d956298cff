"""
Metadata endpoints: read and write the image comment.
"""
from aiohttp import web

from ...shared import ErrorCode, Result, get_logger
from ..core import _json_response, _read_json, _require_services, safe_error_message

logger = get_logger(__name__)


def register_metadata_routes(routes: web.RouteTableDef) -> None:
    """Register metadata read/write routes."""

    @routes.get("/inscribe/metadata")
    async def get_metadata(request):
        """
        Read the comment fields of an image.

        Query params:
            path: Absolute image path
        """
        svc, error_result = _require_services(request)
        if error_result:
            return _json_response(error_result)

        file_path = (request.query.get("path") or "").strip()
        if not file_path:
            return _json_response(Result.Err(ErrorCode.INVALID_INPUT, "Missing 'path' parameter"))

        try:
            result = await svc["metadata"].read_image_metadata(file_path)
        except Exception as exc:
            logger.exception("Unexpected metadata read failure")
            result = Result.Err(ErrorCode.METADATA_FAILED, safe_error_message(exc, "Failed to read metadata"))
        return _json_response(result)

    @routes.post("/inscribe/metadata")
    async def post_metadata(request):
        """
        Write the image comment.

        Body:
            {"path": "...", "UserComment": "..."}
        """
        svc, error_result = _require_services(request)
        if error_result:
            return _json_response(error_result)

        body = await _read_json(request)
        if not body.ok:
            return _json_response(body)
        payload = dict(body.data or {})

        file_path = str(payload.pop("path", "") or "").strip()
        if not file_path:
            return _json_response(Result.Err(ErrorCode.INVALID_INPUT, "Missing 'path'"))

        try:
            result = await svc["metadata"].write_image_metadata(file_path, payload)
        except Exception as exc:
            logger.exception("Unexpected metadata write failure")
            result = Result.Err(ErrorCode.METADATA_FAILED, safe_error_message(exc, "Failed to write metadata"))
        return _json_response(result)
