"""
Health endpoint: reports whether ExifTool can be started.
"""
from aiohttp import web

from ...shared import Result
from ...tool_detect import detect_exiftool, reset_tool_cache
from ...utils import parse_bool
from ..core import _json_response, _require_services


def register_health_routes(routes: web.RouteTableDef) -> None:
    @routes.get("/inscribe/health")
    async def health(request):
        svc, error_result = _require_services(request)
        if error_result:
            return _json_response(error_result)
        if parse_bool(request.query.get("refresh"), False):
            reset_tool_cache()
        status = await detect_exiftool(svc["exiftool"])
        return _json_response(Result.Ok({"exiftool": status, "read_backend": svc["metadata"].read_backend}))
