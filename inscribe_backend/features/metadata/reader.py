"""
Read the comment fields of an image through ExifTool's JSON output.
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict, List

from ...adapters.tools import ExifToolInvoker
from ...adapters.tools.exiftool import _validate_target_path
from ...shared import ErrorCode, Result, get_logger

logger = get_logger(__name__)

MetadataRecord = Dict[str, Any]

CHARSET_ARGS: List[str] = ["-charset", "UTF8", "-charset", "iptc=UTF8", "-charset", "exif=UTF8"]
READ_TAGS: List[str] = ["-UserComment", "-Description", "-EXIF:UserComment", "-IPTC:Caption-Abstract"]

# (result key, tool field names in increasing precedence)
FIELD_MAP = (
    ("userComment", ("UserComment", "EXIF:UserComment")),
    ("description", ("Description", "IPTC:Caption-Abstract")),
)


def filename_charset_args() -> List[str]:
    # Windows command lines are not UTF-8; tell ExifTool how file names are encoded.
    return ["-charset", "filename=utf8"] if os.name == "nt" else []


def build_read_args(path: str) -> List[str]:
    return [*CHARSET_ARGS, "-json", *READ_TAGS, *filename_charset_args(), path]


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return True


def map_tool_fields(tags: Dict[str, Any]) -> MetadataRecord:
    """Map ExifTool tag names onto `userComment` / `description`."""
    record: MetadataRecord = {}
    for key, candidates in FIELD_MAP:
        for name in candidates:
            value = tags.get(name)
            if _has_value(value):
                record[key] = value
    return record


def parse_read_output(stdout: str) -> Result[MetadataRecord]:
    """
    Parse `exiftool -json` output for a single file.

    An empty array (or no output) is a file without those tags, not an error.
    """
    text = (stdout or "").strip()
    if not text:
        return Result.Ok({})
    try:
        # Numeric-looking tags arrive as bare JSON numbers; keep their literal text.
        data = json.loads(text, parse_float=str, parse_int=str)
    except json.JSONDecodeError as exc:
        logger.error(f"ExifTool JSON parse error: {exc}")
        return Result.Err(ErrorCode.PARSE_ERROR, f"Failed to parse ExifTool output: {exc}")

    if data is None:
        return Result.Ok({})
    if not isinstance(data, list):
        return Result.Err(ErrorCode.PARSE_ERROR, "ExifTool returned non-list JSON")
    if not data:
        return Result.Ok({})

    first = data[0]
    if not isinstance(first, dict):
        return Result.Err(ErrorCode.PARSE_ERROR, f"ExifTool returned non-object item: {type(first).__name__}")
    return Result.Ok(map_tool_fields(first))


class MetadataReader:
    """Reads `userComment` / `description` from an image with one ExifTool call."""

    def __init__(self, invoker: ExifToolInvoker):
        self.invoker = invoker

    async def read_metadata(self, path: str) -> Result[MetadataRecord]:
        """
        Read metadata from file using ExifTool.

        Args:
            path: Image file path

        Returns:
            Result with the metadata record, or the invoker's / parser's error
        """
        path_res = _validate_target_path(path)
        if not path_res.ok:
            return Result.Err(path_res.code, path_res.error or "Invalid file path")

        res = await self.invoker.invoke(build_read_args(path))
        if not res.ok or res.data is None:
            logger.warning(f"Failed to read metadata from {path}: {res.error}")
            return Result.Err(res.code, res.error or "ExifTool read failed", **(res.meta or {}))

        return parse_read_output(res.data.stdout_text)
