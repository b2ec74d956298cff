"""
Write the UserComment of an image through ExifTool, streaming the text over stdin.
"""
from __future__ import annotations

from typing import Dict, List

from ...adapters.tools import ExifToolInvoker
from ...adapters.tools.exiftool import _validate_target_path
from ...shared import ErrorCode, Result, get_logger
from .reader import CHARSET_ARGS, filename_charset_args

logger = get_logger(__name__)

WriteStatus = Dict[str, str]

# `<=-` makes ExifTool read the new value from stdin; argv has length and quoting limits.
USER_COMMENT_FROM_STDIN = "-UserComment<=-"
WRITE_SUCCESS_MESSAGE = "Metadata written successfully."


def build_write_args(path: str) -> List[str]:
    return ["-overwrite_original", *CHARSET_ARGS, *filename_charset_args(), path, USER_COMMENT_FROM_STDIN]


def encode_comment(comment: str) -> bytes:
    return comment.encode("utf-8")


def _validate_comment(comment: object) -> Result[str]:
    if not isinstance(comment, str):
        return Result.Err(ErrorCode.INVALID_INPUT, "UserComment must be a string")
    if "\x00" in comment:
        return Result.Err(ErrorCode.INVALID_INPUT, "UserComment must not contain NUL characters")
    return Result.Ok(comment)


class MetadataWriter:
    """
    Replaces the UserComment of an image in place (no backup file is kept).

    The caller re-reads to confirm the stored value; the writer does not.
    """

    def __init__(self, invoker: ExifToolInvoker):
        self.invoker = invoker

    async def write_metadata(self, path: str, comment: str) -> Result[WriteStatus]:
        path_res = _validate_target_path(path)
        if not path_res.ok:
            return Result.Err(path_res.code, path_res.error or "Invalid file path")
        comment_res = _validate_comment(comment)
        if not comment_res.ok:
            return Result.Err(comment_res.code, comment_res.error or "Invalid comment")

        res = await self.invoker.invoke(build_write_args(path), encode_comment(comment))
        if not res.ok:
            logger.warning(f"Failed to write metadata to {path}: {res.error}")
            return Result.Err(res.code, res.error or "ExifTool write failed", **(res.meta or {}))

        logger.debug(f"Metadata written to {path}")
        return Result.Ok({"status": "success", "message": WRITE_SUCCESS_MESSAGE})
