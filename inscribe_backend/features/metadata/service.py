"""
Metadata service: the two operations the UI may call for metadata.
"""
from __future__ import annotations

import asyncio
from typing import Any, Mapping

from ...shared import ErrorCode, Result, get_logger
from .fallback_readers import read_comment_fields
from .reader import MetadataReader, MetadataRecord
from .writer import MetadataWriter, WriteStatus

logger = get_logger(__name__)

EDITABLE_FIELD = "UserComment"


class MetadataService:
    """
    Read and write the UserComment of one image at a time.

    Nothing is cached: each read spawns a fresh ExifTool process (or reopens
    the file with Pillow), so a read issued after a write sees the write.
    """

    def __init__(self, reader: MetadataReader, writer: MetadataWriter, read_backend: str = "exiftool"):
        self.reader = reader
        self.writer = writer
        self.read_backend = read_backend

    async def read_image_metadata(self, path: str) -> Result[MetadataRecord]:
        """
        Read the comment fields of an image.

        With the `pillow` backend `userComment` arrives as raw EXIF bytes;
        with `exiftool` it is already text.
        """
        if self.read_backend == "pillow":
            return await asyncio.to_thread(read_comment_fields, path)
        return await self.reader.read_metadata(path)

    async def write_image_metadata(self, path: str, data: Mapping[str, Any]) -> Result[WriteStatus]:
        """
        Write `data["UserComment"]` into the image.

        Args:
            path: Image file path
            data: Mapping with the optional key `UserComment` (absent means "")

        Returns:
            Ok({"status": "success", "message": ...}) or the writer's error
        """
        if not isinstance(data, Mapping):
            return Result.Err(ErrorCode.INVALID_INPUT, "Metadata payload must be an object")
        unknown = sorted(str(k) for k in data.keys() if k != EDITABLE_FIELD)
        if unknown:
            return Result.Err(
                ErrorCode.INVALID_INPUT,
                f"Only {EDITABLE_FIELD} can be written",
                invalid_fields=unknown,
            )
        # An absent field writes an empty comment, clearing the stored one.
        return await self.writer.write_metadata(path, data.get(EDITABLE_FIELD, ""))
