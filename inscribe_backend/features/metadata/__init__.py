"""Metadata feature: ExifTool read/write of the image comment."""
from .decoder import decode_comment, pick_comment
from .reader import MetadataReader, MetadataRecord
from .service import MetadataService
from .writer import MetadataWriter, WriteStatus

__all__ = [
    "MetadataReader",
    "MetadataRecord",
    "MetadataWriter",
    "WriteStatus",
    "MetadataService",
    "decode_comment",
    "pick_comment",
]
