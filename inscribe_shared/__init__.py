"""Shared utilities for the Inscribe backend."""
from .errors import mask_sensitive_text, sanitize_error_message
from .log import get_logger, log_structured, log_success, request_id_var
from .result import Result
from .types import IMAGE_EXTENSIONS, ErrorCode, is_image_file

__all__ = [
    "Result",
    "get_logger",
    "log_success",
    "log_structured",
    "request_id_var",
    "ErrorCode",
    "IMAGE_EXTENSIONS",
    "is_image_file",
    "mask_sensitive_text",
    "sanitize_error_message",
]
