"""Backend-facing alias for shared utilities."""

from __future__ import annotations

from inscribe_shared import (
    IMAGE_EXTENSIONS,
    ErrorCode,
    Result,
    get_logger,
    is_image_file,
    log_structured,
    log_success,
    mask_sensitive_text,
    request_id_var,
    sanitize_error_message,
)

__all__ = [
    "Result",
    "ErrorCode",
    "get_logger",
    "log_success",
    "log_structured",
    "request_id_var",
    "is_image_file",
    "IMAGE_EXTENSIONS",
    "mask_sensitive_text",
    "sanitize_error_message",
]
