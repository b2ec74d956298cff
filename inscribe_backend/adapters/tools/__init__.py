"""Tool adapters for external utilities."""
from .exiftool import ExifToolInvoker, ToolInvocation, ToolResult, resolve_exiftool_path

__all__ = ["ExifToolInvoker", "ToolInvocation", "ToolResult", "resolve_exiftool_path"]
