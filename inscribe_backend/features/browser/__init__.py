"""Filesystem browsing for the image picker."""
from .service import list_directory, list_drives

__all__ = ["list_directory", "list_drives"]
