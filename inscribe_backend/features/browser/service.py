"""
Filesystem browser helpers: directory listing and drive roots.

Listings are read fresh on every call; nothing is cached or watched.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import TypedDict

from ...shared import ErrorCode, Result, get_logger, is_image_file

logger = get_logger(__name__)


class DirectoryEntry(TypedDict):
    name: str
    isDirectory: bool


def _is_hidden(entry: os.DirEntry) -> bool:
    if entry.name.startswith("."):
        return True
    if os.name == "nt":
        try:
            attrs = entry.stat(follow_symlinks=False).st_file_attributes  # type: ignore[attr-defined]
            return bool(attrs & stat.FILE_ATTRIBUTE_HIDDEN)  # type: ignore[attr-defined]
        except OSError:
            return False
    return False


def _entry_sort_key(item: DirectoryEntry) -> tuple[int, str]:
    return (0 if item["isDirectory"] else 1, item["name"].lower())


def _safe_is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir()
    except OSError:
        return False


def list_directory(path_value: str, *, images_only: bool = False) -> Result[list[DirectoryEntry]]:
    """
    List the visible entries of a directory, folders first.

    Args:
        path_value: Absolute directory path
        images_only: Keep folders plus image files only

    Returns:
        Result with [{"name", "isDirectory"}, ...]
    """
    raw = str(path_value or "").strip()
    if not raw or "\x00" in raw:
        return Result.Err(ErrorCode.INVALID_INPUT, "Invalid directory path")

    target = Path(raw).expanduser()
    if not target.exists():
        return Result.Err(ErrorCode.DIR_NOT_FOUND, f"Directory not found: {target}")
    if not target.is_dir():
        return Result.Err(ErrorCode.INVALID_INPUT, f"Not a directory: {target}")

    items: list[DirectoryEntry] = []
    try:
        with os.scandir(target) as it:
            for entry in it:
                if _is_hidden(entry):
                    continue
                is_dir = _safe_is_dir(entry)
                if images_only and not is_dir and not is_image_file(entry.name):
                    continue
                items.append({"name": entry.name, "isDirectory": is_dir})
    except OSError as exc:
        logger.warning(f"Failed to list directory {target}: {exc}")
        return Result.Err(ErrorCode.LIST_FAILED, f"Failed to list directory: {exc}")

    items.sort(key=_entry_sort_key)
    return Result.Ok(items)


def list_drives() -> Result[list[str]]:
    """
    List top-level filesystem roots: existing drive letters on Windows, `/` elsewhere.
    """
    if os.name != "nt":
        return Result.Ok(["/"])

    roots: list[str] = []
    for letter in "ABCDEFGHIJKLMNOPQRSTUVWXYZ":
        root = f"{letter}:\\"
        try:
            if Path(root).exists():
                roots.append(root)
        except OSError:
            continue
    return Result.Ok(roots)
