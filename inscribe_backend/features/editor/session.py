"""
State behind the comment editor panel.

Read failures clear both texts; write failures keep the user's edit.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from ...shared import ErrorCode, Result, get_logger
from ..metadata.decoder import pick_comment
from ..metadata.service import MetadataService

logger = get_logger(__name__)

READ_ERROR_MESSAGE = "Failed to load metadata. Ensure image is valid."
SAVE_ERROR_MESSAGE = "Failed to save metadata. Check permissions or image validity."
SAVE_FAILED_STATUS = "Save failed!"


class EditorSession:
    """
    Tracks the selected image, the text stored in it and the text being edited.

    Operations are serialized with a lock, so a save and the confirming
    re-read always run in order.
    """

    def __init__(self, service: MetadataService):
        self.service = service
        self.selected_path: Optional[str] = None
        self.displayed_text = ""
        self.editable_text = ""
        self.error: Optional[str] = None
        self.save_status: Optional[str] = None
        self.loading = False
        self._lock = asyncio.Lock()

    async def select(self, path: Optional[str]) -> Result[str]:
        """Select an image (or nothing) and load its comment."""
        async with self._lock:
            self.selected_path = path or None
            self.error = None
            self.save_status = None
            if not self.selected_path:
                self.displayed_text = ""
                self.editable_text = ""
                return Result.Ok("")
            self.loading = True
            try:
                res = await self._load()
            finally:
                self.loading = False
            if res.ok:
                self.editable_text = self.displayed_text
            return res

    def edit(self, text: str) -> None:
        self.editable_text = text

    async def save(self) -> Result[str]:
        """Write the edited text, then re-read to confirm what the file holds."""
        async with self._lock:
            if not self.selected_path:
                return Result.Err(ErrorCode.INVALID_INPUT, "No image selected")
            self.error = None
            self.save_status = None
            self.loading = True
            try:
                write_res = await self.service.write_image_metadata(
                    self.selected_path, {"UserComment": self.editable_text}
                )
                if not write_res.ok:
                    logger.warning(f"Save failed for {self.selected_path}: {write_res.error}")
                    self.error = SAVE_ERROR_MESSAGE
                    self.save_status = SAVE_FAILED_STATUS
                    return Result.Err(write_res.code, write_res.error or SAVE_ERROR_MESSAGE, **(write_res.meta or {}))
                self.save_status = (write_res.data or {}).get("message") or "Saved successfully!"
                return await self._load(clear_on_error=False)
            finally:
                self.loading = False

    async def _load(self, *, clear_on_error: bool = True) -> Result[str]:
        path = self.selected_path or ""
        res = await self.service.read_image_metadata(path)
        if not res.ok:
            logger.warning(f"Failed to read image metadata for {path}: {res.error}")
            self.error = READ_ERROR_MESSAGE
            self.displayed_text = ""
            if clear_on_error:
                self.editable_text = ""
            return Result.Err(res.code, res.error or READ_ERROR_MESSAGE, **(res.meta or {}))
        self.displayed_text = pick_comment(res.data)
        return Result.Ok(self.displayed_text)
