"""
ExifTool adapter: locates the bundled executable and runs one invocation.
"""
import asyncio
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ...shared import ErrorCode, Result, get_logger

logger = get_logger(__name__)

EXIFTOOL_DIST_DIR = "exiftool_dist"
_STDERR_MESSAGE_LIMIT = 2000


def default_executable_name() -> str:
    return "exiftool.exe" if os.name == "nt" else "exiftool"


def resolve_exiftool_path(
    is_packaged: bool,
    resources_dir: str | os.PathLike,
    project_root: str | os.PathLike,
    exe_name: Optional[str] = None,
) -> str:
    """
    Compute the bundled ExifTool location for a deployment.

    Packaged builds ship the tool inside the application's resources
    directory; development runs use the project's `resources/` tree.
    Pure function of its arguments.
    """
    name = exe_name or default_executable_name()
    if is_packaged:
        return str(Path(resources_dir) / EXIFTOOL_DIST_DIR / name)
    return str(Path(project_root) / "resources" / EXIFTOOL_DIST_DIR / name)


def _decode_bytes_best_effort(blob: Optional[bytes]) -> Tuple[str, bool]:
    """
    Decode subprocess bytes robustly across Windows code pages.

    Returns:
      (text, had_replacement_chars)
    """
    if blob is None:
        return "", False
    if not isinstance(blob, (bytes, bytearray)):
        text = str(blob)
        return text, ("�" in text)

    raw = bytes(blob)
    if not raw:
        return "", False

    # ExifTool output is UTF-8 because every call passes `-charset UTF8`.
    for enc in ("utf-8", "utf-8-sig"):
        try:
            return raw.decode(enc, errors="strict"), False
        except UnicodeDecodeError:
            pass

    # stderr can still arrive in the local codepage on Windows.
    try:
        return raw.decode("cp1252", errors="strict"), False
    except UnicodeDecodeError:
        pass

    utf_text = raw.decode("utf-8", errors="replace")
    return utf_text, ("�" in utf_text)


@dataclass(frozen=True)
class ToolInvocation:
    """One subprocess call: executable, ordered arguments, optional stdin bytes."""

    executable: str
    args: Tuple[str, ...]
    input_payload: Optional[bytes] = None

    @property
    def command(self) -> List[str]:
        return [self.executable, *self.args]


@dataclass(frozen=True)
class ToolResult:
    """Exit code plus everything the process wrote to stdout and stderr."""

    return_code: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def stdout_text(self) -> str:
        return _decode_bytes_best_effort(self.stdout)[0]

    @property
    def stderr_text(self) -> str:
        return _decode_bytes_best_effort(self.stderr)[0]


def _validate_target_path(path: str) -> Result[str]:
    """
    Validate an image path before it is placed on the ExifTool command line.

    Option-looking values are refused so a file name can never be read as a flag.
    """
    if not isinstance(path, str) or not path.strip():
        return Result.Err(ErrorCode.INVALID_INPUT, "Invalid file path")
    if "\x00" in path or "\n" in path or "\r" in path:
        return Result.Err(ErrorCode.INVALID_INPUT, "Invalid file path")
    if path.startswith("-"):
        return Result.Err(ErrorCode.INVALID_INPUT, "Invalid file path")
    try:
        p = Path(path)
        if not p.is_file():
            return Result.Err(ErrorCode.NOT_FOUND, f"File not found: {path}")
    except (OSError, ValueError):
        return Result.Err(ErrorCode.INVALID_INPUT, "Invalid file path")
    return Result.Ok(path)


class ExifToolInvoker:
    """
    Runs ExifTool as a subprocess, one process per call.

    Never raises for tool failures - always returns Result.
    """

    def __init__(self, executable: str, timeout: Optional[float] = None):
        """
        Initialize the invoker.

        Args:
            executable: Path (or PATH name) of the ExifTool binary
            timeout: Seconds before a running process is killed; None or 0 waits forever
        """
        self.executable = str(executable or "").strip()
        self.timeout = float(timeout) if timeout else None

    def resolved_executable(self) -> Optional[str]:
        """Return the executable as found on disk or PATH, or None."""
        raw = self.executable
        if not raw or "\x00" in raw:
            return None
        try:
            candidate = Path(raw)
            if candidate.is_file():
                return str(candidate.resolve(strict=True))
        except (OSError, RuntimeError, ValueError):
            return None
        return shutil.which(raw)

    def is_available(self) -> bool:
        """Check whether the executable can be located (does not spawn it)."""
        return self.resolved_executable() is not None

    def build_invocation(self, args: Sequence[str], input_payload: Optional[bytes] = None) -> ToolInvocation:
        return ToolInvocation(
            executable=self.executable,
            args=tuple(str(a) for a in args),
            input_payload=bytes(input_payload) if input_payload is not None else None,
        )

    async def invoke(self, args: Sequence[str], input_payload: Optional[bytes] = None) -> Result[ToolResult]:
        """
        Spawn ExifTool with `args`, feed `input_payload` to stdin, wait for exit.

        Stdin is closed after the payload is written; ExifTool's `<=-` argument
        only finishes reading once it sees end-of-input.

        Returns:
            Ok(ToolResult) on exit code 0, otherwise Err with one of
            SPAWN_FAILED, EXIFTOOL_ERROR (return_code/stderr in meta) or TIMEOUT.
        """
        invocation = self.build_invocation(args, input_payload)
        return await self.run(invocation)

    async def run(self, invocation: ToolInvocation) -> Result[ToolResult]:
        logger.debug("Running ExifTool: %s", invocation.args)
        try:
            process = await self._spawn_process(invocation)
        except OSError as exc:
            logger.error("Failed to spawn ExifTool process (%s): %s", invocation.executable, exc)
            return Result.Err(
                ErrorCode.SPAWN_FAILED,
                f"Failed to spawn ExifTool process: {exc}",
                executable=invocation.executable,
            )

        try:
            communicated = await self._communicate(process, invocation)
        finally:
            await self._reap(process)

        if not communicated.ok:
            return Result.Err(
                communicated.code or ErrorCode.EXIFTOOL_ERROR,
                communicated.error or "ExifTool communication failed",
                **(communicated.meta or {}),
            )
        stdout_b, stderr_b = communicated.data or (b"", b"")
        result = ToolResult(
            return_code=int(process.returncode if process.returncode is not None else -1),
            stdout=stdout_b or b"",
            stderr=stderr_b or b"",
        )
        return self._interpret_exit(result)

    async def _spawn_process(self, invocation: ToolInvocation) -> asyncio.subprocess.Process:
        return await asyncio.create_subprocess_exec(
            *invocation.command,
            stdin=asyncio.subprocess.PIPE if invocation.input_payload is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            close_fds=os.name != "nt",
        )

    async def _communicate(
        self,
        process: asyncio.subprocess.Process,
        invocation: ToolInvocation,
    ) -> Result[Tuple[bytes, bytes]]:
        # communicate() writes the payload, closes stdin and drains both output pipes.
        pending = process.communicate(input=invocation.input_payload)
        if self.timeout is None:
            stdout_b, stderr_b = await pending
            return Result.Ok((stdout_b, stderr_b))
        try:
            stdout_b, stderr_b = await asyncio.wait_for(pending, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error("ExifTool timeout after %ss", self.timeout)
            return Result.Err(ErrorCode.TIMEOUT, f"ExifTool timeout after {self.timeout}s")
        return Result.Ok((stdout_b, stderr_b))

    @staticmethod
    async def _reap(process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()

    @staticmethod
    def _interpret_exit(result: ToolResult) -> Result[ToolResult]:
        stderr_text, stderr_rep = _decode_bytes_best_effort(result.stderr)
        if stderr_rep:
            logger.warning("ExifTool stderr contained decoding replacement characters")
        if result.return_code == 0:
            return Result.Ok(result)
        stderr_msg = stderr_text.strip()
        logger.warning("ExifTool exited with code %s: %s", result.return_code, stderr_msg)
        return Result.Err(
            ErrorCode.EXIFTOOL_ERROR,
            f"ExifTool failed with code {result.return_code}. Stderr: {stderr_msg[:_STDERR_MESSAGE_LIMIT]}",
            return_code=result.return_code,
            stderr=stderr_msg,
        )
