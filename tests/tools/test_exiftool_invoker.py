import asyncio
import os
import subprocess
from pathlib import Path

import pytest

from inscribe_backend.adapters.tools import exiftool as m
from inscribe_backend.shared import ErrorCode


def test_resolve_exiftool_path_packaged_and_development(tmp_path: Path):
    resources = tmp_path / "resources_dir"
    project = tmp_path / "project"

    packaged = m.resolve_exiftool_path(True, resources, project, exe_name="exiftool.exe")
    assert Path(packaged) == resources / "exiftool_dist" / "exiftool.exe"

    dev = m.resolve_exiftool_path(False, resources, project, exe_name="exiftool.exe")
    assert Path(dev) == project / "resources" / "exiftool_dist" / "exiftool.exe"


def test_default_executable_name_follows_platform(monkeypatch):
    monkeypatch.setattr(m.os, "name", "nt")
    assert m.default_executable_name() == "exiftool.exe"
    monkeypatch.setattr(m.os, "name", "posix")
    assert m.default_executable_name() == "exiftool"


def test_resolve_exiftool_path_uses_default_name(tmp_path: Path):
    path = m.resolve_exiftool_path(True, tmp_path, tmp_path)
    assert Path(path).name == m.default_executable_name()


def test_decode_bytes_best_effort_variants():
    assert m._decode_bytes_best_effort(None) == ("", False)
    assert m._decode_bytes_best_effort(b"") == ("", False)
    assert m._decode_bytes_best_effort("café".encode("utf-8")) == ("café", False)
    # cp1252-only bytes are still readable
    text, rep = m._decode_bytes_best_effort(b"caf\xe9")
    assert text == "café" and rep is False


def test_validate_target_path(tmp_path: Path):
    p = tmp_path / "a.jpg"
    p.write_bytes(b"x")
    assert m._validate_target_path(str(p)).ok
    assert m._validate_target_path("").code == ErrorCode.INVALID_INPUT
    assert m._validate_target_path("a\x00b").code == ErrorCode.INVALID_INPUT
    assert m._validate_target_path("-overwrite_original").code == ErrorCode.INVALID_INPUT
    assert m._validate_target_path(str(tmp_path / "missing.jpg")).code == ErrorCode.NOT_FOUND
    assert m._validate_target_path(str(tmp_path)).code == ErrorCode.NOT_FOUND


def test_build_invocation_is_a_value_object():
    inv = m.ExifToolInvoker("exiftool").build_invocation(["-json", "a.jpg"], bytearray(b"hi"))
    assert inv.command == ["exiftool", "-json", "a.jpg"]
    assert inv.input_payload == b"hi"
    assert isinstance(inv.args, tuple)


def test_is_available(tmp_path: Path):
    exe = tmp_path / "exiftool"
    exe.write_text("x")
    assert m.ExifToolInvoker(str(exe)).is_available() is True
    assert m.ExifToolInvoker(str(tmp_path / "nope" / "exiftool")).is_available() is False
    assert m.ExifToolInvoker("").is_available() is False


def test_interpret_exit_codes():
    ok = m.ExifToolInvoker._interpret_exit(m.ToolResult(0, b"[]", b""))
    assert ok.ok and ok.data.stdout_text == "[]"

    bad = m.ExifToolInvoker._interpret_exit(m.ToolResult(3, b"", b"Error: boom\n"))
    assert bad.code == ErrorCode.EXIFTOOL_ERROR
    assert bad.meta["return_code"] == 3
    assert bad.meta["stderr"] == "Error: boom"
    assert "code 3" in bad.error


@pytest.mark.asyncio
async def test_invoke_missing_binary_is_spawn_failure(tmp_path: Path):
    invoker = m.ExifToolInvoker(str(tmp_path / "does-not-exist"))
    res = await invoker.invoke(["-ver"])
    assert not res.ok
    assert res.code == ErrorCode.SPAWN_FAILED


@pytest.mark.asyncio
async def test_invoke_permission_denied_is_spawn_failure(tmp_path: Path):
    if os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0):
        pytest.skip("execute permission is not enforced here")
    exe = tmp_path / "exiftool"
    exe.write_text("#!/bin/sh\necho hi\n")
    exe.chmod(0o644)
    res = await m.ExifToolInvoker(str(exe)).invoke(["-ver"])
    assert res.code == ErrorCode.SPAWN_FAILED


@pytest.mark.asyncio
async def test_invoke_runs_process_and_captures_stdout(fake_exiftool):
    res = await m.ExifToolInvoker(fake_exiftool).invoke(["-ver"])
    assert res.ok
    assert res.data.return_code == 0
    assert res.data.stdout_text.strip() == "12.76"


@pytest.mark.asyncio
async def test_invoke_nonzero_exit_carries_code_and_stderr(fake_exiftool, tmp_path: Path):
    res = await m.ExifToolInvoker(fake_exiftool).invoke(["--bogus"])
    assert res.code == ErrorCode.EXIFTOOL_ERROR
    assert res.meta["return_code"] == 2
    assert "unsupported arguments" in res.meta["stderr"]


@pytest.mark.asyncio
async def test_invoke_timeout_kills_process(fake_exiftool, tmp_path: Path):
    slow = tmp_path / "slow.jpg"
    slow.write_bytes(b"x")
    invoker = m.ExifToolInvoker(fake_exiftool, timeout=0.5)
    res = await invoker.invoke(["-json", str(slow)])
    assert res.code == ErrorCode.TIMEOUT


@pytest.mark.asyncio
async def test_invoke_reaps_process_when_communicate_fails(monkeypatch):
    events = []

    class _Proc:
        returncode = None

        async def communicate(self, input=None):
            raise RuntimeError("pipe broke")

        def kill(self):
            events.append("kill")

        async def wait(self):
            events.append("wait")
            self.returncode = -9
            return -9

    async def _spawn(self, invocation):
        return _Proc()

    monkeypatch.setattr(m.ExifToolInvoker, "_spawn_process", _spawn)
    with pytest.raises(RuntimeError):
        await m.ExifToolInvoker("exiftool").invoke(["-ver"])
    assert events == ["kill", "wait"]


@pytest.mark.asyncio
async def test_invoke_passes_payload_to_communicate(monkeypatch):
    seen = {}

    class _Proc:
        returncode = None

        async def communicate(self, input=None):
            seen["input"] = input
            self.returncode = 0
            return b"out", b""

    async def _spawn(self, invocation):
        seen["command"] = invocation.command
        return _Proc()

    monkeypatch.setattr(m.ExifToolInvoker, "_spawn_process", _spawn)
    res = await m.ExifToolInvoker("exiftool").invoke(["a", "b"], "hé".encode("utf-8"))
    assert res.ok
    assert seen["input"] == b"h\xc3\xa9"
    assert seen["command"] == ["exiftool", "a", "b"]
