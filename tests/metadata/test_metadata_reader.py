import pytest

from inscribe_backend.adapters.tools import ExifToolInvoker, ToolResult
from inscribe_backend.features.metadata import reader as r
from inscribe_backend.features.metadata.decoder import pick_comment
from inscribe_backend.shared import ErrorCode, Result


def test_build_read_args_posix(monkeypatch):
    monkeypatch.setattr(r.os, "name", "posix")
    args = r.build_read_args("/img/a.jpg")
    assert args == [
        "-charset", "UTF8", "-charset", "iptc=UTF8", "-charset", "exif=UTF8",
        "-json",
        "-UserComment", "-Description", "-EXIF:UserComment", "-IPTC:Caption-Abstract",
        "/img/a.jpg",
    ]


def test_build_read_args_windows_adds_filename_charset(monkeypatch):
    monkeypatch.setattr(r.os, "name", "nt")
    args = r.build_read_args("C:\\img\\a.jpg")
    assert args[-3:] == ["-charset", "filename=utf8", "C:\\img\\a.jpg"]


def test_parse_read_output_maps_fields():
    out = '[{"SourceFile": "a.jpg", "UserComment": "hello", "Description": "desc"}]'
    res = r.parse_read_output(out)
    assert res.ok
    assert res.data == {"userComment": "hello", "description": "desc"}


def test_parse_read_output_group_names_take_precedence():
    out = '[{"UserComment": "plain", "EXIF:UserComment": "grouped", "IPTC:Caption-Abstract": "cap"}]'
    res = r.parse_read_output(out)
    assert res.data == {"userComment": "grouped", "description": "cap"}


def test_parse_read_output_empty_shapes():
    assert r.parse_read_output("").data == {}
    assert r.parse_read_output("  \n").data == {}
    assert r.parse_read_output("null").data == {}
    assert r.parse_read_output("[]").data == {}
    assert r.parse_read_output('[{"SourceFile": "a.jpg"}]').data == {}


def test_parse_read_output_keeps_numeric_literal_text():
    res = r.parse_read_output('[{"UserComment": 12345, "Description": 1.50}]')
    assert res.data == {"userComment": "12345", "description": "1.50"}
    assert pick_comment(r.parse_read_output('[{"UserComment": 1.50}]').data) == "1.50"
    assert pick_comment(r.parse_read_output('[{"UserComment": 1e5}]').data) == "1e5"
    assert pick_comment(r.parse_read_output('[{"UserComment": -0.0}]').data) == "-0.0"


def test_parse_read_output_errors():
    bad = r.parse_read_output("not json")
    assert bad.code == ErrorCode.PARSE_ERROR
    assert bad.error.startswith("Failed to parse ExifTool output")
    assert r.parse_read_output('{"a": 1}').code == ErrorCode.PARSE_ERROR
    assert r.parse_read_output('["x"]').code == ErrorCode.PARSE_ERROR


class _Invoker(ExifToolInvoker):
    def __init__(self, result):
        super().__init__("exiftool")
        self.result = result
        self.calls = []

    async def invoke(self, args, input_payload=None):
        self.calls.append((list(args), input_payload))
        return self.result


@pytest.mark.asyncio
async def test_read_metadata_success(image_file):
    inv = _Invoker(Result.Ok(ToolResult(0, '[{"UserComment": "hi"}]'.encode("utf-8"), b"")))
    res = await r.MetadataReader(inv).read_metadata(str(image_file))
    assert res.ok and res.data == {"userComment": "hi"}
    args, payload = inv.calls[0]
    assert args[-1] == str(image_file)
    assert payload is None


@pytest.mark.asyncio
async def test_read_metadata_propagates_tool_error(image_file):
    err = Result.Err(ErrorCode.EXIFTOOL_ERROR, "ExifTool failed with code 1. Stderr: x", return_code=1, stderr="x")
    res = await r.MetadataReader(_Invoker(err)).read_metadata(str(image_file))
    assert res.code == ErrorCode.EXIFTOOL_ERROR
    assert res.meta["return_code"] == 1
    assert res.meta["stderr"] == "x"


@pytest.mark.asyncio
async def test_read_metadata_rejects_bad_paths_without_spawning(tmp_path):
    inv = _Invoker(Result.Ok(ToolResult(0, b"[]", b"")))
    reader = r.MetadataReader(inv)
    assert (await reader.read_metadata(str(tmp_path / "missing.jpg"))).code == ErrorCode.NOT_FOUND
    assert (await reader.read_metadata("-ver")).code == ErrorCode.INVALID_INPUT
    assert inv.calls == []
