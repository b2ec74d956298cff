import os
import stat
import struct
import sys
import textwrap
from pathlib import Path

import pytest

# Tests live at <repo>/tests/ so the repo root is one parent above.
REPO_ROOT = Path(__file__).resolve().parents[1]

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


# Minimal stand-in for ExifTool: keeps tags in a `<image>.tags.json` sidecar and
# understands the argument grammar used by the reader and writer. File names
# containing "fail", "garbage" or "slow" trigger error paths.
_FAKE_EXIFTOOL = textwrap.dedent(
    '''\
    #!{python}
    import json
    import os
    import re
    import sys
    import time

    # ExifTool prints values that look like numbers without quotes.
    NUMBER = re.compile(r"^-?(\\d|[1-9]\\d{{1,14}})(\\.\\d{{1,16}})?(e[-+]?\\d{{1,3}})?$", re.IGNORECASE)


    def _json_value(value):
        if isinstance(value, str) and NUMBER.match(value):
            return value
        return json.dumps(value, ensure_ascii=False)


    def _json_record(record):
        body = ", ".join(json.dumps(k, ensure_ascii=False) + ": " + _json_value(v) for k, v in record.items())
        return "[{{" + body + "}}]"


    def _store(path):
        return path + ".tags.json"


    def _load(path):
        try:
            with open(_store(path), "r", encoding="utf-8") as fh:
                return json.load(fh)
        except FileNotFoundError:
            return {{}}


    def _behaviour(path):
        name = os.path.basename(path)
        if "slow" in name:
            time.sleep(30)
        if "fail" in name:
            sys.stderr.write("Error: File format error - " + name + "\\n")
            sys.exit(1)
        return name


    def main(args):
        if args == ["-ver"]:
            sys.stdout.write("12.76\\n")
            return 0
        if "-UserComment<=-" in args:
            path = args[args.index("-UserComment<=-") - 1]
            _behaviour(path)
            value = sys.stdin.buffer.read().decode("utf-8")
            tags = _load(path)
            tags["UserComment"] = value
            with open(_store(path), "w", encoding="utf-8") as fh:
                json.dump(tags, fh, ensure_ascii=False)
            sys.stdout.write("    1 image files updated\\n")
            return 0
        if "-json" in args:
            path = args[-1]
            name = _behaviour(path)
            if "garbage" in name:
                sys.stdout.write("this is not json\\n")
                return 0
            record = {{"SourceFile": path}}
            record.update(_load(path))
            sys.stdout.buffer.write(_json_record(record).encode("utf-8"))
            return 0
        sys.stderr.write("unsupported arguments\\n")
        return 2


    sys.exit(main(sys.argv[1:]))
    '''
)


@pytest.fixture
def fake_exiftool(tmp_path: Path) -> str:
    if os.name == "nt":
        pytest.skip("fake ExifTool script relies on a POSIX shebang")
    script = tmp_path / "bin" / "exiftool"
    script.parent.mkdir()
    script.write_text(_FAKE_EXIFTOOL.format(python=sys.executable), encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(script)


@pytest.fixture
def image_file(tmp_path: Path) -> Path:
    p = tmp_path / "photo.jpg"
    p.write_bytes(b"\xff\xd8\xff\xd9")
    return p


def _exif_with_user_comment(comment: bytes) -> bytes:
    """Build an APP1 Exif payload holding only an Exif IFD with UserComment."""
    exif_ifd_offset = 8 + 2 + 12 + 4
    data_offset = exif_ifd_offset + 2 + 12 + 4
    tiff = struct.pack("<2sHI", b"II", 42, 8)
    tiff += struct.pack("<H", 1) + struct.pack("<HHII", 0x8769, 4, 1, exif_ifd_offset) + struct.pack("<I", 0)
    tiff += struct.pack("<H", 1) + struct.pack("<HHII", 0x9286, 7, len(comment), data_offset) + struct.pack("<I", 0)
    tiff += comment
    return b"Exif\x00\x00" + tiff


@pytest.fixture
def exif_with_user_comment():
    return _exif_with_user_comment
