"""Pytest configuration for nupkgview tests."""
from __future__ import annotations

import sys
import zipfile
from pathlib import Path
from typing import Callable, Dict, Union

import pytest

# Ensure project root is importable
PROJECT_ROOT = Path(__file__).resolve().parents[2]  # repository root
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


FOO_NUSPEC = """<?xml version="1.0" encoding="utf-8"?>
<package xmlns="http://schemas.microsoft.com/packaging/2013/05/nuspec.xsd">
  <metadata>
    <id>Foo</id>
    <version>1.2.3</version>
    <authors>Jane Doe</authors>
    <description>Foo does things.</description>
    <dependencies>
      <dependency id="Bar" version="[1.0.0,2.0.0)" />
    </dependencies>
  </metadata>
</package>
"""

Members = Dict[str, Union[str, bytes]]


def write_nupkg(path: Path, members: Members, compression: int = zipfile.ZIP_DEFLATED) -> Path:
    """Write *members* (archive path -> str/bytes) into a ZIP at *path*, in order."""
    with zipfile.ZipFile(path, "w", compression=compression) as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return path


@pytest.fixture()
def make_nupkg(tmp_path: Path) -> Callable[..., Path]:
    def _make(members: Members, name: str = "test.nupkg", **kwargs) -> Path:
        return write_nupkg(tmp_path / name, members, **kwargs)

    return _make


@pytest.fixture()
def foo_members() -> Members:
    return {
        "Foo.nuspec": FOO_NUSPEC,
        "lib/net6.0/Foo.dll": b"\x00" * 500,
        "README.md": "# Foo\n\nHello from Foo.\n",
        "icon.png": b"\x89PNG\r\n\x1a\nFAKEICON",
    }


@pytest.fixture()
def foo_nupkg(make_nupkg, foo_members) -> Path:
    return make_nupkg(foo_members, name="Foo.1.2.3.nupkg")


def corrupt_member(archive: Path, member: str) -> None:
    """Overwrite the compressed bytes of *member* so inflating it fails."""
    with zipfile.ZipFile(archive) as zf:
        info = zf.getinfo(member)
    data = bytearray(archive.read_bytes())
    offset = info.header_offset
    name_len = int.from_bytes(data[offset + 26 : offset + 28], "little")
    extra_len = int.from_bytes(data[offset + 28 : offset + 30], "little")
    start = offset + 30 + name_len + extra_len
    # 0xff starts a deflate block with the reserved block type
    data[start : start + info.compress_size] = b"\xff" * info.compress_size
    archive.write_bytes(bytes(data))


def encrypt_member(archive: Path, member: str) -> None:
    """Set the "encrypted" flag bit of *member* in the central directory."""
    data = bytearray(archive.read_bytes())
    name = member.encode()
    pos = data.find(b"PK\x01\x02")
    while pos != -1:
        name_len = int.from_bytes(data[pos + 28 : pos + 30], "little")
        if data[pos + 46 : pos + 46 + name_len] == name:
            data[pos + 8] |= 0x01
            archive.write_bytes(bytes(data))
            return
        pos = data.find(b"PK\x01\x02", pos + 46)
    raise KeyError(member)


@pytest.fixture()
def corrupt() -> Callable[[Path, str], None]:
    return corrupt_member


@pytest.fixture()
def encrypt() -> Callable[[Path, str], None]:
    return encrypt_member
