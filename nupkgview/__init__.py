"""nupkgview - inspect NuGet packages (.nupkg) without extracting them.

This package provides:
    • NupkgParser – parse a .nupkg into metadata, a file tree and its
      readme/license/icon/MCP descriptor content.
    • parse_package / get_file_content – one-shot helpers over NupkgParser.
    • Frozen value objects (nupkgview.models) describing the result.
    • CLI utilities under nupkgview.cli (Click) and a Flask JSON app
      (nupkgview.web).

The parsing core does no I/O beyond reading the archive, which keeps the CLI
and web layers thin and easy to test.
"""

__all__ = [
    "NupkgParser",
    "parse_package",
    "get_file_content",
]

from .parser import NupkgParser, get_file_content, parse_package  # noqa: E402
