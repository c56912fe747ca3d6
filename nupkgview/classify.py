"""Filename heuristics for the special files of a package.

The rules are checked in a fixed order and the first match wins, so every
path lands in at most one class.
"""
from __future__ import annotations

import enum
import posixpath
from typing import Optional

__all__ = [
    "EntryKind",
    "classify_entry",
    "is_manifest",
    "is_icon",
    "is_readme",
    "is_license",
    "is_mcp_server_descriptor",
    "mime_type_for",
    "DEFAULT_MIME_TYPE",
]

ICON_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico"})
README_NAMES = frozenset({"readme", "readme.md", "readme.txt", "readme.rst"})
LICENSE_NAMES = frozenset(
    {
        "license",
        "license.md",
        "license.txt",
        "license.rst",
        "licence",
        "licence.md",
        "licence.txt",
        "licence.rst",
        "copying",
        "copying.md",
        "copying.txt",
    }
)
MCP_SERVER_PATH = ".mcp/server.json"

DEFAULT_MIME_TYPE = "application/octet-stream"
_MIME_TYPES = {
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".json": "application/json",
    ".xml": "application/xml",
    ".yml": "text/yaml",
    ".yaml": "text/yaml",
    ".cs": "text/x-csharp",
    ".js": "text/javascript",
    ".ts": "text/typescript",
    ".html": "text/html",
    ".css": "text/css",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".ico": "image/x-icon",
    ".svg": "image/svg+xml",
}


class EntryKind(str, enum.Enum):
    MANIFEST = "manifest"
    ICON = "icon"
    README = "readme"
    LICENSE = "license"
    MCP_SERVER = "mcp_server"


def _basename(path: str) -> str:
    return posixpath.basename(path.rstrip("/")).lower()


def is_manifest(path: str) -> bool:
    return path.lower().endswith(".nuspec")


def is_icon(path: str) -> bool:
    ext = posixpath.splitext(path)[1].lower()
    return ext in ICON_EXTENSIONS and "icon" in path.lower()


def is_readme(path: str) -> bool:
    base = _basename(path)
    return base in README_NAMES or base.startswith("readme.")


def is_license(path: str) -> bool:
    base = _basename(path)
    return base in LICENSE_NAMES or base.startswith(("license.", "licence."))


def is_mcp_server_descriptor(path: str) -> bool:
    return path.lower() == MCP_SERVER_PATH


_RULES = (
    (EntryKind.MANIFEST, is_manifest),
    (EntryKind.ICON, is_icon),
    (EntryKind.README, is_readme),
    (EntryKind.LICENSE, is_license),
    (EntryKind.MCP_SERVER, is_mcp_server_descriptor),
)


def classify_entry(path: str) -> Optional[EntryKind]:
    """Return the special-file class of *path*, or ``None`` for ordinary files."""
    if path.endswith("/"):
        return None
    for kind, rule in _RULES:
        if rule(path):
            return kind
    return None


def mime_type_for(path: str) -> str:
    ext = posixpath.splitext(path)[1].lower()
    return _MIME_TYPES.get(ext, DEFAULT_MIME_TYPE)
