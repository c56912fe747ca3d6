"""Parser for .nupkg archives.

A .nupkg is a plain ZIP archive holding a ``<id>.nuspec`` manifest next to
the package payload (``lib/``, ``content/``, ``tools/`` ...), and optionally
an icon, a readme, a license file and an MCP server descriptor
(``.mcp/server.json``).

Two high-level helpers are exposed:

* :meth:`NupkgParser.parse_package` scans every entry once and returns a
  :class:`~nupkgview.models.PackageContent`;
* :meth:`NupkgParser.get_file_content` fetches the bytes of a single entry.

Example:
>>> content = NupkgParser().parse_package(Path("Foo.1.2.3.nupkg"))
>>> content.metadata.id, [f.name for f in content.files]
"""
from __future__ import annotations

import logging
import posixpath
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .archive import ArchiveEntry, ArchiveReader
from .classify import EntryKind, classify_entry, mime_type_for
from .errors import ManifestDecodeError, MissingMetadataError, PackageFileNotFoundError, StreamError
from .logs import TRACE
from .models import FileContent, FileEntry, PackageContent, PackageMetadata
from .nuspec import parse_nuspec
from .tree import build_file_tree

__all__ = [
    "NupkgParser",
    "parse_package",
    "get_file_content",
]

logger = logging.getLogger(__name__)


@dataclass
class _ScanState:
    """Accumulators owned by a single parse_package() call."""

    files: List[FileEntry] = field(default_factory=list)
    metadata: Optional[PackageMetadata] = None
    nuspec_content: Optional[str] = None
    icon_data: Optional[bytes] = None
    icon_path: Optional[str] = None
    readme_content: Optional[str] = None
    readme_path: Optional[str] = None
    license_content: Optional[str] = None
    license_path: Optional[str] = None
    mcp_server_content: Optional[str] = None
    mcp_server_path: Optional[str] = None


class NupkgParser:
    """Parse .nupkg files into :class:`PackageContent` values."""

    def __init__(self, encoding: str = "utf-8-sig") -> None:
        # utf-8-sig drops the BOM many .nuspec files are written with
        self.encoding = encoding

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------

    def parse_package(
        self,
        package_path: Path | str,
        *,
        cancel: threading.Event | None = None,
    ) -> PackageContent:
        """Scan every entry of *package_path* and assemble its content.

        Raises ``ArchiveOpenError`` when the archive cannot be opened,
        ``StreamError`` when the manifest cannot be decompressed and
        ``MissingMetadataError`` when no manifest could be decoded.  Setting
        *cancel* aborts with ``ParseCancelledError``.
        """
        package_path = str(package_path)
        logger.info("Parsing package %s", package_path)
        state = _ScanState()

        with ArchiveReader(package_path) as reader:
            for entry in reader.entries(cancel):
                logger.log(TRACE, "Processing entry %s", entry.path)
                state.files.append(
                    FileEntry(
                        path=entry.path,
                        name=posixpath.basename(entry.path.rstrip("/")),
                        size=entry.size,
                        is_directory=entry.is_directory,
                    )
                )
                kind = classify_entry(entry.path)
                if kind is not None:
                    self._capture(entry, kind, state, cancel)

        logger.info("Read %d entries from %s", len(state.files), package_path)
        if state.metadata is None:
            logger.error("No metadata found in %s", package_path)
            raise MissingMetadataError(
                f"No .nuspec manifest found or manifest failed to decode: {package_path}",
                archive_path=package_path,
            )

        files = build_file_tree(state.files)
        logger.debug("Built file tree with %d top-level entries", len(files))
        logger.info("Parsed %s %s from %s", state.metadata.id, state.metadata.version, package_path)
        return PackageContent(
            metadata=state.metadata,
            files=files,
            nuspec_content=state.nuspec_content,
            icon_data=state.icon_data,
            icon_path=state.icon_path,
            readme_content=state.readme_content,
            readme_path=state.readme_path,
            license_content=state.license_content,
            license_path=state.license_path,
            mcp_server_content=state.mcp_server_content,
            mcp_server_path=state.mcp_server_path,
        )

    def get_file_content(
        self,
        package_path: Path | str,
        entry_path: str,
        *,
        cancel: threading.Event | None = None,
    ) -> FileContent:
        """Return the bytes of *entry_path* (exact, case-sensitive match).

        Only the matching entry is decompressed.  Raises
        ``PackageFileNotFoundError`` when no entry has that path.
        """
        package_path = str(package_path)
        logger.info("Reading %s from %s", entry_path, package_path)

        with ArchiveReader(package_path) as reader:
            for entry in reader.entries(cancel):
                if entry.path != entry_path:
                    continue
                content = entry.read(cancel)
                mime_type = mime_type_for(entry_path)
                logger.info("Read %s: %d bytes, %s", entry_path, len(content), mime_type)
                return FileContent(path=entry_path, content=content, mime_type=mime_type)

        logger.error("File not found in package %s: %s", package_path, entry_path)
        raise PackageFileNotFoundError(
            f"File not found in package: {entry_path}",
            archive_path=package_path,
            entry_path=entry_path,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _capture(
        self,
        entry: ArchiveEntry,
        kind: EntryKind,
        state: _ScanState,
        cancel: threading.Event | None,
    ) -> None:
        logger.debug("Found %s file: %s", kind.value, entry.path)

        if kind is EntryKind.MANIFEST:
            # a manifest that cannot be inflated is fatal
            text = self._decode(entry.read(cancel))
            try:
                state.metadata = parse_nuspec(text)
            except ManifestDecodeError as exc:
                logger.error("Failed to parse %s: %s", entry.path, exc)
                if state.nuspec_content is None:
                    state.nuspec_content = text
            else:
                state.nuspec_content = text
            return

        try:
            data = entry.read(cancel)
        except StreamError as exc:
            logger.warning("Skipping unreadable %s file %s: %s", kind.value, entry.path, exc)
            return

        if kind is EntryKind.ICON:
            state.icon_data, state.icon_path = data, entry.path
        elif kind is EntryKind.README:
            state.readme_content, state.readme_path = self._decode(data), entry.path
        elif kind is EntryKind.LICENSE:
            state.license_content, state.license_path = self._decode(data), entry.path
        elif kind is EntryKind.MCP_SERVER:
            state.mcp_server_content, state.mcp_server_path = self._decode(data), entry.path

    def _decode(self, data: bytes) -> str:
        return data.decode(self.encoding, errors="replace")


def parse_package(package_path: Path | str, *, cancel: threading.Event | None = None) -> PackageContent:
    return NupkgParser().parse_package(package_path, cancel=cancel)


def get_file_content(
    package_path: Path | str,
    entry_path: str,
    *,
    cancel: threading.Event | None = None,
) -> FileContent:
    return NupkgParser().get_file_content(package_path, entry_path, cancel=cancel)
