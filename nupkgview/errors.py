"""Exceptions raised by nupkgview.

Every error carries the archive path it concerns so callers can log it
without extra bookkeeping.
"""
from __future__ import annotations

__all__ = [
    "NupkgError",
    "ArchiveOpenError",
    "StreamError",
    "ManifestDecodeError",
    "MissingMetadataError",
    "PackageFileNotFoundError",
    "ParseCancelledError",
]


class NupkgError(RuntimeError):
    """Base class for all package inspection errors."""

    def __init__(self, message: str, *, archive_path: str | None = None) -> None:
        super().__init__(message)
        self.archive_path = archive_path


class ArchiveOpenError(NupkgError):
    """The package is missing, unreadable or not a ZIP archive."""


class StreamError(NupkgError):
    """An entry's compressed data could not be decompressed."""

    def __init__(self, message: str, *, archive_path: str | None = None, entry_path: str | None = None) -> None:
        super().__init__(message, archive_path=archive_path)
        self.entry_path = entry_path


class ManifestDecodeError(NupkgError):
    """The .nuspec text is not well-formed or lacks package/metadata."""


class MissingMetadataError(NupkgError):
    """No manifest was found, or the manifest failed to decode."""


class PackageFileNotFoundError(NupkgError):
    """The requested entry does not exist in the package."""

    def __init__(self, message: str, *, archive_path: str | None = None, entry_path: str | None = None) -> None:
        super().__init__(message, archive_path=archive_path)
        self.entry_path = entry_path


class ParseCancelledError(NupkgError):
    """The caller raised the cancellation event mid-operation."""
