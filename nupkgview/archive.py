"""
Sequential, streamed access to the entries of a .nupkg (ZIP) archive.

Only the central directory is loaded up front.  Entry data is decompressed
on demand, one entry at a time, and entries the caller is not interested in
are skipped without being touched.

Example::

    with ArchiveReader("Foo.1.0.0.nupkg") as reader:
        for entry in reader.entries():
            if entry.path.endswith(".nuspec"):
                xml = entry.read()
"""
from __future__ import annotations

import io
import logging
import threading
import zipfile
import zlib
from pathlib import Path
from typing import Iterator

from .errors import ArchiveOpenError, ParseCancelledError, StreamError

__all__ = [
    "ArchiveReader",
    "ArchiveEntry",
    "CHUNK_SIZE",
]

logger = logging.getLogger(__name__)

# bytes pulled from a decompression stream per read() call
CHUNK_SIZE = 64 * 1024

# failures zipfile surfaces while inflating a member
# (RuntimeError covers encrypted members)
_STREAM_ERRORS = (zlib.error, zipfile.BadZipFile, EOFError, NotImplementedError, OSError, RuntimeError)


class ArchiveEntry:
    """One central-directory record of an open archive."""

    def __init__(self, reader: "ArchiveReader", info: zipfile.ZipInfo) -> None:
        self._reader = reader
        self._info = info

    @property
    def path(self) -> str:
        return self._info.filename

    @property
    def size(self) -> int:
        return 0 if self.is_directory else self._info.file_size

    @property
    def is_directory(self) -> bool:
        return self._info.filename.endswith("/")

    def read(self, cancel: threading.Event | None = None) -> bytes:
        """Drain the entry's decompression stream and return its bytes.

        Raises :class:`StreamError` if the data cannot be inflated and
        :class:`ParseCancelledError` if *cancel* is set while reading.
        """
        return self._reader._read_entry(self._info, cancel)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<ArchiveEntry {self.path} ({self.size} bytes)>"


class ArchiveReader:
    """Open *archive_path* as a ZIP container and walk its entries.

    The reader owns the underlying handle.  Use it as a context manager so
    the handle is released on every exit path.
    """

    def __init__(self, archive_path: Path | str) -> None:
        self.archive_path = str(archive_path)
        self._zf: zipfile.ZipFile | None = None

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def open(self) -> "ArchiveReader":
        path = Path(self.archive_path).expanduser()
        try:
            self._zf = zipfile.ZipFile(path)
        except zipfile.BadZipFile as exc:
            raise ArchiveOpenError(
                f"Not a valid package archive: {self.archive_path} ({exc})",
                archive_path=self.archive_path,
            ) from exc
        except OSError as exc:
            raise ArchiveOpenError(
                f"Cannot open package archive: {self.archive_path} ({exc.strerror or exc})",
                archive_path=self.archive_path,
            ) from exc
        logger.debug("Opened archive %s", self.archive_path)
        return self

    def close(self) -> None:
        if self._zf is not None:
            self._zf.close()
            self._zf = None
            logger.debug("Closed archive %s", self.archive_path)

    @property
    def closed(self) -> bool:
        return self._zf is None

    def __enter__(self) -> "ArchiveReader":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    # ------------------------------------------------------------------
    # iteration
    # ------------------------------------------------------------------

    def entries(self, cancel: threading.Event | None = None) -> Iterator[ArchiveEntry]:
        """Yield entries lazily in central-directory order."""
        if self._zf is None:
            raise ArchiveOpenError("Archive is not open", archive_path=self.archive_path)
        for info in self._zf.infolist():
            _check_cancel(cancel, self.archive_path)
            yield ArchiveEntry(self, info)

    def _read_entry(self, info: zipfile.ZipInfo, cancel: threading.Event | None) -> bytes:
        if self._zf is None:
            raise ArchiveOpenError("Archive is not open", archive_path=self.archive_path)
        buf = io.BytesIO()
        try:
            with self._zf.open(info) as src:
                while True:
                    _check_cancel(cancel, self.archive_path)
                    chunk = src.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    buf.write(chunk)
        except ParseCancelledError:
            raise
        except _STREAM_ERRORS as exc:
            raise StreamError(
                f"Failed to decompress '{info.filename}' in {self.archive_path}: {exc}",
                archive_path=self.archive_path,
                entry_path=info.filename,
            ) from exc
        return buf.getvalue()


def _check_cancel(cancel: threading.Event | None, archive_path: str) -> None:
    if cancel is not None and cancel.is_set():
        raise ParseCancelledError(f"Operation cancelled for {archive_path}", archive_path=archive_path)
