"""Single-pass iteration over the entries of a zip artifact."""

from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterator

from .exceptions import ExtractionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchiveEntry:
    """An archive member and its content stream.

    The stream is only readable until the next entry is requested.
    """

    name: str
    size: int
    stream: IO[bytes]


class ZipArtifact:
    """A zip archive opened for forward-only reading.

    Use as a context manager so the underlying file is always closed:

        with ZipArtifact(path) as archive:
            for entry in archive.entries():
                ...
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        try:
            self._zip = zipfile.ZipFile(self.path)
        except (zipfile.BadZipFile, OSError) as exc:
            raise ExtractionError(f"Failed to open artifact as zip: {exc}") from exc
        self._consumed = False

    def __enter__(self) -> ZipArtifact:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._zip.close()

    def entries(self) -> Iterator[ArchiveEntry]:
        """Yield entries in archive order, one open stream at a time.

        Raises:
            ExtractionError: If called more than once, or if an entry
                cannot be opened.
        """
        if self._consumed:
            raise ExtractionError("Archive entries have already been consumed")
        self._consumed = True
        return self._iter_entries()

    def _iter_entries(self) -> Iterator[ArchiveEntry]:
        for info in self._zip.infolist():
            logger.debug("Opening zip entry %s", info.filename)
            try:
                stream = self._zip.open(info)
            except (zipfile.BadZipFile, RuntimeError, NotImplementedError, OSError) as exc:
                raise ExtractionError(f"Failed to open zip entry '{info.filename}': {exc}") from exc
            with stream:
                yield ArchiveEntry(name=info.filename, size=info.file_size, stream=stream)
