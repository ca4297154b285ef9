"""ZIP container access for DOCX and EPUB files."""

import io
import logging
import zipfile
import zlib
from typing import List, Optional

from ..errors import DocumentLoadError

logger = logging.getLogger(__name__)


class EntryNotFound(KeyError):
    """Raised when an archive has no entry at the requested path."""


class ContainerArchive:
    """
    Read-only view of a ZIP archive held in memory.

    Entry lookup is by exact, case-sensitive path.
    """

    def __init__(self, zip_file: zipfile.ZipFile):
        self._zip = zip_file
        self._names = set(zip_file.namelist())

    def __contains__(self, path: str) -> bool:
        return path in self._names

    def __enter__(self) -> "ContainerArchive":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def list_entries(self) -> List[str]:
        """Entry paths in the order they are stored in the archive."""
        return [info.filename for info in self._zip.infolist()]

    def read(self, path: str) -> bytes:
        if path not in self._names:
            raise EntryNotFound(path)
        try:
            return self._zip.read(path)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError) as e:
            raise DocumentLoadError(f"Failed to extract '{path}' from archive: {e}") from e

    def get(self, path: str) -> Optional[bytes]:
        """Like read(), but None for a missing entry."""
        try:
            return self.read(path)
        except EntryNotFound:
            return None

    def close(self) -> None:
        self._zip.close()


def open_container(data: bytes) -> ContainerArchive:
    """
    Open a ZIP archive from a byte buffer.

    Raises:
        DocumentLoadError: If the buffer is not a valid ZIP stream
    """
    try:
        zip_file = zipfile.ZipFile(io.BytesIO(data), 'r')
    except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as e:
        raise DocumentLoadError(f"Failed to open file as ZIP archive: {e}") from e
    logger.debug(f"Opened ZIP container with {len(zip_file.namelist())} entries")
    return ContainerArchive(zip_file)
