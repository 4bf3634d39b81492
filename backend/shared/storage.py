"""Storage abstraction for scorekeeping documents.

Each document is a UTF-8 JSON file stored under a single data directory.
Files are written with owner-only permissions (0o600) inside an
owner-only directory (0o700), and every write goes through a temp file
that is renamed into place so readers never see a truncated document.
"""

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

_DATA_DIR_MODE = 0o700

_DATA_FILE_MODE = 0o600

_DOCUMENT_SUFFIX = ".json"


class DocumentStorage(Protocol):
    """Protocol for persisting named text documents."""

    def save_document(self, name: str, content: str) -> None: ...

    def load_document(self, name: str) -> str | None: ...


class LocalDocumentStorage:
    """Reads and writes JSON documents on the local filesystem."""

    def __init__(self, data_dir: str | Path) -> None:
        self._data_dir = Path(data_dir).resolve()

    def _document_path(self, name: str) -> Path:
        target = (self._data_dir / f"{name}{_DOCUMENT_SUFFIX}").resolve()
        if not target.is_relative_to(self._data_dir):
            raise ValueError(f"Path traversal rejected: '{name}' resolves outside data directory")
        return target

    def save_document(self, name: str, content: str) -> None:
        """Atomically write a document under the configured directory.

        Creates the directory lazily on first write. Rejects names that would
        place the file outside the data root.
        """
        target = self._document_path(name)

        self._data_dir.mkdir(mode=_DATA_DIR_MODE, parents=True, exist_ok=True)
        self._data_dir.chmod(_DATA_DIR_MODE)

        fd, tmp_path = tempfile.mkstemp(dir=str(self._data_dir), suffix=".tmp", prefix=f".{target.stem}_")
        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(content.encode("utf-8"))
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _DATA_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(target)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        logger.info("saved document", document=name, path=str(target), size=len(content))

    def load_document(self, name: str) -> str | None:
        """Return the document text, or None when it has never been written."""
        target = self._document_path(name)
        if not target.exists():
            return None
        return target.read_text(encoding="utf-8")
