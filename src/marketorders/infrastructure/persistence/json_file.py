"""Shared file handling for the JSON-file-backed repositories.

Every write replaces the whole file through a temporary file and
``os.replace`` so a reader never sees a half-written document.  Writers
hold an exclusive ``flock`` on a sibling ``.lock`` file for the whole
read-modify-write.  I/O and decoding failures surface as ``DependencyError``.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from marketorders.domain.exceptions import DependencyError

logger = logging.getLogger(__name__)


class JsonFileStore:

    # Content written when the file does not exist yet.
    _EMPTY: Any = []

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- File helpers ---------------------------------------------------------

    @property
    def _lock_path(self) -> Path:
        return self._file_path.with_name(f".{self._file_path.name}.lock")

    @contextmanager
    def _lock(self) -> Iterator[None]:
        """Hold an exclusive lock on the file for a read-modify-write."""
        try:
            lock_file = open(self._lock_path, "w")
        except OSError as exc:
            raise DependencyError(f"Cannot lock {self._file_path.name}: {exc}") from exc
        with lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _load_raw(self) -> Any:
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise DependencyError(f"Cannot read {self._file_path.name}: {exc}") from exc
        logger.debug("Loaded %s", self._file_path)
        return data

    def _persist_raw(self, data: Any) -> None:
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._file_path.parent, prefix=f".{self._file_path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(json.dumps(data, indent=2, ensure_ascii=False) + "\n")
                os.replace(tmp_name, self._file_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise DependencyError(f"Cannot write {self._file_path.name}: {exc}") from exc
        logger.debug("Wrote %s", self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            try:
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                self._file_path.write_text(json.dumps(self._EMPTY), encoding="utf-8")
            except OSError as exc:
                raise DependencyError(
                    f"Cannot create {self._file_path}: {exc}"
                ) from exc
