# persistence.py
"""
Backup-then-save discipline for the host document.

- backup() copies the file byte-for-byte (permissions included) to a sibling
  named <path>.bak_<YYYYMMDDHHMMSS>. Existing backups are never overwritten.
- commit() overwrites the original with the serialized in-memory document.
- PersistenceGate ties the two together for one editing session: exactly one
  backup, taken before the first commit, any number of commits after it.
"""

from __future__ import annotations

import logging
import shutil
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from editor_config import DEFAULT_BACKUP_SUFFIX
from errors import BackupRequired, StorageIOError
from settings_store import SettingsDocument

LOG = logging.getLogger(__name__)


def _backup_path(source: Path, now: float, suffix_format: str) -> Path:
    stamp = datetime.fromtimestamp(now).strftime(suffix_format)
    candidate = source.with_name(source.name + stamp)
    n = 1
    while candidate.exists():
        candidate = source.with_name(f"{source.name}{stamp}-{n}")
        n += 1
    return candidate


def backup(
        source_path: str,
        now: Optional[float] = None,
        suffix_format: str = DEFAULT_BACKUP_SUFFIX,
) -> Path:
    """Copy `source_path` to a timestamped sibling and return the new path."""
    if now is None:
        now = time.time()

    source = Path(source_path)
    if not source.is_file():
        raise StorageIOError(f"Cannot back up {source}: not a readable file", path=str(source))

    dest = _backup_path(source, now, suffix_format)
    try:
        shutil.copy2(source, dest)
    except OSError as exc:
        raise StorageIOError(f"Cannot write backup {dest}: {exc}", path=str(dest)) from exc

    LOG.info("Backed up %s to %s", source, dest)
    return dest


def commit(document: SettingsDocument, path: str) -> None:
    """Serialize `document` over `path`. The only destructive write."""
    data = document.to_bytes()
    p = Path(path)
    try:
        with open(p, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise StorageIOError(f"Failed to save {p}: {exc}", path=str(p)) from exc
    LOG.info("Saved %s (%d bytes)", p, len(data))


class PersistenceGate:
    def __init__(self, path: str, suffix_format: str = DEFAULT_BACKUP_SUFFIX) -> None:
        self._path = str(path)
        self._suffix_format = suffix_format
        self._backup_path: Optional[Path] = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def backup_path(self) -> Optional[Path]:
        return self._backup_path

    def begin(self, now: Optional[float] = None) -> Path:
        """Take this session's backup. Later calls return the same path."""
        if self._backup_path is None:
            self._backup_path = backup(self._path, now=now, suffix_format=self._suffix_format)
        return self._backup_path

    def commit(self, document: SettingsDocument) -> None:
        if self._backup_path is None:
            raise BackupRequired(f"Refusing to overwrite {self._path} before it has been backed up")
        commit(document, self._path)
