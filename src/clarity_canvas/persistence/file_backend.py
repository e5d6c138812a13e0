"""File-based persistence backend: one JSON document per profile."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

log = logging.getLogger(__name__)


class FilePersistenceBackend:
    """Stores data as JSON files in a local directory.

    Writes go to a temp file in the same directory and are moved into place
    with ``os.replace``, so readers see either the old or the new document.
    """

    def __init__(self, base_path: Path) -> None:
        self._base = Path(base_path)
        self._base.mkdir(parents=True, exist_ok=True)

    def _key_path(self, key: str) -> Path:
        safe_key = key.replace("/", "_").replace("\\", "_")
        if not safe_key.endswith(".json"):
            safe_key += ".json"
        return self._base / safe_key

    def save(self, key: str, data: str) -> None:
        path = self._key_path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._base, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        log.debug("Saved %s to %s", key, path)

    def load(self, key: str) -> str:
        path = self._key_path(key)
        if not path.is_file():
            raise KeyError(f"Not found: {key} (path: {path})")
        return path.read_text(encoding="utf-8")

    def exists(self, key: str) -> bool:
        return self._key_path(key).is_file()

    def delete(self, key: str) -> None:
        path = self._key_path(key)
        if path.is_file():
            path.unlink()

    def list_keys(self, prefix: str = "") -> list[str]:
        keys = []
        for path in self._base.glob("*.json"):
            key = path.stem
            if key.startswith(prefix):
                keys.append(key)
        return sorted(keys)
