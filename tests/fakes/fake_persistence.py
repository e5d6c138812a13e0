"""In-memory persistence backends for testing."""

from __future__ import annotations


class FakePersistenceBackend:
    """Dict-backed storage that counts writes."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}
        self.save_calls = 0

    def save(self, key: str, data: str) -> None:
        self.save_calls += 1
        self._store[key] = data

    def load(self, key: str) -> str:
        if key not in self._store:
            raise KeyError(f"Not found: {key}")
        return self._store[key]

    def exists(self, key: str) -> bool:
        return key in self._store

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def list_keys(self, prefix: str = "") -> list[str]:
        return [k for k in self._store if k.startswith(prefix)]


class FailingPersistenceBackend(FakePersistenceBackend):
    """Loads normally but every save after ``fail_after`` successful saves raises."""

    def __init__(self, fail_after: int = 0) -> None:
        super().__init__()
        self._fail_after = fail_after

    def save(self, key: str, data: str) -> None:
        if self.save_calls >= self._fail_after:
            self.save_calls += 1
            raise OSError("disk full")
        super().save(key, data)
