"""Pluggable persistence backends for profiles."""

from __future__ import annotations

from clarity_canvas.persistence.factory import create_backend
from clarity_canvas.persistence.file_backend import FilePersistenceBackend
from clarity_canvas.persistence.memory_backend import MemoryPersistenceBackend
from clarity_canvas.persistence.profile_store import ProfileStore
from clarity_canvas.persistence.protocols import IPersistenceBackend

__all__ = [
    "FilePersistenceBackend",
    "IPersistenceBackend",
    "MemoryPersistenceBackend",
    "ProfileStore",
    "create_backend",
]
