"""Builds the configured persistence backend."""

from __future__ import annotations

import logging

from clarity_canvas.core.config import PersistenceConfig
from clarity_canvas.persistence.protocols import IPersistenceBackend

log = logging.getLogger(__name__)


def create_backend(config: PersistenceConfig) -> IPersistenceBackend:
    """Return the backend named by ``config.backend``."""
    if config.backend == "memory":
        from clarity_canvas.persistence.memory_backend import MemoryPersistenceBackend

        backend: IPersistenceBackend = MemoryPersistenceBackend()
    elif config.backend == "s3":
        from clarity_canvas.persistence.s3_backend import S3PersistenceBackend

        backend = S3PersistenceBackend(
            bucket=config.s3_bucket,
            prefix=config.s3_prefix,
            region=config.s3_region,
            kms_key_id=config.s3_kms_key_id,
        )
    else:
        from clarity_canvas.persistence.file_backend import FilePersistenceBackend

        backend = FilePersistenceBackend(config.store_path)

    log.info("Using %s persistence backend", config.backend)
    return backend
