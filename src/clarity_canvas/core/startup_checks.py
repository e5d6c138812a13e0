"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clarity_canvas.core.config import AppSettings

log = logging.getLogger(__name__)

# Providers that use IAM/local auth and do not require an API key
_NO_KEY_PROVIDERS = frozenset({"bedrock", "ollama"})


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_api_key(settings)
    _check_persistence(settings)


def _check_api_key(settings: AppSettings) -> None:
    """Reject placeholder API keys when the LLM synthesizer needs a real provider."""
    if settings.synthesis.generator != "llm":
        return
    if settings.llm.provider not in _NO_KEY_PROVIDERS and settings.llm.api_key in ("no-key", ""):
        raise ValueError(
            f"CLARITY_LLM_API_KEY is required for provider '{settings.llm.provider}' "
            "when CLARITY_SYNTHESIS_GENERATOR=llm."
        )


def _check_persistence(settings: AppSettings) -> None:
    """Reject an S3 backend without a bucket; warn about file storage in containers."""
    if settings.persistence.backend == "s3" and not settings.persistence.s3_bucket:
        raise ValueError(
            "CLARITY_PERSISTENCE_BACKEND=s3 requires CLARITY_PERSISTENCE_S3_BUCKET."
        )

    is_container = bool(
        os.environ.get("ECS_CONTAINER_METADATA_URI")
        or os.environ.get("KUBERNETES_SERVICE_HOST")
    )
    if is_container and settings.persistence.backend == "file":
        log.warning(
            "CLARITY_PERSISTENCE_BACKEND=file in a container environment. "
            "Profiles will be lost on container restart. Consider CLARITY_PERSISTENCE_BACKEND=s3."
        )
