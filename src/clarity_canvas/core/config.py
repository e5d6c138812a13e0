"""Nested pydantic-settings configuration for the application.

Each group reads its own ``CLARITY_<GROUP>_*`` env vars::

    export CLARITY_PERSISTENCE_BACKEND=file
    export CLARITY_REVIEW_LOW_CONFIDENCE_THRESHOLD=0.75
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class LLMConfig(BaseSettings):
    """LLM backend used by the extraction, refinement and synthesis adapters.

    Env vars use ``CLARITY_LLM_`` prefix::

        export CLARITY_LLM_MODEL=openai/gpt-4o
        export CLARITY_LLM_API_KEY=sk-...
    """

    model_config = {"env_prefix": "CLARITY_LLM_"}

    provider: Literal["openai", "anthropic", "bedrock", "ollama", "litellm"] = "ollama"
    model: str = "ollama/qwen3-14b"
    api_key: str = "no-key"
    temperature: float = 0.0
    top_p: float = 1.0
    seed: int | None = None
    timeout: float = 120.0
    max_retries: int = 5
    retry_jitter_factor: float = 0.5
    retry_max_delay: float = 30.0


class ReviewConfig(BaseSettings):
    """Review session behaviour.

    Env vars use ``CLARITY_REVIEW_`` prefix.
    """

    model_config = {"env_prefix": "CLARITY_REVIEW_"}

    low_confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)


class ScoringConfig(BaseSettings):
    """Field scoring parameters.

    Env vars use ``CLARITY_SCORING_`` prefix.
    """

    model_config = {"env_prefix": "CLARITY_SCORING_"}

    floor: int = Field(default=20, ge=0, le=100)
    target_words: int = Field(default=50, gt=0)
    multi_source_bonus: int = Field(default=10, ge=0, le=100)
    weak_threshold: int = Field(default=50, ge=0, le=100)


class SynthesisConfig(BaseSettings):
    """Synthesis engine configuration.

    Env vars use ``CLARITY_SYNTHESIS_`` prefix::

        export CLARITY_SYNTHESIS_GENERATOR=llm
    """

    model_config = {"env_prefix": "CLARITY_SYNTHESIS_"}

    generator: Literal["extractive", "llm"] = "extractive"
    summary_max_chars: int = Field(default=150, gt=0)
    context_max_chars: int = Field(default=400, gt=0)
    conflict_confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    freshness_window_seconds: float = Field(default=600.0, gt=0.0)


class PersistenceConfig(BaseSettings):
    """Persistence configuration.

    Env vars use ``CLARITY_PERSISTENCE_`` prefix.
    """

    model_config = {"env_prefix": "CLARITY_PERSISTENCE_"}

    backend: Literal["file", "s3", "memory"] = "file"
    store_path: Path = Path("./profiles")
    s3_bucket: str = ""
    s3_prefix: str = "profiles/"
    s3_region: str = "us-east-2"
    s3_kms_key_id: str = ""


class ObservabilityConfig(BaseSettings):
    """Observability configuration.

    Env vars use ``CLARITY_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "CLARITY_OBSERVABILITY_"}

    service_name: str = "clarity-canvas"
    log_level: str = "INFO"
    log_format: Literal["auto", "json", "console"] = "auto"


class APIConfig(BaseSettings):
    """HTTP API metadata.

    Env vars use ``CLARITY_API_`` prefix.
    """

    model_config = {"env_prefix": "CLARITY_API_"}

    title: str = "Clarity Canvas"
    description: str = "Extraction review, profile synthesis and completeness scoring"
    port: int = 8080


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs.

    Each sub-config reads its own ``CLARITY_<GROUP>_*`` env vars.
    """

    llm: LLMConfig = LLMConfig()
    review: ReviewConfig = ReviewConfig()
    scoring: ScoringConfig = ScoringConfig()
    synthesis: SynthesisConfig = SynthesisConfig()
    persistence: PersistenceConfig = PersistenceConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
    api: APIConfig = APIConfig()
