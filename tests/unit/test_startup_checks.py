"""Tests for startup validation checks."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from clarity_canvas.core.config import AppSettings, LLMConfig, PersistenceConfig, SynthesisConfig
from clarity_canvas.core.startup_checks import validate_settings

_LLM = SynthesisConfig(generator="llm")


class TestApiKeyValidation:
    """Placeholder API keys are rejected only when the LLM generator is in use."""

    def test_rejects_no_key_for_openai(self):
        settings = AppSettings(llm=LLMConfig(provider="openai", api_key="no-key"), synthesis=_LLM)
        with pytest.raises(ValueError, match="CLARITY_LLM_API_KEY is required"):
            validate_settings(settings)

    def test_rejects_empty_key_for_anthropic(self):
        settings = AppSettings(llm=LLMConfig(provider="anthropic", api_key=""), synthesis=_LLM)
        with pytest.raises(ValueError, match="CLARITY_LLM_API_KEY is required"):
            validate_settings(settings)

    def test_accepts_no_key_for_ollama(self):
        settings = AppSettings(llm=LLMConfig(provider="ollama", api_key="no-key"), synthesis=_LLM)
        validate_settings(settings)

    def test_accepts_no_key_for_bedrock(self):
        """Bedrock uses IAM roles, no API key needed."""
        settings = AppSettings(llm=LLMConfig(provider="bedrock", api_key="no-key"), synthesis=_LLM)
        validate_settings(settings)

    def test_accepts_real_key(self):
        settings = AppSettings(llm=LLMConfig(provider="openai", api_key="sk-real"), synthesis=_LLM)
        validate_settings(settings)

    def test_ignored_for_extractive_generator(self):
        settings = AppSettings(llm=LLMConfig(provider="openai", api_key="no-key"))
        validate_settings(settings)


class TestPersistenceCheck:
    def test_s3_requires_bucket(self):
        settings = AppSettings(persistence=PersistenceConfig(backend="s3"))
        with pytest.raises(ValueError, match="CLARITY_PERSISTENCE_S3_BUCKET"):
            validate_settings(settings)

    def test_warns_file_backend_in_k8s(self):
        settings = AppSettings(persistence=PersistenceConfig(backend="file"))
        with patch.dict(os.environ, {"KUBERNETES_SERVICE_HOST": "10.0.0.1"}):
            with patch("clarity_canvas.core.startup_checks.log") as mock_log:
                validate_settings(settings)
                mock_log.warning.assert_called()

    def test_no_warning_for_memory_in_ecs(self):
        settings = AppSettings(persistence=PersistenceConfig(backend="memory"))
        with patch.dict(os.environ, {"ECS_CONTAINER_METADATA_URI": "http://169.254.170.2/v4"}):
            with patch("clarity_canvas.core.startup_checks.log") as mock_log:
                validate_settings(settings)
                mock_log.warning.assert_not_called()
