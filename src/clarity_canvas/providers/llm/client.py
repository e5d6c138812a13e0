"""Async LLM client routed through LiteLLM for multi-provider support.

Supports ``anthropic/``, ``bedrock/``, ``openai/`` and ``ollama/`` model
prefixes transparently.  Retries with exponential backoff and jitter live
here; nothing above this layer retries.
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
import re
from typing import Any

from clarity_canvas.core.config import LLMConfig
from clarity_canvas.exceptions import JSONParseError, NonRetryableError, RetryableError

log = logging.getLogger(__name__)


class LLMClient:
    """Async LLM client using LiteLLM."""

    def __init__(self, config: LLMConfig) -> None:
        self._config = config

    @property
    def model(self) -> str:
        return self._config.model

    @staticmethod
    def _is_retryable(exc: Exception) -> bool:
        """Classify whether an LLM API error should be retried.

        Non-retryable: AuthenticationError, BadRequestError, NotFoundError (4xx non-429).
        Retryable (default): everything else including rate limits, timeouts, 5xx.
        """
        from litellm.exceptions import AuthenticationError, BadRequestError, NotFoundError

        return not isinstance(exc, (AuthenticationError, BadRequestError, NotFoundError))

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Single completion, returns content string.

        Args:
            prompt: User message content.
            system_prompt: Optional system message.
            model: Override model ID. Supports LiteLLM prefixes (e.g. ``anthropic/``).
            temperature: Override temperature.

        Raises:
            NonRetryableError: auth / bad request / not found.
            RetryableError: every attempt failed with a transient error.
        """
        from litellm import acompletion

        messages: list[dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        kwargs: dict[str, Any] = {
            "model": model or self._config.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self._config.temperature,
            "top_p": self._config.top_p,
            "timeout": self._config.timeout,
        }
        if self._config.seed is not None:
            kwargs["seed"] = self._config.seed
        if self._config.api_key and self._config.api_key != "no-key":
            kwargs["api_key"] = self._config.api_key

        max_retries = max(1, self._config.max_retries)
        last_error: Exception | None = None
        for attempt in range(max_retries):
            try:
                response = await acompletion(**kwargs)
                return response.choices[0].message.content or ""

            except Exception as e:
                last_error = e
                if not self._is_retryable(e):
                    raise NonRetryableError(f"Non-retryable LLM error: {e}") from e

                base_wait = min(2 ** attempt, self._config.retry_max_delay)
                jitter = random.uniform(0, base_wait * self._config.retry_jitter_factor)
                wait = base_wait + jitter

                log.warning(
                    "LLM retry %d/%d: %s (wait=%.1fs)",
                    attempt + 1, max_retries, e, wait,
                )
                if attempt < max_retries - 1:
                    await asyncio.sleep(wait)

        raise RetryableError(
            f"LLM API failed after {max_retries} retries: {last_error}"
        ) from last_error

    async def complete_json(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
    ) -> Any:
        """Completion parsed with :meth:`extract_json`; raises JSONParseError on garbage."""
        content = await self.complete(prompt, system_prompt=system_prompt)
        parsed = self.extract_json(content)
        if parsed == {} and "{}" not in content.replace(" ", ""):
            raise JSONParseError("LLM response did not contain JSON", raw_response=content)
        return parsed

    # ── JSON extraction (static) ─────────────────────────────────────

    @staticmethod
    def extract_json(content: str) -> Any:
        """Parse JSON from LLM response, handling fences, prose, and common issues."""

        def _try_parse(s: str) -> Any | None:
            s = s.strip()
            if not s:
                return None
            s = re.sub(r"\bNone\b", "null", s)
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                pass
            # Trailing comma fix
            s = re.sub(r",\s*([}\]])", r"\1", s)
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None

        # Strategy 1: ```json ... ``` fences
        fence_start = content.find("```json")
        if fence_start != -1:
            inner = content[fence_start + 7:]
            fence_end = inner.find("```")
            if fence_end != -1:
                result = _try_parse(inner[:fence_end])
                if result is not None:
                    return result

        # Strategy 2: ``` ... ``` generic fence
        fence_start = content.find("```")
        if fence_start != -1:
            inner = content[fence_start + 3:]
            fence_end = inner.find("```")
            if fence_end != -1:
                result = _try_parse(inner[:fence_end])
                if result is not None:
                    return result

        # Strategy 3: Full content as JSON
        result = _try_parse(content)
        if result is not None:
            return result

        # Strategy 4: first balanced { ... } or [ ... ] in the response
        for open_ch, close_ch in [("{", "}"), ("[", "]")]:
            idx = content.find(open_ch)
            if idx == -1:
                continue
            depth = 0
            in_string = False
            escape = False
            for i in range(idx, len(content)):
                ch = content[i]
                if escape:
                    escape = False
                    continue
                if ch == "\\":
                    escape = True
                    continue
                if ch == '"':
                    in_string = not in_string
                    continue
                if in_string:
                    continue
                if ch == open_ch:
                    depth += 1
                elif ch == close_ch:
                    depth -= 1
                    if depth == 0:
                        result = _try_parse(content[idx : i + 1])
                        if result is not None:
                            return result
                        break

        log.error(
            "Failed to parse JSON from LLM response",
            extra={"response_length": len(content), "response_preview": content[:200]},
        )
        return {}
