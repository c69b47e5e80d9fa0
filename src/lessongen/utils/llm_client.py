"""Chat-completion client for lesson generation.

Wraps the OpenAI SDK pointed at an OpenAI-compatible endpoint (DeepSeek by
default). One call per lesson, no retries: any failure is raised to the caller
as NetworkError or EmptyCompletionError.
"""

import hashlib
import logging
import time
from typing import Optional

import openai
from openai import OpenAI
from pydantic import BaseModel

from lessongen.config import DEFAULT_TEMPERATURE
from lessongen.errors import EmptyCompletionError, NetworkError
from lessongen.prompts.lesson_prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class TokenUsage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    requests: int = 0


class LLMClient:
    """Plain-text chat completions against `{base_url}/v1/chat/completions`.

    Features:
    - Bearer-token auth, fixed model and temperature per client
    - SDK retries disabled; failures surface immediately
    - Error bodies truncated to 500 characters
    - Request logging (prompt hash, latency, tokens) and usage totals
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: Optional[float] = None,
    ):
        """Initialize the client.

        Args:
            api_key: Bearer token for the API
            base_url: API root without `/v1`, e.g. https://api.deepseek.com
            model: Model identifier, e.g. deepseek-chat
            temperature: Sampling temperature (default: 0.7)
            timeout: Per-request timeout in seconds (None keeps the SDK default)
        """
        self.model = model
        self.temperature = temperature
        self.base_url = base_url.rstrip("/")
        self.total_usage = TokenUsage()

        client_kwargs = {
            "api_key": api_key,
            "base_url": f"{self.base_url}/v1",
            "max_retries": 0,
        }
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self.client = OpenAI(**client_kwargs)

        logger.info(f"LLMClient initialized with base_url={self.base_url}, model={self.model}")

    def complete(self, prompt: str, system_prompt: str = SYSTEM_PROMPT) -> str:
        """Send one prompt and return the generated text.

        Args:
            prompt: User message
            system_prompt: System message (default: science-writer persona)

        Returns:
            Content of the first choice's message

        Raises:
            NetworkError: On a non-success status or transport failure
            EmptyCompletionError: If the response has no text content
        """
        prompt_hash = self._hash_prompt(prompt)
        logger.debug(f"Requesting completion: model={self.model}, prompt_hash={prompt_hash}")

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]

        start_time = time.time()
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
            )
        except openai.APIStatusError as e:
            raise NetworkError(
                status_code=e.status_code,
                status_text=e.response.reason_phrase,
                body=e.response.text,
            ) from e
        except openai.APIConnectionError as e:
            # APITimeoutError is a subclass
            raise NetworkError(status_text=str(e)) from e

        latency_ms = (time.time() - start_time) * 1000
        self._record_usage(response)

        content = self._extract_content(response)
        logger.info(
            f"LLM response: prompt_hash={prompt_hash}, latency_ms={latency_ms:.0f}, "
            f"chars={len(content)}"
        )
        return content

    def _extract_content(self, response) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            raise EmptyCompletionError("Completion response has no choices")

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise EmptyCompletionError("模型返回内容为空或格式不对")
        return content

    def _record_usage(self, response) -> None:
        self.total_usage.requests += 1
        usage = getattr(response, "usage", None)
        if usage is None:
            return
        self.total_usage.prompt_tokens += getattr(usage, "prompt_tokens", 0) or 0
        self.total_usage.completion_tokens += getattr(usage, "completion_tokens", 0) or 0
        self.total_usage.total_tokens += getattr(usage, "total_tokens", 0) or 0

    def get_usage_summary(self) -> dict:
        """Get summary of total token usage for the run."""
        return {
            "model": self.model,
            "requests": self.total_usage.requests,
            "prompt_tokens": self.total_usage.prompt_tokens,
            "completion_tokens": self.total_usage.completion_tokens,
            "total_tokens": self.total_usage.total_tokens,
        }

    def _hash_prompt(self, prompt: str) -> str:
        """First 16 hex chars of the prompt's SHA-256, for log correlation."""
        return hashlib.sha256(prompt.encode()).hexdigest()[:16]
