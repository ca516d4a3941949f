"""
LLM provider abstraction and response parsing utilities.

Provides a provider-agnostic async interface for chat completions with a
per-call timeout, bounded retries with linear backoff, and utilities for
unwrapping structured responses.
"""

import asyncio
import json
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Protocol, Sequence

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

# Retry configuration
MAX_RETRIES = 2
RETRY_DELAY = 0.5
# Resume scoring prompts can take 60-90s on large resumes
REQUEST_TIMEOUT = 120.0

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


class LLMClient(Protocol):
    """Anything that turns a chat transcript into completion text."""

    async def complete(self, messages: Sequence[ChatMessage], temperature: float) -> str: ...


class LLMCallError(RuntimeError):
    """Raised when every attempt of a chat completion failed."""

    def __init__(self, provider_name: str, attempts: int, last_error: Optional[Exception] = None):
        self.provider_name = provider_name
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"All {attempts} chat completion attempts failed for {provider_name}: {last_error}"
        )


# --- LLM Provider Classes ---


@dataclass
class LLMResponse:
    """Response from an LLM provider."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int
    finish_reason: Optional[str] = None


class LLMProvider(ABC):
    """
    Abstract base for LLM providers.

    Subclasses must:
    - Set _provider_prefix class attribute (e.g., "anthropic", "openai")
    - Set self._non_retryable_exceptions to errors that must not be retried
      (bad credentials, exhausted credits)
    - Implement _call_api() for the actual API call
    - Call update_model(model) in __init__ to set model and name
    """

    _provider_prefix: str
    _non_retryable_exceptions: tuple = ()

    name: str
    model: str
    max_retries: int = MAX_RETRIES
    retry_delay: float = RETRY_DELAY
    timeout: float = REQUEST_TIMEOUT

    def update_model(self, model: str):
        """Update the model and refresh the provider name."""
        self.model = model
        self.name = f"{self._provider_prefix}/{model}"

    def configure_retries(
        self,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        timeout: float = REQUEST_TIMEOUT,
    ):
        """Set retry count, linear backoff step and per-call timeout (seconds)."""
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout

    @abstractmethod
    async def _call_api(self, messages: Sequence[ChatMessage], temperature: float) -> LLMResponse:
        """Make a single API call (no retries). Implemented by subclasses."""
        pass

    async def generate(
        self, messages: Sequence[ChatMessage], temperature: float = 0.8
    ) -> LLMResponse:
        """
        Generate a response with timeout and linear-backoff retry.

        Waits retry_delay * (attempt + 1) seconds between attempts. Errors listed in
        _non_retryable_exceptions propagate immediately.

        Raises:
            LLMCallError: If all attempts fail
        """
        attempts = self.max_retries + 1
        last_error: Optional[Exception] = None

        for attempt in range(attempts):
            try:
                response = await asyncio.wait_for(
                    self._call_api(messages, temperature), timeout=self.timeout
                )
            except self._non_retryable_exceptions:
                logger.error(f"{self.name} rejected the request, not retrying")
                raise
            except Exception as e:
                last_error = e
                logger.error(f"Chat completion attempt {attempt + 1}/{attempts} failed: {e!r}")
                if attempt < self.max_retries:
                    await asyncio.sleep(self.retry_delay * (attempt + 1))
                continue

            log_llm_request(messages, response, temperature)
            return response

        raise LLMCallError(self.name, attempts, last_error) from last_error

    async def complete(self, messages: Sequence[ChatMessage], temperature: float = 0.8) -> str:
        """Return only the completion text."""
        response = await self.generate(messages, temperature)
        return response.content


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions provider (also works with OpenAI-compatible servers)."""

    _provider_prefix = "openai"

    def __init__(self, model: str = "gpt-4o-mini", **retry_options):
        # Lazy import - openai SDK is heavy, only load if this provider is used
        try:
            import openai
        except ImportError:
            raise ImportError("openai package required. Install with: pip install openai")

        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")

        # SDK-level retries disabled; generate() owns the retry policy
        self.client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=os.getenv("OPENAI_BASE_URL") or None,
            max_retries=0,
        )
        self._non_retryable_exceptions = (
            openai.AuthenticationError,
            openai.PermissionDeniedError,
        )
        self.configure_retries(**retry_options)
        self.update_model(model)

    async def _call_api(self, messages: Sequence[ChatMessage], temperature: float) -> LLMResponse:
        response = await self.client.chat.completions.create(
            model=self.model,
            temperature=temperature,
            messages=[{"role": m.role, "content": m.content} for m in messages],
        )
        choice = response.choices[0]
        usage = response.usage
        return LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            finish_reason=choice.finish_reason,
        )


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider."""

    _provider_prefix = "anthropic"

    def __init__(self, model: str = "claude-sonnet-4-20250514", **retry_options):
        # Lazy import - anthropic SDK is heavy, only load if this provider is used
        try:
            import anthropic
        except ImportError:
            raise ImportError("anthropic package required. Install with: pip install anthropic")

        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        self.client = anthropic.AsyncAnthropic(api_key=api_key, max_retries=0)
        self._non_retryable_exceptions = (
            anthropic.AuthenticationError,
            anthropic.PermissionDeniedError,
        )
        self.configure_retries(**retry_options)
        self.update_model(model)

    async def _call_api(self, messages: Sequence[ChatMessage], temperature: float) -> LLMResponse:
        # Anthropic takes the system prompt separately from the turn list
        system_prompt = "\n\n".join(m.content for m in messages if m.role == "system")
        request: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": 4096,
            "temperature": temperature,
            "messages": [
                {"role": m.role, "content": m.content} for m in messages if m.role != "system"
            ],
        }
        if system_prompt:
            request["system"] = system_prompt

        response = await self.client.messages.create(**request)
        return LLMResponse(
            content="".join(block.text for block in response.content if block.type == "text"),
            model=response.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            finish_reason=response.stop_reason,
        )


# --- Provider Factory ---


def get_provider(provider_name: str = None, model: str = None, **retry_options) -> LLMProvider:
    """
    Get an LLM provider instance.

    Args:
        provider_name: "anthropic" or "openai" (default: from LLM_PROVIDER env var)
        model: Model name (default: from LLM_MODEL env var, then provider-specific default)
        **retry_options: max_retries, retry_delay, timeout

    Returns:
        LLMProvider instance
    """
    if provider_name is None:
        provider_name = os.getenv("LLM_PROVIDER", "openai").lower()
    if model is None:
        model = os.getenv("LLM_MODEL") or None

    if provider_name == "anthropic":
        provider_class = AnthropicProvider
    elif provider_name == "openai":
        provider_class = OpenAIProvider
    else:
        raise ValueError(f"Unknown provider: {provider_name}. Use 'anthropic' or 'openai'")

    if model:
        return provider_class(model=model, **retry_options)
    return provider_class(**retry_options)


def log_llm_request(
    messages: Sequence[ChatMessage], response: LLMResponse, temperature: float
) -> None:
    """Record one completed LLM exchange at DEBUG level."""
    prompt_chars = sum(len(m.content) for m in messages)
    logger.debug(
        f"LLM request: model={response.model} temperature={temperature} "
        f"prompt_chars={prompt_chars} tokens_in={response.input_tokens} "
        f"tokens_out={response.output_tokens} finish_reason={response.finish_reason}"
    )


# --- Response Parsing Utilities ---

_FENCE_OPEN = re.compile(r"^```[^\n]*\n?")


def strip_code_fence(text: str) -> str:
    """
    Remove a markdown code block wrapper (```yaml, ```json or bare ```).

    Text that does not start with a fence is returned unchanged. Anything after
    the closing fence is discarded.

    Examples:
        >>> strip_code_fence("```json\\n{\\"a\\": 1}\\n```")
        '{"a": 1}'
    """
    stripped = text.strip()
    if not stripped.startswith("```"):
        return text

    body = _FENCE_OPEN.sub("", stripped, count=1)
    lines = body.split("\n")
    for i, line in enumerate(lines):
        if line.strip().startswith("```"):
            return "\n".join(lines[:i])

    # Closing fence glued to the last content line
    return body.removesuffix("```").rstrip()


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Parse a JSON object from an LLM response, tolerating a code block wrapper.

    Raises:
        ValueError: If the text is not valid JSON or not a JSON object
            (json.JSONDecodeError is a ValueError)
    """
    result = json.loads(strip_code_fence(text).strip())
    if not isinstance(result, dict):
        raise ValueError(f"Expected a JSON object, got {type(result).__name__}")
    return result
