"""
Text completion providers for recipe generation.

Recipe generation needs exactly one thing from a model: send a prompt, get
text back. Two providers implement that:
- AnthropicProvider: Real Claude API calls
- NullLLMProvider: Canned text for tests and keyless development
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
import os
import logging

logger = logging.getLogger(__name__)


class MissingAPIKeyError(ValueError):
    """No ANTHROPIC_API_KEY is configured and the null provider was not requested."""


class LLMProvider(ABC):
    """Something that turns a recipe prompt into text."""

    @abstractmethod
    def complete(self, prompt: str, model: str, max_tokens: int, temperature: float) -> str:
        """Send one user prompt and return the concatenated text of the reply."""

    @property
    def is_null(self) -> bool:
        return False


class AnthropicProvider(LLMProvider):
    """Claude via the Anthropic messages API."""

    def __init__(self, api_key: str):
        from anthropic import Anthropic
        self.client = Anthropic(api_key=api_key)

    def complete(self, prompt: str, model: str, max_tokens: int, temperature: float) -> str:
        response = self.client.messages.create(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        # Tool use and other non-text blocks carry no recipe text
        return "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )


class NullLLMProvider(LLMProvider):
    """
    Returns fixed text and records what it was asked.

    Only used when USE_NULL_LLM=true or when a test builds one directly.
    It does not try to write plausible recipes.
    """

    CANNED_TEXT = "[NullLLM: No real LLM call made]"

    def __init__(self, text: Optional[str] = None):
        self.text = self.CANNED_TEXT if text is None else text
        self.calls: List[Dict[str, Any]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_call(self) -> Optional[Dict[str, Any]]:
        return self.calls[-1] if self.calls else None

    def complete(self, prompt: str, model: str, max_tokens: int, temperature: float) -> str:
        self.calls.append({
            "prompt": prompt,
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        logger.debug(f"NullLLM call #{self.call_count}: model={model}")
        return self.text

    @property
    def is_null(self) -> bool:
        return True


def null_llm_requested() -> bool:
    return os.environ.get("USE_NULL_LLM", "").lower() == "true"


def require_llm_provider(api_key: Optional[str] = None) -> LLMProvider:
    """
    Get the provider for a recipe generation call.

    Environment Variables:
        USE_NULL_LLM: Set to "true" to use NullLLMProvider
        ANTHROPIC_API_KEY: API key for AnthropicProvider

    Raises:
        MissingAPIKeyError: no key and USE_NULL_LLM is not set
    """
    if null_llm_requested():
        return NullLLMProvider()

    api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
    if not api_key:
        raise MissingAPIKeyError(
            "ANTHROPIC_API_KEY missing (set it in the environment or .env file)."
        )

    return AnthropicProvider(api_key=api_key)
