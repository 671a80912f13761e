"""Single-completion language model client used by the metadata synthesizer."""

from __future__ import annotations

from functools import lru_cache
from typing import Protocol

import httpx
from anthropic import APIError
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError
from pydantic_ai.models import Model
from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.providers.anthropic import AnthropicProvider

from curator.core.logging import get_logger
from curator.core.settings import get_settings
from curator.errors import SynthesisError

logger = get_logger(__name__)

DEFAULT_MAX_TOKENS = 2048


class LlmClient(Protocol):
    def complete(self, prompt: str) -> str:
        """Return the completion text for ``prompt``; raises ``SynthesisError``."""
        ...


def build_model(model_spec: str) -> Model | str:
    """Construct a pydantic-ai model for ``provider:model`` specs.

    Anthropic models get an explicit provider carrying the configured key;
    other specs are handed to pydantic-ai as-is.
    """
    settings = get_settings()
    provider_prefix, _, model_name = model_spec.partition(":")
    if provider_prefix == "anthropic" or model_spec.startswith("claude-"):
        if not settings.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY not configured in settings.")
        provider = AnthropicProvider(api_key=settings.anthropic_api_key)
        return AnthropicModel(model_name or model_spec, provider=provider)
    return model_spec


class PydanticAiCompletionClient:
    """``LlmClient`` backed by a text-output pydantic-ai agent."""

    def __init__(
        self,
        model_spec: str,
        timeout_seconds: float = 60.0,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        agent: Agent[None, str] | None = None,
    ):
        self.model_spec = model_spec
        self.timeout_seconds = timeout_seconds
        self.max_tokens = max_tokens
        self.agent = agent or Agent(build_model(model_spec), output_type=str)

    def complete(self, prompt: str) -> str:
        try:
            result = self.agent.run_sync(
                prompt,
                model_settings={"max_tokens": self.max_tokens, "timeout": self.timeout_seconds},
            )
        except (AgentRunError, APIError, httpx.HTTPError) as e:
            logger.error(f"LLM completion failed ({self.model_spec}): {e}")
            raise SynthesisError(f"LLM request failed: {e}") from e

        output = result.output
        logger.debug(f"LLM completion received ({len(output)} chars)")
        return output


@lru_cache
def get_llm_client() -> PydanticAiCompletionClient:
    settings = get_settings()
    return PydanticAiCompletionClient(
        settings.synthesis_model,
        timeout_seconds=settings.llm_timeout_seconds,
    )
