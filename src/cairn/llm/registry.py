"""Provider selection from configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import SecretStr

from cairn.llm.anthropic import AnthropicProvider
from cairn.llm.base import ExtractionProvider
from cairn.llm.fallback import FallbackProvider
from cairn.llm.openai import OpenAIProvider

if TYPE_CHECKING:
    from cairn.config.models import CairnConfig

logger = logging.getLogger(__name__)


def create_llm_provider(
    provider: str,
    api_key: str | SecretStr | None = None,
    *,
    model: str | None = None,
    max_tokens: int = 1024,
    temperature: float | None = None,
) -> ExtractionProvider:
    """Create a single provider instance.

    Raises:
        ValueError: If provider name is unknown.
    """
    key = api_key.get_secret_value() if isinstance(api_key, SecretStr) else api_key

    if provider == "fallback":
        return FallbackProvider()
    if provider == "openai":
        return OpenAIProvider(
            api_key=key, model=model, max_tokens=max_tokens, temperature=temperature
        )
    if provider == "anthropic":
        return AnthropicProvider(
            api_key=key, model=model, max_tokens=max_tokens, temperature=temperature
        )

    raise ValueError(f"Unknown LLM provider: {provider}")


def create_provider(config: CairnConfig) -> ExtractionProvider:
    """Pick the extraction provider for a configuration.

    A networked provider is used only when an API key resolves; otherwise
    the offline fallback is returned.
    """
    name = config.llm.provider
    if name == "fallback":
        return FallbackProvider()

    api_key = config.resolve_api_key(name)
    if api_key is None:
        logger.warning("llm_provider_key_missing", extra={"provider": name})
        return FallbackProvider()

    return create_llm_provider(
        name,
        api_key,
        model=config.llm.model,
        max_tokens=config.llm.max_tokens,
        temperature=config.llm.temperature,
    )


def create_embedder(config: CairnConfig) -> ExtractionProvider:
    """Pick the embedding provider, defaulting to the offline engine."""
    if config.embeddings.provider == "openai":
        api_key = config.resolve_api_key("openai")
        if api_key is not None:
            return OpenAIProvider(
                api_key=api_key.get_secret_value(),
                embedding_model=config.embeddings.model,
            )
        logger.warning("embedding_provider_key_missing", extra={"provider": "openai"})
    return FallbackProvider()
