"""Configuration models using Pydantic."""

import logging
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr

from cairn.config.paths import get_database_path
from cairn.errors import CairnError

logger = logging.getLogger(__name__)

ProviderName = Literal["fallback", "openai", "anthropic"]

PROVIDER_ENV_VARS: dict[str, str] = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


class ConfigError(CairnError):
    """Configuration error."""


class ProviderConfig(BaseModel):
    """Provider-level configuration."""

    api_key: SecretStr | None = None


class LLMConfig(BaseModel):
    """Extraction provider selection.

    "fallback" is the offline heuristic provider and needs no key. A
    networked provider without a resolvable key also degrades to fallback.
    """

    provider: ProviderName = "fallback"
    model: str | None = None
    temperature: float | None = None  # None = use provider default
    max_tokens: int = 1024


class EmbeddingsConfig(BaseModel):
    """Configuration for the embedding provider.

    Anthropic has no embeddings API, so only openai or the offline
    hashing engine are accepted.
    """

    provider: Literal["fallback", "openai"] = "fallback"
    model: str = "text-embedding-3-small"


class ResolverConfig(BaseModel):
    """Acceptance thresholds for entity resolution."""

    meeting_threshold: float = Field(default=0.4, ge=0.0, le=1.0)
    identity_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    max_candidates: int = Field(default=5, ge=1)


class OwnerConfig(BaseModel):
    """Names and handles that refer to the CRM owner."""

    names: list[str] = Field(default_factory=list)


class DatabaseConfig(BaseModel):
    """Database location. ``url`` takes precedence over ``path``."""

    path: Path = Field(default_factory=get_database_path)
    url: str | None = None


class CairnConfig(BaseModel):
    """Root configuration model."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    embeddings: EmbeddingsConfig = Field(default_factory=EmbeddingsConfig)
    openai: ProviderConfig | None = None
    anthropic: ProviderConfig | None = None
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    owner: OwnerConfig = Field(default_factory=OwnerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    def resolve_api_key(self, provider: str) -> SecretStr | None:
        """Resolve the API key for a provider.

        Resolution order:
        1. Provider-level config api_key
        2. Environment variable (ANTHROPIC_API_KEY or OPENAI_API_KEY)

        Returns:
            The resolved API key, or None for fallback/unknown providers.
        """
        if provider not in PROVIDER_ENV_VARS:
            return None

        section = self.openai if provider == "openai" else self.anthropic
        if section and section.api_key:
            return section.api_key

        env_value = os.environ.get(PROVIDER_ENV_VARS[provider])
        if env_value:
            return SecretStr(env_value)
        return None

    @property
    def is_offline(self) -> bool:
        """True when neither extraction nor embeddings touch the network."""
        llm_online = (
            self.llm.provider != "fallback"
            and self.resolve_api_key(self.llm.provider) is not None
        )
        embed_online = (
            self.embeddings.provider != "fallback"
            and self.resolve_api_key(self.embeddings.provider) is not None
        )
        return not (llm_online or embed_online)
