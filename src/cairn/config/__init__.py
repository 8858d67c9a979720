"""Configuration module."""

from cairn.config.loader import apply_store_settings, get_default_config, load_config
from cairn.config.models import (
    CairnConfig,
    ConfigError,
    DatabaseConfig,
    EmbeddingsConfig,
    LLMConfig,
    OwnerConfig,
    ProviderConfig,
    ResolverConfig,
)
from cairn.config.paths import (
    get_cairn_home,
    get_config_path,
    get_database_path,
    get_logs_path,
)

__all__ = [
    "CairnConfig",
    "ConfigError",
    "DatabaseConfig",
    "EmbeddingsConfig",
    "LLMConfig",
    "OwnerConfig",
    "ProviderConfig",
    "ResolverConfig",
    "apply_store_settings",
    "get_cairn_home",
    "get_config_path",
    "get_database_path",
    "get_default_config",
    "get_logs_path",
    "load_config",
]
