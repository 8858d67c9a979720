"""Configuration loading from TOML files, environment and stored settings."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import SecretStr, ValidationError

from cairn.config.models import PROVIDER_ENV_VARS, CairnConfig, ConfigError
from cairn.config.paths import get_config_path

if TYPE_CHECKING:
    from cairn.store.protocols import CRMStore

# Keys of the settings table that override file configuration
SETTING_LLM_PROVIDER = "llm_provider"
SETTING_LLM_MODEL = "llm_model"
SETTING_LLM_API_KEY = "llm_api_key"
SETTING_EMBEDDING_PROVIDER = "embedding_provider"


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("config.toml"),  # Current directory
        get_config_path(),  # ~/.cairn/config.toml (or CAIRN_HOME)
        Path("/etc/cairn/config.toml"),  # System-wide
    ]


def _resolve_env_secrets(config: dict[str, Any]) -> dict[str, Any]:
    """Fill provider API keys from environment variables where not set."""
    for provider, env_var in PROVIDER_ENV_VARS.items():
        section = config.get(provider)
        if section is None or section.get("api_key") is not None:
            continue
        value = os.environ.get(env_var)
        if value:
            section["api_key"] = SecretStr(value)
    return config


def load_config(path: Path | None = None) -> CairnConfig:
    """Load configuration from a TOML file.

    Args:
        path: Explicit path to config file. If None, searches default
            locations and falls back to the offline defaults.

    Returns:
        Validated CairnConfig instance.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigError: If the config file is invalid.
    """
    config_path: Path | None = None

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in _get_default_config_paths():
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    if config_path is None:
        return get_default_config()

    with config_path.open("rb") as f:
        try:
            raw_config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    raw_config = _resolve_env_secrets(raw_config)

    try:
        return CairnConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e


def get_default_config() -> CairnConfig:
    """Get the fully offline default configuration."""
    return CairnConfig()


async def apply_store_settings(config: CairnConfig, store: CRMStore) -> CairnConfig:
    """Overlay provider settings persisted in the settings table.

    Settings written by the application UI win over the config file so a
    user can switch providers without editing TOML.
    """
    settings = await store.get_settings()
    if not settings:
        return config

    data = config.model_dump()
    if provider := settings.get(SETTING_LLM_PROVIDER):
        data["llm"]["provider"] = provider
    if model := settings.get(SETTING_LLM_MODEL):
        data["llm"]["model"] = model
    if embedding_provider := settings.get(SETTING_EMBEDDING_PROVIDER):
        data["embeddings"]["provider"] = embedding_provider

    # A single stored key serves whichever networked providers are selected
    if api_key := settings.get(SETTING_LLM_API_KEY):
        for provider in {data["llm"]["provider"], data["embeddings"]["provider"]}:
            if provider in PROVIDER_ENV_VARS:
                data[provider] = {"api_key": SecretStr(api_key)}

    try:
        return CairnConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid stored settings: {e}") from e
