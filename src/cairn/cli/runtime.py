"""Wiring of config, store and providers for CLI commands."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import typer

from cairn.cli.console import error
from cairn.config import CairnConfig, ConfigError, apply_store_settings, load_config
from cairn.ingest import IngestionPipeline
from cairn.llm import ExtractionProvider, create_embedder, create_provider
from cairn.people import EntityResolver, OwnerNameFilter
from cairn.store import Store, create_store


@dataclass
class Runtime:
    config: CairnConfig
    store: Store
    provider: ExtractionProvider
    embedder: ExtractionProvider
    pipeline: IngestionPipeline


def get_config(config_path: Path | None) -> CairnConfig:
    """Load config or exit with a readable error."""
    try:
        return load_config(config_path)
    except (ConfigError, FileNotFoundError) as e:
        error(str(e))
        raise typer.Exit(1) from None


@asynccontextmanager
async def open_runtime(config_path: Path | None) -> AsyncIterator[Runtime]:
    """Connect the store and build providers, closing the database on exit."""
    config = get_config(config_path)
    store = await create_store(config)
    try:
        config = await apply_store_settings(config, store)
        provider = create_provider(config)
        embedder = create_embedder(config)
        resolver = EntityResolver(
            config=config.resolver, owner_filter=OwnerNameFilter(config.owner.names)
        )
        pipeline = IngestionPipeline(
            store, provider=provider, embedder=embedder, resolver=resolver
        )
        yield Runtime(
            config=config,
            store=store,
            provider=provider,
            embedder=embedder,
            pipeline=pipeline,
        )
    finally:
        await store.db.disconnect()
