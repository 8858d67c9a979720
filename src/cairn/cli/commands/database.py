"""Database commands."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from cairn.cli.console import success


def register(app: typer.Typer) -> None:
    """Register the init-db command."""

    @app.command("init-db")
    def init_db(
        config_path: Annotated[
            Path | None,
            typer.Option("--config", "-c", help="Path to configuration file"),
        ] = None,
    ) -> None:
        """Create the database and any missing tables."""
        from cairn.cli.runtime import get_config
        from cairn.store import create_store

        config = get_config(config_path)

        async def run() -> None:
            store = await create_store(config)
            await store.db.disconnect()

        asyncio.run(run())
        location = config.database.url or str(config.database.path)
        success(f"Database ready at {location}")
