"""Shared test fixtures and factories."""

from collections.abc import AsyncGenerator, Iterator
from pathlib import Path
from typing import Any

import pytest

from cairn.config.models import CairnConfig, DatabaseConfig
from cairn.config.paths import ENV_VAR, get_cairn_home
from cairn.db.engine import Database
from cairn.ingest import IngestionPipeline
from cairn.llm.base import ExtractionProvider
from cairn.llm.fallback import FallbackProvider
from cairn.people import EntityResolver, OwnerNameFilter
from cairn.store import Store

# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def cairn_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point CAIRN_HOME at a temporary directory and drop provider keys."""
    home = tmp_path / "cairn-home"
    monkeypatch.setenv(ENV_VAR, str(home))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    get_cairn_home.cache_clear()
    yield home
    get_cairn_home.cache_clear()


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path: Path) -> CairnConfig:
    """Offline configuration with a temporary database."""
    return CairnConfig(database=DatabaseConfig(path=tmp_path / "cairn.db"))


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Config file pointing at a temporary database."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        f"""
[database]
path = "{tmp_path / "cli.db"}"

[owner]
names = ["Jordan Avery"]
"""
    )
    return config_path


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """Create a temporary test database."""
    db = Database(database_path=tmp_path / "test.db")
    await db.connect()
    await db.create_all()

    yield db

    await db.disconnect()


@pytest.fixture
async def store(database: Database) -> Store:
    return Store(database)


# =============================================================================
# Provider Fixtures and Mocks
# =============================================================================


class MockProvider(ExtractionProvider):
    """Provider returning canned structured output."""

    def __init__(
        self,
        structured: dict[str, Any] | list[Any] | Exception | None = None,
        chat_response: str = "# Profile",
    ):
        self.structured = structured if structured is not None else {}
        self.chat_response = chat_response
        self.prompts: list[str] = []

    @property
    def name(self) -> str:
        return "mock"

    async def chat(self, prompt: str, system_prompt: str | None = None) -> str:
        self.prompts.append(prompt)
        return self.chat_response

    async def extract_structured(
        self, prompt: str, system_prompt: str | None = None
    ) -> dict[str, Any] | list[Any]:
        self.prompts.append(prompt)
        if isinstance(self.structured, Exception):
            raise self.structured
        return self.structured

    async def embed(self, text: str) -> list[float]:
        return await FallbackProvider().embed(text)


@pytest.fixture
def resolver() -> EntityResolver:
    """Resolver that knows the owner as Jordan Avery."""
    return EntityResolver(owner_filter=OwnerNameFilter(["Jordan Avery"]))


@pytest.fixture
def pipeline(store: Store, resolver: EntityResolver) -> IngestionPipeline:
    """Offline pipeline over the temporary store."""
    return IngestionPipeline(store, resolver=resolver)


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})
