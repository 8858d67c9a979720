"""Search, people lookup, stale contacts and profile commands."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.markdown import Markdown

from cairn.cli.console import add_row, console, create_table, dim, error, success

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to configuration file"),
]


def register(app: typer.Typer) -> None:
    """Register search, people, stale and profile commands."""

    @app.command()
    def search(
        query: Annotated[str, typer.Argument(help="Search query")],
        limit: Annotated[int, typer.Option("--limit", "-n")] = 20,
        config_path: ConfigOption = None,
    ) -> None:
        """Search people and meetings by keyword and meaning."""
        from cairn.cli.runtime import open_runtime
        from cairn.search import search as run_search

        async def run() -> None:
            async with open_runtime(config_path) as rt:
                hits = await run_search(rt.store, rt.embedder, query, limit=limit)

            if not hits:
                dim("No results.")
                return
            table = create_table(
                f"Results for '{query}'",
                [
                    ("Type", "dim"),
                    ("ID", "dim"),
                    ("Title", "bold"),
                    ("Details", ""),
                    ("Score", {"justify": "right"}),
                ],
            )
            for hit in hits:
                add_row(
                    table,
                    hit.kind, str(hit.id), hit.title, hit.subtitle, f"{hit.score:.2f}"
                )
            console.print(table)

        asyncio.run(run())

    @app.command()
    def people(
        query: Annotated[
            str | None, typer.Argument(help="Name, company or tag to look for")
        ] = None,
        limit: Annotated[int, typer.Option("--limit", "-n")] = 10,
        config_path: ConfigOption = None,
    ) -> None:
        """List people, or find them by name, company or tag."""
        from cairn.cli.runtime import open_runtime
        from cairn.search import find_people

        async def run() -> None:
            async with open_runtime(config_path) as rt:
                matches = await find_people(rt.store, query or "", limit=limit)

            if not matches:
                dim("No people found.")
                return
            table = create_table(
                f"People ({len(matches)})",
                [
                    ("ID", "dim"),
                    ("Name", "bold"),
                    ("Company", ""),
                    ("Tags", "dim"),
                    ("Score", {"justify": "right"}),
                ],
            )
            for match in matches:
                person = match.person
                add_row(
                    table,
                    str(person.id),
                    person.name,
                    person.company or "-",
                    ", ".join(person.tags) or "-",
                    f"{match.score:.2f}" if query else "-",
                )
            console.print(table)

        asyncio.run(run())

    @app.command()
    def stale(
        days: Annotated[
            int, typer.Option("--days", help="Days without a meeting")
        ] = 30,
        config_path: ConfigOption = None,
    ) -> None:
        """List people you have not met for a while."""
        from cairn.cli.runtime import open_runtime
        from cairn.search import stale_contacts

        async def run() -> None:
            async with open_runtime(config_path) as rt:
                contacts = await stale_contacts(rt.store, days=days)

            if not contacts:
                dim(f"Everyone was seen in the last {days} days.")
                return
            table = create_table(
                "Stale contacts",
                [
                    ("ID", "dim"),
                    ("Name", "bold"),
                    ("Last meeting", ""),
                    ("Days", {"justify": "right"}),
                ],
            )
            for contact in contacts:
                add_row(
                    table,
                    str(contact.person.id),
                    contact.person.name,
                    f"{contact.last_meeting:%Y-%m-%d}",
                    str(contact.days_since_contact),
                )
            console.print(table)

        asyncio.run(run())

    @app.command()
    def profile(
        person_id: Annotated[int, typer.Argument(help="Person ID")],
        config_path: ConfigOption = None,
    ) -> None:
        """Regenerate and show a person's markdown profile."""
        from cairn.cli.runtime import open_runtime
        from cairn.people import regenerate_profile

        async def run() -> None:
            async with open_runtime(config_path) as rt:
                person = await regenerate_profile(
                    rt.store, rt.provider, rt.embedder, person_id
                )

            if person is None:
                error(f"Person #{person_id} not found")
                raise typer.Exit(1)
            console.print(Markdown(person.profile_md or ""))
            success(f"Profile updated for {person.name}")

        asyncio.run(run())
