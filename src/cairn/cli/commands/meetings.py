"""Meeting listing, date correction, stats and question commands."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.text import Text

from cairn.cli.console import add_row, console, create_table, dim, error, success

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to configuration file"),
]


def _format_date(value) -> str:
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d")


def register(app: typer.Typer) -> None:
    """Register meetings, correct-date, stats and ask commands."""

    @app.command()
    def meetings(
        person_id: Annotated[
            int | None, typer.Option("--person", "-p", help="Only this person's")
        ] = None,
        limit: Annotated[int, typer.Option("--limit", "-n")] = 20,
        config_path: ConfigOption = None,
    ) -> None:
        """List meetings, newest first."""
        from cairn.cli.runtime import open_runtime

        async def run() -> None:
            async with open_runtime(config_path) as rt:
                rows = await rt.store.list_meetings(person_id=person_id, limit=limit)
                names = {p.id: p.name for p in await rt.store.list_people()}

            if not rows:
                dim("No meetings found.")
                return
            table = create_table(
                f"Meetings ({len(rows)})",
                [
                    ("ID", "dim"),
                    ("Date", "cyan"),
                    ("Summary", ""),
                    ("People", "green"),
                ],
            )
            for meeting in rows:
                add_row(
                    table,
                    str(meeting.id),
                    _format_date(meeting.date),
                    meeting.summary or "",
                    ", ".join(names.get(pid, f"#{pid}") for pid in meeting.person_ids),
                )
            console.print(table)

        asyncio.run(run())

    @app.command("correct-date")
    def correct_date(
        meeting_id: Annotated[int, typer.Argument(help="Meeting ID")],
        date: Annotated[str, typer.Argument(help="New date, ISO or e.g. 'last friday'")],
        config_path: ConfigOption = None,
    ) -> None:
        """Move a meeting to a different date."""
        from cairn.cli.dates import parse_date
        from cairn.cli.runtime import open_runtime

        new_date = parse_date(date)
        if new_date is None:
            error(f"Could not parse date: {date}")
            raise typer.Exit(1)

        async def run():
            async with open_runtime(config_path) as rt:
                return await rt.pipeline.correct_meeting_date(meeting_id, new_date)

        meeting = asyncio.run(run())
        if meeting is None:
            error(f"Meeting #{meeting_id} not found")
            raise typer.Exit(1)
        success(f"Meeting #{meeting_id} moved to {_format_date(meeting.date)}")

    @app.command()
    def stats(config_path: ConfigOption = None) -> None:
        """Show contact, meeting and relationship counts."""
        from cairn.cli.runtime import open_runtime
        from cairn.search import crm_stats

        async def run():
            async with open_runtime(config_path) as rt:
                return await crm_stats(rt.store)

        result = asyncio.run(run())
        table = create_table("CRM Stats", [("Metric", "cyan"), ("Value", "green")])
        add_row(table, "Contacts", str(result.total_contacts))
        add_row(table, "Meetings", str(result.total_meetings))
        add_row(table, "Meetings this week", str(result.meetings_this_week))
        add_row(table, "Relationships", str(result.total_relationships))
        add_row(table, "Tags", ", ".join(result.tags) or "-")
        console.print(table)

    @app.command()
    def ask(
        question: Annotated[str, typer.Argument(help="e.g. 'who works at Acme'")],
        config_path: ConfigOption = None,
    ) -> None:
        """Answer a short question about your contacts and meetings."""
        from cairn.cli.runtime import open_runtime
        from cairn.query import answer_query

        async def run():
            async with open_runtime(config_path) as rt:
                return await answer_query(rt.store, question)

        result = asyncio.run(run())
        dim(f"intent: {result.intent}")
        console.print(Text(result.answer))
