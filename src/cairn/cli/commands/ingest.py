"""Meeting ingestion commands."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.text import Text

from cairn.cli.console import (
    add_row,
    console,
    create_table,
    dim,
    error,
    labeled,
    success,
    warning,
)
from cairn.ingest import IngestionPreview

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to configuration file"),
]


def _print_preview(preview: IngestionPreview) -> None:
    labeled("Summary", preview.extraction.summary)
    if preview.extraction.topics:
        labeled("Topics", ", ".join(preview.extraction.topics))
    if preview.owner_mentions:
        dim(f"Skipped owner mentions: {', '.join(preview.owner_mentions)}")

    table = create_table(
        "People",
        [
            ("Mentioned", "bold"),
            ("Best match", ""),
            ("Score", {"justify": "right"}),
            ("Other candidates", "dim"),
        ],
    )
    for match in preview.matches:
        best = f"{match.best.name} (#{match.best.person_id})" if match.best else "new"
        score = f"{match.best.score:.2f}" if match.best else "-"
        others = ", ".join(
            f"{c.name} {c.score:.2f}"
            for c in match.candidates
            if not match.best or c.person_id != match.best.person_id
        )
        add_row(table, match.extracted_name, best, score, others or "-")
    console.print(table)


def register(app: typer.Typer) -> None:
    """Register the preview and ingest commands."""

    @app.command()
    def preview(
        text: Annotated[str, typer.Argument(help="Meeting note text")],
        config_path: ConfigOption = None,
    ) -> None:
        """Show extracted people and their matches without saving anything."""
        from cairn.cli.runtime import open_runtime

        async def run() -> None:
            async with open_runtime(config_path) as rt:
                _print_preview(await rt.pipeline.preview(text))

        asyncio.run(run())

    @app.command()
    def ingest(
        text: Annotated[str, typer.Argument(help="Meeting note text")],
        date: Annotated[
            str | None,
            typer.Option(
                "--date", "-d", help="Meeting date, ISO or e.g. 'yesterday'"
            ),
        ] = None,
        source: Annotated[
            str, typer.Option("--source", help="Where the note came from")
        ] = "manual",
        config_path: ConfigOption = None,
    ) -> None:
        """Save a meeting, linking each person to their best match."""
        from cairn.cli.dates import parse_date
        from cairn.cli.runtime import open_runtime
        from cairn.errors import RelationshipConflictError

        meeting_date = None
        if date is not None:
            meeting_date = parse_date(date)
            if meeting_date is None:
                error(f"Could not parse date: {date}")
                raise typer.Exit(1)

        async def run() -> None:
            async with open_runtime(config_path) as rt:
                preview_result = await rt.pipeline.preview(text)
                _print_preview(preview_result)
                request = preview_result.to_confirm_request(
                    date=meeting_date, source=source
                )
                result = await rt.pipeline.confirm(request)

            success(f"Saved meeting #{result.meeting_id}")
            for person in result.linked_persons:
                label = "created" if person.created else "linked"
                line = f"  {label}: {person.name} (#{person.person_id})"
                console.print(Text(line))
            if result.relationships_updated:
                dim(f"{result.relationships_updated} relationship(s) updated")

        try:
            asyncio.run(run())
        except RelationshipConflictError as e:
            warning(f"{e}. Run the command again.")
            raise typer.Exit(1) from None
