"""Main CLI application."""

from typing import Annotated

import typer

from cairn.cli.commands import database, ingest, meetings, people

app = typer.Typer(
    name="cairn",
    help="Cairn - offline meeting notes and contact resolution",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    from cairn.logging import configure_logging

    configure_logging(level="DEBUG" if verbose else None, use_rich=True)


database.register(app)
ingest.register(app)
meetings.register(app)
people.register(app)


if __name__ == "__main__":
    app()
