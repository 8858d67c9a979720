"""Date argument parsing for CLI commands."""

from __future__ import annotations

from datetime import UTC, datetime


def parse_date(value: str) -> datetime | None:
    """Parse an ISO timestamp or natural language ("yesterday 3pm").

    Naive values are taken as UTC. Returns None if nothing parses.
    """
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        import dateparser

        settings: dict = {
            "TIMEZONE": "UTC",
            "RETURN_AS_TIMEZONE_AWARE": True,
            "PREFER_DATES_FROM": "past",
        }
        parsed = dateparser.parse(value, settings=settings)
        if parsed is None:
            return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
