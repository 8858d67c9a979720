"""Centralized logging configuration for Cairn.

Entry points (CLI, embedding applications) call configure_logging() once.
Library modules only ever do ``logger = logging.getLogger(__name__)``.

Logging Levels:
- DEBUG: Extraction votes, resolver scores, store writes
- INFO: Ingestion summaries (meeting created, people linked)
- WARNING: Degraded outcomes (embedding skipped, provider output re-parsed)
- ERROR: Failures surfaced to the caller

Guidelines:
- Messages are short snake_case event names; details go in ``extra``
- Never log raw meeting text at INFO or above
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any, TextIO

DEFAULT_LOG_RETENTION_DAYS = 7
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Group 1, when present, is the secret itself; otherwise the whole match
DEFAULT_REDACT_PATTERNS: list[str] = [
    r"\b(sk-[A-Za-z0-9_-]{20,})\b",  # OpenAI / Anthropic
    r"\b(AIza[0-9A-Za-z\-_]{20,})\b",  # Google
    r"\b[A-Z0-9_]+(?:KEY|TOKEN|SECRET|PASSWORD)\s*[=:]\s*([^\s\"']{8,})",
    r"\bBearer\s+([A-Za-z0-9._\-+=]{20,})\b",
]

# Attributes every LogRecord carries; anything else arrived through ``extra``
_STANDARD_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "component"}

NOISY_LOGGERS = [
    "httpx",
    "httpcore",
    "anthropic",
    "openai",
    "aiosqlite",
    "sqlalchemy.engine",
]


def _mask(secret: str) -> str:
    if "..." in secret:
        return secret
    if len(secret) < 12:
        return "***"
    return f"{secret[:4]}...{secret[-4:]}"


@dataclass
class SecretRedactor:
    """Masks API keys and tokens, keeping the first and last four characters."""

    patterns: list[re.Pattern[str]] = field(default_factory=list)
    enabled: bool = True

    def __post_init__(self) -> None:
        if not self.patterns:
            self.patterns = [
                re.compile(p, re.IGNORECASE) for p in DEFAULT_REDACT_PATTERNS
            ]

    def redact(self, text: str) -> str:
        if not self.enabled or not text:
            return text
        for pattern in self.patterns:
            text = pattern.sub(self._replace, text)
        return text

    @staticmethod
    def _replace(match: re.Match[str]) -> str:
        if not match.lastindex:
            return _mask(match.group(0))
        start, end = match.span(1)
        offset = match.start(0)
        full = match.group(0)
        return (
            full[: start - offset] + _mask(match.group(1)) + full[end - offset :]
        )


_redactor = SecretRedactor()


def prune_old_logs(
    logs_dir: Path,
    retention_days: int = DEFAULT_LOG_RETENTION_DAYS,
    suffix: str = ".jsonl",
) -> int:
    """Delete ``*suffix`` files not modified within the retention period.

    Returns the number of files deleted.
    """
    if not logs_dir.is_dir():
        return 0

    cutoff = (datetime.now(UTC) - timedelta(days=retention_days)).timestamp()
    deleted = 0
    for path in logs_dir.glob(f"*{suffix}"):
        try:
            if path.is_file() and path.stat().st_mtime < cutoff:
                path.unlink()
                deleted += 1
        except OSError:
            continue
    return deleted


def _component(record: logging.LogRecord) -> str:
    """cairn.ingest.pipeline -> ingest; foreign loggers keep their root."""
    root, _, rest = record.name.partition(".")
    if root == "cairn" and rest:
        return rest.split(".", 1)[0]
    return root


def record_extra(record: logging.LogRecord) -> dict[str, Any]:
    """Return the fields that were passed through ``extra=``."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
    }


class JSONLHandler(logging.Handler):
    """Appends one redacted JSON object per record to ``YYYY-MM-DD.jsonl``.

    A new file is opened when the UTC date changes, at which point files
    older than ``retention_days`` are pruned.
    """

    def __init__(
        self,
        logs_dir: Path,
        retention_days: int = DEFAULT_LOG_RETENTION_DAYS,
    ):
        super().__init__()
        logs_dir.mkdir(parents=True, exist_ok=True)
        self._logs_dir = logs_dir
        self._retention_days = retention_days
        self._day: str | None = None
        self._file: TextIO | None = None

    def _stream(self) -> TextIO:
        day = datetime.now(UTC).strftime("%Y-%m-%d")
        if self._file is None or day != self._day:
            self.close_file()
            self._day = day
            self._file = (self._logs_dir / f"{day}.jsonl").open("a", encoding="utf-8")
            prune_old_logs(self._logs_dir, self._retention_days)
        return self._file

    def _entry(self, record: logging.LogRecord) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "component": _component(record),
            "logger": record.name,
            "message": _redactor.redact(record.getMessage()),
        }
        if record.exc_info:
            formatter = self.formatter or logging.Formatter()
            entry["exception"] = _redactor.redact(
                formatter.formatException(record.exc_info)
            )
        if extra := record_extra(record):
            # Redact the serialized form so nested values are covered too
            redacted = _redactor.redact(json.dumps(extra, default=str))
            try:
                entry["extra"] = json.loads(redacted)
            except json.JSONDecodeError:
                entry["extra"] = {"_redacted_raw": redacted}
        return entry

    def emit(self, record: logging.LogRecord) -> None:
        try:
            stream = self._stream()
            stream.write(json.dumps(self._entry(record)) + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)

    def close_file(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def close(self) -> None:
        self.close_file()
        super().close()


class ComponentFormatter(logging.Formatter):
    """Adds ``%(component)s`` and appends ``extra`` fields as key=value.

    - cairn.ingest.pipeline -> ingest
    - cairn.people.resolver -> people
    """

    def format(self, record: logging.LogRecord) -> str:
        record.component = _component(record)
        message = super().format(record)
        if extra := record_extra(record):
            details = " ".join(f"{k}={v}" for k, v in extra.items())
            message = f"{message} {details}"
        return _redactor.redact(message)


def _console_handler(use_rich: bool) -> logging.Handler:
    if use_rich:
        from rich.logging import RichHandler

        handler: logging.Handler = RichHandler(
            rich_tracebacks=False, show_path=False, show_time=True, markup=False
        )
        handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
        return handler

    handler = logging.StreamHandler()
    handler.setFormatter(
        ComponentFormatter(
            "%(asctime)s | %(levelname)-8s | %(component)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    return handler


def configure_logging(
    level: str | None = None,
    use_rich: bool = False,
    log_to_file: bool = False,
) -> None:
    """Configure logging for Cairn.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses CAIRN_LOG_LEVEL env var or INFO.
        use_rich: Use Rich handler for colorful console output.
        log_to_file: Also write logs to JSONL files in ~/.cairn/logs/.
    """
    from cairn.config.paths import get_logs_path

    level = (level or os.environ.get("CAIRN_LOG_LEVEL", "INFO")).upper()
    if level not in LOG_LEVELS:
        level = "INFO"
    log_level = getattr(logging, level)

    handlers = [_console_handler(use_rich)]
    if log_to_file:
        file_handler = JSONLHandler(get_logs_path())
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
