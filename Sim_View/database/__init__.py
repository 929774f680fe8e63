"""Log sources for the Sim_View replay."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import SourceUnavailableError
from .file_source import JsonLinesLogSource
from .log_source import LogSource, PostgresLogSource, initialize_log_table, load_rows

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from ..config import Config

__all__ = [
    "JsonLinesLogSource",
    "LogSource",
    "PostgresLogSource",
    "initialize_log_table",
    "load_rows",
    "open_log_source",
]


def open_log_source(config: "Config") -> LogSource:
    """Return the log source selected by ``config.source``."""

    if config.source == "jsonl":
        if not config.log_file:
            raise SourceUnavailableError("jsonl source requires a log file")
        return JsonLinesLogSource(config.log_file, follow=config.follow)
    if config.source == "postgres":
        return PostgresLogSource(config.database, config.table, dsn=config.dsn)
    raise SourceUnavailableError(f"unknown log source: {config.source!r}")
