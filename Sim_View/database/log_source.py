"""Read access to simulator logs stored in PostgreSQL."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Callable, Iterable, List, Protocol

import psycopg2
import psycopg2.extras
from psycopg2 import sql

from ..errors import SourceUnavailableError
from ..engine.records import Record, format_second, parse_time

logger = logging.getLogger(__name__)

COLUMNS = ("nid", "message", "time", "file", "level", "line", "param")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS {table} (
    id BIGSERIAL PRIMARY KEY,
    nid TEXT NOT NULL,
    message TEXT NOT NULL,
    time TEXT NOT NULL,
    file TEXT,
    level TEXT,
    line INTEGER,
    param JSONB
);
CREATE INDEX IF NOT EXISTS {index} ON {table} (time);
"""


class LogSource(Protocol):
    """Query interface the playback driver needs from a log store."""

    def earliest_timestamp(self) -> datetime | None: ...

    def last_timestamp(self) -> datetime | None: ...

    def records_at(
        self, second: datetime, message: str | None = None
    ) -> List[Record]: ...

    def close(self) -> None: ...

    def __enter__(self) -> "LogSource": ...

    def __exit__(self, *exc_info: Any) -> None: ...


class PostgresLogSource:
    """Log source backed by a PostgreSQL table of simulator records.

    Parameters
    ----------
    params:
        Keyword arguments for ``psycopg2.connect`` such as ``host``,
        ``port``, ``user``, ``password`` and ``dbname``.
    table:
        Name of the table holding the records.
    dsn:
        Optional libpq connection string used instead of ``params``.
    connect:
        Connection factory, ``psycopg2.connect`` by default.
    """

    def __init__(
        self,
        params: dict[str, Any] | None = None,
        table: str = "logs",
        *,
        dsn: str | None = None,
        connect: Callable[..., Any] = psycopg2.connect,
    ) -> None:
        self.table = table
        try:
            if dsn:
                self.conn = connect(dsn)
            else:
                self.conn = connect(**(params or {}))
        except psycopg2.Error as exc:
            raise SourceUnavailableError(
                f"cannot connect to log database: {exc}"
            ) from exc
        self.conn.autocommit = True

    def __enter__(self) -> "PostgresLogSource":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------
    def _fetch(self, query: sql.Composable, args: Iterable[Any] = ()) -> list[tuple]:
        try:
            with self.conn.cursor() as cur:
                cur.execute(query, tuple(args))
                return list(cur.fetchall())
        except psycopg2.Error as exc:
            raise SourceUnavailableError(f"log query failed: {exc}") from exc

    def _edge_time(self, direction: str) -> datetime | None:
        query = sql.SQL("SELECT time FROM {} ORDER BY time {} LIMIT 1").format(
            sql.Identifier(self.table), sql.SQL(direction)
        )
        rows = self._fetch(query)
        if not rows:
            return None
        return parse_time(rows[0][0])

    def earliest_timestamp(self) -> datetime | None:
        """Return the time of the oldest record, or ``None`` if empty."""
        return self._edge_time("ASC")

    def last_timestamp(self) -> datetime | None:
        """Return the time of the newest record, or ``None`` if empty."""
        return self._edge_time("DESC")

    def records_at(self, second: datetime, message: str | None = None) -> List[Record]:
        """Return records whose time falls in ``second``, oldest first.

        Sub-second precision is ignored when matching. ``message`` restricts
        the result to one message kind.
        """

        clauses = [sql.SQL("time LIKE %s")]
        args: list[Any] = [format_second(second) + "%"]
        if message is not None:
            clauses.append(sql.SQL("message = %s"))
            args.append(message)
        query = sql.SQL(
            "SELECT nid, message, time, file, level, line, param::text FROM {} "
            "WHERE {} ORDER BY time ASC"
        ).format(sql.Identifier(self.table), sql.SQL(" AND ").join(clauses))
        rows = self._fetch(query, args)
        return [Record.from_row(dict(zip(COLUMNS, row))) for row in rows]

    def close(self) -> None:
        """Close the database connection."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None


def initialize_log_table(
    config: dict[str, Any], table: str = "logs", *, dsn: str | None = None
) -> None:
    """Create the log table and its time index if they do not exist."""

    conn = None
    try:
        conn = psycopg2.connect(dsn) if dsn else psycopg2.connect(**config)
        conn.autocommit = True
        with conn.cursor() as cur:
            cur.execute(
                sql.SQL(SCHEMA_SQL).format(
                    table=sql.Identifier(table),
                    index=sql.Identifier(f"idx_{table}_time"),
                )
            )
    except psycopg2.Error as exc:  # pragma: no cover - networked operation
        raise SourceUnavailableError("Failed to initialize log table") from exc
    finally:
        if conn is not None:
            conn.close()


def load_rows(
    config: dict[str, Any],
    rows: Iterable[dict[str, Any]],
    table: str = "logs",
    *,
    dsn: str | None = None,
    page_size: int = 1000,
) -> int:
    """Insert raw log ``rows`` into ``table`` and return how many were written."""

    values = [
        tuple(json.dumps(r.get(c)) if c == "param" else r.get(c) for c in COLUMNS)
        for r in rows
    ]
    if not values:
        return 0
    conn = None
    try:
        conn = psycopg2.connect(dsn) if dsn else psycopg2.connect(**config)
        with conn.cursor() as cur:
            psycopg2.extras.execute_values(
                cur,
                sql.SQL("INSERT INTO {} ({}) VALUES %s").format(
                    sql.Identifier(table),
                    sql.SQL(", ").join(map(sql.Identifier, COLUMNS)),
                ),
                values,
                page_size=page_size,
            )
        conn.commit()
    except psycopg2.Error as exc:  # pragma: no cover - networked operation
        raise SourceUnavailableError("Failed to load log rows") from exc
    finally:
        if conn is not None:
            conn.close()
    logger.info("loaded %d rows into %s", len(values), table)
    return len(values)
