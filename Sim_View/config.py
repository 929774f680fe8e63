# config.py

from __future__ import annotations

import dataclasses
import json
import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any


def _default_database() -> dict[str, Any]:
    return {
        "host": "localhost",
        "port": 5432,
        "user": "postgres",
        "password": "",
        "dbname": "simulation",
    }


@dataclass
class Config:
    """Runtime configuration for one playback session.

    A single instance is built at startup (defaults, then an optional JSON
    file, then CLI flags) and handed to the playback driver. Nothing reads
    configuration from module state.

    Attributes
    ----------
    projection:
        ``"plane"`` for the identity projection or ``"sphere"`` to wrap
        logical coordinates onto the unit sphere.
    source:
        Log backend: ``"postgres"`` or ``"jsonl"``.
    database:
        ``psycopg2.connect`` keyword arguments used by the PostgreSQL source.
    dsn:
        Optional libpq connection string; takes precedence over ``database``.
    table:
        Table holding the log records.
    log_file:
        Path of a JSON lines log (``.jsonl`` or ``.jsonl.zst``) used by the
        ``jsonl`` source.
    follow:
        Keep polling for new records instead of stopping at the last
        timestamp seen at startup.
    tail:
        Start ``tail_offset_seconds`` before the last record instead of at the
        earliest one.
    detail_level:
        ``0`` hides links that are not routing-required; ``1`` draws them.
    image_name:
        Output path pattern for frame capture. Every ``@`` is replaced by the
        zero-padded frame index. Empty disables capture.
    timeout_seconds:
        Heartbeat timeout after which a node is considered gone unless a
        fresh peer still lists it.
    min_group_size:
        Components smaller than this collapse into group ``0``.
    """

    projection: str = "plane"
    source: str = "postgres"
    database: dict[str, Any] = field(default_factory=_default_database)
    dsn: str | None = None
    table: str = "logs"
    log_file: str | None = None
    follow: bool = False
    tail: bool = False
    detail_level: int = 0
    image_name: str = ""
    headless: bool = False
    window_size: int = 1024
    view_extent: float = 1.05
    timeout_seconds: float = 4.0
    min_group_size: int = 3
    tail_offset_seconds: float = 10.0
    follow_margin_seconds: float = 5.0
    follow_sleep_seconds: float = 1.0
    follow_digits: int = 6

    @property
    def timeout(self) -> timedelta:
        return timedelta(seconds=self.timeout_seconds)

    @property
    def tail_offset(self) -> timedelta:
        return timedelta(seconds=self.tail_offset_seconds)

    @property
    def follow_margin(self) -> timedelta:
        return timedelta(seconds=self.follow_margin_seconds)

    def update(self, data: dict[str, Any], base_dir: str | None = None) -> None:
        """Assign values from ``data`` onto this instance.

        Only keys that already exist as fields are assigned. Nested
        dictionaries are merged when the existing value is also a ``dict``.
        A relative ``log_file`` is resolved against ``base_dir``.
        """

        names = {f.name for f in dataclasses.fields(self)}
        for key, value in data.items():
            if key not in names:
                continue
            if key == "log_file" and value and base_dir and not os.path.isabs(value):
                value = os.path.join(base_dir, value)
            current = getattr(self, key)
            if isinstance(current, dict) and isinstance(value, dict):
                current.update(value)
            else:
                setattr(self, key, value)

    @staticmethod
    def read_file(path: str) -> dict[str, Any]:
        """Return the raw mapping stored in the JSON file at ``path``."""
        if not os.path.exists(path):
            raise FileNotFoundError(path)
        with open(path) as f:
            return json.load(f)

    @classmethod
    def load_from_file(cls, path: str) -> "Config":
        """Return a configuration with values loaded from a JSON file.

        Parameters
        ----------
        path:
            Path to the JSON configuration file.
        """

        data = cls.read_file(path)
        cfg = cls()
        cfg.update(data, base_dir=os.path.dirname(os.path.abspath(path)))
        return cfg
