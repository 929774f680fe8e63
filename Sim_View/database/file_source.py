"""Log source reading newline-delimited JSON dumps of simulator logs."""

from __future__ import annotations

import io
import json
import logging
import os
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, Iterable, List

import zstandard as zstd

from ..errors import DecodeError, SourceUnavailableError
from ..engine.records import Record

logger = logging.getLogger(__name__)


def iter_json(path: str) -> Iterable[dict[str, Any]]:
    """Yield JSON objects from ``path`` supporting optional ``.zst`` compression."""

    if path.endswith(".zst"):
        with open(path, "rb") as fh:
            dctx = zstd.ZstdDecompressor()
            with dctx.stream_reader(fh) as reader:
                wrapper = io.TextIOWrapper(reader, encoding="utf-8")
                for line in wrapper:
                    line = line.strip()
                    if line:
                        yield json.loads(line)
    else:
        with open(path, encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if line:
                    yield json.loads(line)


class JsonLinesLogSource:
    """Serve log queries from a JSON lines file.

    Each line is one record with ``nid``, ``message``, ``time`` and ``param``
    keys (``file``, ``level`` and ``line`` are optional). The whole file is
    indexed by second on first use. With ``follow`` enabled the file is
    re-read whenever a second past the indexed range is requested and the
    file has changed on disk.
    """

    def __init__(self, path: str, *, follow: bool = False) -> None:
        self.path = path
        self.follow = follow
        self._by_second: Dict[datetime, List[Record]] = {}
        self._earliest: datetime | None = None
        self._last: datetime | None = None
        self._stamp: tuple[float, int] | None = None
        self.refresh()

    def __enter__(self) -> "JsonLinesLogSource":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def refresh(self) -> bool:
        """Re-index the file if it changed; return ``True`` if it was read."""

        try:
            st = os.stat(self.path)
        except OSError as exc:
            raise SourceUnavailableError(f"cannot read log file {self.path}") from exc
        stamp = (st.st_mtime, st.st_size)
        if stamp == self._stamp:
            return False

        try:
            rows = list(iter_json(self.path))
        except (OSError, ValueError, zstd.ZstdError) as exc:
            raise SourceUnavailableError(
                f"cannot parse log file {self.path}: {exc}"
            ) from exc

        # stable sort on the full time string keeps sub-second order
        rows.sort(key=lambda r: str(r.get("time", "")))
        grouped: Dict[datetime, List[Record]] = defaultdict(list)
        try:
            for row in rows:
                record = Record.from_row(row)
                grouped[record.timestamp].append(record)
        except DecodeError as exc:
            raise SourceUnavailableError(
                f"cannot parse log file {self.path}: {exc}"
            ) from exc
        self._by_second = dict(grouped)
        self._earliest = min(self._by_second) if self._by_second else None
        self._last = max(self._by_second) if self._by_second else None
        self._stamp = stamp
        logger.info("indexed %d records from %s", len(rows), self.path)
        return True

    def earliest_timestamp(self) -> datetime | None:
        return self._earliest

    def last_timestamp(self) -> datetime | None:
        if self.follow:
            self.refresh()
        return self._last

    def records_at(self, second: datetime, message: str | None = None) -> List[Record]:
        """Return records whose time falls in ``second``, oldest first."""

        if self.follow and (self._last is None or second > self._last):
            self.refresh()
        second = second.replace(microsecond=0)
        records = self._by_second.get(second, [])
        if message is not None:
            return [r for r in records if r.message == message]
        return list(records)

    def close(self) -> None:
        self._by_second = {}
