"""Shared fakes and record builders for the test suite."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from Sim_View.engine.records import Record

T0 = datetime(2020, 5, 1, 12, 0, 0)


def at(seconds: float) -> datetime:
    """Return ``T0`` shifted by ``seconds``."""
    return T0 + timedelta(seconds=seconds)


def make_row(nid: str, message: str, when: datetime, param: Any, frac: str = "") -> dict:
    return {
        "nid": nid,
        "message": message,
        "time": when.strftime("%Y-%m-%dT%H:%M:%S") + frac,
        "param": param,
    }


def make_record(nid: str, message: str, when: datetime, param: Any) -> Record:
    return Record.from_row(make_row(nid, message, when, param))


def links(nid: str, when: datetime, *targets: str) -> Record:
    return make_record(nid, "links", when, {"nids": list(targets)})


def position(nid: str, when: datetime, x: float, y: float) -> Record:
    return make_record(nid, "current position", when, {"coordinate": {"x": x, "y": y}})


class InMemoryLogSource:
    """Log source serving pre-built records keyed by second."""

    def __init__(self, records: list[Record]) -> None:
        self.records = list(records)
        self.queries: list[datetime] = []
        self.closed = False

    def earliest_timestamp(self) -> datetime | None:
        return min((r.timestamp for r in self.records), default=None)

    def last_timestamp(self) -> datetime | None:
        return max((r.timestamp for r in self.records), default=None)

    def records_at(self, second: datetime, message: str | None = None) -> list[Record]:
        self.queries.append(second)
        return [
            r
            for r in self.records
            if r.timestamp == second and (message is None or r.message == message)
        ]

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "InMemoryLogSource":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class RecordingRenderer:
    """Renderer that records drawing calls and quits after ``max_frames``."""

    def __init__(self, max_frames: int | None = None) -> None:
        self.max_frames = max_frames
        self.color = (0.0, 0.0, 0.0)
        self.points: list[tuple] = []
        self.markers: list[tuple] = []
        self.segments: list[tuple] = []
        self.frames = 0
        self.digits: int | None = None

    def set_color(self, r: float, g: float, b: float) -> None:
        self.color = (r, g, b)

    def draw_point(self, x: float, y: float, z: float) -> None:
        self.points.append((x, y, z, self.color))

    def draw_marker(self, x: float, y: float, z: float, size: float) -> None:
        self.markers.append((x, y, z, size, self.color))

    def draw_segment(self, x1, y1, z1, x2, y2, z2) -> None:
        self.segments.append(((x1, y1, z1), (x2, y2, z2), self.color))

    def set_frame_counter_digits(self, digits: int) -> None:
        self.digits = digits

    def next_frame(self) -> bool:
        self.frames += 1
        if self.max_frames is not None and self.frames > self.max_frames:
            return False
        return True

