"""Tick loop replaying a simulation log one second per frame."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable

from ..config import Config
from ..database.log_source import LogSource
from ..errors import NoDataError
from ..graph.model import TopologyState
from ..render.drawers import Drawer
from ..render.renderer import Renderer
from .grouping import assign_groups
from .ingest import ingest
from .liveness import refresh_liveness

logger = logging.getLogger(__name__)

TICK = timedelta(seconds=1)


class PlaybackPhase(str, Enum):
    INITIALIZING = "initializing"
    PLAYING = "playing"
    FOLLOWING = "following"
    FINISHED = "finished"


@dataclass
class TickSummary:
    """Outcome of one replayed tick."""

    tick: datetime
    records: int
    nodes: int
    enabled: int
    groups: int


def utc_now() -> datetime:
    """Return the current UTC time as a naive datetime like the log times."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def frame_digits(start: datetime, last: datetime) -> int:
    """Return the zero padding needed to number frames from ``start`` to ``last``."""
    span = (last - start).total_seconds()
    if span < 1:
        return 1
    return int(math.log10(span)) + 1


class PlaybackDriver:
    """Sequence ingest, liveness, grouping and drawing for every tick.

    Parameters
    ----------
    config:
        Session configuration (follow/tail flags, timeouts, pacing).
    source:
        Log source to replay.
    renderer:
        Drawing capability; must already be set up.
    drawer:
        Projection-specific drawer.
    clock:
        Returns the current wall-clock time for follow pacing.
    sleep:
        Blocks for the given number of seconds while waiting for new data.
    """

    def __init__(
        self,
        config: Config,
        source: LogSource,
        renderer: Renderer,
        drawer: Drawer,
        *,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.source = source
        self.renderer = renderer
        self.drawer = drawer
        self.clock = clock
        self.sleep = sleep
        self.state = TopologyState()
        self.phase = PlaybackPhase.INITIALIZING
        self.current: datetime | None = None
        self.last: datetime | None = None

    # ------------------------------------------------------------
    def _time_range(self) -> tuple[datetime, datetime]:
        earliest = self.source.earliest_timestamp()
        last = self.source.last_timestamp()
        if earliest is None or last is None:
            raise NoDataError("log source holds no records")
        start = earliest
        if self.config.tail:
            start = last - self.config.tail_offset
        return start, last

    def ingest_tick(self, current: datetime) -> int:
        """Fold the records logged during ``current`` into the topology."""
        records = self.source.records_at(current)
        return ingest(self.state, records, current)

    def step(self, current: datetime) -> TickSummary:
        """Replay one tick and draw it."""

        applied = self.ingest_tick(current)
        refresh_liveness(self.state, current, self.config.timeout)
        groups = assign_groups(self.state, self.config.min_group_size)
        self.drawer.draw(self.renderer, self.state, current)
        summary = TickSummary(
            tick=current,
            records=applied,
            nodes=len(self.state),
            enabled=len(self.state.enabled_nodes()),
            groups=sum(1 for g in groups if g.assign != 0),
        )
        logger.debug("tick %s: %s", current.isoformat(), summary)
        return summary

    def _wait_for_data(self, current: datetime) -> None:
        if current > self.clock() - self.config.follow_margin:
            self.sleep(self.config.follow_sleep_seconds)

    def run(self) -> int:
        """Replay until the log ends or the renderer asks to quit.

        Returns
        -------
        int
            Number of ticks drawn.

        Raises
        ------
        NoDataError
            If the source holds no records.
        DecodeError, SourceUnavailableError, RenderFaultError
            Propagated unchanged; playback stops.
        """

        self.phase = PlaybackPhase.INITIALIZING
        current, last = self._time_range()
        self.current, self.last = current, last
        logger.info("replaying from %s to %s", current.isoformat(), last.isoformat())

        self.ingest_tick(current)

        if self.config.follow:
            self.renderer.set_frame_counter_digits(self.config.follow_digits)
            self.phase = PlaybackPhase.FOLLOWING
        else:
            self.renderer.set_frame_counter_digits(frame_digits(current, last))
            self.phase = PlaybackPhase.PLAYING

        drawn = 0
        while self.renderer.next_frame():
            current = current + TICK
            self.current = current
            if self.config.follow:
                self._wait_for_data(current)
            elif current > last:
                break
            self.step(current)
            drawn += 1

        self.phase = PlaybackPhase.FINISHED
        logger.info("playback finished after %d ticks", drawn)
        return drawn
