from datetime import timedelta

import pytest

from Sim_View.config import Config
from Sim_View.engine.playback import PlaybackDriver, PlaybackPhase, frame_digits
from Sim_View.errors import DecodeError, NoDataError
from Sim_View.render.drawers import PlaneDrawer

from tests.helpers import (
    T0,
    InMemoryLogSource,
    RecordingRenderer,
    at,
    links,
    make_record,
    position,
)


def _driver(records, config=None, renderer=None, **kwargs):
    return PlaybackDriver(
        config or Config(),
        InMemoryLogSource(records),
        renderer or RecordingRenderer(),
        PlaneDrawer(),
        **kwargs,
    )


def _scenario():
    """``a`` reports once at t0, ``b`` keeps listing ``a`` through t5."""
    records = [links("a", T0, "b")]
    records += [links("b", at(s), "a") for s in range(6)]
    return records


def test_liveness_scenario():
    driver = _driver(_scenario())
    driver.ingest_tick(T0)

    driver.step(at(1))
    assert driver.state.get("a").enabled

    for s in range(2, 6):
        driver.step(at(s))
    # a timed out at t4 but b is fresh and still lists it
    assert driver.state.get("a").enabled

    driver.step(at(6))
    assert driver.state.get("a").enabled
    assert driver.state.get("b").enabled

    for s in range(7, 10):
        driver.step(at(s))
    assert not driver.state.get("a").enabled
    assert not driver.state.get("b").enabled


def test_run_replays_every_second_until_last():
    renderer = RecordingRenderer()
    driver = _driver(_scenario(), renderer=renderer)

    drawn = driver.run()

    assert drawn == 5
    assert driver.source.queries == [at(s) for s in range(6)]
    assert driver.phase is PlaybackPhase.FINISHED
    assert renderer.digits == 1
    # one pre-roll frame, five ticks, one final present before the end check
    assert renderer.frames == 6


def test_step_summary_counts_groups():
    records = [
        position("a", T0, 0.0, 0.0),
        links("a", T0, "b", "c"),
        links("b", T0, "a", "c"),
        links("c", T0, "a", "b"),
        links("d", T0),
    ]
    driver = _driver(records)
    summary = driver.step(T0)
    assert summary.nodes == 4
    assert summary.enabled == 4
    assert summary.groups == 1
    assert summary.records == 5
    assert [driver.state.get(n).group for n in "abcd"] == [1, 1, 1, 0]


def test_renderer_quit_stops_playback():
    renderer = RecordingRenderer(max_frames=2)
    driver = _driver(_scenario(), renderer=renderer)
    assert driver.run() == 2
    assert driver.phase is PlaybackPhase.FINISHED


def test_empty_source_raises_no_data():
    with pytest.raises(NoDataError):
        _driver([]).run()


def test_tail_starts_before_last():
    records = [links("a", at(s)) for s in range(0, 30)]
    driver = _driver(records, config=Config(tail=True))
    driver.run()
    assert driver.source.queries[0] == at(29) - timedelta(seconds=10)


def test_decode_error_stops_playback():
    records = [links("a", T0), make_record("a", "links", at(1), {"nids": 5})]
    with pytest.raises(DecodeError):
        _driver(records).run()


def test_follow_mode_paces_near_now():
    sleeps = []
    renderer = RecordingRenderer(max_frames=3)
    records = [links("a", T0)]
    driver = _driver(
        records,
        config=Config(follow=True),
        renderer=renderer,
        clock=lambda: at(3),
        sleep=sleeps.append,
    )

    drawn = driver.run()

    # follow mode keeps going past the last record until the renderer quits
    assert drawn == 3
    assert renderer.digits == 6
    # every tick is within five seconds of "now"
    assert sleeps == [1.0, 1.0, 1.0]


def test_follow_mode_does_not_sleep_on_old_data():
    sleeps = []
    driver = _driver(
        [links("a", T0)],
        config=Config(follow=True),
        renderer=RecordingRenderer(max_frames=2),
        clock=lambda: at(3600),
        sleep=sleeps.append,
    )
    driver.run()
    assert sleeps == []


@pytest.mark.parametrize(
    "seconds, digits", [(0, 1), (5, 1), (9, 1), (10, 2), (99, 2), (100, 3), (12345, 5)]
)
def test_frame_digits(seconds, digits):
    assert frame_digits(T0, at(seconds)) == digits
