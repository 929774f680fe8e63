"""Sim_View package initialization."""

from __future__ import annotations

from typing import Any

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .engine.playback import PlaybackDriver

__all__ = ["PlaybackDriver"]


def __getattr__(name: str) -> Any:  # pragma: no cover - attribute access
    """Lazily expose PlaybackDriver."""

    if name == "PlaybackDriver":
        from .engine.playback import PlaybackDriver as _PlaybackDriver

        return _PlaybackDriver
    raise AttributeError(name)
