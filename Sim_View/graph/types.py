from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, TypedDict


class MessageKind(str, Enum):
    """Log messages understood by the topology engine.

    Values are the ``message`` strings written by the simulator.
    """

    CURRENT_POSITION = "current position"
    LINKS = "links"
    ROUTING_1D_REQUIRED = "routing 1d required"
    ROUTING_2D_REQUIRED = "routing 2d required"
    LINK_STATUS = "link status"

    @classmethod
    def parse(cls, message: str) -> "MessageKind | None":
        """Return the kind for ``message`` or ``None`` if it is not tracked."""
        try:
            return cls(message)
        except ValueError:
            return None


class _WireStatus(IntEnum):
    @classmethod
    def from_wire(cls, value: int) -> int:
        """Return the member for ``value``, or ``value`` itself if unknown."""
        try:
            return cls(value)
        except ValueError:
            return value


class ConnectionStatus(_WireStatus):
    OFFLINE = 0
    CONNECTING = 1
    ONLINE = 2
    CLOSING = 3


class AuthStatus(_WireStatus):
    NONE = 0
    SUCCESS = 1
    FAILURE = 2


# Shape of one raw log row as stored by the simulator.
RecordRow = TypedDict(
    "RecordRow",
    {
        "nid": str,
        "message": str,
        "time": str,
        "file": str,
        "level": str,
        "line": int,
        "param": Any,
    },
    total=False,
)
