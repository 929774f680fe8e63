"""Exceptions raised while replaying a simulation log.

Every error here is terminal for the playback session: topology state after a
partially ingested tick is not consistent enough to group or draw.
"""

from __future__ import annotations


class ViewerError(Exception):
    """Base class for all viewer failures."""


class DecodeError(ViewerError):
    """Raised when a record payload does not match its declared message kind.

    Attributes
    ----------
    nid:
        Node id of the offending record.
    message:
        Message kind string of the offending record.
    detail:
        Human-readable description of the decoding failure.
    """

    def __init__(self, nid: str, message: str, detail: str) -> None:
        self.nid = nid
        self.message = message
        self.detail = detail
        super().__init__(f"failed to decode '{message}' from {nid}: {detail}")


class NoDataError(ViewerError):
    """Raised when the log source holds no records at all."""


class SourceUnavailableError(ViewerError):
    """Raised when the log source cannot be read."""


class RenderFaultError(ViewerError):
    """Raised when the rendering backend cannot present a frame."""
