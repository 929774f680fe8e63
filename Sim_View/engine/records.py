"""Log records and the decoded payload for each tracked message kind."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Union

from pydantic import BaseModel, ValidationError

from ..errors import DecodeError
from ..graph.types import MessageKind, RecordRow

TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
# Length of ``TIME_FORMAT`` once rendered; anything after it (fractional
# seconds, timezone) is dropped.
TIME_PREFIX_LEN = 19


def parse_time(value: str) -> datetime:
    """Return ``value`` truncated to whole seconds as a naive datetime."""
    return datetime.strptime(value[:TIME_PREFIX_LEN], TIME_FORMAT)


def format_second(moment: datetime) -> str:
    """Return the whole-second prefix used to match log times."""
    return moment.strftime(TIME_FORMAT)


@dataclass(frozen=True)
class Record:
    """One immutable log line."""

    nid: str
    message: str
    timestamp: datetime
    payload: bytes
    file: str | None = None
    level: str | None = None
    line: int | None = None

    @property
    def kind(self) -> MessageKind | None:
        return MessageKind.parse(self.message)

    @classmethod
    def from_row(cls, row: RecordRow) -> "Record":
        """Build a record from a raw log row.

        ``param`` may already be encoded (``bytes``/``str``) or be a decoded
        JSON object; it is stored as UTF-8 JSON bytes either way.
        """

        nid = str(row.get("nid", ""))
        message = str(row.get("message", ""))
        try:
            timestamp = parse_time(row["time"])
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodeError(nid, message, f"bad time {row.get('time')!r}") from exc
        param = row.get("param")
        if isinstance(param, bytes):
            payload = param
        elif isinstance(param, str):
            payload = param.encode("utf-8")
        else:
            payload = json.dumps({} if param is None else param).encode("utf-8")
        return cls(
            nid=nid,
            message=message,
            timestamp=timestamp,
            payload=payload,
            file=row.get("file"),
            level=row.get("level"),
            line=row.get("line"),
        )


class Point(BaseModel):
    x: float
    y: float


class CurrentPositionParam(BaseModel):
    coordinate: Point


class LinksParam(BaseModel):
    """Payload shared by ``links`` and ``routing 1d required``."""

    nids: List[str]


class Routing2DRequiredParam(BaseModel):
    # Coordinates are validated but not used for drawing.
    nids: Dict[str, Point]


class LinkStatusParam(BaseModel):
    # Raw wire values; mapped onto the status enums at ingest.
    seed: int
    node: int
    auth: int
    onlyone: bool


Payload = Union[
    CurrentPositionParam, LinksParam, Routing2DRequiredParam, LinkStatusParam
]

PAYLOAD_MODELS: dict[MessageKind, type[BaseModel]] = {
    MessageKind.CURRENT_POSITION: CurrentPositionParam,
    MessageKind.LINKS: LinksParam,
    MessageKind.ROUTING_1D_REQUIRED: LinksParam,
    MessageKind.ROUTING_2D_REQUIRED: Routing2DRequiredParam,
    MessageKind.LINK_STATUS: LinkStatusParam,
}


def decode_payload(record: Record) -> Payload | None:
    """Return the decoded payload of ``record``.

    Returns ``None`` for message kinds the engine does not track.

    Raises
    ------
    DecodeError
        If the payload is not valid JSON or does not match the schema of the
        record's message kind.
    """

    kind = record.kind
    if kind is None:
        return None
    model = PAYLOAD_MODELS[kind]
    try:
        return model.model_validate_json(record.payload)
    except ValidationError as exc:
        raise DecodeError(record.nid, record.message, str(exc)) from exc
