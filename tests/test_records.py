import json
from datetime import datetime

import pytest

from Sim_View.engine.records import (
    CurrentPositionParam,
    LinkStatusParam,
    Record,
    Routing2DRequiredParam,
    decode_payload,
)
from Sim_View.errors import DecodeError
from Sim_View.graph.types import MessageKind

from tests.helpers import T0, make_record, make_row


def test_from_row_drops_fraction_and_timezone():
    row = make_row("n1", "links", T0, {"nids": []}, frac=".734512+09:00")
    record = Record.from_row(row)
    assert record.timestamp == datetime(2020, 5, 1, 12, 0, 0)
    assert record.kind is MessageKind.LINKS


def test_from_row_encodes_param_objects():
    record = make_record("n1", "links", T0, {"nids": ["a", "b"]})
    assert json.loads(record.payload) == {"nids": ["a", "b"]}


def test_from_row_keeps_encoded_param():
    row = make_row("n1", "links", T0, b'{"nids": ["x"]}')
    assert Record.from_row(row).payload == b'{"nids": ["x"]}'


def test_from_row_rejects_bad_time():
    with pytest.raises(DecodeError) as info:
        Record.from_row({"nid": "n1", "message": "links", "time": "yesterday"})
    assert info.value.nid == "n1"


def test_decode_current_position():
    record = make_record("n1", "current position", T0, {"coordinate": {"x": 1.5, "y": -2}})
    param = decode_payload(record)
    assert isinstance(param, CurrentPositionParam)
    assert (param.coordinate.x, param.coordinate.y) == (1.5, -2.0)


def test_decode_routing_2d_validates_values():
    record = make_record(
        "n1", "routing 2d required", T0, {"nids": {"a": {"x": 0.1, "y": 0.2}}}
    )
    param = decode_payload(record)
    assert isinstance(param, Routing2DRequiredParam)
    assert set(param.nids) == {"a"}

    bad = make_record("n1", "routing 2d required", T0, {"nids": {"a": {"x": "far"}}})
    with pytest.raises(DecodeError):
        decode_payload(bad)


def test_decode_link_status_keeps_wire_ints():
    record = make_record(
        "n1", "link status", T0, {"seed": 2, "node": 1, "auth": 2, "onlyone": True}
    )
    param = decode_payload(record)
    assert isinstance(param, LinkStatusParam)
    assert (param.seed, param.node, param.auth) == (2, 1, 2)
    assert param.onlyone is True


def test_decode_mismatched_payload_raises():
    record = make_record("n1", "links", T0, {"coordinate": {"x": 0, "y": 0}})
    with pytest.raises(DecodeError) as info:
        decode_payload(record)
    assert info.value.message == "links"


def test_decode_invalid_json_raises():
    record = Record(nid="n1", message="links", timestamp=T0, payload=b"{not json")
    with pytest.raises(DecodeError):
        decode_payload(record)


def test_untracked_message_decodes_to_none():
    record = make_record("n1", "debug dump", T0, {"anything": 1})
    assert record.kind is None
    assert decode_payload(record) is None
