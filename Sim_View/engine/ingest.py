"""Fold one tick of log records into :class:`TopologyState`."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from ..graph.model import TopologyState
from ..graph.types import AuthStatus, ConnectionStatus, MessageKind
from .records import Record, decode_payload

logger = logging.getLogger(__name__)


def ingest(
    state: TopologyState, records: Iterable[Record], current: datetime | None = None
) -> int:
    """Apply ``records`` to ``state`` in the order given.

    Each field is overwritten wholesale, so a later record for the same node
    and field within a tick wins. Link status values outside the known
    enums are stored as raw ints. Records with an untracked message kind are
    skipped and do not refresh the node's timestamp.

    Parameters
    ----------
    state:
        Topology to mutate.
    records:
        Records for one tick, sorted by time ascending.
    current:
        Tick being ingested; only used for diagnostics.

    Returns
    -------
    int
        Number of records applied.

    Raises
    ------
    DecodeError
        If a payload cannot be decoded. Records before the failing one have
        already been applied; callers must treat the state as inconsistent.
    """

    applied = 0
    for record in records:
        param = decode_payload(record)
        if param is None:
            continue
        node = state.touch(record.nid, record.timestamp)
        kind = record.kind
        if kind is MessageKind.CURRENT_POSITION:
            node.x = param.coordinate.x
            node.y = param.coordinate.y
        elif kind is MessageKind.LINKS:
            node.links = list(param.nids)
        elif kind is MessageKind.ROUTING_1D_REQUIRED:
            node.required_1d = set(param.nids)
        elif kind is MessageKind.ROUTING_2D_REQUIRED:
            node.required_2d = set(param.nids)
        elif kind is MessageKind.LINK_STATUS:
            node.seed_link_status = ConnectionStatus.from_wire(param.seed)
            node.node_link_status = ConnectionStatus.from_wire(param.node)
            node.auth_status = AuthStatus.from_wire(param.auth)
            node.is_only_one = param.onlyone
        applied += 1
    logger.debug("applied %d records at %s", applied, current)
    return applied
