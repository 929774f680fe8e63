"""Per-tick liveness rule for replayed nodes."""

from __future__ import annotations

from datetime import datetime, timedelta

from ..graph.model import Node, TopologyState

DEFAULT_TIMEOUT = timedelta(seconds=4)


def is_fresh(
    node: Node, current: datetime, timeout: timedelta = DEFAULT_TIMEOUT
) -> bool:
    """Return ``True`` if ``node`` reported within ``timeout`` of ``current``."""
    return node.last_update + timeout > current


def refresh_liveness(
    state: TopologyState, current: datetime, timeout: timedelta = DEFAULT_TIMEOUT
) -> None:
    """Recompute ``enabled`` for every node at ``current``.

    A node is enabled when its own last update is fresh. A timed-out node is
    still enabled if any node it links to is fresh and links back to it.
    Only neighbours' timestamps and link lists are read, never their
    ``enabled`` flag, so the result does not depend on iteration order.
    """

    for node in state.nodes.values():
        if is_fresh(node, current, timeout):
            node.enabled = True
            continue

        node.enabled = False
        for next_nid in node.links:
            peer = state.nodes.get(next_nid)
            if peer is None:
                continue
            if is_fresh(peer, current, timeout) and state.is_reciprocal(node, peer):
                node.enabled = True
                break
