"""Connected-component grouping used to colour nodes.

Groups are rebuilt from scratch every tick:

1. every node's ``group`` is reset to ``0``;
2. each enabled, still ungrouped node seeds a new component that is filled by
   a depth-first walk over outgoing links to enabled nodes;
3. components are ranked by member count, largest first, ties keeping
   discovery order;
4. ranks become the final ids ``1, 2, ...`` and components below the minimum
   size collapse to ``0``.

Nodes are visited in ascending id order so identical snapshots always get
identical ids.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from ..graph.model import Node, TopologyState

NOISE_GROUP = 0
DEFAULT_MIN_GROUP_SIZE = 3


@dataclass
class Group:
    """Component found during one grouping pass."""

    count: int
    assign: int = NOISE_GROUP


def _walk(state: TopologyState, start: Node, group: int) -> int:
    """Mark every enabled node reachable from ``start`` and return the count."""

    start.group = group
    count = 1
    stack = [start]
    while stack:
        node = stack.pop()
        for link_nid in node.links:
            peer = state.nodes.get(link_nid)
            if peer is None or not peer.enabled or peer.group != NOISE_GROUP:
                continue
            # mark before pushing so self-loops and cycles are counted once
            peer.group = group
            count += 1
            stack.append(peer)
    return count


def assign_groups(
    state: TopologyState, min_size: int = DEFAULT_MIN_GROUP_SIZE
) -> List[Group]:
    """Assign size-ranked group ids to every enabled node in ``state``.

    Disabled nodes end with group ``0``. Returns the groups in rank order.
    """

    for node in state.nodes.values():
        node.group = NOISE_GROUP

    # temporary ids start at 1 so 0 keeps meaning "ungrouped" during the walk
    groups: Dict[int, Group] = {}
    for nid in sorted(state.nodes):
        node = state.nodes[nid]
        if not node.enabled or node.group != NOISE_GROUP:
            continue
        temp = len(groups) + 1
        groups[temp] = Group(count=_walk(state, node, temp))

    # dicts keep insertion order and sorted() is stable, so ties stay in
    # discovery order
    order = sorted(groups.values(), key=lambda g: g.count, reverse=True)
    for rank, group in enumerate(order, start=1):
        group.assign = rank if group.count >= min_size else NOISE_GROUP

    for node in state.nodes.values():
        if node.group != NOISE_GROUP:
            node.group = groups[node.group].assign
    return order
