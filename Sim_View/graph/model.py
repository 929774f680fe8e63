from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Set

from .types import AuthStatus, ConnectionStatus


@dataclass
class Node:
    """Last known state of one simulated node.

    ``enabled`` and ``group`` are recomputed in full on every tick; the other
    fields hold whatever the log last said about the node.
    """

    nid: str
    enabled: bool = True
    group: int = 0
    x: float = 0.0
    y: float = 0.0
    links: List[str] = field(default_factory=list)
    required_1d: Set[str] = field(default_factory=set)
    required_2d: Set[str] = field(default_factory=set)
    seed_link_status: int = ConnectionStatus.OFFLINE
    node_link_status: int = ConnectionStatus.OFFLINE
    auth_status: int = AuthStatus.NONE
    is_only_one: bool = False
    last_update: datetime = datetime.min

    def has_link(self, nid: str) -> bool:
        """Return ``True`` if this node currently lists ``nid`` as a link."""
        return nid in self.links

    def has_required_2d(self, nid: str) -> bool:
        return nid in self.required_2d


@dataclass
class TopologyState:
    """Mapping of node id to :class:`Node` for the whole replay.

    Nodes are added the first time a record mentions them and are never
    removed; a node that stops reporting is only disabled. Links are kept as
    id lists and resolved through :attr:`nodes`, so they may point to ids that
    have not been seen yet.
    """

    nodes: Dict[str, Node] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes.values())

    def __contains__(self, nid: object) -> bool:
        return nid in self.nodes

    def get(self, nid: str) -> Node | None:
        """Return the node for ``nid`` if it has been seen."""
        return self.nodes.get(nid)

    def touch(self, nid: str, timestamp: datetime) -> Node:
        """Return the node for ``nid``, creating it if needed, and stamp it."""
        node = self.nodes.get(nid)
        if node is None:
            node = Node(nid=nid)
            self.nodes[nid] = node
        node.last_update = timestamp
        return node

    def enabled_nodes(self) -> List[Node]:
        return [node for node in self.nodes.values() if node.enabled]

    def is_reciprocal(self, source: Node, target: Node) -> bool:
        """Return ``True`` if ``source`` and ``target`` list each other."""
        return target.has_link(source.nid) and source.has_link(target.nid)
