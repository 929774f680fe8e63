"""Topology state tracked across replay ticks."""

from .model import Node, TopologyState
from .types import AuthStatus, ConnectionStatus, MessageKind

__all__ = ["AuthStatus", "ConnectionStatus", "MessageKind", "Node", "TopologyState"]
