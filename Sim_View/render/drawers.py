"""Topology drawers for the two supported projections."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

from ..geometry.projection import PlaneProjector, SphereProjector
from ..graph.model import Node, TopologyState
from ..graph.types import ConnectionStatus
from .renderer import RGB, Renderer

logger = logging.getLogger(__name__)

NODE_COLOR: RGB = (0.0, 0.8, 0.2)
REQUIRED_LINK_COLOR: RGB = (0.0, 1.0, 0.2)
MUTUAL_LINK_COLOR: RGB = (0.6, 0.6, 0.6)
ONE_SIDED_LINK_COLOR: RGB = (0.8, 0.0, 0.0)
DETAIL_LINK_COLOR: RGB = (0.8, 0.8, 0.8)
HIGHLIGHT_COLOR: RGB = (1.0, 0.0, 0.0)

# indexed by group id; ids past the end fall back to entry 0
GROUP_COLORS: Sequence[RGB] = (
    (0.8, 0.0, 0.8),
    (0.0, 0.2, 1.0),
    (0.0, 0.8, 0.2),
    (1.0, 0.6, 0.0),
)

SEED_MARKER_SIZE = 6.0
ONLY_ONE_MARKER_SIZE = 10.0


@dataclass
class FrameStats:
    """Counters collected while drawing one frame."""

    nodes: int = 0
    enabled: int = 0
    seeds: int = 0
    only_one: int = 0


def group_color(group: int) -> RGB:
    if group < 0 or group >= len(GROUP_COLORS):
        return GROUP_COLORS[0]
    return GROUP_COLORS[group]


@dataclass
class PlaneDrawer:
    """Draw nodes and links as-is on a flat plane.

    Links are green when mutual and routing-required, grey when only mutual
    and red when only one side lists the other.
    """

    projector: PlaneProjector = field(default_factory=PlaneProjector)

    def draw(
        self, renderer: Renderer, state: TopologyState, current: datetime
    ) -> FrameStats:
        stats = FrameStats(nodes=len(state))
        for node in state:
            if not node.enabled:
                continue
            stats.enabled += 1
            x, y, z = self.projector.project(node.x, node.y)
            renderer.set_color(*NODE_COLOR)
            renderer.draw_point(x, y, z)

            for link in node.links:
                pair = state.get(link)
                if pair is None:
                    continue
                if state.is_reciprocal(node, pair):
                    if node.has_required_2d(pair.nid):
                        renderer.set_color(*REQUIRED_LINK_COLOR)
                    else:
                        renderer.set_color(*MUTUAL_LINK_COLOR)
                else:
                    renderer.set_color(*ONE_SIDED_LINK_COLOR)
                x2, y2, z2 = self.projector.project(pair.x, pair.y)
                renderer.draw_segment(x, y, z, x2, y2, z2)
        return stats


@dataclass
class SphereDrawer:
    """Draw nodes on the unit sphere coloured by group.

    Seed-connected and "only one" nodes get red markers. Links that are not
    routing-required are drawn only when ``detail_level`` is at least 1.
    """

    detail_level: int = 0
    projector: SphereProjector = field(default_factory=SphereProjector)

    def _link_color(
        self, state: TopologyState, node: Node, pair: Node
    ) -> RGB | None:
        if node.has_required_2d(pair.nid):
            if state.is_reciprocal(node, pair):
                return group_color(node.group)
            return ONE_SIDED_LINK_COLOR
        if self.detail_level >= 1:
            return DETAIL_LINK_COLOR
        return None

    def draw(
        self, renderer: Renderer, state: TopologyState, current: datetime
    ) -> FrameStats:
        stats = FrameStats(nodes=len(state))
        shade = self.projector.shade
        for node in state:
            if not node.enabled:
                continue
            stats.enabled += 1

            x, y, z = self.projector.project(node.x, node.y)
            renderer.set_color(*shade(group_color(node.group), z))
            renderer.draw_point(x, y, z)

            if node.seed_link_status == ConnectionStatus.ONLINE:
                renderer.set_color(*shade(HIGHLIGHT_COLOR, z))
                renderer.draw_marker(x, y, z, SEED_MARKER_SIZE)
                stats.seeds += 1
            if node.is_only_one:
                renderer.set_color(*shade(HIGHLIGHT_COLOR, z))
                renderer.draw_marker(x, y, z, ONLY_ONE_MARKER_SIZE)
                stats.only_one += 1

            for link in node.links:
                pair = state.get(link)
                if pair is None:
                    continue
                rgb = self._link_color(state, node, pair)
                if rgb is None:
                    continue
                x2, y2, z2 = self.projector.project(pair.x, pair.y)
                renderer.set_color(*shade(rgb, (z + z2) / 2.0))
                renderer.draw_segment(x, y, z, x2, y2, z2)

        logger.info(
            "node: %d/%d  seed: %d/%d",
            stats.enabled,
            stats.nodes,
            stats.only_one,
            stats.seeds,
        )
        return stats


Drawer = PlaneDrawer | SphereDrawer


def make_drawer(projection: str, detail_level: int = 0) -> Drawer:
    """Return the drawer for ``projection`` (``"plane"`` or ``"sphere"``)."""
    if projection == "plane":
        return PlaneDrawer()
    if projection == "sphere":
        return SphereDrawer(detail_level=detail_level)
    raise ValueError(f"unknown projection: {projection!r}")
