"""Mapping of logical node coordinates into render space."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

Vec3 = Tuple[float, float, float]
RGB = Tuple[float, float, float]


def shade_by_depth(color: Sequence[float], z: float, k: float) -> RGB:
    """Fade ``color`` toward white as ``z`` moves to the far side.

    Each channel becomes ``1 - (1 - c) * rate`` with ``rate = (1 - z) / k``,
    clamped to ``[0, 1]``.
    """

    rate = (-z + 1.0) / k
    r, g, b = (min(1.0, max(0.0, 1.0 - (1.0 - c) * rate)) for c in color)
    return r, g, b


@dataclass(frozen=True)
class PlaneProjector:
    """Identity projection onto a flat plane at a fixed depth."""

    z: float = 0.0

    def project(self, x: float, y: float) -> Vec3:
        return x, y, self.z

    def shade(self, color: Sequence[float], z: float) -> RGB:
        r, g, b = color
        return r, g, b


@dataclass(frozen=True)
class SphereProjector:
    """Unit-sphere projection with ``x`` as longitude and ``y`` as latitude.

    ``shade_rate`` is the ``k`` passed to :func:`shade_by_depth`.
    """

    shade_rate: float = 1.2

    def project(self, x: float, y: float) -> Vec3:
        return (
            math.cos(x) * math.cos(y),
            math.sin(y),
            math.sin(x) * math.cos(y),
        )

    def shade(self, color: Sequence[float], z: float) -> RGB:
        return shade_by_depth(color, z, self.shade_rate)
