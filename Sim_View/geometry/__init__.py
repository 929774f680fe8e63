"""Coordinate projection helpers."""

from .projection import PlaneProjector, SphereProjector, shade_by_depth

__all__ = ["PlaneProjector", "SphereProjector", "shade_by_depth"]
