"""Rendering backends and topology drawers."""

from .drawers import FrameStats, PlaneDrawer, SphereDrawer, make_drawer
from .renderer import MatplotlibRenderer, Renderer, frame_path

__all__ = [
    "FrameStats",
    "MatplotlibRenderer",
    "PlaneDrawer",
    "Renderer",
    "SphereDrawer",
    "frame_path",
    "make_drawer",
]
