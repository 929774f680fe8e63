"""Frame renderer built on ``matplotlib`` with ``imageio`` frame capture.

Drawing calls are buffered until :meth:`MatplotlibRenderer.next_frame`,
which presents everything drawn since the previous call. Primitives are
painted far-to-near by ``z`` so the near hemisphere of a sphere stays on top
without a depth buffer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Protocol, Tuple

import imageio.v3 as iio
import numpy as np

from ..errors import RenderFaultError

logger = logging.getLogger(__name__)

RGB = Tuple[float, float, float]

POINT_HALF_WIDTH = 4.0  # pixels
IMAGE_INDEX_PLACEHOLDER = "@"


class Renderer(Protocol):
    """Drawing capability consumed by the drawers and playback driver."""

    def set_color(self, r: float, g: float, b: float) -> None: ...

    def draw_point(self, x: float, y: float, z: float) -> None: ...

    def draw_marker(self, x: float, y: float, z: float, size: float) -> None: ...

    def draw_segment(
        self, x1: float, y1: float, z1: float, x2: float, y2: float, z2: float
    ) -> None: ...

    def next_frame(self) -> bool: ...

    def set_frame_counter_digits(self, digits: int) -> None: ...


def frame_path(pattern: str, index: int, digits: int) -> str:
    """Return ``pattern`` with every ``@`` replaced by the padded ``index``."""
    return pattern.replace(IMAGE_INDEX_PLACEHOLDER, f"{index:0{max(digits, 1)}d}")


@dataclass
class _FrameBuffer:
    points: List[Tuple[float, float, float, RGB]] = field(default_factory=list)
    markers: List[Tuple[float, float, float, float, RGB]] = field(default_factory=list)
    segments: List[Tuple[float, float, float, float, float, RGB]] = field(
        default_factory=list
    )

    def clear(self) -> None:
        self.points.clear()
        self.markers.clear()
        self.segments.clear()


class MatplotlibRenderer:
    """Render frames into a matplotlib figure.

    Parameters
    ----------
    image_name:
        Output path pattern for frame capture; empty disables capture.
    size:
        Width and height of the square frame in pixels.
    extent:
        Half-width of the visible region in render-space units.
    headless:
        Use the ``Agg`` backend and never open a window.
    """

    def __init__(
        self,
        image_name: str = "",
        *,
        size: int = 1024,
        extent: float = 1.05,
        headless: bool = False,
        dpi: int = 100,
    ) -> None:
        self.image_name = image_name
        self.size = size
        self.extent = extent
        self.headless = headless
        self.dpi = dpi
        self.digits = 1
        self.index = 0
        self.color: RGB = (0.0, 0.0, 0.0)
        self._buffer = _FrameBuffer()
        self._closed = False
        self._plt: Any = None
        self.fig: Any = None
        self.ax: Any = None

    # ---- lifecycle ----

    def setup(self) -> None:
        """Create the figure, opening a window unless running headless."""

        import matplotlib

        if self.headless:
            matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        self._plt = plt
        inches = self.size / self.dpi
        try:
            self.fig = plt.figure(figsize=(inches, inches), dpi=self.dpi)
        except Exception as exc:
            raise RenderFaultError(f"failed to create figure: {exc}") from exc
        self.fig.patch.set_facecolor("white")
        self.ax = self.fig.add_axes((0.0, 0.0, 1.0, 1.0))
        self._reset_axes()
        self.fig.canvas.mpl_connect("close_event", self._on_close)
        if not self.headless:
            plt.show(block=False)

    def quit(self) -> None:
        if self.fig is not None and self._plt is not None:
            self._plt.close(self.fig)
        self.fig = None
        self.ax = None

    def __enter__(self) -> "MatplotlibRenderer":
        self.setup()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.quit()

    def _on_close(self, event: Any) -> None:
        self._closed = True

    def _reset_axes(self) -> None:
        self.ax.clear()
        self.ax.set_xlim(-self.extent, self.extent)
        self.ax.set_ylim(-self.extent, self.extent)
        self.ax.set_aspect("equal")
        self.ax.set_axis_off()

    # ---- drawing capability ----

    def set_color(self, r: float, g: float, b: float) -> None:
        self.color = (float(r), float(g), float(b))

    def draw_point(self, x: float, y: float, z: float) -> None:
        self._buffer.points.append((x, y, z, self.color))

    def draw_marker(self, x: float, y: float, z: float, size: float) -> None:
        self._buffer.markers.append((x, y, z, size, self.color))

    def draw_segment(
        self, x1: float, y1: float, z1: float, x2: float, y2: float, z2: float
    ) -> None:
        self._buffer.segments.append((x1, y1, x2, y2, (z1 + z2) / 2.0, self.color))

    def set_frame_counter_digits(self, digits: int) -> None:
        """Set zero padding for captured frame names and restart numbering."""
        self.digits = digits
        self.index = 0

    # ---- presentation ----

    def _marker_area(self, half_width: float) -> float:
        # scatter sizes are in points squared
        side = 2.0 * half_width * 72.0 / self.dpi
        return side * side

    def _paint(self) -> None:
        from matplotlib.collections import LineCollection

        self._reset_axes()
        buf = self._buffer
        if buf.segments:
            segs = sorted(buf.segments, key=lambda s: -s[4])
            lines = LineCollection(
                [((s[0], s[1]), (s[2], s[3])) for s in segs],
                colors=[s[5] for s in segs],
                linewidths=0.8,
                zorder=1,
            )
            self.ax.add_collection(lines)
        if buf.markers:
            marks = sorted(buf.markers, key=lambda m: -m[2])
            self.ax.scatter(
                [m[0] for m in marks],
                [m[1] for m in marks],
                s=[self._marker_area(m[3]) for m in marks],
                c=np.array([m[4] for m in marks]),
                marker="s",
                linewidths=0,
                zorder=2,
            )
        if buf.points:
            pts = sorted(buf.points, key=lambda p: -p[2])
            self.ax.scatter(
                [p[0] for p in pts],
                [p[1] for p in pts],
                s=self._marker_area(POINT_HALF_WIDTH),
                c=np.array([p[3] for p in pts]),
                marker="s",
                linewidths=0,
                zorder=3,
            )

    def _save(self) -> None:
        path = frame_path(self.image_name, self.index, self.digits)
        frame = np.asarray(self.fig.canvas.buffer_rgba())[..., :3]
        iio.imwrite(path, frame)
        logger.debug("saved frame %d to %s", self.index, path)

    def next_frame(self) -> bool:
        """Present the pending frame and report whether playback may go on.

        The frame drawn since the last call is painted and, when an image
        pattern is set, written to disk. Index ``0`` is the empty frame shown
        before the first tick and is never written.

        Returns
        -------
        bool
            ``False`` once the window has been closed.
        """

        if self.fig is None:
            raise RenderFaultError("renderer is not set up")
        try:
            self._paint()
            self.fig.canvas.draw()
            if self.index != 0 and self.image_name:
                self._save()
            if not self.headless:
                self.fig.canvas.flush_events()
                self._plt.pause(0.001)
        except (OSError, ValueError, RuntimeError) as exc:
            raise RenderFaultError(
                f"failed to present frame {self.index}: {exc}"
            ) from exc
        finally:
            self._buffer.clear()
        self.index += 1
        return not self._closed
