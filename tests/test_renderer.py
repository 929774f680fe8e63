import pytest

from Sim_View.errors import RenderFaultError
from Sim_View.render.renderer import MatplotlibRenderer, frame_path


def test_frame_path_replaces_every_placeholder():
    assert frame_path("out/@/frame-@.png", 7, 3) == "out/007/frame-007.png"
    assert frame_path("frame.png", 7, 3) == "frame.png"
    assert frame_path("f@.png", 12, 0) == "f12.png"


def test_headless_renderer_writes_frames(tmp_path):
    pattern = str(tmp_path / "frame-@.png")
    with MatplotlibRenderer(pattern, size=64, headless=True) as renderer:
        renderer.set_frame_counter_digits(2)
        assert renderer.next_frame()  # empty pre-roll frame is not written

        renderer.set_color(0.0, 0.8, 0.2)
        renderer.draw_point(0.0, 0.0, 0.0)
        renderer.draw_marker(0.1, 0.1, -0.5, 6.0)
        renderer.set_color(0.6, 0.6, 0.6)
        renderer.draw_segment(-0.5, -0.5, 0.2, 0.5, 0.5, -0.2)
        assert renderer.next_frame()

    assert not (tmp_path / "frame-00.png").exists()
    assert (tmp_path / "frame-01.png").exists()


def test_drawing_buffer_is_cleared_each_frame():
    with MatplotlibRenderer(size=32, headless=True) as renderer:
        renderer.draw_point(0.0, 0.0, 0.0)
        renderer.next_frame()
        assert renderer.index == 1
        assert renderer._buffer.points == []


def test_next_frame_requires_setup():
    with pytest.raises(RenderFaultError):
        MatplotlibRenderer(headless=True).next_frame()


def test_unwritable_pattern_is_render_fault(tmp_path):
    pattern = str(tmp_path / "missing-dir" / "frame-@.png")
    with MatplotlibRenderer(pattern, size=32, headless=True) as renderer:
        renderer.next_frame()
        with pytest.raises(RenderFaultError):
            renderer.next_frame()
