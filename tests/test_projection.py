import math

import pytest

from Sim_View.geometry import projection
from Sim_View.geometry.projection import PlaneProjector, SphereProjector, shade_by_depth


def test_plane_projection_is_identity():
    assert PlaneProjector().project(2.0, 3.0) == (2.0, 3.0, 0.0)
    assert PlaneProjector(z=0.5).project(-1.0, 1.0) == (-1.0, 1.0, 0.5)


def test_plane_does_not_shade():
    assert PlaneProjector().shade((0.1, 0.2, 0.3), -1.0) == (0.1, 0.2, 0.3)


def test_sphere_origin_maps_to_x_axis():
    assert SphereProjector().project(0.0, 0.0) == pytest.approx((1.0, 0.0, 0.0))


def test_sphere_longitude_and_latitude():
    proj = SphereProjector()
    assert proj.project(math.pi / 2, 0.0) == pytest.approx((0.0, 0.0, 1.0), abs=1e-12)
    assert proj.project(0.3, math.pi / 2) == pytest.approx((0.0, 1.0, 0.0), abs=1e-12)


def test_sphere_points_lie_on_unit_sphere():
    x, y, z = SphereProjector().project(1.1, -0.4)
    assert x * x + y * y + z * z == pytest.approx(1.0)


def test_far_side_fades_to_white():
    assert shade_by_depth((0.0, 0.2, 1.0), 1.0, 1.2) == (1.0, 1.0, 1.0)


def test_near_side_keeps_color():
    r, g, b = shade_by_depth((0.0, 0.8, 1.0), -1.0, 1.2)
    assert r == 0.0  # clamped
    assert g == pytest.approx(1.0 - 0.2 * (2.0 / 1.2))
    assert b == 1.0


def test_sphere_shade_uses_its_rate():
    assert SphereProjector(shade_rate=2.0).shade((0.0, 0.0, 0.0), 0.0) == pytest.approx(
        (0.5, 0.5, 0.5)
    )


def test_module_docstring_is_set():
    assert projection.__doc__.startswith("Mapping of logical node coordinates")
