import math
from dataclasses import replace

import numpy as np
import pytest

from shapes.ellipse import Ellipse, Origin, OutOfRangeError, arc_strip, make_model

HALF_PI = math.pi / 2.0


def _bounds(mesh):
    v = np.asarray(mesh.vertices, dtype=float)
    return v.min(axis=0), v.max(axis=0)


# ---------------------- validación de ángulos ----------------------

def test_quarter_is_accepted():
    mesh = Ellipse(first_angle=0.0, second_angle=HALF_PI).build()
    assert len(mesh) > 0


@pytest.mark.parametrize("eps", [1e-9, 1e-6, 0.5])
def test_angle_above_half_pi_is_rejected(eps):
    with pytest.raises(OutOfRangeError):
        Ellipse(first_angle=HALF_PI + eps, second_angle=0.0).build()


@pytest.mark.parametrize("angle", [-0.01, float("nan"), 4.0])
def test_out_of_range_also_for_thin_arc(angle):
    with pytest.raises(OutOfRangeError) as err:
        Ellipse(rectangle=False, first_angle=0.0, second_angle=angle).build()
    assert isinstance(err.value, ValueError)


def test_angle_order_does_not_matter():
    e = Ellipse(first_angle=0.3, second_angle=1.1)
    swapped = replace(e, first_angle=1.1, second_angle=0.3)
    assert e.real_x() == pytest.approx(swapped.real_x())
    assert e.real_z() == pytest.approx(swapped.real_z())
    assert e.build().vertices == swapped.build().vertices


def test_angles_end_exactly_on_bounds():
    e = Ellipse(first_angle=0.2, second_angle=1.3, resolution=7)
    angles = e.angles()
    assert len(angles) == 8
    assert angles[0] == 0.2
    assert angles[-1] == 1.3


# ---------------------- tamaños ----------------------

def test_single_strip_ring_sizes():
    strip = arc_strip(3.0, 1.0, 1.0, [0.0, HALF_PI])
    assert len(strip.vertices) == 4
    assert len(strip.indices) == 6


def test_thin_wedge_resolution_one():
    mesh = Ellipse(rectangle=False, first_angle=0.0, second_angle=HALF_PI, resolution=1).build()
    assert len(mesh.vertices) == 8
    assert len(mesh.normals) == 8
    assert len(mesh.indices) == 12


@pytest.mark.parametrize("resolution", [1, 5, 20])
def test_capped_sizes(resolution):
    mesh = Ellipse(resolution=resolution).build()
    # banda + dos abanicos + trasera + lateral
    assert len(mesh.vertices) == 2 * (resolution + 1) + 2 * (resolution + 2) + 8
    assert len(mesh.indices) == 6 * resolution + 6 * resolution + 12


@pytest.mark.parametrize("rectangle", [True, False])
@pytest.mark.parametrize("first,second", [(0.0, HALF_PI), (0.4, 1.2), (1.0, 0.1)])
def test_buffer_is_consistent(rectangle, first, second):
    mesh = Ellipse(rectangle=rectangle, first_angle=first, second_angle=second, resolution=9).build()
    assert len(mesh.indices) % 3 == 0
    assert all(i < len(mesh.vertices) for i in mesh.indices)
    assert len(mesh.vertices) == len(mesh.normals)


# ---------------------- orientación y cierre ----------------------

@pytest.mark.parametrize("rectangle", [True, False])
def test_winding_matches_normals(rectangle, winding_matches_normals):
    mesh = Ellipse(rectangle=rectangle, first_angle=0.1, second_angle=1.4, resolution=12).build()
    assert winding_matches_normals(mesh)


def test_strip_normals_are_radial():
    inward = arc_strip(2.0, 1.0, 0.5, [0.0, HALF_PI])
    outward = arc_strip(2.0, 1.0, 0.5, [0.0, HALF_PI], revert=True)
    assert inward.normals[0] == pytest.approx([-1.0, 0.0, 0.0])
    assert outward.normals[0] == pytest.approx([1.0, 0.0, 0.0])
    assert outward.normals[-1] == pytest.approx([0.0, 0.0, 1.0])


def test_capped_wedge_is_closed(topology):
    tm = topology(Ellipse(first_angle=0.0, second_angle=HALF_PI, resolution=16).build())
    assert tm.is_watertight
    assert tm.is_winding_consistent
    assert tm.volume > 0


def test_thin_wedge_is_open(topology):
    tm = topology(Ellipse(rectangle=False, resolution=16).build())
    assert not tm.is_watertight


# ---------------------- anclas ----------------------

def test_center_anchor_bounds():
    e = Ellipse(center=Origin.CENTER, first_angle=0.2, second_angle=1.2, x=3.0, z=1.5, thickness=0.4)
    lo, hi = _bounds(e.build())
    assert lo == pytest.approx([-e.real_x() / 2, -0.2, -e.real_z() / 2])
    assert hi == pytest.approx([e.real_x() / 2, 0.2, e.real_z() / 2])


@pytest.mark.parametrize(
    "anchor,x_edge,z_edge",
    [
        (Origin.MIN_X_MIN_Z, "lo", "lo"),
        (Origin.MAX_X_MIN_Z, "hi", "lo"),
        (Origin.MIN_X_MAX_Z, "lo", "hi"),
        (Origin.MAX_X_MAX_Z, "hi", "hi"),
    ],
)
def test_corner_anchors(anchor, x_edge, z_edge):
    lo, hi = _bounds(Ellipse(center=anchor, first_angle=0.3, second_angle=1.0).build())
    edges = {"lo": lo, "hi": hi}
    assert edges[x_edge][0] == pytest.approx(0.0, abs=1e-12)
    assert edges[z_edge][2] == pytest.approx(0.0, abs=1e-12)
    assert lo[1] == pytest.approx(-0.5)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("center", Origin.CENTER),
        ("CENTER", Origin.CENTER),
        ("MinXMaxZ", Origin.MIN_X_MAX_Z),
        ("max-x-min-z", Origin.MAX_X_MIN_Z),
        ("MIN_X_MIN_Z", Origin.MIN_X_MIN_Z),
        (None, Origin.CENTER),
        (Origin.MAX_X_MAX_Z, Origin.MAX_X_MAX_Z),
    ],
)
def test_origin_parse(raw, expected):
    assert Origin.parse(raw) is expected


def test_origin_parse_rejects_unknown():
    with pytest.raises(ValueError):
        Origin.parse("corner")


# ---------------------- parámetros ----------------------

def test_from_params_aliases_and_defaults():
    e = Ellipse.from_params({"solid": "no", "origin": "MaxXMaxZ", "angle_b": "0,5", "segments": "8"})
    assert e.rectangle is False
    assert e.center is Origin.MAX_X_MAX_Z
    assert e.second_angle == 0.5
    assert e.first_angle == 0.0
    assert e.resolution == 8
    assert e.x == 3.0


def test_problems():
    assert Ellipse().problems() == []
    assert "thickness must be > 0" in Ellipse(thickness=0.0).problems()
    assert "resolution must be >= 1" in Ellipse(resolution=0).problems()


def test_make_model_returns_trimesh():
    tm = make_model({"resolution": 4})
    assert len(tm.vertices) == 2 * 5 + 2 * 6 + 8
    assert len(tm.faces) == (6 * 4 + 6 * 4 + 12) // 3


@pytest.mark.parametrize("rectangle", [True, False])
def test_non_positive_resolution_still_builds(rectangle):
    negative = Ellipse(rectangle=rectangle, resolution=-1)
    zero = Ellipse(rectangle=rectangle, resolution=0)
    assert len(negative.angles()) == 1
    mesh = negative.build()
    assert len(mesh.vertices) == len(zero.build().vertices)
    assert len(mesh.indices) % 3 == 0
    assert "resolution must be >= 1" in negative.problems()
