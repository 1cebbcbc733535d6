import numpy as np
import pytest

from shapes.table import DEFAULTS, Table, make_model


def test_sizes():
    mesh = Table(height=8.0, width=5.0, thickness=0.3).build()
    assert len(mesh.vertices) == 36
    assert len(mesh.normals) == 36
    assert len(mesh.indices) == 54


def test_centered_on_all_axes():
    v = np.asarray(Table(height=8.0, width=5.0, thickness=0.3).build().vertices)
    assert v.min(axis=0) == pytest.approx([-2.5, -0.15, -4.0])
    assert v.max(axis=0) == pytest.approx([2.5, 0.15, 4.0])


def test_every_quad_is_ccw_from_its_normal(winding_matches_normals):
    assert winding_matches_normals(Table().build())


def test_walls_are_double_sided():
    normals = [tuple(n) for n in Table().build().normals[::4]]
    # suelo + dos caras por pared
    assert normals.count((0.0, 1.0, 0.0)) == 1
    for axis in ((1.0, 0.0, 0.0), (0.0, 0.0, 1.0)):
        flipped = tuple(-c for c in axis)
        assert normals.count(axis) == 2
        assert normals.count(flipped) == 2


def test_open_top(topology):
    tm = topology(Table().build())
    assert not tm.is_watertight


def test_problems_and_params():
    assert Table().problems() == []
    assert Table(width=0.0).problems() == ["width must be > 0"]

    t = Table.from_params({"length": "8", "W": 5, "wall_height": "0,3"})
    assert (t.height, t.width, t.thickness) == (8.0, 5.0, pytest.approx(0.3))
    assert Table.from_params({}).height == DEFAULTS["height"]


def test_make_model():
    tm = make_model({})
    assert len(tm.vertices) == 36
    assert len(tm.faces) == 18
