import pytest
import trimesh

import shapes
from shapes._helpers import flag, num, num_int, param


def test_all_shapes_registered():
    assert set(shapes.REGISTRY) == {"ellipse", "flipper", "table"}
    for key, mod in shapes.MODULES.items():
        assert mod.NAME == key
        assert isinstance(mod.DEFAULTS, dict)


@pytest.mark.parametrize(
    "slug,expected",
    [
        ("flipper", "flipper"),
        ("Paddle", "flipper"),
        ("paleta", "flipper"),
        ("carved-ellipse", "ellipse"),
        ("carved_ellipse", "ellipse"),
        (" wedge ", "ellipse"),
        ("mesa", "table"),
        ("tray", "table"),
    ],
)
def test_resolve_aliases(slug, expected):
    assert shapes.resolve(slug) == expected


@pytest.mark.parametrize("slug", ["", "bumper", "_helpers", "mesh"])
def test_unknown_slugs(slug):
    assert shapes.resolve(slug) is None
    assert shapes.get_builder(slug) is None


def test_builder_returns_trimesh():
    tm = shapes.get_builder("tray")({"width": 2})
    assert isinstance(tm, trimesh.Trimesh)
    assert len(tm.faces) == 18


def test_num_and_flags():
    assert num("1,5") == 1.5
    assert num("abc", 2.0) == 2.0
    assert num(None, 3.0) == 3.0
    assert num_int("7.6") == 8
    assert num_int("nan", 4) == 4
    assert flag("sí") is True
    assert flag("off", True) is False
    assert flag("maybe", True) is True


def test_param_aliases():
    assert param({"radius-min": 3}, "radius_min") == 3
    assert param({"t": 1}, "thickness", "T") == 1
    assert param({}, "x", default=9) == 9
