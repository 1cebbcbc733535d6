import math

import pytest

from element.flipper import DEAD_ZONE, MAX_ANGLE, AngleTracker, Side


def test_starts_at_rest():
    t = AngleTracker()
    assert t.angle == 0.0
    assert not t.deployed
    assert t.max_angle == pytest.approx(math.pi / 3)
    assert t.dead_zone == DEAD_ZONE


def test_jumps_to_max_in_one_step():
    t = AngleTracker()
    assert t.rotate(1.0) == MAX_ANGLE
    assert t.angle == MAX_ANGLE
    assert t.deployed


def test_holding_returns_zero():
    t = AngleTracker()
    t.rotate(1.0)
    assert t.rotate(0.8) == 0.0
    assert t.angle == MAX_ANGLE


def test_release_returns_negative_delta():
    t = AngleTracker()
    t.rotate(1.0)
    assert t.rotate(0.0) == -MAX_ANGLE
    assert t.angle == 0.0
    assert not t.deployed


@pytest.mark.parametrize("force", [0.0, 0.1, DEAD_ZONE])
def test_dead_zone_keeps_rest(force):
    t = AngleTracker()
    assert t.rotate(force) == 0.0
    assert t.angle == 0.0


def test_custom_range_and_reset():
    t = AngleTracker(max_angle=1.0, dead_zone=0.5)
    assert t.rotate(0.6) == 1.0
    assert t.reset() == -1.0
    assert t.reset() == 0.0
    assert "AngleTracker(" in repr(t)


def test_side_sign():
    assert Side.LEFT.sign == 1.0
    assert Side.RIGHT.sign == -1.0
