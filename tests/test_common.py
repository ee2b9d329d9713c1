import math

import pytest

from lumentrace.common import clamp, deg_to_rad, lerp, mod, rad_to_deg


@pytest.mark.parametrize(
    "value, lo, hi, expected",
    [(-5, 0, 10, 0), (15, 0, 10, 10), (7, 0, 10, 7), (0.25, 0.0, 1.0, 0.25), (2.5, 0.0, 1.0, 1.0)],
)
def test_clamp(value, lo, hi, expected):
    assert clamp(value, lo, hi) == expected


def test_clamp_keeps_result_in_range():
    for value in range(-20, 21):
        result = clamp(value, -3, 4)
        assert -3 <= result <= 4


def test_lerp_endpoints():
    assert lerp(0.0, 2.0, 8.0) == pytest.approx(2.0)
    assert lerp(1.0, 2.0, 8.0) == pytest.approx(8.0)


def test_lerp_midpoint():
    assert lerp(0.5, 2.0, 4.0) == pytest.approx(3.0)


def test_mod_non_negative_for_positive_divisor():
    for a in range(-30, 31):
        r = mod(a, 7)
        assert 0 <= r < 7
        assert (a - r) % 7 == 0


def test_mod_negative_value():
    assert mod(-1, 3) == 2


def test_mod_matches_positive_operands():
    assert mod(10, 4) == 10 % 4


def test_mod_by_zero():
    with pytest.raises(ZeroDivisionError):
        mod(3, 0)


def test_degree_radian_round_trip():
    for value in (-270.0, -30.0, 0.0, 45.0, 123.5, 720.0):
        assert rad_to_deg(deg_to_rad(value)) == pytest.approx(value)


def test_half_turn_is_pi():
    assert deg_to_rad(180.0) == pytest.approx(math.pi)
    assert rad_to_deg(math.pi) == pytest.approx(180.0)