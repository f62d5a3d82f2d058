import math

import pytest

from layerup_app.services.units import (
    Direction,
    PercentChange,
    average,
    change_between,
    derive_feels_like,
    feels_like,
    ms_to_kmh,
    percent_change,
    round1,
)


def test_round1_rounds_halves_up():
    assert round1(10.25) == 10.3
    assert round1(-5.16) == -5.2
    assert round1(-2.25) == -2.2
    assert round1(3) == 3.0


def test_average_empty_is_zero():
    assert average([]) == 0


def test_average_skips_missing_values():
    assert average([None, float("nan"), 10]) == 10
    assert average([None, None]) == 0


def test_average_rounds_mean():
    assert average([10]) == 10
    assert average([10, 11]) == 10.5
    assert average([1, 2, 2]) == 1.7


def test_percent_change_both_zero():
    assert percent_change(0, 0) == PercentChange(pct=0, direction=Direction.SAME)


def test_percent_change_from_zero():
    assert percent_change(0, 5) == PercentChange(pct=100, direction=Direction.UP)


def test_percent_change_small_move_is_same():
    assert percent_change(1000, 1004) == PercentChange(pct=0.4, direction=Direction.SAME)
    assert percent_change(1000, 995).direction is Direction.SAME


def test_percent_change_direction_follows_percent_not_magnitude():
    assert percent_change(1, 1.4) == PercentChange(pct=40, direction=Direction.UP)
    assert percent_change(0.2, 0.6).direction is Direction.UP
    assert percent_change(10, 10.3).direction is Direction.UP


def test_percent_change_up_and_down():
    assert percent_change(10, 11) == PercentChange(pct=10, direction=Direction.UP)
    assert percent_change(10, 9) == PercentChange(pct=10, direction=Direction.DOWN)


def test_percent_change_uses_magnitude_of_old_value():
    change = percent_change(-10, -5)
    assert change.pct == 50
    assert change.direction is Direction.UP


def test_change_between_reports_difference():
    change = change_between(-5.2, -2.9)
    assert change.diff == 2.3
    assert change.direction is Direction.UP


def test_ms_to_kmh():
    assert ms_to_kmh(5) == 18.0
    assert ms_to_kmh(2.5) == 9.0
    assert ms_to_kmh(1.34) == pytest.approx(4.824)
    assert ms_to_kmh(None) is None


def test_feels_like_wind_chill_is_colder():
    value = feels_like(-5, 20, 70)
    assert value < -5


def test_feels_like_wind_chill_value():
    assert feels_like(-10, 20, 50) == -17.9


@pytest.mark.parametrize("temperature", [-20, -5, 0, 10])
def test_feels_like_more_wind_never_warmer(temperature):
    values = [feels_like(temperature, wind, 70) for wind in (5, 10, 20, 40, 80)]
    assert values == sorted(values, reverse=True)


def test_feels_like_heat_index_with_high_humidity():
    value = feels_like(30, 5, 80)
    assert value >= 30


def test_feels_like_mild_range_is_ambient():
    assert feels_like(15, 10, 50) == 15.0
    assert feels_like(12.34, 30, 50) == 12.3


def test_feels_like_calm_cold_is_ambient():
    assert feels_like(5, 4.8, 90) == 5.0


def test_derive_feels_like_needs_all_inputs():
    assert derive_feels_like(None, 10, 50) is None
    assert derive_feels_like(15, None, 50) is None
    assert derive_feels_like(15, 10, None) is None
    assert derive_feels_like(15, 10, 50) == 15.0
    assert not math.isnan(derive_feels_like(-3, 12, 70))
