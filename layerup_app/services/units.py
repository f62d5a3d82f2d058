import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    SAME = "same"


@dataclass(frozen=True)
class PercentChange:
    pct: float
    direction: Direction


@dataclass(frozen=True)
class ChangeIndicator:
    diff: float
    pct: float
    direction: Direction


def round1(value: float) -> float:
    # halves go up, as Math.round does
    return math.floor(value * 10 + 0.5) / 10


def ms_to_kmh(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return value * 3.6


def average(values: Iterable[Optional[float]]) -> float:
    """Mean of the present values, rounded to one decimal.

    ``None`` and NaN entries are skipped. With nothing left the result is 0.
    """
    valid = [v for v in values if v is not None and not math.isnan(v)]
    if not valid:
        return 0
    return round1(sum(valid) / len(valid))


def percent_change(old: float, new: float) -> PercentChange:
    if old == 0 and new == 0:
        return PercentChange(pct=0, direction=Direction.SAME)
    if old == 0:
        return PercentChange(pct=100, direction=Direction.UP)

    raw = round1((new - old) / abs(old) * 100)
    # +/-0.5% deadband
    if raw > 0.5:
        direction = Direction.UP
    elif raw < -0.5:
        direction = Direction.DOWN
    else:
        direction = Direction.SAME
    return PercentChange(pct=abs(raw), direction=direction)


def change_between(old: float, new: float) -> ChangeIndicator:
    change = percent_change(old, new)
    return ChangeIndicator(
        diff=round1(new - old),
        pct=change.pct,
        direction=change.direction,
    )


def feels_like(temperature: float, wind_kph: float, humidity: float) -> float:
    """
    Perceived temperature in °C.

    Args:
        temperature: Ambient temperature in °C
        wind_kph: Wind speed in km/h
        humidity: Relative humidity in %

    Returns:
        Wind chill at or below 10 °C with wind above 4.8 km/h, the Rothfusz
        heat index from 27 °C up, the ambient temperature otherwise.
        Rounded to one decimal.
    """
    if temperature <= 10 and wind_kph > 4.8:
        w = wind_kph ** 0.16
        return round1(13.12 + 0.6215 * temperature - 11.37 * w + 0.3965 * temperature * w)

    if temperature >= 27:
        t = temperature * 9 / 5 + 32
        r = humidity
        hi = (
            -42.379
            + 2.04901523 * t
            + 10.14333127 * r
            - 0.22475541 * t * r
            - 0.00683783 * t * t
            - 0.05481717 * r * r
            + 0.00122874 * t * t * r
            + 0.00085282 * t * r * r
            - 0.00000199 * t * t * r * r
        )
        return round1((hi - 32) * 5 / 9)

    return round1(temperature)


def derive_feels_like(
    temperature: Optional[float],
    wind_kph: Optional[float],
    humidity: Optional[float],
) -> Optional[float]:
    if temperature is None or wind_kph is None or humidity is None:
        return None
    return feels_like(temperature, wind_kph, humidity)
