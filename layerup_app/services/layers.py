from dataclasses import dataclass

from .units import round1


@dataclass(frozen=True)
class Layer:
    tag: str
    label: str
    detail: str


TSHIRT = Layer("tshirt", "T-Shirt Weather", "Light clothing is all you need.")
SWEATER = Layer("sweater", "Sweater Weather", "A mid-layer will keep you comfortable.")
COAT = Layer("coat", "Coat Weather", "Bundle up, it's cold out there.")

LAYERS = {layer.tag: layer for layer in (TSHIRT, SWEATER, COAT)}

# higher = warmer weather
LAYER_RANK = {"tshirt": 3, "sweater": 2, "coat": 1}

LAYER_NAMES = {"tshirt": "a T-shirt", "sweater": "a sweater", "coat": "a coat"}

DIAL_MIN_C = -20
DIAL_MAX_C = 35


def layer_for(feels_like: float) -> Layer:
    if feels_like >= 20:
        return TSHIRT
    if feels_like >= 10:
        return SWEATER
    return COAT


def dial_angle(feels_like: float) -> float:
    """Gauge needle angle: -90 at -20 °C or colder, +90 at 35 °C or warmer."""
    clamped = max(DIAL_MIN_C, min(DIAL_MAX_C, feels_like))
    return (clamped - DIAL_MIN_C) / (DIAL_MAX_C - DIAL_MIN_C) * 180 - 90


def wore_feedback(worn: str, yesterday_feels: float, today_feels: float) -> str:
    """
    Compare what the user wore yesterday with what the weather called for.

    Args:
        worn: Layer tag the user picked ("tshirt", "sweater" or "coat")
        yesterday_feels: Aggregated feels-like for yesterday, °C
        today_feels: Aggregated feels-like for today, °C

    Returns:
        A short advisory ending with today's recommendation.
    """
    if worn not in LAYER_RANK:
        raise ValueError(f"Unknown layer: {worn}")

    needed = layer_for(yesterday_feels)
    recommended = layer_for(today_feels)
    worn_rank = LAYER_RANK[worn]
    needed_rank = LAYER_RANK[needed.tag]
    felt = f"{round1(yesterday_feels)}°C feels-like"

    if worn_rank == needed_rank:
        message = f"You wore {LAYER_NAMES[worn]} yesterday, that was spot-on for {felt}. "
    elif worn_rank > needed_rank:
        message = (
            f"You wore {LAYER_NAMES[worn]} yesterday, but it was actually "
            f"{needed.label.lower()} ({felt}). You might have felt cold! "
        )
    else:
        message = (
            f"You wore {LAYER_NAMES[worn]} yesterday, you may have been overdressed "
            f"since it was {needed.label.lower()} ({felt}). "
        )

    diff = round1(today_feels - yesterday_feels)
    if diff > 2:
        message += f"Today is {diff}°C warmer (feels like), so you can likely wear a lighter layer."
    elif diff < -2:
        message += f"Today is {abs(diff)}°C colder (feels like), so add a layer compared to yesterday."
    else:
        message += "Today feels about the same, so yesterday's outfit is a safe bet."

    return message + f" Recommendation: {recommended.label}"
