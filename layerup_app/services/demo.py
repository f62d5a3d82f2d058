from typing import Tuple

from .weather import DayRecord, ProviderResult

# Winter in Toronto, used when no live provider can answer.
DEMO_SOURCES: Tuple[ProviderResult, ...] = (
    ProviderResult(
        source="The Weather Network",
        yesterday=DayRecord(temperature=-5.2, feels_like=-11.3, humidity=72, wind_speed=22,
                            precipitation=1.4, condition="Light snow", uv_index=1),
        today=DayRecord(temperature=-3.0, feels_like=-8.5, humidity=68, wind_speed=18,
                        precipitation=0.2, condition="Partly cloudy", uv_index=2),
    ),
    ProviderResult(
        source="The Weather Channel",
        yesterday=DayRecord(temperature=-4.8, feels_like=-10.8, humidity=74, wind_speed=20,
                            precipitation=1.6, condition="Snow showers", uv_index=1),
        today=DayRecord(temperature=-2.5, feels_like=-7.9, humidity=65, wind_speed=17,
                        precipitation=0.0, condition="Cloudy", uv_index=2),
    ),
    ProviderResult(
        source="AccuWeather",
        yesterday=DayRecord(temperature=-5.5, feels_like=-12.0, humidity=70, wind_speed=24,
                            precipitation=1.2, condition="Snow", uv_index=1),
        today=DayRecord(temperature=-3.3, feels_like=-9.1, humidity=70, wind_speed=19,
                        precipitation=0.4, condition="Mostly cloudy", uv_index=2),
    ),
)


def demo_sources() -> Tuple[ProviderResult, ...]:
    return DEMO_SOURCES
