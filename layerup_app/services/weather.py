import asyncio
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

import aiohttp

from .units import derive_feels_like, ms_to_kmh, round1

logger = logging.getLogger(__name__)

COORDINATES_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")


class ProviderUnavailable(RuntimeError):
    """A provider could not deliver data for this cycle."""


@dataclass(frozen=True)
class DayRecord:
    """One day of one provider, in °C, %, km/h and mm. ``None`` means not reported."""

    temperature: Optional[float] = None
    feels_like: Optional[float] = None
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    precipitation: Optional[float] = None
    condition: Optional[str] = None
    icon: Optional[str] = None
    uv_index: Optional[float] = None


@dataclass(frozen=True)
class ProviderResult:
    source: str
    yesterday: Optional[DayRecord] = None
    today: Optional[DayRecord] = None


def _num(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def _rounded(value: Optional[float]) -> Optional[float]:
    return round1(value) if value is not None else None


def _first_present(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def parse_coordinates(query: str) -> Optional[Tuple[float, float]]:
    match = COORDINATES_RE.match(query)
    if not match:
        return None
    return float(match.group(1)), float(match.group(2))


class WeatherProvider(ABC):
    name = ""
    source = ""
    base_url = ""

    def __init__(self, session: aiohttp.ClientSession, api_key: str, base_url: Optional[str] = None):
        self.session = session
        self.api_key = api_key
        self.base_url = base_url or self.base_url

    @abstractmethod
    async def fetch(self, city: str, yesterday: date, today: date) -> ProviderResult:
        """Both days for ``city``, which may also be a "lat,lon" string."""

    async def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        try:
            async with self.session.get(url, params=params) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logger.error(f"{self.source} API error {response.status}: {error_text[:200]}")
                    raise ProviderUnavailable(f"{self.source} returned error {response.status}")

                return await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise ProviderUnavailable(f"{self.source} request failed: {e}") from e

    async def _get_json_or_none(self, url: str, params: Dict[str, Any]) -> Any:
        try:
            return await self._get_json(url, params)
        except ProviderUnavailable as e:
            logger.warning(f"{e}, skipping that day")
            return None


class WeatherAPIProvider(WeatherProvider):
    """weatherapi.com: history for yesterday, forecast + current for today."""

    name = "weatherapi"
    source = "The Weather Network"
    base_url = "https://api.weatherapi.com/v1"

    async def fetch(self, city: str, yesterday: date, today: date) -> ProviderResult:
        history, forecast = await asyncio.gather(
            self._get_json(f"{self.base_url}/history.json", {
                "key": self.api_key,
                "q": city,
                "dt": yesterday.isoformat(),
            }),
            self._get_json(f"{self.base_url}/forecast.json", {
                "key": self.api_key,
                "q": city,
                "days": 1,
            }),
        )

        y_forecast = history["forecast"]["forecastday"][0]
        y_day = y_forecast["day"]
        hours = y_forecast.get("hour") or []
        # noon snapshot for wind and humidity
        y_hour = hours[12] if len(hours) > 12 else (hours[0] if hours else {})

        t_day = forecast["forecast"]["forecastday"][0]["day"]
        current = forecast["current"]

        y_temp = _num(y_day.get("avgtemp_c"))
        y_wind = _num(y_hour.get("wind_kph"))
        y_humidity = _num(y_hour.get("humidity"))
        y_condition = y_day.get("condition") or {}

        t_temp = _num(current.get("temp_c"))
        t_wind = _num(current.get("wind_kph"))
        t_humidity = _num(current.get("humidity"))
        t_condition = current.get("condition") or {}

        return ProviderResult(
            source=self.source,
            yesterday=DayRecord(
                temperature=y_temp,
                feels_like=derive_feels_like(y_temp, y_wind, y_humidity),
                humidity=y_humidity,
                wind_speed=y_wind,
                precipitation=_num(y_day.get("totalprecip_mm")),
                condition=y_condition.get("text"),
                icon=self._icon_url(y_condition.get("icon")),
                uv_index=_num(y_day.get("uv")),
            ),
            today=DayRecord(
                temperature=t_temp,
                feels_like=derive_feels_like(t_temp, t_wind, t_humidity),
                humidity=t_humidity,
                wind_speed=t_wind,
                precipitation=_num(t_day.get("totalprecip_mm")),
                condition=t_condition.get("text"),
                icon=self._icon_url(t_condition.get("icon")),
                uv_index=_num(current.get("uv")),
            ),
        )

    @staticmethod
    def _icon_url(icon: Optional[str]) -> Optional[str]:
        if not icon:
            return None
        # icons come protocol-relative: //cdn.weatherapi.com/...
        if icon.startswith("//"):
            return "https:" + icon
        return icon


class OpenWeatherProvider(WeatherProvider):
    """openweathermap.org: geocode, then timemachine for yesterday and current weather for today.

    Either day may be missing on its own; the provider only fails when both are.
    """

    name = "openweather"
    source = "The Weather Channel"
    base_url = "https://api.openweathermap.org"
    icon_url = "https://openweathermap.org/img/wn/{code}@2x.png"

    async def fetch(self, city: str, yesterday: date, today: date) -> ProviderResult:
        lat, lon = await self._resolve(city)

        noon = int(datetime.combine(yesterday, time(12, 0)).timestamp())
        coords = {"lat": lat, "lon": lon, "units": "metric", "appid": self.api_key}

        history, current = await asyncio.gather(
            self._get_json_or_none(f"{self.base_url}/data/3.0/onecall/timemachine", {**coords, "dt": noon}),
            self._get_json_or_none(f"{self.base_url}/data/2.5/weather", coords),
        )

        if history is None and current is None:
            raise ProviderUnavailable(f"{self.source} returned no data for {city}")

        return ProviderResult(
            source=self.source,
            yesterday=self._parse_history(history) if history is not None else None,
            today=self._parse_current(current) if current is not None else None,
        )

    async def _resolve(self, city: str) -> Tuple[float, float]:
        coordinates = parse_coordinates(city)
        if coordinates:
            return coordinates

        places = await self._get_json(f"{self.base_url}/geo/1.0/direct", {
            "q": city,
            "limit": 1,
            "appid": self.api_key,
        })
        if not places:
            raise ProviderUnavailable(f"City not found in {self.source}: {city}")
        return places[0]["lat"], places[0]["lon"]

    def _parse_history(self, payload: Dict[str, Any]) -> DayRecord:
        point = payload["data"][0] if payload.get("data") else payload
        temperature = _num(point.get("temp"))
        wind = ms_to_kmh(_num(point.get("wind_speed")))
        humidity = _num(point.get("humidity"))
        rain = point.get("rain")
        weather = self._weather(point)

        return DayRecord(
            temperature=temperature,
            feels_like=derive_feels_like(temperature, wind, humidity),
            humidity=humidity,
            wind_speed=_rounded(wind),
            precipitation=_num(rain.get("1h")) if rain else None,
            condition=weather.get("description"),
            icon=self._icon(weather),
            uv_index=_num(point.get("uvi")),
        )

    def _parse_current(self, payload: Dict[str, Any]) -> DayRecord:
        main = payload["main"]
        temperature = _num(main.get("temp"))
        wind = ms_to_kmh(_num((payload.get("wind") or {}).get("speed")))
        humidity = _num(main.get("humidity"))
        weather = self._weather(payload)

        return DayRecord(
            temperature=temperature,
            feels_like=derive_feels_like(temperature, wind, humidity),
            humidity=humidity,
            wind_speed=_rounded(wind),
            precipitation=self._precipitation(payload),
            condition=weather.get("description"),
            icon=self._icon(weather),
            uv_index=None,
        )

    @staticmethod
    def _precipitation(payload: Dict[str, Any]) -> Optional[float]:
        blocks = [payload.get("rain"), payload.get("snow")]
        amounts = [block.get("1h") for block in blocks if block]
        amounts = [a for a in amounts if a is not None]
        if not amounts:
            return None
        return round1(sum(amounts))

    @staticmethod
    def _weather(point: Dict[str, Any]) -> Dict[str, Any]:
        weather = point.get("weather") or []
        return weather[0] if weather else {}

    def _icon(self, weather: Dict[str, Any]) -> Optional[str]:
        code = weather.get("icon")
        return self.icon_url.format(code=code) if code else None


class VisualCrossingProvider(WeatherProvider):
    """visualcrossing.com timeline API, both days in one request."""

    name = "visualcrossing"
    source = "AccuWeather"
    base_url = "https://weather.visualcrossing.com/VisualCrossingWebServices/rest/services/timeline"

    async def fetch(self, city: str, yesterday: date, today: date) -> ProviderResult:
        y_str, t_str = yesterday.isoformat(), today.isoformat()
        url = f"{self.base_url}/{quote(city, safe=',')}/{y_str}/{t_str}"
        data = await self._get_json(url, {
            "unitGroup": "metric",
            "key": self.api_key,
            "contentType": "json",
            "include": "days,current",
        })

        days = data["days"]
        y_day = next((d for d in days if d.get("datetime") == y_str), days[0])
        t_day = next((d for d in days if d.get("datetime") == t_str), days[-1])
        current = data.get("currentConditions") or t_day

        y_temp = _num(y_day.get("temp"))
        y_wind = _num(y_day.get("windspeed"))
        y_humidity = _num(y_day.get("humidity"))

        t_temp = _num(_first_present(current.get("temp"), t_day.get("temp")))
        t_wind = _num(_first_present(current.get("windspeed"), t_day.get("windspeed")))
        t_humidity = _num(_first_present(current.get("humidity"), t_day.get("humidity")))

        return ProviderResult(
            source=self.source,
            yesterday=DayRecord(
                temperature=y_temp,
                feels_like=derive_feels_like(y_temp, y_wind, y_humidity),
                humidity=y_humidity,
                wind_speed=_rounded(y_wind),
                precipitation=_num(y_day.get("precip")),
                condition=y_day.get("conditions"),
                icon=None,
                uv_index=_num(y_day.get("uvindex")),
            ),
            today=DayRecord(
                temperature=t_temp,
                feels_like=derive_feels_like(t_temp, t_wind, t_humidity),
                humidity=t_humidity,
                wind_speed=_rounded(t_wind),
                precipitation=_num(t_day.get("precip")),
                condition=current.get("conditions") or t_day.get("conditions"),
                icon=None,
                uv_index=_num(_first_present(current.get("uvindex"), t_day.get("uvindex"))),
            ),
        )


PROVIDER_CLASSES = (WeatherAPIProvider, OpenWeatherProvider, VisualCrossingProvider)
