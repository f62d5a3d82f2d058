import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import aiohttp

from layerup_app.config import ConfiguredCredentials, Credentials, DemoMode, settings
from .demo import demo_sources
from .layers import Layer, dial_angle, layer_for
from .units import ChangeIndicator, average, change_between, feels_like
from .weather import PROVIDER_CLASSES, DayRecord, ProviderResult, WeatherProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderOk:
    result: ProviderResult


@dataclass(frozen=True)
class ProviderErr:
    source: str
    reason: str


ProviderOutcome = Union[ProviderOk, ProviderErr]


@dataclass(frozen=True)
class DaySummary:
    temperature: float
    feels_like: float
    humidity: float
    wind_speed: float
    precipitation: float
    uv_index: float
    condition: str = "--"
    icon: Optional[str] = None


@dataclass(frozen=True)
class AggregatedReport:
    yesterday: DaySummary
    today: DaySummary
    sources: Tuple[ProviderResult, ...] = ()

    @property
    def changes(self) -> Dict[str, ChangeIndicator]:
        return {
            "temperature": change_between(self.yesterday.temperature, self.today.temperature),
            "feels_like": change_between(self.yesterday.feels_like, self.today.feels_like),
            "precipitation": change_between(self.yesterday.precipitation, self.today.precipitation),
        }

    @property
    def layer(self) -> Layer:
        return layer_for(self.today.feels_like)

    @property
    def yesterday_layer(self) -> Layer:
        return layer_for(self.yesterday.feels_like)

    @property
    def dial_angle(self) -> float:
        return dial_angle(self.today.feels_like)


@dataclass(frozen=True)
class AggregationResult:
    report: AggregatedReport
    is_fallback: bool
    failures: Dict[str, str] = field(default_factory=dict)


def summarize_day(records: Sequence[DayRecord]) -> DaySummary:
    """Average one day across providers.

    Feels-like is derived again from the averaged temperature, wind and
    humidity rather than averaged from the per-provider values.
    """
    temperature = average(r.temperature for r in records)
    humidity = average(r.humidity for r in records)
    wind_speed = average(r.wind_speed for r in records)

    return DaySummary(
        temperature=temperature,
        feels_like=feels_like(temperature, wind_speed, humidity),
        humidity=humidity,
        wind_speed=wind_speed,
        precipitation=average(r.precipitation for r in records),
        uv_index=average(r.uv_index for r in records),
        condition=next((r.condition for r in records if r.condition), "--"),
        icon=next((r.icon for r in records if r.icon), None),
    )


def build_report(sources: Iterable[ProviderResult]) -> AggregatedReport:
    sources = tuple(sources)
    return AggregatedReport(
        yesterday=summarize_day([s.yesterday for s in sources if s.yesterday is not None]),
        today=summarize_day([s.today for s in sources if s.today is not None]),
        sources=sources,
    )


def demo_result() -> AggregationResult:
    return AggregationResult(report=build_report(demo_sources()), is_fallback=True)


def build_providers(session: aiohttp.ClientSession, credentials: Credentials) -> List[WeatherProvider]:
    if isinstance(credentials, DemoMode):
        return []
    return [
        provider_class(session, credentials.keys[provider_class.name])
        for provider_class in PROVIDER_CLASSES
        if provider_class.name in credentials.keys
    ]


class WeatherAggregator:
    def __init__(
        self,
        providers: Sequence[WeatherProvider],
        credentials: Credentials,
        timeout: Optional[float] = None,
    ):
        self.providers = list(providers)
        self.credentials = credentials
        self.timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT

    async def aggregate(self, city: str, today: Optional[date] = None) -> AggregationResult:
        today = today or date.today()
        yesterday = today - timedelta(days=1)

        if not isinstance(self.credentials, ConfiguredCredentials):
            logger.warning("API keys not set, using demo data")
            return demo_result()

        outcomes = await asyncio.gather(*(
            self._settle(provider, city, yesterday, today) for provider in self.providers
        ))

        results = [o.result for o in outcomes if isinstance(o, ProviderOk)]
        failures = {o.source: o.reason for o in outcomes if isinstance(o, ProviderErr)}

        if not results:
            logger.warning(f"All live providers failed for {city}, falling back to demo data")
            return AggregationResult(
                report=build_report(demo_sources()),
                is_fallback=True,
                failures=failures,
            )

        logger.info(f"Aggregated {len(results)}/{len(outcomes)} providers for {city}")
        return AggregationResult(report=build_report(results), is_fallback=False, failures=failures)

    async def _settle(self, provider: WeatherProvider, city: str,
                      yesterday: date, today: date) -> ProviderOutcome:
        try:
            result = await asyncio.wait_for(provider.fetch(city, yesterday, today), self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{provider.source} timed out after {self.timeout}s")
            return ProviderErr(provider.source, f"timed out after {self.timeout}s")
        except Exception as e:
            logger.warning(f"{provider.source} failed: {e!r}")
            return ProviderErr(provider.source, repr(e))
        return ProviderOk(result)
