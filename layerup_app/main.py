import argparse
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import aiohttp

from layerup_app.config import settings, resolve_credentials
from layerup_app.services import LayerSession, WeatherAggregator, build_providers
from layerup_app.services.aggregator import AggregationResult
from layerup_app.services.layers import LAYER_RANK
from layerup_app.services.units import Direction

logger = logging.getLogger(__name__)


def setup_logging():
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler('layerup.log', encoding='utf-8'),
            logging.StreamHandler()
        ]
    )


@asynccontextmanager
async def lifespan():
    credentials = resolve_credentials(settings)

    async with aiohttp.ClientSession() as http:
        aggregator = WeatherAggregator(
            build_providers(http, credentials),
            credentials,
            timeout=settings.PROVIDER_TIMEOUT,
        )
        yield LayerSession(aggregator)


def render_summary(city: str, result: AggregationResult) -> str:
    report = result.report
    y, t = report.yesterday, report.today
    lines = [f"Weather for {city}" + (" (demo data)" if result.is_fallback else "")]

    for title, day in (("Yesterday", y), ("Today", t)):
        lines.append(
            f"{title}: {day.temperature}°C, feels like {day.feels_like}°C, {day.condition}, "
            f"humidity {day.humidity}%, wind {day.wind_speed} km/h, "
            f"precip {day.precipitation} mm, UV {day.uv_index}"
        )

    for name, change in report.changes.items():
        sign = "+" if change.diff > 0 else ""
        if change.direction is Direction.SAME:
            pct = "~0"
        else:
            pct = ("+" if change.direction is Direction.UP else "-") + str(change.pct)
        lines.append(f"  {name}: {sign}{change.diff} ({pct}%)")

    lines.append(f"{report.layer.label}: {report.layer.detail} (dial {report.dial_angle:.0f}°)")

    for source in report.sources:
        today = source.today
        if today is None:
            lines.append(f"  {source.source}: --")
            continue
        lines.append(
            f"  {source.source}: {today.temperature}°C, feels {today.feels_like}°C, "
            f"{today.humidity}%, {today.wind_speed} km/h, {today.precipitation} mm"
        )

    for source, reason in result.failures.items():
        lines.append(f"  {source}: unavailable ({reason})")

    return "\n".join(lines)


async def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Yesterday vs today weather and what to wear")
    parser.add_argument("city", nargs="?", default=settings.DEFAULT_CITY,
                        help='city name or "latitude,longitude"')
    parser.add_argument("--wore", choices=sorted(LAYER_RANK), help="what you wore yesterday")
    args = parser.parse_args(argv)

    async with lifespan() as session:
        result = await session.refresh(args.city)
        print(render_summary(args.city, result))

        if args.wore:
            print(session.wore_feedback(args.wore))

        if result.is_fallback:
            logger.info("Showing demo data. Set WEATHERAPI_KEY, OPENWEATHER_KEY and VISUALCROSSING_KEY for live weather.")


def run():
    setup_logging()
    asyncio.run(main())


if __name__ == "__main__":
    run()
