import logging
from datetime import date
from typing import Optional

from .aggregator import AggregationResult, WeatherAggregator, demo_result
from .layers import wore_feedback

logger = logging.getLogger(__name__)


class LayerSession:
    """Holds the last aggregation result for the screens that need it after rendering."""

    def __init__(self, aggregator: WeatherAggregator):
        self.aggregator = aggregator
        self.last_result: Optional[AggregationResult] = None

    async def refresh(self, city: str, today: Optional[date] = None) -> AggregationResult:
        try:
            result = await self.aggregator.aggregate(city, today=today)
        except Exception:
            logger.exception(f"Aggregation failed for {city}, showing demo data")
            result = demo_result()

        self.last_result = result
        return result

    def wore_feedback(self, worn: str) -> Optional[str]:
        if self.last_result is None:
            return None
        report = self.last_result.report
        return wore_feedback(worn, report.yesterday.feels_like, report.today.feels_like)
