from .aggregator import AggregatedReport, AggregationResult, WeatherAggregator, build_providers, build_report
from .layers import Layer, dial_angle, layer_for, wore_feedback
from .session import LayerSession
from .units import average, feels_like, percent_change
from .weather import DayRecord, ProviderResult, ProviderUnavailable

__all__ = [
    'AggregatedReport',
    'AggregationResult',
    'WeatherAggregator',
    'build_providers',
    'build_report',
    'Layer',
    'dial_angle',
    'layer_for',
    'wore_feedback',
    'LayerSession',
    'average',
    'feels_like',
    'percent_change',
    'DayRecord',
    'ProviderResult',
    'ProviderUnavailable',
]
