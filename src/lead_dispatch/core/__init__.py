"""Core utilities: week boundaries, errors and configuration."""

from .weeks import week_start, week_end, date_key, parse_date_key, week_dates
from .errors import DistributionError, ConfigurationError, QueueEmptyError
from .config import DispatchConfig, DispatchConfigManager

__all__ = [
    "week_start",
    "week_end",
    "date_key",
    "parse_date_key",
    "week_dates",
    "DistributionError",
    "ConfigurationError",
    "QueueEmptyError",
    "DispatchConfig",
    "DispatchConfigManager",
]
