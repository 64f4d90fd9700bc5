"""
Data Extractors

Reusable components for fetching data from external sources.
"""

from pipelines.extractors.base import (
    BaseExtractor,
    ExtractorError,
    StatsExtractor,
    WeatherExtractor,
)
from pipelines.extractors.mlb_stats import (
    MLBStatsExtractor,
    NoGameLogsError,
    NoTeamStatsError,
    NoVenueError,
)
from pipelines.extractors.open_meteo import (
    MissingCoordinatesError,
    NoWeatherDataError,
    OpenMeteoExtractor,
)

__all__ = [
    "BaseExtractor",
    "ExtractorError",
    "StatsExtractor",
    "WeatherExtractor",
    "MLBStatsExtractor",
    "NoGameLogsError",
    "NoTeamStatsError",
    "NoVenueError",
    "OpenMeteoExtractor",
    "MissingCoordinatesError",
    "NoWeatherDataError",
]
