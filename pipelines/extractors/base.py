"""
Base Extractors

Abstract base classes for the upstream data sources the prediction
assembly pass depends on.
"""

from abc import ABC, abstractmethod
from datetime import date

from core.logging import get_logger
from schemas.prediction import (
    OffenseStats,
    ProbableStart,
    RecentForm,
    Venue,
    WeatherSnapshot,
)


class ExtractorError(Exception):
    """Raised when an upstream source answered but had no usable data."""

    pass


class BaseExtractor(ABC):
    """
    Abstract base class for data extractors.

    Extractors are responsible for fetching data from external sources
    with proper error handling and resilience. Their methods are blocking;
    the assembly pass runs them in worker threads.

    Subclasses wrap each upstream call with @upstream_call(<circuit>) and
    raise ExtractorError subclasses when a response has no usable data.
    """

    def __init__(self, name: str):
        """
        Initialize extractor.

        Args:
            name: Extractor name for logging
        """
        self.name = name
        self.log = get_logger(f"extractor.{name}")


class StatsExtractor(BaseExtractor):
    """Schedule, pitching, hitting and venue data for one league."""

    @abstractmethod
    def get_probable_starts(self, for_date: date) -> list[ProbableStart]:
        """List every probable starter scheduled on a day."""

    @abstractmethod
    def get_recent_form(self, pitcher_id: int, season: int) -> RecentForm:
        """Average a pitcher's three most recent appearances in a season."""

    @abstractmethod
    def get_offense(self, team_id: int, season: int) -> OffenseStats:
        """Fetch a team's season hitting line."""

    @abstractmethod
    def get_venue_detail(self, venue_id: int) -> Venue:
        """Fetch full venue metadata including field dimensions."""


class WeatherExtractor(BaseExtractor):
    """Forecast data for a venue on a given day."""

    @abstractmethod
    def get_weather(self, venue: Venue, day: date) -> WeatherSnapshot:
        """Average the day's hourly forecast at the venue's coordinates."""
