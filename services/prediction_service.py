"""
Prediction Service

Top-level policy for serving the day's prediction: answer from the cache
when possible, otherwise run a live assembly pass, and fall back to the
cache or the sample prediction when that pass fails. Callers always get a
Prediction back.
"""

from datetime import date, datetime
from typing import Optional

import pytz

from core.logging import get_logger
from core.settings import settings
from pipelines.extractors import MLBStatsExtractor, OpenMeteoExtractor
from pipelines.extractors.base import StatsExtractor, WeatherExtractor
from pipelines.prediction_assembly import PredictionAssembler
from schemas.prediction import HistoryEntry, HistorySummary, Prediction
from services.prediction_cache import PredictionCache
from services.sample_data import sample_prediction
from services.venue_store import VenueStore


def today() -> date:
    """Current calendar day in the configured timezone."""
    return datetime.now(pytz.timezone(settings.timezone)).date()


class PredictionService:
    """Wires extractors, the venue store and the cache behind one interface."""

    def __init__(
        self,
        stats: StatsExtractor,
        weather: WeatherExtractor,
        venues: VenueStore,
        cache: PredictionCache,
    ):
        self.venues = venues
        self.cache = cache
        self.assembler = PredictionAssembler(stats, weather, venues, cache)
        self._log = get_logger("prediction_service")

    @classmethod
    def live(cls) -> "PredictionService":
        """Build a service against the real MLB Stats and Open-Meteo APIs."""
        return cls(
            stats=MLBStatsExtractor(),
            weather=OpenMeteoExtractor(),
            venues=VenueStore.from_file(settings.stadiums_path),
            cache=PredictionCache(),
        )

    async def fetch_prediction(
        self,
        for_date: Optional[date] = None,
        force_refresh: bool = False,
        include_weather: bool = True,
    ) -> Prediction:
        """
        Get the prediction for a day.

        Args:
            for_date: Calendar day (defaults to today)
            force_refresh: Skip the cache and run a live pass
            include_weather: Whether the live pass fetches forecasts

        Returns:
            The live, cached or sample Prediction for the day
        """
        for_date = for_date or today()
        log = self._log.bind(date=for_date.isoformat(), force_refresh=force_refresh)

        if not force_refresh:
            cached = self.cache.get(for_date)
            if cached is not None:
                log.debug("prediction_cache_hit")
                return cached

        try:
            return await self.assembler.assemble(for_date, include_weather=include_weather)
        except Exception as e:
            log.error(
                "prediction_fetch_failed",
                error=str(e),
                error_type=type(e).__name__,
            )

        cached = self.cache.get(for_date)
        if cached is not None:
            log.info("cached_prediction_used")
            return cached

        fallback = sample_prediction(for_date)
        self.cache.put(fallback, for_date)
        log.warning("sample_prediction_used")
        return fallback

    def cached_prediction(self, for_date: Optional[date] = None) -> Optional[Prediction]:
        return self.cache.get(for_date or today())

    def history_entries(self) -> list[HistoryEntry]:
        """History entries, most recent first."""
        return sorted(self.cache.history_entries(), key=lambda e: e.date, reverse=True)

    def history_summary(self) -> HistorySummary:
        return self.cache.history_summary()

    def prediction_for_entry(self, entry: HistoryEntry) -> Optional[Prediction]:
        return self.cache.get(entry.date)


_service: Optional[PredictionService] = None


def get_prediction_service() -> PredictionService:
    """Get the process-wide live service, creating it on first use."""
    global _service
    if _service is None:
        _service = PredictionService.live()
    return _service
