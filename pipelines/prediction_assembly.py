"""
Prediction Assembly

Builds the day's prediction from live data: lists the probable starters,
gathers each starter's form, opponent offense, venue and weather
concurrently, scores them and stores the winner.
"""

import asyncio
from datetime import date
from typing import Optional

from core.logging import get_logger, prediction_run
from pipelines.extractors.base import StatsExtractor, WeatherExtractor
from pipelines.transformers.no_hitter_score import score_pitchers
from schemas.prediction import (
    Matchup,
    Pitcher,
    Prediction,
    ProbableStart,
    Venue,
    WeatherSnapshot,
)
from services.prediction_cache import PredictionCache
from services.venue_store import VenueStore


OPENING_DAY_MONTH = 4
OPENING_DAY_DAY = 1


class PredictionServiceError(Exception):
    """Base class for errors that abort an assembly pass."""

    pass


class NoProbablePitchersError(PredictionServiceError):
    """The schedule lists no probable starters for the day."""

    pass


class ScoringFailureError(PredictionServiceError):
    """No candidate survived assembly, so nothing could be scored."""

    pass


def determine_season(for_date: date) -> int:
    """
    Season a date belongs to.

    Dates before April 1 are attributed to the previous year's season,
    since the new season has no games to draw form from yet.
    """
    if for_date < date(for_date.year, OPENING_DAY_MONTH, OPENING_DAY_DAY):
        return for_date.year - 1
    return for_date.year


class PredictionAssembler:
    """
    One live acquisition pass per call to assemble().

    Failure handling:
    - Schedule fetch failure or an empty schedule aborts the pass
    - A failed recent-form fetch drops only that pitcher
    - Offense, venue detail and weather failures leave the field empty

    Extractor calls block, so each runs in a worker thread; per-game work
    fans out with asyncio.gather and per-task error capture, so one failing
    source never cancels its siblings.
    """

    def __init__(
        self,
        stats: StatsExtractor,
        weather: WeatherExtractor,
        venues: VenueStore,
        cache: PredictionCache,
    ):
        self.stats = stats
        self.weather = weather
        self.venues = venues
        self.cache = cache
        self._log = get_logger("prediction_assembly")

    async def assemble(self, for_date: date, include_weather: bool = True) -> Prediction:
        """
        Build, store and return the prediction for a day.

        Args:
            for_date: Calendar day to predict
            include_weather: Whether to fetch forecasts for each venue

        Returns:
            The stored Prediction

        Raises:
            NoProbablePitchersError: If no probable starters are listed
            ScoringFailureError: If every candidate was dropped
            Exception: Whatever the schedule fetch raised
        """
        with prediction_run(for_date):
            return await self._run(for_date, include_weather)

    async def _run(self, for_date: date, include_weather: bool) -> Prediction:
        self._log.info("assembly_started", include_weather=include_weather)

        schedule = await asyncio.to_thread(self.stats.get_probable_starts, for_date)
        if not schedule:
            raise NoProbablePitchersError(f"No probable pitchers listed for {for_date.isoformat()}")

        season = determine_season(for_date)
        self._log.info("schedule_fetched", probable_count=len(schedule), season=season)

        assembled = await asyncio.gather(*(
            self._assemble_pitcher(start, for_date, season, include_weather)
            for start in schedule
        ))
        pitchers = [p for p in assembled if p is not None]
        self._log.info("pitchers_assembled", candidates=len(pitchers), dropped=len(schedule) - len(pitchers))

        # Only reachable when every candidate was dropped above.
        prediction = score_pitchers(pitchers, for_date)
        if prediction is None:
            raise ScoringFailureError(f"No scorable pitchers for {for_date.isoformat()}")

        self.cache.put(prediction, for_date)
        self._log.info(
            "prediction_assembled",
            pitcher=prediction.pitcher.full_name,
            pitcher_id=prediction.pitcher.id,
            score=round(prediction.confidence_score, 2),
        )
        return prediction

    async def _assemble_pitcher(
        self,
        start: ProbableStart,
        for_date: date,
        season: int,
        include_weather: bool,
    ) -> Optional[Pitcher]:
        """Gather everything for one probable starter; None if the starter can't be scored."""
        form, offense, conditions = await asyncio.gather(
            asyncio.to_thread(self.stats.get_recent_form, start.pitcher_id, season),
            asyncio.to_thread(self.stats.get_offense, start.opponent.id, season),
            self._resolve_conditions(start, for_date, include_weather),
            return_exceptions=True,
        )

        if isinstance(form, BaseException):
            self._log.info(
                "recent_form_unavailable",
                pitcher_id=start.pitcher_id,
                pitcher=start.pitcher_name,
                error=str(form),
                error_type=type(form).__name__,
            )
            return None

        if isinstance(offense, BaseException):
            self._log.info(
                "offense_unavailable",
                team_id=start.opponent.id,
                error=str(offense),
                error_type=type(offense).__name__,
            )
            offense = None

        if isinstance(conditions, BaseException):
            self._log.warning("conditions_unavailable", pitcher_id=start.pitcher_id, error=str(conditions))
            conditions = (start.venue, None)
        venue, weather = conditions

        return Pitcher(
            id=start.pitcher_id,
            full_name=start.pitcher_name,
            team=start.team,
            throwing_hand=start.throwing_hand,
            recent_form=form,
            matchup=Matchup(
                game_date=start.game_date,
                opponent=start.opponent,
                venue=venue,
                opponent_offense=offense,
                weather=weather,
            ),
        )

    async def _resolve_conditions(
        self,
        start: ProbableStart,
        for_date: date,
        include_weather: bool,
    ) -> tuple[Venue, Optional[WeatherSnapshot]]:
        """Resolve the venue, then fetch weather at it. Never raises."""
        venue = await self._resolve_venue(start.venue)

        if not include_weather:
            return venue, None

        try:
            weather = await asyncio.to_thread(self.weather.get_weather, venue, for_date)
        except Exception as e:
            self._log.info(
                "weather_unavailable",
                venue_id=venue.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            weather = None

        return venue, weather

    async def _resolve_venue(self, summary: Venue) -> Venue:
        """
        Look a venue up in the reference store, upgrading it from venue
        detail when dimensions or coordinates are missing.
        """
        venue = self.venues.lookup(summary.id) or summary
        if venue.dimensions is not None and venue.latitude is not None:
            return venue

        try:
            detailed = await asyncio.to_thread(self.stats.get_venue_detail, summary.id)
        except Exception as e:
            self._log.info(
                "venue_detail_failed",
                venue_id=summary.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return venue

        self.venues.upsert(detailed)
        return detailed
