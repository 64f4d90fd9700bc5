"""Tests for the live assembly pass, driven by stub extractors."""

import asyncio
from datetime import date

import pytest

from pipelines.prediction_assembly import (
    NoProbablePitchersError,
    PredictionAssembler,
    ScoringFailureError,
    determine_season,
)
from schemas.prediction import OffenseStats, Venue, WeatherSnapshot
from services.venue_store import VenueStore
from tests.factories import (
    DODGERS,
    GAME_DAY,
    METS,
    ROCKIES,
    YANKEES,
    StubStats,
    StubWeather,
    make_form,
    make_start,
    make_venue,
)


CALM = WeatherSnapshot(temperature=68, humidity=55, wind_speed=0, wind_direction=0)
OFFENSE = OffenseStats(batting_average=0.245, strikeout_rate=0.24, on_base_plus_slugging=0.712)


def assemble(stats, weather, venues, cache, for_date=GAME_DAY, include_weather=True):
    assembler = PredictionAssembler(stats, weather, venues, cache)
    return asyncio.run(assembler.assemble(for_date, include_weather=include_weather))


class TestDetermineSeason:
    @pytest.mark.parametrize(
        "day, season",
        [
            (date(2025, 3, 31), 2024),
            (date(2025, 1, 1), 2024),
            (date(2025, 4, 1), 2025),
            (date(2025, 10, 30), 2025),
        ],
    )
    def test_season_boundary(self, day, season):
        assert determine_season(day) == season


def test_picks_best_pitcher_and_caches_it(cache):
    stats = StubStats(
        starts=[
            make_start(1, "Middling", team=ROCKIES, opponent=DODGERS),
            make_start(2, "Ace", team=METS, opponent=YANKEES),
        ],
        forms={1: make_form(era=4.5, whip=1.4), 2: make_form()},
        offenses={DODGERS.id: OFFENSE, YANKEES.id: OFFENSE},
    )
    venues = VenueStore([make_venue()])

    prediction = assemble(stats, StubWeather(CALM), venues, cache)

    assert prediction.pitcher.id == 2
    assert prediction.date == GAME_DAY
    assert prediction.pitcher.matchup.weather == CALM
    assert prediction.pitcher.matchup.opponent_offense == OFFENSE
    assert cache.get(GAME_DAY) == prediction
    assert [e.pitcher_id for e in cache.history_entries()] == [2]


def test_form_requested_for_season(cache):
    stats = StubStats(starts=[make_start(2, "Ace")], forms={2: make_form()})
    assemble(stats, StubWeather(CALM), VenueStore([make_venue()]), cache, for_date=date(2025, 3, 27))

    assert stats.calls_named("form") == [("form", 2, 2024)]
    assert stats.calls_named("offense") == [("offense", YANKEES.id, 2024)]


def test_empty_schedule_raises(cache):
    with pytest.raises(NoProbablePitchersError):
        assemble(StubStats(starts=[]), StubWeather(CALM), VenueStore(), cache)
    assert cache.get(GAME_DAY) is None


def test_schedule_failure_propagates(cache):
    stats = StubStats(starts=RuntimeError("schedule down"))
    with pytest.raises(RuntimeError, match="schedule down"):
        assemble(stats, StubWeather(CALM), VenueStore(), cache)


def test_missing_form_drops_only_that_pitcher(cache):
    stats = StubStats(
        starts=[make_start(1, "No Logs"), make_start(2, "Has Logs")],
        forms={1: LookupError("no game logs"), 2: make_form(era=6.0)},
    )

    prediction = assemble(stats, StubWeather(CALM), VenueStore([make_venue()]), cache)

    assert prediction.pitcher.id == 2


def test_every_pitcher_dropped_raises_scoring_failure(cache):
    stats = StubStats(starts=[make_start(1, "A"), make_start(2, "B")], forms={})

    with pytest.raises(ScoringFailureError):
        assemble(stats, StubWeather(CALM), VenueStore([make_venue()]), cache)
    assert cache.get(GAME_DAY) is None


def test_offense_failure_leaves_field_empty(cache):
    stats = StubStats(starts=[make_start(2, "Ace")], forms={2: make_form()})

    prediction = assemble(stats, StubWeather(CALM), VenueStore([make_venue()]), cache)

    assert prediction.pitcher.matchup.opponent_offense is None
    assert "Opponent Bats" not in [i.title for i in prediction.summary]


def test_weather_failure_leaves_field_empty(cache):
    stats = StubStats(starts=[make_start(2, "Ace")], forms={2: make_form()})
    weather = StubWeather(RuntimeError("forecast down"))

    prediction = assemble(stats, weather, VenueStore([make_venue()]), cache)

    assert prediction.pitcher.matchup.weather is None
    assert weather.calls == [(3289, GAME_DAY)]


def test_weather_skipped_when_disabled(cache):
    stats = StubStats(starts=[make_start(2, "Ace")], forms={2: make_form()})
    weather = StubWeather(CALM)

    prediction = assemble(stats, weather, VenueStore([make_venue()]), cache, include_weather=False)

    assert weather.calls == []
    assert prediction.pitcher.matchup.weather is None


class TestVenueResolution:
    def test_complete_store_entry_skips_detail_fetch(self, cache):
        stats = StubStats(starts=[make_start(2, "Ace")], forms={2: make_form()})

        prediction = assemble(stats, StubWeather(CALM), VenueStore([make_venue()]), cache)

        assert stats.calls_named("venue") == []
        assert prediction.pitcher.matchup.venue.dimensions.center == 408

    def test_partial_venue_is_upgraded_and_stored(self, cache):
        summary = Venue(id=4705, name="Truist Park")
        detailed = make_venue(venue_id=4705, name="Truist Park", elevation=1050)
        stats = StubStats(
            starts=[make_start(2, "Ace", venue=summary)],
            forms={2: make_form()},
            venues={4705: detailed},
        )
        venues = VenueStore()

        prediction = assemble(stats, StubWeather(CALM), venues, cache)

        assert prediction.pitcher.matchup.venue == detailed
        assert venues.lookup(4705) == detailed
        assert stats.calls_named("venue") == [("venue", 4705)]

    def test_detail_failure_keeps_partial_venue(self, cache):
        summary = Venue(id=4705, name="Truist Park", latitude=33.89, longitude=-84.47)
        stats = StubStats(starts=[make_start(2, "Ace", venue=summary)], forms={2: make_form()})
        venues = VenueStore()

        prediction = assemble(stats, StubWeather(CALM), venues, cache)

        assert prediction.pitcher.matchup.venue == summary
        assert venues.lookup(4705) is None
