import asyncio
from datetime import date

from services.prediction_service import PredictionService
from services.sample_data import SAMPLE_CONFIDENCE_SCORE, sample_prediction
from services.venue_store import VenueStore
from tests.factories import (
    GAME_DAY,
    StubStats,
    StubWeather,
    make_form,
    make_prediction,
    make_start,
    make_venue,
)


def build_service(cache, stats=None, weather=None):
    return PredictionService(
        stats=stats or StubStats(),
        weather=weather or StubWeather(),
        venues=VenueStore([make_venue()]),
        cache=cache,
    )


def fetch(service, **kwargs):
    return asyncio.run(service.fetch_prediction(for_date=GAME_DAY, **kwargs))


def test_cache_hit_skips_upstream(cache):
    cached = make_prediction(score=111.0)
    cache.put(cached, GAME_DAY)
    stats = StubStats(starts=[make_start(2, "Ace")], forms={2: make_form()})

    result = fetch(build_service(cache, stats=stats))

    assert result == cached
    assert stats.calls == []


def test_cache_miss_runs_live_pass(cache):
    stats = StubStats(starts=[make_start(2, "Ace")], forms={2: make_form()})

    result = fetch(build_service(cache, stats=stats), include_weather=False)

    assert result.pitcher.id == 2
    assert not result.is_sample_data
    assert cache.get(GAME_DAY) == result


def test_force_refresh_replaces_cached_prediction(cache):
    cache.put(make_prediction(score=50.0, pitcher_id=1, name="Old Pick"), GAME_DAY)
    stats = StubStats(starts=[make_start(2, "Ace")], forms={2: make_form()})

    result = fetch(build_service(cache, stats=stats), force_refresh=True, include_weather=False)

    assert result.pitcher.id == 2
    assert cache.get(GAME_DAY).pitcher.id == 2
    assert [e.pitcher_id for e in cache.history_entries()] == [2]


def test_failed_refresh_falls_back_to_cache(cache):
    cached = make_prediction(score=75.0)
    cache.put(cached, GAME_DAY)
    stats = StubStats(starts=RuntimeError("schedule down"))

    result = fetch(build_service(cache, stats=stats), force_refresh=True)

    assert result == cached


def test_failure_without_cache_serves_and_stores_sample(cache):
    stats = StubStats(starts=[])

    result = fetch(build_service(cache, stats=stats))

    assert result.is_sample_data
    assert result.date == GAME_DAY
    assert result.confidence_score == SAMPLE_CONFIDENCE_SCORE
    assert result.pitcher.full_name == "Jacob deGrom"
    assert cache.get(GAME_DAY) == result
    assert [e.score for e in cache.history_entries()] == [SAMPLE_CONFIDENCE_SCORE]


def test_all_pitchers_dropped_serves_sample(cache):
    stats = StubStats(starts=[make_start(1, "No Logs")], forms={})

    result = fetch(build_service(cache, stats=stats))

    assert result.is_sample_data


def test_history_entries_most_recent_first(cache):
    for day in (date(2025, 6, 1), date(2025, 6, 3), date(2025, 6, 2)):
        cache.put(make_prediction(for_date=day), day)

    service = build_service(cache)

    assert [e.date.day for e in service.history_entries()] == [3, 2, 1]


def test_prediction_for_entry(cache):
    stored = make_prediction(score=99.0)
    cache.put(stored, GAME_DAY)
    service = build_service(cache)

    entry = service.history_entries()[0]

    assert service.prediction_for_entry(entry) == stored
    assert service.cached_prediction(date(2025, 6, 2)) is None


def test_sample_prediction_is_flagged():
    sample = sample_prediction(GAME_DAY)

    assert sample.is_sample_data
    assert sample.pitcher.id == 592789
    assert sample.pitcher.matchup.venue.name == "Citi Field"
    assert sample.pitcher.matchup.game_date.date() == GAME_DAY
    assert len(sample.summary) == 3
    assert sample.pitcher.headshot_url == (
        "https://img.mlbstatic.com/mlb-photos/image/upload/"
        "w_300,q_auto:best/v1/people/592789/headshot/67/current"
    )
