"""
No-Hitter Score Transformer

Scores probable starters with a fixed, hand-tuned linear formula and picks
the day's top candidate.
"""

from datetime import date
from typing import Optional, Sequence

from schemas.prediction import (
    Insight,
    OffenseStats,
    Pitcher,
    Prediction,
    Venue,
    WeatherSnapshot,
)


OPTIMAL_TEMPERATURE = 68.0
OPTIMAL_HUMIDITY = 55.0
AVERAGE_ELEVATION = 500.0
AVERAGE_CENTER_FIELD = 400
LEAGUE_STRIKEOUT_RATE = 0.30


def weather_adjustment(weather: WeatherSnapshot) -> float:
    """
    Reward mild, calm conditions.

    Scoring breakdown:
        - Temperature: up to 20, minus 1.2 per degree away from 68F
        - Humidity: up to 15, minus 0.5 per point away from 55%
        - Wind: up to 12, minus 1.5 per mph
    """
    temperature_score = max(0, 20 - abs(weather.temperature - OPTIMAL_TEMPERATURE) * 1.2)
    humidity_score = max(0, 15 - abs(weather.humidity - OPTIMAL_HUMIDITY) * 0.5)
    wind_score = max(0, 12 - weather.wind_speed * 1.5)
    return temperature_score + humidity_score + wind_score


def venue_adjustment(venue: Venue) -> float:
    """Low elevation and deep center field favor the pitcher."""
    adjustment = 0.0
    if venue.elevation is not None:
        adjustment += max(-10.0, min(10.0, (AVERAGE_ELEVATION - venue.elevation) / 100))
    if venue.dimensions is not None and venue.dimensions.center is not None:
        adjustment += (venue.dimensions.center - AVERAGE_CENTER_FIELD) / 10.0
    return adjustment


def offense_adjustment(offense: OffenseStats) -> float:
    """Penalize lineups that hit for average and power, reward ones that strike out."""
    value = 0.0
    value -= offense.batting_average * 200
    value -= offense.on_base_plus_slugging * 50
    value += (LEAGUE_STRIKEOUT_RATE - offense.strikeout_rate) * 120
    return value


def calculate_no_hitter_score(pitcher: Pitcher) -> float:
    """
    Calculate a pitcher's no-hitter confidence score.

    A pitcher without recent form scores 0 and no matchup term is evaluated.
    Otherwise the base form score is adjusted by whichever of weather, venue
    and opponent offense are present, and the total is floored at 0.

    Args:
        pitcher: Candidate with optional recent form and matchup

    Returns:
        Non-negative score
    """
    stats = pitcher.recent_form
    if stats is None:
        return 0.0

    total = 0.0
    total += max(0, 90 - stats.era * 12)
    total += max(0, 80 - stats.whip * 40)
    total += stats.strikeout_rate * 120
    total -= stats.walk_rate * 60
    total -= stats.hits_per_nine * 5
    total += min(stats.innings_pitched * 2.5, 35)

    matchup = pitcher.matchup
    if matchup is not None:
        if matchup.weather is not None:
            total += weather_adjustment(matchup.weather)
        total += venue_adjustment(matchup.venue)
        if matchup.opponent_offense is not None:
            total += offense_adjustment(matchup.opponent_offense)

    return max(0.0, total)


def build_insights(pitcher: Pitcher, score: float) -> list[Insight]:
    """Explain a score as an ordered list of weighted insights."""
    insights: list[Insight] = []

    stats = pitcher.recent_form
    if stats is not None:
        insights.append(Insight(
            title="Last 3 Starts",
            detail=f"ERA {stats.era:.2f} | WHIP {stats.whip:.2f}",
            weight=0.3,
        ))
        insights.append(Insight(
            title="Dominance",
            detail=f"K% {int(stats.strikeout_rate * 100)} vs BB% {int(stats.walk_rate * 100)}",
            weight=0.2,
        ))

    matchup = pitcher.matchup
    if matchup is not None and matchup.opponent_offense is not None:
        offense = matchup.opponent_offense
        insights.append(Insight(
            title="Opponent Bats",
            detail=f"AVG {offense.batting_average:.3f} | K% {int(offense.strikeout_rate * 100)}",
            weight=0.15,
        ))

    if matchup is not None:
        parts = [matchup.venue.name]
        if matchup.venue.elevation is not None:
            parts.append(f"Elev. {int(matchup.venue.elevation)} ft")
        insights.append(Insight(
            title="Venue",
            detail=" • ".join(part for part in parts if part),
            weight=0.15,
        ))
        insights.append(Insight(title="Opponent", detail=matchup.opponent.name, weight=0.1))

    insights.append(Insight(title="Confidence", detail=f"Score {score:.1f}", weight=0.1))
    return insights


def score_pitchers(pitchers: Sequence[Pitcher], for_date: date) -> Optional[Prediction]:
    """
    Pick the highest-scoring pitcher and wrap the result as the day's prediction.

    Ties go to the pitcher listed first: max() only replaces its running best
    on a strictly greater score.

    Args:
        pitchers: Assembled candidates, in schedule order
        for_date: Calendar day the prediction applies to

    Returns:
        Prediction for the top pitcher, or None if there are no candidates
    """
    if not pitchers:
        return None

    scored = [(calculate_no_hitter_score(p), p) for p in pitchers]
    score, top = max(scored, key=lambda pair: pair[0])

    return Prediction(
        date=for_date,
        pitcher=top,
        confidence_score=score,
        summary=build_insights(top, score),
    )
