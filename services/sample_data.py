"""
Sample Prediction

Fixed, hand-written prediction served when live assembly fails and nothing
is cached for the day.
"""

from datetime import date, datetime, time

import pytz

from core.settings import settings
from schemas.prediction import (
    FieldDimensions,
    Insight,
    Matchup,
    OffenseStats,
    Pitcher,
    Prediction,
    RecentForm,
    Team,
    ThrowingHand,
    Venue,
    WeatherSnapshot,
)


SAMPLE_CONFIDENCE_SCORE = 87.4


def sample_prediction(for_date: date) -> Prediction:
    """Build the fallback prediction for a day, flagged as sample data."""
    first_pitch = pytz.timezone(settings.timezone).localize(datetime.combine(for_date, time(19, 10)))

    team = Team(id=121, name="New York Mets", abbreviation="NYM", venue_id=3289)
    opponent = Team(id=147, name="New York Yankees", abbreviation="NYY", venue_id=3313)
    venue = Venue(
        id=3289,
        name="Citi Field",
        city="New York",
        state="NY",
        country="USA",
        elevation=3,
        latitude=40.7571,
        longitude=-73.8458,
        dimensions=FieldDimensions(
            left_line=335, left_center=370, center=408, right_center=375, right_line=330
        ),
    )
    matchup = Matchup(
        game_date=first_pitch,
        opponent=opponent,
        venue=venue,
        opponent_offense=OffenseStats(
            batting_average=0.245, strikeout_rate=0.24, on_base_plus_slugging=0.712
        ),
        weather=WeatherSnapshot(temperature=68, humidity=48, wind_speed=8, wind_direction=180),
    )
    pitcher = Pitcher(
        id=592789,
        full_name="Jacob deGrom",
        team=team,
        throwing_hand=ThrowingHand.RIGHT,
        recent_form=RecentForm(
            era=1.98,
            whip=0.92,
            strikeout_rate=0.32,
            walk_rate=0.06,
            hits_per_nine=5.1,
            innings_pitched=21.2,
        ),
        matchup=matchup,
    )

    return Prediction(
        date=for_date,
        pitcher=pitcher,
        confidence_score=SAMPLE_CONFIDENCE_SCORE,
        summary=[
            Insight(title="Last 3 starts", detail="ERA 1.98 | WHIP 0.92", weight=0.3),
            Insight(title="Strikeouts", detail="K% 32 vs BB% 6", weight=0.2),
            Insight(title="Opponent", detail="Yankees offense trending down", weight=0.2),
        ],
        is_sample_data=True,
    )
