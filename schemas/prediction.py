"""
Prediction Domain Schemas

Immutable records passed between the extractors, the scoring transformer,
the assembly pass and the prediction cache. All records are frozen pydantic
models so they round-trip through JSON for persistence and the API.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


HEADSHOT_URL = (
    "https://img.mlbstatic.com/mlb-photos/image/upload/"
    "w_300,q_auto:best/v1/people/{}/headshot/67/current"
)


class ThrowingHand(str, Enum):
    """Pitching hand as reported by the schedule feed."""

    LEFT = "L"
    RIGHT = "R"
    SWITCH = "S"
    UNKNOWN = "?"

    @classmethod
    def from_code(cls, code: Optional[str]) -> "ThrowingHand":
        """Parse a pitch-hand code, falling back to UNKNOWN."""
        try:
            return cls((code or "").upper())
        except ValueError:
            return cls.UNKNOWN


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Team(FrozenModel):
    id: int
    name: str
    abbreviation: str
    venue_id: Optional[int] = None


class RecentForm(FrozenModel):
    """Pitching line averaged over the last three appearances of a season."""

    era: float
    whip: float
    strikeout_rate: float
    walk_rate: float
    hits_per_nine: float
    innings_pitched: float


class OffenseStats(FrozenModel):
    """Season hitting line for the opposing team."""

    batting_average: float
    strikeout_rate: float
    on_base_plus_slugging: float


class FieldDimensions(FrozenModel):
    """Outfield wall distances in feet. Any of them may be unknown."""

    left_line: Optional[int] = None
    left_center: Optional[int] = None
    center: Optional[int] = None
    right_center: Optional[int] = None
    right_line: Optional[int] = None


class Venue(FrozenModel):
    """
    Ballpark metadata.

    Partial records are valid: a missing elevation or center-field distance
    only disables the matching scoring term, and missing coordinates only
    prevent a weather lookup.
    """

    id: int
    name: str
    city: str = ""
    state: Optional[str] = None
    country: str = "USA"
    elevation: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    dimensions: Optional[FieldDimensions] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class WeatherSnapshot(FrozenModel):
    """Daily means of the hourly forecast series."""

    temperature: float
    humidity: float
    wind_speed: float
    wind_direction: float


class Matchup(FrozenModel):
    game_date: datetime
    opponent: Team
    venue: Venue
    opponent_offense: Optional[OffenseStats] = None
    weather: Optional[WeatherSnapshot] = None


class Pitcher(FrozenModel):
    """A probable starter plus everything gathered to score the start."""

    id: int
    full_name: str
    team: Team
    throwing_hand: ThrowingHand = ThrowingHand.UNKNOWN
    recent_form: Optional[RecentForm] = None
    matchup: Optional[Matchup] = None

    @property
    def headshot_url(self) -> str:
        return HEADSHOT_URL.format(self.id)


class ProbableStart(FrozenModel):
    """One side of a scheduled game that lists a probable pitcher."""

    pitcher_id: int
    pitcher_name: str
    throwing_hand: ThrowingHand
    team: Team
    opponent: Team
    game_date: datetime
    venue: Venue


class Insight(FrozenModel):
    title: str
    detail: str
    weight: float


class Prediction(FrozenModel):
    """
    The day's top no-hitter candidate.

    Attributes:
        date: Calendar day the prediction applies to
        pitcher: Winning candidate
        confidence_score: Score from the scoring formula (non-negative)
        summary: Ordered insights explaining the score
        is_sample_data: True when the fixed fallback prediction was used
    """

    date: date
    pitcher: Pitcher
    confidence_score: float
    summary: list[Insight]
    is_sample_data: bool = False


class HistoryEntry(FrozenModel):
    date: date
    score: float
    pitcher_name: str
    pitcher_id: int


class HistorySummary(FrozenModel):
    """Derived view over the history log. All fields are None when empty."""

    highest: Optional[HistoryEntry] = None
    lowest: Optional[HistoryEntry] = None
    average: Optional[float] = None
