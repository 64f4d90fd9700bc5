"""
MLB Stats Extractor

Fetches schedules, game logs, team hitting and venue data from the
public MLB Stats API.
"""

from datetime import date, datetime
from typing import Any, Optional

from core.resilience import mlb_stats_circuit, resilient_request, upstream_call
from core.settings import settings
from pipelines.extractors.base import ExtractorError, StatsExtractor
from pipelines.transformers.pitching import summarize_offense, summarize_recent_form
from schemas.prediction import (
    FieldDimensions,
    OffenseStats,
    ProbableStart,
    RecentForm,
    Team,
    ThrowingHand,
    Venue,
)


class NoGameLogsError(ExtractorError):
    """The pitcher has no appearances in the requested season."""


class NoTeamStatsError(ExtractorError):
    """The team has no hitting line for the requested season."""


class NoVenueError(ExtractorError):
    """The venue lookup returned nothing."""


def parse_game_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 game time such as "2024-06-01T23:05:00Z"."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_team(data: dict) -> Team:
    name = data.get("name", "")
    abbreviation = data.get("abbreviation") or name[:3].upper()
    return Team(
        id=data["id"],
        name=name,
        abbreviation=abbreviation,
        venue_id=(data.get("venue") or {}).get("id"),
    )


def parse_venue(data: dict) -> Venue:
    """
    Build a Venue from a schedule or venue-detail payload.

    Coordinates may be flat on the location or nested under
    defaultCoordinates, and elevation may sit on the venue or its location.
    """
    location = data.get("location") or {}
    coordinates = location.get("defaultCoordinates") or {}
    elevation = data.get("elevation", location.get("elevation"))

    field_info = data.get("fieldInfo")
    dimensions = None
    if field_info is not None:
        dimensions = FieldDimensions(
            left_line=field_info.get("leftLine"),
            left_center=field_info.get("leftCenter"),
            center=field_info.get("center"),
            right_center=field_info.get("rightCenter"),
            right_line=field_info.get("rightLine"),
        )

    return Venue(
        id=data["id"],
        name=data.get("name", ""),
        city=location.get("city") or "",
        state=location.get("stateAbbrev") or location.get("state"),
        country=location.get("country") or "USA",
        elevation=elevation,
        latitude=location.get("latitude", coordinates.get("latitude")),
        longitude=location.get("longitude", coordinates.get("longitude")),
        dimensions=dimensions,
    )


def parse_probable_starts(payload: dict) -> list[ProbableStart]:
    """Flatten a schedule response into one entry per listed probable pitcher."""
    starts: list[ProbableStart] = []

    for schedule_date in payload.get("dates", []):
        for game in schedule_date.get("games", []):
            game_date = parse_game_date(game.get("gameDate"))
            venue_data = game.get("venue")
            teams = game.get("teams", {})
            if game_date is None or not venue_data or "home" not in teams or "away" not in teams:
                continue

            venue = parse_venue(venue_data)
            home_team = parse_team(teams["home"]["team"])
            away_team = parse_team(teams["away"]["team"])

            for side, team, opponent in (
                ("home", home_team, away_team),
                ("away", away_team, home_team),
            ):
                pitcher = teams[side].get("probablePitcher")
                if not pitcher:
                    continue
                starts.append(ProbableStart(
                    pitcher_id=pitcher["id"],
                    pitcher_name=pitcher.get("fullName", ""),
                    throwing_hand=ThrowingHand.from_code((pitcher.get("pitchHand") or {}).get("code")),
                    team=team,
                    opponent=opponent,
                    game_date=game_date,
                    venue=venue,
                ))

    return starts


class MLBStatsExtractor(StatsExtractor):
    """
    Extractor for the MLB Stats API.

    Provides methods to fetch:
    - Probable starters for a date
    - A pitcher's recent game logs
    - A team's season hitting line
    - Venue detail with field dimensions
    """

    def __init__(self, base_url: Optional[str] = None):
        super().__init__("mlb_stats")
        self.base_url = (base_url or settings.mlb_stats_base_url).rstrip("/")

    def _get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> dict:
        url = f"{self.base_url}/{path}"
        self.log.debug("request_start", url=url, params=params)
        response = resilient_request(
            "GET",
            url,
            timeout=settings.http_timeout,
            params=params,
        )
        return response.json()

    @upstream_call(mlb_stats_circuit)
    def get_probable_starts(self, for_date: date) -> list[ProbableStart]:
        """
        Fetch every probable starter scheduled on a date.

        Args:
            for_date: Calendar day to list

        Returns:
            One ProbableStart per team side that lists a probable pitcher
        """
        payload = self._get_json(
            "schedule",
            params={
                "sportId": 1,
                "date": for_date.isoformat(),
                "hydrate": "team,probablePitcher,venue(location)",
                "language": "en",
            },
        )
        starts = parse_probable_starts(payload)
        self.log.info("schedule_complete", date=for_date.isoformat(), probable_count=len(starts))
        return starts

    @upstream_call(mlb_stats_circuit)
    def get_recent_form(self, pitcher_id: int, season: int) -> RecentForm:
        """
        Fetch a pitcher's season game log and summarize the last 3 appearances.

        Raises:
            NoGameLogsError: If the pitcher has not appeared this season
        """
        payload = self._get_json(
            f"people/{pitcher_id}/stats",
            params={"stats": "gameLog", "group": "pitching", "season": season},
        )
        stats = payload.get("stats") or []
        splits = stats[0].get("splits", []) if stats else []
        if not splits:
            raise NoGameLogsError(f"No {season} game logs for pitcher {pitcher_id}")

        return summarize_recent_form(splits)

    @upstream_call(mlb_stats_circuit)
    def get_offense(self, team_id: int, season: int) -> OffenseStats:
        """
        Fetch a team's season hitting line.

        Raises:
            NoTeamStatsError: If the team has no hitting stats for the season
        """
        payload = self._get_json(
            f"teams/{team_id}/stats",
            params={"stats": "season", "group": "hitting", "season": season},
        )
        stats = payload.get("stats") or []
        splits = stats[0].get("splits", []) if stats else []
        if not splits or "stat" not in splits[0]:
            raise NoTeamStatsError(f"No {season} hitting stats for team {team_id}")

        return summarize_offense(splits[0]["stat"])

    @upstream_call(mlb_stats_circuit)
    def get_venue_detail(self, venue_id: int) -> Venue:
        """
        Fetch venue metadata including location and field dimensions.

        Raises:
            NoVenueError: If the venue is unknown
        """
        payload = self._get_json(
            f"venues/{venue_id}",
            params={"hydrate": "location,fieldInfo"},
        )
        venues = payload.get("venues") or []
        if not venues:
            raise NoVenueError(f"Venue {venue_id} not found")

        venue = parse_venue(venues[0])
        self.log.info("venue_complete", venue_id=venue_id, venue=venue.name)
        return venue
