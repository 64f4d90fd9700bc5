"""
Pitching Transformers

Turns raw game-log and team-stat payloads into scoring inputs.
"""

from typing import Any, Iterable, Union

from schemas.prediction import OffenseStats, RecentForm


RECENT_APPEARANCES = 3


def innings_to_decimal(innings: Union[str, int, float, None]) -> float:
    """
    Convert box-score innings notation to a real number of innings.

    The digit after the dot counts outs, not tenths.

    Examples:
        >>> innings_to_decimal("6.1")
        6.333333333333333
        >>> innings_to_decimal("7")
        7.0
        >>> innings_to_decimal(None)
        0.0
    """
    if innings is None:
        return 0.0
    if isinstance(innings, (int, float)):
        innings = str(innings)

    whole, _, outs = innings.partition(".")
    try:
        whole_innings = float(whole) if whole else 0.0
    except ValueError:
        return 0.0

    if outs == "1":
        return whole_innings + 1.0 / 3.0
    if outs == "2":
        return whole_innings + 2.0 / 3.0
    return whole_innings


def _safe_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def summarize_recent_form(splits: Iterable[dict]) -> RecentForm:
    """
    Combine game-log splits into one rate line.

    Args:
        splits: Game-log split dicts, each with a "stat" mapping. Only the
                last RECENT_APPEARANCES entries in date order are used.

    Returns:
        RecentForm built from summed counting stats

    Raises:
        ValueError: If there are no splits
    """
    ordered = sorted(splits, key=lambda split: split.get("date") or "")
    recent = ordered[-RECENT_APPEARANCES:]
    if not recent:
        raise ValueError("No game logs to summarize")

    innings = earned_runs = hits = walks = strikeouts = batters_faced = 0.0
    for split in recent:
        stat = split.get("stat", {})
        innings += innings_to_decimal(stat.get("inningsPitched"))
        earned_runs += _safe_float(stat.get("earnedRuns"))
        hits += _safe_float(stat.get("hits"))
        walks += _safe_float(stat.get("baseOnBalls"))
        strikeouts += _safe_float(stat.get("strikeOuts"))
        batters_faced += _safe_float(stat.get("battersFaced"))

    return RecentForm(
        era=(earned_runs * 9.0) / innings if innings > 0 else 99.0,
        whip=(walks + hits) / innings if innings > 0 else 5.0,
        strikeout_rate=strikeouts / batters_faced if batters_faced > 0 else 0.0,
        walk_rate=walks / batters_faced if batters_faced > 0 else 0.0,
        hits_per_nine=(hits * 9.0) / innings if innings > 0 else 9.0,
        innings_pitched=innings,
    )


def summarize_offense(stat: dict) -> OffenseStats:
    """Build an opponent hitting line from a season stat mapping."""
    at_bats = _safe_float(stat.get("atBats"))
    strikeouts = _safe_float(stat.get("strikeOuts"))
    return OffenseStats(
        batting_average=_safe_float(stat.get("avg")),
        strikeout_rate=strikeouts / at_bats if at_bats > 0 else 0.0,
        on_base_plus_slugging=_safe_float(stat.get("ops")),
    )
