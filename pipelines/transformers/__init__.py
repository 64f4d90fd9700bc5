"""
Data Transformers

Pure functions for transforming extracted data and scoring candidates.
"""

from pipelines.transformers.no_hitter_score import (
    build_insights,
    calculate_no_hitter_score,
    offense_adjustment,
    score_pitchers,
    venue_adjustment,
    weather_adjustment,
)
from pipelines.transformers.pitching import (
    innings_to_decimal,
    summarize_offense,
    summarize_recent_form,
)

__all__ = [
    "build_insights",
    "calculate_no_hitter_score",
    "offense_adjustment",
    "score_pitchers",
    "venue_adjustment",
    "weather_adjustment",
    "innings_to_decimal",
    "summarize_offense",
    "summarize_recent_form",
]
