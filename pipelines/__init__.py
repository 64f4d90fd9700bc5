"""
Prediction Pipelines

Extraction, scoring and assembly of the daily no-hitter prediction.
"""

from pipelines.prediction_assembly import (
    NoProbablePitchersError,
    PredictionAssembler,
    PredictionServiceError,
    ScoringFailureError,
    determine_season,
)

__all__ = [
    "PredictionAssembler",
    "PredictionServiceError",
    "NoProbablePitchersError",
    "ScoringFailureError",
    "determine_season",
]
