# Import all models to ensure they are registered with the database
from .predictions import CachedPrediction, PredictionHistory

__all__ = [
    'CachedPrediction', 'PredictionHistory'
]
