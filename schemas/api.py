from typing import Optional

from .common import BaseResponse
from .prediction import HistoryEntry, HistorySummary, Prediction


class PredictionResponse(BaseResponse):
    """Response carrying a single day's prediction"""

    data: Optional[Prediction] = None


class HistoryResponse(BaseResponse):
    """History entries, most recent first"""

    data: list[HistoryEntry] = []


class HistorySummaryResponse(BaseResponse):
    """Highest, lowest and average history scores"""

    data: HistorySummary


class HealthResponse(BaseResponse):
    timestamp: str
