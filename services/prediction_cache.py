"""
Prediction Cache

Date-keyed persistence of the day's prediction plus the history log that
every write keeps in step.
"""

from datetime import date
from typing import Optional

from core.logging import get_logger
from db.models.predictions import CachedPrediction, PredictionHistory
from schemas.prediction import HistoryEntry, HistorySummary, Prediction


class PredictionCache:
    """
    Read/write access to cached predictions and their history.

    Keys are calendar dates; any time-of-day component is ignored by the
    callers converting to `date` before reaching this layer.
    """

    def __init__(self):
        self._log = get_logger("prediction_cache")

    def get(self, for_date: date) -> Optional[Prediction]:
        """Return the stored prediction for a day, or None on a miss."""
        row = CachedPrediction.get_or_none(CachedPrediction.game_date == for_date)
        if row is None:
            return None
        try:
            return Prediction.model_validate_json(row.payload)
        except ValueError as e:
            self._log.warning("cached_prediction_unreadable", date=for_date.isoformat(), error=str(e))
            return None

    def put(self, prediction: Prediction, for_date: date) -> None:
        """
        Store a prediction for a day, replacing any earlier one.

        Also writes the day's history entry, replacing the previous entry
        for the same date. Both rows are written in one transaction.
        """
        # Whatever database the cache tables are bound to
        database = CachedPrediction._meta.database
        with database.atomic():
            CachedPrediction.upsert_prediction(
                game_date=for_date,
                payload=prediction.model_dump_json(),
                is_sample_data=prediction.is_sample_data,
            )
            PredictionHistory.upsert_entry(
                game_date=for_date,
                score=prediction.confidence_score,
                pitcher_name=prediction.pitcher.full_name,
                pitcher_id=prediction.pitcher.id,
            )
        self._log.info(
            "prediction_cached",
            date=for_date.isoformat(),
            pitcher=prediction.pitcher.full_name,
            score=round(prediction.confidence_score, 2),
            sample=prediction.is_sample_data,
        )

    def history_entries(self) -> list[HistoryEntry]:
        """All history entries, oldest first."""
        return [
            HistoryEntry(
                date=row.game_date,
                score=row.score,
                pitcher_name=row.pitcher_name,
                pitcher_id=row.pitcher_id,
            )
            for row in PredictionHistory.all_ascending()
        ]

    def history_summary(self) -> HistorySummary:
        """Highest, lowest and mean score across the history log."""
        entries = self.history_entries()
        if not entries:
            return HistorySummary()

        return HistorySummary(
            highest=max(entries, key=lambda e: e.score),
            lowest=min(entries, key=lambda e: e.score),
            average=sum(e.score for e in entries) / len(entries),
        )
