"""
Prediction Cache Tables

Per-day store of the authoritative prediction and the history log derived
from it. Both tables are keyed by calendar date, so writing a date twice
replaces the earlier row instead of adding a duplicate.
"""

from datetime import date, datetime

from peewee import (
    BooleanField,
    CharField,
    DateField,
    DateTimeField,
    FloatField,
    IntegerField,
    TextField,
)

from db.base import BaseModel


class CachedPrediction(BaseModel):
    """
    The prediction served for a calendar day.

    Attributes:
        game_date: Calendar day (primary key)
        payload: Prediction serialized as JSON
        is_sample_data: True when the fixed fallback prediction was stored
        updated_at: When this row was last written
    """

    game_date = DateField(primary_key=True)
    payload = TextField()
    is_sample_data = BooleanField(default=False)
    updated_at = DateTimeField(default=datetime.utcnow)

    class Meta:
        table_name = "cached_predictions"

    def __repr__(self) -> str:
        return f"<CachedPrediction(game_date={self.game_date}, sample={self.is_sample_data})>"

    @classmethod
    def upsert_prediction(cls, game_date: date, payload: str, is_sample_data: bool) -> None:
        """Insert or fully replace the prediction for a day."""
        (
            cls.insert(
                game_date=game_date,
                payload=payload,
                is_sample_data=is_sample_data,
                updated_at=datetime.utcnow(),
            )
            .on_conflict(
                conflict_target=[cls.game_date],
                update={
                    cls.payload: payload,
                    cls.is_sample_data: is_sample_data,
                    cls.updated_at: datetime.utcnow(),
                },
            )
            .execute()
        )


class PredictionHistory(BaseModel):
    """
    One history row per calendar day.

    Attributes:
        game_date: Calendar day (primary key)
        score: Confidence score of that day's prediction
        pitcher_name: Predicted pitcher's full name
        pitcher_id: Predicted pitcher's MLB ID
    """

    game_date = DateField(primary_key=True)
    score = FloatField()
    pitcher_name = CharField(max_length=100)
    pitcher_id = IntegerField()

    class Meta:
        table_name = "prediction_history"

    def __repr__(self) -> str:
        return (
            f"<PredictionHistory("
            f"game_date={self.game_date}, "
            f"pitcher={self.pitcher_name}, "
            f"score={self.score})>"
        )

    @classmethod
    def upsert_entry(cls, game_date: date, score: float, pitcher_name: str, pitcher_id: int) -> None:
        """Insert or replace the history row for a day."""
        (
            cls.insert(
                game_date=game_date,
                score=score,
                pitcher_name=pitcher_name,
                pitcher_id=pitcher_id,
            )
            .on_conflict(
                conflict_target=[cls.game_date],
                update={
                    cls.score: score,
                    cls.pitcher_name: pitcher_name,
                    cls.pitcher_id: pitcher_id,
                },
            )
            .execute()
        )

    @classmethod
    def all_ascending(cls) -> list["PredictionHistory"]:
        return list(cls.select().order_by(cls.game_date.asc()))
