import os

# Settings are read at import time; keep the default database off disk.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from peewee import SqliteDatabase

from db.models import CachedPrediction, PredictionHistory
from services.prediction_cache import PredictionCache
from services.venue_store import VenueStore

MODELS = [CachedPrediction, PredictionHistory]


@pytest.fixture
def test_db(tmp_path):
    """File-backed SQLite bound to the cache models for one test."""
    database = SqliteDatabase(str(tmp_path / "predictions.db"))
    with database.bind_ctx(MODELS):
        database.create_tables(MODELS)
        yield database
    database.close()


@pytest.fixture
def cache(test_db):
    return PredictionCache()


@pytest.fixture
def venues():
    return VenueStore()
