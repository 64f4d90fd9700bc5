from playhouse.db_url import connect
from peewee import Model

from core.settings import settings

# Any peewee db_url works: sqlite:///nohitter.db, postgresql://user:pw@host/db, ...
db = connect(settings.database_url)


class BaseModel(Model):
    class Meta:
        database = db


def init_db():
    """Open the connection and create the prediction tables if missing."""
    from .models import CachedPrediction, PredictionHistory

    db.connect(reuse_if_open=True)
    db.create_tables([CachedPrediction, PredictionHistory], safe=True)


def close_db():
    if not db.is_closed():
        db.close()
