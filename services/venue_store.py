"""
Venue Reference Store

In-memory venue metadata keyed by venue ID. Seeded once from the static
stadium dataset and upgraded in place whenever the assembly pass fetches a
richer record. Safe for concurrent upserts; the last write for a venue wins.
"""

import json
import threading
from pathlib import Path
from typing import Iterable, Optional, Union

from core.logging import get_logger
from schemas.prediction import Venue


class VenueStore:
    """Thread-safe venue lookup table."""

    def __init__(self, venues: Optional[Iterable[Venue]] = None):
        self._venues: dict[int, Venue] = {v.id: v for v in venues or []}
        self._lock = threading.Lock()
        self._log = get_logger("venue_store")

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "VenueStore":
        """
        Seed a store from a JSON list of venue records.

        Relative paths resolve against the directory holding the services
        package, not the working directory. A missing or unreadable file
        yields an empty store; venues are then filled in from the schedule
        and venue-detail fetches.
        """
        log = get_logger("venue_store")
        stadium_path = Path(path)
        if not stadium_path.is_absolute():
            stadium_path = Path(__file__).parent.parent / stadium_path

        try:
            with open(stadium_path, "r") as f:
                records = json.load(f)
            venues = [Venue.model_validate(record) for record in records]
        except (OSError, ValueError) as e:
            log.warning("stadiums_load_failed", path=str(stadium_path), error=str(e))
            return cls()

        log.info("stadiums_loaded", path=str(stadium_path), count=len(venues))
        return cls(venues)

    def lookup(self, venue_id: int) -> Optional[Venue]:
        with self._lock:
            return self._venues.get(venue_id)

    def upsert(self, venue: Venue) -> None:
        with self._lock:
            self._venues[venue.id] = venue
        self._log.debug("venue_upserted", venue_id=venue.id, venue=venue.name)

    def all(self) -> list[Venue]:
        with self._lock:
            return list(self._venues.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._venues)
