import json
import threading

from schemas.prediction import Venue
from services.venue_store import VenueStore
from tests.factories import make_venue


def test_from_file_loads_bundled_stadiums():
    store = VenueStore.from_file("static/stadiums.json")

    assert len(store) == 30
    citi = store.lookup(3289)
    assert citi.name == "Citi Field"
    assert citi.elevation == 3
    assert citi.dimensions.center == 408
    assert citi.has_coordinates
    assert all(v.has_coordinates for v in store.all())


def test_from_file_relative_path_ignores_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    store = VenueStore.from_file("static/stadiums.json")

    assert len(store) == 30
    assert store.lookup(3289).name == "Citi Field"


def test_from_file_missing_file_yields_empty_store(tmp_path):
    store = VenueStore.from_file(tmp_path / "missing.json")
    assert len(store) == 0


def test_from_file_invalid_json_yields_empty_store(tmp_path):
    path = tmp_path / "stadiums.json"
    path.write_text("[{\"id\": ")
    assert len(VenueStore.from_file(path)) == 0


def test_from_file_absolute_path(tmp_path):
    path = tmp_path / "stadiums.json"
    path.write_text(json.dumps([{"id": 1, "name": "Tiny Park", "elevation": 10}]))

    store = VenueStore.from_file(path)

    assert store.lookup(1).name == "Tiny Park"
    assert store.lookup(1).country == "USA"


def test_upsert_replaces():
    store = VenueStore([Venue(id=3289, name="Citi Field")])
    store.upsert(make_venue())

    assert len(store) == 1
    assert store.lookup(3289).dimensions is not None
    assert store.lookup(999) is None


def test_concurrent_upserts():
    store = VenueStore()

    def worker(offset):
        for i in range(100):
            store.upsert(Venue(id=offset * 1000 + i, name=f"Park {offset}-{i}"))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == 800
