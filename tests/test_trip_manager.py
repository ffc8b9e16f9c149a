import pytest

from photos.photo_repository import PhotoRepository
from trips.trip_manager import TripManager, NO_TRIP, NEW_TRIP, MENU_LIMIT
from trips.trip_repository import TripRepository
from helpers import add_trip, add_photo


@pytest.fixture
def trips(db):
    return TripRepository(db)


@pytest.fixture
def manager(db, trips):
    return TripManager(trips, PhotoRepository(db, bucket=None))


def active_trips(db, user_id):
    return [d for d in db.docs("trips").values() if d["userId"] == user_id and d["active"]]


def test_deactivate_uses_latest_photo_date(db, trips, manager):
    trip = add_trip(db, "t1", "alice", start_date="Mar 01, 2025", active=True, photo_count=2)
    add_photo(db, "p1", "t1", "alice", date="2025-03-02", timestamp=100)
    add_photo(db, "p2", "t1", "alice", date="2025-03-05", timestamp=500)

    assert manager.deactivate_with_end_date(trip) == "2025-03-05"
    assert db.docs("trips")["t1"]["endDate"] == "2025-03-05"
    assert db.docs("trips")["t1"]["active"] is False


def test_deactivate_without_photos_falls_back_to_start_date(db, manager):
    trip = add_trip(db, "t1", "alice", start_date="Mar 01, 2025", active=True)

    assert manager.deactivate_with_end_date(trip) == "Mar 01, 2025"


def test_new_trip_from_empty_active_trip_asks_to_discard(db, manager):
    add_trip(db, "t1", "alice", name="Empty", active=True, photo_count=0)

    result = manager.select_trip("alice", NEW_TRIP, new_trip_name="Paris")

    assert result.outcome == "confirm_discard"
    assert result.empty_trip.id == "t1"
    assert list(db.docs("trips")) == ["t1"]


def test_confirmed_discard_deletes_empty_trip_and_starts_new_one(db, manager):
    add_trip(db, "t1", "alice", name="Empty", active=True, photo_count=0)

    result = manager.select_trip("alice", NEW_TRIP, new_trip_name="Paris", discard_confirmed=True)

    assert result.outcome == "started"
    assert result.discarded_trip.id == "t1"
    assert "t1" not in db.docs("trips")
    assert result.active_trip.name == "Paris"
    assert [d["id"] for d in active_trips(db, "alice")] == [result.active_trip.id]


def test_selecting_the_empty_active_trip_is_a_no_op(db, manager):
    add_trip(db, "t1", "alice", active=True, photo_count=0)

    result = manager.select_trip("alice", "t1")

    assert result.outcome == "unchanged"
    assert db.docs("trips")["t1"]["active"] is True


def test_new_trip_ends_current_trip_with_photos(db, manager):
    add_trip(db, "t1", "alice", start_date="Mar 01, 2025", active=True, photo_count=1)
    add_photo(db, "p1", "t1", "alice", date="2025-03-03", timestamp=10)

    result = manager.select_trip("alice", NEW_TRIP, new_trip_name="  Paris  ")

    assert result.outcome == "started"
    assert result.active_trip.name == "Paris"
    assert db.docs("trips")["t1"]["active"] is False
    assert db.docs("trips")["t1"]["endDate"] == "2025-03-03"
    assert len(active_trips(db, "alice")) == 1


def test_new_trip_requires_a_name_before_changing_anything(db, manager):
    add_trip(db, "t1", "alice", active=True, photo_count=1)

    with pytest.raises(ValueError):
        manager.select_trip("alice", NEW_TRIP, new_trip_name="   ")

    assert db.docs("trips")["t1"]["active"] is True


def test_select_none_clears_active_trip(db, manager):
    add_trip(db, "t1", "alice", start_date="Mar 01, 2025", active=True, photo_count=1)

    result = manager.select_trip("alice", NO_TRIP)

    assert result.outcome == "cleared"
    assert result.active_trip is None
    assert active_trips(db, "alice") == []


def test_select_existing_trip_switches(db, manager):
    add_trip(db, "current", "alice", start_date="Mar 01, 2025", active=True, photo_count=1)
    add_trip(db, "old", "alice", end_date="2025-01-10", photo_count=4)

    result = manager.select_trip("alice", "old")

    assert result.outcome == "switched"
    assert result.active_trip.id == "old"
    assert db.docs("trips")["old"]["endDate"] == ""
    assert [d["id"] for d in active_trips(db, "alice")] == ["old"]


def test_select_current_trip_with_photos_is_unchanged(db, manager):
    add_trip(db, "current", "alice", active=True, photo_count=1)

    result = manager.select_trip("alice", "current")

    assert result.outcome == "unchanged"
    assert db.docs("trips")["current"]["active"] is True


def test_select_someone_elses_trip(db, manager):
    add_trip(db, "bobs", "bob", photo_count=1)

    with pytest.raises(LookupError):
        manager.select_trip("alice", "bobs")


def test_menu_lists_active_then_newest_and_hides_empty(db, manager):
    add_trip(db, "jan", "alice", start_date="Jan 10, 2025", photo_count=1)
    add_trip(db, "feb", "alice", start_date="Feb 10, 2025", photo_count=1)
    add_trip(db, "empty", "alice", start_date="Mar 10, 2025", photo_count=0)
    add_trip(db, "now", "alice", start_date="Dec 01, 2024", active=True, photo_count=0)

    entries = manager.menu_items("alice")

    assert [e.kind for e in entries[:2]] == [NO_TRIP, NEW_TRIP]
    assert [e.trip.id for e in entries[2:]] == ["now", "feb", "jan"]
    assert entries[2].is_active is True
    assert entries[0].is_active is False


def test_menu_is_capped(db, manager):
    for month in range(1, 10):
        add_trip(db, f"t{month}", "alice", start_date=f"2025-{month:02d}-01", photo_count=1)

    assert len(manager.menu_items("alice")) == MENU_LIMIT


def test_end_trip_deletes_empty_trip(db, manager, trips):
    trip = add_trip(db, "t1", "alice", active=True, photo_count=0)

    assert manager.end_trip(trip) == "deleted"
    assert trips.get_trip_by_id("t1") is None


def test_end_trip_keeps_trip_with_photos(db, manager):
    trip = add_trip(db, "t1", "alice", active=True, photo_count=2)

    assert manager.end_trip(trip) == "ended"
    assert db.docs("trips")["t1"]["active"] is False
    assert db.docs("trips")["t1"]["endDate"] != ""
