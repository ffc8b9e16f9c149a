# Seed data for tests, written straight into the fake Firestore.
from travel.firestore_paths import pair_key
from travel.models import User, Trip, Photo, Friends


def auth_headers(uid):
    return {"Authorization": f"Bearer {uid}"}


def add_user(db, uid, username=None, display_name=None):
    user = User(id=uid, username=username or uid, display_name=display_name or uid.title(), email=f"{uid}@example.com")
    db.collection("users").document(uid).set(user.to_dict())
    return user


def add_trip(db, trip_id, user_id, name="Trip", start_date="Jan 01, 2025", end_date="", active=False, photo_count=0):
    trip = Trip(
        id=trip_id, user_id=user_id, name=name, start_date=start_date,
        end_date=end_date, active=active, photo_count=photo_count,
    )
    db.collection("trips").document(trip_id).set(trip.to_dict())
    return trip


def add_photo(db, photo_id, trip_id, user_id, date="2025-01-01", timestamp=0, latitude=0.0, longitude=0.0):
    photo = Photo(
        id=photo_id, user_id=user_id, trip_id=trip_id, image_url=f"https://img/{photo_id}.jpg",
        latitude=latitude, longitude=longitude, date=date, timestamp=timestamp,
    )
    db.collection("photos").document(photo_id).set(photo.to_dict())
    return photo


def make_friends(db, user_a, user_b):
    user1, user2 = sorted((user_a, user_b))
    key = pair_key(user_a, user_b)
    db.collection("friends").document(key).set(Friends(id=key, user1_id=user1, user2_id=user2).to_dict())
