# Centralized Firestore collection names and composite document ids
# Canonical: /trips/{trip_id}, /photos/{photo_id}, /friends/{pair_key}, ...

USERS = "users"
TRIPS = "trips"
PHOTOS = "photos"
FRIEND_REQUESTS = "friendRequests"
FRIENDS = "friends"
LIKES = "likes"

# Firestore caps the number of values in an "in" filter
IN_QUERY_LIMIT = 10


def pair_key(user_a: str, user_b: str) -> str:
    """Undirected key for a friendship: pair_key(a, b) == pair_key(b, a)."""
    first, second = sorted((user_a, user_b))
    return f"{first}_{second}"


def friend_request_id(sender_id: str, receiver_id: str) -> str:
    return f"{sender_id}_{receiver_id}"


def like_id(photo_id: str, user_id: str) -> str:
    return f"{photo_id}_{user_id}"


def chunked(values, size=IN_QUERY_LIMIT):
    for start in range(0, len(values), size):
        yield values[start:start + size]


def users_col(db):
    return db.collection(USERS)


def trips_col(db):
    return db.collection(TRIPS)


def photos_col(db):
    return db.collection(PHOTOS)


def friend_requests_col(db):
    return db.collection(FRIEND_REQUESTS)


def friends_col(db):
    return db.collection(FRIENDS)


def likes_col(db):
    return db.collection(LIKES)
