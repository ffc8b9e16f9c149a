# social/feed_routes.py
from flask import Blueprint, jsonify, current_app
from user_auth.utils import login_required_user, current_user_uid
from user_auth.user_store import UserStore
from shared_globals import parse_trip_date
from travel.models import to_json
from trips.trip_repository import TripRepository
from photos.photo_repository import PhotoRepository
from .friends_repository import FriendsRepository
from .like_repository import LikeRepository

def create_feed_bp(db_instance):
    feed_bp = Blueprint('feed_bp', __name__)

    friends_repository = FriendsRepository(db_instance)
    trip_repository = TripRepository(db_instance)
    photo_repository = PhotoRepository(db_instance, bucket=None)
    like_repository = LikeRepository(db_instance)
    user_store = UserStore(db_instance)

    @feed_bp.route('/feed', methods=['GET'])
    @login_required_user
    def get_home_feed():
        """Friends' completed trips, most recently ended first."""
        user_uid = current_user_uid()
        current_app.logger.info(f"Home feed requested by UID: {user_uid}")

        friend_ids = friends_repository.get_friend_ids(user_uid)
        if not friend_ids:
            return jsonify({"message": "No friends yet", "feed": []}), 200

        trips = trip_repository.get_completed_trips_for_users(friend_ids)
        trips.sort(key=lambda t: parse_trip_date(t.end_date), reverse=True)

        owners = {}
        feed_trips = []
        for trip in trips:
            if trip.user_id not in owners:
                owners[trip.user_id] = user_store.get_user_profile(trip.user_id)
            owner = owners[trip.user_id]
            if owner:
                feed_trips.append((trip, owner))

        trip_likes = like_repository.get_likes_for_trips([t for t, _ in feed_trips], photo_repository)

        feed = [
            {
                "trip": to_json(trip),
                "user": to_json(owner),
                "total_likes": trip_likes.get(trip.id, 0),
            }
            for trip, owner in feed_trips
        ]
        return jsonify({"message": "Feed retrieved successfully", "feed": feed}), 200

    return feed_bp
