# trips/routes.py
from flask import Blueprint, request, jsonify, current_app
from user_auth.utils import login_required_user, current_user_uid
from shared_globals import parse_trip_date
from travel.models import to_json
from trips.trip_repository import TripRepository, ActiveTripExistsError
from trips.trip_manager import TripManager, NEW_TRIP
from photos.photo_repository import PhotoRepository
from social.friends_repository import FriendsRepository
from social.like_repository import LikeRepository

def _selection_json(result):
    return {
        "outcome": result.outcome,
        "active_trip": to_json(result.active_trip) if result.active_trip else None,
        "discarded_trip": to_json(result.discarded_trip) if result.discarded_trip else None,
        "empty_trip": to_json(result.empty_trip) if result.empty_trip else None,
    }

def create_trip_bp(db_instance, bucket=None):
    trip_bp = Blueprint('trip_bp', __name__)

    trip_repository = TripRepository(db_instance)
    photo_repository = PhotoRepository(db_instance, bucket)
    friends_repository = FriendsRepository(db_instance)
    like_repository = LikeRepository(db_instance)
    trip_manager = TripManager(trip_repository, photo_repository)

    def can_view(user_uid, trip):
        return trip.user_id == user_uid or friends_repository.are_friends(user_uid, trip.user_id)

    @trip_bp.route('/trips', methods=['GET'])
    @login_required_user
    def list_own_trips():
        user_uid = current_user_uid()
        active_trip = trip_repository.get_active_trip(user_uid)
        completed = trip_repository.get_completed_trips(user_uid)
        completed.sort(key=lambda t: parse_trip_date(t.start_date), reverse=True)

        return jsonify({
            "active_trip": to_json(active_trip) if active_trip else None,
            "completed_trips": [to_json(t) for t in completed],
        }), 200

    @trip_bp.route('/trips', methods=['POST'])
    @login_required_user
    def start_trip():
        user_uid = current_user_uid()
        data = request.get_json() or {}

        try:
            result = trip_manager.select_trip(
                user_uid, NEW_TRIP,
                new_trip_name=data.get('name'),
                discard_confirmed=bool(data.get('discard_confirmed')),
            )
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        except ActiveTripExistsError as e:
            return jsonify({"error": str(e)}), 409
        except Exception as e:
            current_app.logger.error(f"Error starting trip for {user_uid}: {e}", exc_info=True)
            return jsonify({"error": "Failed to start trip."}), 500

        if result.outcome == "confirm_discard":
            return jsonify({"message": "Active trip has no photos and will be discarded.", **_selection_json(result)}), 409
        return jsonify({"message": "Trip started", **_selection_json(result)}), 201

    @trip_bp.route('/trips/active', methods=['GET'])
    @login_required_user
    def get_active_trip():
        active_trip = trip_manager.check_active_trip(current_user_uid())
        return jsonify({"active_trip": to_json(active_trip) if active_trip else None}), 200

    @trip_bp.route('/trips/menu', methods=['GET'])
    @login_required_user
    def get_trip_menu():
        entries = trip_manager.menu_items(current_user_uid())
        return jsonify({"items": [
            {
                "kind": e.kind,
                "trip": to_json(e.trip) if e.trip else None,
                "is_active": e.is_active,
            }
            for e in entries
        ]}), 200

    @trip_bp.route('/trips/select', methods=['POST'])
    @login_required_user
    def select_trip():
        user_uid = current_user_uid()
        data = request.get_json() or {}
        selection = data.get('selection')
        if not selection:
            return jsonify({"error": "Missing selection ('none', 'new' or a trip id)"}), 400

        try:
            result = trip_manager.select_trip(
                user_uid, selection,
                new_trip_name=data.get('name'),
                discard_confirmed=bool(data.get('discard_confirmed')),
            )
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        except LookupError:
            return jsonify({"error": "Trip not found"}), 404
        except ActiveTripExistsError as e:
            return jsonify({"error": str(e)}), 409
        except Exception as e:
            current_app.logger.error(f"Error selecting trip {selection} for {user_uid}: {e}", exc_info=True)
            return jsonify({"error": "Failed to change trip."}), 500

        current_app.logger.info(f"Trip selection '{selection}' by {user_uid}: {result.outcome}")
        return jsonify(_selection_json(result)), 200

    @trip_bp.route('/trips/<trip_id>/end', methods=['POST'])
    @login_required_user
    def end_trip(trip_id):
        user_uid = current_user_uid()
        trip = trip_repository.get_trip_by_id(trip_id)
        if not trip:
            return jsonify({"error": "Trip not found"}), 404
        if trip.user_id != user_uid:
            return jsonify({"error": "You can only end your own trips."}), 403
        if not trip.active:
            return jsonify({"error": "Trip has already ended."}), 409

        try:
            outcome = trip_manager.end_trip(trip)
            return jsonify({"message": f"Trip {outcome}", "outcome": outcome}), 200
        except Exception as e:
            current_app.logger.error(f"Error ending trip {trip_id}: {e}", exc_info=True)
            return jsonify({"error": "Failed to end trip."}), 500

    @trip_bp.route('/trips/<trip_id>', methods=['GET'])
    @login_required_user
    def get_trip_detail(trip_id):
        user_uid = current_user_uid()
        trip = trip_repository.get_trip_by_id(trip_id)
        if not trip:
            return jsonify({"error": "Trip not found"}), 404
        if not can_view(user_uid, trip):
            return jsonify({"error": "Only friends can view this trip."}), 403

        photos = sorted(photo_repository.get_photos_for_trip(trip_id), key=lambda p: p.timestamp)
        photo_list = []
        for photo in photos:
            item = to_json(photo)
            item["like_count"] = like_repository.get_like_count(photo.id)
            item["liked_by_me"] = like_repository.has_user_liked(photo.id, user_uid)
            photo_list.append(item)

        return jsonify({
            "trip": to_json(trip),
            "photos": photo_list,
            "total_likes": sum(p["like_count"] for p in photo_list),
        }), 200

    @trip_bp.route('/users/<uid>/trips', methods=['GET'])
    @login_required_user
    def get_user_trips(uid):
        """A friend's profile: their active trip first, then completed trips by start date."""
        user_uid = current_user_uid()
        if uid != user_uid and not friends_repository.are_friends(user_uid, uid):
            return jsonify({"error": "Only friends can view trips."}), 403

        trips = []
        active_trip = trip_repository.get_active_trip(uid)
        if active_trip:
            trips.append(active_trip)
        completed = trip_repository.get_completed_trips(uid)
        trips += sorted(completed, key=lambda t: parse_trip_date(t.start_date), reverse=True)

        trip_likes = like_repository.get_likes_for_trips(trips, photo_repository)
        return jsonify({
            "user_id": uid,
            "trips": [{**to_json(t), "total_likes": trip_likes.get(t.id, 0)} for t in trips],
        }), 200

    return trip_bp
