# photos/routes.py
import os
import uuid
from flask import Blueprint, request, jsonify, current_app
from user_auth.utils import login_required_user, current_user_uid
from shared_globals import today_photo_date, now_millis
from travel.models import Photo, to_json
from trips.trip_repository import TripRepository
from social.friends_repository import FriendsRepository
from .photo_repository import PhotoRepository
from .travel_path import build_travel_path
from .uploads import save_upload, coordinates_for_upload

def _discard_file(filepath):
    if filepath and os.path.exists(filepath):
        os.remove(filepath)

def create_photo_bp(db_instance, bucket):
    photo_bp = Blueprint('photo_bp', __name__)

    photo_repository = PhotoRepository(db_instance, bucket)
    trip_repository = TripRepository(db_instance)
    friends_repository = FriendsRepository(db_instance)

    def can_view(user_uid, owner_uid):
        return owner_uid == user_uid or friends_repository.are_friends(user_uid, owner_uid)

    @photo_bp.route('/photos', methods=['POST'])
    @login_required_user
    def upload_photo():
        """
        Upload a geotagged photo into a trip (the caller's active trip unless trip_id is given).

        curl -X POST http://127.0.0.1:5000/photos -H "Authorization: Bearer <token>" \
        -F "file=@/path/to/photo.jpg" -F "latitude=48.8584" -F "longitude=2.2945"
        """
        user_uid = current_user_uid()
        if "file" not in request.files:
            return jsonify({"error": "No file part"}), 400

        trip_id = request.form.get("trip_id")
        if trip_id:
            trip = trip_repository.get_trip_by_id(trip_id)
            if not trip:
                return jsonify({"error": "Trip not found"}), 404
            if trip.user_id != user_uid:
                return jsonify({"error": "You can only add photos to your own trips."}), 403
        else:
            trip = trip_repository.get_active_trip(user_uid)

        try:
            filepath = save_upload(request.files["file"])
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        try:
            coords = coordinates_for_upload(request.form, filepath)
        except ValueError:
            _discard_file(filepath)
            return jsonify({"error": "Invalid latitude/longitude"}), 400

        photo = Photo(
            id=str(uuid.uuid4()),
            user_id=user_uid,
            trip_id=trip.id if trip else "",
            local_path=filepath,
            latitude=coords["latitude"],
            longitude=coords["longitude"],
            date=today_photo_date(),
            timestamp=now_millis(),
        )

        try:
            saved = photo_repository.save_photo(photo, local_path=filepath)
        except Exception as e:
            current_app.logger.error(f"Error uploading photo {photo.id} for {user_uid}: {e}", exc_info=True)
            _discard_file(filepath)
            return jsonify({"error": "Upload failed"}), 500

        # The photo is stored at this point; a failed counter update only leaves photoCount behind
        if trip:
            try:
                trip_repository.increment_photo_count(trip.id)
            except Exception as e:
                current_app.logger.error(f"Photo {saved.id} saved but photoCount of trip {trip.id} not updated: {e}",
                                         exc_info=True)

        current_app.logger.info(f"Photo {saved.id} uploaded by {user_uid} to trip {saved.trip_id or '-'}")
        return jsonify({"message": "Photo uploaded!", "photo": to_json(saved)}), 201

    @photo_bp.route('/photos/<photo_id>', methods=['GET'])
    @login_required_user
    def get_photo(photo_id):
        photo = photo_repository.get_photo(photo_id)
        if not photo:
            return jsonify({"error": "Photo not found"}), 404
        if not can_view(current_user_uid(), photo.user_id):
            return jsonify({"error": "Only friends can view this photo."}), 403
        return jsonify({"photo": to_json(photo)}), 200

    @photo_bp.route('/trips/<trip_id>/photos', methods=['GET'])
    @login_required_user
    def get_trip_photos(trip_id):
        trip = trip_repository.get_trip_by_id(trip_id)
        if not trip:
            return jsonify({"error": "Trip not found"}), 404
        if not can_view(current_user_uid(), trip.user_id):
            return jsonify({"error": "Only friends can view this trip."}), 403

        photos = sorted(photo_repository.get_photos_for_trip(trip_id), key=lambda p: p.timestamp)
        return jsonify({
            "trip_id": trip_id,
            "count": len(photos),
            "photos": [to_json(p) for p in photos],
        }), 200

    @photo_bp.route('/trips/<trip_id>/path', methods=['GET'])
    @login_required_user
    def get_trip_path(trip_id):
        trip = trip_repository.get_trip_by_id(trip_id)
        if not trip:
            return jsonify({"error": "Trip not found"}), 404
        if not can_view(current_user_uid(), trip.user_id):
            return jsonify({"error": "Only friends can view this trip."}), 403

        path = build_travel_path(photo_repository.get_photos_for_trip(trip_id))
        return jsonify({"trip_id": trip_id, **path}), 200

    @photo_bp.route('/map/active', methods=['GET'])
    @login_required_user
    def get_active_trip_map():
        """Photos and path of the caller's active trip; empty when no trip is active."""
        active_trip = trip_repository.get_active_trip(current_user_uid())
        if not active_trip:
            return jsonify({"active_trip": None, "photos": [], **build_travel_path([])}), 200

        photos = sorted(photo_repository.get_photos_for_trip(active_trip.id), key=lambda p: p.timestamp)
        return jsonify({
            "active_trip": to_json(active_trip),
            "photos": [to_json(p) for p in photos],
            **build_travel_path(photos),
        }), 200

    return photo_bp
