# social/routes.py
from flask import Blueprint, request, jsonify, current_app
from user_auth.utils import login_required_user, current_user_uid
from user_auth.user_store import UserStore
from travel.models import to_json, STATUS_PENDING
from travel.firestore_paths import friend_request_id
from photos.photo_repository import PhotoRepository
from .friends_repository import FriendsRepository
from .like_repository import LikeRepository

def create_social_bp(db_instance):
    social_bp = Blueprint('social_bp', __name__)

    friends_repository = FriendsRepository(db_instance)
    like_repository = LikeRepository(db_instance)
    user_store = UserStore(db_instance)
    # Like routes only read photo documents
    photo_repository = PhotoRepository(db_instance, bucket=None)

    # --- Friends ---

    @social_bp.route('/friends', methods=['GET'])
    @login_required_user
    def list_friends():
        friends = friends_repository.get_friends(current_user_uid())
        return jsonify({"friends": [to_json(f) for f in friends]}), 200

    @social_bp.route('/friends/<friend_id>', methods=['DELETE'])
    @login_required_user
    def remove_friend(friend_id):
        user_uid = current_user_uid()
        if not friends_repository.are_friends(user_uid, friend_id):
            return jsonify({"error": "Not friends"}), 404
        if not friends_repository.remove_friend(user_uid, friend_id):
            return jsonify({"error": "Failed to remove friend."}), 500
        return jsonify({"message": "Friend removed"}), 200

    @social_bp.route('/friends/status/<other_id>', methods=['GET'])
    @login_required_user
    def friendship_status(other_id):
        user_uid = current_user_uid()
        if friends_repository.are_friends(user_uid, other_id):
            return jsonify({"status": "friends"}), 200

        pending = friends_repository.get_pending_request_between(user_uid, other_id)
        if pending is None:
            return jsonify({"status": "none"}), 200

        status = "request_sent" if pending.sender_id == user_uid else "request_received"
        return jsonify({"status": status, "request": to_json(pending)}), 200

    @social_bp.route('/friends/requests', methods=['GET'])
    @login_required_user
    def list_pending_requests():
        pending = friends_repository.get_pending_requests(current_user_uid())
        result = []
        for friend_request in pending:
            item = to_json(friend_request)
            sender = user_store.get_user_profile(friend_request.sender_id)
            item["sender"] = to_json(sender) if sender else None
            result.append(item)
        return jsonify({"requests": result}), 200

    @social_bp.route('/friends/requests', methods=['POST'])
    @login_required_user
    def send_friend_request():
        user_uid = current_user_uid()
        data = request.get_json() or {}
        receiver_id = data.get('receiver_id')

        if not receiver_id:
            return jsonify({"error": "Missing receiver_id"}), 400
        if receiver_id == user_uid:
            return jsonify({"error": "You cannot send a friend request to yourself."}), 400
        if not user_store.get_user_profile(receiver_id):
            return jsonify({"error": "User not found"}), 404
        if friends_repository.are_friends(user_uid, receiver_id):
            return jsonify({"error": "Already friends"}), 409
        if friends_repository.get_pending_request_between(user_uid, receiver_id):
            return jsonify({"error": "A friend request is already pending"}), 409

        if not friends_repository.send_friend_request(user_uid, receiver_id):
            return jsonify({"error": "Failed to send friend request."}), 500

        current_app.logger.info(f"Friend request sent {user_uid} -> {receiver_id}")
        return jsonify({
            "message": "Friend request sent",
            "request_id": friend_request_id(user_uid, receiver_id),
        }), 201

    def _answer_request(request_id, accept):
        user_uid = current_user_uid()
        friend_request = friends_repository.get_friend_request(request_id)
        if not friend_request:
            return jsonify({"error": "Friend request not found"}), 404
        if friend_request.receiver_id != user_uid:
            return jsonify({"error": "Only the receiver can answer this request."}), 403
        if friend_request.status != STATUS_PENDING:
            return jsonify({"error": f"Request already {friend_request.status}"}), 409

        if accept:
            ok = friends_repository.accept_friend_request(friend_request)
        else:
            ok = friends_repository.decline_friend_request(friend_request)
        if not ok:
            return jsonify({"error": "Failed to update friend request."}), 500

        return jsonify({"message": "Friend request accepted" if accept else "Friend request declined"}), 200

    @social_bp.route('/friends/requests/<request_id>/accept', methods=['POST'])
    @login_required_user
    def accept_friend_request(request_id):
        return _answer_request(request_id, accept=True)

    @social_bp.route('/friends/requests/<request_id>/decline', methods=['POST'])
    @login_required_user
    def decline_friend_request(request_id):
        return _answer_request(request_id, accept=False)

    # --- Likes ---

    @social_bp.route('/photos/<photo_id>/like', methods=['POST'])
    @login_required_user
    def toggle_like(photo_id):
        user_uid = current_user_uid()
        photo = photo_repository.get_photo(photo_id)
        if not photo:
            return jsonify({"error": "Photo not found"}), 404
        if photo.user_id != user_uid and not friends_repository.are_friends(user_uid, photo.user_id):
            return jsonify({"error": "Only friends can like this photo."}), 403

        try:
            liked = like_repository.toggle_like(photo_id, user_uid)
        except Exception as e:
            current_app.logger.error(f"Error toggling like on {photo_id} for {user_uid}: {e}", exc_info=True)
            return jsonify({"error": "Failed to update like."}), 500

        return jsonify({
            "photo_id": photo_id,
            "liked": liked,
            "like_count": like_repository.get_like_count(photo_id),
        }), 200

    @social_bp.route('/photos/<photo_id>/likes', methods=['GET'])
    @login_required_user
    def get_likes(photo_id):
        user_uid = current_user_uid()
        photo = photo_repository.get_photo(photo_id)
        if not photo:
            return jsonify({"error": "Photo not found"}), 404
        if photo.user_id != user_uid and not friends_repository.are_friends(user_uid, photo.user_id):
            return jsonify({"error": "Only friends can see likes on this photo."}), 403

        return jsonify({
            "photo_id": photo_id,
            "like_count": like_repository.get_like_count(photo_id),
            "liked_by_me": like_repository.has_user_liked(photo_id, user_uid),
        }), 200

    return social_bp
