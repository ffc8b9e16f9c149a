# user_auth/routes.py
from flask import Blueprint, request, jsonify, current_app
from firebase_admin import auth
from .utils import login_required_user, current_user_uid
from .user_store import UserStore, UsernameTakenError, AuthError
from travel.models import to_json

def create_user_bp(db_instance):
    user_bp = Blueprint('user_bp', __name__, url_prefix='/user')
    user_store = UserStore(db_instance)

    @user_bp.route('/signup', methods=['POST'])
    def sign_up():
        data = request.get_json() or {}
        email = (data.get('email') or '').strip()
        password = data.get('password') or ''
        username = (data.get('username') or '').strip()
        display_name = (data.get('display_name') or '').strip()

        if not email or not password or not username or not display_name:
            return jsonify({"error": "Missing email, password, username or display_name"}), 400

        try:
            user = user_store.sign_up(email, password, username, display_name)
            return jsonify({"message": "User created successfully", "user": to_json(user)}), 201
        except UsernameTakenError as e:
            return jsonify({"error": str(e)}), 409
        except auth.EmailAlreadyExistsError:
            return jsonify({"error": "Email already in use"}), 409
        except Exception as e:
            current_app.logger.error(f"Error signing up {username}: {e}", exc_info=True)
            return jsonify({"error": "Sign up failed."}), 500

    @user_bp.route('/signin', methods=['POST'])
    def sign_in():
        data = request.get_json() or {}
        email = data.get('email')
        password = data.get('password')
        if not email or not password:
            return jsonify({"error": "Missing email or password"}), 400

        try:
            tokens = user_store.sign_in(email, password)
            return jsonify({"message": "Signed in", **tokens}), 200
        except AuthError as e:
            current_app.logger.info(f"Sign in rejected for {email}: {e}")
            return jsonify({"error": "Invalid email or password"}), 401
        except Exception as e:
            current_app.logger.error(f"Error signing in {email}: {e}", exc_info=True)
            return jsonify({"error": "Sign in failed."}), 500

    @user_bp.route('/signout', methods=['POST'])
    @login_required_user
    def sign_out():
        user_uid = current_user_uid()
        try:
            user_store.sign_out(user_uid)
            return jsonify({"message": "Signed out"}), 200
        except Exception as e:
            current_app.logger.error(f"Error signing out {user_uid}: {e}")
            return jsonify({"error": "Sign out failed."}), 500

    @user_bp.route('/profile', methods=['GET'])
    @login_required_user
    def get_user_profile():
        user_uid = current_user_uid()
        user = user_store.get_user_profile(user_uid)
        if not user:
            return jsonify({"error": "User profile not found."}), 404
        return jsonify({"message": "User profile retrieved successfully", "profile": to_json(user)}), 200

    @user_bp.route('/profile', methods=['POST'])
    @login_required_user
    def update_user_profile():
        user_uid = current_user_uid()
        data = request.get_json() or {}

        try:
            if not user_store.update_profile(user_uid, data):
                return jsonify({"error": "Nothing to update. Allowed: display_name, profile_picture_url"}), 400
            return jsonify({"message": "User profile updated successfully"}), 200
        except Exception as e:
            current_app.logger.error(f"Error updating user profile for {user_uid}: {e}")
            return jsonify({"error": "Failed to update user profile"}), 500

    @user_bp.route('/search', methods=['GET'])
    @login_required_user
    def search_users():
        query = (request.args.get('q') or '').strip()
        if not query:
            return jsonify({"users": []}), 200

        # Don't list the caller in their own search results
        user_uid = current_user_uid()
        users = [u for u in user_store.search_users_by_username(query) if u.id != user_uid]
        return jsonify({"users": [to_json(u) for u in users]}), 200

    @user_bp.route('/<uid>', methods=['GET'])
    @login_required_user
    def get_other_profile(uid):
        user = user_store.get_user_profile(uid)
        if not user:
            return jsonify({"error": "User not found."}), 404
        return jsonify({"profile": to_json(user)}), 200

    return user_bp
