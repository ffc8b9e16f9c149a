# user_auth/utils.py
from firebase_admin import auth
from flask import request, abort, session, current_app
from functools import wraps

def verify_firebase_token(id_token):
    """
    Verifies a Firebase ID token.
    Returns the user's UID if valid, None otherwise.
    """
    try:
        decoded_token = auth.verify_id_token(id_token)
        return decoded_token['uid']
    except Exception as e:
        current_app.logger.error(f"Error verifying Firebase ID token: {e}")
        return None

def current_user_uid():
    return session.get('user_uid')

def login_required_user(f):
    """
    Decorator for Flask routes to ensure a user is authenticated via Firebase ID token.
    Requires the client to send a 'Authorization: Bearer <id_token>' header.
    Stores the user's UID in the Flask session.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get('Authorization')

        if not auth_header:
            abort(401, description="Authorization token missing.")

        if not auth_header.startswith("Bearer "):
            abort(401, description="Invalid Authorization header format. Expected 'Bearer <token>'.")

        id_token = auth_header.split(" ")[1]

        uid = verify_firebase_token(id_token)
        if not uid:
            abort(401, description="Invalid or expired token.")

        session['user_uid'] = uid
        return f(*args, **kwargs)
    return decorated_function
