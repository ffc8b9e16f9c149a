# user_auth/user_store.py
import logging
import requests
from firebase_admin import auth
from shared_globals import FIREBASE_WEB_API_KEY
from travel.firestore_paths import users_col
from travel.models import User

logger = logging.getLogger(__name__)

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

# Profile fields a user may change after sign-up
EDITABLE_PROFILE_FIELDS = {
    'display_name': 'displayName',
    'profile_picture_url': 'profilePictureUrl',
}


class UsernameTakenError(ValueError):
    pass


class AuthError(Exception):
    pass


class UserStore:
    """User profiles in Firestore plus the Firebase Auth account behind them."""

    def __init__(self, db_instance):
        self.db = db_instance

    def is_username_taken(self, username):
        docs = users_col(self.db).where('username', '==', username).limit(1).stream()
        return any(True for _ in docs)

    def sign_up(self, email, password, username, display_name):
        """
        Creates the auth account and the profile document.
        The username check runs first so no auth account is created for a
        username that is already in use.
        """
        if self.is_username_taken(username):
            raise UsernameTakenError("Username already taken")

        firebase_user = auth.create_user(email=email, password=password, display_name=display_name)
        uid = firebase_user.uid
        if not uid:
            raise AuthError("Failed to get user ID")

        user = User(id=uid, username=username, display_name=display_name, email=email)
        users_col(self.db).document(uid).set(user.to_dict())
        logger.info(f"Created user {uid} (@{username})")
        return user

    def sign_in(self, email, password):
        """Password sign-in through the Identity Toolkit REST API."""
        if not FIREBASE_WEB_API_KEY:
            raise AuthError("FIREBASE_WEB_API_KEY is not configured.")

        response = requests.post(
            SIGN_IN_URL,
            params={'key': FIREBASE_WEB_API_KEY},
            json={'email': email, 'password': password, 'returnSecureToken': True},
            timeout=10,
        )
        if response.status_code != 200:
            try:
                message = response.json().get('error', {}).get('message', 'Sign in failed')
            except ValueError:
                message = f"Sign in failed ({response.status_code})"
            raise AuthError(message)

        data = response.json()
        return {
            'id_token': data.get('idToken'),
            'refresh_token': data.get('refreshToken'),
            'uid': data.get('localId'),
            'expires_in': data.get('expiresIn'),
        }

    def sign_out(self, uid):
        auth.revoke_refresh_tokens(uid)

    def get_user_profile(self, uid):
        try:
            doc = users_col(self.db).document(uid).get()
            if not doc.exists:
                return None
            return User.from_dict(doc.id, doc.to_dict())
        except Exception as e:
            logger.error(f"Error fetching profile for {uid}: {e}")
            return None

    def update_profile(self, uid, fields):
        update = {
            firestore_name: fields[name]
            for name, firestore_name in EDITABLE_PROFILE_FIELDS.items()
            if name in fields
        }
        if not update:
            return False
        users_col(self.db).document(uid).update(update)
        return True

    def search_users_by_username(self, query):
        # "\uf8ff" sorts after every other character, making this a prefix match
        try:
            docs = (
                users_col(self.db)
                .where('username', '>=', query)
                .where('username', '<=', query + "\uf8ff")
                .stream()
            )
            return [User.from_dict(doc.id, doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error(f"Error searching users for '{query}': {e}")
            return []
