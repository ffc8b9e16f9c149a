import os
import json
import logging
import firebase_admin
from firebase_admin import credentials, firestore, storage
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from shared_globals import (
    FIREBASE_SERVICE_ACCOUNT_CONTENT, FIREBASE_SERVICE_ACCOUNT_PATH,
    FIREBASE_STORAGE_BUCKET, FLASK_SECRET_KEY, UPLOAD_FOLDER,
)
from user_auth.routes import create_user_bp
from trips.routes import create_trip_bp
from photos.routes import create_photo_bp
from social.routes import create_social_bp
from social.feed_routes import create_feed_bp

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

def _initialize_firebase():
    if not firebase_admin._apps: # Check if Firebase app is not already initialized
        options = {'storageBucket': FIREBASE_STORAGE_BUCKET} if FIREBASE_STORAGE_BUCKET else None
        if FIREBASE_SERVICE_ACCOUNT_CONTENT:
            cred = credentials.Certificate(json.loads(FIREBASE_SERVICE_ACCOUNT_CONTENT))
            firebase_admin.initialize_app(cred, options)
            logging.info("Firebase initialized using environment variable.")
        elif os.path.exists(FIREBASE_SERVICE_ACCOUNT_PATH):
            cred = credentials.Certificate(FIREBASE_SERVICE_ACCOUNT_PATH)
            firebase_admin.initialize_app(cred, options)
            logging.info("Firebase initialized using local file path.")
        else:
            logging.error(
                f"Firebase service account not found. Expected env var FIREBASE_SERVICE_ACCOUNT_CONTENT "
                f"or file at {FIREBASE_SERVICE_ACCOUNT_PATH}."
            )
            raise FileNotFoundError(
                f"Firebase service account not found. Expected env var FIREBASE_SERVICE_ACCOUNT_CONTENT "
                f"or file at {FIREBASE_SERVICE_ACCOUNT_PATH}."
            )
    return firebase_admin.get_app()


def create_app(db_instance=None, bucket=None):
    """
    Builds the API. Without arguments Firebase is initialized from the
    environment; tests pass their own Firestore client and bucket.
    """
    if db_instance is None or bucket is None:
        firebase_app = _initialize_firebase()
        if db_instance is None:
            db_instance = firestore.client(app=firebase_app)
        if bucket is None:
            bucket = storage.bucket(app=firebase_app)

    app = Flask(__name__)
    app.secret_key = FLASK_SECRET_KEY
    os.makedirs(UPLOAD_FOLDER, exist_ok=True)

    app.register_blueprint(create_user_bp(db_instance))
    app.register_blueprint(create_trip_bp(db_instance, bucket))
    app.register_blueprint(create_photo_bp(db_instance, bucket))
    app.register_blueprint(create_social_bp(db_instance))
    app.register_blueprint(create_feed_bp(db_instance))

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.route('/')
    def home():
        return 'Server is working!'

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True)
