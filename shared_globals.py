# shared_globals.py
import os
import datetime
from dotenv import load_dotenv
from dateutil import parser as date_parser

load_dotenv()

# --- Configuration (read from env) ---
FIREBASE_SERVICE_ACCOUNT_CONTENT = os.environ.get('FIREBASE_SERVICE_ACCOUNT_CONTENT')
FIREBASE_SERVICE_ACCOUNT_PATH = os.environ.get('FIREBASE_SERVICE_ACCOUNT_PATH', "credentials/serviceAccountKey.json")
FIREBASE_STORAGE_BUCKET = os.environ.get('FIREBASE_STORAGE_BUCKET')
FIREBASE_WEB_API_KEY = os.environ.get('FIREBASE_WEB_API_KEY')
FLASK_SECRET_KEY = os.environ.get('FLASK_SECRET_KEY', 'a_fallback_secret_key_for_dev_only')
UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', 'uploads')

# --- Date formats ---
TRIP_DATE_FORMAT = "%b %d, %Y"    # e.g. "Mar 04, 2025", shown on trip cards
PHOTO_DATE_FORMAT = "%Y-%m-%d"

# --- Helper Functions ---
ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg'}

def allowed_file(filename):
    """Checks if a file's extension is allowed."""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS

def today_trip_date():
    return datetime.date.today().strftime(TRIP_DATE_FORMAT)

def today_photo_date():
    return datetime.date.today().strftime(PHOTO_DATE_FORMAT)

def now_millis():
    return int(datetime.datetime.now(datetime.timezone.utc).timestamp() * 1000)

def parse_trip_date(value):
    """
    Parses a stored trip date into a datetime for sorting.
    End dates come either from the trip card format ("Mar 04, 2025") or from
    a photo's date ("2025-03-04"), so parsing is lenient.
    Returns datetime.min for empty or unparseable values.
    """
    if not value:
        return datetime.datetime.min
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError):
        return datetime.datetime.min
