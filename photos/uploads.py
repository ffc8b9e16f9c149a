# photos/uploads.py
import logging
import os
import uuid
from werkzeug.utils import secure_filename
from shared_globals import UPLOAD_FOLDER, allowed_file
from utils.exif_utils import extract_gps

logger = logging.getLogger(__name__)


def save_upload(file):
    """Saves an incoming upload to UPLOAD_FOLDER under a unique name and returns the path."""
    if not file or not file.filename or not allowed_file(file.filename):
        raise ValueError("Invalid file or format. Allowed: png, jpg, jpeg")

    filename = secure_filename(file.filename)
    file_ext = filename.rsplit(".", 1)[1].lower()
    filepath = os.path.join(UPLOAD_FOLDER, f"{uuid.uuid4()}.{file_ext}")

    os.makedirs(UPLOAD_FOLDER, exist_ok=True)
    file.save(filepath)
    return filepath


def parse_coordinates(form):
    """
    Reads latitude/longitude from the form. Returns None when either is
    missing; raises ValueError when they are present but not valid numbers.
    """
    latitude = form.get("latitude")
    longitude = form.get("longitude")
    if latitude in (None, "") or longitude in (None, ""):
        return None

    lat, lng = float(latitude), float(longitude)
    if not -90 <= lat <= 90 or not -180 <= lng <= 180:
        raise ValueError("Coordinates out of range")
    return {"latitude": lat, "longitude": lng}


def coordinates_for_upload(form, filepath):
    """Coordinates sent by the device, falling back to the image's EXIF GPS."""
    coords = parse_coordinates(form)
    if coords:
        return coords

    try:
        coords = extract_gps(filepath)
    except Exception as e:
        logger.warning(f"Could not read EXIF from {filepath}: {e}")
        coords = None

    return coords or {"latitude": 0.0, "longitude": 0.0}
