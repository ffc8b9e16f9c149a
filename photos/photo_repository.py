# photos/photo_repository.py
import logging
import os
import uuid
from dataclasses import replace
from urllib.parse import quote
from firebase_admin import firestore
from travel.firestore_paths import photos_col
from travel.models import Photo

logger = logging.getLogger(__name__)

DOWNLOAD_URL = "https://firebasestorage.googleapis.com/v0/b/{bucket}/o/{path}?alt=media&token={token}"


def storage_path(photo_id):
    return f"photos/{photo_id}.jpg"


class PhotoRepository:
    """
    Photo metadata in the `photos` collection, image bytes in Firebase Storage.

    Structure: /photos/{photo_id} -> {userId, tripId, imageUrl, latitude, ...}
               gs://<bucket>/photos/{photo_id}.jpg
    """

    def __init__(self, db_instance, bucket):
        self.db = db_instance
        self.bucket = bucket

    def upload_image(self, photo_id, local_path=None, file_obj=None, content_type="image/jpeg"):
        """Uploads the image blob and returns its download URL."""
        path = storage_path(photo_id)
        blob = self.bucket.blob(path)

        # Same token scheme the Firebase client SDKs use for download URLs
        token = str(uuid.uuid4())
        blob.metadata = {"firebaseStorageDownloadTokens": token}

        if file_obj is not None:
            blob.upload_from_file(file_obj, content_type=content_type)
        else:
            blob.upload_from_filename(local_path, content_type=content_type)

        return DOWNLOAD_URL.format(bucket=self.bucket.name, path=quote(path, safe=""), token=token)

    def save_photo(self, photo, local_path=None, file_obj=None):
        """
        Uploads the image, then writes the photo document with its URL.
        The local file is removed once the document is saved.
        """
        if not local_path and file_obj is None:
            raise ValueError("save_photo needs a local_path or a file object")

        image_url = self.upload_image(photo.id, local_path=local_path, file_obj=file_obj)
        saved = replace(photo, image_url=image_url, local_path="")
        photos_col(self.db).document(photo.id).set(saved.to_dict())
        logger.info(f"Photo {photo.id} saved for trip {photo.trip_id or '-'}")

        if local_path:
            try:
                os.remove(local_path)
            except OSError as e:
                logger.warning(f"Could not remove local file {local_path}: {e}")

        return saved

    def get_photo(self, photo_id):
        try:
            doc = photos_col(self.db).document(photo_id).get()
            if not doc.exists:
                return None
            return Photo.from_dict(doc.id, doc.to_dict())
        except Exception as e:
            logger.error(f"Error fetching photo {photo_id}: {e}")
            return None

    def get_photos_for_trip(self, trip_id):
        try:
            docs = photos_col(self.db).where('tripId', '==', trip_id).stream()
            return [Photo.from_dict(doc.id, doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error(f"Error fetching photos for trip {trip_id}: {e}")
            return []

    def get_all_photos(self):
        try:
            return [Photo.from_dict(doc.id, doc.to_dict()) for doc in photos_col(self.db).stream()]
        except Exception as e:
            logger.error(f"Error fetching photos: {e}")
            return []

    def get_last_photo_for_trip(self, trip_id):
        """Most recent photo of a trip by timestamp, or None."""
        try:
            docs = (
                photos_col(self.db)
                .where('tripId', '==', trip_id)
                .order_by('timestamp', direction=firestore.Query.DESCENDING)
                .limit(1)
                .stream()
            )
            for doc in docs:
                return Photo.from_dict(doc.id, doc.to_dict())
            return None
        except Exception as e:
            logger.error(f"Error fetching last photo for trip {trip_id}: {e}")
            return None
