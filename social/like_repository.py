# social/like_repository.py
import logging
from travel.firestore_paths import likes_col, like_id
from travel.models import Like

logger = logging.getLogger(__name__)


class LikeRepository:
    """
    One document per (photo, user) at /likes/{photoId}_{userId}; its
    existence means "liked". Counts are computed by query, there is no
    counter on the photo.
    """

    def __init__(self, db_instance):
        self.db = db_instance

    def toggle_like(self, photo_id, user_id):
        """Returns True if the photo is now liked, False if it was unliked."""
        doc_id = like_id(photo_id, user_id)
        doc_ref = likes_col(self.db).document(doc_id)

        if doc_ref.get().exists:
            doc_ref.delete()
            return False

        doc_ref.set(Like(id=doc_id, photo_id=photo_id, user_id=user_id).to_dict())
        return True

    def get_like_count(self, photo_id):
        try:
            return sum(1 for _ in likes_col(self.db).where('photoId', '==', photo_id).stream())
        except Exception as e:
            logger.error(f"Error counting likes for photo {photo_id}: {e}")
            return 0

    def has_user_liked(self, photo_id, user_id):
        try:
            return likes_col(self.db).document(like_id(photo_id, user_id)).get().exists
        except Exception as e:
            logger.error(f"Error checking like {photo_id} / {user_id}: {e}")
            return False

    def get_total_likes_for_trip(self, photo_ids):
        # One count query per photo
        return sum(self.get_like_count(photo_id) for photo_id in photo_ids)

    def get_likes_for_trips(self, trips, photo_repository):
        trip_likes = {}
        for trip in trips:
            photo_ids = [p.id for p in photo_repository.get_photos_for_trip(trip.id)]
            trip_likes[trip.id] = self.get_total_likes_for_trip(photo_ids)
        return trip_likes
