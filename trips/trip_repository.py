# trips/trip_repository.py
import logging
import uuid
from dataclasses import replace
from firebase_admin import firestore
from travel.firestore_paths import trips_col, chunked
from travel.models import Trip

logger = logging.getLogger(__name__)


class ActiveTripExistsError(Exception):
    """Raised when an operation would leave a user with two active trips."""

    def __init__(self, active_trip):
        super().__init__(f"User {active_trip.user_id} already has active trip {active_trip.id}")
        self.active_trip = active_trip


class TripRepository:
    """
    Trips live in the top-level `trips` collection keyed by trip id.

    A user has at most one trip with active=True. start_new_trip and
    reactivate_trip check for another active trip before writing; callers
    switching trips deactivate the current one first (see TripManager).
    """

    def __init__(self, db_instance):
        self.db = db_instance

    def save_trip(self, trip):
        trips_col(self.db).document(trip.id).set(trip.to_dict())

    def start_new_trip(self, user_id, name, start_date):
        current = self.get_active_trip(user_id)
        if current:
            raise ActiveTripExistsError(current)

        trip = Trip(
            id=str(uuid.uuid4()),
            user_id=user_id,
            name=name,
            start_date=start_date,
            end_date="",
            active=True,
            photo_count=0,
        )
        self.save_trip(trip)
        logger.info(f"Started trip {trip.id} '{name}' for user {user_id}")
        return trip

    def get_active_trip(self, user_id):
        try:
            docs = (
                trips_col(self.db)
                .where('userId', '==', user_id)
                .where('active', '==', True)
                .stream()
            )
            trips = [Trip.from_dict(doc.id, doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error(f"Error fetching active trip for {user_id}: {e}")
            return None

        if len(trips) > 1:
            logger.warning(f"User {user_id} has {len(trips)} active trips: {[t.id for t in trips]}")
        return trips[0] if trips else None

    def get_trip_by_id(self, trip_id):
        try:
            doc = trips_col(self.db).document(trip_id).get()
            if not doc.exists:
                return None
            return Trip.from_dict(doc.id, doc.to_dict())
        except Exception as e:
            logger.error(f"Error fetching trip {trip_id}: {e}")
            return None

    def get_all_trips_for_user(self, user_id):
        try:
            docs = trips_col(self.db).where('userId', '==', user_id).stream()
            return [Trip.from_dict(doc.id, doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error(f"Error fetching trips for {user_id}: {e}")
            return []

    def get_completed_trips(self, user_id):
        """Ended trips that have at least one photo."""
        try:
            docs = (
                trips_col(self.db)
                .where('userId', '==', user_id)
                .where('active', '==', False)
                .stream()
            )
            trips = [Trip.from_dict(doc.id, doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error(f"Error fetching completed trips for {user_id}: {e}")
            return []
        return [t for t in trips if t.photo_count > 0]

    def get_completed_trips_for_users(self, user_ids):
        """Completed trips with photos for several users, queried in batches of 10."""
        if not user_ids:
            return []

        all_trips = []
        try:
            for batch in chunked(list(user_ids)):
                docs = (
                    trips_col(self.db)
                    .where('userId', 'in', batch)
                    .where('active', '==', False)
                    .stream()
                )
                all_trips.extend(Trip.from_dict(doc.id, doc.to_dict()) for doc in docs)
        except Exception as e:
            logger.error(f"Error fetching completed trips for {len(user_ids)} users: {e}")
            return []
        return [t for t in all_trips if t.photo_count > 0]

    def deactivate_trip(self, trip_id, end_date):
        trips_col(self.db).document(trip_id).update({
            'active': False,
            'endDate': end_date,
        })
        logger.info(f"Deactivated trip {trip_id} (endDate={end_date})")

    def end_trip(self, trip_id, end_date):
        self.deactivate_trip(trip_id, end_date)

    def reactivate_trip(self, trip_id):
        trip = self.get_trip_by_id(trip_id)
        if trip is None:
            raise LookupError(f"Trip {trip_id} not found")

        current = self.get_active_trip(trip.user_id)
        if current and current.id != trip_id:
            raise ActiveTripExistsError(current)

        trips_col(self.db).document(trip_id).update({
            'active': True,
            'endDate': "",
        })
        logger.info(f"Reactivated trip {trip_id}")
        return replace(trip, active=True, end_date="")

    def increment_photo_count(self, trip_id):
        trips_col(self.db).document(trip_id).update({'photoCount': firestore.Increment(1)})

    def delete_trip(self, trip_id):
        # Callers only delete trips without photos
        trips_col(self.db).document(trip_id).delete()
        logger.info(f"Deleted trip {trip_id}")
