# trips/trip_manager.py
import logging
from dataclasses import dataclass
from typing import Optional
from shared_globals import today_trip_date, parse_trip_date
from travel.models import Trip

logger = logging.getLogger(__name__)

NO_TRIP = "none"
NEW_TRIP = "new"

MENU_LIMIT = 7


@dataclass
class MenuEntry:
    kind: str                       # "none", "new" or "trip"
    trip: Optional[Trip] = None
    is_active: bool = False


@dataclass
class TripSelection:
    """
    Result of a trip menu selection.

    outcome is one of:
      confirm_discard - the active trip is empty; nothing was changed and the
                        selection must be resent with discard_confirmed
      cleared         - no trip is active anymore
      started         - a new trip was created and is active
      switched        - an existing trip was reactivated
      unchanged       - the selected trip was already the active one
    """
    outcome: str
    active_trip: Optional[Trip] = None
    discarded_trip: Optional[Trip] = None
    empty_trip: Optional[Trip] = None


class TripManager:
    """
    Trip lifecycle for one user: which trip (if any) is active, switching
    between trips, and discarding trips that ended up with no photos.
    """

    def __init__(self, trip_repository, photo_repository):
        self.trips = trip_repository
        self.photos = photo_repository

    def check_active_trip(self, user_id):
        return self.trips.get_active_trip(user_id)

    def menu_items(self, user_id):
        """
        Entries for the trip picker: "None", "New Trip", then the user's
        trips that are active or have photos (active first, newest start
        date next). The whole list is capped at MENU_LIMIT entries.
        """
        all_trips = self.trips.get_all_trips_for_user(user_id)
        current = self.trips.get_active_trip(user_id)
        current_id = current.id if current else None

        shown = [t for t in all_trips if t.active or t.photo_count > 0]
        shown.sort(key=lambda t: (t.active, parse_trip_date(t.start_date)), reverse=True)

        entries = [MenuEntry(kind=NO_TRIP, is_active=current is None), MenuEntry(kind=NEW_TRIP)]
        entries += [MenuEntry(kind="trip", trip=t, is_active=t.id == current_id) for t in shown]
        return entries[:MENU_LIMIT]

    def select_trip(self, user_id, selection, new_trip_name=None, discard_confirmed=False):
        """
        Applies a menu selection: NO_TRIP, NEW_TRIP or an existing trip id.

        Leaving an empty active trip discards it, but only once the caller
        confirms; until then the outcome is confirm_discard and nothing is
        written.
        """
        name = None
        if selection == NEW_TRIP:
            name = (new_trip_name or "").strip()
            if not name:
                raise ValueError("Please enter trip name")

        selected = None
        if selection not in (NO_TRIP, NEW_TRIP):
            selected = self.trips.get_trip_by_id(selection)
            if selected is None or selected.user_id != user_id:
                raise LookupError(f"Trip {selection} not found")

        current = self.trips.get_active_trip(user_id)
        discarded = None

        if current and current.photo_count == 0:
            if selected is not None and selected.id == current.id:
                return TripSelection(outcome="unchanged", active_trip=current)
            if not discard_confirmed:
                return TripSelection(outcome="confirm_discard", active_trip=current, empty_trip=current)

            self.trips.delete_trip(current.id)
            logger.info(f"Discarded empty trip {current.id} for user {user_id}")
            discarded = current
            current = None

        result = self._apply_selection(user_id, selection, selected, current, name)
        result.discarded_trip = discarded
        return result

    def _apply_selection(self, user_id, selection, selected, current, name):
        if selection == NO_TRIP:
            if current:
                self.deactivate_with_end_date(current)
            return TripSelection(outcome="cleared")

        if selection == NEW_TRIP:
            if current:
                self.deactivate_with_end_date(current)
            return TripSelection(outcome="started", active_trip=self.start_new_trip(user_id, name))

        if current and current.id == selected.id:
            return TripSelection(outcome="unchanged", active_trip=current)

        if current:
            self.deactivate_with_end_date(current)
        return TripSelection(outcome="switched", active_trip=self.trips.reactivate_trip(selected.id))

    def deactivate_with_end_date(self, trip):
        """Ends a trip on the date of its last photo, or its start date if it has none."""
        last_photo = self.photos.get_last_photo_for_trip(trip.id)
        end_date = last_photo.date if last_photo and last_photo.date else trip.start_date
        self.trips.deactivate_trip(trip.id, end_date)
        return end_date

    def start_new_trip(self, user_id, name):
        return self.trips.start_new_trip(user_id, name, today_trip_date())

    def end_trip(self, trip):
        """Ends a trip from the profile screen: empty trips are deleted, others end today."""
        if trip.photo_count == 0:
            self.trips.delete_trip(trip.id)
            return "deleted"
        self.trips.end_trip(trip.id, today_trip_date())
        return "ended"
