import logging
import uuid
from datetime import date, timedelta
from typing import Dict, List, Optional

from wanderlust.models.trip_models import DestinationInfo, Trip
from wanderlust.utils.trip_storage import TripStorage

DEFAULT_TRIP_LENGTH_DAYS = 7


class TripStore:
    """In-memory trip collection with write-through persistence.

    Trips are kept in insertion order. Callers only ever get copies: edit the
    copy, then hand it back through `update`. Every successful mutation
    rewrites the whole document through the storage adapter; if that write
    fails, TripStorageError propagates and the in-memory change stays.
    """

    def __init__(self, storage: TripStorage, trips: Optional[List[Trip]] = None):
        self.storage = storage
        self.logger = logging.getLogger(__name__)
        self._trips: Dict[str, Trip] = {}
        for trip in trips or []:
            if trip.id in self._trips:
                self.logger.warning(f"Duplicate trip id {trip.id} in saved trips; keeping the first")
                continue
            self._trips[trip.id] = trip.model_copy(deep=True)

    @classmethod
    def load(cls, storage: TripStorage) -> "TripStore":
        return cls(storage, storage.load())

    def __len__(self) -> int:
        return len(self._trips)

    def __contains__(self, trip_id: object) -> bool:
        return trip_id in self._trips

    def _new_id(self) -> str:
        trip_id = uuid.uuid4().hex
        while trip_id in self._trips:
            trip_id = uuid.uuid4().hex
        return trip_id

    def _persist(self) -> None:
        self.storage.save(list(self._trips.values()))

    def create(self, info: DestinationInfo, today: Optional[date] = None) -> Trip:
        """Start a new trip for a looked-up destination, one week from today."""
        start = today or date.today()
        trip = Trip(
            id=self._new_id(),
            destination=info.name,
            country=info.country,
            start_date=start,
            end_date=start + timedelta(days=DEFAULT_TRIP_LENGTH_DAYS),
            itinerary=[],
            expenses=[],
            notes="",
            ai_insights=info.model_copy(deep=True),
        )
        self._trips[trip.id] = trip
        self.logger.info(f"Created trip {trip.id} to {trip.destination}, {trip.country}")
        self._persist()
        return trip.model_copy(deep=True)

    def update(self, trip: Trip) -> bool:
        if trip.id not in self._trips:
            self.logger.warning(f"Trip {trip.id} not found for update")
            return False
        self._trips[trip.id] = trip.model_copy(deep=True)
        self.logger.info(f"Updated trip {trip.id}")
        self._persist()
        return True

    def delete(self, trip_id: str) -> bool:
        """Remove a trip. Confirmation is the caller's job; this always deletes."""
        if self._trips.pop(trip_id, None) is None:
            self.logger.warning(f"Trip {trip_id} not found for deletion")
            return False
        self.logger.info(f"Deleted trip {trip_id}")
        self._persist()
        return True

    def get(self, trip_id: str) -> Optional[Trip]:
        trip = self._trips.get(trip_id)
        return trip.model_copy(deep=True) if trip else None

    def list(self) -> List[Trip]:
        return [trip.model_copy(deep=True) for trip in self._trips.values()]
