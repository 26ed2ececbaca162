import asyncio
from typing import Dict, List, Optional

import pytest

from wanderlust.models.trip_models import DestinationInfo, EstimatedBudget, Trip
from wanderlust.services import insights_cache
from wanderlust.services.destination_service import DestinationLookup
from wanderlust.services.session_controller import SessionController
from wanderlust.services.trip_store import TripStore
from wanderlust.utils.errors import DestinationLookupError, TripStorageError
from wanderlust.utils.trip_storage import JsonFileTripStorage, TripStorage


def make_destination(name: str = "Kyoto", country: str = "Japan") -> DestinationInfo:
    return DestinationInfo(
        name=name,
        country=country,
        description=f"{name} is worth the trip.",
        popular_attractions=("Fushimi Inari", "Kinkaku-ji", "Arashiyama"),
        estimated_budget=EstimatedBudget(low=80, high=250, currency="USD"),
        weather_info="Mild springs, humid summers.",
        suggested_activities=("Tea ceremony", "Temple walk"),
        image_url=None,
    )


class FakeLookup(DestinationLookup):
    """Destination lookup that answers from a dict and can be held open."""

    def __init__(self, results: Optional[Dict[str, DestinationInfo]] = None,
                 error: Optional[Exception] = None, gate: Optional[asyncio.Event] = None):
        self.results = results or {}
        self.error = error
        self.gate = gate
        self.calls: List[str] = []
        self.loading_seen: List[bool] = []
        self.controller: Optional[SessionController] = None

    async def lookup(self, query: str) -> DestinationInfo:
        self.calls.append(query)
        if self.controller is not None:
            self.loading_seen.append(self.controller.is_loading)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if query in self.results:
            return self.results[query]
        return make_destination(name=query)


class MemoryTripStorage(TripStorage):
    """Keeps the serialized document in memory; can be told to fail saves."""

    key = "wanderlust_trips"

    def __init__(self, fail_saves: bool = False):
        self.fail_saves = fail_saves
        self.saved: List[List[Trip]] = []

    def load(self) -> List[Trip]:
        return [trip.model_copy(deep=True) for trip in self.saved[-1]] if self.saved else []

    def save(self, trips: List[Trip]) -> None:
        if self.fail_saves:
            raise TripStorageError("disk full")
        self.saved.append([trip.model_copy(deep=True) for trip in trips])


@pytest.fixture(autouse=True)
def clear_destination_cache():
    insights_cache.clear_cache()
    yield
    insights_cache.clear_cache()


@pytest.fixture
def kyoto() -> DestinationInfo:
    return make_destination()


@pytest.fixture
def file_storage(tmp_path) -> JsonFileTripStorage:
    return JsonFileTripStorage(str(tmp_path), key="wanderlust_trips")


@pytest.fixture
def store(file_storage) -> TripStore:
    return TripStore.load(file_storage)


@pytest.fixture
def lookup() -> FakeLookup:
    return FakeLookup()


@pytest.fixture
def controller(store, lookup) -> SessionController:
    session = SessionController(store, lookup)
    lookup.controller = session
    return session


@pytest.fixture
def failing_lookup() -> FakeLookup:
    return FakeLookup(error=DestinationLookupError("Atlantis", "no matching destination"))
