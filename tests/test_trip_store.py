from datetime import date, timedelta

import pytest

from wanderlust.models.trip_models import Activity, DayPlan, Expense, ExpenseCategory, Hotel
from wanderlust.services.trip_store import TripStore
from wanderlust.utils.errors import TripStorageError
from wanderlust.utils.trip_storage import JsonFileTripStorage

from conftest import MemoryTripStorage, make_destination


def test_create_defaults(store, kyoto):
    """New trips start today, last a week and have nothing planned"""
    trip = store.create(kyoto, today=date(2024, 6, 15))

    assert trip.destination == "Kyoto"
    assert trip.country == "Japan"
    assert trip.start_date == date(2024, 6, 15)
    assert trip.end_date == date(2024, 6, 22)
    assert trip.itinerary == []
    assert trip.expenses == []
    assert trip.notes == ""
    assert trip.hotel is None
    assert trip.transport is None
    assert trip.ai_insights == kyoto


def test_create_uses_today_by_default(store, kyoto):
    trip = store.create(kyoto)
    assert trip.start_date == date.today()
    assert trip.end_date - trip.start_date == timedelta(days=7)


def test_create_ids_are_unique(store):
    ids = {store.create(make_destination(f"City {i}")).id for i in range(200)}
    assert len(ids) == 200
    assert len(store) == 200


def test_list_keeps_insertion_order(store):
    names = ["Lisbon", "Oslo", "Cusco", "Hanoi"]
    for name in names:
        store.create(make_destination(name))
    assert [trip.destination for trip in store.list()] == names


def test_update_then_get_returns_equal_trip(store, kyoto):
    trip = store.create(kyoto)
    trip.notes = "Book the ryokan early"
    trip.itinerary.append(DayPlan(day=1, date=trip.start_date, activities=[
        Activity(id="a1", time="09:00", description="Fushimi Inari", location="Fushimi", cost=0),
    ]))
    trip.expenses.append(Expense(id="e1", category=ExpenseCategory.FOOD, amount=12.5, description="Ramen"))
    trip.hotel = Hotel(name="Hoshinoya", address="Arashiyama", check_in="15:00", check_out="11:00")

    assert store.update(trip) is True
    assert store.get(trip.id) == trip


def test_update_unknown_trip_is_reported(store, kyoto):
    stray = store.create(kyoto)
    store.delete(stray.id)

    assert store.update(stray) is False
    assert store.get(stray.id) is None
    assert len(store) == 0


def test_returned_trips_are_copies(store, kyoto):
    trip = store.create(kyoto)
    trip.notes = "edited but not submitted"
    fetched = store.get(trip.id)
    fetched.expenses.append(Expense(id="e1", category="Other", amount=1, description="x"))

    assert store.get(trip.id).notes == ""
    assert store.get(trip.id).expenses == []


def test_delete_removes_only_that_trip(store):
    first = store.create(make_destination("Kyoto"))
    second = store.create(make_destination("Osaka"))

    assert store.delete(first.id) is True
    assert store.get(first.id) is None
    assert [trip.id for trip in store.list()] == [second.id]
    assert len(store.list()) == 1


def test_delete_unknown_trip(store):
    assert store.delete("missing") is False


def test_every_mutation_is_written_through(tmp_path, kyoto):
    storage = JsonFileTripStorage(str(tmp_path))
    store = TripStore.load(storage)

    trip = store.create(kyoto)
    assert JsonFileTripStorage(str(tmp_path)).load() == store.list()

    trip.notes = "Pack an umbrella"
    store.update(trip)
    assert JsonFileTripStorage(str(tmp_path)).load() == store.list()

    store.create(make_destination("Nara"))
    store.delete(trip.id)
    assert JsonFileTripStorage(str(tmp_path)).load() == store.list()


def test_store_reloads_saved_trips(tmp_path, kyoto):
    storage = JsonFileTripStorage(str(tmp_path))
    original = TripStore.load(storage)
    original.create(kyoto)
    original.create(make_destination("Nara"))

    reloaded = TripStore.load(JsonFileTripStorage(str(tmp_path)))
    assert reloaded.list() == original.list()


def test_not_found_mutations_do_not_write(kyoto):
    storage = MemoryTripStorage()
    store = TripStore(storage)
    trip = store.create(kyoto)
    writes = len(storage.saved)

    store.delete("missing")
    store.update(trip.model_copy(update={"id": "missing"}))
    assert len(storage.saved) == writes


def test_save_failure_keeps_in_memory_state(kyoto):
    store = TripStore(MemoryTripStorage(fail_saves=True))

    with pytest.raises(TripStorageError):
        store.create(kyoto)
    assert len(store) == 1
    assert store.list()[0].destination == "Kyoto"


def test_duplicate_ids_in_saved_data_keep_first(kyoto):
    storage = MemoryTripStorage()
    seed = TripStore(storage)
    trip = seed.create(kyoto)
    duplicate = trip.model_copy(update={"notes": "second copy"})

    store = TripStore(MemoryTripStorage(), [trip, duplicate])
    assert len(store) == 1
    assert store.get(trip.id).notes == ""
