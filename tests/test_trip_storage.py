import json
from datetime import date
from unittest.mock import MagicMock

import pytest

from wanderlust.models.trip_models import (
    Activity, DayPlan, Expense, ExpenseCategory, Hotel, Transport, Trip,
)
from wanderlust.utils.errors import TripStorageError
from wanderlust.utils.trip_storage import FirestoreTripStorage, JsonFileTripStorage, dump_trips

from conftest import make_destination

# Document as written by the browser version of the app
LEGACY_DOCUMENT = [
    {
        "id": "k3j2h1g0f",
        "destination": "Kyoto",
        "country": "Japan",
        "startDate": "2024-05-01",
        "endDate": "2024-05-08",
        "itinerary": [
            {
                "day": 1,
                "date": "2024-05-01",
                "activities": [
                    {"id": "a1", "time": "09:00", "description": "Fushimi Inari", "location": "Fushimi", "cost": 0}
                ]
            }
        ],
        "expenses": [
            {"id": "e1", "category": "Food", "amount": 42.5, "description": "Ramen"}
        ],
        "transport": {"type": "Train", "details": "JR Pass"},
        "notes": "",
        "aiInsights": {
            "name": "Kyoto",
            "country": "Japan",
            "description": "Temples and gardens.",
            "popularAttractions": ["Fushimi Inari", "Kinkaku-ji"],
            "estimatedBudget": {"low": 80, "high": 250, "currency": "USD"},
            "weatherInfo": "Mild springs.",
            "suggestedActivities": ["Tea ceremony"]
        }
    }
]


@pytest.fixture
def sample_trips():
    kyoto = Trip(
        id="t1",
        destination="Kyoto",
        country="Japan",
        start_date=date(2024, 5, 1),
        end_date=date(2024, 5, 8),
        itinerary=[
            DayPlan(day=1, date=date(2024, 5, 1), activities=[
                Activity(id="a1", time="09:00", description="Fushimi Inari", cost=0),
                Activity(id="a2", time="13:00", description="Nishiki Market", location="Nakagyo"),
            ]),
            DayPlan(day=2, date=date(2024, 5, 2)),
        ],
        expenses=[Expense(id="e1", category=ExpenseCategory.ACCOMMODATION, amount=320, description="Ryokan")],
        hotel=Hotel(name="Hoshinoya", address="Arashiyama"),
        transport=Transport(type="Train", details="Shinkansen from Tokyo"),
        notes="Cash for temples",
        ai_insights=make_destination(),
    )
    lisbon = Trip(
        id="t2",
        destination="Lisbon",
        country="Portugal",
        start_date=date(2024, 9, 10),
        end_date=date(2024, 9, 17),
    )
    return [kyoto, lisbon]


def test_round_trip(file_storage, sample_trips):
    file_storage.save(sample_trips)
    assert file_storage.load() == sample_trips


def test_empty_collection_round_trip(file_storage):
    file_storage.save([])
    assert file_storage.load() == []


def test_document_uses_fixed_key_and_camel_case(tmp_path, file_storage, sample_trips):
    file_storage.save(sample_trips)

    path = tmp_path / "wanderlust_trips.json"
    document = json.loads(path.read_text(encoding="utf-8"))
    assert isinstance(document, list)
    assert document[0]["startDate"] == "2024-05-01"
    assert document[0]["aiInsights"]["popularAttractions"] == ["Fushimi Inari", "Kinkaku-ji", "Arashiyama"]
    assert document[0]["hotel"]["checkIn"] == ""
    assert "start_date" not in document[0]


def test_missing_document_loads_empty(file_storage):
    assert file_storage.load() == []


def test_corrupt_document_loads_empty(tmp_path, file_storage):
    (tmp_path / "wanderlust_trips.json").write_text("{not json", encoding="utf-8")
    assert file_storage.load() == []


def test_wrong_shape_loads_empty(tmp_path, file_storage):
    (tmp_path / "wanderlust_trips.json").write_text(json.dumps({"trips": "nope"}), encoding="utf-8")
    assert file_storage.load() == []

    (tmp_path / "wanderlust_trips.json").write_text(json.dumps([{"id": "t1"}]), encoding="utf-8")
    assert file_storage.load() == []


def test_legacy_document_loads(tmp_path, file_storage):
    (tmp_path / "wanderlust_trips.json").write_text(json.dumps(LEGACY_DOCUMENT), encoding="utf-8")

    trips = file_storage.load()
    assert len(trips) == 1
    trip = trips[0]
    assert trip.id == "k3j2h1g0f"
    assert trip.start_date == date(2024, 5, 1)
    assert trip.itinerary[0].activities[0].location == "Fushimi"
    assert trip.expenses[0].category == ExpenseCategory.FOOD
    assert trip.ai_insights.popular_attractions == ("Fushimi Inari", "Kinkaku-ji")
    assert trip.ai_insights.image_url is None
    assert dump_trips(trips)[0]["aiInsights"]["estimatedBudget"] == {"low": 80.0, "high": 250.0, "currency": "USD"}


def test_save_failure_raises_storage_error(tmp_path, sample_trips):
    blocker = tmp_path / "blocked"
    blocker.write_text("a file where a directory should be", encoding="utf-8")
    storage = JsonFileTripStorage(str(blocker / "data"))

    with pytest.raises(TripStorageError):
        storage.save(sample_trips)


def test_save_leaves_no_temp_files(tmp_path, file_storage, sample_trips):
    file_storage.save(sample_trips)
    file_storage.save(sample_trips[:1])
    assert sorted(p.name for p in tmp_path.iterdir()) == ["wanderlust_trips.json"]


def _firestore_client():
    client = MagicMock()
    document = client.collection.return_value.document.return_value
    stored = {}

    def _set(payload):
        stored["payload"] = payload

    def _get():
        snap = MagicMock()
        snap.exists = "payload" in stored
        snap.to_dict.return_value = stored.get("payload")
        return snap

    document.set.side_effect = _set
    document.get.side_effect = _get
    return client, document


def test_firestore_round_trip(sample_trips):
    client, document = _firestore_client()
    storage = FirestoreTripStorage(client=client, collection="wanderlust", key="wanderlust_trips")

    assert storage.load() == []
    storage.save(sample_trips)

    client.collection.assert_called_with("wanderlust")
    client.collection.return_value.document.assert_called_with("wanderlust_trips")
    payload = document.set.call_args.args[0]
    assert payload["trips"][0]["destination"] == "Kyoto"
    assert "updated_at" in payload
    assert storage.load() == sample_trips


def test_firestore_save_failure_raises_storage_error(sample_trips):
    client, document = _firestore_client()
    document.set.side_effect = RuntimeError("quota exceeded")
    storage = FirestoreTripStorage(client=client)

    with pytest.raises(TripStorageError):
        storage.save(sample_trips)


def test_firestore_load_failure_degrades_to_empty():
    client, document = _firestore_client()
    document.get.side_effect = RuntimeError("unavailable")
    storage = FirestoreTripStorage(client=client)

    assert storage.load() == []
