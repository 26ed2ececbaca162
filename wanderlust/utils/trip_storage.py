import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from pydantic import TypeAdapter, ValidationError

from wanderlust.models.trip_models import Trip
from wanderlust.utils.config import Settings, get_settings
from wanderlust.utils.errors import TripStorageError

_trips_adapter = TypeAdapter(List[Trip])


def dump_trips(trips: List[Trip]) -> List[Any]:
    """Serialize trips into the JSON-ready document layout (camelCase keys)."""
    return _trips_adapter.dump_python(trips, mode="json", by_alias=True)


def parse_trips(payload: Any) -> List[Trip]:
    return _trips_adapter.validate_python(payload)


class TripStorage:
    """Read/write contract for the saved trips document.

    The whole collection is stored as one document under a fixed key.
    `load` never raises: missing or unreadable data yields an empty list.
    `save` raises TripStorageError when the write did not happen.
    """

    key: str

    def load(self) -> List[Trip]:
        raise NotImplementedError

    def save(self, trips: List[Trip]) -> None:
        raise NotImplementedError


class JsonFileTripStorage(TripStorage):
    """Trips document kept as `<data_dir>/<key>.json` on local disk."""

    def __init__(self, data_dir: str, key: str = "wanderlust_trips"):
        self.logger = logging.getLogger(__name__)
        self.key = key
        self.path = Path(data_dir) / f"{key}.json"

    def load(self) -> List[Trip]:
        if not self.path.exists():
            self.logger.info(f"No saved trips at {self.path}; starting empty")
            return []
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            trips = parse_trips(payload)
            self.logger.info(f"Loaded {len(trips)} trips from {self.path}")
            return trips
        except (OSError, ValueError, ValidationError) as e:
            self.logger.warning(
                "Saved trips unreadable; starting empty",
                extra={"path": str(self.path), "error": str(e)}
            )
            return []

    def save(self, trips: List[Trip]) -> None:
        document = json.dumps(dump_trips(trips), ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write a sibling temp file and swap it in so readers never see half a document
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(document)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            self.logger.error(f"Saving trips to {self.path} failed: {e}")
            raise TripStorageError(f"Could not save trips to {self.path}: {e}") from e
        self.logger.debug(f"Saved {len(trips)} trips to {self.path}")


class FirestoreTripStorage(TripStorage):
    """Trips document kept as a single Firestore document `<collection>/<key>`."""

    def __init__(self, client: Any = None, collection: str = "wanderlust", key: str = "wanderlust_trips",
                 settings: Optional[Settings] = None):
        self.logger = logging.getLogger(__name__)
        self.key = key
        self.collection_name = collection
        self.client = client if client is not None else self._build_client(settings or get_settings())

    def _build_client(self, settings: Settings):
        from google.cloud import firestore
        from google.oauth2 import service_account

        project_id = settings.FIRESTORE_PROJECT_ID or settings.GOOGLE_CLOUD_PROJECT
        try:
            credentials = None
            if settings.FIRESTORE_CREDENTIALS:
                credentials = service_account.Credentials.from_service_account_file(
                    settings.FIRESTORE_CREDENTIALS
                )
            database = settings.FIRESTORE_DATABASE_ID or None  # default DB if None
            client = firestore.Client(project=project_id, credentials=credentials, database=database)
            self.logger.info("Initialized Firestore client", extra={"project": project_id, "collection": self.collection_name, "database": database or "(default)"})
            return client
        except Exception as e:
            self.logger.exception("Failed to initialize Firestore client")
            raise TripStorageError(f"Firestore unavailable: {e}") from e

    def _document(self):
        return self.client.collection(self.collection_name).document(self.key)

    def load(self) -> List[Trip]:
        try:
            snap = self._document().get()
            if not snap.exists:
                return []
            data = snap.to_dict() or {}
            trips = parse_trips(data.get("trips", []))
            self.logger.info(f"Loaded {len(trips)} trips from Firestore document {self.key}")
            return trips
        except ValidationError as e:
            self.logger.warning(f"Firestore trips document {self.key} is corrupt; starting empty: {e}")
            return []
        except Exception as e:
            self.logger.warning(f"Firestore load failed for {self.key}; starting empty: {e}")
            return []

    def save(self, trips: List[Trip]) -> None:
        try:
            self._document().set({
                "trips": dump_trips(trips),
                "updated_at": datetime.utcnow().isoformat(),
            })
        except Exception as e:
            self.logger.error(f"Firestore save failed for {self.key}: {e}")
            raise TripStorageError(f"Could not save trips to Firestore: {e}") from e
        self.logger.debug(f"Saved {len(trips)} trips to Firestore document {self.key}")


def build_trip_storage(settings: Optional[Settings] = None) -> TripStorage:
    settings = settings or get_settings()
    if settings.STORAGE_BACKEND == "firestore":
        return FirestoreTripStorage(
            collection=settings.FIRESTORE_COLLECTION,
            key=settings.TRIPS_STORAGE_KEY,
            settings=settings,
        )
    return JsonFileTripStorage(settings.DATA_DIR, key=settings.TRIPS_STORAGE_KEY)
