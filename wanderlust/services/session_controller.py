import asyncio
import logging
from typing import Optional

from wanderlust.models.trip_models import DestinationInfo, Trip
from wanderlust.models.view_models import Notice, SessionSnapshot, View, ViewName
from wanderlust.services.destination_service import DestinationLookup
from wanderlust.services.navigation import NavigationStateMachine
from wanderlust.services.trip_store import TripStore
from wanderlust.utils.errors import InvalidTransitionError, TripNotFoundError, TripStorageError

LOOKUP_FAILED_MESSAGE = "Error finding destination. Please try again."
SAVE_FAILED_MESSAGE = "Your trips could not be saved. Changes are kept for this session only."


def _running_task() -> Optional[asyncio.Task]:
    try:
        return asyncio.current_task()
    except RuntimeError:
        # no event loop running
        return None


class SessionController:
    """One user's planning session.

    Owns the trip store, the navigation state and the loading flag; nothing
    else mutates them. All methods run on one event loop. The destination
    lookup is the only await point, and every lookup carries a generation
    number: navigating, or starting another search, bumps the generation and
    cancels the pending lookup task, so a late result is dropped instead of
    dragging the user back to the explorer.
    """

    def __init__(self, store: TripStore, lookup: DestinationLookup):
        self.logger = logging.getLogger(__name__)
        self.store = store
        self.lookup = lookup
        self.navigation = NavigationStateMachine(trip_exists=lambda trip_id: trip_id in self.store)

        self._is_loading = False
        self._search_query = ""
        self._notice: Optional[Notice] = None
        self._generation = 0
        self._search_task: Optional[asyncio.Task] = None

    # -------------------------
    # Read-only state
    # -------------------------
    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def current_view(self) -> View:
        return self.navigation.current

    @property
    def selected_destination(self) -> Optional[DestinationInfo]:
        return self.navigation.selected_destination

    @property
    def focused_trip_id(self) -> Optional[str]:
        return self.navigation.focused_trip_id

    @property
    def notice(self) -> Optional[Notice]:
        return self._notice

    def active_trip(self) -> Optional[Trip]:
        """Trip shown by the planner, if the planner is open."""
        if self.navigation.view_name != ViewName.PLANNER:
            return None
        return self.store.get(self.navigation.current.trip_id)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            current=self.navigation.current,
            is_loading=self._is_loading,
            search_query=self._search_query,
            focused_trip_id=self.navigation.focused_trip_id,
            notice=self._notice,
            trip_count=len(self.store),
        )

    def dismiss_notice(self) -> None:
        self._notice = None

    # -------------------------
    # Destination search
    # -------------------------
    def _invalidate_pending_search(self, keep_current: bool = False) -> None:
        self._generation += 1
        self._is_loading = False
        task = self._search_task
        if task is None or (keep_current and task is _running_task()):
            return
        self._search_task = None
        if not task.done():
            task.cancel()

    async def search(self, query: str) -> bool:
        """Look up a destination and open it in the explorer.

        Returns True when the explorer now shows the result. Blank queries and
        searches from screens without a search box do nothing.
        """
        if not query or not query.strip():
            return False
        if not self.navigation.can_search:
            self.logger.warning(f"Search ignored on the {self.navigation.view_name.value} screen")
            return False

        self._invalidate_pending_search(keep_current=True)
        generation = self._generation
        self._search_query = query
        self._notice = None
        self._is_loading = True
        try:
            destination = await self.lookup.lookup(query.strip())
        except Exception as e:
            if generation != self._generation:
                self.logger.info(f"Dropping failed lookup for '{query}'; session moved on")
                return False
            self.logger.warning(f"Destination lookup failed for '{query}': {e}")
            self._notice = Notice(level="error", message=LOOKUP_FAILED_MESSAGE)
            return False
        finally:
            if generation == self._generation:
                self._is_loading = False

        if generation != self._generation:
            self.logger.info(f"Dropping stale lookup result for '{query}'")
            return False
        self.navigation.show_destination(destination)
        return True

    def submit_search(self, query: str) -> Optional[asyncio.Task]:
        """Run `search` in the background, superseding any search in flight.

        Must be called from a running event loop. Returns None for queries
        `search` would ignore anyway.
        """
        if not query or not query.strip() or not self.navigation.can_search:
            return None
        self._invalidate_pending_search()
        task = asyncio.get_running_loop().create_task(self.search(query))
        self._search_task = task
        return task

    # -------------------------
    # Trips
    # -------------------------
    def _persist_failed(self, error: TripStorageError) -> None:
        self.logger.error(f"Trip storage failed: {error}", exc_info=error)
        self._notice = Notice(level="warning", message=SAVE_FAILED_MESSAGE)

    def start_planning(self, info: Optional[DestinationInfo] = None) -> Trip:
        """Turn the explorer's destination into a new trip and open it."""
        info = info or self.navigation.selected_destination
        if info is None:
            raise ValueError("No destination selected to plan")
        if self.navigation.view_name != ViewName.EXPLORER:
            raise InvalidTransitionError(self.navigation.view_name.value, ViewName.PLANNER.value, "planning starts from the explorer")
        self._invalidate_pending_search()
        try:
            trip = self.store.create(info)
        except TripStorageError as e:
            self._persist_failed(e)
            trip = self.store.list()[-1]
        self.navigation.start_planning(trip.id)
        return trip

    def select_trip(self, trip_id: str) -> Trip:
        trip = self.store.get(trip_id)
        if trip is None:
            raise TripNotFoundError(trip_id)
        self.navigation.select_trip(trip_id)
        self._invalidate_pending_search()
        return trip

    def update_trip(self, trip: Trip) -> bool:
        try:
            return self.store.update(trip)
        except TripStorageError as e:
            self._persist_failed(e)
            return True

    def delete_trip(self, trip_id: str) -> bool:
        """Delete a trip the user already confirmed deleting."""
        try:
            deleted = self.store.delete(trip_id)
        except TripStorageError as e:
            self._persist_failed(e)
            deleted = True
        if deleted:
            self.navigation.clear_focus(trip_id)
        return deleted

    # -------------------------
    # Navigation
    # -------------------------
    def go_home(self) -> None:
        self._invalidate_pending_search()
        self.navigation.go_home()

    def go_my_trips(self) -> None:
        self._invalidate_pending_search()
        self.navigation.go_my_trips()

    def back(self) -> None:
        self._invalidate_pending_search()
        self.navigation.back()
