"""
Screen navigation for a planning session.

The active screen is one of the `View` variants, each carrying exactly the
context it needs (the explorer holds its destination, the planner its trip
id), so an explorer without a destination or a planner without a trip
cannot be built. Whether a trip id still resolves is checked against the
trip store through the `trip_exists` callable on every planner entry.

Legal transitions:

    landing | explorer  -> explorer   show_destination(info)
    explorer            -> planner    start_planning(trip_id)
    my-trips            -> planner    select_trip(trip_id)
    any                 -> landing    go_home()
    any                 -> my-trips   go_my_trips()
"""
import logging
from typing import Callable, Optional

from wanderlust.models.trip_models import DestinationInfo
from wanderlust.models.view_models import (
    ExplorerView, LandingView, MyTripsView, PlannerView, View, ViewName,
)
from wanderlust.utils.errors import InvalidTransitionError

SEARCHABLE_VIEWS = (ViewName.LANDING, ViewName.EXPLORER)


class NavigationStateMachine:
    def __init__(self, trip_exists: Callable[[str], bool]):
        self.logger = logging.getLogger(__name__)
        self._trip_exists = trip_exists
        self._current: View = LandingView()
        self._focused_trip_id: Optional[str] = None

    @property
    def current(self) -> View:
        return self._current

    @property
    def view_name(self) -> ViewName:
        return ViewName(self._current.view)

    @property
    def focused_trip_id(self) -> Optional[str]:
        """Last trip opened in the planner; survives leaving the planner."""
        return self._focused_trip_id

    @property
    def selected_destination(self) -> Optional[DestinationInfo]:
        if isinstance(self._current, ExplorerView):
            return self._current.destination
        return None

    @property
    def can_search(self) -> bool:
        return self.view_name in SEARCHABLE_VIEWS

    def _move(self, target: View) -> None:
        self.logger.debug(f"Navigation {self._current.view} -> {target.view}")
        self._current = target

    def _require_trip(self, target: ViewName, trip_id: str) -> None:
        if not trip_id or not self._trip_exists(trip_id):
            raise InvalidTransitionError(self.view_name.value, target.value, f"trip {trip_id!r} does not exist")

    def show_destination(self, destination: DestinationInfo) -> None:
        if destination is None:
            raise InvalidTransitionError(self.view_name.value, ViewName.EXPLORER.value, "no destination selected")
        if not self.can_search:
            raise InvalidTransitionError(self.view_name.value, ViewName.EXPLORER.value)
        self._move(ExplorerView(destination=destination))

    def start_planning(self, trip_id: str) -> None:
        if self.view_name != ViewName.EXPLORER:
            raise InvalidTransitionError(self.view_name.value, ViewName.PLANNER.value, "planning starts from the explorer")
        self._require_trip(ViewName.PLANNER, trip_id)
        self._focused_trip_id = trip_id
        self._move(PlannerView(trip_id=trip_id))

    def select_trip(self, trip_id: str) -> None:
        if self.view_name != ViewName.MY_TRIPS:
            raise InvalidTransitionError(self.view_name.value, ViewName.PLANNER.value, "trips are opened from my-trips")
        self._require_trip(ViewName.PLANNER, trip_id)
        self._focused_trip_id = trip_id
        self._move(PlannerView(trip_id=trip_id))

    def go_home(self) -> None:
        self._move(LandingView())

    def go_my_trips(self) -> None:
        self._move(MyTripsView())

    def back(self) -> None:
        """Back button: explorer returns home, planner returns to the trip list."""
        if self.view_name == ViewName.EXPLORER:
            self.go_home()
        elif self.view_name == ViewName.PLANNER:
            self.go_my_trips()

    def clear_focus(self, trip_id: str) -> None:
        """Forget a trip that no longer exists."""
        if self._focused_trip_id == trip_id:
            self._focused_trip_id = None
        if isinstance(self._current, PlannerView) and self._current.trip_id == trip_id:
            self._move(MyTripsView())
