"""
Exceptions raised by the Wanderlust services.

The HTTP layer translates these into status codes; everything below it
raises and lets the caller decide what the user sees.
"""


class WanderlustError(Exception):
    """Base class for all application errors"""


class DestinationLookupError(WanderlustError):
    """The destination lookup could not resolve a query"""

    def __init__(self, query: str, reason: str = "lookup failed"):
        self.query = query
        self.reason = reason
        super().__init__(f"Could not look up destination '{query}': {reason}")


class TripNotFoundError(WanderlustError):
    def __init__(self, trip_id: str):
        self.trip_id = trip_id
        super().__init__(f"Trip {trip_id} not found")


class TripStorageError(WanderlustError):
    """Loading or saving the trips document failed"""


class InvalidTransitionError(WanderlustError):
    def __init__(self, current: str, target: str, reason: str = ""):
        self.current = current
        self.target = target
        message = f"Cannot navigate from '{current}' to '{target}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
