from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Literal, Optional, Union
from enum import Enum

from wanderlust.models.trip_models import DestinationInfo


class ViewName(str, Enum):
    LANDING = "landing"
    EXPLORER = "explorer"
    PLANNER = "planner"
    MY_TRIPS = "my-trips"


class Screen(BaseModel):
    model_config = ConfigDict(frozen=True)


class LandingView(Screen):
    view: Literal["landing"] = "landing"


class ExplorerView(Screen):
    view: Literal["explorer"] = "explorer"
    destination: DestinationInfo


class PlannerView(Screen):
    view: Literal["planner"] = "planner"
    trip_id: str = Field(..., min_length=1)


class MyTripsView(Screen):
    view: Literal["my-trips"] = "my-trips"


# Each screen carries exactly the context it needs to render
View = Annotated[
    Union[LandingView, ExplorerView, PlannerView, MyTripsView],
    Field(discriminator="view"),
]


class Notice(BaseModel):
    """User-visible message raised by a failed action"""
    level: Literal["error", "warning"] = "error"
    message: str


class SessionSnapshot(BaseModel):
    current: View
    is_loading: bool = False
    search_query: str = ""
    focused_trip_id: Optional[str] = None
    notice: Optional[Notice] = None
    trip_count: int = 0


class SearchRequest(BaseModel):
    query: str = Field(..., max_length=200)
