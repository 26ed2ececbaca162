from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import date
from typing import Dict, List, Optional, Tuple
from enum import Enum


class ExpenseCategory(str, Enum):
    FOOD = "Food"
    TRANSPORT = "Transport"
    ACCOMMODATION = "Accommodation"
    LEISURE = "Leisure"
    OTHER = "Other"


class TripDocumentModel(BaseModel):
    """Base for everything stored in the trips document.

    Attributes are snake_case in Python; the stored document keeps the
    camelCase keys (startDate, aiInsights, ...).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EstimatedBudget(TripDocumentModel):
    model_config = ConfigDict(frozen=True)

    low: float
    high: float
    currency: str = Field("USD", pattern=r"^[A-Za-z]{3}$")


class DestinationInfo(TripDocumentModel):
    """Result of a destination lookup. Immutable once built."""
    model_config = ConfigDict(frozen=True)

    name: str
    country: str
    description: str = ""
    popular_attractions: Tuple[str, ...] = ()
    estimated_budget: EstimatedBudget
    weather_info: str = ""
    suggested_activities: Tuple[str, ...] = ()
    image_url: Optional[str] = None


class Activity(TripDocumentModel):
    id: str
    time: str
    description: str
    location: Optional[str] = None
    cost: Optional[float] = None


class DayPlan(TripDocumentModel):
    day: int = Field(..., ge=1)
    date: date
    activities: List[Activity] = Field(default_factory=list)


class Expense(TripDocumentModel):
    id: str
    category: ExpenseCategory
    amount: float = Field(..., ge=0)
    description: str = ""


class Hotel(TripDocumentModel):
    name: str
    address: str = ""
    check_in: str = ""
    check_out: str = ""


class Transport(TripDocumentModel):
    type: str
    details: str = ""


class Trip(TripDocumentModel):
    id: str
    destination: str
    country: str
    start_date: date
    end_date: date

    itinerary: List[DayPlan] = Field(default_factory=list)
    expenses: List[Expense] = Field(default_factory=list)

    hotel: Optional[Hotel] = None
    transport: Optional[Transport] = None
    notes: str = ""

    # Snapshot of the lookup that created the trip; never refreshed
    ai_insights: Optional[DestinationInfo] = None

    @property
    def duration_days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.end_date - self.start_date).days + 1

    @property
    def total_expenses(self) -> float:
        return sum(expense.amount for expense in self.expenses)

    @property
    def planned_activity_cost(self) -> float:
        return sum(
            activity.cost or 0
            for day_plan in self.itinerary
            for activity in day_plan.activities
        )

    def expenses_by_category(self) -> Dict[ExpenseCategory, float]:
        totals = {category: 0.0 for category in ExpenseCategory}
        for expense in self.expenses:
            totals[expense.category] += expense.amount
        return totals
