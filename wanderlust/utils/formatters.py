from typing import Any, Dict
from datetime import date

from wanderlust.models.trip_models import Trip

class ResponseFormatter:
    """Format values for display in trip cards and summaries"""

    @staticmethod
    def format_currency(amount: float, currency: str = "USD") -> str:
        """Format currency amount with proper symbols"""
        currency_symbols = {
            'USD': '$',
            'EUR': '€',
            'GBP': '£',
            'JPY': '¥',
            'CAD': 'C$',
            'AUD': 'A$',
            'CHF': 'CHF',
            'CNY': '¥',
            'INR': '₹',
            'KRW': '₩',
            'SGD': 'S$',
            'HKD': 'HK$'
        }

        currency = (currency or "USD").upper()
        symbol = currency_symbols.get(currency, f"{currency} ")

        if currency in ['JPY', 'KRW']:
            # No decimal places for these currencies
            return f"{symbol}{amount:,.0f}"
        else:
            return f"{symbol}{amount:,.2f}"

    @staticmethod
    def format_date_range(start_date: date, end_date: date) -> str:
        """Format date range in a user-friendly way"""
        duration = (end_date - start_date).days

        if duration <= 0:
            return f"{start_date.strftime('%B %d, %Y')}"
        elif duration == 1:
            return f"{start_date.strftime('%B %d')} - {end_date.strftime('%B %d, %Y')}"
        else:
            return f"{start_date.strftime('%B %d')} - {end_date.strftime('%B %d, %Y')} ({duration} days)"

class TripFormatter:
    """Summaries for the saved-trips list"""

    @staticmethod
    def trip_currency(trip: Trip) -> str:
        if trip.ai_insights is not None:
            return trip.ai_insights.estimated_budget.currency
        return "USD"

    @staticmethod
    def format_expense_breakdown(trip: Trip) -> Dict[str, str]:
        currency = TripFormatter.trip_currency(trip)
        return {
            category.value: ResponseFormatter.format_currency(total, currency)
            for category, total in trip.expenses_by_category().items()
            if total
        }

    @staticmethod
    def format_trip_summary(trip: Trip) -> Dict[str, Any]:
        currency = TripFormatter.trip_currency(trip)
        return {
            'id': trip.id,
            'destination': trip.destination,
            'country': trip.country,
            'dates': ResponseFormatter.format_date_range(trip.start_date, trip.end_date),
            'duration_days': trip.duration_days,
            'planned_days': len(trip.itinerary),
            'total_spent': ResponseFormatter.format_currency(trip.total_expenses, currency),
            'expense_breakdown': TripFormatter.format_expense_breakdown(trip),
            'image_url': trip.ai_insights.image_url if trip.ai_insights else None,
        }
