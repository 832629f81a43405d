# Role: Closed vocabularies shared by the routing engine: every widget kind the chat can surface and every
# interaction tag recorded back into Interaction History. Values are the wire strings used by the UI.

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class WidgetKind(str, Enum):
    # Core trip data
    CITY_SELECTOR = "citySelector"
    DATE_PICKER = "datePicker"
    DATE_RANGE_PICKER = "dateRangePicker"
    RETURN_DATE_PICKER = "returnDatePicker"
    TRAVELERS_SELECTOR = "travelersSelector"
    TRIP_TYPE_CONFIRM = "tripTypeConfirm"
    TRAVELERS_CONFIRM_BEFORE_SEARCH = "travelersConfirmBeforeSearch"
    AIRPORT_CONFIRMATION = "airportConfirmation"

    # Preferences
    PREFERENCE_STYLE = "preferenceStyle"
    PREFERENCE_INTERESTS = "preferenceInterests"
    MUST_HAVES = "mustHaves"
    DIETARY = "dietary"
    DESTINATION_SUGGESTIONS = "destinationSuggestions"

    # Quick filters
    QUICK_FILTER_CHIPS = "quickFilterChips"
    STAR_RATING_SELECTOR = "starRatingSelector"
    DURATION_CHIPS = "durationChips"
    TIME_OF_DAY_CHIPS = "timeOfDayChips"
    CABIN_CLASS_SELECTOR = "cabinClassSelector"
    DIRECT_FLIGHT_TOGGLE = "directFlightToggle"
    BUDGET_RANGE_SLIDER = "budgetRangeSlider"

    # Comparison / alerts
    COMPARISON = "comparison"
    CONFLICT_ALERT = "conflictAlert"
    PRICE_ALERT = "priceAlert"

    @classmethod
    def parse(cls, value: object) -> Optional["WidgetKind"]:
        if isinstance(value, WidgetKind):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip())
        except ValueError:
            return None


class InteractionType(str, Enum):
    # Lifecycle events
    WIDGET_SHOWN = "widget_shown"
    WIDGET_CONFIRMED = "widget_confirmed"
    WIDGET_DISMISSED = "widget_dismissed"
    TYPED_INSTEAD = "typed_instead"

    # Selections (data supplied through a widget)
    DATE_SELECTED = "date_selected"
    DATE_RANGE_SELECTED = "date_range_selected"
    TRAVELERS_SELECTED = "travelers_selected"
    TRIP_TYPE_SELECTED = "trip_type_selected"
    CITY_SELECTED = "city_selected"
    AIRPORT_SELECTED = "airport_selected"
    STYLE_CONFIGURED = "style_configured"
    INTERESTS_SELECTED = "interests_selected"
    MUST_HAVES_CONFIGURED = "must_haves_configured"
    DIETARY_CONFIGURED = "dietary_configured"
    DESTINATION_SELECTED = "destination_selected"
    QUICK_FILTER_APPLIED = "quick_filter_applied"


LIFECYCLE_TYPES = frozenset(
    {
        InteractionType.WIDGET_SHOWN,
        InteractionType.WIDGET_CONFIRMED,
        InteractionType.WIDGET_DISMISSED,
        InteractionType.TYPED_INSTEAD,
    }
)

# Key line: a selection is a completed widget, so is an explicit confirmation.
COMPLETED_TYPES = frozenset(
    {t for t in InteractionType if t not in LIFECYCLE_TYPES} | {InteractionType.WIDGET_CONFIRMED}
)


class WidgetValidation(BaseModel):
    valid: bool
    reason: Optional[str] = None
    suggested_widget: Optional[WidgetKind] = None
