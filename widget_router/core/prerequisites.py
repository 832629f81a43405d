# Role: Widget Prerequisite Table. One rule per WidgetKind deciding whether the widget makes sense for the current
# FlowState, with an optional reason and a suggested alternative. Behavior changes are edits to the table.

from __future__ import annotations

from typing import Callable, Dict, Union

from widget_router.models.flow_state import FlowState
from widget_router.models.widget import WidgetKind, WidgetValidation

PREREQUISITES_VERSION = 3

Rule = Callable[[FlowState], WidgetValidation]


def _always(flow: FlowState) -> WidgetValidation:
    # Entry widgets are the means of satisfying later prerequisites, so they have none.
    return WidgetValidation(valid=True)


def _needs_departure_date(flow: FlowState) -> WidgetValidation:
    if flow.has_departure_date:
        return WidgetValidation(valid=True)
    return WidgetValidation(valid=False, reason="Departure date required first")


def _needs_travelers(flow: FlowState) -> WidgetValidation:
    if flow.has_travelers:
        return WidgetValidation(valid=True)
    return WidgetValidation(
        valid=False,
        reason="Travelers count required first",
        suggested_widget=WidgetKind.TRAVELERS_SELECTOR,
    )


def _needs_ready_to_search(flow: FlowState) -> WidgetValidation:
    if flow.is_ready_to_search:
        return WidgetValidation(valid=True)
    return WidgetValidation(valid=False, reason="Complete trip info required")


WIDGET_PREREQUISITES: Dict[WidgetKind, Rule] = {
    WidgetKind.CITY_SELECTOR: _always,
    WidgetKind.DATE_PICKER: _always,
    WidgetKind.DATE_RANGE_PICKER: _always,
    WidgetKind.RETURN_DATE_PICKER: _needs_departure_date,
    WidgetKind.TRAVELERS_SELECTOR: _always,
    WidgetKind.TRIP_TYPE_CONFIRM: _needs_travelers,
    WidgetKind.TRAVELERS_CONFIRM_BEFORE_SEARCH: _needs_ready_to_search,
    WidgetKind.AIRPORT_CONFIRMATION: _needs_ready_to_search,
    WidgetKind.PREFERENCE_STYLE: _always,
    WidgetKind.PREFERENCE_INTERESTS: _always,
    WidgetKind.MUST_HAVES: _always,
    WidgetKind.DIETARY: _always,
    WidgetKind.DESTINATION_SUGGESTIONS: _always,
    WidgetKind.QUICK_FILTER_CHIPS: _always,
    WidgetKind.STAR_RATING_SELECTOR: _always,
    WidgetKind.DURATION_CHIPS: _always,
    WidgetKind.TIME_OF_DAY_CHIPS: _always,
    WidgetKind.CABIN_CLASS_SELECTOR: _always,
    WidgetKind.DIRECT_FLIGHT_TOGGLE: _always,
    WidgetKind.BUDGET_RANGE_SLIDER: _always,
    WidgetKind.COMPARISON: _always,
    WidgetKind.CONFLICT_ALERT: _always,
    WidgetKind.PRICE_ALERT: _always,
}

# Key line: a new WidgetKind without a rule fails at import, not silently at runtime.
_missing_rules = set(WidgetKind) - set(WIDGET_PREREQUISITES)
if _missing_rules:
    raise RuntimeError(f"Widget prerequisite table is missing rules for: {sorted(k.value for k in _missing_rules)}")


class WidgetPrerequisites:
    def __init__(self, rules: Dict[WidgetKind, Rule] = WIDGET_PREREQUISITES) -> None:
        self.rules = rules

    def validate(self, kind: Union[WidgetKind, str], flow: FlowState) -> WidgetValidation:
        # Unknown kinds (e.g. a raw string from an older client) are permissively valid.
        parsed = WidgetKind.parse(kind)
        if parsed is None:
            return WidgetValidation(valid=True)

        rule = self.rules.get(parsed)
        if rule is None:
            return WidgetValidation(valid=True)
        return rule(flow)
