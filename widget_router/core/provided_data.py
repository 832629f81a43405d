# Role: Provided-Data Detector. Looks at Interaction History to tell whether the data a widget would collect was
# already supplied through an earlier widget, even if TripMemory has not caught up yet.

from __future__ import annotations

from typing import Dict, FrozenSet

from widget_router.models.interaction import InteractionHistory, InteractionRecord
from widget_router.models.widget import InteractionType, WidgetKind

# Kinds absent from this table are never "already provided" (preference widgets are repeatable).
PROVIDED_BY: Dict[WidgetKind, FrozenSet[InteractionType]] = {
    WidgetKind.CITY_SELECTOR: frozenset({InteractionType.CITY_SELECTED, InteractionType.DESTINATION_SELECTED}),
    WidgetKind.DATE_PICKER: frozenset({InteractionType.DATE_SELECTED, InteractionType.DATE_RANGE_SELECTED}),
    WidgetKind.DATE_RANGE_PICKER: frozenset({InteractionType.DATE_RANGE_SELECTED}),
    WidgetKind.RETURN_DATE_PICKER: frozenset({InteractionType.DATE_SELECTED, InteractionType.DATE_RANGE_SELECTED}),
    WidgetKind.TRAVELERS_SELECTOR: frozenset({InteractionType.TRAVELERS_SELECTED}),
    WidgetKind.TRIP_TYPE_CONFIRM: frozenset({InteractionType.TRIP_TYPE_SELECTED}),
    WidgetKind.AIRPORT_CONFIRMATION: frozenset({InteractionType.AIRPORT_SELECTED}),
}


def _is_return_date(record: InteractionRecord) -> bool:
    return record.payload.get("which") == "return"


class ProvidedDataDetector:
    def __init__(self, history: InteractionHistory) -> None:
        self.history = history

    def has_already_provided(self, kind: WidgetKind) -> bool:
        types = PROVIDED_BY.get(kind)
        if not types:
            return False
        for record in self.history:
            if record.interaction_type not in types:
                continue
            # A single date only counts for the side it was picked for.
            if record.interaction_type == InteractionType.DATE_SELECTED:
                if _is_return_date(record) != (kind == WidgetKind.RETURN_DATE_PICKER):
                    continue
            return True
        return False
