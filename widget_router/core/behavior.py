# Role: User Behavior Model. Infers from Interaction History whether the user engages with widgets ("guided") or
# mostly types past them ("expert"); experts only get the critical data-entry widgets.

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from widget_router.config import RouterSettings
from widget_router.models.interaction import InteractionRecord
from widget_router.models.widget import COMPLETED_TYPES, WidgetKind

CRITICAL_WIDGETS = frozenset(
    {
        WidgetKind.CITY_SELECTOR,
        WidgetKind.DATE_PICKER,
        WidgetKind.DATE_RANGE_PICKER,
        WidgetKind.RETURN_DATE_PICKER,
        WidgetKind.TRAVELERS_SELECTOR,
    }
)

GUIDED = "guided"
EXPERT = "expert"


@dataclass(frozen=True)
class UserBehavior:
    prefers_widgets: bool
    completion_rate: float
    style: str


def infer_user_behavior(
    history: Iterable[InteractionRecord],
    settings: Optional[RouterSettings] = None,
) -> UserBehavior:
    # 1) Empty history -> guided with a perfect completion rate
    # 2) completion_rate = completed records / all records
    # 3) expert iff completion_rate < threshold (0.5 by default)
    settings = settings or RouterSettings()
    records = list(history)
    if not records:
        return UserBehavior(prefers_widgets=True, completion_rate=1.0, style=GUIDED)

    completed = sum(1 for r in records if r.interaction_type in COMPLETED_TYPES)
    rate = completed / len(records)
    is_expert = rate < settings.expert_completion_threshold

    return UserBehavior(
        prefers_widgets=not is_expert,
        completion_rate=rate,
        style=EXPERT if is_expert else GUIDED,
    )


def should_offer_widget(kind: WidgetKind, behavior: UserBehavior) -> bool:
    if kind in CRITICAL_WIDGETS:
        return True
    return behavior.style != EXPERT
