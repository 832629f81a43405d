import pytest

from widget_router.core.behavior import EXPERT, GUIDED, infer_user_behavior, should_offer_widget
from widget_router.models.interaction import InteractionRecord
from widget_router.models.widget import InteractionType, WidgetKind


def _records(*types):
    return [InteractionRecord(interaction_type=t) for t in types]


def test_empty_history_is_guided():
    behavior = infer_user_behavior([])
    assert behavior.style == GUIDED
    assert behavior.prefers_widgets
    assert behavior.completion_rate == 1.0


def test_mostly_typing_user_is_expert():
    behavior = infer_user_behavior(
        _records(InteractionType.TYPED_INSTEAD, InteractionType.WIDGET_DISMISSED, InteractionType.DATE_SELECTED)
    )
    assert behavior.completion_rate == pytest.approx(1 / 3)
    assert behavior.style == EXPERT
    assert not behavior.prefers_widgets


def test_half_completion_stays_guided():
    behavior = infer_user_behavior(_records(InteractionType.TYPED_INSTEAD, InteractionType.WIDGET_CONFIRMED))
    assert behavior.completion_rate == 0.5
    assert behavior.style == GUIDED


def test_expert_still_gets_critical_widgets():
    expert = infer_user_behavior(_records(InteractionType.TYPED_INSTEAD))
    assert should_offer_widget(WidgetKind.CITY_SELECTOR, expert)
    assert should_offer_widget(WidgetKind.TRAVELERS_SELECTOR, expert)
    assert not should_offer_widget(WidgetKind.DIETARY, expert)
    assert not should_offer_widget(WidgetKind.TRIP_TYPE_CONFIRM, expert)


def test_guided_gets_everything():
    guided = infer_user_behavior([])
    assert all(should_offer_widget(kind, guided) for kind in WidgetKind)
