from conftest import make_intent

from widget_router.core.confidence import ConfidenceBooster
from widget_router.models.intent import IntentType


def test_no_intent_means_zero_and_clarify():
    result = ConfidenceBooster().boost(None, "bonjour")
    assert result.boosted_confidence == 0
    assert result.should_clarify


def test_low_confidence_without_signals_clarifies():
    result = ConfidenceBooster().boost(make_intent("provide_dates", 20), None)
    assert result.boosted_confidence == 20
    assert result.should_clarify
    assert result.suggested_intent is None


def test_alignment_boost_can_lift_above_clarification():
    result = ConfidenceBooster().boost(make_intent("provide_dates", 30), "on part quelle semaine ?")
    assert result.frontend_signals.wants_date_info
    assert result.boosted_confidence == 45
    assert not result.should_clarify


def test_undecided_user_is_delegated_not_clarified():
    result = ConfidenceBooster().boost(make_intent("provide_destination", 25), "je ne sais pas, choisis pour moi")
    assert result.suggested_intent == IntentType.DELEGATE_CHOICE
    assert result.boosted_confidence == 50
    assert not result.should_clarify


def test_undecided_with_high_confidence_is_not_delegated():
    result = ConfidenceBooster().boost(make_intent("provide_destination", 85), "maybe Rome")
    assert result.suggested_intent is None
    assert result.boosted_confidence == 85


def test_negative_sentiment_penalizes_confirmation():
    result = ConfidenceBooster().boost(make_intent("confirm_selection", 55), "non, pas vraiment")
    assert result.boosted_confidence == 35
    assert result.should_clarify


def test_positive_confirmation_with_booking_signal():
    result = ConfidenceBooster().boost(make_intent("confirm_selection", 70), "parfait, je réserve")
    assert result.boosted_confidence == 95


def test_travelers_question_context_boost():
    result = ConfidenceBooster().boost(
        make_intent("provide_travelers", 36),
        "2",
        last_assistant_message="Combien de personnes partent avec toi ?",
    )
    assert result.boosted_confidence == 41
    assert not result.should_clarify


def test_boost_is_clamped():
    result = ConfidenceBooster().boost(make_intent("confirm_selection", 98), "super, je réserve !")
    assert result.boosted_confidence == 100


def test_language_is_detected_from_user_message():
    booster = ConfidenceBooster()
    assert booster.boost(make_intent("greeting"), "hello, what are the options?").detected_language == "en"
    assert booster.boost(make_intent("greeting"), "bonjour, je veux partir").detected_language == "fr"
    assert booster.boost(make_intent("greeting"), None).detected_language == "fr"
