from widget_router.models.intent import ClassifiedIntent, IntentType
from widget_router.models.widget import WidgetKind
from widget_router.utils.intent_parser import parse_intent_payload, try_parse_json

PAYLOAD = '{"primaryIntent": "provide_dates", "confidence": 82, "entities": {"preferredMonth": "août"}}'


def test_strict_json():
    intent = parse_intent_payload(PAYLOAD)
    assert intent.primary_intent == IntentType.PROVIDE_DATES
    assert intent.confidence == 82
    assert intent.entities.preferred_month == "août"


def test_fenced_json():
    parsed, method = try_parse_json(f"```json\n{PAYLOAD}\n```")
    assert method == "stripped_fences"
    assert parsed["primaryIntent"] == "provide_dates"


def test_json_inside_prose():
    parsed, method = try_parse_json(f"Voici le résultat : {PAYLOAD} merci")
    assert method == "extracted_braces"
    assert parse_intent_payload(f"Voici : {PAYLOAD}").primary_intent == IntentType.PROVIDE_DATES


def test_garbage_is_none():
    assert parse_intent_payload("not json at all") is None
    assert parse_intent_payload("") is None
    assert parse_intent_payload(None) is None
    assert parse_intent_payload("[1, 2, 3]") is None


def test_missing_primary_intent_is_none():
    assert ClassifiedIntent.from_payload({"confidence": 90}) is None
    assert ClassifiedIntent.from_payload("provide_dates") is None


def test_unknown_tags_and_bad_values_are_tolerated():
    intent = ClassifiedIntent.from_payload(
        {
            "primaryIntent": "book_spaceship",
            "secondaryIntent": "nope",
            "confidence": "very",
            "entities": None,
            "widgetToShow": {"type": "teleporter"},
            "clarificationQuestion": "   ",
        }
    )
    assert intent.primary_intent == IntentType.OTHER
    assert intent.secondary_intent is None
    assert intent.confidence == 0
    assert intent.entities.interests == []
    assert intent.widget_to_show is None
    assert intent.clarification_question is None


def test_confidence_is_clamped():
    assert ClassifiedIntent.from_payload({"primaryIntent": "greeting", "confidence": 140}).confidence == 100
    assert ClassifiedIntent.from_payload({"primaryIntent": "greeting", "confidence": -5}).confidence == 0


def test_empty_entity_values_are_absent():
    intent = ClassifiedIntent.from_payload(
        {"primaryIntent": "provide_destination", "entities": {"destinationCity": "", "interests": [], "adults": None}}
    )
    assert intent.entities.destination_city is None
    assert intent.entities.adults is None


def test_widget_suggestion_accepts_kind_key():
    intent = ClassifiedIntent.from_payload(
        {"primaryIntent": "express_preference", "widgetToShow": {"kind": "dietary", "reason": "diet"}}
    )
    assert intent.widget_to_show.kind == WidgetKind.DIETARY
    assert intent.widget_to_show.reason == "diet"


def test_one_malformed_entity_keeps_the_intent():
    intent = ClassifiedIntent.from_payload(
        {
            "primaryIntent": "provide_dates",
            "confidence": 20,
            "clarificationQuestion": "Quelle période ?",
            "entities": {"interests": "plage", "adults": "two", "preferredMonth": "août"},
        }
    )
    assert intent is not None
    assert intent.primary_intent == IntentType.PROVIDE_DATES
    assert intent.clarification_question == "Quelle période ?"
    assert intent.entities.interests == []
    assert intent.entities.adults is None
    assert intent.entities.preferred_month == "août"


def test_widget_suggestion_with_malformed_data_is_kept():
    intent = ClassifiedIntent.from_payload(
        {"primaryIntent": "provide_travelers", "widgetToShow": {"type": "travelersSelector", "data": "n/a"}}
    )
    assert intent.widget_to_show.kind == WidgetKind.TRAVELERS_SELECTOR
    assert intent.widget_to_show.data is None
