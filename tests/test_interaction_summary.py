from datetime import date

from widget_router.models.interaction import InteractionHistory
from widget_router.models.widget import InteractionType, WidgetKind
from widget_router.utils.interaction_summary import (
    build_record,
    context_for_llm,
    format_date_range_selection,
    format_date_selection,
    format_interests_selection,
    format_style_configuration,
    format_travelers_selection,
    format_trip_type_selection,
    recent_summary,
    summarize_payload,
)


def test_date_formats():
    assert format_date_selection(date(2026, 3, 15)) == "Date de départ choisie : 15 mars 2026"
    assert format_date_selection(date(2026, 3, 15), "return", "en") == "Return date chosen: March 15, 2026"
    assert (
        format_date_range_selection(date(2026, 7, 1), date(2026, 7, 14))
        == "Dates choisies : 1 juillet → 14 juillet 2026"
    )


def test_travelers_plurals():
    assert format_travelers_selection(1) == "Voyageurs : 1 adulte"
    assert format_travelers_selection(2, 1, 2) == "Voyageurs : 2 adultes, 1 enfant, 2 bébés"
    assert format_travelers_selection(2, 3, 0, "en") == "Travelers: 2 adults, 3 children"


def test_trip_type_and_style():
    assert format_trip_type_selection("oneway") == "Type de voyage : Aller simple"
    summary = format_style_configuration({"chillVsIntense": 10, "ecoVsLuxury": 90, "cityVsNature": 50})
    assert summary == "Style configuré : Détente, Luxe, Ville/Nature équilibré"


def test_interests_are_capped():
    assert format_interests_selection([]) == "Aucun centre d'intérêt sélectionné"
    summary = format_interests_selection(["a", "b", "c", "d", "e", "f"])
    assert summary == "Centres d'intérêt : a, b, c, d, e..."


def test_summarize_payload_and_malformed_payloads():
    assert (
        summarize_payload(InteractionType.CITY_SELECTED, {"city": "Lisbonne", "country": "Portugal"})
        == "Destination choisie : Lisbonne, Portugal"
    )
    assert summarize_payload(InteractionType.DATE_SELECTED, {"date": "garbage"}) == ""
    assert summarize_payload(InteractionType.WIDGET_DISMISSED, {}) == ""


def test_build_record_prefers_explicit_summary():
    record = build_record(WidgetKind.DIETARY, InteractionType.DIETARY_CONFIGURED, {"x": 1}, summary="Végétarien")
    assert record.summary == "Végétarien"
    assert record.widget_kind == WidgetKind.DIETARY
    assert record.id.startswith("interaction-")


def test_context_and_recent_summary():
    history = InteractionHistory()
    assert context_for_llm(history) == ""
    assert recent_summary(history) == ""

    history.append(build_record(WidgetKind.CITY_SELECTOR, InteractionType.CITY_SELECTED, {"city": "Rome"}))
    history.append(build_record(WidgetKind.DATE_PICKER, InteractionType.WIDGET_SHOWN))
    history.append(
        build_record(WidgetKind.TRAVELERS_SELECTOR, InteractionType.TRAVELERS_SELECTED, {"adults": 2})
    )

    assert context_for_llm(history) == (
        "[INTERACTIONS UTILISATEUR]\n- Destination choisie : Rome\n- Voyageurs : 2 adultes"
    )
    assert recent_summary(history) == "Destination choisie : Rome → Voyageurs : 2 adultes"
    assert recent_summary(history, 1) == "Voyageurs : 2 adultes"
    assert context_for_llm(history, limit=1) == "[INTERACTIONS UTILISATEUR]\n- Voyageurs : 2 adultes"


def test_malformed_counts_and_axes_are_skipped():
    assert (
        summarize_payload(InteractionType.TRAVELERS_SELECTED, {"adults": 2, "children": "two"})
        == "Voyageurs : 2 adultes"
    )
    assert summarize_payload(InteractionType.TRAVELERS_SELECTED, {"adults": "2"}) == ""
    assert summarize_payload(InteractionType.STYLE_CONFIGURED, {"axes": {"chillVsIntense": "high"}}) == ""
    assert summarize_payload(InteractionType.TRIP_TYPE_SELECTED, {"tripType": ["roundtrip"]}) == ""
    assert summarize_payload(InteractionType.INTERESTS_SELECTED, {"interests": "plage"}) == ""
