from widget_router.core.provided_data import PROVIDED_BY, ProvidedDataDetector
from widget_router.models.interaction import InteractionHistory, InteractionRecord
from widget_router.models.widget import InteractionType, WidgetKind


def _history(*types):
    return InteractionHistory([InteractionRecord(interaction_type=t) for t in types])


def test_empty_history_provides_nothing():
    detector = ProvidedDataDetector(InteractionHistory())
    assert not any(detector.has_already_provided(kind) for kind in WidgetKind)


def test_travelers_selected_provides_travelers():
    detector = ProvidedDataDetector(_history(InteractionType.TRAVELERS_SELECTED))
    assert detector.has_already_provided(WidgetKind.TRAVELERS_SELECTOR)
    assert not detector.has_already_provided(WidgetKind.CITY_SELECTOR)


def test_city_provided_by_city_or_destination_selection():
    assert ProvidedDataDetector(_history(InteractionType.CITY_SELECTED)).has_already_provided(
        WidgetKind.CITY_SELECTOR
    )
    assert ProvidedDataDetector(_history(InteractionType.DESTINATION_SELECTED)).has_already_provided(
        WidgetKind.CITY_SELECTOR
    )


def test_preference_widgets_are_never_provided():
    detector = ProvidedDataDetector(
        _history(InteractionType.DIETARY_CONFIGURED, InteractionType.STYLE_CONFIGURED)
    )
    for kind in (WidgetKind.DIETARY, WidgetKind.PREFERENCE_STYLE, WidgetKind.MUST_HAVES):
        assert kind not in PROVIDED_BY
        assert not detector.has_already_provided(kind)


def test_detector_sees_later_appends():
    history = InteractionHistory()
    detector = ProvidedDataDetector(history)
    assert not detector.has_already_provided(WidgetKind.TRIP_TYPE_CONFIRM)
    history.append(InteractionRecord(interaction_type=InteractionType.TRIP_TYPE_SELECTED))
    assert detector.has_already_provided(WidgetKind.TRIP_TYPE_CONFIRM)


def test_single_date_counts_only_for_its_side():
    departure = InteractionHistory([InteractionRecord(interaction_type=InteractionType.DATE_SELECTED)])
    detector = ProvidedDataDetector(departure)
    assert detector.has_already_provided(WidgetKind.DATE_PICKER)
    assert not detector.has_already_provided(WidgetKind.RETURN_DATE_PICKER)

    ret = InteractionHistory(
        [InteractionRecord(interaction_type=InteractionType.DATE_SELECTED, payload={"which": "return"})]
    )
    detector = ProvidedDataDetector(ret)
    assert detector.has_already_provided(WidgetKind.RETURN_DATE_PICKER)
    assert not detector.has_already_provided(WidgetKind.DATE_PICKER)


def test_date_range_provides_both_sides():
    detector = ProvidedDataDetector(_history(InteractionType.DATE_RANGE_SELECTED))
    assert detector.has_already_provided(WidgetKind.DATE_PICKER)
    assert detector.has_already_provided(WidgetKind.RETURN_DATE_PICKER)
