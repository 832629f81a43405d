from widget_router.utils.message_analyzer import (
    analyze_last_assistant_message,
    analyze_user_message,
    detect_language,
    is_undecided,
)


def test_empty_message_has_no_signals():
    signals = analyze_user_message("")
    assert not any(
        [signals.wants_budget_info, signals.wants_date_info, signals.is_positive, signals.is_undecided]
    )


def test_budget_amount_is_extracted():
    signals = analyze_user_message("mon budget est de 1500 euros")
    assert signals.wants_budget_info
    assert signals.mentioned_budget == "1500"


def test_undecided_phrases_both_languages():
    assert is_undecided("Je ne sais pas trop")
    assert is_undecided("up to you")
    assert not is_undecided("Rome en juillet")
    assert not is_undecided(None)


def test_assistant_question_types():
    assert analyze_last_assistant_message("Bonjour ! Prêt à planifier ton voyage ?") == "greeting"
    assert analyze_last_assistant_message("Quelles dates te conviennent ?") == "dates_question"
    assert analyze_last_assistant_message("How many travelers are coming?") == "travelers_question"
    assert analyze_last_assistant_message("What's your budget for this trip?") == "budget_question"
    assert analyze_last_assistant_message("Tu préfères la mer ou la montagne ?") == "open_question"
    assert analyze_last_assistant_message("") == "unknown"


def test_language_detection_ties_default_to_french():
    assert detect_language("") == "fr"
    assert detect_language("Lisbonne") == "fr"
    assert detect_language("I want to go to the beach") == "en"
    assert detect_language("je veux aller à la plage") == "fr"
