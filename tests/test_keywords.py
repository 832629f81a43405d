from widget_router.models.widget import WidgetKind
from widget_router.utils.keywords import KEYWORD_PRIORITY, PREFERENCE_KEYWORDS, find_preference_keyword


def test_tables_are_parallel():
    kinds = {lang: set(table) for lang, table in PREFERENCE_KEYWORDS.items()}
    assert kinds["fr"] == kinds["en"] == set(KEYWORD_PRIORITY)


def test_french_dietary_keyword():
    match = find_preference_keyword("je suis végétarien", "fr")
    assert match.widget_kind == WidgetKind.DIETARY
    assert match.keyword == "végétarien"
    assert match.language == "fr"


def test_english_dietary_keyword():
    match = find_preference_keyword("I'm vegetarian", "en")
    assert match.widget_kind == WidgetKind.DIETARY
    assert match.keyword == "vegetarian"


def test_falls_back_to_other_language_table():
    match = find_preference_keyword("vegetarian", "fr")
    assert match.widget_kind == WidgetKind.DIETARY
    assert match.language == "en"


def test_priority_dietary_over_interests():
    match = find_preference_keyword("I love the beach but I'm vegan", "en")
    assert match.widget_kind == WidgetKind.DIETARY


def test_whole_words_only():
    assert find_preference_keyword("un petit château", "fr") is None
    assert find_preference_keyword("travelling with my dog", "en").widget_kind == WidgetKind.MUST_HAVES


def test_no_keyword():
    assert find_preference_keyword("Rome en juillet", "fr") is None
    assert find_preference_keyword(None) is None
