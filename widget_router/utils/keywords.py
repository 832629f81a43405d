# Role: Per-language keyword tables binding explicit user statements ("je suis végétarien", "wheelchair") to the
# preference widget that collects that data. Tables are kept parallel: same widget kinds in every language.

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from widget_router.models.widget import WidgetKind
from widget_router.utils.message_analyzer import ENGLISH, FRENCH, SUPPORTED_LANGUAGES

KEYWORDS_VERSION = 2

# Highest priority first: dietary > must-haves > interests > style.
KEYWORD_PRIORITY: Tuple[WidgetKind, ...] = (
    WidgetKind.DIETARY,
    WidgetKind.MUST_HAVES,
    WidgetKind.PREFERENCE_INTERESTS,
    WidgetKind.PREFERENCE_STYLE,
)

PREFERENCE_KEYWORDS: Dict[str, Dict[WidgetKind, Tuple[str, ...]]] = {
    FRENCH: {
        WidgetKind.DIETARY: (
            "végétarien", "végétarienne", "vegan", "végane", "halal", "casher", "sans gluten", "lactose",
            "allergie", "allergique", "régime", "restriction alimentaire", "je mange", "intolérant",
            "pescatarien",
        ),
        WidgetKind.MUST_HAVES: (
            "fauteuil roulant", "mobilité réduite", "pmr", "handicap", "accessible", "chien", "chat",
            "animal de compagnie", "avec mon chien", "wifi obligatoire", "piscine",
        ),
        WidgetKind.PREFERENCE_INTERESTS: (
            "plage", "culture", "nature", "gastronomie", "sport", "aventure", "spa", "shopping", "musée",
            "randonnée", "montagne", "plongée", "surf", "ski", "safari", "j'aime", "j'adore", "fan de",
        ),
        WidgetKind.PREFERENCE_STYLE: (
            "luxe", "économique", "pas cher", "budget", "backpacker", "routard", "premium", "haut de gamme",
            "5 étoiles", "confort", "relax", "zen", "chill", "authentique", "romantique",
        ),
    },
    ENGLISH: {
        WidgetKind.DIETARY: (
            "vegetarian", "vegan", "halal", "kosher", "gluten-free", "gluten free", "lactose", "allergy",
            "allergic", "diet", "dietary restriction", "pescatarian",
        ),
        WidgetKind.MUST_HAVES: (
            "wheelchair", "disability", "accessible", "reduced mobility", "mobility", "dog", "cat", "pet",
            "with my pet", "wifi", "pool",
        ),
        WidgetKind.PREFERENCE_INTERESTS: (
            "beach", "culture", "nature", "gastronomy", "food", "sport", "adventure", "spa", "shopping",
            "museum", "hiking", "mountain", "diving", "surfing", "ski", "safari", "i like", "i love",
        ),
        WidgetKind.PREFERENCE_STYLE: (
            "luxury", "cheap", "budget", "backpacker", "premium", "high-end", "5 star", "comfort",
            "relaxing", "chill", "authentic", "romantic",
        ),
    },
}

# Key line: a language missing a concept would silently change routing, so fail at import instead.
for _lang in SUPPORTED_LANGUAGES:
    if set(PREFERENCE_KEYWORDS.get(_lang, {})) != set(KEYWORD_PRIORITY):
        raise RuntimeError(f"Keyword table for '{_lang}' is not parallel to {[k.value for k in KEYWORD_PRIORITY]}")


@dataclass(frozen=True)
class KeywordMatch:
    widget_kind: WidgetKind
    keyword: str
    language: str


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    # Whole words only: "chat" must not match "chateau", "pet" must not match "petit".
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)", re.IGNORECASE)


_PATTERNS: Dict[str, List[Tuple[WidgetKind, str, re.Pattern[str]]]] = {
    lang: [(kind, kw, _keyword_pattern(kw)) for kind in KEYWORD_PRIORITY for kw in table[kind]]
    for lang, table in PREFERENCE_KEYWORDS.items()
}


def find_preference_keyword(text: Optional[str], language: str = FRENCH) -> Optional[KeywordMatch]:
    # 1) Search the detected language's table in widget priority order
    # 2) Then the other tables (short messages like "vegetarian" are hard to language-tag)
    if not text or not text.strip():
        return None

    order = [language] + [lang for lang in SUPPORTED_LANGUAGES if lang != language]
    for lang in order:
        for kind, keyword, pattern in _PATTERNS.get(lang, []):
            if pattern.search(text):
                return KeywordMatch(widget_kind=kind, keyword=keyword, language=lang)

    return None
