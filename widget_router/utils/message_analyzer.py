# Role: Deterministic bilingual (FR/EN) message analysis. Extracts cheap local signals from the last user message
# (budget / dates / comparison / booking / sentiment / undecided) and classifies what the last assistant message
# asked, so the confidence layer can cross-check the classifier without an extra LLM call.

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence, Tuple

FRENCH = "fr"
ENGLISH = "en"
SUPPORTED_LANGUAGES = (FRENCH, ENGLISH)


@dataclass(frozen=True)
class UserSignals:
    wants_budget_info: bool = False
    wants_date_info: bool = False
    wants_comparison: bool = False
    wants_more_options: bool = False
    wants_to_book: bool = False
    is_positive: bool = False
    is_negative: bool = False
    is_undecided: bool = False
    mentioned_budget: Optional[str] = None


def _compile(*patterns: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


# ---- user message signals ----

_BUDGET = _compile(
    r"budget|€|\d+\s*(euros?|€)|pas\s+cher|économique|luxe",
    r"\$|£|\d+\s*(dollars?|pounds?)|\bcheap\b|affordable|luxury|expensive",
)
_BUDGET_AMOUNT = re.compile(r"(\d+)\s*(euros?|€|\$|dollars?|£|pounds?)", re.IGNORECASE)

_DATES = _compile(
    r"\bquand\b|\bdates?\b|période|\bmois\b|semaine|week-?end",
    r"\bwhen\b|\bperiod\b|\bmonth\b|\bweek\b",
)

_COMPARISON = _compile(
    r"compar|\bversus\b|\bvs\b|ou\s+plutôt|différence|lequel",
    r"or\s+rather|difference|which\s+one",
)

_MORE_OPTIONS = _compile(
    r"\bautres?\b|plus\s+d'options?|alternatives?|\bsinon\b|différent",
    r"\bother\b|more\s+options?|\belse\b|\bdifferent\b",
)

_BOOKING = _compile(
    r"réserve|je\s+prends|c'est\s+bon|\bvalide\b|confirme",
    r"\bbook\b|reserve|i('ll)?\s+take|sounds\s+good|confirm|validate",
)

_POSITIVE = _compile(
    r"\bsuper\b|parfait|génial|j'adore|excellent|\boui\b|\bok\b|d'accord",
    r"\bgreat\b|perfect|awesome|love\s+it|\byes\b|\bokay\b|sounds\s+good|let's\s+do\s+it",
)

_NEGATIVE = _compile(
    r"\bnon\b|pas\s+vraiment|je\s+préfère\s+pas|autre\s+chose|\bbof\b",
    r"\bno\b|\bnope\b|not\s+really|i('d)?\s+prefer\s+not|something\s+else|\bmeh\b|\bnah\b",
)

_UNDECIDED = _compile(
    r"je\s+(ne\s+)?sais\s+pas|hésit|peut-être|je\s+ne\s+suis\s+pas\s+sûr|choisis\s+pour\s+moi|"
    r"à\s+toi\s+de\s+(voir|choisir)|comme\s+tu\s+veux|peu\s+importe",
    r"i\s+don'?t\s+know|not\s+sure|\bmaybe\b|\bperhaps\b|hesitat|undecided|you\s+choose|choose\s+for\s+me|"
    r"up\s+to\s+you|whatever\s+you",
)


def _matches(patterns: Sequence[Pattern[str]], text: str) -> bool:
    return any(p.search(text) for p in patterns)


def analyze_user_message(text: Optional[str]) -> UserSignals:
    # Role: one pass over the bilingual pattern tables; absent text -> no signals.
    if not text or not text.strip():
        return UserSignals()

    wants_budget = _matches(_BUDGET, text)
    amount = _BUDGET_AMOUNT.search(text) if wants_budget else None

    return UserSignals(
        wants_budget_info=wants_budget,
        wants_date_info=_matches(_DATES, text),
        wants_comparison=_matches(_COMPARISON, text),
        wants_more_options=_matches(_MORE_OPTIONS, text),
        wants_to_book=_matches(_BOOKING, text),
        is_positive=_matches(_POSITIVE, text),
        is_negative=_matches(_NEGATIVE, text),
        is_undecided=_matches(_UNDECIDED, text),
        mentioned_budget=amount.group(1) if amount else None,
    )


def is_undecided(text: Optional[str]) -> bool:
    return bool(text) and _matches(_UNDECIDED, text or "")


# ---- last assistant message ----

_ASSISTANT_PATTERNS: List[Tuple[str, Tuple[Pattern[str], ...]]] = [
    (
        "greeting",
        _compile(
            r"bonjour|bienvenue|comment\s+puis-je\s+t'aider|en\s+quoi\s+puis-je|prêt\s+à\s+planifier",
            r"\bhello\b|\bwelcome\b|how\s+can\s+i\s+help|what\s+can\s+i\s+do\s+for\s+you|ready\s+to\s+plan|hi\s+there",
        ),
    ),
    (
        "destinations",
        _compile(
            r"voici\s+\d+\s+destinations?|je\s+te\s+propose\s+\d+\s+destinations?|que\s+penses-tu\s+de",
            r"here\s+are\s+\d+\s+destinations?|i\s+suggest\s+\d+\s+destinations?|what\s+do\s+you\s+think\s+(of|about)",
        ),
    ),
    (
        "dates_question",
        _compile(
            r"quand\s+(souhaitez-vous|veux-tu|voulez-vous)\s+partir|quelles?\s+dates?|à\s+quelle\s+période|"
            r"pour\s+combien\s+de\s+(temps|jours|nuits)|dates?\s+de\s+départ",
            r"when\s+(would\s+you\s+like|do\s+you\s+want)\s+to\s+(leave|travel|go|depart)|what\s+dates?|"
            r"which\s+period|for\s+how\s+(long|many\s+days|many\s+nights)|departure\s+dates?|"
            r"when\s+are\s+you\s+(thinking|planning)",
        ),
    ),
    (
        "travelers_question",
        _compile(
            r"combien\s+(serez-vous|êtes-vous|de\s+personnes)|nombre\s+de\s+voyageurs?|qui\s+(vous|t')accompagne",
            r"how\s+many\s+(people|travell?ers|guests|passengers)|number\s+of\s+(travell?ers|guests|passengers)|"
            r"travell?ing\s+with\s+anyone",
        ),
    ),
    (
        "budget_question",
        _compile(
            r"quel\s+est\s+(ton|votre)\s+budget|budget\s+(prévu|souhaité|estimé)|fourchette\s+de\s+prix",
            r"what('s|\s+is)\s+(your\s+)?budget|how\s+much\s+(would\s+you\s+like|do\s+you\s+want)\s+to\s+spend|"
            r"price\s+range",
        ),
    ),
    (
        "confirmation",
        _compile(
            r"c'est\s+noté|excellent\s+choix|j'ai\s+bien\s+enregistré|on\s+récapitule",
            r"\bnoted\b|excellent\s+choice|let'?s\s+recap|\bgot\s+it\b",
        ),
    ),
]


def analyze_last_assistant_message(text: Optional[str]) -> str:
    # 1) First matching table wins (greetings first, they open the conversation)
    # 2) Any other trailing question -> open_question
    # 3) Otherwise unknown
    if not text or not text.strip():
        return "unknown"

    for content_type, patterns in _ASSISTANT_PATTERNS:
        if _matches(patterns, text):
            return content_type

    if text.strip().endswith("?"):
        return "open_question"

    return "unknown"


# ---- language ----

_FR_MARKERS = re.compile(
    r"\b(je|tu|nous|vous|est|sont|le|la|les|un|une|des|pour|avec|dans|sur|qui|que|quoi|comment|"
    r"pourquoi|où|quand|bonjour|merci|oui|non|mange|suis)\b",
    re.IGNORECASE,
)
_EN_MARKERS = re.compile(
    r"\b(i|you|we|they|is|are|the|a|an|some|for|with|in|on|who|what|why|where|when|how|hello|"
    r"thanks|yes|no|please|am|eat|my)\b",
    re.IGNORECASE,
)


def detect_language(text: Optional[str]) -> str:
    # Key line: ties and empty text default to French, the product's primary language.
    if not text:
        return FRENCH
    fr_count = len(_FR_MARKERS.findall(text))
    en_count = len(_EN_MARKERS.findall(text))
    return FRENCH if fr_count >= en_count else ENGLISH
