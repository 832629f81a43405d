# Role: Human-readable summaries of widget interactions (French first, English available) and the compact
# context blocks built from Interaction History for the conversational model.

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from widget_router.models.interaction import InteractionHistory, InteractionRecord
from widget_router.models.widget import InteractionType, WidgetKind
from widget_router.utils.message_analyzer import ENGLISH, FRENCH

CONTEXT_HEADER = "[INTERACTIONS UTILISATEUR]"
SUMMARY_SEPARATOR = " → "

_MONTHS = {
    FRENCH: (
        "janvier", "février", "mars", "avril", "mai", "juin",
        "juillet", "août", "septembre", "octobre", "novembre", "décembre",
    ),
    ENGLISH: (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
}

_TRIP_TYPE_LABELS = {
    FRENCH: {"roundtrip": "Aller-retour", "oneway": "Aller simple", "multi": "Multi-destinations"},
    ENGLISH: {"roundtrip": "Round trip", "oneway": "One way", "multi": "Multi-city"},
}

# axis -> (low label, high label)
_STYLE_AXES = {
    FRENCH: {
        "chillVsIntense": ("Détente", "Intense"),
        "cityVsNature": ("Ville", "Nature"),
        "ecoVsLuxury": ("Économique", "Luxe"),
        "touristVsLocal": ("Touristique", "Authentique"),
    },
    ENGLISH: {
        "chillVsIntense": ("Relaxed", "Intense"),
        "cityVsNature": ("City", "Nature"),
        "ecoVsLuxury": ("Budget", "Luxury"),
        "touristVsLocal": ("Touristy", "Authentic"),
    },
}

MAX_LISTED_INTERESTS = 5


def _lang(language: str) -> str:
    return language if language in _MONTHS else FRENCH


def _format_date(value: date, language: str, with_year: bool = True) -> str:
    language = _lang(language)
    month = _MONTHS[language][value.month - 1]
    if language == ENGLISH:
        return f"{month} {value.day}, {value.year}" if with_year else f"{month} {value.day}"
    return f"{value.day} {month} {value.year}" if with_year else f"{value.day} {month}"


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def format_date_selection(value: date, which: str = "departure", language: str = FRENCH) -> str:
    if _lang(language) == ENGLISH:
        label = "Departure" if which == "departure" else "Return"
        return f"{label} date chosen: {_format_date(value, ENGLISH)}"
    label = "départ" if which == "departure" else "retour"
    return f"Date de {label} choisie : {_format_date(value, FRENCH)}"


def format_date_range_selection(departure: date, return_date: date, language: str = FRENCH) -> str:
    start = _format_date(departure, language, with_year=False)
    end = _format_date(return_date, language)
    if _lang(language) == ENGLISH:
        return f"Dates chosen: {start}{SUMMARY_SEPARATOR}{end}"
    return f"Dates choisies : {start}{SUMMARY_SEPARATOR}{end}"


def format_travelers_selection(adults: int, children: int = 0, infants: int = 0, language: str = FRENCH) -> str:
    if _lang(language) == ENGLISH:
        parts = [_plural(adults, "adult", "adults")]
        if children > 0:
            parts.append(_plural(children, "child", "children"))
        if infants > 0:
            parts.append(_plural(infants, "infant", "infants"))
        return f"Travelers: {', '.join(parts)}"

    # French plural starts at 2.
    parts = [f"{adults} adulte{'s' if adults > 1 else ''}"]
    if children > 0:
        parts.append(f"{children} enfant{'s' if children > 1 else ''}")
    if infants > 0:
        parts.append(f"{infants} bébé{'s' if infants > 1 else ''}")
    return f"Voyageurs : {', '.join(parts)}"


def format_trip_type_selection(trip_type: str, language: str = FRENCH) -> str:
    labels = _TRIP_TYPE_LABELS[_lang(language)]
    label = labels.get(trip_type, trip_type)
    if _lang(language) == ENGLISH:
        return f"Trip type: {label}"
    return f"Type de voyage : {label}"


def format_city_selection(city: str, country: Optional[str] = None, language: str = FRENCH) -> str:
    place = f"{city}, {country}" if country else city
    if _lang(language) == ENGLISH:
        return f"Destination chosen: {place}"
    return f"Destination choisie : {place}"


def format_airport_selection(name: str, iata: str, which: str = "departure", language: str = FRENCH) -> str:
    if _lang(language) == ENGLISH:
        label = "Departure" if which == "departure" else "Arrival"
        return f"{label} airport: {name} ({iata})"
    label = "départ" if which == "departure" else "arrivée"
    return f"Aéroport {label} : {name} ({iata})"


def format_style_configuration(axes: Mapping[str, float], language: str = FRENCH) -> str:
    # Values are 0..100 sliders: <30 reads as the low end, >70 as the high end.
    labels = _STYLE_AXES[_lang(language)]
    balanced = "balanced" if _lang(language) == ENGLISH else "équilibré"

    summaries: List[str] = []
    for key, value in axes.items():
        low, high = labels.get(key, (key, key))
        if value < 30:
            summaries.append(low)
        elif value > 70:
            summaries.append(high)
        else:
            summaries.append(f"{low}/{high} {balanced}")

    if _lang(language) == ENGLISH:
        return f"Style configured: {', '.join(summaries)}"
    return f"Style configuré : {', '.join(summaries)}"


def format_interests_selection(interests: Sequence[str], language: str = FRENCH) -> str:
    english = _lang(language) == ENGLISH
    if not interests:
        return "No interests selected" if english else "Aucun centre d'intérêt sélectionné"

    listed = ", ".join(interests[:MAX_LISTED_INTERESTS])
    if len(interests) > MAX_LISTED_INTERESTS:
        listed += "..."
    return f"Interests: {listed}" if english else f"Centres d'intérêt : {listed}"


def format_destination_selection(name: str, country: Optional[str] = None, language: str = FRENCH) -> str:
    place = f"{name} ({country})" if country else name
    if _lang(language) == ENGLISH:
        return f"Suggested destination picked: {place}"
    return f"Destination suggérée choisie : {place}"


def _count(value: Any) -> Optional[int]:
    # Non-negative ints only; bools and strings like "two" are malformed.
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return None


def _text(value: Any) -> Optional[str]:
    return value.strip() if isinstance(value, str) and value.strip() else None


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def summarize_payload(
    interaction_type: InteractionType,
    payload: Mapping[str, Any],
    language: str = FRENCH,
) -> str:
    """
    Build the summary for one selection payload.

    Payload keys follow the UI wire format (camelCase). Missing or malformed values give an empty summary
    rather than an error; lifecycle events never carry a summary.
    """
    if interaction_type == InteractionType.DATE_SELECTED:
        value = _parse_date(payload.get("date"))
        return format_date_selection(value, payload.get("which", "departure"), language) if value else ""

    if interaction_type == InteractionType.DATE_RANGE_SELECTED:
        start = _parse_date(payload.get("departureDate"))
        end = _parse_date(payload.get("returnDate"))
        return format_date_range_selection(start, end, language) if start and end else ""

    if interaction_type == InteractionType.TRAVELERS_SELECTED:
        adults = _count(payload.get("adults"))
        if adults is None:
            return ""
        return format_travelers_selection(
            adults, _count(payload.get("children")) or 0, _count(payload.get("infants")) or 0, language
        )

    if interaction_type == InteractionType.TRIP_TYPE_SELECTED:
        trip_type = _text(payload.get("tripType"))
        return format_trip_type_selection(trip_type, language) if trip_type else ""

    if interaction_type == InteractionType.CITY_SELECTED:
        city = _text(payload.get("city"))
        return format_city_selection(city, _text(payload.get("country")), language) if city else ""

    if interaction_type == InteractionType.AIRPORT_SELECTED:
        name, iata = _text(payload.get("name")), _text(payload.get("iata"))
        if not (name and iata):
            return ""
        return format_airport_selection(name, iata, payload.get("which", "departure"), language)

    if interaction_type == InteractionType.STYLE_CONFIGURED:
        axes = payload.get("axes")
        if not isinstance(axes, dict):
            return ""
        # Non-numeric slider values are skipped.
        numeric = {
            k: v for k, v in axes.items() if isinstance(k, str) and isinstance(v, (int, float)) and not isinstance(v, bool)
        }
        return format_style_configuration(numeric, language) if numeric else ""

    if interaction_type == InteractionType.INTERESTS_SELECTED:
        interests = payload.get("interests")
        if not isinstance(interests, list):
            return ""
        return format_interests_selection([i for i in interests if isinstance(i, str) and i.strip()], language)

    if interaction_type == InteractionType.DESTINATION_SELECTED:
        name = _text(payload.get("name"))
        return format_destination_selection(name, _text(payload.get("country")), language) if name else ""

    return ""


def build_record(
    widget_kind: Optional[WidgetKind],
    interaction_type: InteractionType,
    payload: Optional[Dict[str, Any]] = None,
    summary: Optional[str] = None,
    language: str = FRENCH,
) -> InteractionRecord:
    payload = payload or {}
    return InteractionRecord(
        widget_kind=widget_kind,
        interaction_type=interaction_type,
        payload=payload,
        summary=summary if summary else summarize_payload(interaction_type, payload, language),
    )


def _summaries(records: Iterable[InteractionRecord]) -> List[str]:
    return [r.summary for r in records if r.summary]


def context_for_llm(history: InteractionHistory, limit: int = 10) -> str:
    # Last N non-empty summaries, one bullet each; empty history -> empty string.
    summaries = _summaries(history)[-limit:] if limit > 0 else []
    if not summaries:
        return ""
    lines = "\n".join(f"- {s}" for s in summaries)
    return f"{CONTEXT_HEADER}\n{lines}"


def recent_summary(history: InteractionHistory, count: int = 5) -> str:
    summaries = _summaries(history)[-count:] if count > 0 else []
    return SUMMARY_SEPARATOR.join(summaries)
