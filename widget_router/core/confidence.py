# Role: Confidence Reconciliation Layer. Crosses the classifier's intent with local message signals to recompute an
# effective confidence, detect undecided users ("je ne sais pas", "you choose") and decide if clarifying is worth it.
# The router gates clarification on this output, never on the raw classifier confidence.

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import widget_router.config as config
from widget_router.config import RouterSettings
from widget_router.models.intent import ClassifiedIntent, IntentType
from widget_router.utils.message_analyzer import (
    UserSignals,
    analyze_last_assistant_message,
    analyze_user_message,
    detect_language,
)

# Backend intent -> local signal that confirms it.
INTENT_ALIGNMENT: Dict[IntentType, str] = {
    IntentType.PROVIDE_DATES: "wants_date_info",
    IntentType.FLEXIBLE_DATES: "wants_date_info",
    IntentType.PROVIDE_DURATION: "wants_date_info",
    IntentType.COMPARE_OPTIONS: "wants_comparison",
    IntentType.ASK_RECOMMENDATIONS: "wants_more_options",
    IntentType.CONFIRM_SELECTION: "wants_to_book",
    IntentType.EXPRESS_CONSTRAINT: "wants_budget_info",
}

ALIGNMENT_BOOST = 15
SENTIMENT_BOOST = 10
SENTIMENT_CONFLICT_PENALTY = 20
CONTEXT_BOOST = 10
TRAVELERS_CONTEXT_BOOST = 5
UNDECIDED_FLOOR = 50

_POSITIVE_INTENTS = {IntentType.CONFIRM_SELECTION}


@dataclass(frozen=True)
class BoostResult:
    boosted_confidence: float
    detected_language: str
    should_clarify: bool
    frontend_signals: UserSignals
    suggested_intent: Optional[IntentType] = None


class ConfidenceBooster:
    def __init__(self, settings: Optional[RouterSettings] = None) -> None:
        self.settings = settings or RouterSettings()

    def boost(
        self,
        intent: Optional[ClassifiedIntent],
        last_user_message: Optional[str],
        last_assistant_message: Optional[str] = None,
    ) -> BoostResult:
        # 1) Local signals + language from the user message; question type from the assistant message
        # 2) No classifier output -> zero confidence, clarify
        # 3) Alignment / sentiment / context adjustments
        # 4) Undecided users with middling confidence -> delegate_choice, no clarification
        # 5) Clamp to [0, 100]; clarify only if still under LOW and user is not undecided
        signals = analyze_user_message(last_user_message)
        language = detect_language(last_user_message)
        asked = analyze_last_assistant_message(last_assistant_message)

        if intent is None:
            return BoostResult(
                boosted_confidence=0.0,
                detected_language=language,
                should_clarify=True,
                frontend_signals=signals,
            )

        primary = intent.primary_intent
        delta = 0

        aligned = INTENT_ALIGNMENT.get(primary)
        if aligned and getattr(signals, aligned):
            delta += ALIGNMENT_BOOST

        if primary in _POSITIVE_INTENTS:
            if signals.is_positive:
                delta += SENTIMENT_BOOST
            if signals.is_negative:
                delta -= SENTIMENT_CONFLICT_PENALTY

        if primary == IntentType.MODIFY_SELECTION or primary == IntentType.CANCEL_OR_RESTART:
            if signals.is_negative:
                delta += SENTIMENT_BOOST
            if signals.is_positive:
                delta -= SENTIMENT_CONFLICT_PENALTY

        if asked == "dates_question" and signals.wants_date_info:
            delta += CONTEXT_BOOST
        if asked == "budget_question" and signals.wants_budget_info:
            delta += CONTEXT_BOOST
        if asked == "travelers_question":
            delta += TRAVELERS_CONTEXT_BOOST

        if signals.is_undecided and intent.confidence < self.settings.confidence_medium:
            if config.DEBUG:
                print("[BOOSTER] undecided user -> delegate_choice (confidence", intent.confidence, ")")
            return BoostResult(
                boosted_confidence=max(intent.confidence, UNDECIDED_FLOOR),
                detected_language=language,
                should_clarify=False,
                frontend_signals=signals,
                suggested_intent=IntentType.DELEGATE_CHOICE,
            )

        boosted = min(100.0, max(0.0, intent.confidence + delta))
        should_clarify = boosted < self.settings.confidence_low and not signals.is_undecided

        if config.DEBUG and delta:
            print(f"[BOOSTER] {primary.value}: {intent.confidence} -> {boosted} (asked={asked})")

        return BoostResult(
            boosted_confidence=boosted,
            detected_language=language,
            should_clarify=should_clarify,
            frontend_signals=signals,
        )
