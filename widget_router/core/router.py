# Role: Unified Router. Turns one classified intent per turn into one RoutingDecision by combining the flow state,
# the prerequisite table, the cooldown tracker, provided-data detection, the user behavior model and the confidence
# layer. Side effects (widget shown / search / delegate) go to caller-supplied callbacks.

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

import widget_router.config as config
from widget_router.config import RouterSettings
from widget_router.core.behavior import infer_user_behavior, should_offer_widget
from widget_router.core.confidence import BoostResult, ConfidenceBooster
from widget_router.core.cooldown import WidgetCooldownTracker
from widget_router.core.flow_state import compute_flow_state
from widget_router.core.prerequisites import WidgetPrerequisites
from widget_router.core.provided_data import ProvidedDataDetector
from widget_router.models.decision import RouteAction, RoutingDecision
from widget_router.models.flow_state import FlowState
from widget_router.models.intent import ClassifiedIntent, IntentType, WidgetSuggestion
from widget_router.models.interaction import InteractionHistory
from widget_router.models.trip_memory import TripMemory, TripType
from widget_router.models.widget import WidgetKind, WidgetValidation
from widget_router.utils.keywords import find_preference_keyword
from widget_router.utils.message_analyzer import ENGLISH, FRENCH

WIDGET_TRIGGERING_INTENTS = frozenset(
    {
        IntentType.PROVIDE_DESTINATION,
        IntentType.PROVIDE_DATES,
        IntentType.PROVIDE_DURATION,
        IntentType.FLEXIBLE_DATES,
        IntentType.PROVIDE_TRAVELERS,
        IntentType.SPECIFY_COMPOSITION,
        IntentType.CONFIRM_SELECTION,
        IntentType.EXPRESS_PREFERENCE,
        IntentType.EXPRESS_CONSTRAINT,
    }
)

PREFERENCE_INTENTS = frozenset({IntentType.EXPRESS_PREFERENCE, IntentType.EXPRESS_CONSTRAINT})

GENERIC_CLARIFICATION = {
    FRENCH: "Peux-tu préciser ta demande ?",
    ENGLISH: "Could you clarify your request?",
}

OnWidgetTriggered = Callable[[WidgetKind, Optional[Dict[str, Any]]], None]
OnSearchTriggered = Callable[[], None]
OnDelegateChoice = Callable[[ClassifiedIntent], None]


def _dates_widget(flow: FlowState) -> WidgetKind:
    return WidgetKind.DATE_RANGE_PICKER if flow.trip_type == TripType.ROUNDTRIP else WidgetKind.DATE_PICKER


def _intent_focus(primary: IntentType, flow: FlowState) -> Optional[WidgetKind]:
    # Role: the widget an intent is "about", only while that data is still missing.
    if primary == IntentType.PROVIDE_DESTINATION and not flow.has_destination_city:
        return WidgetKind.CITY_SELECTOR
    if primary in {IntentType.PROVIDE_DATES, IntentType.FLEXIBLE_DATES} and not flow.has_departure_date:
        return _dates_widget(flow)
    if primary == IntentType.PROVIDE_DURATION and not flow.has_departure_date:
        return WidgetKind.DATE_PICKER
    if primary in {IntentType.PROVIDE_TRAVELERS, IntentType.SPECIFY_COMPOSITION} and not flow.has_travelers:
        return WidgetKind.TRAVELERS_SELECTOR
    if primary == IntentType.CONFIRM_SELECTION and flow.has_travelers and not flow.has_trip_type:
        return WidgetKind.TRIP_TYPE_CONFIRM
    return None


def _entity_widget_data(intent: ClassifiedIntent) -> Optional[Dict[str, Any]]:
    entities = intent.entities
    data: Dict[str, Any] = {}
    if entities.preferred_month:
        data["preferredMonth"] = entities.preferred_month
    if entities.trip_duration:
        data["tripDuration"] = entities.trip_duration
    if entities.destination_country_code:
        data["countryCode"] = entities.destination_country_code
        data["countryName"] = entities.destination_country
    return data or None


def _entity_preference_candidates(intent: ClassifiedIntent) -> List[Tuple[WidgetKind, str, Optional[Dict[str, Any]]]]:
    entities = intent.entities
    candidates: List[Tuple[WidgetKind, str, Optional[Dict[str, Any]]]] = []
    if entities.dietary_restrictions:
        candidates.append(
            (
                WidgetKind.DIETARY,
                ", ".join(entities.dietary_restrictions),
                {"dietaryRestrictions": list(entities.dietary_restrictions)},
            )
        )
    if entities.accessibility_required or entities.pet_friendly:
        data = {"accessibilityRequired": bool(entities.accessibility_required), "petFriendly": bool(entities.pet_friendly)}
        candidates.append((WidgetKind.MUST_HAVES, "accessibility" if entities.accessibility_required else "pet", data))
    if entities.interests:
        candidates.append(
            (WidgetKind.PREFERENCE_INTERESTS, ", ".join(entities.interests), {"interests": list(entities.interests)})
        )
    if entities.budget_level:
        candidates.append((WidgetKind.PREFERENCE_STYLE, entities.budget_level, {"budgetLevel": entities.budget_level}))
    return candidates


class UnifiedRouter:
    """
    One routing decision per conversational turn.

    Reads TripMemory and InteractionHistory (both owned by the caller), owns no state besides the last processed
    intent, and mutates only the cooldown tracker (record_shown when a widget is emitted).
    process_intent() is total: every input, including None, yields a RoutingDecision.
    """

    def __init__(
        self,
        memory: TripMemory,
        history: Optional[InteractionHistory] = None,
        cooldown: Optional[WidgetCooldownTracker] = None,
        settings: Optional[RouterSettings] = None,
        prerequisites: Optional[WidgetPrerequisites] = None,
        booster: Optional[ConfidenceBooster] = None,
        on_widget_triggered: Optional[OnWidgetTriggered] = None,
        on_search_triggered: Optional[OnSearchTriggered] = None,
        on_delegate_choice: Optional[OnDelegateChoice] = None,
        record_shown: bool = True,
    ) -> None:
        # Key line: dependencies are injectable for testing.
        self.settings = settings or RouterSettings()
        self.memory = memory
        self.history = history if history is not None else InteractionHistory()
        self.cooldown = cooldown if cooldown is not None else WidgetCooldownTracker(self.settings)
        self.prerequisites = prerequisites or WidgetPrerequisites()
        self.booster = booster or ConfidenceBooster(self.settings)
        self.provided = ProvidedDataDetector(self.history)
        self.on_widget_triggered = on_widget_triggered
        self.on_search_triggered = on_search_triggered
        self.on_delegate_choice = on_delegate_choice
        self.record_shown = record_shown
        self.last_intent: Optional[ClassifiedIntent] = None

    # ---- read-only queries ----

    @property
    def flow_state(self) -> FlowState:
        # Recomputed on every access: memory may change between turns.
        return compute_flow_state(self.memory)

    def can_show_widget(self, kind: WidgetKind) -> WidgetValidation:
        return self.prerequisites.validate(kind, self.flow_state)

    def get_next_required_widget(self) -> Optional[WidgetKind]:
        # Priority order, first unmet-and-not-already-provided wins:
        # city -> dates -> return date (roundtrip) -> travelers -> trip type -> pre-search confirmation
        flow = self.flow_state
        steps = [
            (not flow.has_destination_city, WidgetKind.CITY_SELECTOR),
            (not flow.has_departure_date, _dates_widget(flow)),
            (
                flow.trip_type == TripType.ROUNDTRIP and flow.has_departure_date and not flow.has_return_date,
                WidgetKind.RETURN_DATE_PICKER,
            ),
            (not flow.has_travelers, WidgetKind.TRAVELERS_SELECTOR),
            (not flow.has_trip_type, WidgetKind.TRIP_TYPE_CONFIRM),
            (flow.is_ready_to_search, WidgetKind.TRAVELERS_CONFIRM_BEFORE_SEARCH),
        ]
        for unmet, kind in steps:
            if unmet and not self.provided.has_already_provided(kind):
                return kind
        return None

    def unavailable_reason(self, kind: WidgetKind) -> Optional[str]:
        # Role: why a prerequisite-valid widget must still not be shown right now (None == showable).
        if self.provided.has_already_provided(kind):
            return "already_provided"

        blocked = self.cooldown.block_reason(kind)
        if blocked is not None:
            return blocked.value

        behavior = infer_user_behavior(self.history, self.settings)
        if not should_offer_widget(kind, behavior):
            return "expert_user"

        return None

    # ---- decision ----

    def process_intent(
        self,
        intent: Optional[ClassifiedIntent],
        last_user_message: Optional[str] = None,
        last_assistant_message: Optional[str] = None,
    ) -> RoutingDecision:
        # 1) No intent -> nothing
        # 2) Confidence reconciliation: undecided -> delegate; low and clarify-worthy -> clarify
        # 3) Special actions: search / delegate
        # 4) Classifier-declared widget (validated, with fallbacks)
        # 5) Preference keyword / entity override
        # 6) Widget-triggering intents -> intent focus, then next required widget
        # 7) Otherwise nothing
        self.last_intent = intent

        if intent is None:
            return RoutingDecision.nothing()

        boost = self.booster.boost(intent, last_user_message, last_assistant_message)
        primary = intent.primary_intent

        if config.DEBUG:
            print(
                "[ROUTER] intent:", primary.value,
                "confidence:", intent.confidence,
                "boosted:", boost.boosted_confidence,
                "lang:", boost.detected_language,
            )

        if boost.suggested_intent == IntentType.DELEGATE_CHOICE:
            self._fire_delegate(intent)
            return RoutingDecision(action=RouteAction.DELEGATE, reason="User is undecided")

        if boost.boosted_confidence < self.settings.confidence_low and boost.should_clarify:
            question = intent.clarification_question or GENERIC_CLARIFICATION.get(
                boost.detected_language, GENERIC_CLARIFICATION[FRENCH]
            )
            return RoutingDecision(action=RouteAction.CLARIFY, reason=question)

        if primary == IntentType.TRIGGER_SEARCH:
            self._fire(self.on_search_triggered)
            return RoutingDecision(action=RouteAction.SEARCH)

        if primary == IntentType.DELEGATE_CHOICE:
            self._fire_delegate(intent)
            return RoutingDecision(action=RouteAction.DELEGATE)

        if intent.widget_to_show is not None:
            decision = self._route_declared_widget(intent.widget_to_show)
            if decision is not None:
                return decision

        if primary in PREFERENCE_INTENTS:
            decision = self._route_preference_override(intent, last_user_message, boost)
            if decision is not None:
                return decision

        if primary in WIDGET_TRIGGERING_INTENTS:
            return self._route_required_widget(intent)

        return RoutingDecision.nothing()

    def _route_declared_widget(self, suggestion: WidgetSuggestion) -> Optional[RoutingDecision]:
        kind = suggestion.kind
        validation = self.can_show_widget(kind)

        if validation.valid:
            blocked = self.unavailable_reason(kind)
            if blocked is None:
                return self._emit(kind, suggestion.data, suggestion.reason)

            # Valid but rate-limited or already answered: substitute the next required widget if it differs.
            fallback = self.get_next_required_widget()
            if fallback is not None and fallback != kind and self._is_showable(fallback):
                return self._emit(fallback, None, f"{kind.value} blocked: {blocked}")

            if config.DEBUG:
                print("[ROUTER] declared widget blocked:", kind.value, blocked)
            return None

        # Prerequisites unmet: suggested alternative first, then the next required widget.
        candidates: List[WidgetKind] = []
        if validation.suggested_widget is not None:
            candidates.append(validation.suggested_widget)
        next_required = self.get_next_required_widget()
        if next_required is not None and next_required not in candidates:
            candidates.append(next_required)

        for candidate in candidates:
            if self._is_showable(candidate):
                return self._emit(candidate, None, validation.reason or "Fallback to required widget")

        return None

    def _route_preference_override(
        self,
        intent: ClassifiedIntent,
        last_user_message: Optional[str],
        boost: BoostResult,
    ) -> Optional[RoutingDecision]:
        # Explicit statements ("I'm vegetarian") bypass classifier misses.
        candidates: List[Tuple[WidgetKind, str, Optional[Dict[str, Any]]]] = []

        match = find_preference_keyword(last_user_message, boost.detected_language)
        if match is not None:
            candidates.append((match.widget_kind, match.keyword, None))

        candidates.extend(_entity_preference_candidates(intent))

        for kind, reason, data in candidates:
            if self._is_showable(kind):
                return self._emit(kind, data, reason)

        return None

    def _route_required_widget(self, intent: ClassifiedIntent) -> RoutingDecision:
        flow = self.flow_state
        focus = _intent_focus(intent.primary_intent, flow)
        if focus is not None and self._is_showable(focus):
            return self._emit(focus, _entity_widget_data(intent), f"Next required: {focus.value}")

        next_required = self.get_next_required_widget()
        if next_required is None:
            return RoutingDecision.nothing()

        validation = self.can_show_widget(next_required)
        if not validation.valid:
            return RoutingDecision.nothing(reason=validation.reason)

        blocked = self.unavailable_reason(next_required)
        if blocked is not None:
            return RoutingDecision.nothing(reason=f"{next_required.value} blocked: {blocked}")

        return self._emit(next_required, _entity_widget_data(intent), f"Next required: {next_required.value}")

    # ---- helpers ----

    def _is_showable(self, kind: WidgetKind) -> bool:
        return self.can_show_widget(kind).valid and self.unavailable_reason(kind) is None

    def _emit(self, kind: WidgetKind, data: Optional[Dict[str, Any]], reason: Optional[str]) -> RoutingDecision:
        if self.record_shown:
            self.cooldown.record_shown(kind)

        if self.on_widget_triggered is not None:
            self._fire(self.on_widget_triggered, kind, data)

        if config.DEBUG:
            print("[ROUTER] show widget:", kind.value, "reason:", reason)

        return RoutingDecision.show(kind, data, reason)

    def _fire_delegate(self, intent: ClassifiedIntent) -> None:
        if self.on_delegate_choice is not None:
            self._fire(self.on_delegate_choice, intent)

    def _fire(self, callback: Optional[Callable[..., None]], *args: Any) -> None:
        # Key line: a failing subscriber must not turn a decision into an exception.
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            if config.DEBUG:
                print("[ROUTER] callback error:", repr(e))
