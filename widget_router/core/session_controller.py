# Role: Orchestrator for one conversation turn and for widget interaction reports. It glues together:
# session state, classifier output parsing, trip memory updates, the unified router and the cooldown tracker.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

import widget_router.config as config
from widget_router.config import RouterSettings
from widget_router.core.cooldown import BlockReason
from widget_router.core.router import OnDelegateChoice, OnSearchTriggered, OnWidgetTriggered, UnifiedRouter
from widget_router.core.state_manager import StateManager
from widget_router.models.decision import RoutingDecision
from widget_router.models.flow_state import FlowState
from widget_router.models.intent import ClassifiedIntent
from widget_router.models.interaction import InteractionRecord
from widget_router.models.state import State
from widget_router.models.widget import InteractionType, LIFECYCLE_TYPES, WidgetKind, WidgetValidation
from widget_router.utils.interaction_summary import build_record, context_for_llm, recent_summary
from widget_router.utils.intent_parser import parse_intent_payload
from widget_router.utils.message_analyzer import FRENCH, detect_language

# Selection tag -> widget it completes (used when the UI reports a selection without naming the widget).
SELECTION_WIDGETS: Dict[InteractionType, WidgetKind] = {
    InteractionType.DATE_SELECTED: WidgetKind.DATE_PICKER,
    InteractionType.DATE_RANGE_SELECTED: WidgetKind.DATE_RANGE_PICKER,
    InteractionType.TRAVELERS_SELECTED: WidgetKind.TRAVELERS_SELECTOR,
    InteractionType.TRIP_TYPE_SELECTED: WidgetKind.TRIP_TYPE_CONFIRM,
    InteractionType.CITY_SELECTED: WidgetKind.CITY_SELECTOR,
    InteractionType.AIRPORT_SELECTED: WidgetKind.AIRPORT_CONFIRMATION,
    InteractionType.STYLE_CONFIGURED: WidgetKind.PREFERENCE_STYLE,
    InteractionType.INTERESTS_SELECTED: WidgetKind.PREFERENCE_INTERESTS,
    InteractionType.MUST_HAVES_CONFIGURED: WidgetKind.MUST_HAVES,
    InteractionType.DIETARY_CONFIGURED: WidgetKind.DIETARY,
    InteractionType.DESTINATION_SELECTED: WidgetKind.DESTINATION_SUGGESTIONS,
    InteractionType.QUICK_FILTER_APPLIED: WidgetKind.QUICK_FILTER_CHIPS,
}

def selection_widget(interaction_type: InteractionType, payload: Mapping[str, Any]) -> Optional[WidgetKind]:
    # Key line: a single date tagged which="return" completes the return-date step, not the departure picker.
    if interaction_type == InteractionType.DATE_SELECTED and payload.get("which") == "return":
        return WidgetKind.RETURN_DATE_PICKER
    return SELECTION_WIDGETS.get(interaction_type)


IntentInput = Union[ClassifiedIntent, Mapping[str, Any], str, None]


@dataclass(frozen=True)
class TurnResult:
    session_id: str
    decision: RoutingDecision
    flow_state: FlowState
    next_required_widget: Optional[WidgetKind]
    turn_count: int


def _memory_updates_from_selection(interaction_type: InteractionType, payload: Mapping[str, Any]) -> Dict[str, Any]:
    # Role: a widget selection is data the user supplied, so TripMemory catches up immediately.
    if interaction_type == InteractionType.DATE_SELECTED:
        field = "return_date" if payload.get("which") == "return" else "departure_date"
        return {field: payload.get("date")}

    if interaction_type == InteractionType.DATE_RANGE_SELECTED:
        return {"departure_date": payload.get("departureDate"), "return_date": payload.get("returnDate")}

    if interaction_type == InteractionType.TRAVELERS_SELECTED:
        return {k: payload.get(k) for k in ("adults", "children", "infants")}

    if interaction_type == InteractionType.TRIP_TYPE_SELECTED:
        return {"trip_type": payload.get("tripType")}

    if interaction_type == InteractionType.CITY_SELECTED:
        return {
            "destination_city": payload.get("city"),
            "destination_country": payload.get("country"),
            "destination_country_code": payload.get("countryCode"),
        }

    return {}


class SessionController:
    def __init__(
        self,
        state_manager: Optional[StateManager] = None,
        settings: Optional[RouterSettings] = None,
        on_widget_triggered: Optional[OnWidgetTriggered] = None,
        on_search_triggered: Optional[OnSearchTriggered] = None,
        on_delegate_choice: Optional[OnDelegateChoice] = None,
    ) -> None:
        # Key line: dependencies are injectable for testing.
        self.settings = settings or RouterSettings()
        self.state_manager = state_manager if state_manager is not None else StateManager(settings=self.settings)
        self.on_widget_triggered = on_widget_triggered
        self.on_search_triggered = on_search_triggered
        self.on_delegate_choice = on_delegate_choice

    def router_for(self, state: State) -> UnifiedRouter:
        # Routers are cheap views over session state; build one per call.
        return UnifiedRouter(
            memory=state.trip_memory,
            history=state.interaction_history,
            cooldown=state.cooldown,
            settings=self.settings,
            on_widget_triggered=self.on_widget_triggered,
            on_search_triggered=self.on_search_triggered,
            on_delegate_choice=self.on_delegate_choice,
        )

    def route_turn(
        self,
        session_id: str,
        intent: IntentInput,
        user_message: Optional[str] = None,
        assistant_message: Optional[str] = None,
    ) -> TurnResult:
        # 1) Load state; persist messages (assistant question first, then the user's reply)
        # 2) Typing while a widget is pending counts as typed-instead (window enforced by the tracker)
        # 3) Parse the classifier output and merge its entities into TripMemory
        # 4) Route; remember the emitted widget as pending
        state = self.state_manager.get_or_create(session_id)

        with state.lock:
            if assistant_message:
                self.state_manager.add_message(session_id, role="assistant", content=assistant_message)
            if user_message:
                self.state_manager.add_message(session_id, role="user", content=user_message)
                self._detect_typed_instead(state, user_message)

            classified = self._coerce_intent(intent)
            if classified is not None:
                state.trip_memory.apply_updates(classified.entities.to_memory_updates())

            router = self.router_for(state)
            decision = router.process_intent(
                classified,
                last_user_message=user_message if user_message is not None else state.last_message("user"),
                last_assistant_message=(
                    assistant_message if assistant_message is not None else state.last_message("assistant")
                ),
            )

            state.last_intent = classified
            if decision.should_show_widget:
                state.pending_widget = decision.widget_kind
            self.state_manager.increment_turn(state)

            if config.DEBUG:
                print("\n--- ROUTING DEBUG ---")
                print("SESSION:", session_id)
                print("USER MESSAGE:", user_message)
                print("INTENT:", classified.primary_intent.value if classified else None)
                print("TURN COUNT:", state.turn_count)
                print("TRIP MEMORY:", state.trip_memory.model_dump(mode="json"))
                print("DECISION:", decision.model_dump(mode="json"))
                print("BLOCKED:", [k.value for k in state.cooldown.blocked_widgets()])
                print("---------------------\n")

            return TurnResult(
                session_id=session_id,
                decision=decision,
                flow_state=router.flow_state,
                next_required_widget=router.get_next_required_widget(),
                turn_count=state.turn_count,
            )

    def record_interaction(
        self,
        session_id: str,
        interaction_type: InteractionType,
        widget_kind: Optional[WidgetKind] = None,
        payload: Optional[Dict[str, Any]] = None,
        summary: Optional[str] = None,
        language: str = FRENCH,
    ) -> InteractionRecord:
        # 1) Resolve the widget (selections name their own widget when the UI omits it)
        # 2) Append to Interaction History
        # 3) Drive the cooldown tracker; selections confirm their widget
        # 4) Selections update TripMemory
        state = self.state_manager.get_or_create(session_id)
        payload = payload or {}

        with state.lock:
            kind = widget_kind or selection_widget(interaction_type, payload)
            record = build_record(kind, interaction_type, payload, summary, language)
            state.interaction_history.append(record)

            if kind is not None:
                self._apply_to_cooldown(state, interaction_type, kind)

            if interaction_type not in LIFECYCLE_TYPES:
                state.trip_memory.apply_updates(_memory_updates_from_selection(interaction_type, payload))

            state.updated_at = record.timestamp
            return record

    def update_memory(self, session_id: str, updates: Dict[str, Any]) -> FlowState:
        state = self.state_manager.get_or_create(session_id)
        with state.lock:
            state.trip_memory.apply_updates(updates)
            return self.router_for(state).flow_state

    def check_widget(self, session_id: str, kind: WidgetKind) -> Dict[str, Any]:
        # Role: read-only "could this widget be shown now?" for manual UI buttons.
        state = self.state_manager.get_or_create(session_id)
        with state.lock:
            router = self.router_for(state)
            validation: WidgetValidation = router.can_show_widget(kind)
            unavailable = router.unavailable_reason(kind)
            return {
                "widget_kind": kind,
                "validation": validation,
                "unavailable_reason": unavailable,
                "can_show": validation.valid and unavailable is None,
                "attempts": state.cooldown.attempt_count(kind),
            }

    def reset_session(self, session_id: str) -> State:
        if config.DEBUG:
            print("[ROUTER] session reset:", session_id)
        return self.state_manager.reset(session_id)

    def snapshot(self, session_id: str) -> Dict[str, Any]:
        state = self.state_manager.get_or_create(session_id)
        with state.lock:
            router = self.router_for(state)
            language = detect_language(state.last_message("user"))
            blocked: Dict[str, Optional[BlockReason]] = {
                kind.value: state.cooldown.block_reason(kind) for kind in state.cooldown.blocked_widgets()
            }
            return {
                "session_id": session_id,
                "turn_count": state.turn_count,
                "trip_memory": state.trip_memory.model_dump(mode="json"),
                "flow_state": router.flow_state.model_dump(mode="json"),
                "next_required_widget": router.get_next_required_widget(),
                "pending_widget": state.pending_widget,
                "last_intent": state.last_intent.primary_intent if state.last_intent else None,
                "blocked_widgets": {k: v.value for k, v in blocked.items() if v is not None},
                "cooldown_context": state.cooldown.context_for_llm(language),
                "interaction_context": context_for_llm(state.interaction_history, self.settings.history_context_size),
                "recent_interactions": recent_summary(state.interaction_history),
                "interactions": [r.model_dump(mode="json") for r in state.interaction_history.records()],
            }

    # ---- internals ----

    def _coerce_intent(self, intent: IntentInput) -> Optional[ClassifiedIntent]:
        if intent is None or isinstance(intent, ClassifiedIntent):
            return intent
        if isinstance(intent, str):
            return parse_intent_payload(intent)
        return ClassifiedIntent.from_payload(dict(intent))

    def _detect_typed_instead(self, state: State, user_message: str) -> None:
        pending = state.pending_widget
        if pending is None or not user_message.strip():
            return

        state.pending_widget = None
        if state.cooldown.record_typed_instead(pending):
            state.interaction_history.append(build_record(pending, InteractionType.TYPED_INSTEAD))

    def _apply_to_cooldown(self, state: State, interaction_type: InteractionType, kind: WidgetKind) -> None:
        if interaction_type == InteractionType.WIDGET_SHOWN:
            # The router already recorded its own emissions; only widgets shown by other means count here.
            if state.pending_widget != kind:
                state.cooldown.record_shown(kind)
                state.pending_widget = kind
            return

        if interaction_type == InteractionType.WIDGET_DISMISSED:
            state.cooldown.record_dismissed(kind)
        elif interaction_type == InteractionType.TYPED_INSTEAD:
            state.cooldown.record_typed_instead(kind)
        else:
            # widget_confirmed and every selection type settle the widget.
            state.cooldown.record_confirmed(kind)

        if state.pending_widget == kind:
            state.pending_widget = None
