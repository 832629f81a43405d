# Role: Session state endpoints for the UI: read-only snapshot and widget availability, plus the two explicit
# writes the UI owns (manual trip-memory edits and session reset).

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from widget_router.api.deps import session_controller
from widget_router.models.flow_state import FlowState
from widget_router.models.widget import WidgetKind, WidgetValidation

router = APIRouter(tags=["state"])


class StateSnapshot(BaseModel):
    session_id: str
    turn_count: int
    trip_memory: dict
    flow_state: FlowState
    next_required_widget: Optional[WidgetKind] = None
    pending_widget: Optional[WidgetKind] = None
    last_intent: str | None
    blocked_widgets: Dict[str, str]
    cooldown_context: str
    interaction_context: str
    recent_interactions: str
    interactions: List[dict]


class WidgetAvailability(BaseModel):
    widget_kind: WidgetKind
    validation: WidgetValidation
    unavailable_reason: Optional[str] = None
    can_show: bool
    attempts: int


class ResetResponse(BaseModel):
    session_id: str
    reset: bool


@router.get("/state/{session_id}", response_model=StateSnapshot)
def get_state(session_id: str) -> StateSnapshot:
    snapshot = session_controller.snapshot(session_id)
    last_intent = snapshot.pop("last_intent")
    return StateSnapshot(last_intent=last_intent.value if last_intent else None, **snapshot)


@router.put("/memory/{session_id}", response_model=FlowState)
def update_memory(session_id: str, updates: Dict[str, Any]) -> FlowState:
    # Unknown keys and malformed values are skipped by TripMemory.apply_updates().
    return session_controller.update_memory(session_id, updates)


@router.get("/widgets/{session_id}/{kind}", response_model=WidgetAvailability)
def get_widget(session_id: str, kind: str) -> WidgetAvailability:
    parsed = WidgetKind.parse(kind)
    if parsed is None:
        raise HTTPException(status_code=404, detail=f"Unknown widget kind: {kind}")
    return WidgetAvailability(**session_controller.check_widget(session_id, parsed))


@router.post("/session/{session_id}/reset", response_model=ResetResponse)
def reset_session(session_id: str) -> ResetResponse:
    session_controller.reset_session(session_id)
    return ResetResponse(session_id=session_id, reset=True)
