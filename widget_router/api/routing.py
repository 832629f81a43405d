# Role: Thin HTTP adapter for the routing endpoint. Validates request/response shapes and delegates the whole turn
# to SessionController (routing logic lives in core, not in the API layer).

from typing import Any, Dict, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from widget_router.api.deps import session_controller
from widget_router.models.decision import RoutingDecision
from widget_router.models.flow_state import FlowState
from widget_router.models.widget import WidgetKind

router = APIRouter(tags=["routing"])


class RouteRequest(BaseModel):
    session_id: str
    # Either the parsed classifier payload or its raw text output (fenced / prose-wrapped JSON is accepted).
    intent: Optional[Dict[str, Any]] = None
    raw_intent: Optional[str] = None
    user_message: Optional[str] = None
    assistant_message: Optional[str] = None


class RouteResponse(BaseModel):
    session_id: str
    decision: RoutingDecision
    flow_state: FlowState
    next_required_widget: Optional[WidgetKind] = None
    turn_count: int


@router.post("/route", response_model=RouteResponse)
def route(req: RouteRequest) -> RouteResponse:
    # 1) Forward the classifier output and the last messages to the orchestrator
    # 2) Return the decision plus the flow state the UI needs to render it
    intent = req.intent if req.intent is not None else req.raw_intent
    result = session_controller.route_turn(
        req.session_id,
        intent,
        user_message=req.user_message,
        assistant_message=req.assistant_message,
    )
    return RouteResponse(
        session_id=result.session_id,
        decision=result.decision,
        flow_state=result.flow_state,
        next_required_widget=result.next_required_widget,
        turn_count=result.turn_count,
    )
