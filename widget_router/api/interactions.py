# Role: HTTP adapter for widget interaction reports (shown / confirmed / dismissed / typed-instead / selections).
# The UI calls this after acting on a decision; history, cooldowns and trip memory are updated in core.

from typing import Any, Dict, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from widget_router.api.deps import session_controller
from widget_router.models.interaction import InteractionRecord
from widget_router.models.widget import InteractionType, WidgetKind

router = APIRouter(tags=["interactions"])


class InteractionRequest(BaseModel):
    session_id: str
    interaction_type: InteractionType
    widget_kind: Optional[WidgetKind] = None
    payload: Dict[str, Any] = Field(default_factory=dict)
    summary: Optional[str] = None
    language: str = "fr"


class InteractionResponse(BaseModel):
    session_id: str
    record: InteractionRecord


@router.post("/interactions", response_model=InteractionResponse)
def record_interaction(req: InteractionRequest) -> InteractionResponse:
    record = session_controller.record_interaction(
        req.session_id,
        req.interaction_type,
        widget_kind=req.widget_kind,
        payload=req.payload,
        summary=req.summary,
        language=req.language,
    )
    return InteractionResponse(session_id=req.session_id, record=record)
