# Role: Small typed contract for one routing decision. RoutingDecision is the output of UnifiedRouter and drives the
# rendering layer: show widget X with data Y, or run search / delegate / clarify, or do nothing.

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, model_validator

from widget_router.models.widget import WidgetKind


class RouteAction(str, Enum):
    SEARCH = "search"
    DELEGATE = "delegate"
    CLARIFY = "clarify"
    NONE = "none"


class RoutingDecision(BaseModel):
    should_show_widget: bool = False
    widget_kind: Optional[WidgetKind] = None
    widget_data: Optional[Dict[str, Any]] = None
    action: RouteAction = RouteAction.NONE
    reason: Optional[str] = None

    @model_validator(mode="after")
    def _check_widget_or_action(self):
        # A widget decision carries action=none; a non-none action never carries a widget.
        if self.should_show_widget and self.widget_kind is None:
            raise ValueError("widget_kind is required when should_show_widget=True")

        if self.widget_kind is not None:
            if not self.should_show_widget:
                raise ValueError("widget_kind must be None unless should_show_widget=True")
            if self.action != RouteAction.NONE:
                raise ValueError("widget_kind must be None unless action=none")

        if self.widget_data is not None and self.widget_kind is None:
            raise ValueError("widget_data must be None unless a widget is shown")

        # Key line: clarification must always carry a user-facing prompt.
        if self.action == RouteAction.CLARIFY and not (self.reason or "").strip():
            raise ValueError("reason is required when action=clarify")

        return self

    @classmethod
    def nothing(cls, reason: Optional[str] = None) -> "RoutingDecision":
        return cls(action=RouteAction.NONE, reason=reason)

    @classmethod
    def show(
        cls,
        kind: WidgetKind,
        data: Optional[Dict[str, Any]] = None,
        reason: Optional[str] = None,
    ) -> "RoutingDecision":
        return cls(should_show_widget=True, widget_kind=kind, widget_data=data or None, reason=reason)
