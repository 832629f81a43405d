# Role: Per-session state container. Holds the evolving TripMemory, the interaction log, the widget cooldown tracker
# and conversation history, plus small flow fields like last_intent and turn_count.

import threading
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from widget_router.core.cooldown import WidgetCooldownTracker
from widget_router.models.intent import ClassifiedIntent
from widget_router.models.interaction import InteractionHistory
from widget_router.models.message import Message
from widget_router.models.trip_memory import TripMemory
from widget_router.models.widget import WidgetKind


class State(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    session_id: str
    trip_memory: TripMemory = Field(default_factory=TripMemory)
    interaction_history: InteractionHistory = Field(default_factory=InteractionHistory)
    conversation_history: List[Message] = Field(default_factory=list)

    # Key line: one tracker per session, so one user's dismissals never block another user's widgets.
    cooldown: WidgetCooldownTracker = Field(default_factory=WidgetCooldownTracker)

    # Key line: last widget the router emitted that the user has not answered yet (typed-instead detection).
    pending_widget: Optional[WidgetKind] = None

    last_intent: Optional[ClassifiedIntent] = None
    turn_count: int = 0

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    _lock: Any = PrivateAttr(default_factory=threading.RLock)

    @property
    def lock(self) -> Any:
        return self._lock

    def last_message(self, role: str) -> Optional[str]:
        for message in reversed(self.conversation_history):
            if message.role == role:
                return message.content
        return None
