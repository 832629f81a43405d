# Role: Single chat message schema for the per-session transcript. The router only needs the last user and
# assistant messages (confidence boosting + keyword overrides), read from State.conversation_history.

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["user", "assistant", "system"]


class Message(BaseModel):
    role: Role
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
