# Role: In-memory session store. Owns lifecycle of State objects:
# create/get by session_id, append messages, enforce bounded history, reset and cleanup expired sessions.

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from widget_router.config import RouterSettings
from widget_router.core.cooldown import Clock, WidgetCooldownTracker
from widget_router.models.message import Message
from widget_router.models.state import State


class StateManager:
    def __init__(
        self,
        max_history_messages: int = 12,
        session_ttl_minutes: int = 60,
        settings: Optional[RouterSettings] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._states: Dict[str, State] = {}
        self._max_history_messages = max_history_messages
        self._ttl = timedelta(minutes=session_ttl_minutes)
        self._settings = settings or RouterSettings()
        self._clock = clock
        self._lock = threading.Lock()

    def get(self, session_id: str) -> Optional[State]:
        with self._lock:
            return self._states.get(session_id)

    def get_or_create(self, session_id: str) -> State:
        # Reuse existing state or initialize a fresh one.
        with self._lock:
            state = self._states.get(session_id)
            if state is None:
                state = State(session_id=session_id, cooldown=self._new_tracker())
                self._states[session_id] = state
            return state

    def add_message(self, session_id: str, role: str, content: str) -> State:
        # 1) Append message
        # 2) Update last-seen timestamp
        # 3) Trim to last N messages
        state = self.get_or_create(session_id)
        state.conversation_history.append(Message(role=role, content=content))
        state.updated_at = datetime.now(timezone.utc)

        if len(state.conversation_history) > self._max_history_messages:
            state.conversation_history = state.conversation_history[-self._max_history_messages :]

        return state

    def increment_turn(self, state: State) -> None:
        state.turn_count += 1
        state.updated_at = datetime.now(timezone.utc)

    def reset(self, session_id: str) -> State:
        # Key line: a reset keeps the session id but forgets memory, interactions, cooldowns and messages.
        with self._lock:
            state = State(session_id=session_id, cooldown=self._new_tracker())
            self._states[session_id] = state
            return state

    def cleanup_expired(self) -> int:
        # Role: drop inactive sessions to avoid unbounded growth.
        now = datetime.now(timezone.utc)
        with self._lock:
            to_delete = [sid for sid, st in self._states.items() if (now - st.updated_at) > self._ttl]
            for sid in to_delete:
                del self._states[sid]
        return len(to_delete)

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)

    def _new_tracker(self) -> WidgetCooldownTracker:
        return WidgetCooldownTracker(self._settings, clock=self._clock)
