# Role: Cooldown Tracker. Prevents widget loops by remembering, per widget kind, when it was last shown and how the
# user reacted (confirmed / dismissed / typed instead). The only component allowed to mutate its records.

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

import widget_router.config as config
from widget_router.config import RouterSettings
from widget_router.models.widget import WidgetKind

Clock = Callable[[], float]


class BlockReason(str, Enum):
    ALREADY_CONFIRMED = "already_confirmed"
    MAX_ATTEMPTS = "max_attempts"
    USER_PREFERS_TYPING = "user_prefers_typing"
    COOLDOWN = "cooldown"


_REASON_LABELS = {
    "fr": {
        BlockReason.ALREADY_CONFIRMED: "déjà confirmé",
        BlockReason.MAX_ATTEMPTS: "limite atteinte",
        BlockReason.USER_PREFERS_TYPING: "utilisateur préfère taper",
        BlockReason.COOLDOWN: "cooldown",
    },
    "en": {
        BlockReason.ALREADY_CONFIRMED: "already confirmed",
        BlockReason.MAX_ATTEMPTS: "attempt limit reached",
        BlockReason.USER_PREFERS_TYPING: "user prefers typing",
        BlockReason.COOLDOWN: "cooldown",
    },
}

_CONTEXT_HEADERS = {
    "fr": "[WIDGETS BLOQUÉS - NE PAS RE-PROPOSER]",
    "en": "[BLOCKED WIDGETS - DO NOT RE-OFFER]",
}


@dataclass
class CooldownRecord:
    widget_kind: WidgetKind
    shown_at: float
    confirmed: bool = False
    dismissed: bool = False
    user_typed_instead: bool = False
    attempts: int = 1


@dataclass(frozen=True)
class _LastShown:
    kind: WidgetKind
    shown_at: float


class WidgetCooldownTracker:
    """
    Per-widget-kind state machine: never-shown -> shown -> {confirmed | dismissed | typed-instead} -> shown ...

    can_show() and block_reason() share one precedence order:
    already_confirmed > max_attempts > user_prefers_typing > cooldown.
    Every public method is atomic under an internal lock.
    """

    def __init__(self, settings: Optional[RouterSettings] = None, clock: Optional[Clock] = None) -> None:
        self.settings = settings or RouterSettings()
        self._clock = clock or time.monotonic
        self._records: Dict[WidgetKind, CooldownRecord] = {}
        self._last_shown: Optional[_LastShown] = None
        self._lock = threading.RLock()

    # ---- queries ----

    def block_reason(self, kind: WidgetKind) -> Optional[BlockReason]:
        with self._lock:
            record = self._records.get(kind)
            if record is None:
                return None

            if record.confirmed:
                return BlockReason.ALREADY_CONFIRMED

            if record.attempts >= self.settings.max_attempts:
                return BlockReason.MAX_ATTEMPTS

            elapsed = self._clock() - record.shown_at

            if record.user_typed_instead and elapsed < self.settings.typed_penalty_seconds:
                return BlockReason.USER_PREFERS_TYPING

            if elapsed < self.settings.standard_cooldown_seconds:
                return BlockReason.COOLDOWN

            return None

    def can_show(self, kind: WidgetKind) -> bool:
        return self.block_reason(kind) is None

    def get_record(self, kind: WidgetKind) -> Optional[CooldownRecord]:
        with self._lock:
            record = self._records.get(kind)
            if record is None:
                return None
            # Key line: return a snapshot, the live record stays private.
            return CooldownRecord(**record.__dict__)

    def attempt_count(self, kind: WidgetKind) -> int:
        with self._lock:
            record = self._records.get(kind)
            return record.attempts if record else 0

    def blocked_widgets(self) -> List[WidgetKind]:
        with self._lock:
            return [kind for kind in self._records if not self.can_show(kind)]

    def context_for_llm(self, language: str = "fr") -> str:
        # Role: diagnostic block listing blocked widgets with their precedence-ordered reason.
        labels = _REASON_LABELS.get(language, _REASON_LABELS["fr"])
        header = _CONTEXT_HEADERS.get(language, _CONTEXT_HEADERS["fr"])

        with self._lock:
            entries: List[str] = []
            for kind in self._records:
                reason = self.block_reason(kind)
                if reason is not None:
                    entries.append(f"{kind.value} ({labels[reason]})")

        if not entries:
            return ""
        return f"{header}\n{', '.join(entries)}"

    # ---- transitions ----

    def record_shown(self, kind: WidgetKind) -> None:
        # 1) attempts += 1 (monotonic until reset)
        # 2) confirmed / typed-instead reset, dismissed preserved
        # 3) last-shown pointer moves to this kind
        with self._lock:
            now = self._clock()
            existing = self._records.get(kind)
            self._records[kind] = CooldownRecord(
                widget_kind=kind,
                shown_at=now,
                confirmed=False,
                dismissed=existing.dismissed if existing else False,
                user_typed_instead=False,
                attempts=(existing.attempts if existing else 0) + 1,
            )
            self._last_shown = _LastShown(kind=kind, shown_at=now)
            attempts = self._records[kind].attempts

        if config.DEBUG:
            print("[COOLDOWN] shown:", kind.value, "attempts:", attempts)

    def record_confirmed(self, kind: WidgetKind) -> bool:
        return self._set_flag(kind, "confirmed")

    def record_dismissed(self, kind: WidgetKind) -> bool:
        return self._set_flag(kind, "dismissed")

    def record_typed_instead(self, kind: WidgetKind) -> bool:
        # Only counts when the user typed right after this very widget was shown.
        with self._lock:
            last = self._last_shown
            if last is None or last.kind != kind:
                if config.DEBUG:
                    print("[COOLDOWN] typed-instead ignored (not the last shown widget):", kind.value)
                return False

            if self._clock() - last.shown_at >= self.settings.typed_instead_window_seconds:
                if config.DEBUG:
                    print("[COOLDOWN] typed-instead ignored (outside window):", kind.value)
                return False

            return self._set_flag(kind, "user_typed_instead")

    def reset(self) -> None:
        with self._lock:
            self._records = {}
            self._last_shown = None

        if config.DEBUG:
            print("[COOLDOWN] reset")

    def _set_flag(self, kind: WidgetKind, flag: str) -> bool:
        # Key line: a transition on a never-shown widget is a logged no-op, not an error.
        with self._lock:
            record = self._records.get(kind)
            if record is None:
                if config.DEBUG:
                    print(f"[COOLDOWN] {flag} ignored (never shown):", kind.value)
                return False
            setattr(record, flag, True)

        if config.DEBUG:
            print(f"[COOLDOWN] {flag}:", kind.value)
        return True
