# Role: Append-only log of widget interactions (shown / confirmed / dismissed / typed-instead / selections).
# Owned by the session layer; the routing engine reads it for provided-data detection and behavior inference.

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Sequence

from pydantic import BaseModel, Field

from widget_router.models.widget import InteractionType, WidgetKind


class InteractionRecord(BaseModel):
    id: str = Field(default_factory=lambda: f"interaction-{uuid.uuid4().hex[:12]}")
    widget_kind: Optional[WidgetKind] = None
    interaction_type: InteractionType
    payload: Dict[str, Any] = Field(default_factory=dict)
    summary: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class InteractionHistory:
    """
    Append-only sequence of InteractionRecord.

    Records are never rewritten; clear() exists only for session reset.
    """

    def __init__(self, records: Optional[Sequence[InteractionRecord]] = None) -> None:
        self._records: List[InteractionRecord] = list(records or [])

    def append(self, record: InteractionRecord) -> InteractionRecord:
        self._records.append(record)
        return record

    def records(self) -> List[InteractionRecord]:
        # Key line: hand out a copy so callers cannot rewrite history in place.
        return list(self._records)

    def recent(self, count: int) -> List[InteractionRecord]:
        if count <= 0:
            return []
        return list(self._records[-count:])

    def has_any(self, types: Sequence[InteractionType]) -> bool:
        wanted = set(types)
        return any(r.interaction_type in wanted for r in self._records)

    def clear(self) -> None:
        self._records = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[InteractionRecord]:
        return iter(list(self._records))
