# Role: Accumulated trip memory (destination, dates, travelers, trip type). The routing engine only reads it;
# apply_updates() merges classifier entities or UI edits into it the same tolerant way for every caller.

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class TripType(str, Enum):
    ROUNDTRIP = "roundtrip"
    ONEWAY = "oneway"
    MULTI = "multi"


class Passengers(BaseModel):
    adults: int = 0
    children: int = 0
    infants: int = 0


class TripMemory(BaseModel):
    destination_city: Optional[str] = None
    destination_country: Optional[str] = None
    destination_country_code: Optional[str] = None
    departure_city: Optional[str] = None

    departure_date: Optional[date] = None
    return_date: Optional[date] = None

    passengers: Passengers = Field(default_factory=Passengers)
    trip_type: Optional[TripType] = None

    def apply_updates(self, updates: Dict[str, Any]) -> None:
        # 1) Ignore empty updates
        # 2) Normalize/validate types (strip strings, parse ISO dates, non-negative counts)
        # 3) Unknown keys and malformed values are skipped, never fatal
        if not updates:
            return

        for field in ("destination_city", "destination_country", "departure_city"):
            value = updates.get(field)
            if isinstance(value, str) and value.strip():
                setattr(self, field, value.strip())

        code = updates.get("destination_country_code")
        if isinstance(code, str) and code.strip():
            self.destination_country_code = code.strip().upper()

        for field in ("departure_date", "return_date"):
            value = updates.get(field)
            if isinstance(value, date):
                setattr(self, field, value)
            elif isinstance(value, str) and value.strip():
                try:
                    setattr(self, field, date.fromisoformat(value.strip()[:10]))
                except ValueError:
                    continue

        for field in ("adults", "children", "infants"):
            value = updates.get(field)
            if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
                setattr(self.passengers, field, value)

        trip_type = updates.get("trip_type")
        if isinstance(trip_type, str) and trip_type.strip().lower() in {t.value for t in TripType}:
            self.trip_type = TripType(trip_type.strip().lower())
