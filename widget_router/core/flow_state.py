# Role: Flow State Computer. Derives the small set of "what do we already know" flags from TripMemory.
# Pure and total: the same memory always yields an equal FlowState, and nothing here can fail.

from __future__ import annotations

from typing import Optional

from widget_router.models.flow_state import FlowState
from widget_router.models.trip_memory import TripMemory, TripType


def compute_flow_state(memory: Optional[TripMemory]) -> FlowState:
    # 1) Read presence flags from memory (absent memory == empty memory)
    # 2) Travelers count only from 1 adult up (the zero-adult default is "not provided")
    # 3) Unset trip type reads as roundtrip, which also drives isReadyToSearch
    memory = memory or TripMemory()

    has_destination = bool(memory.destination_country or memory.destination_country_code)
    has_destination_city = bool(memory.destination_city)
    has_departure_city = bool(memory.departure_city)
    has_departure_date = memory.departure_date is not None
    has_return_date = memory.return_date is not None
    has_travelers = (memory.passengers.adults or 0) >= 1
    has_trip_type = memory.trip_type is not None
    trip_type = memory.trip_type or TripType.ROUNDTRIP

    is_ready_to_search = (
        has_destination_city
        and has_departure_date
        and (trip_type == TripType.ONEWAY or has_return_date)
        and has_travelers
    )

    return FlowState(
        has_destination=has_destination,
        has_destination_city=has_destination_city,
        has_departure_city=has_departure_city,
        has_departure_date=has_departure_date,
        has_return_date=has_return_date,
        has_travelers=has_travelers,
        has_trip_type=has_trip_type,
        trip_type=trip_type,
        is_ready_to_search=is_ready_to_search,
    )
