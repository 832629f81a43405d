# Role: Derived summary of what trip data is collected. Frozen value object recomputed from TripMemory on
# every access (see core.flow_state.compute_flow_state); never mutated directly.

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from widget_router.models.trip_memory import TripType


class FlowState(BaseModel):
    model_config = ConfigDict(frozen=True)

    has_destination: bool = False
    has_destination_city: bool = False
    has_departure_city: bool = False
    has_departure_date: bool = False
    has_return_date: bool = False
    has_travelers: bool = False
    has_trip_type: bool = False
    trip_type: TripType = TripType.ROUNDTRIP
    is_ready_to_search: bool = False
