from datetime import date

import pytest

from widget_router.config import RouterSettings
from widget_router.core.cooldown import WidgetCooldownTracker
from widget_router.models.intent import ClassifiedIntent
from widget_router.models.interaction import InteractionHistory
from widget_router.models.trip_memory import Passengers, TripMemory, TripType


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_intent(primary: str, confidence: float = 90, **fields) -> ClassifiedIntent:
    payload = {"primaryIntent": primary, "confidence": confidence}
    payload.update(fields)
    intent = ClassifiedIntent.from_payload(payload)
    assert intent is not None
    return intent


def ready_memory(**overrides) -> TripMemory:
    memory = TripMemory(
        destination_city="Lisbon",
        destination_country="Portugal",
        departure_date=date(2026, 7, 1),
        return_date=date(2026, 7, 10),
        passengers=Passengers(adults=2),
        trip_type=TripType.ROUNDTRIP,
    )
    for key, value in overrides.items():
        setattr(memory, key, value)
    return memory


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> RouterSettings:
    return RouterSettings()


@pytest.fixture
def tracker(settings, clock) -> WidgetCooldownTracker:
    return WidgetCooldownTracker(settings, clock=clock)


@pytest.fixture
def history() -> InteractionHistory:
    return InteractionHistory()
