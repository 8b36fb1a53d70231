import asyncio
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from vitrina.models import ListingType, Property, PropertyType, ScoredProperty
from vitrina.providers.base import BaseProvider

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

_ids = count(1)


def make_property(**overrides) -> Property:
    """Property con valores por defecto razonables; `age_days` fija date_added."""
    age_days = overrides.pop("age_days", 10)
    index = next(_ids)
    data = {
        "id": f"test-{index}",
        "source": "test",
        "address": f"{index} Main St",
        "city": "Columbus",
        "state": "OH",
        "listing_type": ListingType.BUY,
        "price": 300_000.0,
        "bedrooms": 3,
        "bathrooms": 2.0,
        "property_type": PropertyType.HOUSE,
        "date_added": NOW - timedelta(days=age_days),
    }
    data.update(overrides)
    return Property(**data)


def make_scored(score: int = 50, **overrides) -> ScoredProperty:
    return ScoredProperty(listing=make_property(**overrides), score=score)


@pytest.fixture
def now() -> datetime:
    return NOW


class FakeClock:
    """Reloj monotónico manual para el cache."""

    def __init__(self, start: float = 1000.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class FakeProvider(BaseProvider):
    """Proveedor en memoria: devuelve `properties`, tarda `delay` o lanza `error`."""

    def __init__(self, name, properties=None, delay=0.0, error=None):
        self.SOURCE_NAME = name
        self.properties = properties or []
        self.delay = delay
        self.error = error
        self.calls = 0

    async def fetch(self, criteria):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.properties)


def fake_synthetic(count: int = 3) -> FakeProvider:
    return FakeProvider("synthetic", [make_property(source="synthetic") for _ in range(count)])
