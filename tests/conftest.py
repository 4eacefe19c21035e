"""Shared fixtures for service log tests."""

import pytest


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def valid_fields():
    """A complete, valid set of service log form fields."""
    return {
        "providerId": "P-100",
        "serviceOrder": "SO-2024-001",
        "carId": "X1",
        "odometer": 12500,
        "engineHours": 340.5,
        "startDate": "2024-01-05",
        "endDate": "2024-01-06",
        "type": "planned",
        "serviceDescription": "Oil and filter change",
    }
