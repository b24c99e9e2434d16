from __future__ import annotations
import pytest

from policysim.config import Config
from policysim.data import COUNTRY_NAMES, create_default_decisions
from policysim.state import IndicatorSnapshot


class FixedRng:
    """Returns the same draw every call; uniform() maps it onto [low, high)."""

    def __init__(self, value: float = 0.5):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value

    def uniform(self, low, high):
        self.calls += 1
        return low + (high - low) * self.value


@pytest.fixture
def snapshot() -> IndicatorSnapshot:
    return IndicatorSnapshot(
        country="Testland", year=2023,
        gdp_growth=5.0, unemployment=8.0, literacy_rate=60.0,
        education_spending=4.0, health_expenditure=3.0, infrastructure_investment=5.0,
        poverty_rate=25.0, life_expectancy=65.0, co2_emissions=1.2,
        infant_mortality=30.0, population=50_000_000,
    )


@pytest.fixture
def decisions():
    return create_default_decisions()


@pytest.fixture
def cfg() -> Config:
    return Config(countries=list(COUNTRY_NAMES))


@pytest.fixture
def zero_rng() -> FixedRng:
    # uniform(-j, j) at the midpoint is exactly 0
    return FixedRng(0.5)


def set_value(decisions, decision_id, value):
    return [d.with_value(value) if d.id == decision_id else d for d in decisions]
