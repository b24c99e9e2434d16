# policysim/config.py
from __future__ import annotations
import dataclasses as dc
from dataclasses import dataclass, field as dc_field
from typing import Dict, List, Optional, Tuple

from .constants import Lever, SpilloverType, Timeframe


@dataclass
class Sensitivities:
    # --- Lever -> indicator multipliers (per unit of delta) ---
    # Stock levers (education/health/infrastructure) measure delta in % GDP points
    # against last year's stored value. Flow levers use a fixed baseline below.
    table: Dict[Lever, Dict[str, float]] = dc_field(default_factory=lambda: {
        Lever.EDUCATION:      {"literacy_rate": 1.2, "gdp_growth": 0.18, "unemployment": -0.25},
        Lever.HEALTH:         {"life_expectancy": 0.6, "infant_mortality": -2.5, "gdp_growth": 0.12},
        Lever.INFRASTRUCTURE: {"gdp_growth": 0.25, "unemployment": -0.15, "poverty_rate": -0.3},
        Lever.AGRICULTURE:    {"poverty_rate": -0.4, "gdp_growth": 0.08, "unemployment": -0.1},
        Lever.MANUFACTURING:  {"gdp_growth": 0.2, "unemployment": -0.3, "co2_emissions": 0.04},
        Lever.SERVICES:       {"gdp_growth": 0.15, "unemployment": -0.2},
        Lever.ENERGY:         {"gdp_growth": 0.1, "co2_emissions": 0.03},
        Lever.TECHNOLOGY:     {"gdp_growth": 0.3, "unemployment": -0.1},
        Lever.ENVIRONMENT:    {"gdp_growth": -0.08},   # short-term cost of abatement
        Lever.TRADE:          {"gdp_growth": 0.12, "unemployment": -0.1},
        Lever.TARIFF:         {"gdp_growth": -0.08, "unemployment": 0.05, "poverty_rate": 0.1},
        Lever.COOPERATION:    {"gdp_growth": 0.06},
    })

    # Fixed reference for flow levers (equal to the published slider defaults)
    baselines: Dict[Lever, float] = dc_field(default_factory=lambda: {
        Lever.ENVIRONMENT: 2.0, Lever.TRADE: 50.0, Lever.TARIFF: 15.0, Lever.COOPERATION: 50.0,
        Lever.AGRICULTURE: 3.5, Lever.MANUFACTURING: 2.0, Lever.SERVICES: 1.5,
        Lever.ENERGY: 4.0, Lever.TECHNOLOGY: 1.0,
    })

    # Percentage-scale levers are normalised to fractions
    scale: Dict[Lever, float] = dc_field(default_factory=lambda: {
        Lever.TRADE: 0.01, Lever.TARIFF: 0.01, Lever.COOPERATION: 0.01,
    })

    # Environment: co2 *= (1 - delta * env_co2_factor)
    env_co2_factor: float = 0.05
    # Cooperation: shared projects, applied after the stock fields are overwritten
    coop_infrastructure: float = 0.3

    # Incoming spillover -> indicator multipliers
    spillover_table: Dict[SpilloverType, Dict[str, float]] = dc_field(default_factory=lambda: {
        SpilloverType.TRADE_GDP:      {"gdp_growth": 1.0},
        SpilloverType.INFRASTRUCTURE: {"infrastructure_investment": 1.0, "gdp_growth": 0.1},
        SpilloverType.ENVIRONMENT:    {"co2_emissions": 1.0},
        SpilloverType.MANUFACTURING:  {"gdp_growth": 0.5, "unemployment": -0.3},
        SpilloverType.TECHNOLOGY:     {"gdp_growth": 0.4},
        SpilloverType.ENERGY:         {"gdp_growth": 0.3},
    })

    def scale_of(self, lever: Lever) -> float:
        return self.scale.get(lever, 1.0)


@dataclass(frozen=True)
class SpilloverChannel:
    policy_type: SpilloverType
    constant: float
    high: float                 # |effect| above -> "high"
    medium: float               # |effect| above -> "medium"
    timeframe: Timeframe
    reference: float = 0.0      # subtracted from the delta before scaling
    uses_intensity: bool = False
    uses_cooperation: bool = False
    sector: Optional[str] = None


def _default_channels() -> Dict[str, SpilloverChannel]:
    return {
        "gdp_growth": SpilloverChannel(
            SpilloverType.TRADE_GDP, 0.25, 0.10, 0.05, Timeframe.SHORT_TERM,
            uses_intensity=True, uses_cooperation=True),
        "infrastructure_investment": SpilloverChannel(
            SpilloverType.INFRASTRUCTURE, 0.12, 0.08, 0.04, Timeframe.MEDIUM_TERM,
            reference=5.0, uses_intensity=True),
        "co2_emissions": SpilloverChannel(
            SpilloverType.ENVIRONMENT, 0.08, 0.05, 0.02, Timeframe.LONG_TERM),
        "manufacturing_investment": SpilloverChannel(
            SpilloverType.MANUFACTURING, 0.10, 0.06, 0.03, Timeframe.MEDIUM_TERM,
            uses_intensity=True, sector="manufacturing"),
        "technology_investment": SpilloverChannel(
            SpilloverType.TECHNOLOGY, 0.15, 0.08, 0.04, Timeframe.LONG_TERM,
            uses_cooperation=True, sector="technology"),
        "energy_investment": SpilloverChannel(
            SpilloverType.ENERGY, 0.20, 0.10, 0.05, Timeframe.IMMEDIATE,
            sector="energy"),
    }


@dataclass
class SpilloverRates:
    channels: Dict[str, SpilloverChannel] = dc_field(default_factory=_default_channels)

    # Per-country delta extraction: key -> (lever, reference, multiplier).
    # infrastructure_investment is passed as a level; its channel subtracts 5.
    delta_rules: Dict[str, Tuple[Lever, float, float]] = dc_field(default_factory=lambda: {
        "gdp_growth":                (Lever.TRADE, 50.0, 0.02),
        "infrastructure_investment": (Lever.INFRASTRUCTURE, 0.0, 1.0),
        "co2_emissions":             (Lever.ENVIRONMENT, 2.0, 0.1),
        "manufacturing_investment":  (Lever.MANUFACTURING, 2.0, 1.0),
        "technology_investment":     (Lever.TECHNOLOGY, 1.0, 1.0),
        "energy_investment":         (Lever.ENERGY, 4.0, 1.0),
    })

    # Detailed (product-level) spillovers
    significance: float = 0.01
    generic_threshold: float = 0.1
    generic_constant: float = 0.15
    product_confidence: float = 0.8
    generic_confidence: float = 0.6

    # Trade matrix evolution
    openness_volume: float = 0.1
    openness_tariff: float = 0.2
    infra_reference: float = 5.0
    infra_volume: float = 0.02
    max_tariff: float = 50.0


@dataclass
class Bounds:
    # (low, high); None means unbounded on that side
    limits: Dict[str, Tuple[Optional[float], Optional[float]]] = dc_field(default_factory=lambda: {
        "literacy_rate":             (0.0, 100.0),
        "unemployment":              (0.5, 50.0),
        "poverty_rate":              (0.0, 90.0),
        "life_expectancy":           (45.0, 90.0),
        "gdp_growth":                (-10.0, 15.0),
        "co2_emissions":             (0.0, None),
        "infant_mortality":          (1.0, 150.0),
        "population":                (100_000.0, None),
        "education_spending":        (0.0, None),
        "health_expenditure":        (0.0, None),
        "infrastructure_investment": (0.0, None),
    })


@dataclass
class EventRates:
    # Regional events share ONE uniform draw per year
    summit_every: int = 3
    p_summit: float = 0.70
    p_dispute: float = 0.15
    p_infrastructure: float = 0.20
    summit_coop_threshold: float = 60.0
    infrastructure_coop_threshold: float = 65.0

    # Local (per-country) shocks, one draw per country per year
    p_flood: float = 0.05
    p_inflow: float = 0.10


@dataclass
class AIRules:
    # Reactive thresholds on the AI country's own indicators
    low_growth: float = 2.0
    high_unemployment: float = 8.0
    high_poverty: float = 25.0

    # condition -> {decision id: adjustment}; later rules overwrite earlier ones
    adjustments: Dict[str, Dict[str, float]] = dc_field(default_factory=lambda: {
        "low_growth":        {"infrastructure": 0.5, "trade": 5.0},
        "high_unemployment": {"education": 0.3, "infrastructure": 0.8},
        "high_poverty":      {"health": 0.4, "education": 0.6},
    })


@dataclass
class ScoreWeights:
    gdp: float = 10.0
    literacy: float = 2.0
    life_exp: float = 5.0
    unemployment: float = 3.0
    poverty: float = 2.0
    emissions: float = 10.0
    infant_mort: float = 1.0

    base: float = 500.0
    balance_min_positive: int = 5
    balance_bonus: float = 50.0
    extreme_floor: float = -100.0
    extreme_penalty: float = 50.0
    max_score: float = 1000.0


@dataclass
class Config:
    countries: List[str]
    start_year: int = 2023
    end_year: int = 2043
    seed: int = 42
    jitter: float = 0.25            # half-width of yearly gdp noise
    ai_jitter: float = 0.20         # full width of AI adjustment noise
    initial_cooperation_index: float = 65.0
    sensitivities: Sensitivities = dc_field(default_factory=Sensitivities)
    spillovers: SpilloverRates = dc_field(default_factory=SpilloverRates)
    bounds: Bounds = dc_field(default_factory=Bounds)
    events: EventRates = dc_field(default_factory=EventRates)
    ai: AIRules = dc_field(default_factory=AIRules)
    score: ScoreWeights = dc_field(default_factory=ScoreWeights)

    def __post_init__(self):
        if self.end_year <= self.start_year:
            raise ValueError(f"end_year ({self.end_year}) must be after start_year ({self.start_year})")

    @property
    def horizon(self) -> int:
        return self.end_year - self.start_year

    def with_overrides(self, **kwargs) -> "Config":
        return dc.replace(self, **kwargs)
