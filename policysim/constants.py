# policysim/constants.py
from enum import Enum
from typing import Dict, FrozenSet, List, Tuple


class Lever(str, Enum):
    """Decision ids that carry an indicator effect."""
    EDUCATION      = "education"
    HEALTH         = "health"
    INFRASTRUCTURE = "infrastructure"
    ENVIRONMENT    = "environment"
    TRADE          = "trade"
    TARIFF         = "tariff"
    COOPERATION    = "cooperation"
    AGRICULTURE    = "agriculture"
    MANUFACTURING  = "manufacturing"
    SERVICES       = "services"
    ENERGY         = "energy"
    TECHNOLOGY     = "technology"


class SpilloverType(str, Enum):
    TRADE_GDP      = "trade_gdp"
    INFRASTRUCTURE = "infrastructure"
    ENVIRONMENT    = "environment"
    MANUFACTURING  = "manufacturing"
    TECHNOLOGY     = "technology"
    ENERGY         = "energy"


class Timeframe(str, Enum):
    IMMEDIATE   = "immediate"
    SHORT_TERM  = "short-term"
    MEDIUM_TERM = "medium-term"
    LONG_TERM   = "long-term"


class Magnitude(str, Enum):
    LOW    = "low"
    MEDIUM = "medium"
    HIGH   = "high"


class EffectType(str, Enum):
    TRADE       = "trade"
    INVESTMENT  = "investment"
    MIGRATION   = "migration"
    TECHNOLOGY  = "technology"
    ENVIRONMENT = "environment"
    SECURITY    = "security"


class Phase(str, Enum):
    SELECT = "select"
    PLAY   = "play"
    REPORT = "report"


# --- Stock levers: baseline is last year's stored indicator ---
STOCK_LEVERS: Dict[Lever, str] = {
    Lever.EDUCATION:      "education_spending",
    Lever.HEALTH:         "health_expenditure",
    Lever.INFRASTRUCTURE: "infrastructure_investment",
}

# --- Snapshot fields and where the data collaborator finds them ---
INDICATOR_SOURCES: Dict[str, str] = {
    "gdp_growth":                "GDP",
    "unemployment":              "Unemployment",
    "literacy_rate":             "Literacy",
    "life_expectancy":           "Health",
    "poverty_rate":              "Poverty",
    "co2_emissions":             "CO2_Emissions",
    "population":                "Population",
    "infant_mortality":          "MortalityRate",
    "health_expenditure":        "HealthExpenditure",
    "education_spending":        "Education",
    "infrastructure_investment": "Infrastructure",
}
INDICATOR_FIELDS: Tuple[str, ...] = tuple(INDICATOR_SOURCES)

# --- Cross-border energy trade (hydro exports, grid links) ---
ENERGY_TRADE_PAIRS: FrozenSet[FrozenSet[str]] = frozenset({
    frozenset({"India", "Bhutan"}),
    frozenset({"India", "Nepal"}),
    frozenset({"Pakistan", "Afghanistan"}),
    frozenset({"India", "Bangladesh"}),
})

# --- Product -> policy tables (matched by lower-case substring) ---
PRODUCT_RELEVANT_POLICIES: Dict[str, List[str]] = {
    "textiles":        ["manufacturing", "trade", "labor_market"],
    "pharmaceuticals": ["health", "manufacturing", "technology"],
    "machinery":       ["manufacturing", "technology", "infrastructure"],
    "food":            ["agriculture", "trade"],
    "petroleum":       ["energy", "trade"],
    "electricity":     ["energy", "infrastructure"],
}
PRODUCT_CATEGORY: Dict[str, str] = {
    "textiles":        "manufacturing",
    "pharmaceuticals": "health",
    "machinery":       "manufacturing",
    "food":            "agriculture",
    "petroleum":       "energy",
    "electricity":     "energy",
}
# product -> (driving lever, multiplier); anything else is driven by trade
PRODUCT_DRIVERS: Dict[str, Tuple[str, float]] = {
    "textiles":        ("manufacturing", 0.30),
    "pharmaceuticals": ("health", 0.40),
    "machinery":       ("infrastructure", 0.35),
    "food":            ("agriculture", 0.25),
    "petroleum":       ("energy", 0.50),
    "electricity":     ("energy", 0.50),
}
DEFAULT_PRODUCT_DRIVER: Tuple[str, float] = ("trade", 0.20)

PRODUCT_TIMEFRAMES: Dict[Timeframe, FrozenSet[str]] = {
    Timeframe.IMMEDIATE:   frozenset({"petroleum", "electricity", "food"}),
    Timeframe.SHORT_TERM:  frozenset({"textiles", "machinery"}),
    Timeframe.MEDIUM_TERM: frozenset({"pharmaceuticals", "chemicals"}),
}

# --- Generic (product-independent) detailed spillovers, per lever ---
LEVER_EFFECT_TYPE: Dict[Lever, EffectType] = {
    Lever.TRADE:          EffectType.TRADE,
    Lever.TARIFF:         EffectType.TRADE,
    Lever.COOPERATION:    EffectType.TRADE,
    Lever.INFRASTRUCTURE: EffectType.INVESTMENT,
    Lever.MANUFACTURING:  EffectType.INVESTMENT,
    Lever.AGRICULTURE:    EffectType.INVESTMENT,
    Lever.SERVICES:       EffectType.INVESTMENT,
    Lever.ENERGY:         EffectType.INVESTMENT,
    Lever.TECHNOLOGY:     EffectType.TECHNOLOGY,
    Lever.ENVIRONMENT:    EffectType.ENVIRONMENT,
    Lever.EDUCATION:      EffectType.MIGRATION,
    Lever.HEALTH:         EffectType.MIGRATION,
}
LEVER_TIMEFRAME: Dict[Lever, Timeframe] = {
    Lever.EDUCATION:      Timeframe.LONG_TERM,
    Lever.HEALTH:         Timeframe.LONG_TERM,
    Lever.TECHNOLOGY:     Timeframe.LONG_TERM,
    Lever.ENVIRONMENT:    Timeframe.LONG_TERM,
    Lever.INFRASTRUCTURE: Timeframe.MEDIUM_TERM,
    Lever.MANUFACTURING:  Timeframe.MEDIUM_TERM,
    Lever.AGRICULTURE:    Timeframe.MEDIUM_TERM,
    Lever.SERVICES:       Timeframe.MEDIUM_TERM,
    Lever.TRADE:          Timeframe.SHORT_TERM,
    Lever.TARIFF:         Timeframe.SHORT_TERM,
    Lever.COOPERATION:    Timeframe.SHORT_TERM,
    Lever.ENERGY:         Timeframe.IMMEDIATE,
}

SCORE_RATINGS: Tuple[Tuple[float, str, str], ...] = (
    (800.0, "Excellent", "Outstanding leadership!"),
    (600.0, "Good",      "Strong performance!"),
    (400.0, "Average",   "Room for improvement"),
)
LOWEST_RATING: Tuple[str, str] = ("Needs Improvement", "Consider different policy approaches")


def is_energy_pair(a: str, b: str) -> bool:
    return frozenset({a, b}) in ENERGY_TRADE_PAIRS
