# policysim/state.py
from __future__ import annotations
import dataclasses as dc
from dataclasses import dataclass, field as dc_field
from typing import Dict, List, Optional

from .constants import EffectType, Magnitude, Phase, SpilloverType, Timeframe


@dataclass(frozen=True)
class Country:
    name: str
    code: str
    color: str
    flag: str


@dataclass
class IndicatorSnapshot:
    country: str
    year: int
    gdp_growth: float = 0.0
    unemployment: float = 0.0
    literacy_rate: float = 0.0
    life_expectancy: float = 0.0
    poverty_rate: float = 0.0
    co2_emissions: float = 0.0
    population: float = 0.0
    infant_mortality: float = 0.0
    # --- Lever-mirroring fields (overwritten with slider values each year) ---
    health_expenditure: float = 0.0
    education_spending: float = 0.0
    infrastructure_investment: float = 0.0

    def clone(self) -> "IndicatorSnapshot":
        return dc.replace(self)

    def as_dict(self) -> Dict[str, float]:
        return dc.asdict(self)


@dataclass
class PolicyDecision:
    id: str
    name: str
    description: str
    category: str
    value: float
    min: float
    max: float
    step: float
    unit: str

    def with_value(self, value: float) -> "PolicyDecision":
        return dc.replace(self, value=float(min(self.max, max(self.min, value))))


@dataclass(frozen=True)
class TradeRelationship:
    source: str
    target: str
    trade_volume: float     # bilateral trade, % of GDP
    tariff_rate: float      # average tariff, clamped [0, 50]
    cooperation: float      # 0-100

    def touches(self, country: str) -> bool:
        return self.source == country or self.target == country

    def partner_of(self, country: str) -> str:
        return self.target if self.source == country else self.source


@dataclass(frozen=True)
class PolicySpillover:
    source_country: str
    target_country: str
    policy_type: SpilloverType
    effect: float
    description: str
    magnitude: Magnitude
    timeframe: Timeframe
    sector: Optional[str] = None


@dataclass(frozen=True)
class DetailedSpillover:
    id: str
    source_country: str
    target_country: str
    policy_category: str
    effect_type: EffectType
    magnitude: float
    description: str
    timeframe: Timeframe
    confidence: float
    trade_products: tuple = ()


@dataclass(frozen=True)
class RegionalEvent:
    id: str
    name: str
    description: str
    year: int
    effects: Dict[str, float] = dc_field(default_factory=dict)


@dataclass
class WorldState:
    countries: Dict[str, IndicatorSnapshot] = dc_field(default_factory=dict)
    player_country: str = ""
    trade_matrix: List[TradeRelationship] = dc_field(default_factory=list)
    cooperation_index: float = 65.0
    regional_events: List[RegionalEvent] = dc_field(default_factory=list)
    local_events: List[RegionalEvent] = dc_field(default_factory=list)  # per-country shocks
    decisions: Dict[str, List[PolicyDecision]] = dc_field(default_factory=dict)
    spillovers_by_country: Dict[str, List[PolicySpillover]] = dc_field(default_factory=dict)
    spillover_effects: List[PolicySpillover] = dc_field(default_factory=list)
    detailed_spillovers: List[DetailedSpillover] = dc_field(default_factory=list)
    history: List[IndicatorSnapshot] = dc_field(default_factory=list)
    initial: Dict[str, IndicatorSnapshot] = dc_field(default_factory=dict)
    year: int = 2023
    phase: Phase = Phase.SELECT
    game_active: bool = False
    final_score: Optional[float] = None

    @property
    def player_stats(self) -> Optional[IndicatorSnapshot]:
        return self.countries.get(self.player_country)

    @property
    def player_decisions(self) -> List[PolicyDecision]:
        return self.decisions.get(self.player_country, [])

    def clone(self) -> "WorldState":
        """Shallow-structural copy: containers are new, frozen entries are shared."""
        return dc.replace(
            self,
            countries={k: v.clone() for k, v in self.countries.items()},
            trade_matrix=list(self.trade_matrix),
            regional_events=list(self.regional_events),
            local_events=list(self.local_events),
            decisions={k: [dc.replace(d) for d in v] for k, v in self.decisions.items()},
            spillovers_by_country={k: list(v) for k, v in self.spillovers_by_country.items()},
            spillover_effects=list(self.spillover_effects),
            detailed_spillovers=list(self.detailed_spillovers),
            history=list(self.history),
            initial=dict(self.initial),
        )
