# policysim/policies.py
from typing import Callable, Dict, List, Optional, Sequence

from .config import AIRules, Config
from .data import COUNTRY_POLICY_VARIATIONS, create_default_decisions
from .state import IndicatorSnapshot, PolicyDecision, WorldState

# (year, state, cfg) -> {decision id: new value} for the player country
Autopilot = Callable[[int, WorldState, Config], Dict[str, float]]


# --- AI countries ---

def initial_ai_decisions(country: str,
                         variations: Optional[Dict[str, Dict[str, float]]] = None) -> List[PolicyDecision]:
    """Default decision set shifted by the country's starting offsets, clamped to range."""
    variations = COUNTRY_POLICY_VARIATIONS if variations is None else variations
    offsets = variations.get(country, {})
    return [d.with_value(d.value + offsets.get(d.id, 0.0)) for d in create_default_decisions()]


def reactive_adjustments(stats: IndicatorSnapshot, rules: AIRules) -> Dict[str, float]:
    """Rule-based nudges; when two rules touch the same lever the later one wins."""
    adj: Dict[str, float] = {}
    if stats.gdp_growth < rules.low_growth:
        adj.update(rules.adjustments["low_growth"])
    if stats.unemployment > rules.high_unemployment:
        adj.update(rules.adjustments["high_unemployment"])
    if stats.poverty_rate > rules.high_poverty:
        adj.update(rules.adjustments["high_poverty"])
    return adj


def adjust_ai_decisions(decisions: Sequence[PolicyDecision], stats: IndicatorSnapshot,
                        rng=None, cfg: Optional[Config] = None) -> List[PolicyDecision]:
    """One year of AI policy drift: reactive nudge plus jitter of width `ai_jitter` on every lever."""
    cfg = cfg or Config(countries=[])
    adj = reactive_adjustments(stats, cfg.ai)
    out = []
    for d in decisions:
        step = adj.get(d.id, 0.0)
        if rng is not None:
            step += (float(rng.random()) - 0.5) * cfg.ai_jitter
        out.append(d.with_value(d.value + step))
    return out


# --- Scripted players (headless runs) ---

def autopilot_hold(year: int, state: WorldState, cfg: Config) -> Dict[str, float]:
    return {}

def autopilot_human_capital(year: int, state: WorldState, cfg: Config) -> Dict[str, float]:
    """Ramps education and health spending over the first years, then holds."""
    current = {d.id: d.value for d in state.player_decisions}
    if year - cfg.start_year >= 6:
        return {}
    return {"education": current.get("education", 4.0) + 0.5,
            "health": current.get("health", 3.0) + 0.5}

def autopilot_open_region(year: int, state: WorldState, cfg: Config) -> Dict[str, float]:
    return {"trade": 80.0, "tariff": 4.0, "cooperation": 85.0, "infrastructure": 8.0}

def autopilot_fortress(year: int, state: WorldState, cfg: Config) -> Dict[str, float]:
    return {"trade": 20.0, "tariff": 34.0, "cooperation": 15.0, "manufacturing": 5.0}

def autopilot_green(year: int, state: WorldState, cfg: Config) -> Dict[str, float]:
    """Environment first once growth is comfortable, otherwise technology."""
    stats = state.player_stats
    if stats is not None and stats.gdp_growth > 4.0:
        return {"environment": 5.0, "energy": 3.0}
    return {"technology": 2.0, "environment": 3.0}


AUTOPILOTS: Dict[str, Autopilot] = {
    "hold": autopilot_hold,
    "human_capital": autopilot_human_capital,
    "open_region": autopilot_open_region,
    "fortress": autopilot_fortress,
    "green": autopilot_green,
}
