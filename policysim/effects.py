# policysim/effects.py
from __future__ import annotations
import math
from typing import Dict, Iterable, Mapping, Optional, Sequence

from .config import Bounds, Config, Sensitivities
from .constants import LOWEST_RATING, SCORE_RATINGS, STOCK_LEVERS, Lever, SpilloverType
from .state import IndicatorSnapshot, PolicyDecision, TradeRelationship
from .utils import clamp, decision_value, mean_or

_DEFAULT_CFG = Config(countries=[])


def _spillover_type(raw) -> Optional[SpilloverType]:
    try:
        return SpilloverType(raw)
    except ValueError:
        return None

def _apply_lever(stats: IndicatorSnapshot, sens: Sensitivities, lever: Lever, delta: float) -> None:
    for field, k in sens.table.get(lever, {}).items():
        setattr(stats, field, getattr(stats, field) + delta * k)

def clamp_snapshot(stats: IndicatorSnapshot, bounds: Optional[Bounds] = None) -> IndicatorSnapshot:
    bounds = bounds or _DEFAULT_CFG.bounds
    for field, (lo, hi) in bounds.limits.items():
        setattr(stats, field, clamp(getattr(stats, field), lo, hi))
    return stats


def apply_policy_effects(
    current: IndicatorSnapshot,
    decisions: Sequence[PolicyDecision],
    incoming_spillovers: Iterable = (),
    rng=None,
    cfg: Optional[Config] = None,
) -> IndicatorSnapshot:
    """
    Next-year indicators for one country.

    Every lever contributes (value - baseline) * scale times its sensitivity row.
    Stock levers compare against last year's stored spending, flow levers against
    a fixed reference. Spillovers add by policy type, `rng` (if given) adds one
    uniform gdp jitter, and the result is clamped to the configured bounds.
    Missing decisions have zero delta. The input snapshot is not modified and
    `year` is left for the caller to set.
    """
    cfg = cfg or _DEFAULT_CFG
    sens = cfg.sensitivities
    new = current.clone()

    # 1. Stock levers: delta vs stored value, stored field takes the slider value
    for lever, field in STOCK_LEVERS.items():
        stored = getattr(current, field)
        value = decision_value(decisions, lever.value, stored)
        _apply_lever(new, sens, lever, (value - stored) * sens.scale_of(lever))
        setattr(new, field, value)

    # 2. Flow levers: delta vs fixed reference
    for lever, baseline in sens.baselines.items():
        value = decision_value(decisions, lever.value, baseline)
        delta = (value - baseline) * sens.scale_of(lever)
        _apply_lever(new, sens, lever, delta)
        if lever is Lever.ENVIRONMENT:
            new.co2_emissions *= (1.0 - delta * sens.env_co2_factor)
        elif lever is Lever.COOPERATION:
            new.infrastructure_investment += delta * sens.coop_infrastructure

    # 3. Incoming spillovers (unknown types are ignored)
    for s in incoming_spillovers:
        kind = _spillover_type(s.policy_type)
        if kind is None: continue
        for field, k in sens.spillover_table.get(kind, {}).items():
            setattr(new, field, getattr(new, field) + s.effect * k)

    # 4. Year-to-year noise
    if rng is not None:
        new.gdp_growth += float(rng.uniform(-cfg.jitter, cfg.jitter))

    return clamp_snapshot(new, cfg.bounds)


def calculate_tariff_effects(country: str, tariff_policy: float,
                             trade_matrix: Sequence[TradeRelationship]) -> Dict[str, float]:
    """Protection above 50 costs growth but shelters jobs; below 50 the reverse."""
    effects = {"gdp_growth": 0.0, "unemployment": 0.0, "poverty_rate": 0.0}
    avg_volume = mean_or([t.trade_volume for t in trade_matrix if t.touches(country)])

    if tariff_policy > 50:
        effects["gdp_growth"] -= (tariff_policy - 50) * 0.02 * (avg_volume / 100)
        effects["unemployment"] += (tariff_policy - 50) * 0.01
    else:
        effects["gdp_growth"] += (50 - tariff_policy) * 0.015 * (avg_volume / 100)
        effects["unemployment"] -= (50 - tariff_policy) * 0.008
    return effects


def simulate_regional_cooperation(cooperation_level: float,
                                  countries: Iterable[str]) -> Dict[str, Dict[str, float]]:
    out: Dict[str, Dict[str, float]] = {}
    for c in countries:
        if cooperation_level > 70:
            out[c] = {"gdp_growth": 0.3, "infrastructure_investment": 0.5, "trade_volume": 0.2}
        elif cooperation_level < 40:
            out[c] = {"gdp_growth": -0.2, "unemployment": 0.3}
        else:
            out[c] = {}
    return out


# --- End-of-game scoring ---

def score_breakdown(final: IndicatorSnapshot, initial: IndicatorSnapshot,
                    cfg: Optional[Config] = None) -> Dict[str, float]:
    w = (cfg or _DEFAULT_CFG).score
    terms = {
        "gdp":          (final.gdp_growth - initial.gdp_growth) * w.gdp,
        "literacy":     (final.literacy_rate - initial.literacy_rate) * w.literacy,
        "life_exp":     (final.life_expectancy - initial.life_expectancy) * w.life_exp,
        "unemployment": (initial.unemployment - final.unemployment) * w.unemployment,
        "poverty":      (initial.poverty_rate - final.poverty_rate) * w.poverty,
        "emissions":    (initial.co2_emissions - final.co2_emissions) * w.emissions,
        "infant_mort":  (initial.infant_mortality - final.infant_mortality) * w.infant_mort,
    }
    positives = sum(1 for v in terms.values() if v > 0)
    extremes = sum(1 for v in terms.values() if v < w.extreme_floor)
    terms["balance_bonus"] = w.balance_bonus if positives >= w.balance_min_positive else 0.0
    terms["extreme_penalty"] = -w.extreme_penalty * extremes
    return terms

def calculate_score(final: IndicatorSnapshot, initial: IndicatorSnapshot,
                    cfg: Optional[Config] = None) -> float:
    w = (cfg or _DEFAULT_CFG).score
    raw = w.base + sum(score_breakdown(final, initial, cfg).values())
    if math.isnan(raw):
        raw = w.base
    return clamp(raw, 0.0, w.max_score)

def score_rating(score: float) -> Mapping[str, str]:
    for floor, rating, description in SCORE_RATINGS:
        if score >= floor:
            return {"rating": rating, "description": description}
    return {"rating": LOWEST_RATING[0], "description": LOWEST_RATING[1]}

def calculate_improvement(final: float, initial: float) -> Dict[str, float]:
    change = final - initial
    pct = (change / abs(initial)) * 100.0 if initial != 0 else 0.0
    return {"value": change, "percentage": pct}
