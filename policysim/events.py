# policysim/events.py
from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Mapping, Optional

from .config import EventRates
from .state import IndicatorSnapshot, RegionalEvent

logger = logging.getLogger(__name__)

_DEFAULT_RATES = EventRates()


def generate_regional_events(year: int, cooperation_index: float, rng,
                             rates: Optional[EventRates] = None) -> List[RegionalEvent]:
    """
    Region-wide events for one year. All three checks read the same uniform
    draw, so a dispute (p < 0.15) always coincides with a summit in summit years.
    """
    r = rates or _DEFAULT_RATES
    p = float(rng.random())
    events: List[RegionalEvent] = []

    if year % r.summit_every == 0 and p < r.p_summit:
        events.append(RegionalEvent(
            id="saarc_summit", name="SAARC Summit",
            description="Regional leaders meet to discuss cooperation and trade agreements",
            year=year,
            effects={"cooperation_boost": 5.0 if cooperation_index > r.summit_coop_threshold else 2.0,
                     "trade_volume_increase": 0.1},
        ))

    if p < r.p_dispute:
        events.append(RegionalEvent(
            id="trade_dispute", name="Regional Trade Dispute",
            description="Tensions arise over trade policies, affecting regional cooperation",
            year=year,
            effects={"cooperation_penalty": -3.0, "tariff_increase": 2.0, "gdp_growth": -0.2},
        ))

    if p < r.p_infrastructure and cooperation_index > r.infrastructure_coop_threshold:
        events.append(RegionalEvent(
            id="infrastructure_project", name="Regional Infrastructure Initiative",
            description="Joint infrastructure project connects multiple countries",
            year=year,
            effects={"infrastructure_boost": 1.0, "trade_volume_increase": 0.15, "gdp_growth": 0.3},
        ))

    if events:
        logger.info("Year %d regional events: %s", year, ", ".join(e.name for e in events))
    return events


def generate_country_events(country: str, year: int, rng,
                            rates: Optional[EventRates] = None) -> List[RegionalEvent]:
    """Local shocks for one country: at most one per year."""
    r = rates or _DEFAULT_RATES
    p = float(rng.random())
    if p < r.p_flood:
        return [RegionalEvent(
            id=f"flood-{country}-{year}", name="Monsoon Flooding",
            description=f"Severe flooding disrupts agriculture and infrastructure in {country}",
            year=year, effects={"gdp_growth": -0.5, "poverty_rate": 0.5},
        )]
    if p < r.p_inflow:
        return [RegionalEvent(
            id=f"inflow-{country}-{year}", name="Investment Inflow",
            description=f"A wave of foreign investment reaches {country}",
            year=year, effects={"gdp_growth": 0.3, "unemployment": -0.2},
        )]
    return []


def sum_event_effects(events: Iterable[RegionalEvent]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for ev in events:
        for key, val in ev.effects.items():
            if isinstance(val, (int, float)):
                totals[key] = totals.get(key, 0.0) + float(val)
    return totals


def apply_event_effects(stats: IndicatorSnapshot, effects: Mapping[str, float]) -> IndicatorSnapshot:
    """Adds each effect to the snapshot field of the same name; other keys are ignored."""
    new = stats.clone()
    for key, val in effects.items():
        if key in ("country", "year") or not hasattr(new, key): continue
        setattr(new, key, getattr(new, key) + val)
    return new
