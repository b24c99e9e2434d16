# policysim/trade.py
from __future__ import annotations
import dataclasses as dc
from typing import Dict, Mapping, Optional, Sequence, List

import networkx as nx

from .config import SpilloverRates
from .constants import Lever
from .state import PolicyDecision, TradeRelationship
from .utils import clamp

_DEFAULT_RATES = SpilloverRates()

# Keys of the per-country policy-change map consumed by the updater
TRADE_OPENNESS = "trade_openness"
INFRASTRUCTURE = "infrastructure_investment"
COOPERATION_POLICY = "cooperation_policy"


def policy_changes(decisions: Sequence[PolicyDecision]) -> Dict[str, float]:
    """Trade-relevant levers of one decision set: openness and infrastructure as
    levels, cooperation as the offset from its neutral 50."""
    out: Dict[str, float] = {}
    for d in decisions:
        if d.id == Lever.TRADE.value: out[TRADE_OPENNESS] = float(d.value)
        elif d.id == Lever.INFRASTRUCTURE.value: out[INFRASTRUCTURE] = float(d.value)
        elif d.id == Lever.COOPERATION.value: out[COOPERATION_POLICY] = float(d.value) - 50.0
    return out


def update_trade_matrix(
    current: Sequence[TradeRelationship],
    changes_by_country: Mapping[str, Mapping[str, float]],
    rates: Optional[SpilloverRates] = None,
) -> List[TradeRelationship]:
    """
    Next year's trade edges. Returns one new edge per input edge, same order;
    inputs are never modified. Countries without an entry have no effect.
    """
    r = rates or _DEFAULT_RATES
    out: List[TradeRelationship] = []

    for trade in current:
        src = changes_by_country.get(trade.source, {})
        tgt = changes_by_country.get(trade.target, {})
        volume, tariff, coop = trade.trade_volume, trade.tariff_rate, trade.cooperation

        openness = src.get(TRADE_OPENNESS)
        if openness:
            openness /= 100.0
            volume *= 1.0 + openness * r.openness_volume
            tariff *= 1.0 - openness * r.openness_tariff

        if src.get(INFRASTRUCTURE) or tgt.get(INFRASTRUCTURE):
            avg_infra = (src.get(INFRASTRUCTURE, 0.0) + tgt.get(INFRASTRUCTURE, 0.0)) / 2.0
            volume *= 1.0 + (avg_infra - r.infra_reference) * r.infra_volume

        coop += src.get(COOPERATION_POLICY, 0.0)

        out.append(dc.replace(
            trade,
            trade_volume=clamp(volume, 0.0, None),
            tariff_rate=clamp(tariff, 0.0, r.max_tariff),
            cooperation=clamp(coop, 0.0, 100.0),
        ))
    return out


def trade_graph(trade_matrix: Sequence[TradeRelationship], countries: Sequence[str] = ()) -> nx.DiGraph:
    G = nx.DiGraph()
    G.add_nodes_from(countries)
    for t in trade_matrix:
        G.add_edge(t.source, t.target, weight=t.trade_volume,
                   tariff=t.tariff_rate, cooperation=t.cooperation)
    return G
