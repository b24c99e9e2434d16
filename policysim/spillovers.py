# policysim/spillovers.py
from __future__ import annotations
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from .config import SpilloverChannel, SpilloverRates
from .constants import (
    DEFAULT_PRODUCT_DRIVER, LEVER_EFFECT_TYPE, LEVER_TIMEFRAME, PRODUCT_CATEGORY,
    PRODUCT_DRIVERS, PRODUCT_RELEVANT_POLICIES, PRODUCT_TIMEFRAMES,
    EffectType, Lever, Magnitude, SpilloverType, Timeframe, is_energy_pair,
)
from .state import DetailedSpillover, PolicyDecision, PolicySpillover, TradeRelationship
from .utils import decision_value

logger = logging.getLogger(__name__)

_DEFAULT_RATES = SpilloverRates()

_DESCRIPTIONS: Dict[SpilloverType, str] = {
    SpilloverType.TRADE_GDP:      "Trade spillover from {src}'s economic growth",
    SpilloverType.INFRASTRUCTURE: "Cross-border infrastructure benefits from {src}",
    SpilloverType.ENVIRONMENT:    "Environmental impact from {src}'s emissions",
    SpilloverType.MANUFACTURING:  "Manufacturing competitiveness impact from {src}",
    SpilloverType.TECHNOLOGY:     "Technology transfer and innovation spillover from {src}",
    SpilloverType.ENERGY:         "Energy security and pricing impact from {src}",
}


def magnitude_bucket(effect: float, ch: SpilloverChannel) -> Magnitude:
    a = abs(effect)
    if a > ch.high: return Magnitude.HIGH
    if a > ch.medium: return Magnitude.MEDIUM
    return Magnitude.LOW

def _channel_effect(delta: float, trade: TradeRelationship, ch: SpilloverChannel) -> float:
    effect = (delta - ch.reference) * ch.constant
    if ch.uses_intensity: effect *= trade.trade_volume / 100.0
    if ch.uses_cooperation: effect *= trade.cooperation / 100.0
    return effect


def calculate_trade_spillovers(
    source_country: str,
    policy_deltas: Mapping[str, float],
    trade_matrix: Sequence[TradeRelationship],
    rates: Optional[SpilloverRates] = None,
) -> List[PolicySpillover]:
    """
    Effects of one country's policy deltas on every trading partner.

    Every edge touching the source (either direction) yields one spillover per
    channel whose key is present with a non-zero value. Energy also requires
    the pair to be a known cross-border energy link. Output is grouped by
    partner in matrix order.
    """
    rates = rates or _DEFAULT_RATES
    out: List[PolicySpillover] = []

    for trade in trade_matrix:
        if not trade.touches(source_country): continue
        partner = trade.partner_of(source_country)

        for key, ch in rates.channels.items():
            delta = policy_deltas.get(key)
            if not delta: continue
            if ch.policy_type is SpilloverType.ENERGY and not is_energy_pair(source_country, partner):
                continue
            effect = _channel_effect(delta, trade, ch)
            out.append(PolicySpillover(
                source_country=source_country,
                target_country=partner,
                policy_type=ch.policy_type,
                effect=effect,
                description=_DESCRIPTIONS[ch.policy_type].format(src=source_country),
                magnitude=magnitude_bucket(effect, ch),
                timeframe=ch.timeframe,
                sector=ch.sector,
            ))
    return out


def extract_policy_deltas(decisions: Sequence[PolicyDecision],
                          rates: Optional[SpilloverRates] = None) -> Dict[str, float]:
    """Spillover channel inputs derived from one country's decision set."""
    rates = rates or _DEFAULT_RATES
    out: Dict[str, float] = {}
    ids = {d.id for d in decisions}
    for key, (lever, ref, k) in rates.delta_rules.items():
        if lever.value not in ids: continue
        out[key] = (decision_value(decisions, lever.value, ref) - ref) * k
    return out


def simulate_regional_effects(
    all_decisions: Mapping[str, Sequence[PolicyDecision]],
    trade_matrix: Sequence[TradeRelationship],
    countries: Optional[Sequence[str]] = None,
    rates: Optional[SpilloverRates] = None,
) -> Dict[str, List[PolicySpillover]]:
    """Spillovers from every country, regrouped by the country that receives them."""
    by_target: Dict[str, List[PolicySpillover]] = {}
    for source in (countries if countries is not None else list(all_decisions)):
        deltas = extract_policy_deltas(all_decisions.get(source, []), rates)
        for s in calculate_trade_spillovers(source, deltas, trade_matrix, rates):
            by_target.setdefault(s.target_country, []).append(s)
    logger.debug("Regional spillovers: %d targets, %d effects",
                 len(by_target), sum(len(v) for v in by_target.values()))
    return by_target


# --- Product-level (detailed) spillovers ---

def _match_product(product: str) -> Optional[str]:
    name = product.lower()
    return next((key for key in PRODUCT_RELEVANT_POLICIES if key in name), None)

def is_policy_relevant_to_product(policy_deltas: Mapping[str, float], product: str) -> bool:
    key = _match_product(product)
    if key is None: return False
    return any(p in policy_deltas for p in PRODUCT_RELEVANT_POLICIES[key])

def product_policy_category(product: str) -> str:
    return PRODUCT_CATEGORY.get(_match_product(product) or "", "trade")

def product_spillover(policy_deltas: Mapping[str, float], product: str, trade_volume: float) -> float:
    driver, k = PRODUCT_DRIVERS.get(_match_product(product) or "", DEFAULT_PRODUCT_DRIVER)
    return policy_deltas.get(driver, 0.0) * (trade_volume / 100.0) * k

def product_timeframe(product: str) -> Timeframe:
    key = _match_product(product) or product.lower()
    for tf, names in PRODUCT_TIMEFRAMES.items():
        if key in names: return tf
    return Timeframe.LONG_TERM


def calculate_detailed_spillovers(
    source_country: str,
    policy_deltas: Mapping[str, float],
    trade_matrix: Sequence[TradeRelationship],
    products=None,
    rates: Optional[SpilloverRates] = None,
) -> List[DetailedSpillover]:
    """
    Product-level spillovers plus one generic effect per lever moved by more
    than the generic threshold. `policy_deltas` is keyed by decision id and
    `products` is anything with `products_between(a, b)`; without it only the
    generic effects are produced. Effects below the significance floor are dropped.
    Each partner is visited once, so ids are unique.
    """
    rates = rates or _DEFAULT_RATES
    out: List[DetailedSpillover] = []
    seen = set()

    for trade in trade_matrix:
        if not trade.touches(source_country): continue
        target = trade.partner_of(source_country)
        # one pass per partner; the first edge in matrix order sets the volume
        if target in seen: continue
        seen.add(target)
        volume = trade.trade_volume

        traded = products.products_between(source_country, target) if products is not None else []
        for product in traded:
            if not is_policy_relevant_to_product(policy_deltas, product): continue
            mag = product_spillover(policy_deltas, product, volume)
            if abs(mag) < rates.significance: continue
            out.append(DetailedSpillover(
                id=f"{source_country}-{target}-{product}",
                source_country=source_country,
                target_country=target,
                policy_category=product_policy_category(product),
                effect_type=EffectType.TRADE,
                magnitude=mag,
                description=f"{product} trade impact from {source_country} to {target}",
                timeframe=product_timeframe(product),
                confidence=rates.product_confidence,
                trade_products=(product,),
            ))

        for lever in Lever:
            delta = policy_deltas.get(lever.value, 0.0)
            if abs(delta) <= rates.generic_threshold: continue
            mag = delta * (volume / 100.0) * rates.generic_constant
            if abs(mag) < rates.significance: continue
            out.append(DetailedSpillover(
                id=f"{source_country}-{target}-{lever.value}",
                source_country=source_country,
                target_country=target,
                policy_category=lever.value,
                effect_type=LEVER_EFFECT_TYPE[lever],
                magnitude=mag,
                description=f"{lever.value.capitalize()} policy shift in {source_country} felt in {target}",
                timeframe=LEVER_TIMEFRAME[lever],
                confidence=rates.generic_confidence,
            ))
    return out
