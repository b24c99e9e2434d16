# policysim/engine.py
from __future__ import annotations
import dataclasses as dc
import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

import numpy as np

from .config import Config
from .constants import Lever, Phase
from .data import (
    DEFAULT_DECISION_VALUES, DEFAULT_TRADE_PRODUCTS, IndicatorTable, TradeProducts,
    build_initial_snapshot, create_default_decisions, initial_trade_matrix,
)
from .effects import apply_policy_effects, calculate_score, clamp_snapshot
from .events import apply_event_effects, generate_country_events, generate_regional_events, sum_event_effects
from .policies import Autopilot, adjust_ai_decisions, initial_ai_decisions
from .spillovers import calculate_detailed_spillovers, simulate_regional_effects
from .state import PolicyDecision, WorldState
from .trade import policy_changes, update_trade_matrix
from .utils import clamp, decision_value, mean_or, snap_to_step

logger = logging.getLogger(__name__)


# --- Actions ---

@dataclass(frozen=True)
class SelectCountry:
    country: str

@dataclass(frozen=True)
class SetDecision:
    decision_id: str
    value: float

@dataclass(frozen=True)
class AdvanceYear:
    pass

@dataclass(frozen=True)
class FinishGame:
    pass

@dataclass(frozen=True)
class Restart:
    pass

Action = Union[SelectCountry, SetDecision, AdvanceYear, FinishGame, Restart]
Listener = Callable[[WorldState], None]


class PolicyGame:
    """
    Turn orchestrator. Owns the current WorldState and the random generator;
    every transition returns a new state and leaves the previous one intact,
    so earlier states stay valid as history.
    """

    def __init__(self, cfg: Config, indicators=None, products=None, rng=None):
        self.cfg = cfg
        self.rng = rng if rng is not None else np.random.default_rng(cfg.seed)
        self.indicators = indicators if indicators is not None else IndicatorTable.from_reference(cfg.start_year)
        self.products = products if products is not None else TradeProducts.from_dict(DEFAULT_TRADE_PRODUCTS)
        self._listeners: List[Listener] = []
        self.state = self.initial_state()

    # --- Presentation seam ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        def _unsubscribe():
            if listener in self._listeners: self._listeners.remove(listener)
        return _unsubscribe

    def dispatch(self, action: Action) -> WorldState:
        new = self.transition(self.state, action)
        if new is not self.state:
            self.state = new
            for fn in list(self._listeners): fn(new)
        return self.state

    def transition(self, state: WorldState, action: Action) -> WorldState:
        if isinstance(action, SelectCountry): return self.select_country(state, action.country)
        if isinstance(action, SetDecision): return self.set_decision(state, action.decision_id, action.value)
        if isinstance(action, AdvanceYear): return self.advance_year(state)
        if isinstance(action, FinishGame): return self.finish_game(state)
        if isinstance(action, Restart): return self.restart(state)
        raise ValueError(f"Unknown action: {action!r}")

    # --- Transitions ---

    def initial_state(self) -> WorldState:
        cfg = self.cfg
        snapshots = {c: build_initial_snapshot(self.indicators, c, cfg.start_year) for c in cfg.countries}
        names = set(cfg.countries)
        matrix = [t for t in initial_trade_matrix() if t.source in names and t.target in names]
        return WorldState(
            countries=snapshots,
            trade_matrix=matrix,
            cooperation_index=cfg.initial_cooperation_index,
            initial={c: s.clone() for c, s in snapshots.items()},
            year=cfg.start_year,
            phase=Phase.SELECT,
        )

    def select_country(self, state: WorldState, country: str) -> WorldState:
        if state.phase is not Phase.SELECT:
            logger.warning("Ignoring country selection in phase %s", state.phase.value)
            return state
        if country not in self.cfg.countries:
            raise ValueError(f"Unknown country: {country}")

        decisions: Dict[str, List[PolicyDecision]] = {
            c: create_default_decisions() if c == country else initial_ai_decisions(c)
            for c in self.cfg.countries
        }
        new = state.clone()
        new.player_country = country
        new.decisions = decisions
        new.history = [state.countries[country].clone()]
        new.phase = Phase.PLAY
        new.game_active = True
        logger.info("Playing as %s from %d to %d", country, self.cfg.start_year, self.cfg.end_year)
        return new

    def set_decision(self, state: WorldState, decision_id: str, value: float) -> WorldState:
        if state.phase is not Phase.PLAY:
            logger.warning("Ignoring decision %s in phase %s", decision_id, state.phase.value)
            return state
        current = state.player_decisions
        if not any(d.id == decision_id for d in current):
            logger.warning("Ignoring unknown decision %s", decision_id)
            return state

        value = float(value)
        if math.isnan(value):
            logger.warning("Ignoring NaN value for decision %s", decision_id)
            return state

        # infinities skip the step grid and clamp to the decision bounds
        updated = [
            d.with_value(snap_to_step(value, d.min, d.step) if math.isfinite(value) else value)
            if d.id == decision_id else d
            for d in current
        ]
        new = dc.replace(state, decisions={**state.decisions, state.player_country: updated})
        logger.debug("%s set to %s", decision_id, decision_value(updated, decision_id, value))
        return new

    def advance_year(self, state: WorldState) -> WorldState:
        cfg = self.cfg
        if state.phase is not Phase.PLAY:
            logger.warning("Ignoring next year in phase %s", state.phase.value)
            return state
        if state.year >= cfg.end_year:
            logger.warning("Horizon reached (%d); finish the game instead", state.year)
            return state

        player = state.player_country
        next_year = state.year + 1

        # 1. AI countries react to their own indicators
        decisions = {
            c: list(ds) if c == player else adjust_ai_decisions(ds, state.countries[c], self.rng, cfg)
            for c, ds in state.decisions.items()
        }

        # 2. Spillovers from every decision set
        by_country = simulate_regional_effects(decisions, state.trade_matrix, cfg.countries, cfg.spillovers)
        player_deltas = {d.id: d.value - DEFAULT_DECISION_VALUES.get(d.id, d.value) for d in decisions[player]}
        detailed = calculate_detailed_spillovers(player, player_deltas, state.trade_matrix,
                                                 self.products, cfg.spillovers)

        # 3-4. Policy effects, then local shocks
        countries = {}
        local_events = []
        for c, stats in state.countries.items():
            new_stats = apply_policy_effects(stats, decisions.get(c, []), by_country.get(c, []), self.rng, cfg)
            events = generate_country_events(c, next_year, self.rng, cfg.events)
            if events:
                new_stats = clamp_snapshot(apply_event_effects(new_stats, sum_event_effects(events)), cfg.bounds)
                local_events.extend(events)
            new_stats.year = next_year
            countries[c] = new_stats

        # 5. Trade matrix
        changes = {c: policy_changes(ds) for c, ds in decisions.items()}
        matrix = update_trade_matrix(state.trade_matrix, changes, cfg.spillovers)

        # 6-7. Regional events, cooperation index
        coop_index = mean_or([decision_value(ds, Lever.COOPERATION.value, 50.0) for ds in decisions.values()],
                             default=cfg.initial_cooperation_index)
        regional = generate_regional_events(next_year, coop_index, self.rng, cfg.events)

        new = state.clone()
        new.countries = countries
        new.decisions = decisions
        new.spillovers_by_country = by_country
        new.spillover_effects = [s for ss in by_country.values() for s in ss]
        new.detailed_spillovers = detailed
        new.trade_matrix = matrix
        new.regional_events = state.regional_events + regional
        new.local_events = state.local_events + local_events
        new.cooperation_index = coop_index
        new.year = next_year
        if player in countries:
            new.history = state.history + [countries[player].clone()]

        logger.debug("Year %d: %d spillovers, %d events, cooperation %.1f",
                     next_year, len(new.spillover_effects), len(local_events) + len(regional), coop_index)
        return new

    def finish_game(self, state: WorldState) -> WorldState:
        if state.phase is not Phase.PLAY or state.year < self.cfg.end_year:
            logger.warning("Cannot finish in phase %s at year %d", state.phase.value, state.year)
            return state
        player = state.player_country
        score = calculate_score(state.countries[player], state.initial[player], self.cfg)
        new = dc.replace(state, phase=Phase.REPORT, game_active=False, final_score=score)
        logger.info("%s finished %d with score %.0f", player, state.year, score)
        return new

    def restart(self, state: WorldState) -> WorldState:
        if state.phase is not Phase.REPORT:
            logger.warning("Ignoring restart in phase %s", state.phase.value)
            return state
        logger.info("Restarting")
        return self.initial_state()

    # --- Read side ---

    def progress(self, state: Optional[WorldState] = None) -> float:
        state = state or self.state
        elapsed = state.year - self.cfg.start_year
        return clamp(100.0 * elapsed / self.cfg.horizon, 0.0, 100.0)

    def run(self, country: str, autopilot: Optional[Autopilot] = None) -> WorldState:
        """Plays a full game headless: select, steer with `autopilot` each year, finish."""
        self.dispatch(SelectCountry(country))
        while self.state.year < self.cfg.end_year:
            if autopilot is not None:
                for decision_id, value in autopilot(self.state.year, self.state, self.cfg).items():
                    self.dispatch(SetDecision(decision_id, value))
            self.dispatch(AdvanceYear())
        return self.dispatch(FinishGame())
