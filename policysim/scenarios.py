# policysim/scenarios.py
import logging
from copy import deepcopy
from typing import Dict, Iterable, Optional, Tuple

import pandas as pd

from .analytics import history_frame
from .config import Config
from .constants import Lever
from .engine import PolicyGame
from .policies import AUTOPILOTS, Autopilot

logger = logging.getLogger(__name__)

SCENARIOS: Tuple[str, ...] = ("baseline", "open_region", "fortress")

# scenario label -> player autopilot
SCENARIO_AUTOPILOT: Dict[str, str] = {
    "baseline":    "hold",
    "open_region": "open_region",
    "fortress":    "fortress",
}


def make_scenario_config(base_cfg: Config, label: str) -> Config:
    cfg = deepcopy(base_cfg)
    if label == "baseline":
        pass
    elif label == "open_region":
        # Deeper integration: more frequent infrastructure initiatives, stronger trade pull
        cfg.initial_cooperation_index = 75.0
        cfg.events.infrastructure_coop_threshold = 55.0
        cfg.spillovers.openness_volume = 0.15
    elif label == "fortress":
        # Protectionist region: disputes more likely, tariffs bite harder
        cfg.initial_cooperation_index = 45.0
        cfg.events.p_dispute = 0.30
        cfg.sensitivities.table[Lever.TARIFF]["gdp_growth"] = -0.12
    else:
        raise ValueError(f"Unknown scenario: {label}")
    return cfg


def run_scenario(base_cfg: Config, label: str, country: str,
                 autopilot: Optional[Autopilot] = None, indicators=None) -> Tuple[pd.DataFrame, float]:
    cfg = make_scenario_config(base_cfg, label)
    pilot = autopilot or AUTOPILOTS[SCENARIO_AUTOPILOT[label]]
    game = PolicyGame(cfg, indicators=indicators)
    final = game.run(country, pilot)
    df = history_frame(final.history)
    df["scenario"] = label
    logger.info("Scenario %s (%s): score %.0f", label, country, final.final_score)
    return df, float(final.final_score)


def run_scenarios(base_cfg: Config, country: str,
                  labels: Iterable[str] = SCENARIOS, indicators=None) -> Tuple[pd.DataFrame, Dict[str, float]]:
    """Runs each scenario to the horizon; returns stacked histories and final scores."""
    frames, scores = [], {}
    for label in labels:
        df, score = run_scenario(base_cfg, label, country, indicators=indicators)
        frames.append(df)
        scores[label] = score
    return pd.concat(frames, ignore_index=True), scores
