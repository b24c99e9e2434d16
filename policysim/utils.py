# policysim/utils.py
from typing import Iterable, Optional, Sequence

import numpy as np


def clamp(x: float, lo: Optional[float], hi: Optional[float]) -> float:
    if lo is not None and x < lo: return float(lo)
    if hi is not None and x > hi: return float(hi)
    return float(x)

def mean_or(seq: Sequence[float], default: float = 0.0) -> float:
    return float(np.mean(seq)) if len(seq) else float(default)

def decision_value(decisions: Iterable, decision_id: str, default: float) -> float:
    """Value of the decision with this id, or `default` when it is absent."""
    for d in decisions:
        if d.id == decision_id:
            return float(d.value)
    return float(default)

def snap_to_step(value: float, lo: float, step: float) -> float:
    if step <= 0: return float(value)
    return round(lo + round((value - lo) / step) * step, 10)
