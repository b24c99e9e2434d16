# policysim/analytics.py
from typing import Dict, Optional, Sequence

import pandas as pd

from .constants import INDICATOR_FIELDS
from .effects import calculate_improvement, score_rating
from .state import IndicatorSnapshot, TradeRelationship, WorldState
from .trade import trade_graph


def history_frame(history: Sequence[IndicatorSnapshot]) -> pd.DataFrame:
    """One row per year of the player's snapshots."""
    if not history:
        return pd.DataFrame(columns=["country", "year", *INDICATOR_FIELDS])
    return pd.DataFrame([s.as_dict() for s in history])


def countries_frame(state: WorldState) -> pd.DataFrame:
    return pd.DataFrame([s.as_dict() for s in state.countries.values()]).set_index("country")


def trade_frame(trade_matrix: Sequence[TradeRelationship]) -> pd.DataFrame:
    return pd.DataFrame(
        [(t.source, t.target, t.trade_volume, t.tariff_rate, t.cooperation) for t in trade_matrix],
        columns=["source", "target", "trade_volume", "tariff_rate", "cooperation"],
    )


def trade_hubs(trade_matrix: Sequence[TradeRelationship], countries: Sequence[str] = ()) -> pd.DataFrame:
    """
    Ranks countries by weighted trade strength (in + out volume) with partner
    count and mean edge cooperation. Isolated countries appear with zeros.
    """
    G = trade_graph(trade_matrix, countries)
    rows = []
    for n in G.nodes:
        edges = list(G.in_edges(n, data=True)) + list(G.out_edges(n, data=True))
        coop = [d["cooperation"] for _, _, d in edges]
        rows.append({
            "country": n,
            "strength": float(G.in_degree(n, weight="weight") + G.out_degree(n, weight="weight")),
            "partners": len(set(G.predecessors(n)) | set(G.successors(n))),
            "mean_cooperation": float(sum(coop) / len(coop)) if coop else 0.0,
        })
    df = pd.DataFrame(rows, columns=["country", "strength", "partners", "mean_cooperation"])
    return df.sort_values(["strength", "country"], ascending=[False, True]).reset_index(drop=True)


def improvement_table(final: IndicatorSnapshot, initial: IndicatorSnapshot,
                      fields: Optional[Sequence[str]] = None) -> pd.DataFrame:
    fields = list(fields or INDICATOR_FIELDS)
    rows = []
    for f in fields:
        a, b = getattr(initial, f), getattr(final, f)
        imp = calculate_improvement(b, a)
        rows.append({"indicator": f, "initial": a, "final": b,
                     "change": imp["value"], "pct_change": imp["percentage"]})
    return pd.DataFrame(rows).set_index("indicator")


def summarize(state: WorldState, name: str = "", print_: bool = False) -> Dict[str, object]:
    if not state.player_country or not state.history: return {}
    final = state.history[-1]
    initial = state.initial.get(state.player_country, state.history[0])
    out: Dict[str, object] = {
        "name": name,
        "country": state.player_country,
        "end_year": state.year,
        "score": state.final_score,
        "rating": score_rating(state.final_score)["rating"] if state.final_score is not None else None,
        "gdp_change": final.gdp_growth - initial.gdp_growth,
        "literacy_change": final.literacy_rate - initial.literacy_rate,
        "poverty_change": final.poverty_rate - initial.poverty_rate,
        "cooperation_index": state.cooperation_index,
        "events": len(state.regional_events),
        "local_events": len(state.local_events),
    }
    if print_:
        print(f"\n== {name or state.player_country} Summary ==")
        print(f"  Final Year: {out['end_year']}")
        if state.final_score is not None:
            print(f"  Score: {state.final_score:.0f} ({out['rating']})")
        print(f"  GDP Growth Change: {out['gdp_change']:+.2f} pts")
        print(f"  Literacy Change: {out['literacy_change']:+.2f} pts")
        print(f"  Poverty Change: {out['poverty_change']:+.2f} pts")
        print(f"  Cooperation Index: {out['cooperation_index']:.1f}")
        print(f"  Regional Events: {out['events']}")
        print(f"  Local Shocks: {out['local_events']}")
    return out
