from __future__ import annotations
import copy

import pytest

from policysim.data import create_default_decisions, initial_trade_matrix
from policysim.state import TradeRelationship as TR
from policysim.trade import policy_changes, trade_graph, update_trade_matrix


def test_input_edges_not_mutated():
    edges = initial_trade_matrix()
    saved = copy.deepcopy(edges)
    changes = {c: {"trade_openness": 90.0, "infrastructure_investment": 12.0, "cooperation_policy": 40.0}
               for c in ("India", "Pakistan", "Nepal")}
    out = update_trade_matrix(edges, changes)
    assert edges == saved
    assert out != saved
    assert all(a is not b for a, b in zip(edges, out))


def test_same_length_and_order():
    edges = initial_trade_matrix()
    out = update_trade_matrix(edges, {})
    assert [(t.source, t.target) for t in out] == [(t.source, t.target) for t in edges]
    assert out == edges


def test_openness_on_source_only():
    edges = [TR("A", "B", 10.0, 10.0, 50.0)]
    out = update_trade_matrix(edges, {"A": {"trade_openness": 50.0}})[0]
    assert out.trade_volume == pytest.approx(10.5)
    assert out.tariff_rate == pytest.approx(9.0)
    assert update_trade_matrix(edges, {"B": {"trade_openness": 50.0}})[0] == edges[0]


def test_infrastructure_averages_both_ends():
    edges = [TR("A", "B", 10.0, 10.0, 50.0)]
    one_side = update_trade_matrix(edges, {"A": {"infrastructure_investment": 10.0}})[0]
    assert one_side.trade_volume == pytest.approx(10.0)
    both = update_trade_matrix(edges, {"A": {"infrastructure_investment": 10.0},
                                       "B": {"infrastructure_investment": 10.0}})[0]
    assert both.trade_volume == pytest.approx(11.0)


def test_cooperation_clamped():
    edges = [TR("A", "B", 10.0, 10.0, 80.0)]
    assert update_trade_matrix(edges, {"A": {"cooperation_policy": 30.0}})[0].cooperation == 100.0
    assert update_trade_matrix(edges, {"A": {"cooperation_policy": -100.0}})[0].cooperation == 0.0
    assert update_trade_matrix(edges, {"B": {"cooperation_policy": 10.0}})[0].cooperation == 80.0


def test_volume_and_tariff_clamped():
    edges = [TR("A", "B", 10.0, 60.0, 50.0)]
    out = update_trade_matrix(edges, {})[0]
    assert out.tariff_rate == 50.0
    crash = update_trade_matrix(edges, {"A": {"trade_openness": -2000.0}})[0]
    assert crash.trade_volume == 0.0


def test_unknown_countries_have_no_effect():
    edges = [TR("Atlantis", "Lemuria", 3.0, 4.0, 5.0)]
    assert update_trade_matrix(edges, {"India": {"trade_openness": 100.0}}) == edges


def test_policy_changes_from_decisions():
    changes = policy_changes(create_default_decisions())
    assert changes == {"trade_openness": 50.0, "infrastructure_investment": 5.0, "cooperation_policy": 0.0}


def test_trade_graph_keeps_isolated_countries():
    G = trade_graph(initial_trade_matrix(), ["India", "Myanmar"])
    assert "Myanmar" in G and G.degree("Myanmar") == 0
    assert G["India"]["Bhutan"]["weight"] == 12.5
    assert G.number_of_edges() == 22
