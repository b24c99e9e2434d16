from __future__ import annotations
import pytest

from conftest import FixedRng
from policysim.config import Bounds, Config
from policysim.constants import Phase
from policysim.data import COUNTRY_NAMES
from policysim.engine import (
    AdvanceYear, FinishGame, PolicyGame, Restart, SelectCountry, SetDecision,
)
from policysim.policies import autopilot_open_region


@pytest.fixture
def short_cfg() -> Config:
    return Config(countries=list(COUNTRY_NAMES), start_year=2023, end_year=2026, seed=3)


@pytest.fixture
def game(short_cfg) -> PolicyGame:
    return PolicyGame(short_cfg)


def _play(game, country="India"):
    return game.dispatch(SelectCountry(country))


def test_config_rejects_empty_horizon():
    with pytest.raises(ValueError):
        Config(countries=["India"], start_year=2030, end_year=2030)


def test_starts_in_select(game):
    s = game.state
    assert s.phase is Phase.SELECT
    assert s.year == 2023
    assert set(s.countries) == set(COUNTRY_NAMES)
    assert s.cooperation_index == 65.0


def test_advance_before_select_is_ignored(game):
    before = game.state
    assert game.dispatch(AdvanceYear()) is before


def test_select_unknown_country(game):
    with pytest.raises(ValueError):
        game.dispatch(SelectCountry("Atlantis"))


def test_select_sets_up_decisions(game):
    s = _play(game)
    assert s.phase is Phase.PLAY and s.game_active
    assert s.player_country == "India"
    assert set(s.decisions) == set(COUNTRY_NAMES)
    assert {d.id: d.value for d in s.player_decisions}["trade"] == 50.0
    assert {d.id: d.value for d in s.decisions["Bhutan"]}["cooperation"] == 70.0
    assert len(s.history) == 1


def test_set_decision_snaps_and_clamps(game):
    _play(game)
    s = game.dispatch(SetDecision("education", 4.3))
    assert {d.id: d.value for d in s.player_decisions}["education"] == 4.5
    s = game.dispatch(SetDecision("education", 99.0))
    assert {d.id: d.value for d in s.player_decisions}["education"] == 15.0


@pytest.mark.parametrize("value, expected", [(float("inf"), 15.0), (float("-inf"), 1.0)])
def test_set_decision_infinite_clamps_to_bounds(game, value, expected):
    _play(game)
    s = game.dispatch(SetDecision("education", value))
    assert {d.id: d.value for d in s.player_decisions}["education"] == expected


def test_set_decision_nan_ignored(game):
    before = _play(game)
    assert game.dispatch(SetDecision("education", float("nan"))) is before
    assert {d.id: d.value for d in game.state.player_decisions}["education"] == 4.0


def test_set_decision_unknown_id_ignored(game):
    before = _play(game)
    assert game.dispatch(SetDecision("space_program", 3.0)) is before


def test_set_decision_leaves_previous_state(game):
    before = _play(game)
    game.dispatch(SetDecision("tariff", 30.0))
    assert {d.id: d.value for d in before.player_decisions}["tariff"] == 15.0


def test_advance_year(game):
    before = _play(game)
    saved_matrix = list(before.trade_matrix)
    after = game.dispatch(AdvanceYear())
    assert after.year == 2024
    assert before.year == 2023
    assert before.trade_matrix == saved_matrix
    assert len(after.trade_matrix) == len(before.trade_matrix)
    assert len(after.history) == 2
    assert after.history[-1] == after.countries["India"]
    assert all(s.year == 2024 for s in after.countries.values())
    assert after.spillover_effects == [s for ss in after.spillovers_by_country.values() for s in ss]


def test_cooperation_index_is_mean_of_decisions(game):
    _play(game)
    s = game.dispatch(AdvanceYear())
    coop = [next(d.value for d in ds if d.id == "cooperation") for ds in s.decisions.values()]
    assert s.cooperation_index == pytest.approx(sum(coop) / len(coop))


def test_player_decisions_untouched_by_ai_step(game):
    _play(game)
    game.dispatch(SetDecision("trade", 70.0))
    s = game.dispatch(AdvanceYear())
    assert {d.id: d.value for d in s.player_decisions}["trade"] == 70.0


def test_indicators_stay_in_bounds(short_cfg):
    cfg = short_cfg.with_overrides(end_year=2043)
    game = PolicyGame(cfg)
    final = game.run("Afghanistan", autopilot_open_region)
    limits = Bounds().limits
    for stats in final.countries.values():
        for field, (lo, hi) in limits.items():
            v = getattr(stats, field)
            assert lo is None or v >= lo, field
            assert hi is None or v <= hi, field


def test_no_advance_past_horizon(game):
    _play(game)
    for _ in range(3):
        game.dispatch(AdvanceYear())
    end = game.state
    assert end.year == 2026
    assert game.dispatch(AdvanceYear()) is end


def test_finish_only_at_horizon(game):
    _play(game)
    s = game.dispatch(FinishGame())
    assert s.phase is Phase.PLAY
    for _ in range(3):
        game.dispatch(AdvanceYear())
    s = game.dispatch(FinishGame())
    assert s.phase is Phase.REPORT
    assert not s.game_active
    assert 0.0 <= s.final_score <= 1000.0
    assert game.progress() == 100.0


def test_restart_only_from_report(game):
    playing = _play(game)
    assert game.dispatch(Restart()) is playing
    game.run("India")
    s = game.dispatch(Restart())
    assert s.phase is Phase.SELECT
    assert s.year == 2023
    assert s.history == []
    assert s.countries == s.initial


def test_progress(game):
    _play(game)
    assert game.progress() == 0.0
    game.dispatch(AdvanceYear())
    assert game.progress() == pytest.approx(100.0 / 3)


def test_subscribers_see_each_new_state(game):
    seen = []
    unsubscribe = game.subscribe(seen.append)
    _play(game)
    game.dispatch(AdvanceYear())
    game.dispatch(SetDecision("nonexistent", 1.0))
    assert [s.phase for s in seen] == [Phase.PLAY, Phase.PLAY]
    unsubscribe()
    game.dispatch(AdvanceYear())
    assert len(seen) == 2


def test_unknown_action(game):
    with pytest.raises(ValueError):
        game.dispatch("next year")


def test_same_seed_same_game(short_cfg):
    a = PolicyGame(short_cfg).run("Nepal", autopilot_open_region)
    b = PolicyGame(short_cfg).run("Nepal", autopilot_open_region)
    assert a.final_score == b.final_score
    assert a.history == b.history
    assert a.regional_events == b.regional_events


def test_injected_rng_is_used(short_cfg):
    rng = FixedRng(0.5)
    game = PolicyGame(short_cfg, rng=rng)
    _play(game)
    game.dispatch(AdvanceYear())
    assert rng.calls > 0
    # midpoint draws: no gdp jitter, no AI jitter, no local shocks
    assert game.state.local_events == []


def test_local_shocks_kept_apart_from_regional_events(short_cfg):
    game = PolicyGame(short_cfg, rng=FixedRng(0.01))
    _play(game)
    s = game.dispatch(AdvanceYear())
    assert [e.name for e in s.local_events] == ["Monsoon Flooding"] * len(COUNTRY_NAMES)
    assert not any(e.name in ("Monsoon Flooding", "Investment Inflow") for e in s.regional_events)
    assert game.dispatch(AdvanceYear()).local_events[:len(COUNTRY_NAMES)] == s.local_events


def test_detailed_spillovers_for_player(game):
    _play(game)
    game.dispatch(SetDecision("energy", 8.0))
    s = game.dispatch(AdvanceYear())
    assert any(d.id == "India-Nepal-energy" for d in s.detailed_spillovers)
    assert all(d.source_country == "India" for d in s.detailed_spillovers)
