# main.py
import logging

import pandas as pd

from policysim.analytics import improvement_table, summarize, trade_frame, trade_hubs
from policysim.config import Config
from policysim.data import COUNTRY_NAMES
from policysim.effects import score_rating
from policysim.engine import PolicyGame
from policysim.policies import autopilot_human_capital
from policysim.scenarios import run_scenarios


def create_default_config() -> Config:
    return Config(countries=list(COUNTRY_NAMES), start_year=2023, end_year=2043, seed=42)


def main(country: str = "India"):
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    pd.set_option("display.width", 120)
    cfg = create_default_config()

    print(f"--- Running {cfg.horizon}-year game as {country} ---")
    game = PolicyGame(cfg)
    final = game.run(country, autopilot_human_capital)
    summarize(final, name=f"{country} (human capital)", print_=True)
    rating = score_rating(final.final_score)
    print(f"  {rating['rating']}: {rating['description']}")

    print("\n--- Indicator changes ---")
    print(improvement_table(final.history[-1], final.initial[country]).round(2))

    print("\n--- Trade hubs after the final year ---")
    print(trade_hubs(final.trade_matrix, cfg.countries).round(2).to_string(index=False))
    print(f"\nEdges: {len(trade_frame(final.trade_matrix))}, "
          f"detailed spillovers last year: {len(final.detailed_spillovers)}")

    print("\n--- Scenario comparison ---")
    _, scores = run_scenarios(cfg, country)
    for label, score in scores.items():
        print(f"  {label:<12} {score:7.1f}  {score_rating(score)['rating']}")


if __name__ == "__main__":
    main()
