# policysim/data.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import pandas as pd

from .constants import INDICATOR_SOURCES
from .state import Country, IndicatorSnapshot, PolicyDecision, TradeRelationship
from .utils import mean_or

logger = logging.getLogger(__name__)

SOUTH_ASIAN_COUNTRIES: List[Country] = [
    Country("India",       "IND", "#FF9933", "\U0001F1EE\U0001F1F3"),
    Country("Pakistan",    "PAK", "#01411C", "\U0001F1F5\U0001F1F0"),
    Country("Bangladesh",  "BGD", "#006A4E", "\U0001F1E7\U0001F1E9"),
    Country("Sri Lanka",   "LKA", "#FFB300", "\U0001F1F1\U0001F1F0"),
    Country("Nepal",       "NPL", "#DC143C", "\U0001F1F3\U0001F1F5"),
    Country("Bhutan",      "BTN", "#FFD700", "\U0001F1E7\U0001F1F9"),
    Country("Maldives",    "MDV", "#007F3D", "\U0001F1F2\U0001F1FB"),
    Country("Afghanistan", "AFG", "#000000", "\U0001F1E6\U0001F1EB"),
    Country("Myanmar",     "MMR", "#FF6600", "\U0001F1F2\U0001F1F2"),
]
COUNTRY_NAMES: List[str] = [c.name for c in SOUTH_ASIAN_COUNTRIES]


def get_country(name: str) -> Optional[Country]:
    return next((c for c in SOUTH_ASIAN_COUNTRIES if c.name == name), None)


# --- Decision set ---
# (id, name, description, category, value, min, max, step, unit)
_DECISION_ROWS = [
    ("education", "Education Spending", "Invest in schools, universities, and literacy programs",
     "education", 4.0, 1.0, 15.0, 0.5, "% GDP"),
    ("health", "Healthcare Investment", "Fund hospitals, medical infrastructure, and public health",
     "health", 3.0, 1.0, 12.0, 0.5, "% GDP"),
    ("infrastructure", "Infrastructure Development", "Build roads, bridges, power plants, and telecommunications",
     "infrastructure", 5.0, 2.0, 20.0, 0.5, "% GDP"),
    ("environment", "Environmental Policy", "Implement green technologies and emission reduction measures",
     "environment", 2.0, 0.0, 8.0, 0.5, "% GDP"),
    ("trade", "Trade Liberalization", "Open markets, reduce barriers, and promote international trade",
     "economic", 50.0, 0.0, 100.0, 5.0, "% Open"),
    ("tariff", "Tariff Policy", "Set import tariffs to protect domestic industries vs. free trade",
     "economic", 15.0, 0.0, 40.0, 2.0, "% Avg"),
    ("cooperation", "Regional Cooperation", "Invest in SAARC initiatives and bilateral partnerships",
     "economic", 50.0, 0.0, 100.0, 5.0, "% Engagement"),
    ("agriculture", "Agricultural Development", "Subsidies, irrigation, technology, and rural development programs",
     "agriculture", 3.5, 1.0, 12.0, 0.5, "% GDP"),
    ("manufacturing", "Manufacturing Incentives", "Industrial parks, tax breaks, and manufacturing promotion",
     "manufacturing", 2.0, 0.5, 8.0, 0.5, "% GDP"),
    ("services", "Services Sector Development", "IT, finance, tourism, and service industry promotion",
     "services", 1.5, 0.5, 6.0, 0.5, "% GDP"),
    ("energy", "Energy Policy", "Power generation, renewable energy, and energy security",
     "energy", 4.0, 2.0, 15.0, 0.5, "% GDP"),
    ("technology", "Technology & Innovation", "R&D, digital infrastructure, and innovation ecosystems",
     "technology", 1.0, 0.2, 5.0, 0.2, "% GDP"),
    ("tourism", "Tourism Development", "Tourism infrastructure, marketing, and hospitality sector",
     "tourism", 0.8, 0.1, 4.0, 0.1, "% GDP"),
    ("fiscal_deficit", "Fiscal Deficit Target", "Government budget deficit as percentage of GDP",
     "fiscal", 3.5, 0.0, 10.0, 0.5, "% GDP"),
    ("foreign_investment", "Foreign Investment Policy", "FDI limits, investment incentives, and market access",
     "investment", 60.0, 20.0, 100.0, 5.0, "% Open"),
    ("social_protection", "Social Protection", "Welfare programs, unemployment benefits, and social safety nets",
     "social", 2.5, 0.5, 8.0, 0.5, "% GDP"),
    ("labor_market", "Labor Market Flexibility", "Employment laws, worker rights, and labor market regulations",
     "labor", 50.0, 20.0, 80.0, 5.0, "% Flexible"),
]

def create_default_decisions() -> List[PolicyDecision]:
    return [PolicyDecision(*row) for row in _DECISION_ROWS]

DEFAULT_DECISION_VALUES: Dict[str, float] = {row[0]: row[4] for row in _DECISION_ROWS}

# AI starting offsets from the default set
COUNTRY_POLICY_VARIATIONS: Dict[str, Dict[str, float]] = {
    "India":       {"education": 1.0, "infrastructure": 2.0, "trade": 10, "cooperation": 5},
    "Pakistan":    {"health": 0.5, "infrastructure": -1.0, "tariff": 5, "cooperation": -10},
    "Bangladesh":  {"education": -0.5, "infrastructure": 3.0, "trade": 15, "environment": -0.5},
    "Sri Lanka":   {"health": 1.0, "education": 0.5, "tariff": -3, "cooperation": 10},
    "Nepal":       {"infrastructure": -2.0, "environment": 1.0, "cooperation": 15},
    "Bhutan":      {"environment": 3.0, "health": 2.0, "cooperation": 20},
    "Maldives":    {"environment": 2.0, "trade": 20, "infrastructure": -1.0},
    "Afghanistan": {"health": -1.0, "education": -2.0, "cooperation": -20, "tariff": 10},
}


# --- Bilateral trade (volume % GDP, avg tariff %, cooperation 0-100) ---
_TRADE_ROWS = [
    # India: largest economy, hub of the region
    ("India", "Bangladesh", 8.5, 8.5, 75), ("India", "Pakistan", 2.1, 25.0, 35),
    ("India", "Sri Lanka", 4.7, 12.0, 80), ("India", "Nepal", 6.8, 5.0, 85),
    ("India", "Bhutan", 12.5, 0.0, 95), ("India", "Maldives", 4.2, 10.0, 70),
    ("India", "Afghanistan", 1.5, 15.0, 45),
    ("Bangladesh", "India", 1.2, 12.0, 75), ("Bangladesh", "Pakistan", 0.2, 20.0, 60),
    ("Bangladesh", "Sri Lanka", 0.05, 15.0, 65), ("Bangladesh", "Nepal", 0.03, 18.0, 70),
    ("Pakistan", "India", 0.4, 30.0, 35), ("Pakistan", "Bangladesh", 0.1, 18.0, 60),
    ("Pakistan", "Sri Lanka", 0.3, 12.0, 70), ("Pakistan", "Afghanistan", 1.8, 8.0, 80),
    ("Sri Lanka", "India", 1.1, 10.0, 80), ("Sri Lanka", "Pakistan", 0.2, 14.0, 70),
    ("Nepal", "India", 0.7, 3.0, 85),
    ("Bhutan", "India", 0.4, 0.0, 95),
    ("Maldives", "India", 0.02, 8.0, 70),
    ("Afghanistan", "Pakistan", 0.3, 10.0, 80), ("Afghanistan", "India", 0.1, 18.0, 45),
]

def initial_trade_matrix() -> List[TradeRelationship]:
    return [TradeRelationship(*row) for row in _TRADE_ROWS]


# --- Starting indicators (approximate 2023 values, rounded) ---
# Spending fields are public outlays on the slider scale (% GDP), not WDI totals.
REFERENCE_INDICATORS: Dict[str, Dict[str, float]] = {
    #               gdp   unemp  lit   life  pov   co2  pop            inf   hlth edu  infra
    "India":       dict(zip(INDICATOR_SOURCES, (7.2, 4.2, 76.3, 67.7, 21.9, 1.9, 1_428_600_000, 25.5, 3.3, 4.6, 6.5))),
    "Pakistan":    dict(zip(INDICATOR_SOURCES, (-0.2, 5.5, 58.0, 66.4, 21.9, 0.9, 240_500_000, 52.8, 2.9, 2.1, 3.0))),
    "Bangladesh":  dict(zip(INDICATOR_SOURCES, (5.8, 5.1, 75.6, 72.4, 18.7, 0.6, 172_900_000, 23.7, 2.4, 1.8, 5.5))),
    "Sri Lanka":   dict(zip(INDICATOR_SOURCES, (-2.3, 4.7, 92.4, 76.4, 25.0, 0.9, 22_000_000, 5.5, 4.1, 1.5, 3.5))),
    "Nepal":       dict(zip(INDICATOR_SOURCES, (1.9, 10.7, 71.2, 70.5, 20.3, 0.5, 30_900_000, 22.5, 5.4, 4.2, 4.5))),
    "Bhutan":      dict(zip(INDICATOR_SOURCES, (4.6, 3.5, 70.9, 72.2, 12.4, 1.9, 787_000, 20.0, 3.6, 7.0, 8.0))),
    "Maldives":    dict(zip(INDICATOR_SOURCES, (4.0, 4.0, 97.7, 80.8, 5.4, 3.3, 521_000, 5.0, 9.0, 4.1, 7.5))),
    "Afghanistan": dict(zip(INDICATOR_SOURCES, (-6.2, 14.4, 37.3, 62.9, 47.3, 0.3, 42_200_000, 43.4, 7.0, 2.9, 2.5))),
    "Myanmar":     dict(zip(INDICATOR_SOURCES, (1.0, 3.0, 89.1, 67.3, 24.8, 0.7, 54_100_000, 33.0, 4.6, 2.1, 4.0))),
}


class IndicatorTable:
    """
    Historical indicators in long format: one row per (indicator, country, year).
    Lookups fall back to the closest available year; ties go to the earlier year.
    """
    COLUMNS = ["indicator", "country", "year", "value"]

    def __init__(self, frame: pd.DataFrame):
        missing = [c for c in self.COLUMNS if c not in frame.columns]
        if missing:
            raise ValueError(f"Indicator frame is missing columns: {missing}")
        df = frame[self.COLUMNS].copy()
        df["year"] = df["year"].astype(int)
        df["value"] = pd.to_numeric(df["value"], errors="coerce")
        self.df = df.dropna(subset=["value"]).reset_index(drop=True)

    @classmethod
    def from_csv(cls, path: Union[str, Path]) -> "IndicatorTable":
        return cls(pd.read_csv(path))

    @classmethod
    def from_reference(cls, year: int = 2023,
                       reference: Optional[Dict[str, Dict[str, float]]] = None) -> "IndicatorTable":
        reference = REFERENCE_INDICATORS if reference is None else reference
        rows = [
            (INDICATOR_SOURCES[field], country, year, value)
            for country, fields in reference.items()
            for field, value in fields.items()
        ]
        return cls(pd.DataFrame(rows, columns=cls.COLUMNS))

    def get_indicator_value(self, indicator: str, country: str, year: int) -> Optional[float]:
        rows = self.df[(self.df["indicator"] == indicator) & (self.df["country"] == country)]
        if rows.empty:
            return None
        exact = rows[rows["year"] == int(year)]
        if not exact.empty:
            return float(exact["value"].iloc[0])
        dist = (rows["year"] - int(year)).abs()
        closest = rows.assign(dist=dist).sort_values(["dist", "year"]).iloc[0]
        return float(closest["value"])

    def regional_average(self, indicator: str, year: int,
                         countries: Optional[Iterable[str]] = None) -> Optional[float]:
        names = list(countries) if countries is not None else sorted(self.df["country"].unique())
        vals = [v for v in (self.get_indicator_value(indicator, c, year) for c in names) if v is not None]
        return mean_or(vals) if vals else None

    def countries(self) -> List[str]:
        return sorted(self.df["country"].unique())


def build_initial_snapshot(source, country: str, year: int) -> IndicatorSnapshot:
    """Missing indicators are treated as 0.0 (indistinguishable from a true zero)."""
    values = {}
    for field, indicator in INDICATOR_SOURCES.items():
        v = source.get_indicator_value(indicator, country, year)
        if v is None:
            logger.debug("No %s data for %s in %s, using 0.0", indicator, country, year)
            v = 0.0
        values[field] = float(v)
    return IndicatorSnapshot(country=country, year=year, **values)


class TradeProducts:
    """Products traded between ordered country pairs (imports and exports)."""

    def __init__(self, imports: Optional[Dict[str, Dict[str, List[str]]]] = None,
                 exports: Optional[Dict[str, Dict[str, List[str]]]] = None):
        self.imports = imports or {}
        self.exports = exports or {}

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, Dict[str, List[str]]]]) -> "TradeProducts":
        return cls(data.get("imports", {}), data.get("exports", {}))

    def import_products(self, importer: str, exporter: str) -> List[str]:
        return list(self.imports.get(importer, {}).get(exporter, []))

    def export_products(self, exporter: str, importer: str) -> List[str]:
        return list(self.exports.get(exporter, {}).get(importer, []))

    def trading_partners(self, country: str) -> List[str]:
        partners = list(self.imports.get(country, {})) + list(self.exports.get(country, {}))
        return list(dict.fromkeys(partners))

    def trade_intensity(self, a: str, b: str) -> float:
        n = len(self.import_products(a, b)) + len(self.export_products(a, b))
        return float(min(100, n * 5))

    def main_products(self, a: str, b: str) -> Dict[str, List[str]]:
        imports = self.import_products(a, b)
        exports = self.export_products(a, b)
        return {"imports": imports, "exports": exports,
                "total": list(dict.fromkeys(imports + exports))}

    def products_between(self, a: str, b: str) -> List[str]:
        return self.main_products(a, b)["total"]


DEFAULT_TRADE_PRODUCTS: Dict[str, Dict[str, Dict[str, List[str]]]] = {
    "exports": {
        "India": {
            "Bangladesh": ["cotton textiles", "petroleum products", "food grains", "machinery"],
            "Nepal": ["petroleum products", "machinery", "pharmaceuticals"],
            "Sri Lanka": ["petroleum products", "pharmaceuticals", "vehicles"],
            "Bhutan": ["machinery", "food grains"],
            "Maldives": ["food grains", "pharmaceuticals"],
            "Afghanistan": ["pharmaceuticals", "textiles"],
        },
        "Bangladesh": {"India": ["ready-made garments textiles", "jute"]},
        "Bhutan": {"India": ["hydro electricity", "ferro-alloys"]},
        "Nepal": {"India": ["electricity", "spices"]},
        "Pakistan": {"Afghanistan": ["food grains", "cement"], "Sri Lanka": ["textiles"]},
        "Sri Lanka": {"India": ["tea", "rubber"]},
    },
    "imports": {
        "India": {"Bhutan": ["hydro electricity"], "Nepal": ["electricity"],
                  "Bangladesh": ["ready-made garments textiles"]},
        "Bangladesh": {"India": ["cotton textiles", "petroleum products", "food grains"]},
        "Afghanistan": {"Pakistan": ["food grains", "cement"]},
    },
}
