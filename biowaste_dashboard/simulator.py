"""
Simulated data generator for the bio-waste dashboards.

Generates twelve months of parish-level collection data, municipal costs,
incidents and urban-waste totals for the operator's service area. All
values are synthetic. A fixed seed makes the output reproducible.
"""

import calendar
import logging

import numpy as np
import pandas as pd

from .config import (
    CONTAMINATION_TYPES,
    COST_CATEGORIES,
    DEFAULT_SEED,
    EMISSION_FACTORS,
    FIRST_MONTH,
    INCIDENT_SECTORS,
    MUNICIPALITIES,
    N_MONTHS,
    PARISHES,
    SEVERITIES,
)
from .dataset import WasteDataset

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Typical collection parameters (realistic ranges)
# ---------------------------------------------------------------------------
# Jan..Dec
_SEASONAL_MULTIPLIERS = [0.85, 0.87, 0.92, 0.95, 1.0, 1.08, 1.15, 1.2, 1.1, 1.0, 0.93, 0.9]

_GROWTH_RATE = 0.015  # monthly, compounding
_BAGS_PER_10_INHABITANTS = 1.0
_BAG_WEIGHT = {"mean": 8.0, "std": 3.0, "min": 0.5, "max": 30.0}
_VOLUME_PER_BAG_M3 = 0.012
_NOISE = 0.15
_REJECTION_RATE_BASE = 0.03

_BASE_CONTAMINATION_PCT = {
    "MUN-MAF": 7.0,
    "MUN-CAS": 9.0,
    "MUN-OEI": 10.0,
    "MUN-SIN": 12.0,
}

_COST_PER_TON_EUR = {"MUN-CAS": 45.0, "MUN-SIN": 42.0, "MUN-OEI": 48.0, "MUN-MAF": 40.0}
_COST_SPLIT = [0.35, 0.25, 0.15, 0.20, 0.05]  # same order as COST_CATEGORIES

# Bio-waste share of total urban waste
_BIO_URBAN_SHARE = {"MUN-CAS": 0.20, "MUN-SIN": 0.18, "MUN-OEI": 0.22, "MUN-MAF": 0.15}

_INCIDENT_TYPES = {
    "belt_failure": 0.25,
    "blockage": 0.20,
    "critical_contamination": 0.15,
    "sensor_failure": 0.15,
    "rfid_error": 0.15,
    "maintenance": 0.10,
}
_SEVERITY_WEIGHTS = [0.35, 0.35, 0.20, 0.10]  # same order as SEVERITIES
_MTTR = {"mean": 18.0, "std": 8.0, "min": 3.0, "max": 90.0}

_TEAMS = [
    ("EQ-CAS-A", "Cascais Team A", "MUN-CAS", "collection", 4),
    ("EQ-CAS-B", "Cascais Team B", "MUN-CAS", "collection", 4),
    ("EQ-SIN-A", "Sintra Team A", "MUN-SIN", "collection", 5),
    ("EQ-SIN-B", "Sintra Team B", "MUN-SIN", "collection", 5),
    ("EQ-OEI-A", "Oeiras Team A", "MUN-OEI", "collection", 4),
    ("EQ-OEI-B", "Oeiras Team B", "MUN-OEI", "collection", 3),
    ("EQ-MAF-A", "Mafra Team A", "MUN-MAF", "collection", 3),
    ("EQ-MAF-B", "Mafra Team B", "MUN-MAF", "collection", 3),
]

# (code, parish suffixes, team suffix, frequency, shift, collection points)
_ROUTES = {
    "CAS": [
        ("001", ["01"], "A", "daily", "morning", 45),
        ("002", ["01"], "A", "daily", "afternoon", 38),
        ("003", ["02"], "A", "3x_week", "morning", 52),
        ("004", ["02"], "B", "3x_week", "afternoon", 41),
        ("005", ["03"], "B", "daily", "morning", 60),
        ("006", ["03"], "B", "3x_week", "afternoon", 48),
        ("007", ["04"], "A", "2x_week", "morning", 32),
        ("008", ["04"], "B", "2x_week", "afternoon", 28),
        ("009", ["01", "02"], "A", "3x_week", "night", 35),
        ("010", ["03", "04"], "B", "2x_week", "night", 30),
    ],
    "SIN": [
        ("001", ["01"], "A", "daily", "morning", 55),
        ("002", ["01"], "A", "daily", "afternoon", 48),
        ("003", ["02"], "A", "daily", "morning", 70),
        ("004", ["02"], "B", "3x_week", "afternoon", 62),
        ("005", ["03"], "B", "daily", "morning", 50),
        ("006", ["03"], "A", "3x_week", "afternoon", 44),
        ("007", ["04"], "B", "3x_week", "morning", 42),
        ("008", ["04"], "B", "2x_week", "afternoon", 38),
        ("009", ["05"], "A", "2x_week", "morning", 28),
        ("010", ["05"], "B", "2x_week", "afternoon", 25),
    ],
    "OEI": [
        ("001", ["01"], "A", "daily", "morning", 50),
        ("002", ["01"], "A", "daily", "afternoon", 42),
        ("003", ["02"], "A", "daily", "morning", 55),
        ("004", ["02"], "B", "3x_week", "afternoon", 46),
        ("005", ["03"], "B", "3x_week", "morning", 40),
        ("006", ["03"], "A", "3x_week", "afternoon", 36),
        ("007", ["04"], "B", "2x_week", "morning", 28),
        ("008", ["04"], "B", "2x_week", "afternoon", 24),
        ("009", ["01", "02"], "A", "3x_week", "night", 38),
        ("010", ["03", "04"], "B", "2x_week", "night", 30),
    ],
    "MAF": [
        ("001", ["01"], "A", "3x_week", "morning", 30),
        ("002", ["01"], "A", "2x_week", "afternoon", 22),
        ("003", ["02"], "A", "3x_week", "morning", 18),
        ("004", ["02"], "B", "2x_week", "afternoon", 15),
        ("005", ["03"], "B", "3x_week", "morning", 22),
        ("006", ["03"], "A", "2x_week", "afternoon", 18),
        ("007", ["04"], "B", "2x_week", "morning", 25),
        ("008", ["04"], "A", "2x_week", "afternoon", 20),
        ("009", ["05"], "B", "2x_week", "morning", 20),
        ("010", ["05"], "A", "2x_week", "afternoon", 18),
    ],
}


def _with_noise(rng: np.random.Generator, value: float, noise: float) -> float:
    """Scale value by a uniform factor in [1 - noise, 1 + noise)."""
    return value * (1 + rng.uniform(-noise, noise))


def generate_months(start_month: str = FIRST_MONTH, n_months: int = N_MONTHS) -> list[str]:
    return [m.strftime("%Y-%m") for m in pd.date_range(start_month, periods=n_months, freq="MS")]


def generate_reference_tables() -> dict[str, pd.DataFrame]:
    """Static dimension tables: municipalities, parishes, teams, routes, catalogues."""
    routes = []
    for prefix, rows in _ROUTES.items():
        municipality_id = f"MUN-{prefix}"
        for code, parish_suffixes, team_suffix, frequency, shift, points in rows:
            routes.append({
                "route_id": f"RT-{prefix}-{code}",
                "code": f"{prefix}-{code}",
                "municipality_id": municipality_id,
                "parish_ids": tuple(f"FRG-{prefix}-{s}" for s in parish_suffixes),
                "team_id": f"EQ-{prefix}-{team_suffix}",
                "frequency": frequency,
                "shift": shift,
                "collection_points": points,
            })

    return {
        "municipalities": pd.DataFrame(
            MUNICIPALITIES, columns=["municipality_id", "name", "population", "area_km2", "color"]
        ),
        "parishes": pd.DataFrame(
            PARISHES, columns=["parish_id", "municipality_id", "name", "population", "area_km2"]
        ),
        "teams": pd.DataFrame(_TEAMS, columns=["team_id", "name", "municipality_id", "kind", "members"]),
        "routes": pd.DataFrame(routes),
        "contamination_types": pd.DataFrame(
            CONTAMINATION_TYPES, columns=["contamination_type_id", "name", "color", "typical_pct"]
        ),
        "emission_factors": pd.DataFrame(
            EMISSION_FACTORS, columns=["factor_id", "scenario", "tco2e_per_ton", "source"]
        ),
    }


def generate_parish_monthly(
    rng: np.random.Generator,
    months: list[str],
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Generate monthly parish collection rows and their contamination breakdown.

    Bags scale with population, season and a compounding growth trend.
    The contamination breakdown splits contaminant kg across types around
    their typical share, renormalised so the shares sum to one.
    """
    rows = []
    breakdown = []

    for parish_id, municipality_id, _, population, _ in PARISHES:
        base_contamination = _BASE_CONTAMINATION_PCT.get(municipality_id, 10.0)

        for i, month in enumerate(months):
            calendar_month = int(month.split("-")[1])
            base_bags = population / 10 * _BAGS_PER_10_INHABITANTS
            seasonal = _SEASONAL_MULTIPLIERS[calendar_month - 1]
            growth = (1 + _GROWTH_RATE) ** i

            bags = int(round(_with_noise(rng, base_bags * seasonal * growth, _NOISE)))
            avg_weight = float(np.clip(
                rng.normal(_BAG_WEIGHT["mean"], _BAG_WEIGHT["std"]),
                _BAG_WEIGHT["min"],
                _BAG_WEIGHT["max"],
            ))
            weight_kg = int(round(bags * avg_weight))

            contamination_pct = round(float(np.clip(
                _with_noise(rng, base_contamination, 0.2),
                base_contamination * 0.5,
                base_contamination * 2,
            )), 1)

            rejection_rate = float(np.clip(_with_noise(rng, _REJECTION_RATE_BASE, 0.3), 0.01, 0.08))

            rows.append({
                "month": month,
                "parish_id": parish_id,
                "municipality_id": municipality_id,
                "bags": bags,
                "weight_kg": weight_kg,
                "volume_m3": round(bags * _VOLUME_PER_BAG_M3, 2),
                "avg_bag_weight_kg": round(weight_kg / bags, 1) if bags else 0.0,
                "contamination_pct": contamination_pct,
                "rejected_bags": int(round(bags * rejection_rate)),
            })

            contaminant_kg = weight_kg * contamination_pct / 100
            shares = np.array([
                np.clip(_with_noise(rng, typical_pct / 100, 0.25), 0.01, 0.5)
                for *_, typical_pct in CONTAMINATION_TYPES
            ])
            shares = shares / shares.sum()
            for (type_id, *_), share in zip(CONTAMINATION_TYPES, shares):
                breakdown.append({
                    "month": month,
                    "parish_id": parish_id,
                    "municipality_id": municipality_id,
                    "contamination_type_id": type_id,
                    "kg": round(contaminant_kg * float(share), 1),
                })

    df = pd.DataFrame(rows)
    logger.info("Generated parish_monthly with %d rows", len(df))
    return df, pd.DataFrame(breakdown)


def generate_incidents(rng: np.random.Generator, months: list[str]) -> pd.DataFrame:
    """Generate 3-12 incidents per municipality per month."""
    rows = []
    counter = 0
    types = list(_INCIDENT_TYPES)
    type_weights = list(_INCIDENT_TYPES.values())

    for municipality_id, *_ in MUNICIPALITIES:
        for month in months:
            year, calendar_month = (int(p) for p in month.split("-"))
            days_in_month = calendar.monthrange(year, calendar_month)[1]
            count = int(round(float(np.clip(_with_noise(rng, 6.5, 0.3), 3, 12))))

            month_rows = []
            for _ in range(count):
                counter += 1
                occurred_at = pd.Timestamp(
                    year=year,
                    month=calendar_month,
                    day=int(rng.integers(1, days_in_month + 1)),
                    hour=int(rng.integers(6, 23)),
                    minute=int(rng.integers(0, 60)),
                )
                severity = str(rng.choice(SEVERITIES, p=_SEVERITY_WEIGHTS))
                unresolved_chance = 0.15 if severity == "critical" else 0.05

                month_rows.append({
                    "incident_id": f"INC-{counter:05d}",
                    "month": month,
                    "municipality_id": municipality_id,
                    "type": str(rng.choice(types, p=type_weights)),
                    "severity": severity,
                    "sector": str(rng.choice(INCIDENT_SECTORS)),
                    "occurred_at": occurred_at,
                    "resolution_min": int(round(float(np.clip(
                        rng.normal(_MTTR["mean"], _MTTR["std"]), _MTTR["min"], _MTTR["max"]
                    )))),
                    "resolved": bool(rng.random() > unresolved_chance),
                })

            rows.extend(sorted(month_rows, key=lambda r: r["occurred_at"]))

    df = pd.DataFrame(rows)
    logger.info("Generated incidents with %d rows", len(df))
    return df


def generate_costs(rng: np.random.Generator, parish_monthly: pd.DataFrame) -> pd.DataFrame:
    """Monthly municipal costs from collected tonnage, split into five categories."""
    tons = parish_monthly.groupby(["municipality_id", "month"])["weight_kg"].sum() / 1000
    rows = []

    for municipality_id, *_ in MUNICIPALITIES:
        cost_per_ton = _COST_PER_TON_EUR.get(municipality_id, 44.0)
        for month in sorted(parish_monthly["month"].unique()):
            total = _with_noise(rng, float(tons.get((municipality_id, month), 0.0)) * cost_per_ton, 0.08)
            row = {"month": month, "municipality_id": municipality_id}
            for category, share in zip(COST_CATEGORIES, _COST_SPLIT):
                row[category] = round(total * share, 2)
            row["total_eur"] = round(sum(row[c] for c in COST_CATEGORIES), 2)
            rows.append(row)

    df = pd.DataFrame(rows)
    logger.info("Generated costs with %d rows", len(df))
    return df


def generate_urban_waste(rng: np.random.Generator, parish_monthly: pd.DataFrame) -> pd.DataFrame:
    """Total urban waste per municipality-month, derived from bio-waste share."""
    tons = parish_monthly.groupby(["municipality_id", "month"])["weight_kg"].sum() / 1000
    rows = []

    for municipality_id, *_ in MUNICIPALITIES:
        target_share = _BIO_URBAN_SHARE.get(municipality_id, 0.19)
        for month in sorted(parish_monthly["month"].unique()):
            share = _with_noise(rng, target_share, 0.10)
            rows.append({
                "month": month,
                "municipality_id": municipality_id,
                "total_urban_tons": round(float(tons.get((municipality_id, month), 0.0)) / share, 1),
            })

    return pd.DataFrame(rows)


def generate_dataset(seed: int = DEFAULT_SEED) -> WasteDataset:
    """Build the complete dataset once. Same seed, same tables."""
    rng = np.random.default_rng(seed)
    months = generate_months()

    reference = generate_reference_tables()
    parish_monthly, contamination_by_type = generate_parish_monthly(rng, months)

    dataset = WasteDataset(
        parish_monthly=parish_monthly,
        contamination_by_type=contamination_by_type,
        incidents=generate_incidents(rng, months),
        costs=generate_costs(rng, parish_monthly),
        urban_waste=generate_urban_waste(rng, parish_monthly),
        **reference,
    )
    logger.info(
        "Generated dataset: %d municipalities, %d parishes, %d months (seed=%d)",
        len(dataset.municipalities), len(dataset.parishes), len(months), seed,
    )
    return dataset
