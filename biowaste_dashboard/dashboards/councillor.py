"""
Councillor dashboard: GIS score per parish, population-weighted roll-ups
per municipality, rankings, short-term parish trends and contamination
by type.
"""

import logging

import pandas as pd

from ..aggregation import filter_months, safe_ratio, weighted_average
from ..co2 import co2_complete
from ..config import (
    PARISH_TREND_BAND_POINTS,
    PARISH_TREND_MONTHS,
    RANKING_SIZE,
    SNAPSHOT_ALERTS_PER_TON,
    SNAPSHOT_CO2_PER_TON,
)
from ..dataset import DashboardFilter, WasteDataset
from ..gis_index import calculate_gis_index, classify_gis
from ..periods import annualisation_factor
from ..trends import NEGATIVE, NEUTRAL, POSITIVE
from .common import build_scope

logger = logging.getLogger(__name__)

_PARISH_SCORE_COLS = [
    "parish_id", "municipality_id", "name", "population", "gis_score",
    "classification", "kg_per_capita_year", "contamination_pct", "bio_tons",
    "bags_per_capita_month", "alerts_per_ton", "co2_avoided_t", "gis",
]


def score_parishes(
    parishes: pd.DataFrame,
    records: pd.DataFrame,
    incidents: pd.DataFrame,
    n_months: int,
) -> pd.DataFrame:
    """GIS score for every parish over the given records.

    Incidents are only known per municipality, so each parish is charged
    a share proportional to its collected weight.

    Returns
    -------
    DataFrame sorted by gis_score (best first), one row per parish.
    """
    annualise = annualisation_factor(n_months)

    parish_totals = records.groupby("parish_id").agg(
        weight_kg=("weight_kg", "sum"),
        bags=("bags", "sum"),
    )
    records = records.assign(contamination_mass=records["contamination_pct"] * records["weight_kg"])
    contamination_mass = records.groupby("parish_id")["contamination_mass"].sum()
    municipality_kg = records.groupby("municipality_id")["weight_kg"].sum()
    municipality_incidents = incidents.groupby("municipality_id").size()

    rows = []
    for parish in parishes.itertuples(index=False):
        weight_kg = float(parish_totals["weight_kg"].get(parish.parish_id, 0.0))
        bags = float(parish_totals["bags"].get(parish.parish_id, 0.0))
        bio_tons = weight_kg / 1000
        contamination = safe_ratio(contamination_mass.get(parish.parish_id, 0.0), weight_kg)

        share = safe_ratio(weight_kg, municipality_kg.get(parish.municipality_id, 0.0))
        parish_incidents = float(municipality_incidents.get(parish.municipality_id, 0)) * share
        alerts_per_ton = safe_ratio(parish_incidents, bio_tons)

        kg_per_capita_year = safe_ratio(weight_kg, parish.population) * annualise
        bags_per_capita_month = safe_ratio(bags, parish.population * n_months)
        co2_avoided = co2_complete(bio_tons, contamination)

        gis = calculate_gis_index(
            kg_per_capita_year=kg_per_capita_year,
            contamination_pct=contamination,
            alerts_per_ton=alerts_per_ton,
            co2_avoided_per_ton=safe_ratio(co2_avoided, bio_tons),
            bags_per_capita_month=bags_per_capita_month,
        )
        rows.append({
            "parish_id": parish.parish_id,
            "municipality_id": parish.municipality_id,
            "name": parish.name,
            "population": int(parish.population),
            "gis_score": gis.score,
            "classification": gis.classification,
            "kg_per_capita_year": round(kg_per_capita_year, 1),
            "contamination_pct": round(contamination, 1),
            "bio_tons": round(bio_tons, 1),
            "bags_per_capita_month": round(bags_per_capita_month, 2),
            "alerts_per_ton": round(alerts_per_ton, 2),
            "co2_avoided_t": round(co2_avoided, 1),
            "gis": gis,
        })

    df = pd.DataFrame(rows, columns=_PARISH_SCORE_COLS)
    return df.sort_values("gis_score", ascending=False, kind="stable").reset_index(drop=True)


def summarise_municipalities(
    dataset: WasteDataset,
    parish_scores: pd.DataFrame,
    municipality_ids,
    n_months: int,
) -> pd.DataFrame:
    """Population-weighted GIS and totals per municipality."""
    annualise = annualisation_factor(n_months)
    rows = []
    for municipality_id in municipality_ids:
        scores = parish_scores[parish_scores["municipality_id"] == municipality_id]
        population = int(scores["population"].sum())
        bio_tons = float(scores["bio_tons"].sum())
        gis_score = round(weighted_average(scores, "gis_score", "population"), 1)

        rows.append({
            "municipality_id": municipality_id,
            "name": dataset.municipality_name(municipality_id),
            "gis_score": gis_score,
            "classification": classify_gis(gis_score),
            "bio_tons": round(bio_tons, 1),
            "contamination_pct": round(weighted_average(scores, "contamination_pct", "bio_tons"), 1),
            "co2_avoided_t": round(float(scores["co2_avoided_t"].sum()), 1),
            "population": population,
            "kg_per_capita_year": round(safe_ratio(bio_tons * 1000, population) * annualise, 1),
        })
    return pd.DataFrame(
        rows,
        columns=[
            "municipality_id", "name", "gis_score", "classification", "bio_tons",
            "contamination_pct", "co2_avoided_t", "population", "kg_per_capita_year",
        ],
    )


def parish_trends(parishes: pd.DataFrame, parish_monthly: pd.DataFrame, months) -> pd.DataFrame:
    """Monthly GIS snapshot per parish and its direction over `months`.

    Each snapshot annualises a single month (x12) and uses fixed alert and
    CO2 values, so only volume, quality and bag usage move the score.
    """
    months = list(months)
    df = filter_months(parish_monthly, months)
    df = df.assign(contamination_mass=df["contamination_pct"] * df["weight_kg"])
    totals = df.groupby(["parish_id", "month"])[["weight_kg", "bags", "contamination_mass"]].sum()

    rows = []
    for parish in parishes.itertuples(index=False):
        scores = {}
        for month in months:
            key = (parish.parish_id, month)
            weight_kg = float(totals["weight_kg"].get(key, 0.0))
            bags = float(totals["bags"].get(key, 0.0))
            gis = calculate_gis_index(
                kg_per_capita_year=safe_ratio(weight_kg, parish.population) * annualisation_factor(1),
                contamination_pct=safe_ratio(totals["contamination_mass"].get(key, 0.0), weight_kg),
                alerts_per_ton=SNAPSHOT_ALERTS_PER_TON,
                co2_avoided_per_ton=SNAPSHOT_CO2_PER_TON,
                bags_per_capita_month=safe_ratio(bags, parish.population),
            )
            scores[month] = gis.score

        trend = NEUTRAL
        if len(months) >= 2:
            first, last = scores[months[0]], scores[months[-1]]
            if last > first + PARISH_TREND_BAND_POINTS:
                trend = POSITIVE
            elif last < first - PARISH_TREND_BAND_POINTS:
                trend = NEGATIVE

        rows.append({"parish_id": parish.parish_id, "name": parish.name, **scores, "trend": trend})

    return pd.DataFrame(rows, columns=["parish_id", "name", *months, "trend"])


def contamination_by_type(dataset: WasteDataset, breakdown: pd.DataFrame) -> pd.DataFrame:
    """Contaminant kg and share per type, in catalogue order."""
    kg_by_type = breakdown.groupby("contamination_type_id")["kg"].sum()
    total_kg = float(kg_by_type.sum())

    df = dataset.contamination_types[["contamination_type_id", "name", "color"]].copy()
    kg = [float(kg_by_type.get(type_id, 0.0)) for type_id in df["contamination_type_id"]]
    df["kg"] = [round(value, 1) for value in kg]
    df["pct"] = [round(safe_ratio(value, total_kg) * 100, 1) for value in kg]
    return df.reset_index(drop=True)


def compute_councillor_metrics(dataset: WasteDataset, filters: DashboardFilter | None = None) -> dict:
    """Build the Councillor bundle for a filter.

    Returns
    -------
    Dict with:
        parish_scores : DataFrame, best GIS first
        municipality_summaries : DataFrame
        top_parishes / bottom_parishes : DataFrame, RANKING_SIZE rows each
            (bottom is worst first)
        aggregate_gis_score : float, population-weighted
        aggregate_gis_classification : str
        parish_trends : DataFrame (parish_id, name, <month>..., trend)
        contamination_by_type : DataFrame (contamination_type_id, name,
            color, kg, pct)
    """
    scope = build_scope(dataset, filters)
    n_months = scope.window.n_months

    parishes = dataset.parishes_for(scope.municipality_id)
    scores = score_parishes(
        parishes,
        scope.current("parish_monthly"),
        filter_months(dataset.incidents, scope.window.current),
        n_months,
    )
    logger.info("Scored %d parishes over %d months", len(scores), n_months)

    aggregate_score = round(weighted_average(scores, "gis_score", "population"), 1)
    trend_months = dataset.available_months()[-PARISH_TREND_MONTHS:]

    return {
        "parish_scores": scores,
        "municipality_summaries": summarise_municipalities(
            dataset, scores, dataset.municipality_ids(scope.municipality_id), n_months
        ),
        "top_parishes": scores.head(RANKING_SIZE).reset_index(drop=True),
        "bottom_parishes": scores.iloc[::-1].head(RANKING_SIZE).reset_index(drop=True),
        "aggregate_gis_score": aggregate_score,
        "aggregate_gis_classification": classify_gis(aggregate_score),
        "parish_trends": parish_trends(parishes, dataset.parish_monthly, trend_months),
        "contamination_by_type": contamination_by_type(dataset, scope.current("contamination_by_type")),
    }
