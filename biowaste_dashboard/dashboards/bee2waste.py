"""
Bee2Waste operator dashboard: per-municipality cards, system totals,
plant health, fleet, environmental totals, monthly trends and the
contamination heatmap.
"""

import logging

import pandas as pd

from ..aggregation import monthly_totals, safe_ratio, summarise_records
from ..co2 import co2_complete
from ..config import (
    BEE2WASTE_RELATIVE_BAND,
    FLEET_EFFICIENCY_PCT,
    SCHEDULABLE_HOURS_PER_MONTH,
    SNAPSHOT_ALERTS_PER_TON,
)
from ..dataset import DashboardFilter, WasteDataset
from ..gis_index import GisIndexResult, calculate_gis_index
from ..periods import annualisation_factor
from ..trends import classify_relative
from .common import build_scope, production_model

logger = logging.getLogger(__name__)


def gis_for_totals(totals: dict, incidents: int, population: int, n_months: int) -> GisIndexResult:
    """GIS over summarised records, with all incidents counted as alerts."""
    annualise = annualisation_factor(n_months)
    co2_avoided = co2_complete(totals["tons"], totals["contamination_pct"])
    return calculate_gis_index(
        kg_per_capita_year=safe_ratio(totals["weight_kg"], population) * annualise,
        contamination_pct=totals["contamination_pct"],
        alerts_per_ton=safe_ratio(incidents, totals["tons"]),
        co2_avoided_per_ton=safe_ratio(co2_avoided, totals["tons"]),
        bags_per_capita_month=safe_ratio(totals["bags"], population * n_months),
    )


def system_health(incidents: pd.DataFrame, n_months: int) -> dict:
    """Incident resolution, MTTR, uptime and incidents by type.

    Uptime treats every incident's resolution time as downtime against
    30 x 24 schedulable hours per month. With no incidents the plant is
    fully resolved and fully up.
    """
    total = len(incidents)
    schedulable_hours = n_months * SCHEDULABLE_HOURS_PER_MONTH
    downtime_hours = float(incidents["resolution_min"].sum()) / 60 if total else 0.0

    by_type = (
        incidents.groupby("type").size().rename("count").reset_index()
        if total
        else pd.DataFrame(columns=["type", "count"])
    )
    by_type = by_type.sort_values("count", ascending=False, kind="stable").reset_index(drop=True)
    by_type["pct"] = [round(safe_ratio(count, total) * 100, 1) for count in by_type["count"]]

    return {
        "total_incidents": total,
        "resolved_pct": round(safe_ratio(int(incidents["resolved"].sum()), total) * 100) if total else 100,
        "mttr_min": round(float(incidents["resolution_min"].mean())) if total else 0,
        "uptime_pct": (
            round((schedulable_hours - downtime_hours) / schedulable_hours * 100, 2)
            if schedulable_hours
            else 100.0
        ),
        "incidents_by_type": by_type,
    }


def fleet_summary(routes: pd.DataFrame, teams: pd.DataFrame) -> dict:
    return {
        "total_routes": len(routes),
        "active_teams": len(teams),
        "avg_routes_per_team": round(safe_ratio(len(routes), len(teams)), 1),
        "collection_points": int(routes["collection_points"].sum()) if len(routes) else 0,
        "avg_efficiency_pct": FLEET_EFFICIENCY_PCT,
    }


def compute_bee2waste_metrics(dataset: WasteDataset, filters: DashboardFilter | None = None) -> dict:
    """Build the Bee2Waste bundle for a filter.

    Returns
    -------
    Dict with:
        municipality_cards : DataFrame, one row per municipality with
            totals, cost per ton, GIS and bio/contamination trends
        totals : dict (bio_tons, bags, contamination_pct, total_cost_eur,
            cost_per_ton_eur)
        system_health : dict (see system_health)
        fleet : dict (see fleet_summary)
        environmental : dict (co2_avoided_t, compost_tons, biogas_m3,
            energy_kwh, landfill_diversion_pct, co2_per_ton)
        monthly_trends : DataFrame, one row per month with a GIS snapshot
        aggregate_gis : GisIndexResult
        contamination_heatmap : DataFrame, municipalities x months
    """
    scope = build_scope(dataset, filters)
    window = scope.window
    n_months = window.n_months

    records = scope.current("parish_monthly")
    costs = scope.current("costs")
    incidents = scope.current("incidents")
    municipality_ids = dataset.municipality_ids(scope.municipality_id)

    cards = []
    heatmap = []
    for municipality_id in municipality_ids:
        m_records = records[records["municipality_id"] == municipality_id]
        m_totals = summarise_records(m_records)
        m_cost = float(costs.loc[costs["municipality_id"] == municipality_id, "total_eur"].sum())
        m_incidents = int((incidents["municipality_id"] == municipality_id).sum())
        population = dataset.population(municipality_id)
        monthly = monthly_totals(m_records, window.current)

        colour = dataset.municipalities.loc[
            dataset.municipalities["municipality_id"] == municipality_id, "color"
        ]
        cards.append({
            "municipality_id": municipality_id,
            "name": dataset.municipality_name(municipality_id),
            "color": colour.iloc[0] if len(colour) else None,
            "population": population,
            "bio_tons": round(m_totals["tons"], 1),
            "bags": m_totals["bags"],
            "contamination_pct": round(m_totals["contamination_pct"], 1),
            "co2_avoided_t": round(co2_complete(m_totals["tons"], m_totals["contamination_pct"]), 1),
            "total_cost_eur": round(m_cost, 2),
            "cost_per_ton_eur": round(safe_ratio(m_cost, m_totals["tons"]), 2),
            "gis": gis_for_totals(m_totals, m_incidents, population, n_months),
            "bio_trend": classify_relative(monthly["tons"].tolist(), BEE2WASTE_RELATIVE_BAND),
            "contamination_trend": classify_relative(
                monthly["contamination_pct"].tolist(), BEE2WASTE_RELATIVE_BAND
            ),
        })
        heatmap.append({
            "municipality_id": municipality_id,
            "name": dataset.municipality_name(municipality_id),
            **{month: round(value, 1) for month, value in monthly["contamination_pct"].items()},
        })

    totals = summarise_records(records)
    total_cost = float(costs["total_eur"].sum())
    population = dataset.population(scope.municipality_id)

    production = production_model(totals["tons"], totals["contamination_pct"])
    co2_total = co2_complete(totals["tons"], totals["contamination_pct"])

    routes = dataset.routes
    teams = dataset.teams
    if scope.municipality_id is not None:
        routes = routes[routes["municipality_id"] == scope.municipality_id]
        teams = teams[teams["municipality_id"] == scope.municipality_id]

    logger.info("Built Bee2Waste cards for %d municipalities", len(cards))

    return {
        "municipality_cards": pd.DataFrame(cards),
        "totals": {
            "bio_tons": round(totals["tons"], 1),
            "bags": totals["bags"],
            "contamination_pct": round(totals["contamination_pct"], 1),
            "total_cost_eur": round(total_cost, 2),
            "cost_per_ton_eur": round(safe_ratio(total_cost, totals["tons"]), 2),
        },
        "system_health": system_health(incidents, n_months),
        "fleet": fleet_summary(routes, teams),
        "environmental": {
            "co2_avoided_t": round(co2_total, 1),
            "compost_tons": round(production["compost_tons"], 1),
            "biogas_m3": round(production["biogas_m3"]),
            "energy_kwh": round(production["energy_kwh"]),
            "landfill_diversion_pct": round(100 - totals["contamination_pct"], 1),
            "co2_per_ton": round(safe_ratio(co2_total, totals["tons"]), 3),
        },
        "monthly_trends": _monthly_trends(records, costs, window.current, population),
        "aggregate_gis": gis_for_totals(totals, len(incidents), population, n_months),
        "contamination_heatmap": pd.DataFrame(
            heatmap, columns=["municipality_id", "name", *window.current]
        ),
    }


def _monthly_trends(
    records: pd.DataFrame,
    costs: pd.DataFrame,
    months,
    population: int,
) -> pd.DataFrame:
    """Per-month totals plus a GIS snapshot annualising that single month."""
    monthly = monthly_totals(records, months)
    cost_by_month = costs.groupby("month")["total_eur"].sum()

    rows = []
    for month, row in monthly.iterrows():
        co2_avoided = co2_complete(row["tons"], row["contamination_pct"])
        cost = float(cost_by_month.get(month, 0.0))
        gis = calculate_gis_index(
            kg_per_capita_year=safe_ratio(row["weight_kg"], population) * annualisation_factor(1),
            contamination_pct=row["contamination_pct"],
            alerts_per_ton=SNAPSHOT_ALERTS_PER_TON,
            co2_avoided_per_ton=safe_ratio(co2_avoided, row["tons"]),
            bags_per_capita_month=safe_ratio(row["bags"], population),
        )
        rows.append({
            "month": month,
            "bio_tons": round(row["tons"], 1),
            "contamination_pct": round(row["contamination_pct"], 1),
            "co2_avoided_t": round(co2_avoided, 1),
            "total_cost_eur": round(cost, 2),
            "cost_per_ton_eur": round(safe_ratio(cost, row["tons"]), 2),
            "bags": int(row["bags"]),
            "gis_score": gis.score,
        })

    return pd.DataFrame(
        rows,
        columns=[
            "month", "bio_tons", "contamination_pct", "co2_avoided_t",
            "total_cost_eur", "cost_per_ton_eur", "bags", "gis_score",
        ],
    )
