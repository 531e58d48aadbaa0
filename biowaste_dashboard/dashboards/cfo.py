"""
CFO dashboard: direct costs, unit costs, estimated revenue, operating
margin and budget variance.
"""

import logging

import pandas as pd

from ..aggregation import safe_ratio, summarise_records
from ..config import COST_CATEGORIES, PLANNED_BUDGET_FACTOR
from ..dataset import DashboardFilter, WasteDataset
from ..kpis import kpi_card
from .common import build_scope, estimate_revenue

logger = logging.getLogger(__name__)


def operating_margin_pct(revenue: float, cost: float) -> float:
    """(revenue - cost) / revenue x 100, 0.0 when there is no revenue."""
    return safe_ratio(revenue - cost, revenue) * 100


def budget_variance(actual_cost: float) -> dict:
    """Compare realised cost with the planned budget.

    The planned figure is a fixed share of actual cost, so the variance
    is constant (~5%) until a real budget series is wired in.
    """
    planned = round(actual_cost * PLANNED_BUDGET_FACTOR, 2)
    variance = round(actual_cost - planned, 2)
    return {
        "planned_eur": planned,
        "actual_eur": round(actual_cost, 2),
        "variance_eur": variance,
        "variance_pct": round(safe_ratio(variance, planned) * 100, 1),
    }


def compute_cfo_metrics(dataset: WasteDataset, filters: DashboardFilter | None = None) -> dict:
    """Build the CFO bundle for a filter.

    Returns
    -------
    Dict with:
        kpis : dict of KpiCard (total_cost_eur, cost_per_ton_eur,
            cost_per_bag_eur, revenue_eur, operating_margin_pct)
        cost_breakdown : dict of the five cost categories plus total_eur
        monthly_costs : DataFrame (month, <five categories>, total_eur)
        revenue : dict (compost_eur, energy_eur, recyclables_eur, total_eur)
        budget : dict (planned_eur, actual_eur, variance_eur, variance_pct)
        municipality_comparison : DataFrame (municipality_id, name,
            total_cost_eur, cost_per_ton_eur, bio_tons, revenue_eur,
            margin_pct)
    """
    scope = build_scope(dataset, filters)
    window = scope.window

    costs = scope.current("costs")
    prev_costs = scope.previous("costs")
    current = summarise_records(scope.current("parish_monthly"))
    previous = summarise_records(scope.previous("parish_monthly"))

    total_cost = float(costs["total_eur"].sum())
    prev_total_cost = float(prev_costs["total_eur"].sum())

    revenue = estimate_revenue(current["tons"], current["contamination_pct"])
    prev_revenue = estimate_revenue(previous["tons"], previous["contamination_pct"])

    monthly_costs = (
        costs.groupby("month")[COST_CATEGORIES + ["total_eur"]]
        .sum()
        .reindex(list(window.current), fill_value=0.0)
        .round(2)
    )
    monthly_costs.index.name = "month"

    kpis = {
        "total_cost_eur": kpi_card(
            "Total cost", total_cost, prev_total_cost, "EUR",
            decimals=2, sparkline=monthly_costs["total_eur"],
        ),
        "cost_per_ton_eur": kpi_card(
            "Cost per ton",
            safe_ratio(total_cost, current["tons"]),
            safe_ratio(prev_total_cost, previous["tons"]),
            "EUR/t",
            decimals=2,
        ),
        "cost_per_bag_eur": kpi_card(
            "Cost per bag",
            safe_ratio(total_cost, current["bags"]),
            safe_ratio(prev_total_cost, previous["bags"]),
            "EUR",
            decimals=2,
        ),
        "revenue_eur": kpi_card(
            "Estimated revenue", revenue["total_eur"], prev_revenue["total_eur"], "EUR", decimals=2
        ),
        "operating_margin_pct": kpi_card(
            "Operating margin",
            operating_margin_pct(revenue["total_eur"], total_cost),
            operating_margin_pct(prev_revenue["total_eur"], prev_total_cost),
            "%",
        ),
    }

    cost_breakdown = {category: round(float(costs[category].sum()), 2) for category in COST_CATEGORIES}
    cost_breakdown["total_eur"] = round(total_cost, 2)

    return {
        "kpis": kpis,
        "cost_breakdown": cost_breakdown,
        "monthly_costs": monthly_costs.reset_index(),
        "revenue": {key: round(value, 2) for key, value in revenue.items()},
        "budget": budget_variance(total_cost),
        "municipality_comparison": _municipality_comparison(scope),
    }


def _municipality_comparison(scope) -> pd.DataFrame:
    dataset = scope.dataset
    costs = scope.current("costs")
    records = scope.current("parish_monthly")

    rows = []
    for municipality_id in dataset.municipality_ids(scope.municipality_id):
        cost = float(costs.loc[costs["municipality_id"] == municipality_id, "total_eur"].sum())
        totals = summarise_records(records[records["municipality_id"] == municipality_id])
        revenue = estimate_revenue(totals["tons"], totals["contamination_pct"])["total_eur"]

        rows.append({
            "municipality_id": municipality_id,
            "name": dataset.municipality_name(municipality_id),
            "total_cost_eur": round(cost, 2),
            "cost_per_ton_eur": round(safe_ratio(cost, totals["tons"]), 2),
            "bio_tons": round(totals["tons"], 1),
            "revenue_eur": round(revenue, 2),
            "margin_pct": round(operating_margin_pct(revenue, cost), 1),
        })

    df = pd.DataFrame(
        rows,
        columns=[
            "municipality_id", "name", "total_cost_eur", "cost_per_ton_eur",
            "bio_tons", "revenue_eur", "margin_pct",
        ],
    )
    logger.info("Built CFO municipality comparison with %d rows", len(df))
    return df
