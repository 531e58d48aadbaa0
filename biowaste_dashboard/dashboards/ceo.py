"""
CEO dashboard: scale, environmental impact and quality of the service,
plus the three semaphores and a municipality comparison.
"""

import logging

import pandas as pd

from ..aggregation import group_sum_by, monthly_totals, safe_ratio, summarise_records
from ..co2 import co2_complete
from ..config import COVERAGE_MIN_KG_PER_CAPITA_YEAR
from ..dataset import DashboardFilter, WasteDataset
from ..kpis import KpiCard, kpi_card
from ..periods import annualisation_factor, pct_change
from ..semaphores import (
    semaphore_biogas_potential,
    semaphore_environmental_impact,
    semaphore_growth_quality,
)
from .common import build_scope, production_model, semaphore_inputs

logger = logging.getLogger(__name__)


def _coverage_pct(parishes: pd.DataFrame, records: pd.DataFrame, n_months: int) -> float:
    """% of parishes whose annualised kg per capita exceeds the coverage floor."""
    if parishes.empty:
        return 0.0
    kg_by_parish = group_sum_by(records, "parish_id", "weight_kg")
    annualise = annualisation_factor(n_months)

    active = 0
    for parish_id, population in zip(parishes["parish_id"], parishes["population"]):
        kg_per_capita_year = safe_ratio(kg_by_parish.get(parish_id, 0.0), population) * annualise
        if kg_per_capita_year > COVERAGE_MIN_KG_PER_CAPITA_YEAR:
            active += 1
    return active / len(parishes) * 100


def compute_ceo_metrics(dataset: WasteDataset, filters: DashboardFilter | None = None) -> dict:
    """Build the CEO bundle for a filter.

    Returns
    -------
    Dict with:
        kpis : dict of KpiCard keyed by name (total_bio_tons, growth_pct,
            bio_urban_pct, total_bags, volume_m3, service_coverage_pct,
            co2_avoided_t, landfill_diversion_pct, compost_tons, biogas_m3,
            energy_kwh, contamination_pct, rejection_pct)
        semaphores : list of three SemaphoreResult (SEM-01..03)
        monthly_breakdown : DataFrame (month, bio_tons, contamination_pct,
            co2_avoided_t, bags)
        municipality_comparison : DataFrame (municipality_id, name,
            bio_tons, contamination_pct, co2_avoided_t, total_cost_eur)
    """
    scope = build_scope(dataset, filters)
    window = scope.window

    current_records = scope.current("parish_monthly")
    previous_records = scope.previous("parish_monthly")
    current = summarise_records(current_records)
    previous = summarise_records(previous_records)

    # Bio-waste share of all urban waste
    urban_now = float(scope.current("urban_waste")["total_urban_tons"].sum())
    urban_before = float(scope.previous("urban_waste")["total_urban_tons"].sum())
    bio_urban_pct = safe_ratio(current["tons"], urban_now) * 100
    prev_bio_urban_pct = safe_ratio(previous["tons"], urban_before) * 100

    parishes = dataset.parishes_for(scope.municipality_id)
    coverage = _coverage_pct(parishes, current_records, window.n_months)
    prev_coverage = _coverage_pct(parishes, previous_records, len(window.previous))

    rejection_pct = safe_ratio(current["rejected_bags"], current["bags"]) * 100
    prev_rejection_pct = safe_ratio(previous["rejected_bags"], previous["bags"]) * 100

    co2_now = co2_complete(current["tons"], current["contamination_pct"])
    co2_before = co2_complete(previous["tons"], previous["contamination_pct"])

    production = production_model(current["tons"], current["contamination_pct"])
    prev_production = production_model(previous["tons"], previous["contamination_pct"])

    monthly = monthly_totals(current_records, window.current)
    monthly["co2_avoided_t"] = [
        co2_complete(tons, pct) for tons, pct in zip(monthly["tons"], monthly["contamination_pct"])
    ]

    growth_pct = pct_change(current["tons"], previous["tons"])

    kpis: dict[str, KpiCard] = {
        "total_bio_tons": kpi_card(
            "Total bio-waste", current["tons"], previous["tons"], "t", sparkline=monthly["tons"]
        ),
        "growth_pct": KpiCard(label="Growth", value=growth_pct, unit="%", variance_pct=0.0),
        "bio_urban_pct": kpi_card("Bio/urban waste", bio_urban_pct, prev_bio_urban_pct, "%"),
        "total_bags": kpi_card(
            "Total bags", current["bags"], previous["bags"], "bags",
            decimals=None, sparkline=monthly["bags"],
        ),
        "volume_m3": kpi_card(
            "Volume", current["volume_m3"], previous["volume_m3"], "m3", sparkline=monthly["volume_m3"]
        ),
        "service_coverage_pct": kpi_card("Service coverage", coverage, prev_coverage, "%"),
        "co2_avoided_t": kpi_card(
            "CO2 avoided", co2_now, co2_before, "tCO2e", sparkline=monthly["co2_avoided_t"]
        ),
        "landfill_diversion_pct": kpi_card(
            "Landfill diversion",
            100 - current["contamination_pct"],
            100 - previous["contamination_pct"],
            "%",
        ),
        "compost_tons": kpi_card(
            "Compost produced", production["compost_tons"], prev_production["compost_tons"], "t"
        ),
        "biogas_m3": kpi_card(
            "Biogas produced", production["biogas_m3"], prev_production["biogas_m3"], "m3", decimals=None
        ),
        "energy_kwh": kpi_card(
            "Energy generated", production["energy_kwh"], prev_production["energy_kwh"], "kWh", decimals=None
        ),
        "contamination_pct": kpi_card(
            "Contamination rate",
            current["contamination_pct"],
            previous["contamination_pct"],
            "%",
            sparkline=monthly["contamination_pct"],
        ),
        "rejection_pct": kpi_card("Rejection rate", rejection_pct, prev_rejection_pct, "%"),
    }

    series = semaphore_inputs(dataset, scope.municipality_id)
    semaphores = [
        semaphore_growth_quality(
            series["weight_kg"].tolist(),
            series["contamination_pct"].tolist(),
            series["critical_alerts_per_ton"].tolist(),
        ),
        semaphore_environmental_impact(
            series["co2_per_ton"].tolist(),
            series["diversion_pct"].tolist(),
        ),
        semaphore_biogas_potential(series["biogas_m3"].tolist()),
    ]

    monthly_breakdown = pd.DataFrame({
        "month": list(monthly.index),
        "bio_tons": monthly["tons"].round(1).to_numpy(),
        "contamination_pct": monthly["contamination_pct"].round(1).to_numpy(),
        "co2_avoided_t": monthly["co2_avoided_t"].round(1).to_numpy(),
        "bags": monthly["bags"].astype(int).to_numpy(),
    })

    return {
        "kpis": kpis,
        "semaphores": semaphores,
        "monthly_breakdown": monthly_breakdown,
        "municipality_comparison": _municipality_comparison(scope),
    }


def _municipality_comparison(scope) -> pd.DataFrame:
    dataset = scope.dataset
    records = scope.current("parish_monthly")
    costs = scope.current("costs")

    rows = []
    for municipality_id in dataset.municipality_ids(scope.municipality_id):
        totals = summarise_records(records[records["municipality_id"] == municipality_id])
        total_cost = float(costs.loc[costs["municipality_id"] == municipality_id, "total_eur"].sum())
        rows.append({
            "municipality_id": municipality_id,
            "name": dataset.municipality_name(municipality_id),
            "bio_tons": round(totals["tons"], 1),
            "contamination_pct": round(totals["contamination_pct"], 1),
            "co2_avoided_t": round(co2_complete(totals["tons"], totals["contamination_pct"]), 1),
            "total_cost_eur": round(total_cost, 2),
        })

    df = pd.DataFrame(
        rows,
        columns=["municipality_id", "name", "bio_tons", "contamination_pct", "co2_avoided_t", "total_cost_eur"],
    )
    logger.info("Built CEO municipality comparison with %d rows", len(df))
    return df
