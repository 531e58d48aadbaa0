"""
Helpers shared by the dashboard aggregators: scoping a dataset to a
filter, the production and revenue model, and the semaphore input series.
"""

import logging
from dataclasses import dataclass

import pandas as pd

from ..aggregation import filter_months, filter_municipality, monthly_totals, safe_ratio
from ..co2 import co2_simplified
from ..config import (
    BIOGAS_M3_PER_TON,
    COMPOST_EUR_PER_TON,
    COMPOST_SHARE,
    DIGESTION_SHARE,
    ENERGY_EUR_PER_KWH,
    ENERGY_KWH_PER_M3,
    RECYCLABLE_EUR_PER_TON,
    RECYCLABLE_RECOVERY_SHARE,
    SEMAPHORE_WINDOW_MONTHS,
)
from ..dataset import DashboardFilter, WasteDataset
from ..periods import PeriodWindow, resolve_period

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scope:
    """A dataset narrowed to one filter: resolved window plus municipality."""

    dataset: WasteDataset
    window: PeriodWindow
    municipality_id: str | None

    def frame(self, name: str, months=None) -> pd.DataFrame:
        """Fact table `name` for the municipality, optionally limited to months."""
        df = filter_municipality(getattr(self.dataset, name), self.municipality_id)
        if months is not None:
            df = filter_months(df, months)
        return df

    def current(self, name: str) -> pd.DataFrame:
        return self.frame(name, self.window.current)

    def previous(self, name: str) -> pd.DataFrame:
        return self.frame(name, self.window.previous)


def build_scope(dataset: WasteDataset, filters: DashboardFilter | None) -> Scope:
    """Resolve the period and validate the municipality of a filter."""
    filters = filters or DashboardFilter()
    window = resolve_period(filters.period, dataset.available_months())
    if filters.municipality_id is not None:
        # Logs a warning for ids not in the dataset; the bundle is then zero-valued
        dataset.municipality_ids(filters.municipality_id)
    return Scope(dataset=dataset, window=window, municipality_id=filters.municipality_id)


def clean_tons(bio_tons: float, contamination_pct: float) -> float:
    return bio_tons * (1 - contamination_pct / 100)


def production_model(bio_tons: float, contamination_pct: float) -> dict:
    """Compost, digestion feedstock, biogas and energy from collected tons.

    Rules
    -----
    - compost       = 30% of clean tons
    - AD feedstock  = 70% of clean tons
    - biogas (m3)   = feedstock x 120
    - energy (kWh)  = biogas x 6
    """
    clean = clean_tons(bio_tons, contamination_pct)
    feedstock = clean * DIGESTION_SHARE
    biogas_m3 = feedstock * BIOGAS_M3_PER_TON
    return {
        "clean_tons": clean,
        "compost_tons": clean * COMPOST_SHARE,
        "digestion_feedstock_tons": feedstock,
        "biogas_m3": biogas_m3,
        "energy_kwh": biogas_m3 * ENERGY_KWH_PER_M3,
    }


def estimate_revenue(bio_tons: float, contamination_pct: float) -> dict:
    """Revenue split in EUR: compost sales, energy sales and recovered recyclables."""
    production = production_model(bio_tons, contamination_pct)
    contaminant_tons = bio_tons * contamination_pct / 100

    compost_eur = production["compost_tons"] * COMPOST_EUR_PER_TON
    energy_eur = production["energy_kwh"] * ENERGY_EUR_PER_KWH
    recyclables_eur = contaminant_tons * RECYCLABLE_RECOVERY_SHARE * RECYCLABLE_EUR_PER_TON

    return {
        "compost_eur": compost_eur,
        "energy_eur": energy_eur,
        "recyclables_eur": recyclables_eur,
        "total_eur": compost_eur + energy_eur + recyclables_eur,
    }


def semaphore_inputs(dataset: WasteDataset, municipality_id: str | None) -> pd.DataFrame:
    """Monthly series feeding the three semaphores.

    Covers the trailing SEMAPHORE_WINDOW_MONTHS months with data for the
    municipality, independent of the selected period.

    Returns
    -------
    DataFrame indexed by month with columns:
        weight_kg, contamination_pct, critical_alerts_per_ton,
        co2_per_ton, diversion_pct, biogas_m3
    """
    records = filter_municipality(dataset.parish_monthly, municipality_id)
    months = sorted(records["month"].unique().tolist())[-SEMAPHORE_WINDOW_MONTHS:]
    if not months:
        logger.warning("No monthly records for semaphores (municipality=%s)", municipality_id)

    series = monthly_totals(records, months)

    incidents = filter_municipality(dataset.incidents, municipality_id)
    critical = (
        incidents[incidents["severity"] == "critical"]
        .groupby("month")
        .size()
        .reindex(months, fill_value=0)
    )

    series["critical_alerts_per_ton"] = [
        safe_ratio(count, tons) for count, tons in zip(critical, series["tons"])
    ]
    series["co2_per_ton"] = [
        safe_ratio(co2_simplified(tons, pct), tons)
        for tons, pct in zip(series["tons"], series["contamination_pct"])
    ]
    series["diversion_pct"] = 100 - series["contamination_pct"]
    series["biogas_m3"] = [
        clean_tons(tons, pct) * BIOGAS_M3_PER_TON
        for tons, pct in zip(series["tons"], series["contamination_pct"])
    ]
    return series
