"""
Weighted aggregation primitives shared by every dashboard.

Every ratio guards its denominator and returns 0.0 instead of NaN/inf.
"""

import logging

import pandas as pd

logger = logging.getLogger(__name__)

_MONTHLY_SUM_COLS = ["weight_kg", "bags", "volume_m3", "rejected_bags"]


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is zero."""
    if denominator == 0 or pd.isna(denominator):
        return 0.0
    return float(numerator) / float(denominator)


def group_sum_by(frame: pd.DataFrame, key: str | list[str], value: str) -> pd.Series:
    """Sum `value` per `key`. Empty frames return an empty float Series."""
    if frame.empty:
        return pd.Series(dtype=float, name=value)
    return frame.groupby(key)[value].sum()


def weighted_average(frame: pd.DataFrame, value: str, weight: str) -> float:
    """sum(value * weight) / sum(weight), 0.0 when the total weight is zero."""
    if frame.empty:
        logger.debug("No rows to weight %s by %s, returning 0.0", value, weight)
        return 0.0
    total_weight = frame[weight].sum()
    return safe_ratio((frame[value] * frame[weight]).sum(), total_weight)


def filter_months(frame: pd.DataFrame, months) -> pd.DataFrame:
    """Rows whose 'month' is in `months`."""
    return frame[frame["month"].isin(list(months))]


def filter_municipality(frame: pd.DataFrame, municipality_id: str | None) -> pd.DataFrame:
    """Rows for one municipality, or the whole frame when no id is given."""
    if municipality_id is None:
        return frame
    return frame[frame["municipality_id"] == municipality_id]


def summarise_records(parish_monthly: pd.DataFrame) -> dict:
    """Collapse parish-month rows into totals with weighted contamination.

    Returns
    -------
    Dict with weight_kg, tons, bags, volume_m3, rejected_bags and
    contamination_pct (weighted by weight_kg).
    """
    weight_kg = float(parish_monthly["weight_kg"].sum()) if not parish_monthly.empty else 0.0
    return {
        "weight_kg": weight_kg,
        "tons": weight_kg / 1000,
        "bags": int(parish_monthly["bags"].sum()) if not parish_monthly.empty else 0,
        "volume_m3": float(parish_monthly["volume_m3"].sum()) if not parish_monthly.empty else 0.0,
        "rejected_bags": int(parish_monthly["rejected_bags"].sum()) if not parish_monthly.empty else 0,
        "contamination_pct": weighted_average(parish_monthly, "contamination_pct", "weight_kg"),
    }


def monthly_totals(parish_monthly: pd.DataFrame, months) -> pd.DataFrame:
    """Aggregate parish-month rows to one row per month.

    Rules
    -----
    - weight, bags, volume, rejected bags: sum
    - contamination_pct: average weighted by weight_kg
    - every requested month is present; months without data are zero

    Returns
    -------
    DataFrame indexed by month with columns:
        weight_kg, tons, bags, volume_m3, rejected_bags, contamination_pct
    """
    months = list(months)
    df = filter_months(parish_monthly, months).copy()
    df["contamination_mass"] = df["contamination_pct"] * df["weight_kg"]

    result = (
        df.groupby("month")[_MONTHLY_SUM_COLS + ["contamination_mass"]]
        .sum()
        .reindex(months, fill_value=0)
    )
    result["contamination_pct"] = [
        safe_ratio(mass, weight)
        for mass, weight in zip(result["contamination_mass"], result["weight_kg"])
    ]
    result["tons"] = result["weight_kg"] / 1000
    result.index.name = "month"

    return result.drop(columns="contamination_mass")
