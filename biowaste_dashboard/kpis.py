"""
KPI card construction: variance against the previous period and
monthly sparklines. Pure functions with no side effects.
"""

from dataclasses import dataclass, field

import pandas as pd

from .periods import pct_change


@dataclass(frozen=True)
class SparklinePoint:
    month: str
    value: float


@dataclass(frozen=True)
class KpiCard:
    label: str
    value: float
    unit: str
    variance_pct: float
    sparkline: tuple[SparklinePoint, ...] = field(default_factory=tuple)


def build_sparkline(series: pd.Series, decimals: int = 2) -> tuple[SparklinePoint, ...]:
    """Turn a month-indexed Series into ordered sparkline points."""
    return tuple(
        SparklinePoint(month=str(month), value=round(float(value), decimals))
        for month, value in series.items()
    )


def kpi_card(
    label: str,
    current: float,
    previous: float,
    unit: str,
    decimals: int | None = 1,
    sparkline: pd.Series | None = None,
) -> KpiCard:
    """Build a KpiCard, rounding the value and computing its variance.

    decimals=None keeps the value as an integer (counts, m3, kWh).
    """
    if decimals is None:
        value = round(current)
    else:
        value = round(current, decimals)

    return KpiCard(
        label=label,
        value=value,
        unit=unit,
        variance_pct=pct_change(current, previous),
        sparkline=build_sparkline(sparkline) if sparkline is not None else (),
    )
