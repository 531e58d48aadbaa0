"""
Period resolution: turn a period token into the current month window and
the equal-length window immediately before it.
"""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class Period(str, Enum):
    LAST_6_MONTHS = "last_6m"
    YEAR_TO_DATE = "ytd"
    LAST_12_MONTHS = "last_12m"
    ALL = "all"


@dataclass(frozen=True)
class PeriodWindow:
    """Resolved month windows, both ascending YYYY-MM strings."""

    current: tuple[str, ...]
    previous: tuple[str, ...]

    @property
    def n_months(self) -> int:
        return len(self.current)

    @property
    def annualise_factor(self) -> float:
        return annualisation_factor(self.n_months)


def annualisation_factor(n_months: int) -> float:
    """Multiplier that scales an n-month total to a 12-month figure."""
    return 12 / n_months if n_months else 1.0


def resolve_period(period: Period | str, available_months: list[str]) -> PeriodWindow:
    """Resolve a period token against the months present in the dataset.

    Rules
    -----
    - last_6m / last_12m: trailing 6 or 12 months.
    - ytd: every month sharing the calendar year of the latest month.
    - all: every available month.
    - previous: the same number of months immediately before the first
      current month, clipped at the start of history (may be shorter).

    Raises ValueError for an unknown token.
    """
    period = Period(period)
    months = sorted(set(available_months))

    if not months:
        logger.warning("No months available, resolving '%s' to an empty window", period.value)
        return PeriodWindow(current=(), previous=())

    if period is Period.LAST_6_MONTHS:
        current = months[-6:]
    elif period is Period.LAST_12_MONTHS:
        current = months[-12:]
    elif period is Period.YEAR_TO_DATE:
        year = months[-1].split("-")[0]
        current = [m for m in months if m.startswith(f"{year}-")]
    else:
        current = months

    start = months.index(current[0])
    previous = months[max(0, start - len(current)):start]

    return PeriodWindow(current=tuple(current), previous=tuple(previous))


def pct_change(current: float, previous: float) -> float:
    """Return the % variance of current vs previous, rounded to 1 decimal.

    A zero previous value yields +100.0 when current is positive, else 0.0.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 1)
