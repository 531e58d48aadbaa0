"""
Read-only dataset handle passed into every dashboard call.

Holds the fact and dimension tables as DataFrames. Built once (see
simulator.generate_dataset) and shared by reference; dashboards copy a
frame before deriving columns from it.
"""

import logging
from dataclasses import dataclass

import pandas as pd

from .periods import Period

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardFilter:
    municipality_id: str | None = None
    period: Period = Period.LAST_12_MONTHS
    shift: str | None = None


@dataclass(frozen=True)
class WasteDataset:
    """Immutable set of tables.

    Dimensions: municipalities, parishes, teams, routes,
                contamination_types, emission_factors
    Facts:      parish_monthly, contamination_by_type, costs,
                incidents (one row per incident), urban_waste
    """

    municipalities: pd.DataFrame
    parishes: pd.DataFrame
    teams: pd.DataFrame
    routes: pd.DataFrame
    contamination_types: pd.DataFrame
    emission_factors: pd.DataFrame
    parish_monthly: pd.DataFrame
    contamination_by_type: pd.DataFrame
    costs: pd.DataFrame
    incidents: pd.DataFrame
    urban_waste: pd.DataFrame

    def available_months(self) -> list[str]:
        """Sorted list of months present in the parish fact table."""
        if self.parish_monthly.empty:
            return []
        return sorted(self.parish_monthly["month"].unique().tolist())

    def municipality_ids(self, municipality_id: str | None = None) -> list[str]:
        """Ids in scope for a filter: the one requested, or all of them."""
        if municipality_id is not None:
            if municipality_id not in set(self.municipalities["municipality_id"]):
                logger.warning("Unknown municipality '%s'", municipality_id)
            return [municipality_id]
        return self.municipalities["municipality_id"].tolist()

    def municipality_name(self, municipality_id: str) -> str:
        match = self.municipalities[self.municipalities["municipality_id"] == municipality_id]
        if match.empty:
            return municipality_id
        return str(match.iloc[0]["name"])

    def parishes_for(self, municipality_id: str | None = None) -> pd.DataFrame:
        if municipality_id is None:
            return self.parishes
        return self.parishes[self.parishes["municipality_id"] == municipality_id]

    def population(self, municipality_id: str | None = None) -> int:
        """Population summed over the parishes in scope."""
        return int(self.parishes_for(municipality_id)["population"].sum())
