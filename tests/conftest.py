"""
Shared fixtures.

`small_dataset` is a hand-built two-municipality, three-parish dataset
with constant monthly figures so expected values can be worked out by
hand. `simulated_dataset` is the seeded generator output, used for
shape and range checks only.
"""

import pandas as pd
import pytest

from biowaste_dashboard.config import EMISSION_FACTORS
from biowaste_dashboard.dataset import WasteDataset
from biowaste_dashboard.simulator import generate_dataset

MONTHS = ["2025-01", "2025-02", "2025-03", "2025-04"]

# parish_id -> (municipality_id, weight_kg, bags, volume_m3, contamination_pct, rejected_bags)
_PARISH_MONTH = {
    "P1": ("M1", 1000, 100, 1.2, 10.0, 3),
    "P2": ("M1", 3000, 300, 3.6, 20.0, 9),
    "P3": ("M2", 2000, 200, 2.4, 5.0, 6),
}

# municipality_id -> (collection, treatment, transport, labour, overhead)
_MONTHLY_COSTS = {
    "M1": (140.0, 100.0, 60.0, 80.0, 20.0),
    "M2": (70.0, 50.0, 30.0, 40.0, 10.0),
}


def _build_small_dataset() -> WasteDataset:
    parish_monthly = pd.DataFrame([
        {
            "month": month,
            "parish_id": parish_id,
            "municipality_id": mid,
            "bags": bags,
            "weight_kg": weight,
            "volume_m3": volume,
            "avg_bag_weight_kg": weight / bags,
            "contamination_pct": contamination,
            "rejected_bags": rejected,
        }
        for month in MONTHS
        for parish_id, (mid, weight, bags, volume, contamination, rejected) in _PARISH_MONTH.items()
    ])

    contamination_by_type = pd.DataFrame([
        {"month": month, "parish_id": "P1", "municipality_id": "M1",
         "contamination_type_id": type_id, "kg": kg}
        for month in MONTHS
        for type_id, kg in [("CT-A", 60.0), ("CT-B", 40.0)]
    ])

    costs = pd.DataFrame([
        {
            "month": month,
            "municipality_id": mid,
            "collection_eur": split[0],
            "treatment_eur": split[1],
            "transport_eur": split[2],
            "labour_eur": split[3],
            "overhead_eur": split[4],
            "total_eur": sum(split),
        }
        for month in MONTHS
        for mid, split in _MONTHLY_COSTS.items()
    ])

    incidents = pd.DataFrame([
        {
            "incident_id": "INC-00001", "month": "2025-03", "municipality_id": "M2",
            "type": "blockage", "severity": "low", "sector": "sorting",
            "occurred_at": pd.Timestamp("2025-03-10 09:00"), "resolution_min": 30, "resolved": False,
        },
        {
            "incident_id": "INC-00002", "month": "2025-04", "municipality_id": "M1",
            "type": "belt_failure", "severity": "critical", "sector": "reception",
            "occurred_at": pd.Timestamp("2025-04-02 14:30"), "resolution_min": 60, "resolved": True,
        },
    ])

    urban_waste = pd.DataFrame([
        {"month": month, "municipality_id": mid, "total_urban_tons": tons}
        for month in MONTHS
        for mid, tons in [("M1", 20.0), ("M2", 10.0)]
    ])

    return WasteDataset(
        municipalities=pd.DataFrame([
            {"municipality_id": "M1", "name": "Alpha", "population": 4000, "area_km2": 10.0, "color": "#111111"},
            {"municipality_id": "M2", "name": "Beta", "population": 2000, "area_km2": 20.0, "color": "#222222"},
        ]),
        parishes=pd.DataFrame([
            {"parish_id": "P1", "municipality_id": "M1", "name": "North", "population": 1000, "area_km2": 4.0},
            {"parish_id": "P2", "municipality_id": "M1", "name": "South", "population": 3000, "area_km2": 6.0},
            {"parish_id": "P3", "municipality_id": "M2", "name": "East", "population": 2000, "area_km2": 20.0},
        ]),
        teams=pd.DataFrame([
            {"team_id": "T1", "name": "Alpha Team", "municipality_id": "M1", "kind": "collection", "members": 4},
            {"team_id": "T2", "name": "Beta Team", "municipality_id": "M2", "kind": "collection", "members": 3},
        ]),
        routes=pd.DataFrame([
            {"route_id": "R1", "code": "A-001", "municipality_id": "M1", "parish_ids": ("P1", "P2"),
             "team_id": "T1", "frequency": "daily", "shift": "morning", "collection_points": 40},
            {"route_id": "R2", "code": "B-001", "municipality_id": "M2", "parish_ids": ("P3",),
             "team_id": "T2", "frequency": "2x_week", "shift": "night", "collection_points": 20},
        ]),
        contamination_types=pd.DataFrame([
            {"contamination_type_id": "CT-A", "name": "Plastic", "color": "#EF4444", "typical_pct": 60},
            {"contamination_type_id": "CT-B", "name": "Glass", "color": "#10B981", "typical_pct": 40},
        ]),
        emission_factors=pd.DataFrame(
            EMISSION_FACTORS, columns=["factor_id", "scenario", "tco2e_per_ton", "source"]
        ),
        parish_monthly=parish_monthly,
        contamination_by_type=contamination_by_type,
        costs=costs,
        incidents=incidents,
        urban_waste=urban_waste,
    )


@pytest.fixture()
def small_dataset() -> WasteDataset:
    return _build_small_dataset()


@pytest.fixture(scope="session")
def simulated_dataset() -> WasteDataset:
    """Seeded generator output, built once per session."""
    return generate_dataset(seed=42)
