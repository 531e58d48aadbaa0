"""
Operational dashboard: a snapshot of the current shift.

There is no live feed yet, so the route statuses, inspected bags, alerts
and hourly profile are simulated around the dataset's routes and teams.
All randomness comes from the generator passed in.
"""

import logging

import numpy as np
import pandas as pd

from ..config import INCIDENT_SECTORS, ROUTE_STATES, SEVERITIES, SHIFT_START_HOUR
from ..dataset import DashboardFilter, WasteDataset

logger = logging.getLogger(__name__)

# Cumulative thresholds for concluded / in_progress / pending, rest delayed
_STATE_THRESHOLDS = [0.55, 0.75, 0.90]

_BAGS_PER_COLLECTION_POINT = 2.5
_INSPECTED_BAGS = 10
_BAG_CONTAMINATION_CHANCE = 0.12
_CONTAMINATED_REJECTION_CHANCE = 0.3

_ALERT_MESSAGES = {
    "belt_failure": "Sorting belt stopped in {sector}",
    "blockage": "Blockage detected on the {sector} line",
    "critical_contamination": "Critical contamination level in {sector}",
    "sensor_failure": "Sensor failure in {sector}",
    "rfid_error": "RFID read error in {sector}",
}

_PEAK_HOURS = set(range(8, 13)) | set(range(15, 19))


def _randint(rng: np.random.Generator, low: int, high: int) -> int:
    """Uniform integer in [low, high], both inclusive."""
    return int(rng.integers(low, high + 1))


def _clock(hour: int, minute: int) -> str:
    return f"{hour % 24:02d}:{minute:02d}"


def _route_state(roll: float) -> str:
    for threshold, state in zip(_STATE_THRESHOLDS, ROUTE_STATES):
        if roll < threshold:
            return state
    return ROUTE_STATES[-1]


def simulate_route_statuses(
    dataset: WasteDataset,
    routes: pd.DataFrame,
    rng: np.random.Generator,
) -> pd.DataFrame:
    """One row per route with planned/collected bags, weight, state and times."""
    parish_names = dict(zip(dataset.parishes["parish_id"], dataset.parishes["name"]))
    rows = []

    for route in routes.itertuples(index=False):
        base_bags = route.collection_points * _BAGS_PER_COLLECTION_POINT
        planned = int(round(base_bags * (1 + rng.uniform(-0.15, 0.15))))
        completion = float(np.clip(rng.normal(0.88, 0.08), 0.60, 1.0))
        collected = int(round(planned * completion))
        weight_kg = int(round(collected * float(np.clip(rng.normal(8, 2.5), 2, 20))))

        state = _route_state(rng.random())
        base_hour = SHIFT_START_HOUR.get(route.shift, 6)
        started_at = None
        finished_at = None
        if state != "pending":
            started_at = _clock(base_hour + _randint(rng, 0, 1), _randint(rng, 0, 59))
        if state == "concluded":
            finished_at = _clock(base_hour + _randint(rng, 3, 6), _randint(rng, 0, 59))

        first_parish = route.parish_ids[0] if len(route.parish_ids) else None
        rows.append({
            "route_id": route.route_id,
            "code": route.code,
            "shift": route.shift,
            "parish": parish_names.get(first_parish, first_parish),
            "team_id": route.team_id,
            "planned_bags": planned,
            "collected_bags": 0 if state == "pending" else collected,
            "weight_kg": 0 if state == "pending" else weight_kg,
            "state": state,
            "started_at": started_at,
            "finished_at": finished_at,
        })

    return pd.DataFrame(
        rows,
        columns=[
            "route_id", "code", "shift", "parish", "team_id", "planned_bags",
            "collected_bags", "weight_kg", "state", "started_at", "finished_at",
        ],
    )


def simulate_inspected_bags(
    dataset: WasteDataset,
    routes: pd.DataFrame,
    rng: np.random.Generator,
) -> pd.DataFrame:
    """The last inspected bags, latest first."""
    type_ids = dataset.contamination_types["contamination_type_id"].tolist()
    codes = routes["code"].tolist()
    rows = []

    for i in range(_INSPECTED_BAGS):
        contaminated = bool(rng.random() < _BAG_CONTAMINATION_CHANCE)
        weight_kg = round(float(np.clip(rng.normal(8, 3), 0.5, 30)), 1)
        contamination_type = str(rng.choice(type_ids)) if contaminated and type_ids else None
        rejected = contaminated and bool(rng.random() < _CONTAMINATED_REJECTION_CHANCE)

        rows.append({
            "bag_id": f"BAG-{1000 + i:06d}",
            "inspected_at": _clock(_randint(rng, 6, 20), _randint(rng, 0, 59)),
            "route_code": str(rng.choice(codes)) if codes else "N/A",
            "weight_kg": weight_kg,
            "contaminated": contaminated,
            "contamination_type_id": contamination_type,
            "rejected": rejected,
        })

    df = pd.DataFrame(rows)
    return df.sort_values("inspected_at", ascending=False, kind="stable").reset_index(drop=True)


def simulate_active_alerts(rng: np.random.Generator) -> pd.DataFrame:
    """Two to six plant alerts, latest first."""
    alert_types = list(_ALERT_MESSAGES)
    rows = []

    for i in range(_randint(rng, 2, 6)):
        alert_type = str(rng.choice(alert_types))
        sector = str(rng.choice(INCIDENT_SECTORS))
        rows.append({
            "alert_id": f"ALR-{i + 1:04d}",
            "type": alert_type,
            "severity": str(rng.choice(SEVERITIES)),
            "sector": sector,
            "raised_at": _clock(_randint(rng, 6, 20), _randint(rng, 0, 59)),
            "message": _ALERT_MESSAGES[alert_type].format(sector=sector),
            "resolved": bool(rng.random() < 0.3),
        })

    df = pd.DataFrame(rows)
    return df.sort_values("raised_at", ascending=False, kind="stable").reset_index(drop=True)


def team_productivity(teams: pd.DataFrame, route_statuses: pd.DataFrame) -> pd.DataFrame:
    """Bags, weight and completed routes per team for the shift."""
    rows = []
    for team in teams.itertuples(index=False):
        team_routes = route_statuses[route_statuses["team_id"] == team.team_id]
        concluded = int((team_routes["state"] == "concluded").sum())
        total = len(team_routes)
        rows.append({
            "team_id": team.team_id,
            "name": team.name,
            "bags": int(team_routes["collected_bags"].sum()),
            "weight_kg": int(team_routes["weight_kg"].sum()),
            "routes_concluded": concluded,
            "routes_total": total,
            "efficiency_pct": round(concluded / total * 100) if total else 0,
        })
    return pd.DataFrame(
        rows,
        columns=["team_id", "name", "bags", "weight_kg", "routes_concluded", "routes_total", "efficiency_pct"],
    )


def simulate_hourly_collection(rng: np.random.Generator) -> pd.DataFrame:
    """Bags and weight per hour from 06h to 22h, heavier at peak hours."""
    rows = []
    for hour in range(6, 23):
        bags = _randint(rng, 80, 200) if hour in _PEAK_HOURS else _randint(rng, 20, 80)
        rows.append({
            "hour": hour,
            "bags": bags,
            "weight_kg": int(round(bags * float(np.clip(rng.normal(8, 2), 3, 15)))),
        })
    return pd.DataFrame(rows)


def compute_operational_metrics(
    dataset: WasteDataset,
    filters: DashboardFilter | None = None,
    rng: np.random.Generator | None = None,
) -> dict:
    """Build the Operational bundle for the current shift.

    Parameters
    ----------
    dataset : WasteDataset with routes, teams, parishes and contamination types.
    filters : municipality and optional shift ('morning', 'afternoon', 'night').
        The period is ignored; the snapshot is always "today".
    rng : numpy Generator. Pass a seeded one for reproducible output.

    Returns
    -------
    Dict with headline counters (bags_today, weight_today_kg,
    routes_concluded, routes_total, open_alerts, mttr_min) and the tables
    route_statuses, inspected_bags, active_alerts, team_productivity,
    incidents_by_sector and hourly_collection.
    """
    filters = filters or DashboardFilter()
    rng = rng if rng is not None else np.random.default_rng()

    routes = dataset.routes
    teams = dataset.teams
    if filters.municipality_id is not None:
        dataset.municipality_ids(filters.municipality_id)
        routes = routes[routes["municipality_id"] == filters.municipality_id]
        teams = teams[teams["municipality_id"] == filters.municipality_id]
    if filters.shift is not None:
        if filters.shift not in SHIFT_START_HOUR:
            raise ValueError(f"Unknown shift '{filters.shift}'")
        routes = routes[routes["shift"] == filters.shift]

    route_statuses = simulate_route_statuses(dataset, routes, rng)
    inspected_bags = simulate_inspected_bags(dataset, routes, rng)
    active_alerts = simulate_active_alerts(rng)
    productivity = team_productivity(teams, route_statuses)

    incidents_by_sector = pd.DataFrame({
        "sector": INCIDENT_SECTORS,
        "count": [_randint(rng, 0, 3) for _ in INCIDENT_SECTORS],
    })
    mttr_min = int(round(float(np.clip(rng.normal(18, 8), 5, 60))))
    hourly = simulate_hourly_collection(rng)

    logger.info("Simulated shift snapshot for %d routes", len(route_statuses))

    return {
        "bags_today": int(route_statuses["collected_bags"].sum()),
        "weight_today_kg": int(route_statuses["weight_kg"].sum()),
        "routes_concluded": int((route_statuses["state"] == "concluded").sum()),
        "routes_total": len(route_statuses),
        "open_alerts": int((~active_alerts["resolved"]).sum()),
        "mttr_min": mttr_min,
        "route_statuses": route_statuses,
        "inspected_bags": inspected_bags,
        "active_alerts": active_alerts,
        "team_productivity": productivity,
        "incidents_by_sector": incidents_by_sector,
        "hourly_collection": hourly,
    }
