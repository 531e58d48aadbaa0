"""
Bio-waste Performance Dashboards: end-to-end smoke pipeline.

Builds the seeded dataset once, runs every dashboard aggregator over it
and prints the resulting bundles plus a few sanity checks.

Usage:
    python main.py
"""

import logging

import numpy as np

from biowaste_dashboard.config import DEFAULT_SEED, OPERATOR_NAME
from biowaste_dashboard.dashboards import (
    compute_bee2waste_metrics,
    compute_ceo_metrics,
    compute_cfo_metrics,
    compute_councillor_metrics,
    compute_operational_metrics,
)
from biowaste_dashboard.dataset import DashboardFilter
from biowaste_dashboard.periods import Period
from biowaste_dashboard.simulator import generate_dataset

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def _print_cards(cards: dict) -> None:
    for name, card in cards.items():
        print(f"  {name:24s} | {card.value:>14} {card.unit:6s} | {card.variance_pct:+.1f}%")


def main() -> None:
    """Run every dashboard over the simulated dataset and print the outputs."""

    print("=" * 70)
    print(f"  {OPERATOR_NAME.upper()}: Bio-waste Performance Dashboards")
    print("  Metrics Pipeline Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Build the dataset
    # ------------------------------------------------------------------
    print("[ 1 ] BUILDING DATASET")
    print("-" * 40)

    dataset = generate_dataset(DEFAULT_SEED)
    months = dataset.available_months()
    print(f"\nMonths: {months[0]} .. {months[-1]} ({len(months)})")
    print(f"parish_monthly: {len(dataset.parish_monthly)} rows")
    print(f"incidents:      {len(dataset.incidents)} rows")
    print(f"costs:          {len(dataset.costs)} rows")

    filters = DashboardFilter(period=Period.LAST_6_MONTHS)

    # ------------------------------------------------------------------
    # 2. CEO
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] CEO")
    print("-" * 40)

    ceo = compute_ceo_metrics(dataset, filters)
    _print_cards(ceo["kpis"])
    print()
    for semaphore in ceo["semaphores"]:
        print(f"  {semaphore.id} {semaphore.colour:7s} | {semaphore.question} {semaphore.rationale}")
    print()
    print(ceo["municipality_comparison"].to_string(index=False))

    # ------------------------------------------------------------------
    # 3. CFO
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] CFO")
    print("-" * 40)

    cfo = compute_cfo_metrics(dataset, filters)
    _print_cards(cfo["kpis"])
    print(f"\n  Revenue: {cfo['revenue']}")
    print(f"  Budget:  {cfo['budget']}")
    print()
    print(cfo["municipality_comparison"].to_string(index=False))

    # ------------------------------------------------------------------
    # 4. Councillor
    # ------------------------------------------------------------------
    print("\n")
    print("[ 4 ] COUNCILLOR")
    print("-" * 40)

    councillor = compute_councillor_metrics(dataset, filters)
    print(
        f"\nAggregate GIS: {councillor['aggregate_gis_score']} "
        f"({councillor['aggregate_gis_classification']})"
    )
    print(councillor["municipality_summaries"].to_string(index=False))
    print("\nTop parishes:")
    print(councillor["top_parishes"][["name", "gis_score", "classification"]].to_string(index=False))
    print("\nParish trends:")
    print(councillor["parish_trends"].head(10).to_string(index=False))

    # ------------------------------------------------------------------
    # 5. Operational
    # ------------------------------------------------------------------
    print("\n")
    print("[ 5 ] OPERATIONAL")
    print("-" * 40)

    operational = compute_operational_metrics(
        dataset, DashboardFilter(shift="morning"), rng=np.random.default_rng(DEFAULT_SEED)
    )
    print(
        f"\nBags today: {operational['bags_today']} | "
        f"routes {operational['routes_concluded']}/{operational['routes_total']} | "
        f"open alerts {operational['open_alerts']} | MTTR {operational['mttr_min']} min"
    )
    print(operational["team_productivity"].to_string(index=False))

    # ------------------------------------------------------------------
    # 6. Bee2Waste
    # ------------------------------------------------------------------
    print("\n")
    print("[ 6 ] BEE2WASTE")
    print("-" * 40)

    bee2waste = compute_bee2waste_metrics(dataset, filters)
    aggregate = bee2waste["aggregate_gis"]
    print(f"\nAggregate GIS: {aggregate.score} ({aggregate.classification})")
    health = {k: v for k, v in bee2waste["system_health"].items() if k != "incidents_by_type"}
    print(f"System health: {health}")
    print(f"Environmental: {bee2waste['environmental']}")
    print()
    print(bee2waste["contamination_heatmap"].to_string(index=False))

    # ------------------------------------------------------------------
    # 7. Sanity checks
    # ------------------------------------------------------------------
    print("\n")
    print("[ 7 ] SANITY CHECKS")
    print("-" * 40)

    check1 = 0 <= aggregate.score <= 100
    print(f"\n  [{'PASS' if check1 else 'FAIL'}] Aggregate GIS {aggregate.score} within [0, 100]")

    colours = {s.colour for s in ceo["semaphores"]}
    check2 = colours <= {"green", "yellow", "orange", "red"}
    print(f"  [{'PASS' if check2 else 'FAIL'}] Semaphore colours: {sorted(colours)}")

    check3 = len(councillor["parish_scores"]) == len(dataset.parishes)
    print(f"  [{'PASS' if check3 else 'FAIL'}] Scored {len(councillor['parish_scores'])} parishes")

    total_tons = round(dataset.parish_monthly["weight_kg"].sum() / 1000, 1)
    all_time = compute_ceo_metrics(dataset, DashboardFilter(period=Period.ALL))
    check4 = abs(all_time["kpis"]["total_bio_tons"].value - total_tons) < 0.11
    print(f"  [{'PASS' if check4 else 'FAIL'}] All-time bio tons match raw total ({total_tons} t)")

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)


if __name__ == "__main__":
    main()
