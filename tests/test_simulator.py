"""Seeded dataset generator: shapes, ranges and reproducibility."""

import pytest

from biowaste_dashboard.config import COST_CATEGORIES, N_MONTHS
from biowaste_dashboard.simulator import generate_dataset, generate_months


class TestGenerateMonths:
    def test_twelve_month_window(self) -> None:
        months = generate_months()
        assert len(months) == N_MONTHS
        assert months[0] == "2025-02"
        assert months[-1] == "2026-01"


class TestReferenceTables:
    def test_dimension_sizes(self, simulated_dataset) -> None:
        assert len(simulated_dataset.municipalities) == 4
        assert len(simulated_dataset.parishes) == 18
        assert len(simulated_dataset.teams) == 8
        assert len(simulated_dataset.routes) == 40
        assert len(simulated_dataset.contamination_types) == 7
        assert len(simulated_dataset.emission_factors) == 5

    def test_every_parish_belongs_to_a_known_municipality(self, simulated_dataset) -> None:
        known = set(simulated_dataset.municipalities["municipality_id"])
        assert set(simulated_dataset.parishes["municipality_id"]) <= known

    def test_routes_reference_known_parishes_and_teams(self, simulated_dataset) -> None:
        parishes = set(simulated_dataset.parishes["parish_id"])
        teams = set(simulated_dataset.teams["team_id"])
        for route in simulated_dataset.routes.itertuples(index=False):
            assert set(route.parish_ids) <= parishes
            assert route.team_id in teams


class TestFactTables:
    def test_parish_monthly_shape(self, simulated_dataset) -> None:
        df = simulated_dataset.parish_monthly
        assert len(df) == 18 * N_MONTHS
        assert simulated_dataset.available_months() == generate_months()

    def test_parish_monthly_ranges(self, simulated_dataset) -> None:
        df = simulated_dataset.parish_monthly
        assert (df["bags"] > 0).all()
        assert df["contamination_pct"].between(0, 100).all()
        assert (df["rejected_bags"] <= df["bags"]).all()

    def test_contamination_breakdown_matches_contaminant_mass(self, simulated_dataset) -> None:
        pm = simulated_dataset.parish_monthly.set_index(["month", "parish_id"])
        kg = simulated_dataset.contamination_by_type.groupby(["month", "parish_id"])["kg"].sum()
        expected = pm["weight_kg"] * pm["contamination_pct"] / 100
        assert ((kg - expected.loc[kg.index]).abs() < 0.5).all()

    def test_costs_total_is_sum_of_categories(self, simulated_dataset) -> None:
        costs = simulated_dataset.costs
        assert len(costs) == 4 * N_MONTHS
        assert (costs[COST_CATEGORIES].sum(axis=1) - costs["total_eur"]).abs().max() < 0.01

    def test_incident_counts_per_municipality_month(self, simulated_dataset) -> None:
        counts = simulated_dataset.incidents.groupby(["municipality_id", "month"]).size()
        assert counts.between(3, 12).all()
        assert simulated_dataset.incidents["resolution_min"].between(3, 90).all()

    def test_urban_waste_exceeds_bio_waste(self, simulated_dataset) -> None:
        bio_tons = simulated_dataset.parish_monthly.groupby(["municipality_id", "month"])["weight_kg"].sum() / 1000
        urban = simulated_dataset.urban_waste.set_index(["municipality_id", "month"])["total_urban_tons"]
        assert (urban.loc[bio_tons.index] > bio_tons).all()


class TestReproducibility:
    def test_same_seed_same_dataset(self, simulated_dataset) -> None:
        again = generate_dataset(seed=42)
        assert again.parish_monthly.equals(simulated_dataset.parish_monthly)
        assert again.incidents.equals(simulated_dataset.incidents)

    def test_different_seed_differs(self, simulated_dataset) -> None:
        other = generate_dataset(seed=7)
        assert not other.parish_monthly["weight_kg"].equals(simulated_dataset.parish_monthly["weight_kg"])

    def test_dataset_is_frozen(self, simulated_dataset) -> None:
        with pytest.raises((AttributeError, TypeError)):
            simulated_dataset.parish_monthly = None  # type: ignore[misc]
