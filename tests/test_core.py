"""
Unit tests for the pure building blocks: periods, aggregation, GIS index,
CO2 model, trend slopes and the three semaphores.
"""

import logging

import pandas as pd
import pytest

from biowaste_dashboard.aggregation import (
    group_sum_by,
    monthly_totals,
    safe_ratio,
    summarise_records,
    weighted_average,
)
from biowaste_dashboard.co2 import (
    co2_complete,
    co2_intensity_per_ton,
    co2_landfill_reference,
    co2_simplified,
)
from biowaste_dashboard.config import GIS_INDICATORS
from biowaste_dashboard.gis_index import calculate_gis_index, classify_gis, normalise
from biowaste_dashboard.kpis import kpi_card
from biowaste_dashboard.periods import Period, annualisation_factor, pct_change, resolve_period
from biowaste_dashboard.semaphores import (
    semaphore_biogas_potential,
    semaphore_environmental_impact,
    semaphore_growth_quality,
)
from biowaste_dashboard.trends import (
    NEGATIVE,
    NEUTRAL,
    POSITIVE,
    classify_relative,
    classify_slope,
    regression_slope,
    relative_slope,
)

TWELVE_MONTHS = [f"2025-{m:02d}" for m in range(2, 13)] + ["2026-01"]


# ---------------------------------------------------------------------------
# Periods
# ---------------------------------------------------------------------------


class TestResolvePeriod:
    def test_last_6_months_and_previous_window(self) -> None:
        window = resolve_period("last_6m", TWELVE_MONTHS)
        assert window.current == tuple(TWELVE_MONTHS[-6:])
        assert window.previous == tuple(TWELVE_MONTHS[:6])

    def test_last_12_months_has_no_previous(self) -> None:
        window = resolve_period(Period.LAST_12_MONTHS, TWELVE_MONTHS)
        assert window.n_months == 12
        assert window.previous == ()

    def test_ytd_uses_year_of_latest_month(self) -> None:
        window = resolve_period("ytd", TWELVE_MONTHS)
        assert window.current == ("2026-01",)
        assert window.previous == ("2025-12",)

    def test_all_returns_every_month(self) -> None:
        window = resolve_period("all", list(reversed(TWELVE_MONTHS)))
        assert window.current == tuple(TWELVE_MONTHS)

    def test_previous_window_clipped_at_history_start(self) -> None:
        window = resolve_period("last_6m", TWELVE_MONTHS[:8])
        assert window.previous == tuple(TWELVE_MONTHS[:2])

    def test_unknown_token_raises(self) -> None:
        with pytest.raises(ValueError):
            resolve_period("last_3y", TWELVE_MONTHS)

    def test_empty_months_give_empty_windows(self) -> None:
        window = resolve_period("last_6m", [])
        assert window.current == ()
        assert window.annualise_factor == 1.0

    def test_annualise_factor(self) -> None:
        assert resolve_period("last_6m", TWELVE_MONTHS).annualise_factor == 2.0
        assert annualisation_factor(1) == 12.0
        assert annualisation_factor(0) == 1.0


class TestPctChange:
    def test_normal_change_rounded_to_one_decimal(self) -> None:
        assert pct_change(110, 100) == 10.0
        assert pct_change(1, 3) == -66.7

    def test_zero_previous(self) -> None:
        assert pct_change(5, 0) == 100.0
        assert pct_change(0, 0) == 0.0
        assert pct_change(-5, 0) == 0.0


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


class TestAggregation:
    def test_safe_ratio_zero_denominator(self) -> None:
        assert safe_ratio(10, 0) == 0.0
        assert safe_ratio(10, 4) == 2.5

    def test_population_weighted_rollup(self) -> None:
        frame = pd.DataFrame({"score": [80.0, 40.0], "population": [1000, 3000]})
        assert weighted_average(frame, "score", "population") == pytest.approx(50.0)

    def test_weighted_average_zero_weights(self) -> None:
        frame = pd.DataFrame({"score": [80.0, 40.0], "population": [0, 0]})
        assert weighted_average(frame, "score", "population") == 0.0

    def test_weighted_average_empty_frame(self, caplog) -> None:
        frame = pd.DataFrame(columns=["score", "population"])
        with caplog.at_level(logging.DEBUG, logger="biowaste_dashboard.aggregation"):
            assert weighted_average(frame, "score", "population") == 0.0
        assert "No rows to weight score by population" in caplog.text

    def test_group_sum_by(self) -> None:
        frame = pd.DataFrame({"key": ["a", "b", "a"], "value": [1, 2, 3]})
        sums = group_sum_by(frame, "key", "value")
        assert sums["a"] == 4
        assert sums["b"] == 2

    def test_summarise_records_weights_contamination(self, small_dataset) -> None:
        totals = summarise_records(small_dataset.parish_monthly)
        assert totals["tons"] == pytest.approx(24.0)
        assert totals["bags"] == 2400
        assert totals["contamination_pct"] == pytest.approx(80000 / 6000)

    def test_monthly_totals_fills_missing_months(self, small_dataset) -> None:
        monthly = monthly_totals(small_dataset.parish_monthly, ["2024-12", "2025-01"])
        assert list(monthly.index) == ["2024-12", "2025-01"]
        assert monthly.loc["2024-12", "weight_kg"] == 0
        assert monthly.loc["2024-12", "contamination_pct"] == 0.0
        assert monthly.loc["2025-01", "weight_kg"] == 6000


# ---------------------------------------------------------------------------
# GIS index
# ---------------------------------------------------------------------------


class TestGisIndex:
    def test_weights_sum_to_one(self) -> None:
        assert sum(indicator["weight"] for indicator in GIS_INDICATORS.values()) == pytest.approx(1.0)

    def test_worst_inputs_score_zero(self) -> None:
        result = calculate_gis_index(
            kg_per_capita_year=5,
            contamination_pct=40,
            alerts_per_ton=10,
            co2_avoided_per_ton=0,
            bags_per_capita_month=0,
        )
        assert result.score == 0.0
        assert result.classification == "critico"

    def test_best_inputs_score_hundred(self) -> None:
        result = calculate_gis_index(
            kg_per_capita_year=80,
            contamination_pct=0,
            alerts_per_ton=0,
            co2_avoided_per_ton=0.8,
            bags_per_capita_month=4,
        )
        assert result.score == 100.0
        assert result.classification == "excelente"

    def test_out_of_domain_inputs_are_clipped(self) -> None:
        result = calculate_gis_index(
            kg_per_capita_year=1_000,
            contamination_pct=-50,
            alerts_per_ton=-3,
            co2_avoided_per_ton=5,
            bags_per_capita_month=40,
        )
        assert result.score == 100.0
        result = calculate_gis_index(0, 100, 50, -1, -1)
        assert result.score == 0.0

    def test_components_are_normalised(self) -> None:
        result = calculate_gis_index(42.5, 20, 5, 0.4, 2)
        assert result.components.x1 == pytest.approx(50.0)
        assert result.components.x2 == pytest.approx(50.0)
        assert result.components.x3 == pytest.approx(50.0)
        assert result.components.x4 == pytest.approx(50.0)
        assert result.components.x5 == pytest.approx(50.0)
        assert result.score == 50.0

    def test_normalise_invert(self) -> None:
        assert normalise(0, 0, 10, invert=True) == 100.0
        assert normalise(10, 0, 10, invert=True) == 0.0

    @pytest.mark.parametrize(
        "score, label",
        [(80.0, "excelente"), (79.9, "bom"), (65.0, "bom"), (50.0, "satisfatorio"),
         (35.0, "insuficiente"), (34.9, "critico")],
    )
    def test_classification_bands(self, score, label) -> None:
        assert classify_gis(score) == label


# ---------------------------------------------------------------------------
# CO2
# ---------------------------------------------------------------------------


class TestCo2:
    def test_clean_stream(self) -> None:
        assert co2_complete(100, 0) == pytest.approx(77.0)

    def test_fully_contaminated_stream_is_negative(self) -> None:
        assert co2_complete(100, 100) == pytest.approx(-53.0)

    def test_simplified_and_reference(self) -> None:
        assert co2_simplified(100, 10) == pytest.approx(72.0)
        assert co2_landfill_reference(100) == pytest.approx(90.0)

    def test_intensity_zero_tons(self) -> None:
        assert co2_intensity_per_ton(0, 10) == 0.0
        assert co2_intensity_per_ton(100, 0) == pytest.approx(0.77)


# ---------------------------------------------------------------------------
# Trends
# ---------------------------------------------------------------------------


class TestTrends:
    def test_constant_series_has_zero_slope(self) -> None:
        assert regression_slope([5, 5, 5, 5]) == 0.0

    def test_linear_series_slope(self) -> None:
        assert regression_slope([0, 1, 2, 3, 4]) == pytest.approx(1.0)

    def test_short_series(self) -> None:
        assert regression_slope([]) == 0.0
        assert regression_slope([7]) == 0.0

    def test_relative_slope(self) -> None:
        assert relative_slope([1, 2, 3]) == pytest.approx(0.5)
        assert relative_slope([0, 0, 0]) == 0.0

    def test_classify_slope(self) -> None:
        assert classify_slope(1.0, 0.0, -50.0) == POSITIVE
        assert classify_slope(-10.0, 0.0, -50.0) == NEUTRAL
        assert classify_slope(-60.0, 0.0, -50.0) == NEGATIVE

    def test_classify_relative(self) -> None:
        assert classify_relative([100, 110, 120], 0.02) == POSITIVE
        assert classify_relative([100, 100, 100], 0.02) == NEUTRAL
        assert classify_relative([120, 110, 100], 0.02) == NEGATIVE


# ---------------------------------------------------------------------------
# Semaphores
# ---------------------------------------------------------------------------

_RISING_VOLUME = [1000, 1100, 1200, 1300, 1400, 1500]
_FALLING_VOLUME = [1500, 1400, 1300, 1200, 1100, 1000]
_FALLING_CONTAMINATION = [12, 11.5, 11, 10.5, 10, 9.5]
_RISING_CONTAMINATION = [9.5, 10, 10.5, 11, 11.5, 12]
_LOW_ALERTS = [0.25] * 6
_HIGH_ALERTS = [0.6] * 6


class TestSemaphoreGrowthQuality:
    def test_no_flags_is_green(self) -> None:
        result = semaphore_growth_quality(_RISING_VOLUME, _FALLING_CONTAMINATION, _LOW_ALERTS)
        assert result.id == "SEM-01"
        assert result.colour == "green"
        assert [i.trend for i in result.indicators] == [POSITIVE, POSITIVE, NEUTRAL]

    def test_one_flag_is_yellow(self) -> None:
        result = semaphore_growth_quality(_RISING_VOLUME, _FALLING_CONTAMINATION, _HIGH_ALERTS)
        assert result.colour == "yellow"

    def test_two_flags_is_orange(self) -> None:
        result = semaphore_growth_quality(_FALLING_VOLUME, _RISING_CONTAMINATION, _LOW_ALERTS)
        assert result.colour == "orange"

    def test_three_flags_is_red(self) -> None:
        result = semaphore_growth_quality(_FALLING_VOLUME, _RISING_CONTAMINATION, _HIGH_ALERTS)
        assert result.colour == "red"

    def test_rising_alerts_raise_a_flag(self) -> None:
        rising = [0.0, 0.02, 0.04, 0.06, 0.08, 0.1]
        result = semaphore_growth_quality(_RISING_VOLUME, _FALLING_CONTAMINATION, rising)
        assert result.colour == "yellow"
        assert result.indicators[2].trend == NEGATIVE

    def test_adding_a_flag_never_improves_colour(self) -> None:
        order = ["green", "yellow", "orange", "red"]
        base = semaphore_growth_quality(_RISING_VOLUME, _FALLING_CONTAMINATION, _LOW_ALERTS)
        worse = semaphore_growth_quality(_FALLING_VOLUME, _FALLING_CONTAMINATION, _LOW_ALERTS)
        assert order.index(worse.colour) > order.index(base.colour)

    def test_empty_series_is_green(self) -> None:
        assert semaphore_growth_quality([], [], []).colour == "green"


class TestSemaphoreEnvironmentalImpact:
    def test_both_improving_is_green(self) -> None:
        result = semaphore_environmental_impact([0.6, 0.62, 0.64], [88, 89, 90])
        assert result.colour == "green"

    def test_mixed_is_yellow(self) -> None:
        result = semaphore_environmental_impact([0.64, 0.62, 0.6], [88, 89, 90])
        assert result.colour == "yellow"

    def test_both_declining_is_red(self) -> None:
        result = semaphore_environmental_impact([0.64, 0.62, 0.6], [90, 89, 88])
        assert result.colour == "red"
        assert result.id == "SEM-02"


class TestSemaphoreBiogasPotential:
    @pytest.mark.parametrize(
        "series, colour",
        [
            ([1000, 1100, 1200, 1300], "green"),
            ([1000, 1000, 1000, 1000], "yellow"),
            ([1000, 980, 960, 940], "orange"),
            ([1000, 900, 800, 700], "red"),
        ],
    )
    def test_relative_slope_bands(self, series, colour) -> None:
        assert semaphore_biogas_potential(series).colour == colour


# ---------------------------------------------------------------------------
# KPI cards
# ---------------------------------------------------------------------------


class TestKpiCards:
    def test_card_rounding_and_sparkline(self) -> None:
        sparkline = pd.Series([1.234, 5.678], index=["2025-01", "2025-02"])
        card = kpi_card("Total", 12.34, 10.0, "t", sparkline=sparkline)
        assert card.value == 12.3
        assert card.variance_pct == 23.4
        assert [p.month for p in card.sparkline] == ["2025-01", "2025-02"]
        assert card.sparkline[0].value == 1.23

    def test_integer_card(self) -> None:
        card = kpi_card("Bags", 1234.6, 0, "bags", decimals=None)
        assert card.value == 1235
        assert card.variance_pct == 100.0

    def test_card_is_frozen(self) -> None:
        card = kpi_card("Total", 1.0, 1.0, "t")
        with pytest.raises((AttributeError, TypeError)):
            card.value = 2.0  # type: ignore[misc]
