"""
CEO semaphores: three traffic lights, each a separate policy.

SEM-01 "Is bio-waste growing with quality?"
    volume trend + contamination trend + critical alerts per ton.
    0/1/2/3 negative signals -> green/yellow/orange/red.

SEM-02 "Is the environmental impact improving?"
    CO2 avoided per ton trend + landfill diversion trend.
    Neither negative -> green, both negative -> red, otherwise yellow.

SEM-03 "Is the biogas potential increasing?"
    Relative slope of monthly biogas potential, bucketed by fixed bands.

All three take monthly series (oldest first) and are pure.
"""

from dataclasses import dataclass

import numpy as np

from .config import (
    ALERTS_ELEVATED_AVERAGE,
    ALERTS_NEGATIVE_ABOVE,
    ALERTS_POSITIVE_BELOW,
    BIOGAS_COLOUR_BANDS,
    CO2_PER_TON_NEGATIVE_BELOW,
    CO2_PER_TON_POSITIVE_ABOVE,
    CONTAMINATION_NEGATIVE_ABOVE,
    CONTAMINATION_POSITIVE_BELOW,
    DIVERSION_NEGATIVE_BELOW,
    DIVERSION_POSITIVE_ABOVE,
    VOLUME_NEGATIVE_BELOW,
    VOLUME_POSITIVE_ABOVE,
)
from .trends import NEGATIVE, NEUTRAL, POSITIVE, classify_slope, regression_slope, relative_slope


@dataclass(frozen=True)
class IndicatorSnapshot:
    label: str
    value: float
    trend: str


@dataclass(frozen=True)
class SemaphoreResult:
    id: str
    question: str
    colour: str
    rationale: str
    indicators: tuple[IndicatorSnapshot, ...]


def _latest(values: list[float]) -> float:
    return float(values[-1]) if values else 0.0


# ---------------------------------------------------------------------------
# SEM-01
# ---------------------------------------------------------------------------
_GROWTH_QUALITY_COLOURS = {0: "green", 1: "yellow", 2: "orange", 3: "red"}

_GROWTH_QUALITY_RATIONALE = {
    "green": "Growing volume with stable quality and few alerts.",
    "yellow": "One indicator needs attention.",
    "orange": "Two indicators trending negative. Intervention needed.",
    "red": "All indicators negative. Urgent action required.",
}


def semaphore_growth_quality(
    volume_kg: list[float],
    contamination_pct: list[float],
    critical_alerts_per_ton: list[float],
) -> SemaphoreResult:
    """SEM-01: count negative signals across volume, quality and alerts."""
    volume_kg = list(volume_kg)
    contamination_pct = list(contamination_pct)
    critical_alerts_per_ton = list(critical_alerts_per_ton)

    volume_slope = regression_slope(volume_kg)
    volume_trend = classify_slope(volume_slope, VOLUME_POSITIVE_ABOVE, VOLUME_NEGATIVE_BELOW)

    # Rising contamination is the negative direction
    contamination_slope = regression_slope(contamination_pct)
    if contamination_slope < CONTAMINATION_POSITIVE_BELOW:
        contamination_trend = POSITIVE
    elif contamination_slope > CONTAMINATION_NEGATIVE_ABOVE:
        contamination_trend = NEGATIVE
    else:
        contamination_trend = NEUTRAL

    alerts_slope = regression_slope(critical_alerts_per_ton)
    alerts_average = float(np.mean(critical_alerts_per_ton)) if critical_alerts_per_ton else 0.0
    if alerts_slope < ALERTS_POSITIVE_BELOW:
        alerts_trend = POSITIVE
    elif alerts_slope > ALERTS_NEGATIVE_ABOVE:
        alerts_trend = NEGATIVE
    else:
        alerts_trend = NEUTRAL

    flags = [
        volume_trend == NEGATIVE,
        contamination_trend == NEGATIVE,
        alerts_average > ALERTS_ELEVATED_AVERAGE or alerts_trend == NEGATIVE,
    ]
    colour = _GROWTH_QUALITY_COLOURS[sum(flags)]

    return SemaphoreResult(
        id="SEM-01",
        question="Is bio-waste growing with quality?",
        colour=colour,
        rationale=_GROWTH_QUALITY_RATIONALE[colour],
        indicators=(
            IndicatorSnapshot("Volume growth (kg/month)", round(volume_slope), volume_trend),
            IndicatorSnapshot("Contamination rate (%)", round(_latest(contamination_pct), 1), contamination_trend),
            IndicatorSnapshot("Critical alerts per ton", round(alerts_average, 2), alerts_trend),
        ),
    )


# ---------------------------------------------------------------------------
# SEM-02
# ---------------------------------------------------------------------------
def semaphore_environmental_impact(
    co2_per_ton: list[float],
    diversion_pct: list[float],
) -> SemaphoreResult:
    """SEM-02: combine the CO2-per-ton and landfill-diversion trends."""
    co2_per_ton = list(co2_per_ton)
    diversion_pct = list(diversion_pct)

    co2_trend = classify_slope(
        regression_slope(co2_per_ton), CO2_PER_TON_POSITIVE_ABOVE, CO2_PER_TON_NEGATIVE_BELOW
    )
    diversion_trend = classify_slope(
        regression_slope(diversion_pct), DIVERSION_POSITIVE_ABOVE, DIVERSION_NEGATIVE_BELOW
    )

    if co2_trend != NEGATIVE and diversion_trend != NEGATIVE:
        colour = "green"
        rationale = "CO2 avoided and landfill diversion trending positive."
    elif co2_trend == NEGATIVE and diversion_trend == NEGATIVE:
        colour = "red"
        rationale = "Both environmental indicators declining."
    else:
        colour = "yellow"
        rationale = "One environmental indicator needs attention."

    return SemaphoreResult(
        id="SEM-02",
        question="Is the environmental impact improving?",
        colour=colour,
        rationale=rationale,
        indicators=(
            IndicatorSnapshot("CO2 avoided per ton", round(_latest(co2_per_ton), 3), co2_trend),
            IndicatorSnapshot("Landfill diversion (%)", round(_latest(diversion_pct), 1), diversion_trend),
        ),
    )


# ---------------------------------------------------------------------------
# SEM-03
# ---------------------------------------------------------------------------
_BIOGAS_RATIONALE = {
    "green": "Biogas potential growing.",
    "yellow": "Stable production, no significant growth.",
    "orange": "Biogas potential declining. Check quality and volume.",
    "red": "Biogas potential declining. Check quality and volume.",
}


def semaphore_biogas_potential(biogas_m3: list[float]) -> SemaphoreResult:
    """SEM-03: bucket the relative slope of monthly biogas potential."""
    biogas_m3 = list(biogas_m3)
    slope = relative_slope(biogas_m3)

    colour, trend = "red", NEGATIVE
    for lower_bound, band_colour, band_trend in BIOGAS_COLOUR_BANDS:
        if slope > lower_bound:
            colour, trend = band_colour, band_trend
            break

    return SemaphoreResult(
        id="SEM-03",
        question="Is the biogas potential increasing?",
        colour=colour,
        rationale=_BIOGAS_RATIONALE[colour],
        indicators=(
            IndicatorSnapshot("Biogas potential (m3/month)", round(_latest(biogas_m3)), trend),
            IndicatorSnapshot("6-month trend (%)", round(slope * 100, 2), trend),
        ),
    )
