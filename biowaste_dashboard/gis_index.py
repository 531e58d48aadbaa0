"""
GIS composite quality index.

Blends five indicators into one 0-100 score. Each indicator is clipped to
its fixed domain in config.GIS_INDICATORS, rescaled to 0-100 (and
reversed when inverted), then weighted.
"""

from dataclasses import dataclass

from .config import GIS_CLASSIFICATION_BANDS, GIS_FLOOR_CLASSIFICATION, GIS_INDICATORS


@dataclass(frozen=True)
class GisComponents:
    x1: float  # collection per capita
    x2: float  # quality
    x3: float  # alerts (inverted)
    x4: float  # environmental impact
    x5: float  # coverage


@dataclass(frozen=True)
class GisIndexResult:
    score: float
    classification: str
    components: GisComponents


def normalise(value: float, lower: float, upper: float, invert: bool = False) -> float:
    """Clip value to [lower, upper] and rescale to 0-100."""
    clipped = max(lower, min(upper, value))
    scaled = (clipped - lower) / (upper - lower) * 100
    return 100 - scaled if invert else scaled


def classify_gis(score: float) -> str:
    for lower_bound, label in GIS_CLASSIFICATION_BANDS:
        if score >= lower_bound:
            return label
    return GIS_FLOOR_CLASSIFICATION


def calculate_gis_index(
    kg_per_capita_year: float,
    contamination_pct: float,
    alerts_per_ton: float,
    co2_avoided_per_ton: float,
    bags_per_capita_month: float,
) -> GisIndexResult:
    """Return the GIS score, its classification and the five components.

    Quality is derived as 100 - contamination_pct before normalisation.
    """
    raw = {
        "kg_per_capita_year": kg_per_capita_year,
        "quality_pct": 100 - contamination_pct,
        "alerts_per_ton": alerts_per_ton,
        "co2_avoided_per_ton": co2_avoided_per_ton,
        "bags_per_capita_month": bags_per_capita_month,
    }

    components = {}
    score = 0.0
    for name, indicator in GIS_INDICATORS.items():
        lower, upper = indicator["domain"]
        component = normalise(raw[name], lower, upper, indicator["invert"])
        components[indicator["component"]] = component
        score += indicator["weight"] * component

    score = round(score, 1)
    return GisIndexResult(
        score=score,
        classification=classify_gis(score),
        components=GisComponents(**components),
    )
