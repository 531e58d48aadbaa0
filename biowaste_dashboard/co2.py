"""
CO2 avoidance model.

    clean_tons    = B * (1 - c)
    rejected_tons = B * c
    complete      = clean_tons * (EF_landfill - EF_digestion)
                    - rejected_tons * EF_rejected
                    - B * EF_operations

B is bio-waste tons and c the contamination fraction. The complete figure
goes negative at extreme contamination and is reported as such.
"""

from .config import EF_ANAEROBIC_DIGESTION, EF_LANDFILL, EF_OPERATIONS, EF_REJECTED


def co2_simplified(bio_tons: float, contamination_pct: float) -> float:
    """tCO2e avoided by the clean fraction alone."""
    clean_tons = bio_tons * (1 - contamination_pct / 100)
    return clean_tons * (EF_LANDFILL - EF_ANAEROBIC_DIGESTION)


def co2_complete(bio_tons: float, contamination_pct: float) -> float:
    """tCO2e avoided net of rejected-material disposal and operations."""
    c = contamination_pct / 100
    clean_tons = bio_tons * (1 - c)
    rejected_tons = bio_tons * c
    return (
        clean_tons * (EF_LANDFILL - EF_ANAEROBIC_DIGESTION)
        - rejected_tons * EF_REJECTED
        - bio_tons * EF_OPERATIONS
    )


def co2_landfill_reference(bio_tons: float) -> float:
    """tCO2e that would have been emitted had everything gone to landfill."""
    return bio_tons * EF_LANDFILL


def co2_intensity_per_ton(bio_tons: float, contamination_pct: float) -> float:
    if bio_tons == 0:
        return 0.0
    return co2_complete(bio_tons, contamination_pct) / bio_tons
