"""Stakeholder dashboard aggregators over a WasteDataset."""

from .bee2waste import compute_bee2waste_metrics
from .ceo import compute_ceo_metrics
from .cfo import compute_cfo_metrics
from .councillor import compute_councillor_metrics
from .operational import compute_operational_metrics

__all__ = [
    "compute_ceo_metrics",
    "compute_cfo_metrics",
    "compute_councillor_metrics",
    "compute_operational_metrics",
    "compute_bee2waste_metrics",
]
