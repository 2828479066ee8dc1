"""
BAC estimator: Widmark-based BAC math, status tiers, and trend sampling.
Use from project root: python -m bac_estimator
"""

from bac_estimator.drinks import (
    ETHANOL_DENSITY,
    DrinkEvent,
    blend_abv,
    grams_from_volume_abv,
    list_references,
    mixed_drink,
)
from bac_estimator.profile import DISTRIBUTION_RATIOS, BiologicalSex, UserProfile
from bac_estimator.calculations import (
    ELIMINATION_PER_HOUR,
    bac_rise_from_grams,
    drink_contribution,
    rounded_bac,
    total_bac,
)
from bac_estimator.trend import TrendConfig, TrendPoint, peak_point, sample_trend
from bac_estimator.status import BacStatus, StatusTier, classify, estimate
from bac_estimator.session import Session
from bac_estimator.graph import curve_data, save_bac_graph

__all__ = [
    "Session",
    "DrinkEvent",
    "UserProfile",
    "BiologicalSex",
    "BacStatus",
    "StatusTier",
    "TrendConfig",
    "TrendPoint",
    "estimate",
    "classify",
    "sample_trend",
    "peak_point",
    "drink_contribution",
    "total_bac",
    "rounded_bac",
    "bac_rise_from_grams",
    "grams_from_volume_abv",
    "blend_abv",
    "mixed_drink",
    "list_references",
    "curve_data",
    "save_bac_graph",
    "DISTRIBUTION_RATIOS",
    "ELIMINATION_PER_HOUR",
    "ETHANOL_DENSITY",
]
