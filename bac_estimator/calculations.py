"""BAC calculations using Widmark-style rise and linear elimination.

Model:
- Ethanol: grams = volume_ml * (abv / 100) * 0.789
- Rise: BAC = [grams / (body_weight_g * r)] * 100
- r comes from the distribution ratio table in bac_estimator.profile
- Elimination: 0.015 BAC percentage points per hour

All instants are epoch milliseconds supplied by the caller.
"""

import math
from typing import Iterable

from bac_estimator.drinks import DrinkEvent, ETHANOL_DENSITY
from bac_estimator.profile import UserProfile

# Elimination rate (% BAC per hour)
ELIMINATION_PER_HOUR = 0.015

MS_PER_HOUR = 3_600_000

# Precision of every BAC value handed to callers.
BAC_DECIMALS = 3

__all__ = [
    "BAC_DECIMALS",
    "ELIMINATION_PER_HOUR",
    "ETHANOL_DENSITY",
    "MS_PER_HOUR",
    "bac_rise_from_grams",
    "drink_contribution",
    "hours_to_eliminate",
    "rounded_bac",
    "total_bac",
]


def bac_rise_from_grams(grams_alcohol: float, weight_kg: float, ratio: float) -> float:
    """Immediate BAC rise (%) from a single dose of alcohol."""
    if weight_kg <= 0 or ratio <= 0:
        return 0.0
    raw = grams_alcohol / (weight_kg * 1000.0 * ratio)
    return raw * 100.0


def drink_contribution(drink: DrinkEvent, weight_kg: float, ratio: float, at_ms: float) -> float:
    """BAC (%) still attributable to one drink at ``at_ms``.

    A drink logged after ``at_ms`` contributes nothing: elapsed time is
    clamped at zero before elimination is subtracted.
    """
    if not drink.is_valid():
        return 0.0
    rise = bac_rise_from_grams(drink.grams(), weight_kg, ratio)
    elapsed = (at_ms - drink.timestamp_ms) / MS_PER_HOUR
    if elapsed < 0:
        return 0.0
    return max(0.0, rise - ELIMINATION_PER_HOUR * elapsed)


def total_bac(drinks: Iterable[DrinkEvent], profile: UserProfile, at_ms: float) -> float:
    """Unrounded BAC (%) at ``at_ms`` summed over every drink in the log."""
    if not profile.is_complete:
        return 0.0
    ratio = profile.distribution_ratio
    # math.fsum keeps the total independent of log order.
    return math.fsum(drink_contribution(d, profile.weight_kg, ratio, at_ms) for d in drinks)


def rounded_bac(drinks: Iterable[DrinkEvent], profile: UserProfile, at_ms: float) -> float:
    """BAC (%) at ``at_ms`` rounded to BAC_DECIMALS places."""
    return max(0.0, round(total_bac(drinks, profile, at_ms), BAC_DECIMALS))


def hours_to_eliminate(bac: float) -> float:
    """Hours of constant-rate elimination needed to bring ``bac`` to zero."""
    if bac <= 0:
        return 0.0
    return bac / ELIMINATION_PER_HOUR
