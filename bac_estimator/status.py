"""Current BAC status: tier, display color, sober-time projection and peak."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from bac_estimator import calculations
from bac_estimator.drinks import DrinkEvent
from bac_estimator.profile import UserProfile
from bac_estimator.trend import DEFAULT_CONFIG, TrendConfig, peak_point, sample_trend


class StatusTier(str, Enum):
    INCOMPLETE_PROFILE = "incomplete_profile"
    SOBER = "sober"
    BUZZED = "buzzed"
    TIPSY = "tipsy"
    DRUNK = "drunk"


# (lower bound inclusive, tier), ascending. SOBER covers exactly 0 only;
# anything above 0 and below the next bound is BUZZED.
TIER_THRESHOLDS: List[Tuple[float, StatusTier]] = [
    (0.05, StatusTier.TIPSY),
    (0.12, StatusTier.DRUNK),
]

TIER_COLORS: Dict[StatusTier, str] = {
    StatusTier.INCOMPLETE_PROFILE: "safe",
    StatusTier.SOBER: "safe",
    StatusTier.BUZZED: "buzz",
    StatusTier.TIPSY: "drunk",
    StatusTier.DRUNK: "danger",
}


def classify(bac: float) -> StatusTier:
    """Tier for an already rounded BAC value."""
    if bac <= 0:
        return StatusTier.SOBER
    tier = StatusTier.BUZZED
    for lower, candidate in TIER_THRESHOLDS:
        if bac >= lower:
            tier = candidate
    return tier


def tier_color(tier: StatusTier) -> str:
    return TIER_COLORS[tier]


@dataclass(frozen=True)
class BacStatus:
    current_bac: float
    sober_at_ms: Optional[float]
    tier: StatusTier
    color: str
    evaluated_at_ms: float
    peak_bac: Optional[float] = None
    peak_at_ms: Optional[float] = None

    def hours_until_sober(self) -> float:
        if self.sober_at_ms is None:
            return 0.0
        return (self.sober_at_ms - self.evaluated_at_ms) / calculations.MS_PER_HOUR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_bac": self.current_bac,
            "sober_at_ms": self.sober_at_ms,
            "tier": self.tier.value,
            "color": self.color,
            "evaluated_at_ms": self.evaluated_at_ms,
            "peak_bac": self.peak_bac,
            "peak_at_ms": self.peak_at_ms,
            "hours_until_sober": round(self.hours_until_sober(), 2),
        }


def incomplete_status(now_ms: float) -> BacStatus:
    tier = StatusTier.INCOMPLETE_PROFILE
    return BacStatus(current_bac=0.0, sober_at_ms=None, tier=tier, color=tier_color(tier), evaluated_at_ms=now_ms)


def estimate(
    drinks: Iterable[DrinkEvent],
    profile: UserProfile,
    now_ms: float,
    config: TrendConfig = DEFAULT_CONFIG,
) -> BacStatus:
    """BAC status at ``now_ms``; peak is taken over the trend window around it."""
    if not profile.is_complete:
        return incomplete_status(now_ms)

    snapshot = tuple(drinks)
    bac = calculations.rounded_bac(snapshot, profile, now_ms)
    sober_at = None
    if bac > 0:
        sober_at = now_ms + calculations.hours_to_eliminate(bac) * calculations.MS_PER_HOUR

    # The window always contains now_ms, so the peak is never below bac.
    peak = peak_point(sample_trend(snapshot, profile, now_ms, config))

    tier = classify(bac)
    return BacStatus(
        current_bac=bac,
        sober_at_ms=sober_at,
        tier=tier,
        color=tier_color(tier),
        evaluated_at_ms=now_ms,
        peak_bac=peak.bac,
        peak_at_ms=peak.timestamp_ms,
    )
