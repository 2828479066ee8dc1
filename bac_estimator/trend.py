"""BAC trend sampling around a center instant.

The window is symmetric: ``half_width_hours`` each side of the center,
sampled every ``step_minutes`` including both endpoints. Samples after the
caller's "now" are projections; the numbers are computed the same way.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from bac_estimator import calculations
from bac_estimator.drinks import DrinkEvent
from bac_estimator.profile import UserProfile

MS_PER_MINUTE = 60_000


@dataclass(frozen=True)
class TrendConfig:
    half_width_hours: float = 7.0
    step_minutes: float = 10.0
    # How far the chart moves per back/forward step.
    pan_hours: float = 4.0

    def __post_init__(self):
        if self.step_minutes <= 0:
            raise ValueError("step_minutes must be > 0")
        if self.half_width_hours < 0:
            raise ValueError("half_width_hours must be >= 0")
        steps = self.half_width_hours * 60.0 / self.step_minutes
        if abs(steps - round(steps)) > 1e-9:
            raise ValueError("half_width_hours must be a whole number of steps")

    @property
    def steps_per_side(self) -> int:
        return int(round(self.half_width_hours * 60.0 / self.step_minutes))

    @property
    def sample_count(self) -> int:
        return 2 * self.steps_per_side + 1

    @property
    def half_width_ms(self) -> float:
        return self.half_width_hours * calculations.MS_PER_HOUR

    @property
    def step_ms(self) -> float:
        return self.step_minutes * MS_PER_MINUTE


DEFAULT_CONFIG = TrendConfig()


@dataclass(frozen=True)
class TrendPoint:
    timestamp_ms: float
    bac: float

    def is_projected(self, now_ms: float) -> bool:
        return self.timestamp_ms > now_ms

    def to_dict(self):
        return {"t": self.timestamp_ms, "bac": self.bac}


def sample_times(center_ms: float, config: TrendConfig = DEFAULT_CONFIG) -> List[float]:
    """Evenly spaced instants from center - half_width to center + half_width."""
    n = config.steps_per_side
    return [center_ms + i * config.step_ms for i in range(-n, n + 1)]


def sample_trend(
    drinks: Iterable[DrinkEvent],
    profile: UserProfile,
    center_ms: float,
    config: TrendConfig = DEFAULT_CONFIG,
) -> List[TrendPoint]:
    """(timestamp, BAC) samples across the window, ascending by time.

    Always returns ``config.sample_count`` points; an empty log or an
    incomplete profile gives a flat zero baseline.
    """
    snapshot = tuple(drinks)
    return [
        TrendPoint(t, calculations.rounded_bac(snapshot, profile, t))
        for t in sample_times(center_ms, config)
    ]


def peak_point(points: List[TrendPoint]) -> Optional[TrendPoint]:
    """Earliest point holding the maximum BAC."""
    peak = None
    for p in points:
        if peak is None or p.bac > peak.bac:
            peak = p
    return peak


def nearest_point(points: List[TrendPoint], instant_ms: float) -> Optional[TrendPoint]:
    if not points:
        return None
    return min(points, key=lambda p: abs(p.timestamp_ms - instant_ms))


def pan(center_ms: float, steps: int, config: TrendConfig = DEFAULT_CONFIG) -> float:
    """Move the window center by ``steps`` pan increments (negative = back)."""
    return center_ms + steps * config.pan_hours * calculations.MS_PER_HOUR
