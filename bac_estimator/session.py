"""
Drinking session: profile + drink log held by the caller, with BAC helpers.
Time: epoch milliseconds. ``now_ms`` defaults to the wall clock only here;
the estimation modules never read the clock.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from bac_estimator.drinks import DrinkEvent, new_drink_id
from bac_estimator.profile import UserProfile
from bac_estimator.status import BacStatus, estimate
from bac_estimator.trend import DEFAULT_CONFIG, TrendConfig, TrendPoint, sample_trend

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60_000


def now_ms() -> float:
    return time.time() * 1000.0


@dataclass
class Session:
    profile: UserProfile
    _drinks: List[DrinkEvent] = field(default_factory=list)

    @property
    def drinks(self) -> Tuple[DrinkEvent, ...]:
        """Snapshot of the log, oldest first."""
        return tuple(sorted(self._drinks, key=lambda d: (d.timestamp_ms, d.id)))

    def add(self, drink: DrinkEvent) -> DrinkEvent:
        self._drinks.append(drink)
        logger.debug("logged drink %s (%.0f mL @ %.1f%%)", drink.id, drink.volume_ml, drink.abv)
        return drink

    def add_drink(
        self,
        volume_ml: float,
        abv: float,
        timestamp_ms: Optional[float] = None,
        name: Optional[str] = None,
        icon: Optional[str] = None,
        category: Optional[str] = None,
    ) -> DrinkEvent:
        ts = now_ms() if timestamp_ms is None else timestamp_ms
        return self.add(DrinkEvent(new_drink_id(), volume_ml, abv, ts, name=name, icon=icon, category=category))

    def add_drink_ago(self, minutes_ago: float, volume_ml: float, abv: float, now: Optional[float] = None, **meta) -> DrinkEvent:
        base = now_ms() if now is None else now
        return self.add_drink(volume_ml, abv, base - minutes_ago * MS_PER_MINUTE, **meta)

    def remove_drink(self, drink_id: str) -> bool:
        before = len(self._drinks)
        self._drinks = [d for d in self._drinks if d.id != drink_id]
        return len(self._drinks) < before

    def clear(self) -> None:
        self._drinks = []

    def status(self, now: Optional[float] = None, config: TrendConfig = DEFAULT_CONFIG) -> BacStatus:
        at = now_ms() if now is None else now
        return estimate(self.drinks, self.profile, at, config)

    def trend(self, center: Optional[float] = None, config: TrendConfig = DEFAULT_CONFIG) -> List[TrendPoint]:
        at = now_ms() if center is None else center
        return sample_trend(self.drinks, self.profile, at, config)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profile": self.profile.to_dict(),
            "drinks": [d.to_dict() for d in self.drinks],
        }

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["Session"]:
        """Rebuild a stored session; bad drink rows are skipped."""
        if not isinstance(raw, dict):
            return None
        try:
            profile = UserProfile.from_dict(raw.get("profile"))
        except ValueError as exc:
            logger.warning("discarding stored session: %s", exc)
            return None
        model = cls(profile=profile)
        drinks_raw = raw.get("drinks", [])
        if isinstance(drinks_raw, list):
            for row in drinks_raw:
                try:
                    model.add(DrinkEvent.from_dict(row))
                except ValueError as exc:
                    logger.warning("skipping stored drink: %s", exc)
        return model
