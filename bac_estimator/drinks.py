"""Drink log entries and alcohol content helpers for BAC tracking.

A drink is treated as fully consumed at its timestamp; for mixed drinks the
stored volume is spirit + mixer and the ABV is the blended value.
"""

import math
import uuid
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

# Ethanol density (g/mL) for volume x ABV -> grams.
ETHANOL_DENSITY = 0.789

MAX_ABV = 100.0


def grams_from_volume_abv(volume_ml: float, abv: float) -> float:
    """Convert millilitres and ABV (0 to 100) to grams of ethanol."""
    return volume_ml * (abv / 100.0) * ETHANOL_DENSITY


def new_drink_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class DrinkEvent:
    """One logged drink. Immutable once logged."""

    id: str
    volume_ml: float
    abv: float  # percent, e.g. 5.0
    timestamp_ms: float  # epoch ms at which the drink counts as consumed
    name: Optional[str] = None
    icon: Optional[str] = None
    category: Optional[str] = None

    def is_valid(self) -> bool:
        values = (self.volume_ml, self.abv, self.timestamp_ms)
        if not all(isinstance(v, (int, float)) and math.isfinite(v) for v in values):
            return False
        return self.volume_ml > 0 and 0.0 <= self.abv <= MAX_ABV

    def grams(self) -> float:
        """Grams of pure ethanol in the drink (0 for a malformed event)."""
        if not self.is_valid():
            return 0.0
        return grams_from_volume_abv(self.volume_ml, self.abv)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "volumeMl": self.volume_ml,
            "abv": self.abv,
            "timestampMs": self.timestamp_ms,
            "name": self.name,
            "icon": self.icon,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "DrinkEvent":
        """Build an event from stored JSON. Raises ValueError on bad input."""
        if not isinstance(raw, dict):
            raise ValueError("drink must be an object")
        try:
            volume = float(_first(raw, "volumeMl", "volume_ml"))
            abv = float(raw["abv"])
            ts = float(_first(raw, "timestampMs", "timestamp_ms", "timestamp"))
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"invalid drink: {exc}") from exc
        event = cls(
            id=str(raw.get("id") or new_drink_id()),
            volume_ml=volume,
            abv=abv,
            timestamp_ms=ts,
            name=_opt_str(raw.get("name")),
            icon=_opt_str(raw.get("icon")),
            category=_opt_str(raw.get("category")),
        )
        if not event.is_valid():
            raise ValueError("drink volume must be > 0 and abv within 0-100")
        return event


def _first(raw: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    raise KeyError(keys[0])


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


# --- mixed drinks ---

def blend_abv(spirit_ml: float, spirit_abv: float, mixer_ml: float) -> float:
    """Effective ABV (%) of a spirit topped up with a non-alcoholic mixer."""
    total = spirit_ml + max(0.0, mixer_ml)
    if total <= 0:
        return spirit_abv
    return (spirit_ml * spirit_abv / 100.0) / total * 100.0


def mixed_drink(
    spirit_ml: float,
    spirit_abv: float,
    mixer_ml: float,
    timestamp_ms: float,
    name: Optional[str] = None,
    mixer_name: Optional[str] = None,
) -> DrinkEvent:
    """Log a cocktail as total volume at the blended ABV.

    Raises ValueError for a spirit outside 0-100 % ABV or a non-positive
    spirit volume; the blended value would otherwise hide it.
    """
    if not (math.isfinite(spirit_ml) and spirit_ml > 0):
        raise ValueError("spirit volume must be > 0")
    if not (math.isfinite(spirit_abv) and 0.0 <= spirit_abv <= MAX_ABV):
        raise ValueError("abv must be within 0-100")
    if mixer_name:
        name = f"{name} & {mixer_name}" if name else mixer_name
    return DrinkEvent(
        id=new_drink_id(),
        volume_ml=float(round(spirit_ml + max(0.0, mixer_ml))),
        abv=round(blend_abv(spirit_ml, spirit_abv, mixer_ml), 1),
        timestamp_ms=timestamp_ms,
        name=name,
        icon="🍹",
        category="cocktail",
    )


# --- reference library ---

@dataclass(frozen=True)
class DrinkReference:
    """A generic drink with default ABV and serving size."""

    key: str
    name: str
    category: str  # beer, wine, spirit, cocktail, other
    abv: float  # percent
    serving_ml: float
    icon: str = ""

    def as_drink(self, timestamp_ms: float, volume_ml: Optional[float] = None) -> DrinkEvent:
        return DrinkEvent(
            id=new_drink_id(),
            volume_ml=self.serving_ml if volume_ml is None else volume_ml,
            abv=self.abv,
            timestamp_ms=timestamp_ms,
            name=self.name,
            icon=self.icon,
            category=self.category,
        )


def _r(key: str, name: str, category: str, abv: float, ml: float) -> DrinkReference:
    icon = {"beer": "🍺", "wine": "🍷", "spirit": "🥃", "cocktail": "🍹"}.get(category, "")
    return DrinkReference(key=key, name=name, category=category, abv=abv, serving_ml=ml, icon=icon)


REFERENCES: List[DrinkReference] = [
    _r("lager", "Lager / Blonde", "beer", 5.0, 250),
    _r("white-beer", "Blanche / White", "beer", 4.5, 250),
    _r("ipa", "IPA", "beer", 6.0, 330),
    _r("triple", "Triple", "beer", 8.5, 330),
    _r("stout", "Stout / Brune", "beer", 5.5, 330),
    _r("strong-beer", "Forte / Strong", "beer", 10.0, 330),
    _r("red-wine", "Red Wine", "wine", 13.5, 125),
    _r("white-wine", "White Wine", "wine", 12.0, 125),
    _r("rose", "Rosé", "wine", 12.5, 125),
    _r("champagne", "Champagne", "wine", 12.0, 125),
    _r("vodka", "Vodka", "spirit", 40.0, 40),
    _r("rum", "Rum", "spirit", 40.0, 40),
    _r("whisky", "Whisky", "spirit", 40.0, 40),
    _r("tequila", "Tequila", "spirit", 38.0, 40),
    _r("gin", "Gin", "spirit", 40.0, 40),
]

_REFERENCES_BY_KEY: Dict[str, DrinkReference] = {r.key: r for r in REFERENCES}

# Serving presets (mL) offered by the pour screen.
BEER_PRESETS_ML = {"small": 125, "half": 250, "bottle": 330, "pint": 500, "liter": 1000}
SHOT_SIZES_ML = {"small": 30, "standard": 40, "large": 50}
WINE_GLASS_ML = 125


def serving_presets() -> Dict[str, Dict[str, float]]:
    """Serving sizes (mL) by pour style, for UI pickers."""
    return {"beer": dict(BEER_PRESETS_ML), "shot": dict(SHOT_SIZES_ML), "wine": {"glass": WINE_GLASS_ML}}


def get_reference(key: str) -> Optional[DrinkReference]:
    return _REFERENCES_BY_KEY.get(key)


def list_references(category: Optional[str] = None) -> List[dict]:
    """Reference drinks as dicts for UI dropdowns, optionally one category."""
    return [asdict(r) for r in REFERENCES if category is None or r.category == category]


# --- consumption pace ---

class Pace(str, Enum):
    SLOW = "slow"
    AVERAGE = "average"
    FAST = "fast"


# mL per minute by drink category and pace.
CONSUMPTION_RATES_ML_PER_MIN: Dict[str, Dict[Pace, float]] = {
    "beer": {Pace.SLOW: 17, Pace.AVERAGE: 21, Pace.FAST: 25},
    "wine": {Pace.SLOW: 6, Pace.AVERAGE: 7, Pace.FAST: 8},
    "cocktail": {Pace.SLOW: 5, Pace.AVERAGE: 7.5, Pace.FAST: 10},
    "spirit": {Pace.SLOW: 10, Pace.AVERAGE: 20, Pace.FAST: 40},
    "other": {Pace.SLOW: 10, Pace.AVERAGE: 15, Pace.FAST: 20},
}


def drinking_minutes(volume_ml: float, category: Optional[str], pace: Pace = Pace.AVERAGE) -> float:
    """Rough minutes needed to finish ``volume_ml`` at the given pace."""
    rates = CONSUMPTION_RATES_ML_PER_MIN.get(category or "other", CONSUMPTION_RATES_ML_PER_MIN["other"])
    if volume_ml <= 0:
        return 0.0
    return round(volume_ml / rates[Pace(pace)], 1)
