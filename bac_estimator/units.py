"""Display units for BAC values. Pure presentation; never fed back into the math."""

from enum import Enum


class BacUnit(str, Enum):
    PERCENT = "percent"
    GRAMS_PER_LITER = "gl"


# 0.05 % == 0.5 g/L
_SCALE = {BacUnit.PERCENT: 1.0, BacUnit.GRAMS_PER_LITER: 10.0}
_DECIMALS = {BacUnit.PERCENT: 3, BacUnit.GRAMS_PER_LITER: 2}
_SUFFIX = {BacUnit.PERCENT: "%", BacUnit.GRAMS_PER_LITER: "g/L"}

LIMIT_LINE_PERCENT = 0.05


def to_display(bac_percent: float, unit: BacUnit = BacUnit.PERCENT) -> float:
    unit = BacUnit(unit)
    return round(bac_percent * _SCALE[unit], _DECIMALS[unit])


def format_bac(bac_percent: float, unit: BacUnit = BacUnit.PERCENT) -> str:
    unit = BacUnit(unit)
    return f"{to_display(bac_percent, unit):.{_DECIMALS[unit]}f} {_SUFFIX[unit]}"


def legal_limit(unit: BacUnit = BacUnit.PERCENT) -> float:
    """Reference line drawn on charts."""
    return to_display(LIMIT_LINE_PERCENT, unit)
