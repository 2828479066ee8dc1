"""User profile and the Widmark distribution ratio table."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from bac_estimator.drinks import Pace


class BiologicalSex(str, Enum):
    MALE = "male"
    FEMALE = "female"


# Distribution ratio (Widmark r): fraction of body mass ethanol distributes into.
DISTRIBUTION_RATIOS: Dict[BiologicalSex, float] = {
    BiologicalSex.MALE: 0.68,
    BiologicalSex.FEMALE: 0.55,
}


def distribution_ratio(sex: BiologicalSex) -> float:
    return DISTRIBUTION_RATIOS[BiologicalSex(sex)]


@dataclass(frozen=True)
class UserProfile:
    weight_kg: float
    biological_sex: BiologicalSex = BiologicalSex.MALE
    is_profile_complete: bool = True
    pace: Pace = Pace.AVERAGE

    @property
    def is_complete(self) -> bool:
        """False when the estimator must refuse to compute."""
        if not self.is_profile_complete:
            return False
        w = self.weight_kg
        return isinstance(w, (int, float)) and math.isfinite(w) and w > 0

    @property
    def distribution_ratio(self) -> float:
        return distribution_ratio(self.biological_sex)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weightKg": self.weight_kg,
            "gender": self.biological_sex.value,
            "isSetup": self.is_profile_complete,
            "pace": self.pace.value,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "UserProfile":
        """Build a profile from stored JSON. Raises ValueError on bad input."""
        if not isinstance(raw, dict):
            raise ValueError("profile must be an object")
        try:
            weight = float(raw.get("weightKg", raw.get("weight_kg", 0)) or 0)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"invalid weight: {exc}") from exc
        sex_raw = str(raw.get("gender", raw.get("biologicalSex", "male"))).strip().lower()
        try:
            sex = BiologicalSex(sex_raw)
        except ValueError:
            raise ValueError(f"unknown biological sex: {sex_raw!r}") from None
        try:
            pace = Pace(str(raw.get("pace", Pace.AVERAGE.value)).strip().lower())
        except ValueError:
            pace = Pace.AVERAGE
        complete = _parse_bool(raw.get("isSetup", raw.get("isProfileComplete", True)))
        return cls(weight_kg=weight, biological_sex=sex, is_profile_complete=complete, pace=pace)


def _parse_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "y"}:
            return True
        if lowered in {"false", "0", "no", "n", ""}:
            return False
    if isinstance(value, (int, float)):
        return bool(value)
    return default
