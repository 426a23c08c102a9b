"""
Peptide dosage calculator for a reconstituted vial and a U-100 insulin syringe.

    concentration (mg/ml) = vial_mg / water_ml
    volume (ml)           = dose_mg / concentration
    units                 = volume * 100
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

UNITS_PER_ML = 100


class DosageUnit(str, Enum):
    MCG = "mcg"
    MG = "mg"


@dataclass(frozen=True)
class DosageResult:
    units: float
    ml_needed: float
    concentration_mg_per_ml: float
    concentration_mcg_per_unit: float


def _round(value: float, places: int) -> float:
    """Round half up, so 0.25 -> 0.3 at one place."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def calculate_dosage(
    vial_mg: float,
    water_ml: float,
    desired_dose: float,
    unit: DosageUnit | str = DosageUnit.MCG,
) -> Optional[DosageResult]:
    """Returns None unless every input is positive."""
    if vial_mg <= 0 or water_ml <= 0 or desired_dose <= 0:
        return None

    dose_mg = desired_dose / 1000 if DosageUnit(unit) is DosageUnit.MCG else desired_dose
    concentration = vial_mg / water_ml
    ml_needed = dose_mg / concentration
    units = ml_needed * UNITS_PER_ML
    return DosageResult(
        units=_round(units, 1),
        ml_needed=_round(ml_needed, 3),
        concentration_mg_per_ml=_round(concentration, 2),
        concentration_mcg_per_unit=_round(concentration * 1000 / UNITS_PER_ML, 1),
    )
