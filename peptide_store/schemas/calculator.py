from __future__ import annotations

from pydantic import BaseModel, Field

from peptide_store.services.calculator import DosageUnit


class DosageRequest(BaseModel):
    """POST /api/v1/calculator/dosage body."""

    vial_mg: float = Field(gt=0, description="Amount of peptide in the vial (mg)")
    water_ml: float = Field(gt=0, description="Bacteriostatic water added (ml)")
    desired_dose: float = Field(gt=0, description="Target dose per injection")
    unit: DosageUnit = DosageUnit.MCG


class DosageResponse(BaseModel):
    units: float
    ml_needed: float
    concentration_mg_per_ml: float
    concentration_mcg_per_unit: float
