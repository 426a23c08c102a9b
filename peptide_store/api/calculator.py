"""
POST /api/v1/calculator/dosage: peptide reconstitution / injection volume calculator.
"""
from dataclasses import asdict

from fastapi import APIRouter

from peptide_store.schemas.calculator import DosageRequest, DosageResponse
from peptide_store.services.calculator import calculate_dosage

router = APIRouter(prefix="/calculator", tags=["calculator"])


@router.post(
    "/dosage",
    response_model=DosageResponse,
    summary="Units to inject",
    description="Units on a U-100 insulin syringe for a desired dose from a reconstituted vial. Research use only.",
)
async def dosage(body: DosageRequest) -> DosageResponse:
    # Request validation already guarantees positive inputs, so a result always exists
    result = calculate_dosage(body.vial_mg, body.water_ml, body.desired_dose, body.unit)
    return DosageResponse(**asdict(result))
