"""Samples API router: lab measurements and pilot tasting sheets."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodtech.db.session import get_db
from foodtech.schemas.schemas import (
    LabResultsIn, LabResultsOut, PilotResultsIn, PilotResultsOut, ValidationResult,
)
from foodtech.services.lab_results_service import lab_results_service, validate_lab_results
from foodtech.services.pilot_results_service import pilot_results_service, validate_pilot_results
from foodtech.core.security import get_current_user_id
from foodtech.core.exceptions import ResourceNotFoundError

router = APIRouter(prefix="/samples", tags=["samples"])


# ---- Lab results ----

@router.get("/{sample_id}/lab-results", response_model=LabResultsOut)
async def get_lab_results(
    sample_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    record = lab_results_service.fetch(db, sample_id)
    if record is None:
        raise ResourceNotFoundError(f"No lab results for sample {sample_id}")
    return record


@router.put("/{sample_id}/lab-results", response_model=LabResultsOut)
async def save_lab_results(
    sample_id: int,
    body: LabResultsIn,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return lab_results_service.upsert(db, sample_id, body.model_dump(exclude_unset=True))


@router.post("/{sample_id}/lab-results/init", response_model=LabResultsOut)
async def init_lab_results(
    sample_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return lab_results_service.initialize(db, sample_id)


@router.get("/{sample_id}/lab-results/validation", response_model=ValidationResult)
async def check_lab_results(
    sample_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Whether the sample's lab stage may be completed."""
    is_valid, message = validate_lab_results(lab_results_service.fetch(db, sample_id))
    return ValidationResult(is_valid=is_valid, error_message=message)


# ---- Pilot results ----

@router.get("/{sample_id}/pilot-results", response_model=PilotResultsOut)
async def get_pilot_results(
    sample_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    record = pilot_results_service.fetch(db, sample_id)
    if record is None:
        raise ResourceNotFoundError(f"No tasting sheet for sample {sample_id}")
    return record


@router.put("/{sample_id}/pilot-results", response_model=PilotResultsOut)
async def save_pilot_results(
    sample_id: int,
    body: PilotResultsIn,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return pilot_results_service.upsert(db, sample_id, body.model_dump(exclude_unset=True))


@router.post("/{sample_id}/pilot-results/init", response_model=PilotResultsOut)
async def init_pilot_results(
    sample_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return pilot_results_service.initialize(db, sample_id)


@router.get("/{sample_id}/pilot-results/validation", response_model=ValidationResult)
async def check_pilot_results(
    sample_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    is_valid, message = validate_pilot_results(pilot_results_service.fetch(db, sample_id))
    return ValidationResult(is_valid=is_valid, error_message=message)
