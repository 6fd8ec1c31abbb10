"""
Submissions router for storing intake submissions and generating their
ACORD forms.
"""

from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional
import logging

from app.deps import get_repository, get_request_id, get_stored_submission
from app.repositories import SubmissionRepository
from app.routers.acord import invalid_submission
from app.schemas import (
    CustomerSubmission,
    StoredACORDForm,
    SubmissionCreateResponse,
    SubmissionResponse,
    ValidationResult,
)
from app.services.catalog import coverage_catalog
from app.services.populator import populate_all
from app.services.validation import validate

router = APIRouter()

logger = logging.getLogger("acord_intake")


@router.post("/submissions/validate", response_model=ValidationResult)
async def validate_submission(submission: CustomerSubmission):
    """Validate a submission without storing it."""
    return validate(submission)


@router.post("/submissions", response_model=SubmissionCreateResponse, status_code=201)
async def create_submission(
    submission: CustomerSubmission,
    repository: SubmissionRepository = Depends(get_repository),
    request_id: str = Depends(get_request_id)
):
    """
    Store a submission.

    This endpoint:
    1. Validates the submission (incomplete submissions are still stored)
    2. Normalizes coverage references and answer keys to canonical ids
    3. Stores it and returns the assigned id with the validation result
    """
    if submission.id and repository.get(submission.id) is not None:
        raise HTTPException(status_code=409, detail=f"Submission {submission.id} already exists")

    validation = validate(submission)

    normalized = submission.model_copy(update={
        "coverage_types": coverage_catalog.normalize_coverage_ids(submission.coverage_types),
        "coverage_answers": coverage_catalog.normalize_answers(submission.coverage_answers),
    })
    stored = repository.add(normalized)

    logger.info(
        f"Submission stored | "
        f"request_id={request_id} | "
        f"submission_id={stored.submission_id} | "
        f"valid={validation.is_valid}"
    )

    return SubmissionCreateResponse(
        submission_id=stored.submission_id,
        status=stored.status,
        validation=validation,
    )


@router.get("/submissions", response_model=List[SubmissionResponse])
async def list_submissions(
    status: Optional[str] = None,
    repository: SubmissionRepository = Depends(get_repository)
):
    """List stored submissions, newest first."""
    return repository.list_submissions(status)


@router.get("/submissions/{submission_id}", response_model=SubmissionResponse)
async def get_submission(stored: SubmissionResponse = Depends(get_stored_submission)):
    """Retrieve a stored submission."""
    return stored


@router.post(
    "/submissions/{submission_id}/acord-forms",
    response_model=List[StoredACORDForm],
    status_code=201
)
async def generate_submission_forms(
    stored: SubmissionResponse = Depends(get_stored_submission),
    repository: SubmissionRepository = Depends(get_repository),
    request_id: str = Depends(get_request_id)
):
    """
    Generate and record the ACORD forms for a stored submission.

    Generation is refused with 422 while the submission has validation errors.
    """
    validation = validate(stored.submission)
    if not validation.is_valid:
        raise invalid_submission(validation)

    forms = populate_all(stored.submission)
    records = repository.record_forms(stored.submission_id, forms)

    logger.info(
        f"Forms recorded | "
        f"request_id={request_id} | "
        f"submission_id={stored.submission_id} | "
        f"count={len(records)}"
    )
    return records


@router.get("/submissions/{submission_id}/acord-forms", response_model=List[StoredACORDForm])
async def list_submission_forms(
    stored: SubmissionResponse = Depends(get_stored_submission),
    repository: SubmissionRepository = Depends(get_repository)
):
    """List the ACORD forms recorded for a stored submission."""
    return repository.list_forms(stored.submission_id)
