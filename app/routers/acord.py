"""
ACORD form router: form type resolution and form generation for inline
submissions.
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse
from typing import Dict

from app.schemas import (
    CustomerSubmission,
    FormGenerationResponse,
    GeneratedACORDForm,
    ResolveRequest,
    ResolveResponse,
    ValidationResult,
)
from app.services.catalog import coverage_catalog
from app.services.form_fields import form_field_catalog, normalize_form_type
from app.services.populator import form_preview, populate, populate_all, summarize_forms
from app.services.resolver import resolve_form_types
from app.services.validation import validate

router = APIRouter()


def invalid_submission(validation: ValidationResult) -> HTTPException:
    """422 carrying the structured validation result."""
    return HTTPException(
        status_code=422,
        detail={
            "message": "Submission is not complete enough to generate ACORD forms",
            **validation.model_dump(mode="json", by_alias=True),
        },
    )


@router.get("/acord/form-types", response_model=Dict[str, str])
async def list_form_types():
    """Form types with a field mapping, and their display names."""
    return {
        form_type: form_field_catalog.display_name(form_type)
        for form_type in form_field_catalog.form_types()
    }


@router.post("/acord/resolve", response_model=ResolveResponse)
async def resolve(request: ResolveRequest):
    """Resolve a coverage selection to the ACORD forms it requires."""
    coverage_ids = coverage_catalog.normalize_coverage_ids(request.coverage_types)
    form_types = resolve_form_types(coverage_ids)
    return ResolveResponse(
        coverage_types=[c for c in coverage_ids if coverage_catalog.get_coverage_type(c)],
        form_types=form_types,
        form_names={f: form_field_catalog.display_name(f) for f in form_types},
    )


@router.post("/acord/generate", response_model=FormGenerationResponse)
async def generate(submission: CustomerSubmission):
    """
    Validate a submission and generate every ACORD form it requires.

    Generation is refused with 422 while the submission has validation errors.
    """
    validation = validate(submission)
    if not validation.is_valid:
        raise invalid_submission(validation)

    forms = populate_all(submission)
    return FormGenerationResponse(
        submission_id=submission.id,
        form_types=[f.form_type for f in forms],
        forms=forms,
        summary=summarize_forms(forms),
        warnings=validation.warnings,
    )


@router.post("/acord/forms/{form_type}", response_model=GeneratedACORDForm)
async def generate_form(form_type: str, submission: CustomerSubmission):
    """Populate a single form type. No validation gate is applied."""
    return populate(normalize_form_type(form_type), submission)


@router.post("/acord/forms/{form_type}/preview", response_class=PlainTextResponse)
async def preview_form(form_type: str, submission: CustomerSubmission):
    """Plain-text listing of a single populated form."""
    return form_preview(populate(normalize_form_type(form_type), submission))
