"""
Dependencies shared by the routers.
"""

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from app.db import get_session
from app.repositories import SubmissionRepository, SQLModelSubmissionRepository
from app.schemas import SubmissionResponse


def get_repository(session: Session = Depends(get_session)) -> SubmissionRepository:
    """Submission repository bound to the request's database session."""
    return SQLModelSubmissionRepository(session)


def get_stored_submission(
    submission_id: str,
    repository: SubmissionRepository = Depends(get_repository)
) -> SubmissionResponse:
    """Load a stored submission or fail with 404."""
    stored = repository.get(submission_id)
    if stored is None:
        raise HTTPException(status_code=404, detail=f"Submission {submission_id} not found")
    return stored


def get_request_id(request: Request) -> str:
    """Request id set by the request middleware."""
    return getattr(request.state, "request_id", "unknown")
