"""
SQLModel database models for stored submissions and generated ACORD forms.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Submission(SQLModel, table=True):
    """Customer intake submission."""
    id: str = Field(primary_key=True)
    client_type: str = "business"
    business_name: str = Field(default="", index=True)
    business_json: str  # JSON string
    contact_json: str  # JSON string
    coverage_types: str  # JSON string, canonical coverage ids
    coverage_answers: str  # JSON string, canonical question ids
    status: str = "new"
    priority: str = "medium"
    submitted_at: datetime = Field(default_factory=_utcnow)


class AcordFormRecord(SQLModel, table=True):
    """ACORD form generated for a stored submission."""
    id: Optional[int] = Field(default=None, primary_key=True)
    submission_id: str = Field(foreign_key="submission.id", index=True)
    form_type: str
    form_name: str
    fields_json: str  # JSON string
    status: str = "GENERATED"
    generated_by: str = "system"
    generated_at: datetime = Field(default_factory=_utcnow)
