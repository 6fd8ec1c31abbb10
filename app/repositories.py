"""
Submission storage.

`SubmissionRepository` is the port the HTTP layer talks to; the services
never touch storage. `SQLModelSubmissionRepository` implements it over the
tables in app.models.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import json

from sqlmodel import Session, func, select

from app.models import AcordFormRecord, Submission
from app.schemas import (
    BusinessInfo,
    ContactInfo,
    CustomerSubmission,
    GeneratedACORDForm,
    StoredACORDForm,
    SubmissionResponse,
)


class SubmissionRepository(ABC):
    """Storage port for submissions and their generated forms."""

    @abstractmethod
    def add(
        self,
        submission: CustomerSubmission,
        status: str = "new",
        priority: str = "medium"
    ) -> SubmissionResponse:
        """Store a submission, assigning an id when it has none."""

    @abstractmethod
    def get(self, submission_id: str) -> Optional[SubmissionResponse]:
        """Look up a stored submission."""

    @abstractmethod
    def list_submissions(self, status: Optional[str] = None) -> List[SubmissionResponse]:
        """List stored submissions, newest first."""

    @abstractmethod
    def record_forms(
        self,
        submission_id: str,
        forms: List[GeneratedACORDForm],
        generated_by: str = "system"
    ) -> List[StoredACORDForm]:
        """Record forms generated for a stored submission."""

    @abstractmethod
    def list_forms(self, submission_id: str) -> List[StoredACORDForm]:
        """List the forms recorded for a submission, oldest first."""


def _to_response(row: Submission) -> SubmissionResponse:
    submission = CustomerSubmission(
        id=row.id,
        business=BusinessInfo.model_validate(json.loads(row.business_json)),
        contact=ContactInfo.model_validate(json.loads(row.contact_json)),
        coverage_types=json.loads(row.coverage_types),
        coverage_answers=json.loads(row.coverage_answers),
        client_type=row.client_type,
    )
    return SubmissionResponse(
        submission_id=row.id,
        status=row.status,
        priority=row.priority,
        submitted_at=row.submitted_at,
        submission=submission,
    )


def _to_stored_form(row: AcordFormRecord) -> StoredACORDForm:
    return StoredACORDForm(
        id=row.id,
        submission_id=row.submission_id,
        form_type=row.form_type,
        form_name=row.form_name,
        fields=json.loads(row.fields_json),
        status=row.status,
        generated_by=row.generated_by,
        generated_at=row.generated_at,
    )


class SQLModelSubmissionRepository(SubmissionRepository):
    """Submission repository backed by a SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def _next_id(self) -> str:
        count = self.session.exec(select(func.count()).select_from(Submission)).one()
        number = count + 1
        while self.session.get(Submission, f"SUB-{number:03d}") is not None:
            number += 1
        return f"SUB-{number:03d}"

    def add(
        self,
        submission: CustomerSubmission,
        status: str = "new",
        priority: str = "medium"
    ) -> SubmissionResponse:
        submission_id = submission.id or self._next_id()
        row = Submission(
            id=submission_id,
            client_type=submission.client_type.value,
            business_name=submission.business.name,
            business_json=json.dumps(submission.business.model_dump()),
            contact_json=json.dumps(submission.contact.model_dump()),
            coverage_types=json.dumps(submission.coverage_types),
            coverage_answers=json.dumps(submission.coverage_answers),
            status=status,
            priority=priority,
        )
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return _to_response(row)

    def get(self, submission_id: str) -> Optional[SubmissionResponse]:
        row = self.session.get(Submission, submission_id)
        return _to_response(row) if row else None

    def list_submissions(self, status: Optional[str] = None) -> List[SubmissionResponse]:
        query = select(Submission)
        if status:
            query = query.where(Submission.status == status)
        query = query.order_by(Submission.submitted_at.desc(), Submission.id.desc())
        return [_to_response(row) for row in self.session.exec(query).all()]

    def record_forms(
        self,
        submission_id: str,
        forms: List[GeneratedACORDForm],
        generated_by: str = "system"
    ) -> List[StoredACORDForm]:
        rows = [
            AcordFormRecord(
                submission_id=submission_id,
                form_type=form.form_type,
                form_name=form.form_name,
                fields_json=json.dumps(form.fields),
                generated_by=generated_by,
                generated_at=form.generated_at,
            )
            for form in forms
        ]
        for row in rows:
            self.session.add(row)
        self.session.commit()
        for row in rows:
            self.session.refresh(row)
        return [_to_stored_form(row) for row in rows]

    def list_forms(self, submission_id: str) -> List[StoredACORDForm]:
        query = (
            select(AcordFormRecord)
            .where(AcordFormRecord.submission_id == submission_id)
            .order_by(AcordFormRecord.id)
        )
        return [_to_stored_form(row) for row in self.session.exec(query).all()]
