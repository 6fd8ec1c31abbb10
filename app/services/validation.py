"""
Submission validation service.

Decides whether a submission carries enough information to produce
complete ACORD forms. Errors block form generation; warnings never do.
"""

from typing import Any, List, Tuple
import logging
import re

from pydantic.alias_generators import to_camel

from app.schemas import (
    CoverageQuestion,
    CustomerSubmission,
    QuestionType,
    ValidationIssue,
    ValidationResult,
)
from app.services.catalog import CoverageCatalog, coverage_catalog

logger = logging.getLogger("acord_intake")

BUSINESS_REQUIRED: Tuple[Tuple[str, str], ...] = (
    ("name", "Business name"),
    ("federal_id", "Federal ID/EIN"),
    ("business_type", "Business type"),
    ("description", "Business description"),
)

CONTACT_REQUIRED: Tuple[Tuple[str, str], ...] = (
    ("contact_name", "Contact name"),
    ("email", "Email address"),
    ("phone", "Phone number"),
    ("address", "Address"),
    ("city", "City"),
    ("state", "State"),
    ("zip_code", "ZIP code"),
)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[\+]?[1-9][\d]{0,15}$")
PHONE_STRIP_RE = re.compile(r"[\s\-\(\)]")
ZIP_RE = re.compile(r"^\d{5}(-\d{4})?$")
EIN_RE = re.compile(r"^\d{2}-?\d{7}$")


def is_blank(value: Any) -> bool:
    """True for None, whitespace-only strings and empty collections. 0 and False are answers."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_RE.match(PHONE_STRIP_RE.sub("", phone)))


def is_valid_zip_code(zip_code: str) -> bool:
    return bool(ZIP_RE.match(zip_code))


def is_valid_federal_id(federal_id: str) -> bool:
    return bool(EIN_RE.match(federal_id))


def _issue(field: str, message: str) -> ValidationIssue:
    return ValidationIssue(field=field, message=message)


def _answer_field(question_id: str) -> str:
    return f"coverageAnswers.{question_id}"


def _as_number(value: Any):
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(str(value).replace(",", "").strip())
    except ValueError:
        return None


class SubmissionValidator:
    """Checks submissions against the coverage catalog."""

    def __init__(self, catalog: CoverageCatalog):
        self.catalog = catalog

    def validate(self, submission: CustomerSubmission) -> ValidationResult:
        """
        Validate a submission before form generation.

        Args:
            submission: Intake data to check

        Returns:
            ValidationResult; is_valid is True iff there are no errors
        """
        errors: List[ValidationIssue] = []
        warnings: List[ValidationIssue] = []

        self._check_business(submission, errors, warnings)
        self._check_contact(submission, errors, warnings)
        self._check_coverage(submission, errors, warnings)

        result = ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
        logger.debug(
            f"Submission validated | "
            f"submission_id={submission.id} | "
            f"errors={len(errors)} | "
            f"warnings={len(warnings)}"
        )
        return result

    def _check_business(self, submission, errors, warnings):
        business = submission.business
        for attr, label in BUSINESS_REQUIRED:
            if is_blank(getattr(business, attr)):
                errors.append(_issue(
                    f"business.{to_camel(attr)}",
                    f"{label} is required for ACORD forms"
                ))

        if is_blank(business.website):
            warnings.append(_issue(
                "business.website",
                "Website is recommended for complete business information"
            ))
        if business.years_in_business is None:
            warnings.append(_issue(
                "business.yearsInBusiness",
                "Years in business is recommended for complete business information"
            ))
        elif business.years_in_business < 0:
            warnings.append(_issue(
                "business.yearsInBusiness",
                "Years in business cannot be negative"
            ))

        if not is_blank(business.federal_id) and not is_valid_federal_id(business.federal_id.strip()):
            warnings.append(_issue(
                "business.federalId",
                "Federal ID/EIN should look like 12-3456789"
            ))

    def _check_contact(self, submission, errors, warnings):
        contact = submission.contact
        for attr, label in CONTACT_REQUIRED:
            if is_blank(getattr(contact, attr)):
                errors.append(_issue(
                    f"contact.{to_camel(attr)}",
                    f"{label} is required for ACORD forms"
                ))

        if not is_blank(contact.email) and not is_valid_email(contact.email.strip()):
            warnings.append(_issue("contact.email", "Email address format looks invalid"))
        if not is_blank(contact.phone) and not is_valid_phone(contact.phone.strip()):
            warnings.append(_issue("contact.phone", "Phone number format looks invalid"))
        if not is_blank(contact.zip_code) and not is_valid_zip_code(contact.zip_code.strip()):
            warnings.append(_issue("contact.zipCode", "ZIP code should be 12345 or 12345-6789"))

    def _check_coverage(self, submission, errors, warnings):
        coverage_ids = self.catalog.normalize_coverage_ids(submission.coverage_types)
        known_ids = [c for c in coverage_ids if self.catalog.get_coverage_type(c) is not None]
        if not known_ids:
            errors.append(_issue("coverageTypes", "At least one coverage type must be selected"))

        for ref in self.catalog.unknown_coverage_ids(coverage_ids):
            warnings.append(_issue(
                "coverageTypes",
                f"Unknown coverage type '{ref}' will be ignored"
            ))

        client_type = submission.client_type
        offered = {c.id for c in self.catalog.list_coverage_types(client_type)}
        for coverage_id in coverage_ids:
            coverage = self.catalog.get_coverage_type(coverage_id)
            if coverage is not None and coverage.id not in offered:
                warnings.append(_issue(
                    "coverageTypes",
                    f"{coverage.name} is not offered to {client_type.value} clients"
                ))

        answers = self.catalog.normalize_answers(submission.coverage_answers)
        questions = self.catalog.questions_for(coverage_ids, client_type)

        for question in questions:
            value = answers.get(question.id)
            if is_blank(value):
                if question.required:
                    errors.append(_issue(
                        _answer_field(question.id),
                        f"{question.question} is required for ACORD forms"
                    ))
                elif question.critical:
                    errors.append(_issue(
                        _answer_field(question.id),
                        f"{question.question} is required for complete ACORD form generation"
                    ))
                elif question.recommended:
                    warnings.append(_issue(
                        _answer_field(question.id),
                        f"{question.question} is recommended for complete ACORD forms"
                    ))
                continue
            warnings.extend(self._check_answer(question, value))

        question_ids = {q.id for q in questions}
        for key in answers:
            if key not in question_ids:
                warnings.append(_issue(
                    _answer_field(key),
                    "Answer does not belong to a selected coverage type and will be ignored"
                ))

    def _check_answer(self, question: CoverageQuestion, value: Any) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        field = _answer_field(question.id)
        bounds = question.validation

        if question.type == QuestionType.NUMBER:
            number = _as_number(value)
            if number is None:
                issues.append(_issue(field, f"{question.question} must be a number"))
            elif bounds is not None:
                if bounds.min is not None and number < bounds.min:
                    issues.append(_issue(field, f"{question.question} must be at least {bounds.min:g}"))
                if bounds.max is not None and number > bounds.max:
                    issues.append(_issue(field, f"{question.question} must be at most {bounds.max:g}"))

        elif question.type == QuestionType.SELECT and question.options:
            if str(value) not in question.options:
                issues.append(_issue(field, f"'{value}' is not one of the listed options"))

        elif question.type == QuestionType.CHECKBOX and question.options:
            selected = value if isinstance(value, (list, tuple)) else [value]
            invalid = [str(v) for v in selected if str(v) not in question.options]
            if invalid:
                issues.append(_issue(field, f"Not listed options: {', '.join(invalid)}"))

        if bounds is not None and bounds.pattern and isinstance(value, str):
            if not re.match(bounds.pattern, value.strip()):
                issues.append(_issue(field, f"{question.question} has an unexpected format"))

        return issues


# Global validator instance
submission_validator = SubmissionValidator(coverage_catalog)


def validate(submission: CustomerSubmission) -> ValidationResult:
    """Validate a submission against the global coverage catalog."""
    return submission_validator.validate(submission)
