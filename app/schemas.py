"""
Pydantic schemas for catalogs, submissions, and generated ACORD forms.

Every boundary model accepts both snake_case and camelCase keys and
serializes as camelCase (`coverageTypes`, `coverageAnswers`, `clientType`).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime
from enum import Enum


class ClientType(str, Enum):
    """Who the coverage is for."""
    PERSONAL = "personal"
    BUSINESS = "business"
    BOTH = "both"


class CoverageCategory(str, Enum):
    VEHICLE = "vehicle"
    PROPERTY = "property"
    BUSINESS = "business"
    ADDITIONAL = "additional"


class QuestionType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    CHECKBOX = "checkbox"  # multi-select
    TEXTAREA = "textarea"


class BoundaryModel(BaseModel):
    """Base for models exchanged as camelCase JSON."""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class CatalogModel(BoundaryModel):
    """Base for immutable reference data."""
    model_config = ConfigDict(
        populate_by_name=True, alias_generator=to_camel, frozen=True
    )


# Catalog schemas
class QuestionValidation(CatalogModel):
    """Bounds applied to an answer."""
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None


class CoverageQuestion(CatalogModel):
    """A question asked for a coverage type."""
    id: str
    question: str = Field(description="Prompt shown to the customer")
    type: QuestionType
    required: bool = False
    critical: bool = Field(False, description="Generation is refused while this is unanswered")
    recommended: bool = Field(False, description="Missing answer yields a warning")
    options: Optional[Tuple[str, ...]] = None
    validation: Optional[QuestionValidation] = None
    acord_field: Optional[str] = None
    client_types: Optional[Tuple[ClientType, ...]] = Field(
        None, description="Client types this question applies to (all when unset)"
    )
    description: Optional[str] = None
    placeholder: Optional[str] = None
    aliases: Tuple[str, ...] = ()

    @property
    def mandatory(self) -> bool:
        return self.required or self.critical


class CoverageType(CatalogModel):
    """A selectable line of coverage."""
    id: str
    name: str
    description: str = ""
    category: CoverageCategory
    client_types: Tuple[ClientType, ...]
    acord_forms: Tuple[str, ...] = Field(description="ACORD form types this coverage requires, in order")
    questions: Tuple[CoverageQuestion, ...] = ()
    aliases: Tuple[str, ...] = ()


class CoverageCategoryGroup(BoundaryModel):
    """Coverage types of one category."""
    category: CoverageCategory
    display_name: str
    coverage_types: List[CoverageType]


# Submission schemas
class BusinessInfo(BoundaryModel):
    """Business attributes of a submission."""
    name: str = ""
    federal_id: str = Field("", description="Federal tax id (EIN)")
    business_type: str = Field("", description="Legal entity type, e.g. llc or corporation")
    years_in_business: Optional[int] = None
    description: str = ""
    website: str = ""

    @field_validator("years_in_business", mode="before")
    @classmethod
    def _blank_years(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ContactInfo(BoundaryModel):
    """Contact attributes of a submission."""
    contact_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""


class CustomerSubmission(BoundaryModel):
    """Intake data supplied for validation and form generation."""
    id: Optional[str] = Field(None, description="Source submission reference")
    business: BusinessInfo = Field(default_factory=BusinessInfo)
    contact: ContactInfo = Field(default_factory=ContactInfo)
    coverage_types: List[str] = Field(default_factory=list, description="Selected coverage type ids")
    coverage_answers: Dict[str, Any] = Field(
        default_factory=dict, description="Answers keyed by question id"
    )
    client_type: ClientType = ClientType.BUSINESS


class ValidationIssue(BoundaryModel):
    """A single validation error or warning."""
    field: str = Field(description="Dotted path of the offending input")
    message: str


class ValidationResult(BoundaryModel):
    """Outcome of validating a submission."""
    is_valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)
    warnings: List[ValidationIssue] = Field(default_factory=list)


# ACORD form schemas
class GeneratedACORDForm(CatalogModel):
    """A populated ACORD form. Only non-empty values appear in `fields`."""
    form_type: str
    form_name: str
    fields: Dict[str, str]
    generated_at: datetime
    submission_id: Optional[str] = None


class StoredACORDForm(BoundaryModel):
    """A generated form recorded against a stored submission."""
    id: int
    submission_id: str
    form_type: str
    form_name: str
    fields: Dict[str, str]
    status: str
    generated_by: str
    generated_at: datetime


# Request schemas
class QuestionsRequest(BoundaryModel):
    """Questions lookup for a coverage selection."""
    coverage_types: List[str]
    client_type: Optional[ClientType] = None


class ResolveRequest(BoundaryModel):
    """Form type resolution for a coverage selection."""
    coverage_types: List[str]


# Response schemas
class ResolveResponse(BoundaryModel):
    """Required ACORD form types for a coverage selection."""
    coverage_types: List[str] = Field(description="Canonical coverage ids that were resolved")
    form_types: List[str]
    form_names: Dict[str, str]


class SubmissionCreateResponse(BoundaryModel):
    """Stored submission acknowledgement."""
    submission_id: str
    status: str
    validation: ValidationResult


class SubmissionResponse(BoundaryModel):
    """Stored submission details."""
    submission_id: str
    status: str
    priority: str
    submitted_at: datetime
    submission: CustomerSubmission


class FormGenerationResponse(BoundaryModel):
    """Forms generated for a submission."""
    submission_id: Optional[str] = None
    form_types: List[str]
    forms: List[GeneratedACORDForm]
    summary: str
    warnings: List[ValidationIssue] = Field(default_factory=list)
