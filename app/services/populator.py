"""
ACORD form population service.

Fills the fields of each ACORD form type from a submission's business
info, contact info and coverage answers.
"""

from typing import Dict, Any, List, Optional
from datetime import datetime, timezone
import logging

from pydantic import BaseModel

from app.schemas import CustomerSubmission, GeneratedACORDForm
from app.services.catalog import CoverageCatalog, coverage_catalog
from app.services.form_fields import (
    FieldSource,
    FieldSourceKind,
    FormFieldCatalog,
    MappingGapError,
    form_field_catalog,
)
from app.services.resolver import FormResolver, form_resolver
from app.services.validation import is_blank

logger = logging.getLogger("acord_intake")

ANSWERS_ROOT = "coverageAnswers"
DATE_FORMAT = "%m/%d/%Y"


def format_value(value: Any) -> Optional[str]:
    """
    Render an answer or attribute as a form field value.

    Booleans become Yes/No, integral floats drop their decimal part and
    lists are joined with ", ". Blank values render as None.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        parts = [format_value(item) for item in value]
        joined = ", ".join(p for p in parts if p)
        return joined or None
    if isinstance(value, dict):
        return None
    text = str(value).strip()
    return text or None


def _lookup(obj: Any, parts: List[str]) -> Any:
    for part in parts:
        if obj is None:
            return None
        if isinstance(obj, BaseModel):
            obj = _model_attr(obj, part)
        elif isinstance(obj, dict):
            obj = obj.get(part)
        else:
            return None
    return obj


def _model_attr(model: BaseModel, name: str) -> Any:
    fields = type(model).model_fields
    if name in fields:
        return getattr(model, name)
    for attr, info in fields.items():
        if info.alias == name:
            return getattr(model, attr)
    return None


class _Context:
    """A submission prepared for field resolution."""

    def __init__(self, submission: CustomerSubmission, coverage_ids: List[str],
                 answers: Dict[str, Any], generated_at: datetime):
        self.submission = submission
        self.coverage_ids = coverage_ids
        self.answers = answers
        self.generated_at = generated_at


class FormPopulator:
    """Builds GeneratedACORDForm objects from submissions."""

    def __init__(
        self,
        catalog: CoverageCatalog,
        form_catalog: FormFieldCatalog,
        resolver: FormResolver
    ):
        self.catalog = catalog
        self.form_catalog = form_catalog
        self.resolver = resolver

    def _prepare(self, submission: CustomerSubmission, generated_at: Optional[datetime]) -> _Context:
        coverage_ids = self.catalog.normalize_coverage_ids(submission.coverage_types)
        answers = self.catalog.normalize_answers(submission.coverage_answers)

        # Answers to questions outside the selected coverage types are orphans
        allowed = {q.id for q in self.catalog.questions_for(coverage_ids, submission.client_type)}
        answers = {key: value for key, value in answers.items() if key in allowed}

        return _Context(
            submission=submission,
            coverage_ids=coverage_ids,
            answers=answers,
            generated_at=generated_at or datetime.now(timezone.utc),
        )

    def _resolve_path(self, path: str, ctx: _Context) -> Any:
        head, _, rest = path.partition(".")
        if head == ANSWERS_ROOT:
            return ctx.answers.get(rest) if rest else None
        if head in ("business", "contact") and rest:
            return _lookup(getattr(ctx.submission, head), rest.split("."))

        # Bare key: business, then contact, then answers
        for section in (ctx.submission.business, ctx.submission.contact):
            value = _lookup(section, [path])
            if not is_blank(value):
                return value
        return ctx.answers.get(path)

    def _compute(self, name: str, ctx: _Context) -> Optional[str]:
        if name == "coverage_summary":
            names = []
            for coverage_id in ctx.coverage_ids:
                coverage = self.catalog.get_coverage_type(coverage_id)
                if coverage is not None and coverage.name not in names:
                    names.append(coverage.name)
            return ", ".join(names) or None
        if name in ("completion_date", "effective_date"):
            return ctx.generated_at.strftime(DATE_FORMAT)
        return None

    def _field_value(self, source: FieldSource, ctx: _Context) -> Optional[str]:
        if source.kind == FieldSourceKind.DEFAULT:
            return source.value
        if source.kind == FieldSourceKind.COMPUTED:
            return self._compute(source.value, ctx)
        for path in source.paths:
            value = format_value(self._resolve_path(path, ctx))
            if value:
                return value
        return None

    def _populate(self, form_type: str, ctx: _Context) -> GeneratedACORDForm:
        try:
            spec = self.form_catalog.get_spec(form_type)
        except MappingGapError as e:
            logger.warning(
                f"No field mapping | "
                f"form_type={form_type} | "
                f"submission_id={ctx.submission.id} | "
                f"error={str(e)}"
            )
            return GeneratedACORDForm(
                form_type=form_type,
                form_name=self.form_catalog.display_name(form_type),
                fields={},
                generated_at=ctx.generated_at,
                submission_id=ctx.submission.id,
            )

        fields: Dict[str, str] = {}
        for field_name, source in spec.fields.items():
            value = self._field_value(source, ctx)
            if value:
                fields[field_name] = value

        return GeneratedACORDForm(
            form_type=form_type,
            form_name=spec.name,
            fields=fields,
            generated_at=ctx.generated_at,
            submission_id=ctx.submission.id,
        )

    def populate(
        self,
        form_type: str,
        submission: CustomerSubmission,
        generated_at: Optional[datetime] = None
    ) -> GeneratedACORDForm:
        """
        Populate a single ACORD form.

        Args:
            form_type: Form type id, e.g. "ACORD 125"
            submission: Source submission
            generated_at: Generation timestamp (defaults to now)

        Returns:
            The populated form. A form type without a field mapping yields
            an empty field map and a logged warning.
        """
        return self._populate(form_type, self._prepare(submission, generated_at))

    def populate_all(
        self,
        submission: CustomerSubmission,
        generated_at: Optional[datetime] = None
    ) -> List[GeneratedACORDForm]:
        """
        Populate every form required by the submission's coverage types.

        Form types without a field mapping are skipped with a warning; the
        rest of the batch is still generated.
        """
        ctx = self._prepare(submission, generated_at)
        forms: List[GeneratedACORDForm] = []

        for form_type in self.resolver.resolve_form_types(ctx.coverage_ids):
            if not self.form_catalog.has_spec(form_type):
                logger.warning(
                    f"Skipping form without field mapping | "
                    f"form_type={form_type} | "
                    f"submission_id={submission.id}"
                )
                continue
            forms.append(self._populate(form_type, ctx))

        logger.info(
            f"Forms generated | "
            f"submission_id={submission.id} | "
            f"count={len(forms)} | "
            f"form_types={','.join(f.form_type for f in forms)}"
        )
        return forms


def summarize_forms(forms: List[GeneratedACORDForm]) -> str:
    """Plain-text summary of a batch of generated forms."""
    lines = [f"ACORD Forms Generated: {len(forms)}", ""]
    for form in forms:
        lines.append(f"{form.form_name} ({form.form_type})")
        lines.append(f"   Fields Populated: {len(form.fields)}")
        lines.append(f"   Generated: {form.generated_at.strftime('%m/%d/%Y %H:%M:%S')}")
        lines.append("")
    return "\n".join(lines)


def form_preview(form: GeneratedACORDForm) -> str:
    """Plain-text listing of a generated form's fields."""
    lines = [
        form.form_name,
        f"Form Type: {form.form_type}",
        f"Generated: {form.generated_at.strftime('%m/%d/%Y %H:%M:%S')}",
        "",
        "Fields Populated:",
    ]
    lines.extend(f"  - {name}: {value}" for name, value in form.fields.items())
    return "\n".join(lines)


# Global populator instance
form_populator = FormPopulator(coverage_catalog, form_field_catalog, form_resolver)


def populate(
    form_type: str,
    submission: CustomerSubmission,
    generated_at: Optional[datetime] = None
) -> GeneratedACORDForm:
    return form_populator.populate(form_type, submission, generated_at)


def populate_all(
    submission: CustomerSubmission,
    generated_at: Optional[datetime] = None
) -> List[GeneratedACORDForm]:
    return form_populator.populate_all(submission, generated_at)
