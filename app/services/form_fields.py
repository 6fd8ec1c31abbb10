"""
ACORD form field catalog.

Maps each ACORD form type to its display name and to the source of every
field on the form: a dotted path into the submission, a literal default,
or a value computed at generation time.
"""

from typing import Dict, Any, List, Optional, Tuple
from enum import Enum
import logging
import re

from app.cache import config_cache
from app.schemas import CatalogModel

logger = logging.getLogger("acord_intake")

COMPUTED_FIELDS = ("coverage_summary", "completion_date", "effective_date")

_FORM_NUMBER = re.compile(r"^(?:acord)?\s*(\d+)$", re.IGNORECASE)


class MappingGapError(LookupError):
    """Raised when a form type has no field mapping."""

    def __init__(self, form_type: str):
        super().__init__(f"No field mapping for form type {form_type}")
        self.form_type = form_type


class FieldSourceKind(str, Enum):
    PATH = "path"
    DEFAULT = "default"
    COMPUTED = "computed"


class FieldSource(CatalogModel):
    """Where a form field gets its value.

    `paths` holds one or more dotted paths for PATH sources (first one that
    resolves wins); `value` holds the literal for DEFAULT and the computation
    name for COMPUTED.
    """
    kind: FieldSourceKind
    value: Optional[str] = None
    paths: Tuple[str, ...] = ()


class ACORDFormSpec(CatalogModel):
    """Field mapping for one ACORD form type."""
    form_type: str
    name: str
    fields: Dict[str, FieldSource]


def normalize_form_type(form_type: str) -> str:
    """Accept `ACORD 125`, `acord125` or `125` and return `ACORD 125`."""
    match = _FORM_NUMBER.match(form_type.strip())
    if match:
        return f"ACORD {match.group(1)}"
    return form_type.strip()


def _parse_source(form_type: str, field_name: str, raw: Any) -> FieldSource:
    where = f"{form_type}.{field_name}"

    if isinstance(raw, str) and raw.strip():
        return FieldSource(kind=FieldSourceKind.PATH, paths=(raw.strip(),))

    if isinstance(raw, list) and raw and all(isinstance(p, str) and p.strip() for p in raw):
        return FieldSource(kind=FieldSourceKind.PATH, paths=tuple(p.strip() for p in raw))

    if isinstance(raw, dict) and len(raw) == 1:
        if "default" in raw:
            value = raw["default"]
            if value is None or not str(value).strip():
                raise ValueError(f"Empty default for field {where}")
            return FieldSource(kind=FieldSourceKind.DEFAULT, value=str(value))
        if "computed" in raw:
            name = raw["computed"]
            if name not in COMPUTED_FIELDS:
                raise ValueError(f"Unknown computed field '{name}' for {where}")
            return FieldSource(kind=FieldSourceKind.COMPUTED, value=name)

    raise ValueError(f"Invalid field source for {where}: {raw!r}")


class FormFieldCatalog:
    """Read-only lookup of ACORD form specs."""

    def __init__(self, config: Dict[str, Any]):
        self.version = str(config.get("version", ""))
        self._specs: Dict[str, ACORDFormSpec] = {}

        forms = config.get("forms") or {}
        if not isinstance(forms, dict):
            raise ValueError("Form catalog 'forms' must be a mapping")

        for form_type, body in forms.items():
            if not isinstance(body, dict) or not body.get("name"):
                raise ValueError(f"Form {form_type} needs a name")
            fields = {
                field_name: _parse_source(form_type, field_name, raw)
                for field_name, raw in (body.get("fields") or {}).items()
            }
            self._specs[form_type] = ACORDFormSpec(
                form_type=form_type, name=body["name"], fields=fields
            )

    def get_spec(self, form_type: str) -> ACORDFormSpec:
        """
        Get the field mapping for a form type.

        Raises:
            MappingGapError: if the form type has no mapping
        """
        spec = self._specs.get(form_type)
        if spec is None:
            raise MappingGapError(form_type)
        return spec

    def has_spec(self, form_type: str) -> bool:
        return form_type in self._specs

    def form_types(self) -> List[str]:
        return list(self._specs)

    def display_name(self, form_type: str) -> str:
        spec = self._specs.get(form_type)
        return spec.name if spec else form_type


# Global form catalog instance
form_field_catalog = FormFieldCatalog(config_cache.get_form_catalog())
