"""
Coverage catalog service.

Read-only lookups over the coverage types, their ACORD forms and their
questions, plus normalization of legacy coverage names and answer keys to
canonical ids.
"""

from typing import Dict, Any, List, Optional, Iterable, Tuple, Union
import logging

from app.cache import config_cache
from app.schemas import (
    ClientType,
    CoverageCategory,
    CoverageCategoryGroup,
    CoverageQuestion,
    CoverageType,
)
from app.services.form_fields import form_field_catalog

logger = logging.getLogger("acord_intake")

ClientTypeRef = Union[ClientType, str, None]


def _client_type(value: ClientTypeRef) -> Optional[ClientType]:
    if value is None or value == "":
        return None
    return ClientType(value)


def _key(ref: str) -> str:
    return ref.strip().casefold()


class CoverageCatalog:
    """Coverage types in declaration order, indexed by id and alias."""

    def __init__(self, config: Dict[str, Any], known_forms: Optional[Iterable[str]] = None):
        self.version = str(config.get("version", ""))
        self._categories: Dict[str, str] = dict(config.get("categories") or {})
        self._coverage_types: Tuple[CoverageType, ...] = tuple(
            CoverageType.model_validate(raw) for raw in config.get("coverage_types") or []
        )
        self._by_id: Dict[str, CoverageType] = {}
        self._by_alias: Dict[str, str] = {}
        self._answer_aliases: Dict[str, str] = {}

        known = set(known_forms) if known_forms is not None else None

        for coverage in self._coverage_types:
            if coverage.id in self._by_id:
                raise ValueError(f"Duplicate coverage type id: {coverage.id}")
            self._by_id[coverage.id] = coverage

            if known is not None:
                unknown = [f for f in coverage.acord_forms if f not in known]
                if unknown:
                    raise ValueError(
                        f"Coverage type {coverage.id} references unknown forms: {unknown}"
                    )

            question_ids = set()
            for question in coverage.questions:
                if question.id in question_ids:
                    raise ValueError(
                        f"Duplicate question id {question.id} in coverage type {coverage.id}"
                    )
                question_ids.add(question.id)
                for alias in question.aliases:
                    self._add_answer_alias(alias, question.id)

        # Names and aliases resolve after every id is known so an id always wins
        for coverage in self._coverage_types:
            for ref in (coverage.name, *coverage.aliases):
                key = _key(ref)
                if key in self._by_alias and self._by_alias[key] != coverage.id:
                    raise ValueError(
                        f"Coverage reference '{ref}' is ambiguous: "
                        f"{self._by_alias[key]} and {coverage.id}"
                    )
                self._by_alias[key] = coverage.id

    def _add_answer_alias(self, alias: str, question_id: str):
        existing = self._answer_aliases.get(alias)
        if existing is not None and existing != question_id:
            raise ValueError(
                f"Answer alias '{alias}' maps to both {existing} and {question_id}"
            )
        self._answer_aliases[alias] = question_id

    # Lookups

    def list_coverage_types(self, client_type: ClientTypeRef = None) -> List[CoverageType]:
        """
        List coverage types in declaration order.

        Args:
            client_type: Only return coverage types offered to this client type.
                `both` returns every coverage type.

        Returns:
            Matching coverage types
        """
        wanted = _client_type(client_type)
        if wanted is None or wanted == ClientType.BOTH:
            return list(self._coverage_types)
        return [c for c in self._coverage_types if wanted in c.client_types]

    def canonical_id(self, ref: str) -> Optional[str]:
        """Map a coverage id, display name or alias to its canonical id."""
        if not isinstance(ref, str) or not ref.strip():
            return None
        if ref in self._by_id:
            return ref
        stripped = ref.strip()
        if stripped in self._by_id:
            return stripped
        key = _key(stripped)
        for coverage_id in self._by_id:
            if coverage_id.casefold() == key:
                return coverage_id
        return self._by_alias.get(key)

    def get_coverage_type(self, ref: str) -> Optional[CoverageType]:
        coverage_id = self.canonical_id(ref)
        return self._by_id.get(coverage_id) if coverage_id else None

    def normalize_coverage_ids(self, refs: Iterable[str]) -> List[str]:
        """
        Normalize coverage references to canonical ids.

        Unknown references are kept as given so callers can report them.
        Duplicates collapse to the first occurrence.
        """
        normalized: List[str] = []
        for ref in refs:
            if not isinstance(ref, str) or not ref.strip():
                continue
            coverage_id = self.canonical_id(ref) or ref.strip()
            if coverage_id not in normalized:
                normalized.append(coverage_id)
        return normalized

    def unknown_coverage_ids(self, refs: Iterable[str]) -> List[str]:
        return [ref for ref in refs if self.canonical_id(ref) is None]

    def normalize_answers(self, answers: Dict[str, Any]) -> Dict[str, Any]:
        """Rename legacy answer keys to canonical question ids.

        When both a legacy key and its canonical id are present, the
        canonical id wins.
        """
        answers = answers or {}
        normalized: Dict[str, Any] = {}
        for key, value in answers.items():
            canonical = self._answer_aliases.get(key)
            if canonical is None:
                normalized[key] = value
            elif canonical not in answers:
                normalized[canonical] = value
        return normalized

    def questions_for(
        self,
        coverage_ids: Iterable[str],
        client_type: ClientTypeRef = None
    ) -> List[CoverageQuestion]:
        """
        Collect the questions for a coverage selection.

        Args:
            coverage_ids: Selected coverage ids (aliases accepted, unknown ids skipped)
            client_type: Drop questions restricted to other client types

        Returns:
            Questions in selection order, one per question id (first occurrence wins)
        """
        wanted = _client_type(client_type)
        seen = set()
        questions: List[CoverageQuestion] = []

        for ref in coverage_ids:
            coverage = self.get_coverage_type(ref)
            if coverage is None:
                continue
            for question in coverage.questions:
                if question.id in seen:
                    continue
                if not self._question_applies(question, wanted):
                    continue
                seen.add(question.id)
                questions.append(question)

        return questions

    @staticmethod
    def _question_applies(question: CoverageQuestion, client_type: Optional[ClientType]) -> bool:
        if client_type is None or client_type == ClientType.BOTH or not question.client_types:
            return True
        return client_type in question.client_types

    # Categories

    def categories(self) -> Dict[str, str]:
        """Category id to display name, in declaration order."""
        return dict(self._categories)

    def category_display_name(self, category: Union[CoverageCategory, str]) -> str:
        key = category.value if isinstance(category, CoverageCategory) else category
        return self._categories.get(key, key.replace("-", " ").title())

    def coverage_types_by_category(self, client_type: ClientTypeRef = None) -> List[CoverageCategoryGroup]:
        """Group offered coverage types by category, skipping empty categories."""
        grouped: Dict[CoverageCategory, List[CoverageType]] = {}
        for coverage in self.list_coverage_types(client_type):
            grouped.setdefault(coverage.category, []).append(coverage)

        known = {c.value for c in CoverageCategory}
        order = [CoverageCategory(c) for c in self._categories if c in known]
        order += [c for c in grouped if c not in order]

        return [
            CoverageCategoryGroup(
                category=category,
                display_name=self.category_display_name(category),
                coverage_types=grouped[category],
            )
            for category in order
            if category in grouped
        ]

    # Flag consistency

    def critical_gaps(self) -> List[Tuple[str, str]]:
        """Questions flagged critical but not required, as (coverage id, question id).

        Critical questions are enforced either way; a gap means the two flags
        disagree and the catalog entry should be fixed.
        """
        return [
            (coverage.id, question.id)
            for coverage in self._coverage_types
            for question in coverage.questions
            if question.critical and not question.required
        ]

    @classmethod
    def from_config(cls) -> "CoverageCatalog":
        """Build the catalog from the configured YAML file."""
        catalog = cls(config_cache.get_coverage_catalog(), form_field_catalog.form_types())
        gaps = catalog.critical_gaps()
        if gaps:
            logger.warning(
                f"Critical questions not marked required | "
                f"count={len(gaps)} | "
                f"questions={', '.join(f'{c}/{q}' for c, q in gaps)}"
            )
        logger.info(
            f"Coverage catalog loaded | "
            f"version={catalog.version} | "
            f"coverage_types={len(catalog._coverage_types)}"
        )
        return catalog


# Global catalog instance
coverage_catalog = CoverageCatalog.from_config()
