"""
Coverage to ACORD form resolution.
"""

from typing import Iterable, List
import logging

from app.services.catalog import CoverageCatalog, coverage_catalog

logger = logging.getLogger("acord_intake")


class FormResolver:
    """Works out which ACORD forms a coverage selection needs."""

    def __init__(self, catalog: CoverageCatalog):
        self.catalog = catalog

    def resolve_form_types(self, coverage_ids: Iterable[str]) -> List[str]:
        """
        Resolve selected coverage types to the ACORD form types they require.

        Args:
            coverage_ids: Selected coverage ids in selection order (aliases accepted)

        Returns:
            Form types in first-seen order, each listed once. Unknown
            coverage ids contribute nothing.
        """
        form_types: List[str] = []

        for ref in coverage_ids:
            coverage = self.catalog.get_coverage_type(ref)
            if coverage is None:
                logger.debug(f"Skipping unknown coverage type | coverage_id={ref}")
                continue
            for form_type in coverage.acord_forms:
                if form_type not in form_types:
                    form_types.append(form_type)

        return form_types


# Global resolver instance
form_resolver = FormResolver(coverage_catalog)


def resolve_form_types(coverage_ids: Iterable[str]) -> List[str]:
    return form_resolver.resolve_form_types(coverage_ids)
