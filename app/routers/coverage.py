"""
Coverage catalog router.
"""

from fastapi import APIRouter, HTTPException
from typing import List, Optional

from app.schemas import (
    ClientType,
    CoverageCategoryGroup,
    CoverageQuestion,
    CoverageType,
    QuestionsRequest,
)
from app.services.catalog import coverage_catalog

router = APIRouter()


@router.get("/coverage-types", response_model=List[CoverageType])
async def list_coverage_types(client_type: Optional[ClientType] = None):
    """List coverage types, optionally only those offered to a client type."""
    return coverage_catalog.list_coverage_types(client_type)


@router.get("/coverage-types/categories", response_model=List[CoverageCategoryGroup])
async def list_coverage_categories(client_type: Optional[ClientType] = None):
    """Coverage types grouped by category."""
    return coverage_catalog.coverage_types_by_category(client_type)


@router.get("/coverage-types/{coverage_id}", response_model=CoverageType)
async def get_coverage_type(coverage_id: str):
    """Look up a coverage type by id, display name or alias."""
    coverage = coverage_catalog.get_coverage_type(coverage_id)
    if coverage is None:
        raise HTTPException(status_code=404, detail=f"Coverage type {coverage_id} not found")
    return coverage


@router.post("/coverage-types/questions", response_model=List[CoverageQuestion])
async def get_questions(request: QuestionsRequest):
    """
    Questions to ask for a coverage selection.

    Questions shared by several coverage types are returned once, in the
    position of the first selected coverage type that asks them.
    """
    return coverage_catalog.questions_for(request.coverage_types, request.client_type)
