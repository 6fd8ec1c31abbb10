"""
Main FastAPI application entry point.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.middleware import PerformanceMiddleware, RequestContextMiddleware
from app.db import initialize_database
from app.routers import coverage, submissions, acord
from app.services.catalog import coverage_catalog
from app.services.form_fields import form_field_catalog
import logging

logger = logging.getLogger("acord_intake")

API_VERSION = "1.0.0"

app = FastAPI(
    title="ACORD Intake API",
    description="Insurance intake API: coverage questionnaires, submission validation and ACORD form generation",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add performance middleware (innermost - executes first)
app.add_middleware(PerformanceMiddleware)

# Add request context middleware
app.add_middleware(RequestContextMiddleware)

# Add CORS middleware (outermost)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Initialize database and report loaded catalogs on startup."""
    logger.info("Starting ACORD Intake API...")

    initialize_database()
    logger.info("Database initialized")

    logger.info(
        f"Catalogs loaded | "
        f"coverage_types={len(coverage_catalog.list_coverage_types())} | "
        f"form_types={len(form_field_catalog.form_types())}"
    )

    logger.info("Startup complete")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "ACORD Intake API", "status": "healthy"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": API_VERSION,
        "coverage_catalog_version": coverage_catalog.version,
        "form_catalog_version": form_field_catalog.version,
    }

# Include all routers
app.include_router(coverage.router, prefix="/v1", tags=["coverage"])
app.include_router(submissions.router, prefix="/v1", tags=["submissions"])
app.include_router(acord.router, prefix="/v1", tags=["acord"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
