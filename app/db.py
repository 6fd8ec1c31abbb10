"""
Database configuration and session management.
"""

from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.pool import StaticPool
from typing import Generator
import logging
import os

# Import all models to ensure they are registered with SQLModel
from app.models import Submission, AcordFormRecord
from app.cache import config_cache
from app.repositories import SQLModelSubmissionRepository
from app.schemas import CustomerSubmission
from app.services.catalog import coverage_catalog

logger = logging.getLogger("acord_intake")

# Database URL - defaults to SQLite for development
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./acord_intake.db")


def _create_engine(url: str):
    if not url.startswith("sqlite"):
        return create_engine(url, echo=False)
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection so every session sees the same in-memory database
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=False, connect_args={"check_same_thread": False})


# Create engine
engine = _create_engine(DATABASE_URL)


def create_db_and_tables():
    """Create database tables."""
    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    """Get database session."""
    with Session(engine) as session:
        yield session


def load_seed_data():
    """Load demo submissions from config/seed.json into the database.

    Legacy coverage names and answer keys are normalized to canonical ids
    before they are stored.
    """
    seed_submissions = config_cache.get_seed_submissions()
    loaded = 0

    with Session(engine) as session:
        repository = SQLModelSubmissionRepository(session)
        for raw in seed_submissions:
            # Check if submission already exists
            if session.get(Submission, raw["id"]) is not None:
                continue
            submission = CustomerSubmission.model_validate(raw)
            submission = submission.model_copy(update={
                "coverage_types": coverage_catalog.normalize_coverage_ids(submission.coverage_types),
                "coverage_answers": coverage_catalog.normalize_answers(submission.coverage_answers),
            })
            repository.add(
                submission,
                status=raw.get("status", "new"),
                priority=raw.get("priority", "medium"),
            )
            loaded += 1

    logger.info(f"Seed data loaded | submissions={loaded}")


def initialize_database():
    """Initialize database with tables and seed data."""
    logger.info("Creating database tables...")
    create_db_and_tables()
    logger.info("Loading seed data...")
    load_seed_data()
    logger.info("Database initialization complete")
