"""
Shared test setup: an in-memory database and sample submissions.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import copy
import pytest

from app.db import initialize_database

BUSINESS = {
    "name": "TechStart Solutions LLC",
    "federalId": "12-3456789",
    "businessType": "llc",
    "yearsInBusiness": 3,
    "description": "Software development and IT consulting services",
    "website": "https://techstartsolutions.com",
}

CONTACT = {
    "contactName": "Sarah Johnson",
    "email": "sarah@techstartsolutions.com",
    "phone": "(555) 123-4567",
    "address": "123 Innovation Drive",
    "city": "San Francisco",
    "state": "CA",
    "zipCode": "94105",
}

GENERAL_LIABILITY_ANSWERS = {
    "general-liability-limit": "$1,000,000",
    "business-operations": "Custom software development for small businesses",
    "business-classification": "Technology",
    "sic-code": "7372",
    "naics-code": "541511",
    "employee-count": 25,
    "annual-revenue": "$1,000,000-$5,000,000",
    "business-location-count": 1,
    "products-completed-operations": "No",
}

WORKERS_COMPENSATION_ANSWERS = {
    "wc-employee-count": 20,
    "annual-payroll": "$500,000+",
    "wc-business-classification": "Technology",
    "years-in-business": 3,
    "business-county": "San Francisco County",
}


@pytest.fixture(scope="session", autouse=True)
def database():
    """Create tables and load the demo submissions once per test session."""
    initialize_database()


@pytest.fixture
def gl_payload():
    """Complete general liability submission as camelCase JSON."""
    return {
        "clientType": "business",
        "business": copy.deepcopy(BUSINESS),
        "contact": copy.deepcopy(CONTACT),
        "coverageTypes": ["general-liability"],
        "coverageAnswers": copy.deepcopy(GENERAL_LIABILITY_ANSWERS),
    }


@pytest.fixture
def gl_wc_payload(gl_payload):
    """Complete general liability plus workers' compensation submission."""
    gl_payload["coverageTypes"] = ["general-liability", "workers-compensation"]
    gl_payload["coverageAnswers"].update(copy.deepcopy(WORKERS_COMPENSATION_ANSWERS))
    return gl_payload
