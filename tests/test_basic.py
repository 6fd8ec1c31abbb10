"""
Basic tests for the ACORD intake API.
"""

import pytest
from fastapi.testclient import TestClient
from app.main import app

client = TestClient(app)

def test_root_endpoint():
    """Test the root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "ACORD Intake API"

def test_health_endpoint():
    """Test the health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["coverage_catalog_version"] == "1.2"

def test_request_id_is_echoed():
    """Test that a supplied request id comes back with timing headers."""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert "X-Response-Time-Ms" in response.headers

def test_request_id_is_generated():
    """Test that a request id is generated when none is supplied."""
    response = client.get("/health")
    assert response.headers["X-Request-ID"]

def test_coverage_types_endpoint():
    """Test listing every coverage type."""
    response = client.get("/v1/coverage-types")
    assert response.status_code == 200
    ids = [c["id"] for c in response.json()]
    assert ids[0] == "personal-auto"
    assert "general-liability" in ids
    assert len(ids) == len(set(ids))

def test_coverage_types_serialize_camel_case():
    """Test that catalog entries use camelCase keys."""
    response = client.get("/v1/coverage-types/general-liability")
    data = response.json()
    assert data["acordForms"] == ["ACORD 126", "ACORD 125"]
    assert data["clientTypes"] == ["business", "both"]

def test_unknown_coverage_type():
    """Test that an unknown coverage type is a 404."""
    response = client.get("/v1/coverage-types/space-tourism")
    assert response.status_code == 404

def test_invalid_client_type():
    """Test that an unknown client type is rejected."""
    response = client.get("/v1/coverage-types", params={"client_type": "alien"})
    assert response.status_code == 422

def test_form_types_endpoint():
    """Test listing form types with a field mapping."""
    response = client.get("/v1/acord/form-types")
    assert response.status_code == 200
    data = response.json()
    assert data["ACORD 125"] == "Commercial General Liability Application"
    assert data["ACORD 127"] == "Business Auto Section"
    assert set(data) == {
        "ACORD 125", "ACORD 126", "ACORD 127", "ACORD 129", "ACORD 130",
        "ACORD 137", "ACORD 140", "ACORD 24", "ACORD 160",
    }

def test_unknown_submission():
    """Test that an unknown submission is a 404."""
    response = client.get("/v1/submissions/SUB-999")
    assert response.status_code == 404

def test_validate_empty_submission():
    """Test that an empty submission validates as incomplete."""
    response = client.post("/v1/submissions/validate", json={})
    assert response.status_code == 200
    data = response.json()
    assert data["isValid"] is False
    assert any(e["field"] == "coverageTypes" for e in data["errors"])
