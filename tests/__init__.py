"""
DoseTrack Test Suite
====================

This package contains all tests for the DoseTrack medication scheduling
and adherence engine.

Test Structure:
- test_tools/: Frequency policy, status classifier and time helpers
- test_actions/: Reminder and adherence engines
- test_services/: Service layer against an in-memory database
- test_api/: API endpoint tests for FastAPI routes
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_actions/

    # Run only marked tests
    pytest -m "unit"
    pytest -m "api"
"""

# Test configuration
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_PATIENT_EMAIL = "test.patient@example.com"

__all__ = [
    "TEST_DATABASE_URL",
    "TEST_PATIENT_EMAIL",
]
