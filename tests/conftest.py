"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all DoseTrack tests.
Fixtures include database sessions, test clients and sample data.
"""

import os
import sys
from datetime import datetime, date
from typing import Callable, Generator, Dict, Any, Optional

# Keep the app's own engine off disk and pin the local zone before
# settings are first read
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("TIMEZONE", "UTC")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import Base, build_engine
from models import Patient, Medication, DoseLog, DoseStatus, Frequency
from api.deps import get_db, get_session_factory
from app import app


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite"""
    engine = build_engine("sqlite:///:memory:")

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine) -> Callable[[], Session]:
    """Session factory bound to the test engine, for background work"""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine
    )


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Create a test database session"""
    session = session_factory()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session, session_factory) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database overrides"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ==================== SAMPLE DATA FIXTURES ====================

@pytest.fixture
def sample_patient_data() -> Dict[str, Any]:
    """Sample patient data for creating test patients"""
    return {
        "first_name": "John",
        "last_name": "Doe",
        "email": "john.doe@example.com",
        "external_id": "auth0|john-doe",
        "is_active": True
    }


@pytest.fixture
def sample_medication_data() -> Dict[str, Any]:
    """Sample medication data for creating test medications"""
    return {
        "name": "Lisinopril",
        "dosage": "10mg",
        "frequency": Frequency.ONCE_DAILY.value,
        "reminder_times": ["09:00"],
        "instructions": "Take in the morning",
        "color": "#4A90E2",
        "is_active": True,
        "start_date": date(2025, 1, 1)
    }


@pytest.fixture
def test_patient(db_session: Session, sample_patient_data: Dict) -> Patient:
    """Create and return a test patient"""
    patient = Patient(**sample_patient_data)
    db_session.add(patient)
    db_session.commit()
    db_session.refresh(patient)
    return patient


@pytest.fixture
def inactive_patient(db_session: Session) -> Patient:
    """Create and return a deactivated patient"""
    patient = Patient(
        first_name="Jane",
        last_name="Roe",
        email="jane.roe@example.com",
        is_active=False
    )
    db_session.add(patient)
    db_session.commit()
    db_session.refresh(patient)
    return patient


@pytest.fixture
def test_medication(db_session: Session, test_patient: Patient, sample_medication_data: Dict) -> Medication:
    """Create and return a test medication linked to test patient (no dose logs)"""
    medication = Medication(
        patient_id=test_patient.id,
        **sample_medication_data
    )
    db_session.add(medication)
    db_session.commit()
    db_session.refresh(medication)
    return medication


@pytest.fixture
def make_dose_log(db_session: Session, test_medication: Medication):
    """Factory for persisted dose logs of the test medication"""

    def _make(
        scheduled_time: datetime,
        status: DoseStatus = DoseStatus.PENDING,
        taken_time: Optional[datetime] = None,
        medication: Optional[Medication] = None
    ) -> DoseLog:
        med = medication or test_medication
        log = DoseLog(
            patient_id=med.patient_id,
            medication_id=med.id,
            scheduled_time=scheduled_time,
            taken_time=taken_time,
            status=status
        )
        db_session.add(log)
        db_session.commit()
        db_session.refresh(log)
        return log

    return _make


# ==================== MARKERS ====================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "api: mark test as an API test")
    config.addinivalue_line("markers", "database: mark test as requiring database")
