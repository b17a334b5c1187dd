"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

from typing import Callable, Generator
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from database import SessionLocal
from services.exceptions import DoseTrackError


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency
    Yields a SQLAlchemy session and ensures cleanup
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> Callable[[], Session]:
    """
    Session factory for work scheduled after the response is sent.
    Background tasks must not reuse the request session, which is
    closed by then.
    """
    return SessionLocal


def not_found(exc: DoseTrackError) -> HTTPException:
    """Translate a service lookup failure into a 404"""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=str(exc)
    )


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_patient_service():
        from services.patient_service import patient_service
        return patient_service

    @staticmethod
    def get_medication_service():
        from services.medication_service import medication_service
        return medication_service

    @staticmethod
    def get_adherence_service():
        from services.adherence_service import adherence_service
        return adherence_service


# Service dependency instances
services = ServiceDependency()
