"""
API Module
FastAPI routers for the DoseTrack application
"""

from api.patients import router as patients_router
from api.medications import router as medications_router
from api.reminders import router as reminders_router
from api.adherence import router as adherence_router

from api.deps import (
    get_db,
    get_session_factory,
    services,
)


__all__ = [
    # Routers
    "patients_router",
    "medications_router",
    "reminders_router",
    "adherence_router",
    # Dependencies
    "get_db",
    "get_session_factory",
    "services",
]


def include_routers(app, prefix: str = "/api/v1"):
    """
    Include all API routers in the FastAPI app

    Usage:
        from api import include_routers
        include_routers(app)
    """
    app.include_router(patients_router, prefix=prefix)
    app.include_router(medications_router, prefix=prefix)
    app.include_router(reminders_router, prefix=prefix)
    app.include_router(adherence_router, prefix=prefix)
