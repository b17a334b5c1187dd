"""
Database Models
SQLAlchemy ORM models for DoseTrack
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, Date, Enum, Index, UniqueConstraint, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum

from config import TableNames
from database import Base


# ==================== ENUMS ====================

class Frequency(str, PyEnum):
    """Dosing frequency of a medication"""
    ONCE_DAILY = "once_daily"
    TWICE_DAILY = "twice_daily"
    THREE_TIMES_DAILY = "three_times_daily"
    FOUR_TIMES_DAILY = "four_times_daily"
    EVERY_OTHER_DAY = "every_other_day"
    WEEKLY = "weekly"
    AS_NEEDED = "as_needed"


class DoseStatus(str, PyEnum):
    """Status of a scheduled medication dose"""
    PENDING = "pending"
    TAKEN = "taken"
    LATE = "late"
    MISSED = "missed"


# ==================== MODELS ====================

class Patient(Base):
    """Owner of medications and dose logs"""
    __tablename__ = TableNames.PATIENTS

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(100), unique=True, index=True)  # Auth provider user id

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    medications = relationship("Medication", back_populates="patient", cascade="all, delete-orphan")
    dose_logs = relationship("DoseLog", back_populates="patient", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Medication(Base):
    """A prescribed medication the patient is tracking"""
    __tablename__ = TableNames.MEDICATIONS

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False)

    name = Column(String(255), nullable=False)
    dosage = Column(String(100), nullable=False)  # e.g., "500mg"
    instructions = Column(Text)
    color = Column(String(20))  # Display only, e.g. "#4A90E2"

    # Stored as plain string so an unrecognized value read back from the
    # database does not fail enum coercion
    frequency = Column(String(50), nullable=False, default=Frequency.ONCE_DAILY.value)
    # Daily reminder clock-times as "HH:MM" strings
    reminder_times = Column(JSON, default=list)

    # Status
    is_active = Column(Boolean, default=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    patient = relationship("Patient", back_populates="medications")
    dose_logs = relationship("DoseLog", back_populates="medication", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_medications_patient_active", "patient_id", "is_active"),
    )


class DoseLog(Base):
    """Outcome of one scheduled occurrence of a medication"""
    __tablename__ = TableNames.DOSE_LOGS

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False)
    medication_id = Column(Integer, ForeignKey("medications.id"), nullable=False)

    # Timing
    scheduled_time = Column(DateTime, nullable=False)
    taken_time = Column(DateTime)

    # Status
    status = Column(Enum(DoseStatus), nullable=False, default=DoseStatus.PENDING)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    patient = relationship("Patient", back_populates="dose_logs")
    medication = relationship("Medication", back_populates="dose_logs")

    __table_args__ = (
        UniqueConstraint("medication_id", "scheduled_time", name="uq_dose_log_occurrence"),
        Index("ix_dose_logs_patient_time", "patient_id", "scheduled_time"),
        Index("ix_dose_logs_status", "status"),
    )
