"""
SQLAlchemy ORM models for database tables.
These are separate from domain models to maintain clean architecture.
"""
from sqlalchemy import Column, String, Integer, DateTime, Enum as SQLEnum, Index
import uuid

from archcircuit.infrastructure.database import Base
from archcircuit.infrastructure.db_types import GUID, JSONDocument
from archcircuit.domain.models import CircuitStatus, utcnow


class CircuitModel(Base):
    """Database model for saved circuits (overwrite-by-id semantics)."""
    __tablename__ = "circuits"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    academic_year = Column(Integer, nullable=False)
    semester = Column(Integer, nullable=True)
    duration = Column(Integer, nullable=False)
    starting_city = Column(String, nullable=True)
    status = Column(SQLEnum(CircuitStatus), nullable=False, default=CircuitStatus.DRAFT)

    # Ordered city IDs and requested goals
    cities = Column(JSONDocument, nullable=False, default=list)
    learning_goals = Column(JSONDocument, nullable=False, default=list)

    # Day plan (list of DayPlanEntry), constraints and score - stored as JSON
    day_plan = Column(JSONDocument, nullable=False, default=list)
    constraints = Column(JSONDocument, nullable=False, default=dict)
    score = Column(JSONDocument, nullable=False)
    academic_justification = Column(String, nullable=False, default="")

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_circuits_updated_at", "updated_at"),
    )
