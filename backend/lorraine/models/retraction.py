"""Retraction ORM — permanent audit trail of event invalidations.

Invariants:
    - Append-only: rows are never updated or deleted
    - event_id points at a verification_events or claim_events row, per event_type

Design Decisions:
    - No foreign key on event_id: it spans two tables; event_type disambiguates
    - person_id/concept_id denormalized: audits are queried by person without joins
"""

from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from lorraine.db.base import Base, UTCDateTime


class RetractionModel(Base):
    """Audit record of one retraction."""
    __tablename__ = "retractions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    event_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)
    reason: Mapped[str] = mapped_column(String(30), nullable=False)
    retracted_by: Mapped[str] = mapped_column(String(200), nullable=False)
    person_id: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    concept_id: Mapped[str] = mapped_column(String(200), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
