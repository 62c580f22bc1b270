"""VerificationEvent ORM — append-only evidence log.

Invariants:
    - Rows are never updated except for the retracted flag (false -> true, once)
    - Rows are never deleted: retraction keeps the original for audit
    - concept_id is not a foreign key: evidence may arrive before its concept is loaded

Design Decisions:
    - Composite (person_id, concept_id) index: history lookups are always per pair
"""

from datetime import datetime

from sqlalchemy import String, Text, Boolean, Index
from sqlalchemy.orm import Mapped, mapped_column

from lorraine.db.base import Base, UTCDateTime


class VerificationEventModel(Base):
    """One verification outcome for a (person, concept)."""
    __tablename__ = "verification_events"
    __table_args__ = (
        Index("ix_verification_events_person_concept", "person_id", "concept_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    person_id: Mapped[str] = mapped_column(String(200), nullable=False)
    concept_id: Mapped[str] = mapped_column(String(200), nullable=False)
    modality: Mapped[str] = mapped_column(String(40), nullable=False)
    result: Mapped[str] = mapped_column(String(20), nullable=False)
    context: Mapped[str] = mapped_column(Text, nullable=False, default="")
    source: Mapped[str] = mapped_column(
        String(20), nullable=False, default="internal",
    )
    timestamp: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    retracted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
