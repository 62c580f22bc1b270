"""ClaimEvent ORM — append-only self-report log.

Invariants:
    - self_reported_confidence within [0, 1] (validated before insert)
    - Only the retracted flag is ever updated
    - Claims never feed trust scoring, only calibration
"""

from datetime import datetime

from sqlalchemy import String, Text, Float, Boolean, Index
from sqlalchemy.orm import Mapped, mapped_column

from lorraine.db.base import Base, UTCDateTime


class ClaimEventModel(Base):
    """One self-reported confidence for a (person, concept)."""
    __tablename__ = "claim_events"
    __table_args__ = (
        Index("ix_claim_events_person_concept", "person_id", "concept_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    person_id: Mapped[str] = mapped_column(String(200), nullable=False)
    concept_id: Mapped[str] = mapped_column(String(200), nullable=False)
    self_reported_confidence: Mapped[float] = mapped_column(Float, nullable=False)
    context: Mapped[str] = mapped_column(Text, nullable=False, default="")
    timestamp: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    retracted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
