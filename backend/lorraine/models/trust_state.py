"""TrustState ORM — persisted projection of trust per (person, concept).

Invariants:
    - Derived data: every row can be rebuilt from non-retracted verification history
    - One row per (person_id, concept_id)
    - confidence is the undecayed value; decay is applied at read time only

Design Decisions:
    - JSON for modalities_tested / inferred_from: small id lists always read whole
    - Concepts with neither evidence nor inferred trust have no row; absence reads as untested
"""

from datetime import datetime, timezone

from sqlalchemy import String, Float, JSON
from sqlalchemy.orm import Mapped, mapped_column

from lorraine.db.base import Base, UTCDateTime


class TrustStateModel(Base):
    """Trust projection row."""
    __tablename__ = "trust_states"

    person_id: Mapped[str] = mapped_column(String(200), primary_key=True)
    concept_id: Mapped[str] = mapped_column(String(200), primary_key=True)
    level: Mapped[str] = mapped_column(String(20), nullable=False)
    confidence: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    last_verified: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True,
    )
    modalities_tested: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    inferred_from: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
