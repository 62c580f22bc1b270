"""ConceptNode ORM — a unit of knowledge in the concept graph.

Invariants:
    - id is caller-assigned and stable (domain packs reference concepts by id)
    - Upsert by id: re-loading a pack updates name/description/domain in place

Design Decisions:
    - domain indexed: packs are listed and filtered by their grouping tag
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lorraine.db.base import Base, UTCDateTime


class ConceptNodeModel(Base):
    """Concept graph node."""
    __tablename__ = "concept_nodes"

    id: Mapped[str] = mapped_column(String(200), primary_key=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    domain: Mapped[str | None] = mapped_column(
        String(200), nullable=True, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
