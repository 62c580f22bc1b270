"""RelationshipEdge ORM — directed, typed edge between two concepts.

Invariants:
    - Both endpoints reference existing concept_nodes rows
    - edge_type is one of: prerequisite, component_of, related_to, analogous_to
    - inference_strength within [0, 1]

Design Decisions:
    - No unique constraint on (from, to, type): duplicate edges between the same pair
      are permitted and each contributes to traversals
"""

from datetime import datetime, timezone

from sqlalchemy import String, Float, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from lorraine.db.base import Base, UTCDateTime


class RelationshipEdgeModel(Base):
    """Directed edge in the concept graph."""
    __tablename__ = "relationship_edges"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    from_concept_id: Mapped[str] = mapped_column(
        String(200), ForeignKey("concept_nodes.id"), nullable=False, index=True,
    )
    to_concept_id: Mapped[str] = mapped_column(
        String(200), ForeignKey("concept_nodes.id"), nullable=False, index=True,
    )
    edge_type: Mapped[str] = mapped_column(String(20), nullable=False)
    inference_strength: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
