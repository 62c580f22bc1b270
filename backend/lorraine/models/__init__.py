"""ORM Models — SQLAlchemy declarative models for graph, event log and projections.

Invariants:
    - All models inherit from Base (db/base.py)
    - Event tables are append-only; trust_states is a rebuildable projection

Design Decisions:
    - One file per table for locality
    - All models imported here so Base.metadata knows every table before
      create_all runs
"""

from lorraine.models.concept_node import ConceptNodeModel  # noqa: F401
from lorraine.models.relationship_edge import RelationshipEdgeModel  # noqa: F401
from lorraine.models.verification_event import VerificationEventModel  # noqa: F401
from lorraine.models.claim_event import ClaimEventModel  # noqa: F401
from lorraine.models.retraction import RetractionModel  # noqa: F401
from lorraine.models.trust_state import TrustStateModel  # noqa: F401
