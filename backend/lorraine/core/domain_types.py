"""Domain Types — rich types that replace bare primitives across the engine.

Invariants:
    - ConceptId, PersonId, EventId, EdgeId wrap str — never pass bare ids through domain logic
    - Confidence is bounded 0.0–1.0
    - All closed sets (levels, results, modalities, reasons) encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders and compare equal to their wire values
    - Concept ids are caller-chosen strings (domain packs name them), so ids are str, not UUID
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ConceptId = NewType("ConceptId", str)
PersonId = NewType("PersonId", str)
EventId = NewType("EventId", str)
EdgeId = NewType("EdgeId", str)
RetractionId = NewType("RetractionId", str)


# ─── Value Types ─────────────────────────────────────────────────

Confidence = NewType("Confidence", float)              # 0.0–1.0
InferenceStrength = NewType("InferenceStrength", float)  # 0.0–1.0


# ─── Enums ───────────────────────────────────────────────────────

class TrustLevel(str, Enum):
    """Coarse belief classification for a (person, concept)."""
    UNTESTED = "untested"
    VERIFIED = "verified"
    INFERRED = "inferred"
    CONTESTED = "contested"


class VerificationResult(str, Enum):
    """Outcome of a single verification attempt."""
    DEMONSTRATED = "demonstrated"
    FAILED = "failed"
    PARTIAL = "partial"


class Modality(str, Enum):
    """Evidence channel. Strength per channel lives in TrustParameters."""
    GRILL_RECALL = "grill:recall"
    GRILL_INFERENCE = "grill:inference"
    GRILL_TRANSFER = "grill:transfer"
    GRILL_DISCRIMINATION = "grill:discrimination"
    SANDBOX_EXECUTION = "sandbox:execution"
    SANDBOX_DEBUGGING = "sandbox:debugging"
    WRITE_EXPLANATION = "write:explanation"
    WRITE_TEACHING = "write:teaching"
    SKETCH_DIAGRAM = "sketch:diagram"
    SKETCH_PROCESS = "sketch:process"
    CONVERSATION_UNPROMPTED = "conversation:unprompted"
    INTEGRATED_USE = "integrated:use"
    EXTERNAL_OBSERVED = "external:observed"


class EventSource(str, Enum):
    """Where a verification event was produced."""
    INTERNAL = "internal"
    EXTERNAL = "external"


class EdgeType(str, Enum):
    """Relationship kinds in the concept graph."""
    PREREQUISITE = "prerequisite"
    COMPONENT_OF = "component_of"
    RELATED_TO = "related_to"
    ANALOGOUS_TO = "analogous_to"


class EventType(str, Enum):
    """Event kinds that can be retracted."""
    VERIFICATION = "verification"
    CLAIM = "claim"


class RetractionReason(str, Enum):
    """Closed set of reasons an event may be retracted."""
    FRAUDULENT = "fraudulent"
    DUPLICATE = "duplicate"
    IDENTITY_MIXUP = "identity_mixup"
    CONSENT_ERASURE = "consent_erasure"
    DATA_CORRECTION = "data_correction"


class DecisionType(str, Enum):
    """Engine decisions that explain_decision can account for."""
    TRUST_UPDATE = "trust_update"
    PROPAGATION_RESULT = "propagation_result"
    DECAY_RESULT = "decay_result"
    CONTESTED_DETECTION = "contested_detection"
    CALIBRATION_FINDING = "calibration_finding"


# Readiness gates compare levels with this ordering.
LEVEL_ORDER: dict[TrustLevel, int] = {
    TrustLevel.UNTESTED: 0,
    TrustLevel.CONTESTED: 1,
    TrustLevel.INFERRED: 2,
    TrustLevel.VERIFIED: 3,
}
