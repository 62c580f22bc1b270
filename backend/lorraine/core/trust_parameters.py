"""Trust Parameters — the tunable constants of scoring, decay and propagation.

Invariants:
    - TrustParameters is frozen: a scoring run never sees its constants change mid-flight
    - Every strength, bonus and threshold is in [0, 1] except multipliers and day counts
    - Unknown modalities have strength 0.0 (never raise)

Design Decisions:
    - Injected object over module globals: callers can score with alternate parameter
      sets in tests and experiments without monkeypatching
    - MappingProxyType for the strength table: the frozen dataclass would otherwise
      still expose a mutable dict
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from lorraine.core.domain_types import Modality


DEFAULT_MODALITY_STRENGTH: Mapping[Modality, float] = MappingProxyType({
    Modality.GRILL_RECALL: 0.3,
    Modality.GRILL_INFERENCE: 0.5,
    Modality.GRILL_TRANSFER: 0.7,
    Modality.GRILL_DISCRIMINATION: 0.6,
    Modality.SANDBOX_EXECUTION: 0.7,
    Modality.SANDBOX_DEBUGGING: 0.85,
    Modality.WRITE_EXPLANATION: 0.7,
    Modality.WRITE_TEACHING: 0.85,
    Modality.SKETCH_DIAGRAM: 0.6,
    Modality.SKETCH_PROCESS: 0.6,
    Modality.CONVERSATION_UNPROMPTED: 0.95,
    Modality.INTEGRATED_USE: 0.8,
    Modality.EXTERNAL_OBSERVED: 0.4,
})


@dataclass(frozen=True)
class TrustParameters:
    """Constants consumed by the pure trust functions."""

    modality_strength: Mapping[Modality, float] = field(
        default_factory=lambda: DEFAULT_MODALITY_STRENGTH,
    )

    # Scoring
    cross_modality_confidence_bonus: float = 0.1
    partial_evidence_bonus: float = 0.05
    partial_weight: float = 0.5
    vanished_evidence_confidence: float = 0.2

    # Decay (Ebbinghaus-style half-life, in days)
    base_half_life_days: float = 30.0
    cross_modality_decay_multiplier: float = 1.5
    structural_importance_bonus: float = 0.1  # per downstream dependent

    # Propagation
    propagation_attenuation: float = 0.5
    failure_propagation_multiplier: float = 1.5
    propagation_threshold: float = 0.05

    # Change detection and calibration
    material_change_epsilon: float = 0.001
    stale_threshold_days: float = 60.0

    def strength(self, modality: Modality | str) -> float:
        """Intrinsic strength of an evidence channel; 0.0 when unknown."""
        try:
            key = Modality(modality)
        except ValueError:
            return 0.0
        return self.modality_strength.get(key, 0.0)


DEFAULT_TRUST_PARAMETERS = TrustParameters()
