"""Diagnostics Service — decay reports, calibration, explanations and readiness gates.

Invariants:
    - Read-only: nothing here writes to the store
    - Decay is computed against the supplied clock and never persisted
    - A person with no events gets an empty decay list and a zeroed calibration report
"""

import logging
from datetime import datetime
from typing import Any, Mapping, Sequence

from lorraine.core.calibration import CalibrationReport, ConceptEvidence, calibrate
from lorraine.core.decay import find_decayed
from lorraine.core.domain_pack import BundleRequirement
from lorraine.core.domain_types import ConceptId, DecisionType, PersonId
from lorraine.core.explain import Explanation, explain_decision
from lorraine.core.readiness import ReadinessResult, evaluate_readiness
from lorraine.core.records import ClaimEvent, DecayResult, VerificationEvent
from lorraine.core.repository_protocols import TrustStore
from lorraine.services.graph_service import load_concept_graph
from lorraine.services.trust_service import TrustService

logger = logging.getLogger(__name__)


class DiagnosticsService:
    """Model-quality reads over a person's trust."""

    def __init__(self, store: TrustStore, trust_service: TrustService):
        self.store = store
        self.trust_service = trust_service

    @property
    def params(self):
        return self.trust_service.params

    async def decay_trust(
        self, person_id: PersonId, as_of: datetime | None = None,
    ) -> list[DecayResult]:
        """Concepts whose decayed confidence is below the stored value."""
        as_of = as_of or self.trust_service.clock()
        states = await self.store.get_all_trust_states(person_id)
        graph = await load_concept_graph(self.store)
        counts = {
            s.concept_id: len(graph.downstream_dependents(s.concept_id)) for s in states
        }
        return find_decayed(states, counts, as_of, self.params)

    async def calibrate(
        self, person_id: PersonId, as_of: datetime | None = None,
    ) -> CalibrationReport:
        as_of = as_of or self.trust_service.clock()
        states = {
            s.concept_id: s for s in await self.store.get_all_trust_states(person_id)
        }
        events = await self.store.get_verification_events_for_person(person_id)
        claims = await self.store.get_claims_for_person(person_id)
        graph = await load_concept_graph(self.store)

        histories = _group(events)
        claims_by_concept = _group(claims)
        concept_ids = sorted(set(states) | set(histories) | set(claims_by_concept))

        report = calibrate(
            [
                ConceptEvidence(
                    state=states.get(concept_id),
                    history=histories.get(concept_id, []),
                    claims=claims_by_concept.get(concept_id, []),
                    downstream_dependent_count=len(graph.downstream_dependents(concept_id)),
                )
                for concept_id in concept_ids
            ],
            as_of,
            self.params,
        )
        logger.info(
            f"Calibration: accuracy={report.prediction_accuracy:.2f} "
            f"stale={report.stale_percentage:.2f}",
            extra={"person_id": person_id},
        )
        return report

    async def explain(
        self,
        decision_type: DecisionType | str,
        context: Mapping[str, Any],
        person_id: PersonId | None = None,
        concept_id: ConceptId | None = None,
    ) -> Explanation:
        """Explain a decision, consulting the concept's history when identified."""
        history: list[VerificationEvent] = []
        if person_id and concept_id:
            history = await self.store.get_verification_history(person_id, concept_id)
        return explain_decision(decision_type, context, history, self.params)

    async def check_readiness(
        self,
        person_id: PersonId,
        bundle_name: str,
        requirements: Sequence[BundleRequirement],
        as_of: datetime | None = None,
    ) -> ReadinessResult:
        views = await self.trust_service.get_bulk_trust_state(
            person_id, [r.concept_id for r in requirements], as_of,
        )
        return evaluate_readiness(
            person_id, bundle_name, requirements, {v.concept_id: v for v in views},
        )


def _group(
    events: Sequence[VerificationEvent | ClaimEvent],
) -> dict[ConceptId, list]:
    grouped: dict[ConceptId, list] = {}
    for event in events:
        grouped.setdefault(event.concept_id, []).append(event)
    return grouped
