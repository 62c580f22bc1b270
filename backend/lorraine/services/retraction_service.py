"""Retraction Service — invalidates events, keeps the audit trail, rebuilds trust.

Invariants:
    - Invalid reason / event type raises RetractionValidationError before any write
    - Unknown or already-retracted events return retracted=False and write nothing
    - Flag, audit record and re-projection commit together or not at all
    - Claim retractions never touch trust states
    - The retracted event stays readable (retracted=True) next to its audit record

Design Decisions:
    - Re-projection is delegated to TrustService on the same store, so retraction
      and recording share one projection path
    - trust_states_affected lists material changes only (level, or confidence
      moved by more than material_change_epsilon)
"""

import logging
from datetime import datetime

from lorraine.core.domain_types import EventId, EventType, RetractionReason
from lorraine.core.errors import ErrorContext, RetractionValidationError
from lorraine.core.records import ClaimEvent, RetractResult, Retraction, VerificationEvent
from lorraine.core.repository_protocols import TrustStore
from lorraine.core.retraction import new_retraction, validate_retraction_request
from lorraine.services.trust_service import TrustService

logger = logging.getLogger(__name__)


class RetractionService:
    """Event invalidation with audit trail."""

    def __init__(self, store: TrustStore, trust_service: TrustService):
        self.store = store
        self.trust_service = trust_service

    async def retract_event(
        self,
        event_id: EventId,
        event_type: str,
        reason: str,
        retracted_by: str,
        timestamp: datetime | None = None,
    ) -> RetractResult:
        errors = validate_retraction_request(event_type, reason, retracted_by)
        if errors:
            raise RetractionValidationError(errors, ErrorContext(event_id=event_id))

        kind = EventType(event_type)
        event = await self._find_event(event_id, kind)
        if event is None or event.retracted:
            logger.info(
                "Retraction skipped: event unknown or already retracted",
                extra={"event_id": event_id},
            )
            return RetractResult(retracted=False)

        if not await self.store.mark_event_retracted(event_id, kind.value):
            return RetractResult(retracted=False)

        try:
            await self.store.insert_retraction(new_retraction(
                event_id=event_id,
                event_type=kind,
                reason=RetractionReason(reason),
                retracted_by=retracted_by,
                person_id=event.person_id,
                concept_id=event.concept_id,
                timestamp=timestamp or self.trust_service.clock(),
            ))
            affected = []
            if kind == EventType.VERIFICATION:
                projection = await self.trust_service.recompute_component(
                    event.person_id, event.concept_id,
                )
                affected = projection.changed_concept_ids
            await self.store.commit()
        except Exception:
            await self.store.rollback()
            raise

        logger.info(
            f"Retracted {kind.value} event ({reason})",
            extra={
                "person_id": event.person_id,
                "concept_id": event.concept_id,
                "event_id": event_id,
                "changed_count": len(affected),
            },
        )
        return RetractResult(retracted=True, trust_states_affected=affected)

    async def get_retractions(self, event_id: EventId) -> list[Retraction]:
        return await self.store.get_retractions_for_event(event_id)

    async def _find_event(
        self, event_id: EventId, kind: EventType,
    ) -> VerificationEvent | ClaimEvent | None:
        if kind == EventType.VERIFICATION:
            return await self.store.get_verification_event(event_id)
        return await self.store.get_claim_event(event_id)
