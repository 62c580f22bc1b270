"""Explanation — structured rationale for every kind of engine decision.

Invariants:
    - All functions are PURE: any history consulted is passed in by the shell
    - reasoning names the concrete concept ids and values involved
    - confidence equals the confidence the decision itself computed (clamped to [0, 1])
    - alternatives is never empty: each entry is an interpretation that was
      considered and rejected, with the reason
    - Missing inputs degrade to "unknown" text and 0.0 confidence, never raise
    - An unknown decision type raises ValidationFailedError (INVALID_DECISION_TYPE)

Design Decisions:
    - Explicit dict dispatch by DecisionType (no if/elif ladder, no auto-discovery)
    - Context keys are snake_case and optional; the API layer passes what it has
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from lorraine.core.domain_types import DecisionType, TrustLevel, VerificationResult
from lorraine.core.errors import ValidationFailedError
from lorraine.core.records import VerificationEvent
from lorraine.core.scoring import compute_trust_from_history
from lorraine.core.trust_parameters import TrustParameters, DEFAULT_TRUST_PARAMETERS


@dataclass
class Explanation:
    reasoning: str
    trust_inputs: dict[str, Any] = field(default_factory=dict)
    alternatives: list[str] = field(default_factory=list)
    confidence: float = 0.0


def explain_decision(
    decision_type: DecisionType | str,
    context: Mapping[str, Any],
    history: Sequence[VerificationEvent] = (),
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> Explanation:
    """Explain one engine decision from its numeric inputs."""
    try:
        kind = DecisionType(decision_type)
    except ValueError:
        raise ValidationFailedError(
            [f'Unknown decision type "{decision_type}"'], "INVALID_DECISION_TYPE",
        ) from None
    builder = _BUILDERS[kind]
    return builder(context, history, params)


# --- Builders -----------------------------------------------------------------

def _explain_trust_update(
    ctx: Mapping[str, Any], history: Sequence[VerificationEvent], params: TrustParameters,
) -> Explanation:
    concept_id = ctx.get("concept_id")
    previous_level = ctx.get("previous_level")
    new_level = ctx.get("new_level")
    confidence = _number(ctx.get("confidence"))

    live = [e for e in history if not e.retracted]
    counts = _result_counts(live)
    modalities = sorted({e.modality.value for e in live})

    reasoning = (
        f'Trust for concept "{concept_id}" changed from "{previous_level or "unknown"}" '
        f'to "{new_level or "unknown"}" with confidence {_fmt(confidence)}. '
        f"Based on {len(live)} verification event(s) across {len(modalities)} modality(ies)"
        f"{': ' + ', '.join(modalities) if modalities else ''} "
        f"({counts['demonstrated']} demonstrated, {counts['partial']} partial, "
        f"{counts['failed']} failed). "
    )
    reasoning += _LEVEL_RATIONALE.get(_level(new_level), "Trust inputs were incomplete.")

    return Explanation(
        reasoning=reasoning,
        trust_inputs={
            "concept_id": concept_id,
            "person_id": ctx.get("person_id"),
            "previous_level": previous_level,
            "new_level": new_level,
            "confidence": confidence,
            "event_count": len(live),
            "modalities": modalities,
            **counts,
        },
        alternatives=_trust_update_alternatives(_level(new_level), counts),
        confidence=_clamp(confidence),
    )


def _explain_propagation(
    ctx: Mapping[str, Any], history: Sequence[VerificationEvent], params: TrustParameters,
) -> Explanation:
    source = ctx.get("source_concept_id")
    target = ctx.get("target_concept_id")
    strength = _number(ctx.get("inference_strength"))
    depth = ctx.get("depth")

    reasoning = (
        f'Trust was propagated from concept "{source}" to "{target}" with inference '
        f"strength {_fmt(strength)} at depth {depth if depth is not None else 'unknown'}. "
        f"Each hop after the first is attenuated by {params.propagation_attenuation} and "
        f"signals below {params.propagation_threshold} are discarded. Failure signals are "
        f"weighted {params.failure_propagation_multiplier}x. Propagation only ever yields "
        f"inferred trust."
    )
    return Explanation(
        reasoning=reasoning,
        trust_inputs={
            "source_concept_id": source,
            "target_concept_id": target,
            "inference_strength": strength,
            "depth": depth,
        },
        alternatives=[
            f'Mark "{target}" verified: rejected, it has no direct demonstration of its own',
            f'Ignore the signal from "{source}": rejected, it is above the '
            f"propagation threshold ({params.propagation_threshold})",
        ],
        confidence=_clamp(strength),
    )


def _explain_decay(
    ctx: Mapping[str, Any], history: Sequence[VerificationEvent], params: TrustParameters,
) -> Explanation:
    concept_id = ctx.get("concept_id")
    days = _number(ctx.get("days_since_verified"))
    previous = _number(ctx.get("previous_confidence"))
    decayed = _number(ctx.get("decayed_confidence"))

    reasoning = (
        f'Confidence for concept "{concept_id}" decayed from {_fmt(previous)} to '
        f"{_fmt(decayed)} over {_fmt(days, 1)} days since the last verification. "
        f"Decay halves confidence every {params.base_half_life_days:g} days at base; "
        f"each extra modality multiplies the half-life by "
        f"{params.cross_modality_decay_multiplier} and each downstream dependent adds "
        f"{params.structural_importance_bonus:.0%}."
    )
    return Explanation(
        reasoning=reasoning,
        trust_inputs={
            "concept_id": concept_id,
            "days_since_verified": days,
            "previous_confidence": previous,
            "decayed_confidence": decayed,
        },
        alternatives=[
            "Keep the stored confidence unchanged: rejected, evidence ages and "
            "unrefreshed understanding fades",
            "Reset the concept to untested: rejected, past evidence still carries "
            "weight until re-verified",
        ],
        confidence=_clamp(decayed),
    )


def _explain_contested(
    ctx: Mapping[str, Any], history: Sequence[VerificationEvent], params: TrustParameters,
) -> Explanation:
    concept_id = ctx.get("concept_id")
    live = [e for e in history if not e.retracted]
    counts = _result_counts(live) if live else {
        "demonstrated": int(_number(ctx.get("demonstrated_count"))),
        "partial": int(_number(ctx.get("partial_count"))),
        "failed": int(_number(ctx.get("failed_count"))),
    }
    success = counts["demonstrated"] + counts["partial"] * params.partial_weight
    total = success + counts["failed"]
    ratio = success / total if total > 0 else 0.0
    scored = compute_trust_from_history(live, None, params).confidence if live else ratio
    confidence = _number(ctx.get("confidence"), default=scored)

    reasoning = (
        f'Concept "{concept_id}" is contested: {counts["demonstrated"]} demonstrated, '
        f'{counts["partial"]} partial and {counts["failed"]} failed verification events. '
        f"The success share is {_fmt(ratio)} and the scored confidence is {_fmt(confidence)}. "
        f"The person has shown the concept in some contexts and failed it in others, "
        f"which marks the boundary of their understanding."
    )
    return Explanation(
        reasoning=reasoning,
        trust_inputs={"concept_id": concept_id, **counts, "success_share": ratio},
        alternatives=[
            "Trust only the most recent outcome: rejected, scoring is order-independent "
            "and every outcome counts",
            "Treat the concept as verified: rejected, at least one failure is on record",
            "Treat the concept as untested: rejected, at least one success is on record",
        ],
        confidence=_clamp(confidence),
    )


def _explain_calibration(
    ctx: Mapping[str, Any], history: Sequence[VerificationEvent], params: TrustParameters,
) -> Explanation:
    metric = ctx.get("metric") or "unknown metric"
    value = _number(ctx.get("value"))

    reasoning = (
        f"Calibration analysis found {metric} at {_fmt(value)}. The engine compares "
        f"self-reported confidence and its own predictions with the evidence to audit "
        f"model quality. High bias or surprise rates mean more evidence is needed."
    )
    return Explanation(
        reasoning=reasoning,
        trust_inputs={"metric": metric, "value": value},
        alternatives=[
            f"Attribute the {metric} value to noise: rejected, it is computed over every "
            f"non-retracted claim and verification",
            "Adjust trust levels from claims: rejected, claims never change trust, only "
            "calibration",
        ],
        confidence=_clamp(value),
    )


_BUILDERS: dict[DecisionType, Callable[..., Explanation]] = {
    DecisionType.TRUST_UPDATE: _explain_trust_update,
    DecisionType.PROPAGATION_RESULT: _explain_propagation,
    DecisionType.DECAY_RESULT: _explain_decay,
    DecisionType.CONTESTED_DETECTION: _explain_contested,
    DecisionType.CALIBRATION_FINDING: _explain_calibration,
}


_LEVEL_RATIONALE: dict[TrustLevel | None, str] = {
    TrustLevel.VERIFIED: "At least one successful demonstration and no failures.",
    TrustLevel.CONTESTED: "Both successful and failed results exist: the boundary of understanding.",
    TrustLevel.INFERRED: "Trust was inferred from related concepts, not directly demonstrated.",
    TrustLevel.UNTESTED: "No successful demonstrations remain on record.",
}


# --- Helpers ------------------------------------------------------------------

def _trust_update_alternatives(level: TrustLevel | None, counts: dict[str, int]) -> list[str]:
    alternatives = [
        "Use self-reported claims as evidence: rejected, claims only feed calibration",
    ]
    if level == TrustLevel.VERIFIED:
        alternatives.append(
            "Classify as inferred: rejected, there is direct evidence for this concept",
        )
    elif level == TrustLevel.CONTESTED:
        alternatives.append(
            f"Keep the concept verified: rejected, {counts['failed']} failure(s) recorded",
        )
    elif level == TrustLevel.INFERRED:
        alternatives.append(
            "Classify as verified: rejected, no direct verification exists",
        )
    else:
        alternatives.append(
            "Keep the previous level: rejected, no supporting evidence remains",
        )
    return alternatives


def _result_counts(events: Sequence[VerificationEvent]) -> dict[str, int]:
    return {
        result.value: sum(1 for e in events if e.result == result)
        for result in VerificationResult
    }


def _level(raw: object) -> TrustLevel | None:
    try:
        return TrustLevel(raw)
    except ValueError:
        return None


def _number(raw: object, default: float = 0.0) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return default
    return float(raw)


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def _fmt(value: float, digits: int = 3) -> str:
    return f"{value:.{digits}f}"
