"""Builds the annotated evidence request sent to the oracle."""

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Optional

from corroboration_engine.analysis.critical_fact_checker import CriticalFactChecker
from corroboration_engine.analysis.temporal_interpreter import TemporalInterpreter
from corroboration_engine.schemas.claim_schema import (
    ClaimContext,
    EvidenceRequest,
    ReferenceType,
)


def build_evidence_request(
    claim_text: str,
    now_date: date,
    interpreter: Optional[TemporalInterpreter] = None,
    checker: Optional[CriticalFactChecker] = None,
) -> EvidenceRequest:
    """
    Run both claim analysers and fold their findings into one request.

    The analysers share no state, so they run side by side.

    Args:
        claim_text: Claim under evaluation
        now_date: Injected reference date
        interpreter: Temporal interpreter (default tables when omitted)
        checker: Critical fact checker (default tables when omitted)

    Returns:
        EvidenceRequest with temporal and critical-fact annotations
    """
    interpreter = interpreter or TemporalInterpreter()
    checker = checker or CriticalFactChecker()

    with ThreadPoolExecutor(max_workers=2) as pool:
        temporal_future = pool.submit(interpreter.interpret, claim_text, now_date)
        facts_future = pool.submit(checker.check, claim_text, now_date)
        temporal = temporal_future.result()
        facts = facts_future.result()

    annotations = []
    if temporal.requires_recent_sources:
        markers = ", ".join(temporal.detected_references)
        label = f"Time-sensitive claim ({markers})" if markers else "Time-sensitive claim"
        annotations.append(
            f"{label}: prefer sources published in {now_date.year - 1} or "
            f"{now_date.year} and note each source's date."
        )
    if temporal.reference_type == ReferenceType.SPECIFIC_YEAR and temporal.target_year:
        annotations.append(
            f"Claim refers to {temporal.target_year}: judge it against that period, "
            f"not the present."
        )
    if facts.has_conflict:
        annotations.append(
            f"Known fact conflict: {facts.conflict_details}. Verify with official sources."
        )
    for fact in facts.matched_facts:
        if fact.holds_on(now_date):
            annotations.append(
                f"Known fact: {fact.subject} has been {fact.role} of {fact.entity} "
                f"since {fact.valid_from.isoformat()}."
            )
    annotations.extend(facts.stale_claim_notes)

    return EvidenceRequest(
        claim=ClaimContext(text=claim_text, now_date=now_date),
        temporal=temporal,
        critical_facts=facts,
        enhanced_mode=temporal.requires_recent_sources or facts.requires_enhanced_verification,
        annotations=annotations,
    )
