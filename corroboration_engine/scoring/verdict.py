"""Final verdict, capped score and display status.

The oracle's draft verdict is a starting point only. The final score never
exceeds any cap raised by the resolver or the confidence scorer, and the
verdict is pulled down to match a capped score.
"""

from typing import Optional

from corroboration_engine.schemas.assessment_schema import (
    ConfidenceLevel,
    ConfidenceResult,
    ContradictionAssessment,
    PreferredStance,
)
from corroboration_engine.schemas.result_schema import (
    ConflictExplanation,
    DisplayStatus,
    StanceCounts,
    Verdict,
)
from corroboration_engine.schemas.claim_schema import CriticalFactCheck
from corroboration_engine.schemas.source_schema import NormalizedSource, Stance

# (minimum score, verdict), highest band first
SCORE_BANDS: tuple[tuple[int, Verdict], ...] = (
    (85, Verdict.TRUE),
    (70, Verdict.MOSTLY_TRUE),
    (45, Verdict.MIXED),
    (30, Verdict.MOSTLY_FALSE),
    (0, Verdict.FALSE),
)


def verdict_for_score(score: int) -> Verdict:
    for minimum, verdict in SCORE_BANDS:
        if score >= minimum:
            return verdict
    return Verdict.FALSE


def count_stances(sources: list[NormalizedSource]) -> StanceCounts:
    counts = StanceCounts()
    for source in sources:
        if source.effective_stance == Stance.CORROBORATING:
            counts.corroborating += 1
        elif source.effective_stance == Stance.CONTRADICTING:
            counts.contradicting += 1
        else:
            counts.neutral += 1
    return counts


def capped_score(
    draft_score: int,
    confidence: ConfidenceResult,
    assessment: ContradictionAssessment,
) -> int:
    """Draft score limited by every cap that fired."""
    caps = [
        cap
        for cap in (confidence.score_cap, assessment.resolution.score_cap)
        if cap is not None
    ]
    return max(0, min([draft_score, *caps]))


def decide_verdict(
    draft_verdict: Optional[Verdict],
    score: int,
    assessment: ContradictionAssessment,
    confidence: ConfidenceResult,
    counts: StanceCounts,
) -> Verdict:
    """
    Final verdict.

    - No sources: UNCERTAIN
    - Unresolved hard contradiction or neutral-only coverage: UNCERTAIN
    - Otherwise the draft verdict, lowered to the capped score's band
    - Evidence that prefers the contradicting side can never read as true
    """
    if counts.total == 0:
        return Verdict.UNCERTAIN
    preferred = assessment.resolution.preferred_stance
    if preferred == PreferredStance.UNCERTAIN:
        return Verdict.UNCERTAIN

    verdict = draft_verdict or verdict_for_score(score)
    banded = verdict_for_score(score)
    if verdict.positivity > banded.positivity:
        verdict = banded

    if preferred == PreferredStance.CONTRADICTS and verdict.positivity >= Verdict.MIXED.positivity:
        verdict = Verdict.FALSE if confidence.level == ConfidenceLevel.HIGH else Verdict.MOSTLY_FALSE
    return verdict


def display_status(assessment: ContradictionAssessment, counts: StanceCounts) -> DisplayStatus:
    """Status shown to users; zero sources always reads as limited."""
    if counts.total == 0:
        return DisplayStatus.LIMITED
    preferred = assessment.resolution.preferred_stance
    if preferred == PreferredStance.SUPPORTS:
        return DisplayStatus.CONFIRMED
    if preferred == PreferredStance.CONTRADICTS:
        return DisplayStatus.CONTRADICTED
    return DisplayStatus.UNCERTAIN


def explain_conflict(
    assessment: ContradictionAssessment,
    critical: CriticalFactCheck,
) -> ConflictExplanation:
    notes = [assessment.resolution.reasoning]
    if critical.has_conflict and critical.conflict_details not in assessment.resolution.reasoning:
        notes.append(critical.conflict_details)
    return ConflictExplanation(
        has_conflict=assessment.has_contradiction or critical.has_conflict,
        contradiction_type=assessment.contradiction_type,
        note=". ".join(notes),
    )


def score_ceiling(verdict: Verdict) -> int:
    """Highest score consistent with a negative verdict (100 otherwise)."""
    if verdict == Verdict.FALSE:
        return 29
    if verdict == Verdict.MOSTLY_FALSE:
        return 44
    return 100
