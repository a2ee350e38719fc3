"""Weighted Contradiction Resolver.

Weighs supporting evidence (corroborating plus discounted neutral
coverage) against contradicting evidence by trust tier and decides what
kind of disagreement it is.

Tier weights:
- high (official): 3.0
- medium (major news): 2.0
- low (other): 1.0

Weighted score = 100 * contradict / (support + contradict), boosted x1.5
when official sources sit on both sides or else x1.25 when major news does,
clamped to 100.

Disagreement types:
- temporal_shift: sides are dated at least a year apart and the claim is
  about the present; the more recent side wins
- scope_difference: the claim targets a specific past year, the supporting
  sources are dated to it and the contradicting ones are not
- hard: genuine disagreement

Usage:
    resolver = WeightedContradictionResolver()
    assessment = resolver.assess(sources, temporal_signal)
"""

from statistics import mean
from typing import Optional

from corroboration_engine.config.logging import get_logger
from corroboration_engine.config.settings import settings
from corroboration_engine.schemas.assessment_schema import (
    ConfidenceLevel,
    ContradictionAssessment,
    ContradictionType,
    PreferredStance,
    Resolution,
)
from corroboration_engine.schemas.claim_schema import (
    CriticalFactCheck,
    ReferenceType,
    TemporalSignal,
)
from corroboration_engine.schemas.source_schema import NormalizedSource, Stance, TrustTier

logger = get_logger("contradiction_resolver")

TIER_WEIGHTS: dict[TrustTier, float] = {
    TrustTier.HIGH: 3.0,
    TrustTier.MEDIUM: 2.0,
    TrustTier.LOW: 1.0,
}

BOTH_SIDES_OFFICIAL_BOOST = 1.5
BOTH_SIDES_MAJOR_NEWS_BOOST = 1.25

HARD_CONTRADICTION_CAP = 55
OFFICIAL_STANDOFF_CAP = 40
CRITICAL_CONFLICT_CAP = 40
CRITICAL_CONFLICT_OFFICIAL_CAP = 25


class WeightedContradictionResolver:
    """
    Classifies disagreement between supporting and contradicting sources.

    Args:
        neutral_support_weight: Fraction of a tier weight credited to
            neutral sources on the supporting side
        hard_threshold: Weighted score above which a hard contradiction
            is left unresolved
    """

    def __init__(
        self,
        neutral_support_weight: float = settings.neutral_support_weight,
        hard_threshold: int = settings.hard_contradiction_threshold,
    ):
        self.neutral_support_weight = neutral_support_weight
        self.hard_threshold = hard_threshold

    def assess(
        self,
        sources: list[NormalizedSource],
        temporal: TemporalSignal,
        critical: Optional[CriticalFactCheck] = None,
    ) -> ContradictionAssessment:
        supporting = [s for s in sources if s.effective_stance != Stance.CONTRADICTING]
        contradicting = [s for s in sources if s.effective_stance == Stance.CONTRADICTING]
        score = self.weighted_score(supporting, contradicting)

        base = dict(
            contradiction_score=score,
            supporting_count=len(supporting),
            contradicting_count=len(contradicting),
            supporting_year=_mean_year(supporting),
            contradicting_year=_mean_year(contradicting),
        )

        if not contradicting:
            return ContradictionAssessment(
                has_contradiction=False,
                contradiction_type=ContradictionType.NONE,
                resolution=self._uncontested(supporting),
                **base,
            )

        if not supporting:
            confidence = (
                ConfidenceLevel.HIGH
                if any(s.trust_tier != TrustTier.LOW for s in contradicting)
                else ConfidenceLevel.MEDIUM
            )
            return ContradictionAssessment(
                has_contradiction=False,
                contradiction_type=ContradictionType.NONE,
                resolution=Resolution(
                    preferred_stance=PreferredStance.CONTRADICTS,
                    confidence=confidence,
                    reasoning=f"All {len(contradicting)} sources contradict the claim",
                ),
                **base,
            )

        shift = self._temporal_shift(supporting, contradicting, temporal, base)
        if shift is not None:
            return shift

        scope = self._scope_difference(supporting, contradicting, temporal, base)
        if scope is not None:
            return scope

        resolution = self._resolve_hard(supporting, contradicting, score, critical)
        logger.info(
            f"Hard contradiction: score={score}, preferred={resolution.preferred_stance.value}, "
            f"cap={resolution.score_cap}"
        )
        return ContradictionAssessment(
            has_contradiction=True,
            contradiction_type=ContradictionType.HARD,
            resolution=resolution,
            **base,
        )

    # ── Weighting ───────────────────────────────────────────────────────

    def support_weight(self, source: NormalizedSource) -> float:
        weight = TIER_WEIGHTS[source.trust_tier]
        if source.effective_stance == Stance.NEUTRAL:
            weight *= self.neutral_support_weight
        return weight

    def weighted_score(
        self,
        supporting: list[NormalizedSource],
        contradicting: list[NormalizedSource],
    ) -> int:
        """Trust-weighted share of contradicting evidence, 0-100."""
        if not contradicting:
            return 0
        support = sum(self.support_weight(s) for s in supporting)
        contradict = sum(TIER_WEIGHTS[s.trust_tier] for s in contradicting)
        if support <= 0:
            return 100

        score = 100 * contradict / (support + contradict)
        if _has_tier(supporting, TrustTier.HIGH) and _has_tier(contradicting, TrustTier.HIGH):
            score *= BOTH_SIDES_OFFICIAL_BOOST
        elif _has_tier(supporting, TrustTier.MEDIUM) and _has_tier(contradicting, TrustTier.MEDIUM):
            score *= BOTH_SIDES_MAJOR_NEWS_BOOST
        return round(min(100.0, score))

    # ── Classification ──────────────────────────────────────────────────

    def _uncontested(self, supporting: list[NormalizedSource]) -> Resolution:
        corroborating = [s for s in supporting if s.effective_stance == Stance.CORROBORATING]
        if corroborating:
            confidence = (
                ConfidenceLevel.HIGH
                if any(s.trust_tier != TrustTier.LOW for s in corroborating)
                else ConfidenceLevel.MEDIUM
            )
            return Resolution(
                preferred_stance=PreferredStance.SUPPORTS,
                confidence=confidence,
                reasoning=f"{len(corroborating)} sources support the claim and none contradict it",
            )
        if supporting:
            return Resolution(
                preferred_stance=PreferredStance.UNCERTAIN,
                confidence=ConfidenceLevel.LOW,
                reasoning="Sources cover the topic without confirming or refuting the claim",
            )
        return Resolution(
            preferred_stance=PreferredStance.UNCERTAIN,
            confidence=ConfidenceLevel.LOW,
            reasoning="No usable sources were found",
        )

    def _temporal_shift(self, supporting, contradicting, temporal, base):
        if temporal.reference_type != ReferenceType.CURRENT:
            return None
        support_year, contradict_year = base["supporting_year"], base["contradicting_year"]
        if support_year is None or contradict_year is None:
            return None
        if abs(support_year - contradict_year) < 1:
            return None

        if contradict_year > support_year:
            preferred, recent_side = PreferredStance.CONTRADICTS, contradicting
        else:
            preferred, recent_side = PreferredStance.SUPPORTS, supporting
        confidence = (
            ConfidenceLevel.HIGH if _has_tier(recent_side, TrustTier.HIGH) else ConfidenceLevel.MEDIUM
        )
        newer, older = max(support_year, contradict_year), min(support_year, contradict_year)
        logger.info(f"Temporal shift: {older:.0f} vs {newer:.0f}, preferring {preferred.value}")
        return ContradictionAssessment(
            has_contradiction=True,
            contradiction_type=ContradictionType.TEMPORAL_SHIFT,
            resolution=Resolution(
                preferred_stance=preferred,
                confidence=confidence,
                reasoning=(
                    f"Sources disagree because they describe different times: "
                    f"evidence from around {newer:.0f} supersedes evidence from around "
                    f"{older:.0f}"
                ),
            ),
            **base,
        )

    def _scope_difference(self, supporting, contradicting, temporal, base):
        target = temporal.target_year
        if target is None or temporal.reference_type not in (
            ReferenceType.SPECIFIC_YEAR,
            ReferenceType.PAST,
            ReferenceType.RELATIVE,
        ):
            return None
        support_years = {s.as_of_year for s in supporting if s.as_of_year is not None}
        contradict_years = {s.as_of_year for s in contradicting if s.as_of_year is not None}
        if target not in support_years or not contradict_years or target in contradict_years:
            return None

        return ContradictionAssessment(
            has_contradiction=True,
            contradiction_type=ContradictionType.SCOPE_DIFFERENCE,
            resolution=Resolution(
                preferred_stance=PreferredStance.SUPPORTS,
                confidence=ConfidenceLevel.MEDIUM,
                reasoning=(
                    f"Contradicting sources describe other periods "
                    f"({', '.join(str(y) for y in sorted(contradict_years))}) than the "
                    f"claim's {target}"
                ),
            ),
            **base,
        )

    def _resolve_hard(self, supporting, contradicting, score, critical) -> Resolution:
        if score > self.hard_threshold:
            cap = HARD_CONTRADICTION_CAP
            if _has_tier(supporting, TrustTier.HIGH) and _has_tier(contradicting, TrustTier.HIGH):
                cap = OFFICIAL_STANDOFF_CAP
            reasoning = f"Reliable sources disagree (weighted contradiction {score}/100)"
            if critical is not None and critical.has_conflict:
                cap = (
                    CRITICAL_CONFLICT_OFFICIAL_CAP
                    if _has_tier(contradicting, TrustTier.HIGH)
                    else min(cap, CRITICAL_CONFLICT_CAP)
                )
                reasoning += f"; {critical.conflict_details}"
            return Resolution(
                preferred_stance=PreferredStance.UNCERTAIN,
                confidence=ConfidenceLevel.LOW,
                reasoning=reasoning,
                score_cap=cap,
            )

        support = sum(self.support_weight(s) for s in supporting)
        contradict = sum(TIER_WEIGHTS[s.trust_tier] for s in contradicting)
        preferred = PreferredStance.SUPPORTS if support >= contradict else PreferredStance.CONTRADICTS
        return Resolution(
            preferred_stance=preferred,
            confidence=ConfidenceLevel.MEDIUM,
            reasoning=(
                f"Minor disagreement (weighted contradiction {score}/100); "
                f"the weight of evidence {preferred.value} the claim"
            ),
        )


def _has_tier(sources: list[NormalizedSource], tier: TrustTier) -> bool:
    return any(s.trust_tier == tier for s in sources)


def _mean_year(sources: list[NormalizedSource]) -> Optional[float]:
    years = [s.as_of_year for s in sources if s.as_of_year is not None]
    return mean(years) if years else None
