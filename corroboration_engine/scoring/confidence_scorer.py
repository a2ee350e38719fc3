"""Dynamic Confidence Scorer.

Starts from 0.5 and applies ordered additive rules. Every rule that fires
appends an entry to the audit trail; rules that cap the user-facing score
record the cap as well (the strictest cap wins).

Confidence is clamped to [0.05, 0.98].
Levels: >=0.75 high, >=0.45 medium, else low.
"""

from dataclasses import dataclass, field
from typing import Optional

from corroboration_engine.config.logging import get_logger
from corroboration_engine.schemas.assessment_schema import (
    ConfidenceAdjustment,
    ConfidenceFactors,
    ConfidenceLevel,
    ConfidenceResult,
    SourceAgreement,
)

logger = get_logger("confidence_scorer")

BASE_CONFIDENCE = 0.5
MIN_CONFIDENCE = 0.05
MAX_CONFIDENCE = 0.98
NO_SOURCES_CONFIDENCE = 0.15

HIGH_LEVEL_THRESHOLD = 0.75
MEDIUM_LEVEL_THRESHOLD = 0.45

CONTRADICTION_CAP = 55
CONFLICTING_CAP = 50
WEAK_SOURCES_CAP = 60
NO_SOURCES_CAP = 40
SINGLE_SOURCE_CAP = 70


@dataclass
class _Tally:
    """Running confidence while rules are applied."""

    confidence: float = BASE_CONFIDENCE
    adjustments: list[ConfidenceAdjustment] = field(default_factory=list)
    score_cap: Optional[int] = None

    def adjust(self, delta: float, reason: str) -> None:
        self.confidence += delta
        self.adjustments.append(ConfidenceAdjustment(delta=delta, reason=reason))

    def force(self, value: float, reason: str) -> None:
        self.adjustments.append(
            ConfidenceAdjustment(delta=round(value - self.confidence, 4), reason=reason)
        )
        self.confidence = value

    def cap(self, value: int) -> None:
        self.score_cap = value if self.score_cap is None else min(self.score_cap, value)


def confidence_level(confidence: float) -> ConfidenceLevel:
    if confidence >= HIGH_LEVEL_THRESHOLD:
        return ConfidenceLevel.HIGH
    if confidence >= MEDIUM_LEVEL_THRESHOLD:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


class DynamicConfidenceScorer:
    """Turns evidence factors into a confidence score, level and score cap."""

    def score(self, factors: ConfidenceFactors) -> ConfidenceResult:
        tally = _Tally()

        if factors.official_source_count >= 2:
            tally.adjust(0.25, "+0.25: Multiple official sources confirm")
        elif factors.official_source_count == 1:
            tally.adjust(0.15, "+0.15: Official source confirms")

        if factors.major_news_source_count >= 2:
            tally.adjust(0.15, "+0.15: Multiple major news sources confirm")
        elif factors.major_news_source_count == 1:
            tally.adjust(0.08, "+0.08: Major news source confirms")

        if factors.source_agreement == SourceAgreement.STRONG and factors.total_sources >= 3:
            tally.adjust(0.12, "+0.12: Strong source agreement")

        if factors.has_recent_confirmation:
            tally.adjust(0.08, "+0.08: Recent (current year) confirmation")

        if factors.has_contradictions:
            tally.adjust(-0.25, "-0.25: Sources contradict each other")
            tally.cap(CONTRADICTION_CAP)

        if factors.source_agreement == SourceAgreement.CONFLICTING:
            tally.adjust(-0.20, "-0.20: Conflicting evidence")
            tally.cap(CONFLICTING_CAP)

        if factors.only_weak_sources and factors.total_sources > 0:
            tally.adjust(-0.15, "-0.15: Only weak/indirect sources")
            tally.cap(WEAK_SOURCES_CAP)

        if factors.total_sources == 0:
            tally.force(NO_SOURCES_CONFIDENCE, "=0.15: No reliable sources found")
            tally.cap(NO_SOURCES_CAP)
        elif factors.total_sources == 1:
            tally.adjust(-0.10, "-0.10: Single source only")
            tally.cap(SINGLE_SOURCE_CAP)

        if (
            factors.time_sensitive
            and not factors.has_recent_confirmation
            and factors.total_sources > 0
        ):
            tally.adjust(-0.12, "-0.12: No recent confirmation for time-sensitive claim")

        confidence = round(min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, tally.confidence)), 4)
        result = ConfidenceResult(
            confidence=confidence,
            level=confidence_level(confidence),
            adjustments=tally.adjustments,
            score_cap=tally.score_cap,
        )
        logger.debug(
            f"Confidence {result.confidence:.2f} ({result.level.value}), "
            f"cap={result.score_cap}, rules={len(result.adjustments)}"
        )
        return result
