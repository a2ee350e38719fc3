"""Contradiction and confidence schemas."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ContradictionType(str, Enum):
    """How supporting and contradicting evidence relate."""

    NONE = "none"
    TEMPORAL_SHIFT = "temporal_shift"
    SCOPE_DIFFERENCE = "scope_difference"
    HARD = "hard"


class PreferredStance(str, Enum):
    SUPPORTS = "supports"
    CONTRADICTS = "contradicts"
    UNCERTAIN = "uncertain"


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SourceAgreement(str, Enum):
    NONE = "none"
    STRONG = "strong"
    PARTIAL = "partial"
    CONFLICTING = "conflicting"


class Resolution(BaseModel):
    """Which side of a disagreement the engine leans to, and by how much."""

    preferred_stance: PreferredStance
    confidence: ConfidenceLevel
    reasoning: str
    score_cap: Optional[int] = Field(default=None, ge=0, le=100)


class ContradictionAssessment(BaseModel):
    """Weighted comparison of supporting and contradicting evidence."""

    has_contradiction: bool
    contradiction_type: ContradictionType
    contradiction_score: int = Field(..., ge=0, le=100)
    supporting_count: int = 0
    contradicting_count: int = 0
    supporting_year: Optional[float] = Field(
        default=None, description="Mean as-of year of supporting sources"
    )
    contradicting_year: Optional[float] = Field(
        default=None, description="Mean as-of year of contradicting sources"
    )
    resolution: Resolution

    @property
    def is_hard(self) -> bool:
        return self.contradiction_type == ContradictionType.HARD


class ConfidenceFactors(BaseModel):
    """Evidence summary the confidence scorer reasons over."""

    official_source_count: int = Field(default=0, ge=0)
    major_news_source_count: int = Field(default=0, ge=0)
    total_sources: int = Field(default=0, ge=0)
    source_agreement: SourceAgreement = SourceAgreement.NONE
    has_recent_confirmation: bool = False
    has_contradictions: bool = False
    only_weak_sources: bool = False
    time_sensitive: bool = True


class ConfidenceAdjustment(BaseModel):
    """One rule that moved the confidence, in the order it was applied."""

    delta: float
    reason: str


class ConfidenceResult(BaseModel):
    """Final confidence with an audit trail of adjustments."""

    confidence: float = Field(..., ge=0.0, le=1.0)
    level: ConfidenceLevel
    adjustments: list[ConfidenceAdjustment] = Field(default_factory=list)
    score_cap: Optional[int] = Field(default=None, ge=0, le=100)

    @property
    def reasons(self) -> list[str]:
        return [a.reason for a in self.adjustments]
