"""Oracle payload and final engine result schemas."""

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from corroboration_engine.schemas.assessment_schema import (
    ConfidenceResult,
    ContradictionType,
)
from corroboration_engine.schemas.claim_schema import CriticalFactCheck, TemporalSignal
from corroboration_engine.schemas.source_schema import (
    LiveLinkStatus,
    NormalizedSource,
    RawCandidate,
)


class Verdict(str, Enum):
    """Verdict scale, most positive first."""

    TRUE = "TRUE"
    MOSTLY_TRUE = "MOSTLY_TRUE"
    MIXED = "MIXED"
    UNCERTAIN = "UNCERTAIN"
    MOSTLY_FALSE = "MOSTLY_FALSE"
    FALSE = "FALSE"

    @property
    def positivity(self) -> int:
        """Higher means the verdict leans further towards true."""
        return _POSITIVITY[self]

    @classmethod
    def parse(cls, value: Any) -> Optional["Verdict"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            return None


_POSITIVITY = {
    Verdict.TRUE: 5,
    Verdict.MOSTLY_TRUE: 4,
    Verdict.MIXED: 3,
    Verdict.UNCERTAIN: 3,
    Verdict.MOSTLY_FALSE: 2,
    Verdict.FALSE: 1,
}


class DisplayStatus(str, Enum):
    CONFIRMED = "confirmed"
    CONTRADICTED = "contradicted"
    UNCERTAIN = "uncertain"
    LIMITED = "limited"


class OraclePayload(BaseModel):
    """Evidence payload after shape detection, before normalization."""

    draft_verdict: Optional[Verdict] = None
    draft_score: int = Field(default=50, ge=0, le=100)
    summary: Optional[str] = None
    best_links: list[RawCandidate] = Field(default_factory=list)
    sources: list[RawCandidate] = Field(default_factory=list)


class StanceCounts(BaseModel):
    """Counters derived from the sources actually returned."""

    corroborating: int = 0
    neutral: int = 0
    contradicting: int = 0

    @property
    def total(self) -> int:
        return self.corroborating + self.neutral + self.contradicting


class ConflictExplanation(BaseModel):
    has_conflict: bool = False
    contradiction_type: ContradictionType = ContradictionType.NONE
    note: str = ""


class EngineResult(BaseModel):
    """Everything the engine concluded about one claim."""

    claim: str
    evaluated_on: date
    verdict: Verdict
    score: int = Field(..., ge=0, le=100)
    status: DisplayStatus
    confidence: ConfidenceResult
    best_links: list[NormalizedSource] = Field(default_factory=list)
    sources: list[NormalizedSource] = Field(default_factory=list)
    stance_counts: StanceCounts = Field(default_factory=StanceCounts)
    conflict: ConflictExplanation = Field(default_factory=ConflictExplanation)
    temporal: TemporalSignal
    critical_facts: CriticalFactCheck
    link_checks: list[LiveLinkStatus] = Field(default_factory=list)
    summary: Optional[str] = None
    degraded_reason: Optional[str] = Field(
        default=None,
        description="Set when evidence could not be gathered",
    )
