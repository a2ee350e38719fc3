"""Pydantic schemas shared by every engine component."""

from corroboration_engine.schemas.assessment_schema import (
    ConfidenceAdjustment,
    ConfidenceFactors,
    ConfidenceLevel,
    ConfidenceResult,
    ContradictionAssessment,
    ContradictionType,
    PreferredStance,
    Resolution,
    SourceAgreement,
)
from corroboration_engine.schemas.claim_schema import (
    ClaimContext,
    CriticalFact,
    CriticalFactCheck,
    EvidenceRequest,
    ReferenceType,
    TemporalSignal,
)
from corroboration_engine.schemas.result_schema import (
    ConflictExplanation,
    DisplayStatus,
    EngineResult,
    OraclePayload,
    StanceCounts,
    Verdict,
)
from corroboration_engine.schemas.source_schema import (
    LegacyCandidate,
    LinkStatus,
    LiveLinkStatus,
    NormalizedSource,
    ProCandidate,
    RawCandidate,
    Stance,
    TrustTier,
)

__all__ = [
    "ClaimContext",
    "ConfidenceAdjustment",
    "ConfidenceFactors",
    "ConfidenceLevel",
    "ConfidenceResult",
    "ConflictExplanation",
    "ContradictionAssessment",
    "ContradictionType",
    "CriticalFact",
    "CriticalFactCheck",
    "DisplayStatus",
    "EngineResult",
    "EvidenceRequest",
    "LegacyCandidate",
    "LinkStatus",
    "LiveLinkStatus",
    "NormalizedSource",
    "OraclePayload",
    "PreferredStance",
    "ProCandidate",
    "RawCandidate",
    "ReferenceType",
    "Resolution",
    "SourceAgreement",
    "Stance",
    "StanceCounts",
    "TemporalSignal",
    "TrustTier",
    "Verdict",
]
