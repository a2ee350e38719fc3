"""Claim-side schemas: temporal signals, critical facts and the oracle request."""

from datetime import date
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field


class ReferenceType(str, Enum):
    """Kind of time reference detected in a claim."""

    CURRENT = "current"
    PAST = "past"
    FUTURE = "future"
    SPECIFIC_YEAR = "specific_year"
    RELATIVE = "relative"
    NONE = "none"


class TemporalSignal(BaseModel):
    """Time-sensitivity read from the claim text.

    ``target_year`` comes from an explicit year when one is present, from a
    relative phrase ("last year") otherwise.
    """

    has_temporal_reference: bool = False
    reference_type: ReferenceType = ReferenceType.NONE
    target_year: Optional[int] = None
    is_time_sensitive: bool = False
    requires_recent_sources: bool = False
    detected_references: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class CriticalFact(BaseModel):
    """A known officeholder and the period they held the role."""

    subject: str
    role: str
    entity: str
    valid_from: date
    valid_until: Union[Literal["present"], date] = "present"
    source: str = ""

    model_config = {"frozen": True}

    @property
    def is_open_ended(self) -> bool:
        return self.valid_until == "present"

    def holds_on(self, on: date) -> bool:
        """Whether the role was held on the given day."""
        if on < self.valid_from:
            return False
        return self.is_open_ended or on <= self.valid_until


class CriticalFactCheck(BaseModel):
    """Result of comparing a claim against the critical-facts table."""

    has_conflict: bool = False
    conflict_details: Optional[str] = None
    matched_facts: list[CriticalFact] = Field(default_factory=list)
    stale_claim_notes: list[str] = Field(default_factory=list)
    requires_enhanced_verification: bool = False


class ClaimContext(BaseModel):
    """The claim under evaluation and the reference date.

    Blank text is accepted; the analysers treat it as carrying no signal.
    """

    text: str = Field(..., description="Claim text as submitted")
    now_date: date


class EvidenceRequest(BaseModel):
    """Everything the evidence oracle needs to research one claim."""

    claim: ClaimContext
    temporal: TemporalSignal
    critical_facts: CriticalFactCheck
    enhanced_mode: bool = Field(
        default=False,
        description="Ask for fresh, primary sources because the claim is time-sensitive or touches known facts",
    )
    annotations: list[str] = Field(
        default_factory=list,
        description="Plain-language hints prepended to the oracle prompt",
    )
