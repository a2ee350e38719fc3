"""Evidence source schemas: raw oracle candidates and canonical records.

Raw candidates come in two shapes and form a closed union tagged by the
fields present:

- ProCandidate: ``title`` / ``whyItMatters`` / ``stance`` per source, with
  optional ``articleUrl`` and ``canonicalUrl`` alternatives to ``url``.
- LegacyCandidate: ``name`` / ``snippet`` grouped into stance buckets by the
  caller instead of tagged one by one.

Both are converted to NormalizedSource by the SourceNormalizer and nothing
downstream looks at raw candidates again.
"""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class TrustTier(str, Enum):
    """Coarse reliability class of a source."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank, 0 is the most trusted."""
        return _TIER_RANKS[self]

    @classmethod
    def parse(cls, value: Any) -> Optional["TrustTier"]:
        """Parse a loosely-typed tier value, returning None when unusable."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        return _TIER_ALIASES.get(value.strip().lower())


_TIER_RANKS = {TrustTier.HIGH: 0, TrustTier.MEDIUM: 1, TrustTier.LOW: 2}

_TIER_ALIASES = {
    "high": TrustTier.HIGH,
    "official": TrustTier.HIGH,
    "medium": TrustTier.MEDIUM,
    "major_news": TrustTier.MEDIUM,
    "low": TrustTier.LOW,
    "other": TrustTier.LOW,
}


class Stance(str, Enum):
    """Position of a source relative to the claim."""

    CORROBORATING = "corroborating"
    NEUTRAL = "neutral"
    CONTRADICTING = "contradicting"

    @classmethod
    def parse(cls, value: Any) -> Optional["Stance"]:
        """Parse a loosely-typed stance value, returning None when unusable."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        return _STANCE_ALIASES.get(value.strip().lower())


_STANCE_ALIASES = {
    "corroborating": Stance.CORROBORATING,
    "corroborate": Stance.CORROBORATING,
    "corroborated": Stance.CORROBORATING,
    "supports": Stance.CORROBORATING,
    "support": Stance.CORROBORATING,
    "neutral": Stance.NEUTRAL,
    "unclear": Stance.NEUTRAL,
    "constrained": Stance.NEUTRAL,
    "contradicting": Stance.CONTRADICTING,
    "contradict": Stance.CONTRADICTING,
    "contradicts": Stance.CONTRADICTING,
    "refutes": Stance.CONTRADICTING,
}


class LinkStatus(str, Enum):
    """How a best-link slot was filled."""

    VERIFIED = "verified"  # original pick, confirmed live
    REPLACEMENT = "replacement"  # backfilled from the pool, confirmed live
    UNCHECKED = "unchecked"  # live checking disabled


def _clean_text(value: Any) -> Optional[str]:
    """Coerce scalar values to stripped text; drop containers and blanks."""
    if value is None or isinstance(value, (dict, list, tuple, set, bool)):
        return None
    text = str(value).strip()
    return text or None


def _clean_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


# Keys the oracle has used for a source's publication date
_DATE_KEYS = ("publishedAt", "published", "publishedDate", "date", "year", "asOf")


class _CandidateBase(BaseModel):
    """Shared lenient parsing for oracle candidates."""

    url: Optional[str] = None
    trust_tier: Optional[TrustTier] = Field(default=None, alias="trustTier")
    stance: Optional[Stance] = None
    score: Optional[float] = Field(
        default=None,
        description="Numeric credibility, 0-100 or a 0-1 fraction",
    )
    published: Optional[str] = Field(
        default=None,
        description="Publication date or year, any textual form",
    )

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def collect_published(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("published") is None:
            for key in _DATE_KEYS:
                if data.get(key) is not None:
                    data = {**data, "published": data[key]}
                    break
        return data

    @field_validator("trust_tier", mode="before")
    @classmethod
    def parse_tier(cls, value: Any) -> Optional[TrustTier]:
        return TrustTier.parse(value)

    @field_validator("stance", mode="before")
    @classmethod
    def parse_stance(cls, value: Any) -> Optional[Stance]:
        return Stance.parse(value)

    @field_validator("score", mode="before")
    @classmethod
    def parse_score(cls, value: Any) -> Optional[float]:
        return _clean_number(value)


class ProCandidate(_CandidateBase):
    """Per-source tagged candidate (current oracle format)."""

    kind: Literal["pro"] = "pro"
    title: Optional[str] = None
    publisher: Optional[str] = None
    article_url: Optional[str] = Field(default=None, alias="articleUrl")
    canonical_url: Optional[str] = Field(default=None, alias="canonicalUrl")
    why_it_matters: Optional[str] = Field(default=None, alias="whyItMatters")
    snippet: Optional[str] = None

    @field_validator(
        "url", "title", "publisher", "article_url", "canonical_url",
        "why_it_matters", "snippet", "published",
        mode="before",
    )
    @classmethod
    def clean_text(cls, value: Any) -> Optional[str]:
        return _clean_text(value)

    @property
    def url_candidates(self) -> list[str]:
        """URL alternatives in preference order."""
        return [u for u in (self.article_url, self.canonical_url, self.url) if u]

    @property
    def rationale(self) -> str:
        return self.why_it_matters or self.snippet or ""


class LegacyCandidate(_CandidateBase):
    """Bucketed candidate (legacy corroboration format)."""

    kind: Literal["legacy"] = "legacy"
    name: Optional[str] = None
    snippet: Optional[str] = None

    @field_validator("url", "name", "snippet", "published", mode="before")
    @classmethod
    def clean_text(cls, value: Any) -> Optional[str]:
        return _clean_text(value)

    @property
    def title(self) -> Optional[str]:
        return self.name

    @property
    def publisher(self) -> Optional[str]:
        return None

    @property
    def url_candidates(self) -> list[str]:
        return [self.url] if self.url else []

    @property
    def rationale(self) -> str:
        return self.snippet or ""


RawCandidate = Union[ProCandidate, LegacyCandidate]

# Fields that only appear in the per-source tagged shape
PRO_MARKER_FIELDS = frozenset(
    {"title", "whyItMatters", "articleUrl", "canonicalUrl", "publisher"}
)
LEGACY_MARKER_FIELDS = frozenset({"name", "snippet"})


class NormalizedSource(BaseModel):
    """Canonical evidence record used by every downstream component.

    ``url`` is always a syntactically valid absolute http(s) URL and
    ``trust_tier`` is always resolved.
    """

    title: str = Field(..., description="Source title, domain when unknown")
    publisher: Optional[str] = Field(default=None)
    url: str = Field(..., min_length=1)
    domain: str = Field(..., description="Host without www., lower-cased")
    dedup_key: str = Field(..., description="Normalized URL used for collapsing")
    trust_tier: TrustTier
    tier_origin: Literal["explicit", "score", "pattern", "default"] = Field(
        default="default",
        description="Which rule resolved trust_tier",
    )
    stance: Optional[Stance] = None
    rationale: str = Field(default="", description="Why the source matters")
    is_generic_url: bool = False
    as_of_year: Optional[int] = Field(
        default=None,
        description="Year the source describes, when it can be told",
    )
    link_status: Optional[LinkStatus] = None

    model_config = {"frozen": True}

    @property
    def effective_stance(self) -> Stance:
        """Untagged sources count as neutral coverage."""
        return self.stance or Stance.NEUTRAL


class LiveLinkStatus(BaseModel):
    """Outcome of one live link check."""

    url: str
    is_live: bool
    status_code: Optional[int] = None
    method: Optional[Literal["HEAD", "GET"]] = None
    reason: Optional[str] = None
