"""Source Normalizer: the single boundary between raw oracle candidates
and the canonical NormalizedSource record.

Trust tier resolution, in order:
1. Explicit tier supplied by the oracle
2. Numeric score (>=80 high, >=55 medium, else low; 0-1 treated as a fraction)
3. Domain and title patterns (official/reference -> high, major news -> medium)
4. Default low

Links that look risky (suspicious TLD, phishing keywords) are held to low
whatever rule resolved them.

Usage:
    normalizer = SourceNormalizer()
    sources = normalizer.normalize_all(payload.sources)
"""

import re
from typing import Iterable, Optional

from corroboration_engine.config.logging import get_logger
from corroboration_engine.config.reference_data import ReferenceTables
from corroboration_engine.schemas.source_schema import (
    NormalizedSource,
    RawCandidate,
    Stance,
    TrustTier,
)
from corroboration_engine.sources import url_tools

logger = get_logger("source_normalizer")

HIGH_SCORE_THRESHOLD = 80
MEDIUM_SCORE_THRESHOLD = 55

_YEAR = re.compile(r"\b(19\d{2}|20\d{2})\b")
_URL_DATE = re.compile(r"/((?:19|20)\d{2})(?:/(?:0?[1-9]|1[0-2])/|-\d{2}-\d{2}|/)")
_RATIONALE_YEAR = re.compile(
    r"\b(?:as of|in|since|updated|during)\s+(?:[a-z]+\s+)?((?:19|20)\d{2})\b",
    re.IGNORECASE,
)


class SourceNormalizer:
    """Converts raw candidates into NormalizedSource records."""

    def __init__(self, tables: Optional[ReferenceTables] = None):
        self.tables = tables or ReferenceTables.default()

    def normalize(
        self,
        candidate: RawCandidate,
        stance_hint: Optional[Stance] = None,
    ) -> Optional[NormalizedSource]:
        """
        Normalize one candidate.

        Args:
            candidate: Raw candidate in either oracle shape
            stance_hint: Stance implied by the bucket the candidate came from

        Returns:
            NormalizedSource, or None when no usable URL exists
        """
        url, is_generic = self._select_url(candidate.url_candidates)
        if url is None:
            logger.debug(f"Dropping candidate without usable URL: {candidate.title!r}")
            return None

        domain = url_tools.extract_domain(url)
        title = candidate.title or domain
        tier, origin = self.resolve_tier(candidate, title, url)

        return NormalizedSource(
            title=title,
            publisher=candidate.publisher or self.derive_publisher(domain),
            url=url,
            domain=domain,
            dedup_key=url_tools.dedup_key(url, self.tables),
            trust_tier=tier,
            tier_origin=origin,
            stance=candidate.stance or stance_hint,
            rationale=candidate.rationale.strip(),
            is_generic_url=is_generic,
            as_of_year=self.extract_year(candidate.published, url, candidate.rationale),
        )

    def normalize_all(
        self,
        candidates: Iterable[RawCandidate],
        stance_hint: Optional[Stance] = None,
    ) -> list[NormalizedSource]:
        """Normalize many candidates, silently dropping unusable ones."""
        normalized = []
        dropped = 0
        for candidate in candidates:
            source = self.normalize(candidate, stance_hint)
            if source is None:
                dropped += 1
            else:
                normalized.append(source)
        if dropped:
            logger.info(f"Normalized {len(normalized)} sources, dropped {dropped}")
        return normalized

    def _select_url(self, urls: list[str]) -> tuple[Optional[str], bool]:
        """Pick the first non-generic valid URL, else the least-bad generic one."""
        valid = [u.strip() for u in urls if url_tools.parse_http_url(u) is not None]
        if not valid:
            return None, False
        for url in valid:
            if not url_tools.is_generic_url(url, self.tables):
                return url, False
        # All generic: deepest path is the least bad
        best = max(valid, key=lambda u: len(url_tools.path_segments(u)))
        return best, True

    def resolve_tier(
        self,
        candidate: RawCandidate,
        title: str,
        url: str,
    ) -> tuple[TrustTier, str]:
        """Resolve the trust tier and record which rule decided it."""
        if candidate.trust_tier is not None:
            tier, origin = candidate.trust_tier, "explicit"
        elif candidate.score is not None:
            tier, origin = self.tier_from_score(candidate.score), "score"
        else:
            tier, origin = self.tier_from_patterns(f"{title} {url}")

        if tier != TrustTier.LOW:
            risks = url_tools.url_risk_signals(url, self.tables)
            if risks:
                logger.warning(f"Holding {url} to low trust: {'; '.join(risks)}")
                tier = TrustTier.LOW
        return tier, origin

    @staticmethod
    def tier_from_score(score: float) -> TrustTier:
        if 0 < score <= 1:
            score *= 100
        if score >= HIGH_SCORE_THRESHOLD:
            return TrustTier.HIGH
        if score >= MEDIUM_SCORE_THRESHOLD:
            return TrustTier.MEDIUM
        return TrustTier.LOW

    def tier_from_patterns(self, text: str) -> tuple[TrustTier, str]:
        if self.tables.high_trust_pattern.search(text):
            return TrustTier.HIGH, "pattern"
        if self.tables.medium_trust_pattern.search(text):
            return TrustTier.MEDIUM, "pattern"
        return TrustTier.LOW, "default"

    def derive_publisher(self, domain: str) -> Optional[str]:
        label = url_tools.registered_label(domain, self.tables)
        return label.capitalize() if label else None

    @staticmethod
    def extract_year(
        published: Optional[str],
        url: str,
        rationale: str,
    ) -> Optional[int]:
        """Year a source describes: publication date, URL date, then rationale text."""
        if published:
            match = _YEAR.search(published)
            if match:
                return int(match.group(1))
        match = _URL_DATE.search(url)
        if match:
            return int(match.group(1))
        match = _RATIONALE_YEAR.search(rationale or "")
        if match:
            return int(match.group(1))
        return None
