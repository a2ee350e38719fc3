"""Source Validator & Deduplicator.

Filters out sources that cannot back a specific claim (error pages,
homepages of untrusted sites, over-broad encyclopedia entries, missing
rationale) and collapses duplicates.

Ranking key: (trust tier, generic URL last, longer rationale first).

Duplicate collision preference: non-generic over generic, then higher
trust tier, then longer rationale, then first seen.

Usage:
    validator = SourceValidator()
    ranked = validator.prepare(sources)
    best = validator.select_best(ranked, limit=4)
"""

import re
from typing import Iterable, Optional

from corroboration_engine.config.logging import get_logger
from corroboration_engine.config.reference_data import ReferenceTables
from corroboration_engine.config.settings import settings
from corroboration_engine.schemas.source_schema import NormalizedSource
from corroboration_engine.sources import url_tools

logger = get_logger("source_validator")

_DATE_IN_PATH = re.compile(r"/\d{4}/\d{1,2}/\d{1,2}|-\d{4}-|\d{4}-\d{2}-\d{2}")


def rank_key(source: NormalizedSource) -> tuple[int, bool, int]:
    """Sort key: most trusted, article-level, best explained first."""
    return (source.trust_tier.rank, source.is_generic_url, -len(source.rationale))


def _collision_key(source: NormalizedSource) -> tuple[bool, int, int]:
    return (source.is_generic_url, source.trust_tier.rank, -len(source.rationale))


class SourceValidator:
    """Validity filter, URL deduplication and best-link selection."""

    def __init__(
        self,
        tables: Optional[ReferenceTables] = None,
        min_rationale_length: int = settings.min_rationale_length,
    ):
        self.tables = tables or ReferenceTables.default()
        self.min_rationale_length = min_rationale_length

    # ── Validity ────────────────────────────────────────────────────────

    def is_valid_source(self, source: NormalizedSource) -> bool:
        """Whether the source points at a specific, explained article."""
        return self.rejection_reason(source) is None

    def rejection_reason(self, source: NormalizedSource) -> Optional[str]:
        url = source.url
        if url_tools.parse_http_url(url) is None:
            return "malformed url"
        lowered = url.lower()
        if any(marker in lowered for marker in self.tables.bad_url_markers):
            return "error or cache page"
        if url_tools.is_blocked_host(url):
            return "private host"
        if url_tools.is_shortened(url, self.tables):
            return "shortened link"
        if self._is_overbroad_reference(source):
            return "over-broad reference page"
        if len(source.rationale.strip()) < self.min_rationale_length:
            return "missing rationale"

        segments = url_tools.path_segments(url)
        if self.tables.is_trusted_domain(source.domain):
            return None if segments else "homepage"
        if not self.is_article_url(url):
            return "not an article"
        return None

    def is_article_url(self, url: str) -> bool:
        """Heuristic article test for sites not on the trusted list."""
        segments = url_tools.path_segments(url)
        if not segments:
            return False
        if url_tools.normalized_path(url) in self.tables.hub_paths:
            return False
        if len(segments) < 2:
            # Single long slugs are still articles (example.com/some-long-headline)
            return len(segments[0]) >= 20 or "-" in segments[0]
        path = url_tools.normalized_path(url)
        if "/article" in path or _DATE_IN_PATH.search(path):
            return True
        if len(segments) >= 3:
            return True
        return any(len(seg) >= 20 or "-" in seg for seg in segments)

    def _is_overbroad_reference(self, source: NormalizedSource) -> bool:
        if not (source.domain == "wikipedia.org" or source.domain.endswith(".wikipedia.org")):
            return False
        segments = url_tools.path_segments(source.url)
        if len(segments) < 2 or segments[0] != "wiki":
            return False
        page = segments[1]
        if page.startswith(self.tables.wiki_namespaces):
            return True
        return page in self.tables.overbroad_wiki_pages

    def filter_sources(self, sources: Iterable[NormalizedSource]) -> list[NormalizedSource]:
        kept = []
        for source in sources:
            reason = self.rejection_reason(source)
            if reason is None:
                kept.append(source)
            else:
                logger.debug(f"Rejected {source.url}: {reason}")
        return kept

    # ── Deduplication and ranking ───────────────────────────────────────

    def deduplicate(self, sources: Iterable[NormalizedSource]) -> list[NormalizedSource]:
        """
        Collapse sources sharing a normalized URL and rank the survivors.

        Idempotent: deduplicating the output again returns the same list.
        """
        chosen: dict[str, NormalizedSource] = {}
        for source in sources:
            existing = chosen.get(source.dedup_key)
            if existing is None or _collision_key(source) < _collision_key(existing):
                chosen[source.dedup_key] = source
        return self.sort_sources(chosen.values())

    @staticmethod
    def sort_sources(sources: Iterable[NormalizedSource]) -> list[NormalizedSource]:
        return sorted(sources, key=rank_key)

    @staticmethod
    def dedupe_by_domain(sources: Iterable[NormalizedSource]) -> list[NormalizedSource]:
        """Keep the first source seen for each domain."""
        seen: set[str] = set()
        unique = []
        for source in sources:
            if source.domain in seen:
                continue
            seen.add(source.domain)
            unique.append(source)
        return unique

    def prepare(
        self,
        sources: Iterable[NormalizedSource],
        limit: Optional[int] = None,
    ) -> list[NormalizedSource]:
        """Filter, deduplicate and rank; optionally truncate to ``limit``."""
        sources = list(sources)
        ranked = self.deduplicate(self.filter_sources(sources))
        logger.info(f"Prepared {len(ranked)} of {len(sources)} sources")
        return ranked[:limit] if limit is not None else ranked

    @staticmethod
    def drop_outranked_generics(ranked: Iterable[NormalizedSource]) -> list[NormalizedSource]:
        """Remove generic links whenever an article link of equal or higher tier exists."""
        ranked = list(ranked)
        article_ranks = [s.trust_tier.rank for s in ranked if not s.is_generic_url]
        if not article_ranks:
            return ranked
        best_article_rank = min(article_ranks)
        return [
            s for s in ranked
            if not (s.is_generic_url and best_article_rank <= s.trust_tier.rank)
        ]

    def select_best(
        self,
        ranked: Iterable[NormalizedSource],
        limit: int = settings.best_links_limit,
    ) -> list[NormalizedSource]:
        """Top ``limit`` sources, one per domain, generic links demoted."""
        return self.dedupe_by_domain(self.drop_outranked_generics(ranked))[:limit]
