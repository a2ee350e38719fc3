"""Tests for SourceNormalizer.

Tests cover:
- Trust tier resolution order (explicit, score, pattern, default)
- URL preference and generic-URL flagging
- Publisher derivation, stance hints and as-of years
- Dropping unusable candidates
"""

import pytest

from corroboration_engine.schemas.source_schema import (
    LegacyCandidate,
    ProCandidate,
    Stance,
    TrustTier,
)
from corroboration_engine.sources.source_normalizer import SourceNormalizer


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture
def normalizer() -> SourceNormalizer:
    return SourceNormalizer()


def pro(**fields) -> ProCandidate:
    return ProCandidate.model_validate(
        {"title": "Story", "whyItMatters": "Explains the claim in detail.", **fields}
    )


# ── Trust tiers ───────────────────────────────────────────────────────────


class TestTrustTier:
    def test_explicit_tier_wins(self, normalizer):
        source = normalizer.normalize(
            pro(url="https://www.cdc.gov/flu/about/index.html", trustTier="low")
        )
        assert source.trust_tier == TrustTier.LOW
        assert source.tier_origin == "explicit"

    @pytest.mark.parametrize(
        "score,expected",
        [(85, TrustTier.HIGH), (80, TrustTier.HIGH), (60, TrustTier.MEDIUM), (10, TrustTier.LOW), (0.9, TrustTier.HIGH), ("70", TrustTier.MEDIUM)],
    )
    def test_score_mapping(self, normalizer, score, expected):
        source = normalizer.normalize(pro(url="https://blog.example.net/posts/some-story", score=score))
        assert source.trust_tier == expected
        assert source.tier_origin == "score"

    def test_high_pattern(self, normalizer):
        source = normalizer.normalize(pro(url="https://www.cdc.gov/flu/about/index.html"))
        assert source.trust_tier == TrustTier.HIGH
        assert source.tier_origin == "pattern"

    def test_medium_pattern(self, normalizer):
        source = normalizer.normalize(
            pro(url="https://www.theguardian.com/world/2024/jan/05/story-slug")
        )
        assert source.trust_tier == TrustTier.MEDIUM

    def test_unknown_defaults_to_low(self, normalizer):
        source = normalizer.normalize(pro(url="https://blog.example.net/posts/some-story"))
        assert source.trust_tier == TrustTier.LOW
        assert source.tier_origin == "default"

    def test_risky_link_held_to_low(self, normalizer):
        source = normalizer.normalize(
            pro(url="https://breaking-news.xyz/world/big-story", trustTier="high")
        )
        assert source.trust_tier == TrustTier.LOW

    @pytest.mark.parametrize(
        "fields",
        [
            {"url": "https://apnews.com/article/abc"},
            {"url": "https://unknown.site/a/b/c", "trustTier": "bogus"},
            {"url": "https://unknown.site/a/b/c", "score": "n/a"},
            {"url": "https://unknown.site/a/b/c", "trustTier": None, "score": None},
        ],
    )
    def test_tier_always_resolved(self, normalizer, fields):
        source = normalizer.normalize(pro(**fields))
        assert source.trust_tier in set(TrustTier)


# ── URLs ──────────────────────────────────────────────────────────────────


class TestUrlSelection:
    def test_prefers_first_non_generic(self, normalizer):
        source = normalizer.normalize(
            pro(
                articleUrl="https://example.com/",
                canonicalUrl="https://example.com/world/2024/05/01/story",
                url="https://example.com/other/story-two",
            )
        )
        assert source.url == "https://example.com/world/2024/05/01/story"
        assert source.is_generic_url is False

    def test_all_generic_keeps_least_bad(self, normalizer):
        source = normalizer.normalize(
            pro(articleUrl="https://example.com/", url="https://example.com/news")
        )
        assert source.url == "https://example.com/news"
        assert source.is_generic_url is True

    def test_invalid_urls_skipped(self, normalizer):
        source = normalizer.normalize(
            pro(articleUrl="not a url", url="https://example.com/politics/a-story")
        )
        assert source.url == "https://example.com/politics/a-story"

    def test_no_usable_url_dropped(self, normalizer):
        assert normalizer.normalize(pro(url="mailto:desk@example.com")) is None
        assert normalizer.normalize(pro()) is None

    def test_normalize_all_drops_unusable(self, normalizer):
        sources = normalizer.normalize_all(
            [pro(url="https://example.com/politics/a-story"), pro(url="nope")]
        )
        assert len(sources) == 1
        assert sources[0].dedup_key == "example.com/politics/a-story"


# ── Derived fields ────────────────────────────────────────────────────────


class TestDerivedFields:
    def test_publisher_from_domain(self, normalizer):
        source = normalizer.normalize(pro(url="https://www.reuters.com/world/some-story"))
        assert source.publisher == "Reuters"
        assert source.domain == "reuters.com"

    def test_supplied_publisher_kept(self, normalizer):
        source = normalizer.normalize(
            pro(url="https://www.reuters.com/world/some-story", publisher="Reuters Staff")
        )
        assert source.publisher == "Reuters Staff"

    def test_title_falls_back_to_domain(self, normalizer):
        candidate = LegacyCandidate.model_validate(
            {"url": "https://example.org/reports/annual-report", "snippet": "Annual figures."}
        )
        assert normalizer.normalize(candidate).title == "example.org"

    def test_stance_hint_fills_missing_stance(self, normalizer):
        candidate = LegacyCandidate.model_validate(
            {"name": "Report", "url": "https://example.org/reports/x-y", "snippet": "Disputes it."}
        )
        source = normalizer.normalize(candidate, stance_hint=Stance.CONTRADICTING)
        assert source.stance == Stance.CONTRADICTING

    def test_explicit_stance_beats_hint(self, normalizer):
        source = normalizer.normalize(
            pro(url="https://example.org/reports/x-y", stance="supports"),
            stance_hint=Stance.CONTRADICTING,
        )
        assert source.stance == Stance.CORROBORATING

    def test_rationale_from_snippet(self, normalizer):
        candidate = LegacyCandidate.model_validate(
            {"name": "Report", "url": "https://example.org/reports/x-y", "snippet": "  Key figures.  "}
        )
        assert normalizer.normalize(candidate).rationale == "Key figures."

    @pytest.mark.parametrize(
        "fields,year",
        [
            ({"url": "https://example.com/a/b/c", "publishedAt": "2023-04-01T10:00:00Z"}, 2023),
            ({"url": "https://example.com/a/b/c", "year": 2021}, 2021),
            ({"url": "https://example.com/news/2024/05/01/story"}, 2024),
            ({"url": "https://example.com/a/b/c", "whyItMatters": "As of 2022, the law applied."}, 2022),
            ({"url": "https://example.com/a/b/c"}, None),
        ],
    )
    def test_as_of_year(self, normalizer, fields, year):
        assert normalizer.normalize(pro(**fields)).as_of_year == year
