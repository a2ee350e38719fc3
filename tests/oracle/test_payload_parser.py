"""Tests for oracle payload shape detection and candidate parsing."""

import json

import pytest

from corroboration_engine.oracle.payload_parser import parse_candidate, parse_oracle_payload
from corroboration_engine.schemas.result_schema import Verdict
from corroboration_engine.schemas.source_schema import (
    LegacyCandidate,
    ProCandidate,
    Stance,
    TrustTier,
)


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture
def pro_payload() -> dict:
    return {
        "verdict": "MOSTLY_TRUE",
        "score": 78,
        "summary": "Most sources agree.",
        "bestLinks": [
            {
                "title": "Official statement",
                "url": "https://www.example.gov/news/2025/statement",
                "trustTier": "high",
                "stance": "corroborating",
                "whyItMatters": "Primary source for the announcement.",
            }
        ],
        "sources": [
            {"title": "Coverage", "url": "https://paper.com/2025/01/02/story", "stance": "neutral"},
            None,
            "https://bare-string.com/ignored",
            {"unrelated": True},
        ],
    }


# ── Candidates ────────────────────────────────────────────────────────────


class TestParseCandidate:
    def test_pro_shape(self):
        candidate = parse_candidate({"title": "T", "url": "https://a.com/x", "whyItMatters": "Why"})
        assert isinstance(candidate, ProCandidate)
        assert candidate.rationale == "Why"

    def test_legacy_shape(self):
        candidate = parse_candidate({"name": "N", "url": "https://a.com/x", "snippet": "S"})
        assert isinstance(candidate, LegacyCandidate)
        assert candidate.title == "N"

    @pytest.mark.parametrize("item", [None, "text", 42, [], {"foo": "bar"}])
    def test_unusable_items_dropped(self, item):
        assert parse_candidate(item) is None

    def test_wrong_field_types_tolerated(self):
        candidate = parse_candidate({
            "title": ["not", "a", "string"],
            "url": "https://a.com/x",
            "trustTier": 5,
            "score": {"bad": 1},
            "stance": "sideways",
        })
        assert candidate.title is None
        assert candidate.trust_tier is None
        assert candidate.score is None
        assert candidate.stance is None

    def test_numbers_coerced_to_text(self):
        candidate = parse_candidate({"title": 2024, "url": "https://a.com/x"})
        assert candidate.title == "2024"

    def test_bucket_stance_fills_missing(self):
        candidate = parse_candidate({"name": "N", "url": "https://a.com/x"}, Stance.CONTRADICTING)
        assert candidate.stance == Stance.CONTRADICTING

    def test_explicit_stance_kept_over_bucket(self):
        candidate = parse_candidate(
            {"title": "T", "url": "https://a.com/x", "stance": "supports"}, Stance.CONTRADICTING
        )
        assert candidate.stance == Stance.CORROBORATING

    def test_tier_aliases(self):
        assert parse_candidate({"title": "T", "trustTier": "Official"}).trust_tier == TrustTier.HIGH


# ── Payload shapes ────────────────────────────────────────────────────────


class TestParsePayload:
    def test_pro_payload(self, pro_payload):
        parsed = parse_oracle_payload(pro_payload)
        assert parsed.draft_verdict == Verdict.MOSTLY_TRUE
        assert parsed.draft_score == 78
        assert parsed.summary == "Most sources agree."
        assert len(parsed.best_links) == 1
        assert len(parsed.sources) == 1

    def test_json_text_and_result_wrapper(self, pro_payload):
        parsed = parse_oracle_payload(json.dumps({"result": pro_payload}))
        assert parsed.draft_verdict == Verdict.MOSTLY_TRUE
        assert len(parsed.best_links) == 1

    def test_legacy_corroboration_buckets(self):
        parsed = parse_oracle_payload({
            "verdict": "mostly false",
            "corroboration": {
                "sources": {
                    "corroborated": [{"name": "A", "url": "https://a.com/x"}],
                    "constrained": [{"name": "B", "url": "https://b.com/x"}],
                    "contradicting": [{"name": "C", "url": "https://c.com/x"}],
                }
            },
        })
        assert parsed.draft_verdict == Verdict.MOSTLY_FALSE
        assert [c.stance for c in parsed.sources] == [
            Stance.CORROBORATING,
            Stance.NEUTRAL,
            Stance.CONTRADICTING,
        ]

    def test_sources_buckets(self):
        parsed = parse_oracle_payload({
            "result": {
                "sourcesBuckets": {
                    "corroborate": [{"title": "A", "url": "https://a.com/x"}],
                    "contradict": [{"title": "C", "url": "https://c.com/x"}],
                }
            }
        })
        assert [c.stance for c in parsed.sources] == [Stance.CORROBORATING, Stance.CONTRADICTING]

    @pytest.mark.parametrize("payload", [None, "", "{not json", 42, ["a"], {"result": "x"}])
    def test_unusable_payload_is_empty(self, payload):
        parsed = parse_oracle_payload(payload)
        assert parsed.best_links == []
        assert parsed.sources == []
        assert parsed.draft_score == 50
        assert parsed.draft_verdict is None

    @pytest.mark.parametrize(
        "score,expected",
        [(150, 100), (-5, 0), ("75", 75), ("abc", 50), (True, 50), (62.6, 63)],
    )
    def test_score_coercion(self, score, expected):
        assert parse_oracle_payload({"score": score}).draft_score == expected

    def test_unknown_verdict_ignored(self):
        assert parse_oracle_payload({"verdict": "PANTS_ON_FIRE"}).draft_verdict is None
