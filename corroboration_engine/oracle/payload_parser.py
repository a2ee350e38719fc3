"""Shape detection for loosely-structured oracle payloads.

Accepted shapes (any of them may be wrapped in ``{"result": {...}}``):

- ``bestLinks`` / ``sources`` lists of per-source tagged candidates
- ``sourcesBuckets``: ``corroborate`` / ``neutral`` / ``contradict`` lists
- ``corroboration.sources``: ``corroborated`` / ``neutral`` /
  ``constrained`` / ``contradicting`` lists (constrained counts as neutral)

Anything unusable (nulls, bare strings, wrong types) is dropped, never
raised.
"""

import json
from typing import Any, Optional

from pydantic import ValidationError

from corroboration_engine.config.logging import get_logger
from corroboration_engine.schemas.result_schema import OraclePayload, Verdict
from corroboration_engine.schemas.source_schema import (
    LEGACY_MARKER_FIELDS,
    PRO_MARKER_FIELDS,
    LegacyCandidate,
    ProCandidate,
    RawCandidate,
    Stance,
)

logger = get_logger("payload_parser")

DEFAULT_DRAFT_SCORE = 50

SOURCES_BUCKETS: dict[str, Stance] = {
    "corroborate": Stance.CORROBORATING,
    "neutral": Stance.NEUTRAL,
    "contradict": Stance.CONTRADICTING,
}

LEGACY_BUCKETS: dict[str, Stance] = {
    "corroborated": Stance.CORROBORATING,
    "neutral": Stance.NEUTRAL,
    "constrained": Stance.NEUTRAL,
    "contradicting": Stance.CONTRADICTING,
}


def parse_candidate(item: Any, stance_hint: Optional[Stance] = None) -> Optional[RawCandidate]:
    """
    Parse one candidate into the tagged union.

    The shape is decided by which fields are present: per-source fields
    (title, whyItMatters, articleUrl...) mean ProCandidate, name/snippet
    mean LegacyCandidate. A bucket's stance fills in a missing one.
    """
    if not isinstance(item, dict):
        return None
    keys = set(item)
    try:
        if keys & PRO_MARKER_FIELDS:
            candidate: RawCandidate = ProCandidate.model_validate(item)
        elif keys & LEGACY_MARKER_FIELDS or "url" in keys:
            candidate = LegacyCandidate.model_validate(item)
        else:
            return None
    except ValidationError as e:
        logger.debug(f"Dropping malformed candidate: {e.error_count()} errors")
        return None

    if candidate.stance is None and stance_hint is not None:
        candidate = candidate.model_copy(update={"stance": stance_hint})
    return candidate


def _parse_list(items: Any, stance_hint: Optional[Stance] = None) -> list[RawCandidate]:
    if not isinstance(items, list):
        return []
    parsed = [parse_candidate(item, stance_hint) for item in items]
    return [c for c in parsed if c is not None]


def _parse_buckets(buckets: Any, mapping: dict[str, Stance]) -> list[RawCandidate]:
    if not isinstance(buckets, dict):
        return []
    candidates: list[RawCandidate] = []
    for key, stance in mapping.items():
        candidates.extend(_parse_list(buckets.get(key), stance))
    return candidates


def _parse_score(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_DRAFT_SCORE
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return DEFAULT_DRAFT_SCORE
    if not isinstance(value, (int, float)) or value != value:
        return DEFAULT_DRAFT_SCORE
    return int(round(min(100.0, max(0.0, float(value)))))


def parse_oracle_payload(payload: Any) -> OraclePayload:
    """
    Parse an oracle payload of any supported shape.

    Args:
        payload: JSON text, a dict, or None

    Returns:
        OraclePayload; empty (no candidates, score 50) when nothing is usable
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Oracle payload is not valid JSON: {e}")
            return OraclePayload()
    if not isinstance(payload, dict):
        if payload is not None:
            logger.warning(f"Ignoring oracle payload of type {type(payload).__name__}")
        return OraclePayload()

    result = payload.get("result") if isinstance(payload.get("result"), dict) else payload

    best_links = _parse_list(result.get("bestLinks"))

    raw_sources = result.get("sources")
    if isinstance(raw_sources, dict):
        sources = _parse_buckets(raw_sources, {**SOURCES_BUCKETS, **LEGACY_BUCKETS})
    else:
        sources = _parse_list(raw_sources)
    sources += _parse_buckets(result.get("sourcesBuckets"), SOURCES_BUCKETS)

    for container in (result, payload):
        corroboration = container.get("corroboration")
        if isinstance(corroboration, dict):
            sources += _parse_buckets(corroboration.get("sources"), LEGACY_BUCKETS)
            break

    draft_verdict = Verdict.parse(result.get("verdict", payload.get("verdict")))
    score_value = result.get("score", payload.get("score"))
    summary = result.get("summary", payload.get("summary"))

    parsed = OraclePayload(
        draft_verdict=draft_verdict,
        draft_score=_parse_score(score_value) if score_value is not None else DEFAULT_DRAFT_SCORE,
        summary=summary if isinstance(summary, str) else None,
        best_links=best_links,
        sources=sources,
    )
    logger.info(
        f"Parsed oracle payload: {len(parsed.best_links)} best links, "
        f"{len(parsed.sources)} sources, draft={parsed.draft_verdict}"
    )
    return parsed
