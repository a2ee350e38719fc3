"""Shared fixtures for engine tests."""

from datetime import date
from typing import Optional

import pytest

from corroboration_engine.schemas.source_schema import NormalizedSource, Stance, TrustTier
from corroboration_engine.sources import url_tools


def build_source(
    url: str,
    tier: TrustTier = TrustTier.MEDIUM,
    stance: Optional[Stance] = Stance.CORROBORATING,
    rationale: str = "Reports the claim in detail with named officials.",
    year: Optional[int] = None,
    generic: Optional[bool] = None,
    title: Optional[str] = None,
) -> NormalizedSource:
    """NormalizedSource with domain and dedup key derived from ``url``."""
    domain = url_tools.extract_domain(url)
    return NormalizedSource(
        title=title or domain,
        url=url,
        domain=domain,
        dedup_key=url_tools.dedup_key(url),
        trust_tier=tier,
        stance=stance,
        rationale=rationale,
        is_generic_url=url_tools.is_generic_url(url) if generic is None else generic,
        as_of_year=year,
    )


@pytest.fixture
def make_source():
    return build_source


@pytest.fixture
def now_date() -> date:
    return date(2025, 6, 1)
