"""Contradiction resolution, confidence scoring and verdicts."""

from corroboration_engine.scoring.confidence_scorer import DynamicConfidenceScorer
from corroboration_engine.scoring.contradiction_resolver import WeightedContradictionResolver

__all__ = ["DynamicConfidenceScorer", "WeightedContradictionResolver"]
