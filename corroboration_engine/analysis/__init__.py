"""Claim analysers: temporal context and critical facts."""

from corroboration_engine.analysis.critical_fact_checker import CriticalFactChecker
from corroboration_engine.analysis.request_builder import build_evidence_request
from corroboration_engine.analysis.temporal_interpreter import TemporalInterpreter

__all__ = ["CriticalFactChecker", "TemporalInterpreter", "build_evidence_request"]
