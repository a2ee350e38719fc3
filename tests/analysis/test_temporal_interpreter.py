"""Tests for TemporalInterpreter.

Tests cover:
- Lexical markers (current, past, future) and relative phrases
- Explicit year precedence and classification against now_date
- Time-sensitive topics forcing recency
- Whole-word matching and determinism
"""

from datetime import date

import pytest

from corroboration_engine.analysis.temporal_interpreter import TemporalInterpreter
from corroboration_engine.config.reference_data import ReferenceTables
from corroboration_engine.schemas.claim_schema import ReferenceType, TemporalSignal


@pytest.fixture
def interpreter() -> TemporalInterpreter:
    return TemporalInterpreter()


class TestLexicalMarkers:
    def test_current_marker(self, interpreter, now_date):
        signal = interpreter.interpret("X is currently prime minister", now_date)
        assert signal.reference_type == ReferenceType.CURRENT
        assert signal.target_year == 2025
        assert signal.requires_recent_sources is True
        assert signal.is_time_sensitive is True
        assert "currently" in signal.detected_references

    def test_relative_phrase_sets_target_year(self, interpreter, now_date):
        signal = interpreter.interpret("Inflation was 3% last year", now_date)
        assert signal.reference_type == ReferenceType.RELATIVE
        assert signal.target_year == 2024
        assert signal.is_time_sensitive is True

    def test_future_marker(self, interpreter, now_date):
        signal = interpreter.interpret("The stadium will be finished soon", now_date)
        assert signal.reference_type == ReferenceType.FUTURE
        assert signal.requires_recent_sources is False

    def test_no_reference(self, interpreter, now_date):
        signal = interpreter.interpret("Water boils at 100 degrees Celsius", now_date)
        assert signal == TemporalSignal(
            has_temporal_reference=False,
            reference_type=ReferenceType.NONE,
            target_year=None,
            is_time_sensitive=False,
            requires_recent_sources=False,
            detected_references=[],
        )

    def test_markers_match_whole_words_only(self, interpreter, now_date):
        signal = interpreter.interpret("The well-known painting hangs in Paris", now_date)
        assert signal.reference_type == ReferenceType.NONE
        assert signal.detected_references == []


class TestExplicitYears:
    def test_past_year_is_specific(self, interpreter, now_date):
        signal = interpreter.interpret("The Berlin Wall fell in 1989", now_date)
        assert signal.reference_type == ReferenceType.SPECIFIC_YEAR
        assert signal.target_year == 1989
        assert signal.requires_recent_sources is False

    def test_prior_year_counts_as_current(self, interpreter, now_date):
        signal = interpreter.interpret("In 2024 the museum reopened", now_date)
        assert signal.reference_type == ReferenceType.CURRENT
        assert signal.requires_recent_sources is True

    def test_later_year_is_future(self, interpreter, now_date):
        signal = interpreter.interpret("The election will be held in 2027", now_date)
        assert signal.reference_type == ReferenceType.FUTURE
        assert signal.target_year == 2027
        assert signal.requires_recent_sources is False

    def test_explicit_year_beats_lexical_marker(self, interpreter, now_date):
        signal = interpreter.interpret("Currently, as of 2019, she is the CEO", now_date)
        assert signal.target_year == 2019
        assert signal.reference_type == ReferenceType.SPECIFIC_YEAR

    def test_latest_year_wins(self, interpreter, now_date):
        signal = interpreter.interpret("Between 1990 and 2001 the bridge was rebuilt", now_date)
        assert signal.target_year == 2001


class TestTimeSensitiveTopics:
    def test_topic_forces_recency(self, interpreter, now_date):
        signal = interpreter.interpret("Emmanuel Macron leads the government of France as president", now_date)
        assert signal.reference_type == ReferenceType.NONE
        assert signal.is_time_sensitive is True
        assert signal.requires_recent_sources is True
        assert signal.has_temporal_reference is True

    def test_topic_in_historical_claim_does_not_force_recency(self, interpreter, now_date):
        signal = interpreter.interpret("The 1969 election was close", now_date)
        assert signal.is_time_sensitive is True
        assert signal.requires_recent_sources is False

    def test_custom_tables(self, now_date):
        tables = ReferenceTables(time_sensitive_topics=("harvest",))
        signal = TemporalInterpreter(tables).interpret("The harvest is large", now_date)
        assert signal.requires_recent_sources is True


class TestDeterminism:
    def test_same_input_same_signal(self, interpreter):
        when = date(2030, 1, 1)
        first = interpreter.interpret("The president is currently abroad", when)
        second = interpreter.interpret("The president is currently abroad", when)
        assert first == second
        assert first.target_year == 2030

    @pytest.mark.parametrize("text", ["", "   "])
    def test_blank_text(self, interpreter, now_date, text):
        assert interpreter.interpret(text, now_date) == TemporalSignal()
