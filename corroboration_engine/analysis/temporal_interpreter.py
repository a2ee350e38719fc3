"""Temporal Context Interpreter.

Reads time references from a claim: lexical markers (current, past,
future), relative phrases ("last year"), explicit years and time-sensitive
topics (offices, elections, prices).

Precedence for ``target_year``: explicit year > relative phrase > current
marker.
"""

import re
from datetime import date
from typing import Optional

from corroboration_engine.analysis.phrases import compile_phrases, find_phrases, phrase_pattern
from corroboration_engine.config.logging import get_logger
from corroboration_engine.config.reference_data import ReferenceTables
from corroboration_engine.schemas.claim_schema import ReferenceType, TemporalSignal

logger = get_logger("temporal_interpreter")

_YEAR = re.compile(r"\b(19\d{2}|20\d{2})\b")


class TemporalInterpreter:
    """Detects time-sensitivity in claim text."""

    def __init__(self, tables: Optional[ReferenceTables] = None):
        tables = tables or ReferenceTables.default()
        self._current = compile_phrases(tables.current_markers)
        self._past = compile_phrases(tables.past_markers)
        self._future = compile_phrases(tables.future_markers)
        self._topics = compile_phrases(tables.time_sensitive_topics)
        self._relative = [
            (phrase, offset, phrase_pattern(phrase))
            for phrase, offset in tables.relative_markers
        ]

    def interpret(self, text: str, now_date: date) -> TemporalSignal:
        """
        Build the temporal signal for ``text`` relative to ``now_date``.

        Args:
            text: Claim text
            now_date: Reference date the claim is evaluated on

        Returns:
            TemporalSignal; empty text yields the neutral signal
        """
        if not text or not text.strip():
            return TemporalSignal()

        references: list[str] = []
        reference_type = ReferenceType.NONE
        target_year: Optional[int] = None
        time_sensitive = False
        needs_recent = False

        current = find_phrases(text, self._current)
        if current:
            references += current
            reference_type = ReferenceType.CURRENT
            target_year = now_date.year
            time_sensitive = True
            needs_recent = True

        past = find_phrases(text, self._past)
        if past:
            references += past
            if reference_type == ReferenceType.NONE:
                reference_type = ReferenceType.PAST

        future = find_phrases(text, self._future)
        if future:
            references += future
            if reference_type == ReferenceType.NONE:
                reference_type = ReferenceType.FUTURE

        for phrase, offset, pattern in self._relative:
            if pattern.search(text):
                references.append(phrase)
                reference_type = ReferenceType.RELATIVE
                target_year = now_date.year + offset
                time_sensitive = True
                needs_recent = needs_recent or offset >= 0

        years = [int(y) for y in _YEAR.findall(text)]
        if years:
            year = max(years)
            references += [str(y) for y in sorted(set(years))]
            target_year = year
            time_sensitive = True
            if year >= now_date.year - 1 and year <= now_date.year:
                reference_type = ReferenceType.CURRENT
                needs_recent = True
            elif year > now_date.year:
                reference_type = ReferenceType.FUTURE
            else:
                reference_type = ReferenceType.SPECIFIC_YEAR
                needs_recent = False

        topics = find_phrases(text, self._topics)
        if topics:
            time_sensitive = True
            if reference_type in (ReferenceType.NONE, ReferenceType.CURRENT):
                needs_recent = True

        signal = TemporalSignal(
            has_temporal_reference=bool(references) or time_sensitive,
            reference_type=reference_type,
            target_year=target_year,
            is_time_sensitive=time_sensitive,
            requires_recent_sources=needs_recent,
            detected_references=references,
        )
        logger.debug(
            f"Temporal signal {signal.reference_type.value} "
            f"(target={signal.target_year}, recent={signal.requires_recent_sources})"
        )
        return signal
