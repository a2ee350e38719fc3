"""Whole-word phrase matching for the claim analysers."""

import re
from typing import Iterable


def phrase_pattern(phrase: str) -> re.Pattern:
    """
    Compile a case-insensitive matcher for ``phrase``.

    Word boundaries are applied only at ends that are word characters, so
    "now" does not match "known" while "ex-" still matches "ex-president".
    """
    body = re.escape(phrase).replace(r"\ ", r"\s+")
    prefix = r"\b" if phrase[:1].isalnum() else ""
    suffix = r"\b" if phrase[-1:].isalnum() else ""
    return re.compile(prefix + body + suffix, re.IGNORECASE)


def compile_phrases(phrases: Iterable[str]) -> list[tuple[str, re.Pattern]]:
    return [(phrase, phrase_pattern(phrase)) for phrase in phrases]


def find_phrases(text: str, compiled: list[tuple[str, re.Pattern]]) -> list[str]:
    """Phrases from ``compiled`` occurring in ``text``, in table order."""
    return [phrase for phrase, pattern in compiled if pattern.search(text)]
