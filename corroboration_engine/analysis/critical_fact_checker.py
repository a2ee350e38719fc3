"""Critical Fact Checker.

Compares a claim against the table of known officeholders before any
evidence is gathered. Two findings are possible:

- Conflict: the claim presents someone as currently holding a role that
  the table says ended on a past date.
- Stale-claim note: the claim talks about an entity's role without naming
  whoever holds it today. Not a failure, only a prompt for more scrutiny.

The checker only annotates. It never changes a verdict by itself.
"""

from collections import defaultdict
from datetime import date
from typing import Optional

from corroboration_engine.analysis.phrases import compile_phrases, find_phrases, phrase_pattern
from corroboration_engine.config.logging import get_logger
from corroboration_engine.config.reference_data import ReferenceTables
from corroboration_engine.schemas.claim_schema import CriticalFact, CriticalFactCheck

logger = get_logger("critical_fact_checker")

# Words that assert present status ("X is President", "the current President")
_PRESENT_ASSERTIONS = ("is", "current", "currently", "remains", "still", "serves as")


class CriticalFactChecker:
    """Flags claims that contradict the critical-facts table."""

    def __init__(self, tables: Optional[ReferenceTables] = None):
        self.tables = tables or ReferenceTables.default()
        self.facts = self.tables.critical_facts
        self._past = compile_phrases(self.tables.role_past_markers)
        self._present = compile_phrases(_PRESENT_ASSERTIONS)

    def check(self, text: str, now_date: date) -> CriticalFactCheck:
        """
        Check ``text`` against the critical facts as of ``now_date``.

        Args:
            text: Claim text
            now_date: Reference date; roles ending before it are over

        Returns:
            CriticalFactCheck annotating conflicts and stale-claim matches
        """
        if not text or not text.strip():
            return CriticalFactCheck()

        is_past_tense = bool(find_phrases(text, self._past))
        asserts_present = bool(find_phrases(text, self._present)) and not is_past_tense

        matched: list[CriticalFact] = []
        conflicts: list[str] = []

        for fact in self.facts:
            if not _mentions(text, fact.subject):
                continue
            matched.append(fact)
            if not self._asserts_role(text, fact) or is_past_tense:
                continue
            if not fact.is_open_ended and fact.valid_until < now_date:
                conflicts.append(
                    f"Claim suggests {fact.subject} is currently {fact.role} of "
                    f"{fact.entity}, but this role ended on {fact.valid_until.isoformat()}"
                )

        stale_notes = []
        if asserts_present:
            stale_notes = self._stale_claim_notes(text, now_date, matched)

        check = CriticalFactCheck(
            has_conflict=bool(conflicts),
            conflict_details="; ".join(conflicts) if conflicts else None,
            matched_facts=matched,
            stale_claim_notes=stale_notes,
            requires_enhanced_verification=bool(matched) or bool(conflicts) or bool(stale_notes),
        )
        if check.has_conflict:
            logger.warning(f"Critical fact conflict: {check.conflict_details}")
        return check

    def _asserts_role(self, text: str, fact: CriticalFact) -> bool:
        """Whether the claim ties the subject to the fact's role."""
        subject, role = fact.subject, fact.role
        patterns = (
            f"{subject} is {role}",
            f"{subject} is the {role}",
            f"{subject} is the current {role}",
            f"{subject}, {role}",
            f"{role} {subject}",
        )
        if any(phrase_pattern(p).search(text) for p in patterns):
            return True
        return _mentions(text, role)

    def _stale_claim_notes(
        self,
        text: str,
        now_date: date,
        matched: list[CriticalFact],
    ) -> list[str]:
        """Notes for entity+role pairs mentioned without their current holder."""
        holders: dict[tuple[str, str], list[CriticalFact]] = defaultdict(list)
        for fact in self.facts:
            if fact.holds_on(now_date):
                holders[(fact.entity, fact.role)].append(fact)

        notes = []
        for (entity, role), current in holders.items():
            if not (_mentions(text, entity) and _mentions(text, role)):
                continue
            if any(_mentions(text, fact.subject) for fact in current):
                continue
            names = ", ".join(fact.subject for fact in current)
            notes.append(
                f"Claim refers to the {role} of {entity} without naming the "
                f"current holder ({names}); possible stale claim"
            )
            for fact in current:
                if fact not in matched:
                    matched.append(fact)
        return notes


def _mentions(text: str, phrase: str) -> bool:
    return phrase_pattern(phrase).search(text) is not None
