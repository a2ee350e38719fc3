"""Corroboration pipeline: claim + oracle payload -> EngineResult.

Phases:
1. Claim analysis (temporal signal, critical facts) -> EvidenceRequest
2. Oracle call with retries (``run`` only; ``evaluate`` takes a payload)
3. Payload parsing and normalization
4. Validation, deduplication and ranking
5. Live link verification of the best links (optional, network-bound)
6. Contradiction resolution and confidence scoring
7. Capped score, verdict and display status

Every phase except 2 and 5 is pure, so scoring can be exercised without
any network access by passing ``link_verifier=None``.

Usage:
    pipeline = CorroborationPipeline(oracle=my_oracle, link_verifier=verifier)
    result = await pipeline.run("Joe Biden is president", date(2025, 6, 1))
"""

from datetime import date
from typing import Any, Optional

from corroboration_engine.analysis.critical_fact_checker import CriticalFactChecker
from corroboration_engine.analysis.request_builder import build_evidence_request
from corroboration_engine.analysis.temporal_interpreter import TemporalInterpreter
from corroboration_engine.config.reference_data import ReferenceTables
from corroboration_engine.config.settings import settings
from corroboration_engine.oracle.client import (
    EvidenceOracle,
    OracleUnavailableError,
    RetryingOracleClient,
)
from corroboration_engine.oracle.payload_parser import parse_oracle_payload
from corroboration_engine.schemas.assessment_schema import (
    ConfidenceFactors,
    ContradictionAssessment,
    PreferredStance,
    SourceAgreement,
)
from corroboration_engine.schemas.claim_schema import EvidenceRequest
from corroboration_engine.schemas.result_schema import EngineResult
from corroboration_engine.schemas.source_schema import (
    LinkStatus,
    NormalizedSource,
    Stance,
    TrustTier,
)
from corroboration_engine.scoring.confidence_scorer import DynamicConfidenceScorer
from corroboration_engine.scoring.contradiction_resolver import WeightedContradictionResolver
from corroboration_engine.scoring.verdict import (
    capped_score,
    count_stances,
    decide_verdict,
    display_status,
    explain_conflict,
    score_ceiling,
)
from corroboration_engine.sources.link_verifier import LiveLinkVerifier
from corroboration_engine.sources.source_normalizer import SourceNormalizer
from corroboration_engine.sources.source_validator import SourceValidator, rank_key
from corroboration_engine.utils.logging import (
    bind_correlation_id,
    get_correlation_id,
    get_structured_logger,
)

# Sources dated this many years before now_date still count as recent
RECENT_YEARS = 1


class CorroborationPipeline:
    """
    Runs the corroboration engine for one claim at a time.

    Components are injected so tests can swap any of them. The pipeline
    keeps no state between calls.

    Args:
        oracle: Evidence oracle used by ``run``
        link_verifier: Live link verifier; None skips live checks
        tables: Reference tables shared by the default components
    """

    def __init__(
        self,
        oracle: Optional[EvidenceOracle] = None,
        link_verifier: Optional[LiveLinkVerifier] = None,
        tables: Optional[ReferenceTables] = None,
        normalizer: Optional[SourceNormalizer] = None,
        validator: Optional[SourceValidator] = None,
        resolver: Optional[WeightedContradictionResolver] = None,
        scorer: Optional[DynamicConfidenceScorer] = None,
        best_links_limit: int = settings.best_links_limit,
        source_pool_limit: int = settings.source_pool_limit,
        oracle_max_attempts: int = settings.oracle_max_attempts,
        oracle_wait=None,
    ):
        self.tables = tables or ReferenceTables.default()
        self.oracle = oracle
        self.link_verifier = link_verifier
        self.interpreter = TemporalInterpreter(self.tables)
        self.checker = CriticalFactChecker(self.tables)
        self.normalizer = normalizer or SourceNormalizer(self.tables)
        self.validator = validator or SourceValidator(self.tables)
        self.resolver = resolver or WeightedContradictionResolver()
        self.scorer = scorer or DynamicConfidenceScorer()
        self.best_links_limit = best_links_limit
        self.source_pool_limit = source_pool_limit
        self.oracle_max_attempts = oracle_max_attempts
        self.oracle_wait = oracle_wait

    def prepare_request(self, claim_text: str, now_date: date) -> EvidenceRequest:
        """Analyse the claim and build the annotated oracle request."""
        return build_evidence_request(claim_text, now_date, self.interpreter, self.checker)

    async def run(self, claim_text: str, now_date: date) -> EngineResult:
        """
        Full run: analyse, ask the oracle, evaluate.

        Oracle failure never fails the request; the result degrades to the
        no-evidence state with ``degraded_reason`` set.
        """
        if self.oracle is None:
            raise ValueError("CorroborationPipeline.run requires an oracle")

        correlation_id = bind_correlation_id()
        log = get_structured_logger("pipeline", correlation_id=correlation_id)
        request = self.prepare_request(claim_text, now_date)
        log.info(
            "claim_analysed",
            enhanced_mode=request.enhanced_mode,
            critical_conflict=request.critical_facts.has_conflict,
            reference_type=request.temporal.reference_type.value,
        )

        client = RetryingOracleClient(
            self.oracle,
            max_attempts=self.oracle_max_attempts,
            wait=self.oracle_wait,
            correlation_id=correlation_id,
        )
        try:
            payload = await client.fetch(request)
        except OracleUnavailableError as e:
            log.warning("degraded_to_no_evidence", reason=str(e))
            return await self.evaluate(
                request, None, degraded_reason=str(e), correlation_id=correlation_id
            )
        return await self.evaluate(request, payload, correlation_id=correlation_id)

    async def evaluate(
        self,
        request: EvidenceRequest,
        payload: Any,
        degraded_reason: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> EngineResult:
        """
        Evaluate an oracle payload for an analysed claim.

        Args:
            request: Output of ``prepare_request``
            payload: Raw oracle payload (JSON text, dict or None)
            degraded_reason: Why evidence is missing, when it is

        Returns:
            EngineResult with capped score, verdict and ranked links
        """
        log = get_structured_logger(
            "pipeline", correlation_id=correlation_id or get_correlation_id()
        )
        now_date = request.claim.now_date
        parsed = parse_oracle_payload(payload)

        recommended = self.normalizer.normalize_all(parsed.best_links)
        others = self.normalizer.normalize_all(parsed.sources)
        evidence = self.validator.prepare(recommended + others)

        recommended_keys = {s.dedup_key for s in recommended}
        ranked = sorted(
            evidence,
            key=lambda s: (*rank_key(s)[:2], s.dedup_key not in recommended_keys, rank_key(s)[2]),
        )
        pool = ranked[: self.source_pool_limit]
        best = self.validator.select_best(ranked, self.best_links_limit)

        link_checks = []
        if self.link_verifier is not None and best:
            report = await self.link_verifier.verify_best_links(
                best, self.validator.drop_outranked_generics(pool)
            )
            best_links = report.best_links
            link_checks = report.checks
        else:
            best_links = [s.model_copy(update={"link_status": LinkStatus.UNCHECKED}) for s in best]

        pool_keys = {s.dedup_key for s in pool}
        sources = pool + [s for s in best_links if s.dedup_key not in pool_keys]

        assessment = self.resolver.assess(evidence, request.temporal, request.critical_facts)
        factors = self.build_factors(evidence, assessment, request, now_date)
        confidence = self.scorer.score(factors)

        counts = count_stances(sources)
        score = capped_score(parsed.draft_score, confidence, assessment)
        verdict = decide_verdict(parsed.draft_verdict, score, assessment, confidence, counts)
        score = min(score, score_ceiling(verdict))

        result = EngineResult(
            claim=request.claim.text,
            evaluated_on=now_date,
            verdict=verdict,
            score=score,
            status=display_status(assessment, counts),
            confidence=confidence,
            best_links=best_links,
            sources=sources,
            stance_counts=counts,
            conflict=explain_conflict(assessment, request.critical_facts),
            temporal=request.temporal,
            critical_facts=request.critical_facts,
            link_checks=link_checks,
            summary=parsed.summary,
            degraded_reason=degraded_reason,
        )
        log.info(
            "claim_evaluated",
            verdict=result.verdict.value,
            score=result.score,
            status=result.status.value,
            confidence=result.confidence.confidence,
            sources=len(sources),
            best_links=len(best_links),
            contradiction=assessment.contradiction_type.value,
        )
        return result

    @staticmethod
    def build_factors(
        evidence: list[NormalizedSource],
        assessment: ContradictionAssessment,
        request: EvidenceRequest,
        now_date: date,
    ) -> ConfidenceFactors:
        """
        Summarise evidence for the confidence scorer.

        Quality counts are taken on the side the resolver prefers; when it
        prefers neither, on the supporting side.
        """
        preferred = assessment.resolution.preferred_stance
        if preferred == PreferredStance.CONTRADICTS:
            side = [s for s in evidence if s.effective_stance == Stance.CONTRADICTING]
        else:
            side = [s for s in evidence if s.effective_stance == Stance.CORROBORATING]

        if not assessment.has_contradiction and len(side) >= 2:
            agreement = SourceAgreement.STRONG
        elif assessment.is_hard and assessment.resolution.score_cap is not None:
            agreement = SourceAgreement.CONFLICTING
        elif side:
            agreement = SourceAgreement.PARTIAL
        else:
            agreement = SourceAgreement.NONE

        recent_floor = now_date.year - RECENT_YEARS
        return ConfidenceFactors(
            official_source_count=sum(1 for s in side if s.trust_tier == TrustTier.HIGH),
            major_news_source_count=sum(1 for s in side if s.trust_tier == TrustTier.MEDIUM),
            total_sources=len(evidence),
            source_agreement=agreement,
            has_recent_confirmation=any(
                s.as_of_year is not None and recent_floor <= s.as_of_year <= now_date.year
                for s in side
            ),
            has_contradictions=assessment.is_hard,
            only_weak_sources=bool(evidence) and all(
                s.trust_tier == TrustTier.LOW for s in evidence
            ),
            time_sensitive=request.temporal.requires_recent_sources,
        )
