"""Evidence oracle boundary.

The oracle (a language-model gateway) lives outside the engine. Anything
with an async ``gather_evidence(request)`` method qualifies; it returns a
loosely-structured payload for ``parse_oracle_payload``.

RetryingOracleClient retries failed calls with exponential backoff and
raises OracleUnavailableError once attempts run out, so callers can
degrade instead of failing the request.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from tenacity import AsyncRetrying, RetryError, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from corroboration_engine.config.settings import settings
from corroboration_engine.schemas.claim_schema import EvidenceRequest
from corroboration_engine.utils.logging import get_structured_logger


class OracleUnavailableError(RuntimeError):
    """The oracle returned nothing usable after every retry."""


@runtime_checkable
class EvidenceOracle(Protocol):
    async def gather_evidence(self, request: EvidenceRequest) -> Any:
        ...


class RetryingOracleClient:
    """
    Calls an EvidenceOracle with bounded exponential backoff.

    Args:
        oracle: The oracle implementation
        max_attempts: Attempts before giving up
        wait: Tenacity wait strategy (exponential 1s..8s by default)
        correlation_id: Bound to every log line for this request
    """

    def __init__(
        self,
        oracle: EvidenceOracle,
        max_attempts: int = settings.oracle_max_attempts,
        wait: Optional[wait_base] = None,
        correlation_id: Optional[str] = None,
    ):
        self.oracle = oracle
        self.max_attempts = max_attempts
        self.wait = wait or wait_exponential(multiplier=1, min=1, max=8)
        self.logger = get_structured_logger("oracle_client", correlation_id=correlation_id)

    async def fetch(self, request: EvidenceRequest) -> Any:
        """
        Fetch the evidence payload for ``request``.

        Raises:
            OracleUnavailableError: Every attempt failed
        """
        attempts = 0
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=self.wait,
            ):
                with attempt:
                    attempts += 1
                    if attempts > 1:
                        self.logger.info("oracle_retry", attempt=attempts)
                    return await self.oracle.gather_evidence(request)
        except RetryError as e:
            cause = e.last_attempt.exception()
            self.logger.warning(
                "oracle_unavailable",
                attempts=attempts,
                error=str(cause),
            )
            raise OracleUnavailableError(
                f"Oracle failed after {attempts} attempts: {cause}"
            ) from cause
