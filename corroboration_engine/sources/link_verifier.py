"""Live Link Verifier: confirms best links resolve and backfills dead ones.

Each check issues a HEAD request bounded by a short timeout. Servers that
refuse HEAD (403/405) or fail it outright get one streamed GET whose body
is never read. 2xx/3xx counts as live; 403 also counts as live for sites
known to block automated clients.

All checks for one request share a budget. Best links are checked first,
concurrently; replacements are then drawn from the ranked pool in order,
skipping domains already represented. Slots left open when the budget
runs out stay empty.

Usage:
    async with LiveLinkVerifier() as verifier:
        report = await verifier.verify_best_links(best, pool)
"""

import asyncio
import functools
from dataclasses import dataclass, field
from typing import Optional

import aiometer
import httpx

from corroboration_engine.config.reference_data import ReferenceTables
from corroboration_engine.config.settings import settings
from corroboration_engine.schemas.source_schema import (
    LinkStatus,
    LiveLinkStatus,
    NormalizedSource,
)
from corroboration_engine.sources import url_tools
from corroboration_engine.utils.logging import get_structured_logger

# Status codes that mean "try GET instead"
HEAD_REFUSED = frozenset({403, 405})


@dataclass
class LinkVerificationReport:
    """Best links after verification plus every check made."""

    best_links: list[NormalizedSource] = field(default_factory=list)
    checks: list[LiveLinkStatus] = field(default_factory=list)
    dead_links: list[str] = field(default_factory=list)

    @property
    def checks_used(self) -> int:
        return len(self.checks)


class LiveLinkVerifier:
    """
    Bounded live-link checking over a shared httpx.AsyncClient.

    Args:
        client: Optional client to use (tests pass one built on MockTransport)
        timeout: Seconds allowed per check, HEAD and GET fallback together
        budget: Total checks allowed per verify_best_links call
        concurrency: Checks in flight at once
        best_links_limit: Slots in the best list
        tables: Reference tables (bot-blocking domains)
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = settings.link_check_timeout,
        budget: int = settings.link_check_budget,
        concurrency: int = settings.link_check_concurrency,
        best_links_limit: int = settings.best_links_limit,
        tables: Optional[ReferenceTables] = None,
        correlation_id: Optional[str] = None,
    ):
        self.timeout = timeout
        self.budget = budget
        self.concurrency = concurrency
        self.best_links_limit = best_links_limit
        self.tables = tables or ReferenceTables.default()
        self._client = client
        self._owns_client = client is None
        self.logger = get_structured_logger(
            "link_verifier", correlation_id=correlation_id
        )

    async def __aenter__(self) -> "LiveLinkVerifier":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=5),
                follow_redirects=True,
                headers={"User-Agent": settings.user_agent},
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this verifier created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    # ── Single checks ───────────────────────────────────────────────────

    async def check(self, url: str) -> LiveLinkStatus:
        """Check one URL. Never raises; failures come back as dead links."""
        if url_tools.parse_http_url(url) is None or url_tools.is_blocked_host(url):
            return LiveLinkStatus(url=url, is_live=False, reason="not fetchable")

        try:
            status_code, method = await asyncio.wait_for(
                self._request_status(url), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            self.logger.debug("link_check_timeout", url=url)
            return LiveLinkStatus(url=url, is_live=False, reason="timeout")
        except httpx.HTTPError as e:
            self.logger.debug("link_check_failed", url=url, error=str(e))
            return LiveLinkStatus(url=url, is_live=False, reason=type(e).__name__)
        except (httpx.InvalidURL, UnicodeError, ValueError) as e:
            # Hosts the client cannot encode fail before any request is sent
            self.logger.debug("link_check_invalid_url", url=url, error=str(e))
            return LiveLinkStatus(url=url, is_live=False, reason="invalid url")

        is_live = self._is_live_status(url, status_code)
        return LiveLinkStatus(
            url=url,
            is_live=is_live,
            status_code=status_code,
            method=method,
            reason=None if is_live else f"HTTP {status_code}",
        )

    async def _request_status(self, url: str) -> tuple[int, str]:
        client = await self._get_client()
        try:
            response = await client.head(url)
        except httpx.HTTPError as e:
            self.logger.debug("head_failed", url=url, error=str(e))
            return await self._get_status(client, url), "GET"

        if response.status_code in HEAD_REFUSED:
            return await self._get_status(client, url), "GET"
        return response.status_code, "HEAD"

    @staticmethod
    async def _get_status(client: httpx.AsyncClient, url: str) -> int:
        async with client.stream("GET", url) as response:
            return response.status_code

    def _is_live_status(self, url: str, status_code: int) -> bool:
        if 200 <= status_code < 400:
            return True
        if status_code == 403:
            return self.tables.tolerates_forbidden(url_tools.extract_domain(url))
        return False

    async def check_many(self, urls: list[str]) -> list[LiveLinkStatus]:
        """Check URLs concurrently; results are in input order."""
        if not urls:
            return []
        return await aiometer.run_all(
            [functools.partial(self.check, url) for url in urls],
            max_at_once=self.concurrency,
        )

    # ── Best-link verification ──────────────────────────────────────────

    async def verify_best_links(
        self,
        best: list[NormalizedSource],
        pool: list[NormalizedSource],
    ) -> LinkVerificationReport:
        """
        Verify best links and backfill dead ones from the pool.

        Args:
            best: Ranked best links (at most best_links_limit are used)
            pool: Ranked source pool to draw replacements from

        Returns:
            LinkVerificationReport with at most best_links_limit live links,
            all on distinct domains
        """
        report = LinkVerificationReport()
        limit = self.best_links_limit
        best = best[:limit]

        first_pass = best[: self.budget]
        statuses = await self.check_many([s.url for s in first_pass])
        report.checks.extend(statuses)

        used_domains: set[str] = set()
        for source, status in zip(first_pass, statuses):
            if status.is_live and source.domain not in used_domains:
                report.best_links.append(
                    source.model_copy(update={"link_status": LinkStatus.VERIFIED})
                )
                used_domains.add(source.domain)
            elif not status.is_live:
                report.dead_links.append(source.url)

        best_keys = {s.dedup_key for s in best}
        pending = [s for s in pool if s.dedup_key not in best_keys]

        while len(report.best_links) < limit and report.checks_used < self.budget:
            room = min(limit - len(report.best_links), self.budget - report.checks_used)
            batch: list[NormalizedSource] = []
            batch_domains: set[str] = set()
            # Same-domain siblings wait for the next batch in case this one is dead
            deferred: list[NormalizedSource] = []
            for candidate in pending:
                if candidate.domain in used_domains:
                    continue
                if len(batch) < room and candidate.domain not in batch_domains:
                    batch.append(candidate)
                    batch_domains.add(candidate.domain)
                else:
                    deferred.append(candidate)
            pending = deferred
            if not batch:
                break

            statuses = await self.check_many([s.url for s in batch])
            report.checks.extend(statuses)
            for candidate, status in zip(batch, statuses):
                if not status.is_live:
                    report.dead_links.append(candidate.url)
                    continue
                if len(report.best_links) < limit:
                    report.best_links.append(
                        candidate.model_copy(update={"link_status": LinkStatus.REPLACEMENT})
                    )
                    used_domains.add(candidate.domain)

        self.logger.info(
            "best_links_verified",
            live=len(report.best_links),
            dead=len(report.dead_links),
            checks_used=report.checks_used,
            budget=self.budget,
        )
        return report
