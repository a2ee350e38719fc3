"""Tests for LiveLinkVerifier using httpx.MockTransport (no real network)."""

import asyncio

import httpx
import pytest

from corroboration_engine.schemas.source_schema import LinkStatus, TrustTier
from corroboration_engine.sources.link_verifier import LiveLinkVerifier


# ── Fixtures ──────────────────────────────────────────────────────────────


def mock_client(statuses: dict[str, int], calls: list | None = None, default: int = 200):
    """Client answering each URL with the status mapped to it."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append((request.method, str(request.url)))
        return httpx.Response(statuses.get(str(request.url), default))

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def best(make_source):
    return [
        make_source("https://a.gov/x/y/1", tier=TrustTier.HIGH),
        make_source("https://b.com/x/y/1", tier=TrustTier.HIGH),
        make_source("https://c.com/x/y/1", tier=TrustTier.MEDIUM),
        make_source("https://d.com/x/y/1", tier=TrustTier.MEDIUM),
    ]


@pytest.fixture
def pool(best, make_source):
    return best + [
        make_source("https://a.gov/x/y/2", tier=TrustTier.HIGH),
        make_source("https://e.com/x/y/1", tier=TrustTier.MEDIUM),
        make_source("https://f.com/x/y/1", tier=TrustTier.LOW),
    ]


# ── Single checks ─────────────────────────────────────────────────────────


class TestCheck:
    @pytest.mark.asyncio
    async def test_live_head(self):
        async with mock_client({}) as client:
            status = await LiveLinkVerifier(client=client).check("https://example.com/a/b")
        assert status.is_live is True
        assert status.method == "HEAD"
        assert status.status_code == 200

    @pytest.mark.asyncio
    async def test_head_refused_falls_back_to_get(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(405 if request.method == "HEAD" else 200)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            status = await LiveLinkVerifier(client=client).check("https://example.com/a/b")
        assert status.is_live is True
        assert status.method == "GET"

    @pytest.mark.asyncio
    async def test_not_found_is_dead(self):
        async with mock_client({}, default=404) as client:
            status = await LiveLinkVerifier(client=client).check("https://example.com/a/b")
        assert status.is_live is False
        assert status.reason == "HTTP 404"

    @pytest.mark.asyncio
    async def test_forbidden_allowed_for_bot_blocking_sites(self):
        async with mock_client({}, default=403) as client:
            verifier = LiveLinkVerifier(client=client)
            wiki = await verifier.check("https://en.wikipedia.org/wiki/Joe_Biden")
            gov = await verifier.check("https://www.usa.gov/about-the-us")
            other = await verifier.check("https://example.com/a/b")
        assert wiki.is_live is True
        assert gov.is_live is True
        assert other.is_live is False

    @pytest.mark.asyncio
    async def test_network_error_is_dead(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            status = await LiveLinkVerifier(client=client).check("https://example.com/a/b")
        assert status.is_live is False
        assert status.reason == "ConnectError"

    @pytest.mark.asyncio
    async def test_timeout_is_dead(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            status = await LiveLinkVerifier(client=client, timeout=0.05).check(
                "https://example.com/a/b"
            )
        assert status.is_live is False
        assert status.reason == "timeout"

    @pytest.mark.asyncio
    async def test_unencodable_host_is_dead(self):
        calls: list = []
        async with mock_client({}, calls=calls) as client:
            status = await LiveLinkVerifier(client=client).check(
                "https://café_news.com/2024/01/01/a-story"
            )
        assert status.is_live is False
        assert status.reason == "not fetchable"
        assert calls == []

    @pytest.mark.asyncio
    async def test_encoding_error_during_request_is_dead(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise UnicodeError("label empty or too long")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            status = await LiveLinkVerifier(client=client).check("https://example.com/a/b")
        assert status.is_live is False
        assert status.reason == "invalid url"

    @pytest.mark.asyncio
    async def test_private_hosts_never_fetched(self):
        calls: list = []
        async with mock_client({}, calls=calls) as client:
            status = await LiveLinkVerifier(client=client).check("http://127.0.0.1/admin")
        assert status.is_live is False
        assert calls == []

    @pytest.mark.asyncio
    async def test_injected_client_left_open(self):
        client = mock_client({})
        async with LiveLinkVerifier(client=client):
            pass
        assert client.is_closed is False
        await client.aclose()


# ── Best-link verification ────────────────────────────────────────────────


class TestVerifyBestLinks:
    @pytest.mark.asyncio
    async def test_all_live(self, best, pool):
        async with mock_client({}) as client:
            report = await LiveLinkVerifier(client=client).verify_best_links(best, pool)
        assert [s.url for s in report.best_links] == [s.url for s in best]
        assert all(s.link_status == LinkStatus.VERIFIED for s in report.best_links)
        assert report.checks_used == 4

    @pytest.mark.asyncio
    async def test_dead_link_replaced_from_pool(self, best, pool):
        async with mock_client({"https://c.com/x/y/1": 404}) as client:
            report = await LiveLinkVerifier(client=client).verify_best_links(best, pool)

        assert len(report.best_links) == 4
        urls = [s.url for s in report.best_links]
        assert "https://c.com/x/y/1" not in urls
        # a.gov already used, so the next unused domain in pool order is e.com
        assert urls[-1] == "https://e.com/x/y/1"
        assert report.best_links[-1].link_status == LinkStatus.REPLACEMENT
        assert report.dead_links == ["https://c.com/x/y/1"]
        assert report.checks_used == 5
        assert len({s.domain for s in report.best_links}) == 4

    @pytest.mark.asyncio
    async def test_dead_replacement_skipped(self, best, pool):
        statuses = {"https://c.com/x/y/1": 404, "https://e.com/x/y/1": 500}
        async with mock_client(statuses) as client:
            report = await LiveLinkVerifier(client=client).verify_best_links(best, pool)
        assert [s.url for s in report.best_links][-1] == "https://f.com/x/y/1"
        assert report.checks_used == 6

    @pytest.mark.asyncio
    async def test_budget_leaves_slots_unfilled(self, best, pool):
        async with mock_client({"https://c.com/x/y/1": 404}) as client:
            verifier = LiveLinkVerifier(client=client, budget=4)
            report = await verifier.verify_best_links(best, pool)
        assert len(report.best_links) == 3
        assert report.checks_used == 4

    @pytest.mark.asyncio
    async def test_budget_smaller_than_best_list(self, best, pool):
        calls: list = []
        async with mock_client({}, calls=calls) as client:
            report = await LiveLinkVerifier(client=client, budget=2).verify_best_links(best, pool)
        assert len(report.best_links) == 2
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_pool_exhausted(self, best):
        async with mock_client({}, default=404) as client:
            report = await LiveLinkVerifier(client=client).verify_best_links(best, best)
        assert report.best_links == []
        assert report.checks_used == 4

    @pytest.mark.asyncio
    async def test_empty_best_list(self):
        async with mock_client({}) as client:
            report = await LiveLinkVerifier(client=client).verify_best_links([], [])
        assert report.best_links == []
        assert report.checks_used == 0

    @pytest.mark.asyncio
    async def test_same_domain_sibling_tried_after_dead_replacement(self, make_source):
        best = [
            make_source("https://a.com/x/y/1", tier=TrustTier.HIGH),
            make_source("https://d.com/x/y/1", tier=TrustTier.HIGH),
            make_source("https://c.com/x/y/1", tier=TrustTier.MEDIUM),
        ]
        pool = best + [
            make_source("https://b.com/story-b1/x/1", tier=TrustTier.MEDIUM),
            make_source("https://b.com/story-b2/x/1", tier=TrustTier.MEDIUM),
        ]
        statuses = {
            "https://a.com/x/y/1": 404,
            "https://d.com/x/y/1": 404,
            "https://b.com/story-b1/x/1": 404,
        }
        async with mock_client(statuses) as client:
            verifier = LiveLinkVerifier(client=client, best_links_limit=3)
            report = await verifier.verify_best_links(best, pool)

        assert [s.url for s in report.best_links] == [
            "https://c.com/x/y/1",
            "https://b.com/story-b2/x/1",
        ]
        assert report.best_links[1].link_status == LinkStatus.REPLACEMENT
        assert report.checks_used == 5
