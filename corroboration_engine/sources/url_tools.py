"""URL helpers shared by the normalizer, validator and link verifier.

Normalization for deduplication:
1. Lowercase host and drop a leading ``www.``
2. Remove tracking parameters, sort the rest
3. Remove fragments
4. Remove trailing slashes
5. Ignore the scheme (http and https copies of a page collapse)
"""

import ipaddress
import re
from typing import Optional

import httpx
from yarl import URL

from corroboration_engine.config.logging import get_logger
from corroboration_engine.config.reference_data import ReferenceTables

logger = get_logger("url_tools")

_ALLOWED_SCHEMES = ("http", "https")
_HOST_LABEL = re.compile(r"^[\w-]+$")


def parse_http_url(url: str) -> Optional[URL]:
    """Parse an absolute http(s) URL, returning None when it is not one."""
    if not url or any(ch.isspace() for ch in url.strip()):
        return None
    try:
        parsed = URL(url.strip())
    except (ValueError, TypeError) as e:
        logger.debug(f"Unparseable URL '{url}': {e}")
        return None
    if not parsed.is_absolute() or parsed.scheme.lower() not in _ALLOWED_SCHEMES:
        return None
    host = (parsed.host or "").lower().rstrip(".")
    if not host or not _is_plausible_host(host):
        return None
    if not _is_requestable(url.strip()):
        return None
    return parsed


def _is_requestable(url: str) -> bool:
    """Whether httpx can build a request for ``url`` (IDNA-encodable host)."""
    try:
        httpx.URL(url)
    except (httpx.InvalidURL, UnicodeError, ValueError) as e:
        logger.debug(f"Unrequestable URL '{url}': {e}")
        return False
    return True


def _is_plausible_host(host: str) -> bool:
    if _as_ip(host) is not None:
        return True
    labels = host.split(".")
    if host == "localhost":
        return True
    return len(labels) >= 2 and all(_HOST_LABEL.match(label) for label in labels)


def _as_ip(host: str):
    try:
        return ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return None


def extract_domain(url: str) -> str:
    """Host of ``url`` lower-cased without ``www.``; empty when unparseable."""
    parsed = parse_http_url(url)
    if parsed is None:
        return ""
    return _bare_host(parsed)


def _bare_host(parsed: URL) -> str:
    host = (parsed.host or "").lower().rstrip(".")
    return host[4:] if host.startswith("www.") else host


def dedup_key(url: str, tables: Optional[ReferenceTables] = None) -> str:
    """
    Normalized form of ``url`` used to collapse duplicates.

    ``https://www.Example.com/a/?utm_source=x#top`` and
    ``http://example.com/a`` share the key ``example.com/a``.

    Args:
        url: Absolute http(s) URL
        tables: Reference tables holding the tracking parameters

    Returns:
        Normalized key; the stripped input when it is not an http(s) URL
    """
    tables = tables or ReferenceTables.default()
    parsed = parse_http_url(url)
    if parsed is None:
        return url.strip()

    host = _bare_host(parsed)
    port = parsed.port
    scheme = parsed.scheme.lower()
    if port and not ((scheme == "http" and port == 80) or (scheme == "https" and port == 443)):
        host = f"{host}:{port}"

    kept = sorted(
        (key, value)
        for key, value in parsed.query.items()
        if key.lower() not in tables.tracking_params
    )
    query_string = "&".join(f"{k}={v}" for k, v in kept)

    path = parsed.path.rstrip("/")
    return f"{host}{path}?{query_string}" if query_string else f"{host}{path}"


def path_segments(url: str) -> list[str]:
    """Non-empty path segments of ``url``, lower-cased."""
    parsed = parse_http_url(url)
    if parsed is None:
        return []
    return [seg.lower() for seg in parsed.path.split("/") if seg]


def normalized_path(url: str) -> str:
    """Lower-cased path without trailing slash ('' for the root)."""
    segments = path_segments(url)
    return "/" + "/".join(segments) if segments else ""


def is_generic_url(url: str, tables: Optional[ReferenceTables] = None) -> bool:
    """
    Whether ``url`` points at a homepage, section hub or listing page.

    Generic pages cannot support a specific claim even when the site is
    reputable, so they lose to any article-level link of equal trust.
    """
    tables = tables or ReferenceTables.default()
    segments = path_segments(url)
    if not segments:
        return True
    if normalized_path(url) in tables.hub_paths:
        return True
    if len(segments) == 1 and len(segments[0]) <= 3:
        return True
    return segments[0] in tables.listing_prefixes and len(segments) <= 2


def is_blocked_host(url: str) -> bool:
    """Loopback, private and link-local hosts are never fetched or cited."""
    parsed = parse_http_url(url)
    if parsed is None:
        return True
    host = _bare_host(parsed)
    if host == "localhost" or host.endswith(".localhost") or host.endswith(".local"):
        return True
    ip = _as_ip(host)
    if ip is None:
        return False
    return ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_reserved


def registered_label(domain: str, tables: Optional[ReferenceTables] = None) -> str:
    """
    Organisation label of a domain (``bbc`` for ``news.bbc.co.uk``).

    Country-code domains with a generic second level (co.uk, com.au) skip
    that level.
    """
    tables = tables or ReferenceTables.default()
    labels = [label for label in domain.lower().split(".") if label]
    if len(labels) < 2:
        return labels[0] if labels else ""
    if (
        len(labels) >= 3
        and len(labels[-1]) == 2
        and labels[-2] in tables.country_second_levels
    ):
        return labels[-3]
    return labels[-2]


def url_risk_signals(url: str, tables: Optional[ReferenceTables] = None) -> list[str]:
    """Reasons a link looks untrustworthy; empty when nothing stands out."""
    tables = tables or ReferenceTables.default()
    domain = extract_domain(url)
    if not domain:
        return ["unparseable url"]

    signals = []
    tld = domain.rsplit(".", 1)[-1]
    if tld in tables.suspicious_tlds:
        signals.append(f"suspicious tld .{tld}")

    lowered = url.lower()
    keywords = [kw for kw in tables.suspicious_keywords if kw in lowered]
    if len(keywords) >= 2:
        signals.append(f"suspicious keywords: {', '.join(keywords)}")
    return signals


def is_shortened(url: str, tables: Optional[ReferenceTables] = None) -> bool:
    tables = tables or ReferenceTables.default()
    return extract_domain(url) in tables.url_shorteners
