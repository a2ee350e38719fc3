"""Static reference tables injected into the engine components.

Tables are plain immutable data. Components receive a ReferenceTables
instance at construction so tests can swap in their own lists without
touching module globals.

Trust hierarchy (most to least credible):
1. Official and reference sources (.gov, .edu, .int, wire services,
   encyclopedias, public health and science agencies): high
2. Major newspapers and magazines: medium
3. Everything else: low
"""

import re
from dataclasses import dataclass, field

from corroboration_engine.config.critical_facts import CRITICAL_FACTS
from corroboration_engine.schemas.claim_schema import CriticalFact

# Query parameters that never change the page being served
TRACKING_PARAMS: frozenset[str] = frozenset({
    # Google Analytics
    "utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content",
    "utm_id", "utm_source_platform", "utm_creative_format", "utm_marketing_tactic",
    # Facebook/Meta
    "fbclid", "fb_action_ids", "fb_action_types", "fb_source", "fb_ref",
    # Twitter
    "twclid",
    # Microsoft/Bing
    "msclkid",
    # Google Ads
    "gclid", "gclsrc", "dclid",
    # Mailing lists and misc
    "ref", "source", "mc_cid", "mc_eid", "_ga", "_gl", "_hsenc", "_hsmi",
    "mkt_tok", "cmpid", "smid", "ocid",
})

HIGH_TRUST_PATTERN = re.compile(
    r"\.(gov|gouv|edu|int)\b|wikipedia|britannica|reuters|associated\s*press|"
    r"apnews|\bafp\b|who\.int|un\.org|\bnasa\b|\bnih\b|\bcdc\b|\bfda\b|"
    r"nature\.com|sciencedirect|pubmed|smithsonian|\bsi\.edu\b",
    re.IGNORECASE,
)

MEDIUM_TRUST_PATTERN = re.compile(
    r"\bbbc\b|\bcnn\b|nytimes|new\s*york\s*times|washingtonpost|washington\s*post|"
    r"\bwsj\b|wall\s*street\s*journal|guardian|telegraph|le\s*monde|lemonde|"
    r"figaro|economist|bloomberg|politico|\bnpr\b|\bpbs\b|time\.com|forbes|"
    r"wired|financial\s*times|\bft\.com|aljazeera|\babc\s*news|\bcbs\b|\bnbc\b",
    re.IGNORECASE,
)

# Domains trusted enough that any non-root page counts as an article
TRUSTED_DOMAINS: frozenset[str] = frozenset({
    "nps.gov", "si.edu", "australian.museum", "britannica.com", "wikipedia.org",
    "aspca.org", "petmd.com", "vcahospitals.com", "cdc.gov", "nih.gov",
    "nasa.gov", "who.int", "nature.com", "sciencedirect.com",
    "pubmed.ncbi.nlm.nih.gov",
})
TRUSTED_SUFFIXES: tuple[str, ...] = (".gov", ".edu")

# Section landing pages that list articles rather than being one
HUB_PATHS: frozenset[str] = frozenset({
    "/news", "/world", "/politics", "/business", "/sport", "/sports",
    "/entertainment", "/health", "/science", "/tech", "/technology",
    "/video", "/videos", "/live", "/latest", "/breaking", "/search",
    "/tag", "/tags", "/topic", "/topics", "/category", "/categories",
    "/hub", "/section", "/sections",
})
# First path segments of listing pages such as /tag/elections
LISTING_PREFIXES: frozenset[str] = frozenset({
    "tag", "tags", "topic", "topics", "category", "categories",
    "section", "sections", "author", "authors", "hub",
})

BAD_URL_MARKERS: tuple[str, ...] = (
    "404", "not-found", "page-not-found", "notfound", "/error",
    "redirect=0", "webcache", "amp/s",
)

# Encyclopedia pages too broad to support a specific claim
OVERBROAD_WIKI_PAGES: frozenset[str] = frozenset({
    "animal", "animals", "insect", "mammal", "reptile", "bird", "fish",
    "plant", "human",
})
WIKI_NAMESPACES: tuple[str, ...] = (
    "category:", "portal:", "special:", "help:", "wikipedia:", "template:",
    "talk:", "file:",
)

# Sites that answer 403 to automated requests while serving readers fine
BOT_BLOCKING_DOMAINS: frozenset[str] = frozenset({
    "britannica.com", "wikipedia.org", "nature.com", "nytimes.com", "bbc.com",
})

URL_SHORTENERS: frozenset[str] = frozenset({
    "bit.ly", "tinyurl.com", "goo.gl", "t.co", "ow.ly", "is.gd", "buff.ly",
    "rebrand.ly", "cutt.ly", "shorturl.at", "tiny.cc", "rb.gy",
})
SUSPICIOUS_TLDS: frozenset[str] = frozenset({
    "tk", "ml", "ga", "cf", "gq", "xyz", "top", "click", "loan", "work",
    "zip", "mov",
})
SUSPICIOUS_KEYWORDS: tuple[str, ...] = (
    "login", "verify", "account", "update", "secure", "banking", "password",
    "free-gift", "prize", "winner",
)

# Second-level labels that sit under a country code (bbc.co.uk)
COUNTRY_SECOND_LEVELS: frozenset[str] = frozenset({
    "co", "com", "org", "net", "gov", "ac", "edu", "gouv", "go", "or", "ne",
})

# Temporal lexicon
CURRENT_MARKERS: tuple[str, ...] = (
    "currently", "current", "today", "right now", "at present", "presently",
    "as of now", "nowadays", "these days", "at this time", "now",
)
PAST_MARKERS: tuple[str, ...] = (
    "was", "were", "used to", "formerly", "previously", "in the past",
    "last year", "last month", "ago", "back in", "before", "former",
)
FUTURE_MARKERS: tuple[str, ...] = (
    "will be", "will become", "next year", "upcoming", "soon",
    "in the future", "expected to", "scheduled to", "planned to",
)
# Phrase -> year offset from the reference date
RELATIVE_MARKERS: tuple[tuple[str, int], ...] = (
    ("this year", 0),
    ("last year", -1),
    ("next year", 1),
    ("this month", 0),
    ("last month", 0),
)
TIME_SENSITIVE_TOPICS: tuple[str, ...] = (
    "president", "prime minister", "chancellor", "leader", "ceo", "director",
    "minister", "secretary", "chairman", "monarch", "king", "queen", "pope",
    "election", "vote", "referendum", "war", "conflict", "crisis", "pandemic",
    "outbreak", "price", "rate", "gdp", "inflation",
)
# Markers that put a role assertion in the past tense
ROLE_PAST_MARKERS: tuple[str, ...] = (
    "was", "were", "former", "ex-", "previously", "until", "used to",
)


@dataclass(frozen=True)
class ReferenceTables:
    """Read-only lists and patterns shared by the engine components."""

    tracking_params: frozenset[str] = TRACKING_PARAMS
    high_trust_pattern: re.Pattern = HIGH_TRUST_PATTERN
    medium_trust_pattern: re.Pattern = MEDIUM_TRUST_PATTERN
    trusted_domains: frozenset[str] = TRUSTED_DOMAINS
    trusted_suffixes: tuple[str, ...] = TRUSTED_SUFFIXES
    hub_paths: frozenset[str] = HUB_PATHS
    listing_prefixes: frozenset[str] = LISTING_PREFIXES
    bad_url_markers: tuple[str, ...] = BAD_URL_MARKERS
    overbroad_wiki_pages: frozenset[str] = OVERBROAD_WIKI_PAGES
    wiki_namespaces: tuple[str, ...] = WIKI_NAMESPACES
    bot_blocking_domains: frozenset[str] = BOT_BLOCKING_DOMAINS
    url_shorteners: frozenset[str] = URL_SHORTENERS
    suspicious_tlds: frozenset[str] = SUSPICIOUS_TLDS
    suspicious_keywords: tuple[str, ...] = SUSPICIOUS_KEYWORDS
    country_second_levels: frozenset[str] = COUNTRY_SECOND_LEVELS
    current_markers: tuple[str, ...] = CURRENT_MARKERS
    past_markers: tuple[str, ...] = PAST_MARKERS
    future_markers: tuple[str, ...] = FUTURE_MARKERS
    relative_markers: tuple[tuple[str, int], ...] = RELATIVE_MARKERS
    time_sensitive_topics: tuple[str, ...] = TIME_SENSITIVE_TOPICS
    role_past_markers: tuple[str, ...] = ROLE_PAST_MARKERS
    critical_facts: tuple[CriticalFact, ...] = field(default=CRITICAL_FACTS)

    @classmethod
    def default(cls) -> "ReferenceTables":
        return _DEFAULT_TABLES

    def is_trusted_domain(self, domain: str) -> bool:
        return _matches_domain(domain, self.trusted_domains) or domain.endswith(
            self.trusted_suffixes
        )

    def tolerates_forbidden(self, domain: str) -> bool:
        """Whether a 403 from this domain still means the page exists."""
        return _matches_domain(domain, self.bot_blocking_domains) or domain.endswith(
            self.trusted_suffixes
        )


def _matches_domain(domain: str, domains: frozenset[str]) -> bool:
    """Exact or subdomain match (en.wikipedia.org matches wikipedia.org)."""
    return any(domain == d or domain.endswith("." + d) for d in domains)


_DEFAULT_TABLES = ReferenceTables()
