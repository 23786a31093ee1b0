"""
Core crawling logic and data structures.
"""
from __future__ import annotations

import re
import sys
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set, Tuple
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup, ParserRejectedMarkup, SoupStrainer

# A skip pattern is any predicate over a URL string
SkipPattern = Callable[[str], bool]

# SoupStrainer to parse only <a> tags (faster link extraction)
LINK_STRAINER = SoupStrainer("a", href=True)

# Prefixes the root resolver treats as already-complete URLs
VALID_URL_PREFIXES: Tuple[str, ...] = ("#", "//", "mailto:", "tel:", "sms:", "http://", "https://")


def skip_pattern(regex: str, flags: int = 0) -> SkipPattern:
    """Build a skip predicate that matches anywhere in the URL."""
    compiled = re.compile(regex, flags)
    return lambda url: compiled.search(url) is not None


DEFAULT_SKIP_PATTERNS: Tuple[SkipPattern, ...] = (
    skip_pattern("\u00a0"),  # non-breaking space
    skip_pattern(r"javascript:void\(0\)", re.IGNORECASE),
    skip_pattern(r"tel:", re.IGNORECASE),
)


class TransportError(Exception):
    """Raised when a page could not be fetched at the network layer."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


@dataclass(frozen=True, slots=True)
class CrawlConfig:
    """Immutable per-run crawl configuration."""
    site_url: str
    seeds: Tuple[str, ...] = ("/",)
    visit_external: bool = False
    skip_patterns: Tuple[SkipPattern, ...] = DEFAULT_SKIP_PATTERNS
    timeout_s: float = 15.0
    user_agent: str = "SitemapCrawler/1.0"
    verbose: bool = False


@dataclass(slots=True)
class FetchResult:
    """Outcome of a completed HTTP request."""
    ok: bool
    status_code: Optional[int] = None
    body: str = ""


Fetcher = Callable[[str], FetchResult]


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during crawl for summary output."""
    pages_crawled: int = 0
    pages_in_sitemap: int = 0
    error_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_error(self, status_code: Optional[int]) -> None:
        """Record a dead end by status code, or a transport error when None."""
        if status_code is None:
            self.error_counts["connection_error"] += 1
        else:
            self.error_counts[str(status_code)] += 1


@dataclass(slots=True)
class CrawlState:
    """Mutable state shared by every seed of one crawl run."""
    visited: Set[str] = field(default_factory=set)
    sitemap: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    stats: CrawlStats = field(default_factory=CrawlStats)

    def add_to_sitemap(self, url: str) -> None:
        """Append url to the sitemap unless it is already listed."""
        if url not in self.sitemap:
            self.sitemap.append(url)
            self.stats.pages_in_sitemap += 1


@dataclass(slots=True)
class CrawlResult:
    """Final artifacts of a crawl run."""
    sitemap_urls: List[str]
    skipped_urls: List[str]
    stats: CrawlStats


class SiteRoot:
    """Resolves paths against the site's own root URL."""

    def __init__(self, site_url: str) -> None:
        parsed = urlparse(site_url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ValueError(f"Invalid site URL: {site_url}")
        self.root = site_url.rstrip("/")
        self.host = urlparse(self.to("/")).hostname

    def to(self, path: str) -> str:
        """Return an absolute URL for path; complete URLs pass through unchanged."""
        if path.startswith(VALID_URL_PREFIXES):
            return path
        tail = path.strip("/")
        return f"{self.root}/{tail}" if tail else self.root


class HttpFetcher:
    """Fetch collaborator backed by a requests session."""

    def __init__(self, timeout_s: float = 15.0, user_agent: str = "SitemapCrawler/1.0") -> None:
        self.timeout_s = timeout_s
        self.session = requests.Session()
        self.session.headers["User-Agent"] = user_agent

    def __call__(self, url: str) -> FetchResult:
        try:
            resp = self.session.get(url, timeout=self.timeout_s, allow_redirects=True)
        except requests.RequestException as e:
            raise TransportError(url, str(e)) from e
        return FetchResult(
            ok=200 <= resp.status_code < 300,
            status_code=resp.status_code,
            body=resp.text,
        )


def url_host(url: str) -> Optional[str]:
    """Return the host component of url, or None when it has none or fails to parse."""
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


def resolve_url(href: str, current_url: str, site: SiteRoot) -> str:
    """
    Turn a raw href into an absolute URL.

    Hrefs with a host are returned as-is. Anything else is appended to the
    current page URL and re-absolutized against the site root, so
    "/contact" found on "https://site/about" becomes
    "https://site/about/contact".
    """
    if url_host(href) is None:
        return site.to(current_url.rstrip("/") + "/" + href.lstrip("/"))
    return href


def is_excluded(url: str, patterns: Tuple[SkipPattern, ...] = DEFAULT_SKIP_PATTERNS) -> bool:
    """Check url against the skip patterns, stopping at the first match."""
    return any(pattern(url) for pattern in patterns)


def is_internal(url: str, site: SiteRoot) -> bool:
    """Check if url is on the site's own host; host-less URLs count as internal."""
    host = url_host(url)
    return not host or host == site.host


def in_context(url: str, base_context: Optional[str]) -> bool:
    """Check if url lies under the base context prefix, when one is active."""
    return not base_context or url.startswith(base_context)


def extract_links(html: str) -> List[str]:
    """Extract all href values from <a> tags; unparseable markup yields no links."""
    try:
        soup = BeautifulSoup(html, "lxml", parse_only=LINK_STRAINER)
    except (ParserRejectedMarkup, ValueError):
        return []
    return [a["href"] for a in soup if a.get("href")]


def print_scan_line(url: str, status: Optional[int], new_links: int) -> None:
    """Print single scan result line."""
    status_str = str(status) if status else "ERR"
    sys.stderr.write(f"  → {status_str} {url} (+{new_links} links)\n")
    sys.stderr.flush()


def crawl(
    url: str,
    state: CrawlState,
    site: SiteRoot,
    fetch: Fetcher,
    base_context: Optional[str] = None,
    visit_external: bool = False,
    skip_patterns: Tuple[SkipPattern, ...] = DEFAULT_SKIP_PATTERNS,
    verbose: bool = False,
) -> None:
    """
    Crawl everything reachable from url, depth-first in document order.

    Args:
        url: Absolute URL to start from.
        state: Visited set and result lists, shared across seeds.
        site: Root resolver for relative links and the internal-host check.
        fetch: Callable returning a FetchResult or raising TransportError.
        base_context: Required prefix for every visited URL, if given.
        visit_external: Allow links to hosts other than the site's own.
        skip_patterns: Ordered exclusion predicates.
        verbose: Whether to print progress information.
    """
    # LIFO worklist; children are pushed reversed so the first link is visited first
    pending: List[str] = [url]

    while pending:
        url = pending.pop().rstrip("/")

        if is_excluded(url, skip_patterns):
            sys.stderr.write(f"Skipping URL with unwanted pattern: {url}\n")
            state.skipped.append(url)
            continue

        if url in state.visited:
            continue

        # Out-of-scope and out-of-context URLs are dropped without a trace
        if not visit_external and not is_internal(url, site):
            continue
        if not in_context(url, base_context):
            continue

        if verbose:
            sys.stderr.write(f"Crawling: {url}\n")
        state.visited.add(url)

        try:
            resp = fetch(url)
        except TransportError as e:
            sys.stderr.write(f"Error crawling {url}: {e}\n")
            state.stats.pages_crawled += 1
            state.stats.record_error(None)
            continue

        state.stats.pages_crawled += 1
        if not resp.ok:
            state.stats.record_error(resp.status_code)
            if verbose:
                print_scan_line(url, resp.status_code, 0)
            continue

        state.add_to_sitemap(url)
        links = [resolve_url(href, url, site) for href in extract_links(resp.body)]
        pending.extend(reversed(links))

        if verbose:
            print_scan_line(url, resp.status_code, len(links))


def unique(urls: List[str]) -> List[str]:
    """Deduplicate urls, keeping first-seen order."""
    return list(dict.fromkeys(urls))


def crawl_site(config: CrawlConfig, fetch: Optional[Fetcher] = None) -> CrawlResult:
    """
    Crawl every configured seed in turn and collect the results.

    Each seed is resolved against the site root and becomes the base
    context for its own subtree. The visited set and sitemap list are
    shared, so a page reached from an earlier seed is not fetched again.

    Returns:
        CrawlResult with the sitemap URLs, the deduplicated skipped URLs
        and crawl statistics.
    """
    site = SiteRoot(config.site_url)
    if fetch is None:
        fetch = HttpFetcher(timeout_s=config.timeout_s, user_agent=config.user_agent)

    state = CrawlState()
    for base_path in config.seeds:
        base_url = site.to(base_path).rstrip("/")
        sys.stderr.write(f"Crawling base URL: {base_url}\n")
        crawl(
            base_url,
            state,
            site,
            fetch,
            base_context=base_url,
            visit_external=config.visit_external,
            skip_patterns=config.skip_patterns,
            verbose=config.verbose,
        )

    return CrawlResult(
        sitemap_urls=list(state.sitemap),
        skipped_urls=unique(state.skipped),
        stats=state.stats,
    )
