"""
Command-line interface for the sitemap crawler.
"""
from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import List, Optional

from sitemap_crawler.core import DEFAULT_SKIP_PATTERNS, CrawlConfig, CrawlStats, crawl_site, skip_pattern
from sitemap_crawler.sitemap import write_sitemap, write_skipped


def print_summary(stats: CrawlStats, skipped: int) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("CRAWL SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Total pages crawled:    {stats.pages_crawled}\n")
    sys.stderr.write(f"Pages in sitemap:       {stats.pages_in_sitemap}\n")
    sys.stderr.write(f"Skipped URLs:           {skipped}\n\n")

    if stats.error_counts:
        sys.stderr.write("Dead ends by status:\n")
        for error_type, count in sorted(stats.error_counts.items()):
            label = "Connection errors" if error_type == "connection_error" else f"HTTP {error_type}"
            sys.stderr.write(f"  {label}: {count}\n")
    else:
        sys.stderr.write("No dead ends or connection errors.\n")

    sys.stderr.write("\n")


def regex(value: str) -> str:
    """argparse type that rejects invalid regular expressions."""
    try:
        re.compile(value)
    except re.error as e:
        raise argparse.ArgumentTypeError(f"invalid pattern {value!r}: {e}") from e
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="sitemap-crawler",
        description="Crawl a website from its seed paths and generate a sitemap.",
    )
    parser.add_argument("site_url", help="Site root URL (e.g. https://example.com)")
    parser.add_argument(
        "--seed",
        dest="seeds",
        action="append",
        help="Seed path to crawl from, repeatable (default: /)",
    )
    parser.add_argument("--visit-external", action="store_true", help="Follow links to other hosts")
    parser.add_argument(
        "--skip-pattern",
        dest="skip_patterns",
        action="append",
        type=regex,
        default=[],
        help="Extra case-insensitive regex; matching URLs are skipped (repeatable)",
    )
    parser.add_argument("--out-dir", default="public", help="Output directory (default: public)")
    parser.add_argument("--sitemap-name", default="sitemap.xml", help="Sitemap file name (default: sitemap.xml)")
    parser.add_argument(
        "--skipped-name",
        default="skipped_urls.txt",
        help="Skipped URL list file name (default: skipped_urls.txt)",
    )
    parser.add_argument("--timeout", type=float, default=15.0, help="Request timeout in seconds (default: 15)")
    parser.add_argument("--user-agent", default="SitemapCrawler/1.0", help="User-Agent header")
    parser.add_argument("--verbose", action="store_true", help="Show progress and summary")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the sitemap crawler CLI."""
    args = build_parser().parse_args(argv)

    config = CrawlConfig(
        site_url=args.site_url,
        seeds=tuple(args.seeds or ["/"]),
        visit_external=args.visit_external,
        skip_patterns=DEFAULT_SKIP_PATTERNS + tuple(skip_pattern(p, re.IGNORECASE) for p in args.skip_patterns),
        timeout_s=args.timeout,
        user_agent=args.user_agent,
        verbose=args.verbose,
    )

    sys.stderr.write("Starting to generate sitemap...\n")
    try:
        result = crawl_site(config)
    except ValueError as e:
        sys.stderr.write(f"{e}\n")
        return 1

    out_dir = Path(args.out_dir)
    write_sitemap(out_dir / args.sitemap_name, result.sitemap_urls)
    skipped_path = write_skipped(out_dir / args.skipped_name, result.skipped_urls)
    sys.stderr.write(f"Skipped URLs saved to: {skipped_path}\n")

    if args.verbose:
        print_summary(result.stats, len(result.skipped_urls))

    sys.stderr.write("Sitemap generated successfully!\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
