"""
Web crawler that follows links depth-first from one or more seed paths.
Outputs a sitemaps.org XML document and a list of URLs skipped by pattern.
"""
from sitemap_crawler.core import CrawlConfig, CrawlResult, CrawlState, CrawlStats, crawl, crawl_site

__version__ = "1.0.0"
__all__ = ["crawl", "crawl_site", "CrawlConfig", "CrawlResult", "CrawlState", "CrawlStats"]
