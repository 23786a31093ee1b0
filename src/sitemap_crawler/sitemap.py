"""
Sitemap document rendering and output files.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from lxml import etree

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


def render_sitemap(urls: Iterable[str]) -> bytes:
    """Render urls as a sitemaps.org <urlset> document."""
    urlset = etree.Element(f"{{{SITEMAP_NS}}}urlset", nsmap={None: SITEMAP_NS})
    for url in urls:
        entry = etree.SubElement(urlset, f"{{{SITEMAP_NS}}}url")
        etree.SubElement(entry, f"{{{SITEMAP_NS}}}loc").text = url
    return etree.tostring(urlset, xml_declaration=True, encoding="UTF-8", pretty_print=True)


def write_sitemap(path: Path, urls: Iterable[str]) -> Path:
    """Render urls and write the sitemap document to path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(render_sitemap(urls))
    return path


def write_skipped(path: Path, urls: List[str]) -> Path:
    """Write skipped URLs one per line."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(urls), encoding="utf-8")
    return path
