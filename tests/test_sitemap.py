from lxml import etree

from sitemap_crawler.sitemap import SITEMAP_NS, render_sitemap, write_sitemap, write_skipped


def _locs(document: bytes):
    root = etree.fromstring(document)
    return [loc.text for loc in root.iter(f"{{{SITEMAP_NS}}}loc")]


def test_render_sitemap_lists_urls_in_order():
    document = render_sitemap(["https://site", "https://site/about?a=1&b=2"])

    assert document.startswith(b"<?xml version='1.0' encoding='UTF-8'?>")
    assert etree.fromstring(document).tag == f"{{{SITEMAP_NS}}}urlset"
    assert _locs(document) == ["https://site", "https://site/about?a=1&b=2"]
    assert b"&amp;" in document


def test_render_sitemap_with_no_urls():
    root = etree.fromstring(render_sitemap([]))
    assert len(root) == 0


def test_write_sitemap_creates_parent_dirs(tmp_path):
    path = write_sitemap(tmp_path / "public" / "sitemap.xml", ["https://site/x"])

    assert _locs(path.read_bytes()) == ["https://site/x"]


def test_write_skipped_one_url_per_line(tmp_path):
    path = write_skipped(tmp_path / "skipped_urls.txt", ["https://site/tel:1", "https://site/javascript:void(0)"])

    assert path.read_text(encoding="utf-8") == "https://site/tel:1\nhttps://site/javascript:void(0)"
