"""End-to-end builds of a small site through the public API."""
from __future__ import annotations

import json
import re
from pathlib import Path

from pagebundler.core.build import BuildCoordinator
from pagebundler.core.config import ConfigManager


def _coordinator(root: Path, **overrides) -> BuildCoordinator:
    return BuildCoordinator(ConfigManager(root).load_settings(overrides=overrides or None))


def test_development_build(site_project: Path) -> None:
    report = _coordinator(site_project).process_all()
    assert report.ok, report.errors
    dist = site_project / "dist"

    home = (dist / "index.html").read_text(encoding="utf-8")
    assert "<title>Welcome</title>" in home
    assert '<nav><a href="/">Home</a></nav>' in home
    assert re.search(r'<link rel="stylesheet" href="/css/site\.[0-9a-f]{24}\.css"></head>', home)
    assert home.endswith('<script src="/js/main.js"></script></body></html>')

    about = (dist / "about" / "index.html").read_text(encoding="utf-8")
    assert '<nav><a href="/">Home</a></nav>' in about
    assert '<script defer src="/js/vendor.js"></script></head>' in about

    contact = (dist / "contact.html").read_text(encoding="utf-8")
    assert '<link rel="canonical" href="https://example.com/contact/">' in contact

    (css,) = (dist / "css").glob("site.*.css")
    assert css.read_text(encoding="utf-8").startswith("html { margin: 0; }")

    assert (dist / "static" / "img" / "logo.txt").read_text(encoding="utf-8") == "logo"
    assert not (dist / "sitemap.xml").exists()


def test_production_build(site_project: Path) -> None:
    report = _coordinator(site_project, mode="production").process_all()
    assert report.ok, report.errors
    dist = site_project / "dist"

    home = (dist / "index.html").read_text(encoding="utf-8")
    assert "\n" not in home
    assert home.startswith("<!DOCTYPE html><html><head><title>Welcome</title>")

    (css,) = (dist / "css").glob("site.*.css")
    assert css.read_text(encoding="utf-8") == "html{margin:0}body{color:red}"

    assert json.loads((dist / "static" / "data.json").read_text(encoding="utf-8")) == {"a": 1, "b": [1, 2]}
    assert (dist / "static" / "data.json").read_text(encoding="utf-8") == '{"a":1,"b":[1,2]}'

    sitemap = (dist / "sitemap.xml").read_text(encoding="utf-8")
    assert "<loc>https://example.com/</loc><lastmod>2024-01-01</lastmod>" in sitemap
    assert "<loc>https://example.com/about/</loc>" in sitemap
    assert "<loc>https://example.com/contact.html</loc>" in sitemap


def test_watch_session(site_project: Path) -> None:
    """A fragment edit rebuilds exactly the pages that include it."""
    coordinator = _coordinator(site_project)
    coordinator.process_all()
    links = site_project / "src" / "partials" / "links.html"

    links.write_text('<a href="/">Start</a>', encoding="utf-8")
    report = coordinator.handle_changes([links])
    assert report.kind == "incremental"
    assert report.pages == ["home", "about"]
    assert "Start" in (site_project / "dist" / "index.html").read_text(encoding="utf-8")
    assert "Start" in (site_project / "dist" / "about" / "index.html").read_text(encoding="utf-8")

    links.unlink()
    report = coordinator.handle_changes([links])
    assert not report.ok
    assert (site_project / "dist" / "index.html").read_text(encoding="utf-8").startswith("PageBundler Exception:")
    assert links in coordinator.watched_files()
