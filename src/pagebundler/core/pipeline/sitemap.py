"""XML sitemap generation for a full production build."""
from __future__ import annotations

import logging
import re
from datetime import date
from typing import Iterable, List, Optional
from xml.sax.saxutils import escape

from pagebundler.core.config import SitemapOptions

logger = logging.getLogger(__name__)

SITEMAP_FILENAME = "sitemap.xml"
SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def url_path_for(filename: str) -> str:
    """Map an output filename to its URL path (``about/index.html`` -> ``about/``)."""
    path = filename.replace("\\", "/").lstrip("/")
    path = re.sub(r"^index\.html$", "", path)
    path = re.sub(r"/index\.html$", "/", path)
    return path


def page_url(origin_url: str, filename: str) -> str:
    return f"{origin_url.rstrip('/')}/{url_path_for(filename)}"


def resolve_lastmod(lastmod: Optional[str], today: Optional[date] = None) -> Optional[str]:
    if lastmod == "current":
        return (today or date.today()).isoformat()
    return lastmod


def collect_urls(options: SitemapOptions, html_filenames: Iterable[str]) -> List[str]:
    """Return sitemap URLs: explicit ``include`` paths, or written pages minus ``exclude`` matches."""
    origin = options.origin_url.rstrip("/")
    if options.include is not None:
        return [f"{origin}/{p.lstrip('/')}" for p in options.include]

    urls = [page_url(origin, name) for name in html_filenames if name.endswith(".html")]
    if options.exclude:
        patterns = [re.compile(p) for p in options.exclude]
        urls = [u for u in urls if not any(rx.search(u) for rx in patterns)]
    return urls


def build_sitemap(options: SitemapOptions, html_filenames: Iterable[str], *, today: Optional[date] = None) -> Optional[str]:
    """Render the sitemap XML, or ``None`` when there is nothing to list."""
    if not options.origin_url.startswith("http"):
        logger.warning("Sitemap origin_url should start with http/https: %s", options.origin_url)

    urls = collect_urls(options, html_filenames)
    if not urls:
        return None

    lastmod = resolve_lastmod(options.lastmod, today)
    lastmod_tag = f"<lastmod>{escape(lastmod)}</lastmod>" if lastmod else ""
    entries = "".join(f"<url><loc>{escape(u, _XML_ENTITIES)}</loc>{lastmod_tag}</url>" for u in urls)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset xmlns="{SITEMAP_NS}">{entries}</urlset>'


__all__ = ["SITEMAP_FILENAME", "build_sitemap", "collect_urls", "page_url", "resolve_lastmod", "url_path_for"]
