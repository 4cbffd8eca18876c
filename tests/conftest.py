import sys
from pathlib import Path

import pytest
import yaml

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'pagebundler' and tests/ as 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from helpers.files import write_tree  # noqa: E402
from pagebundler.core.logging import reset_logging_for_tests  # noqa: E402


SITE_FILES = {
    "src/index.html": (
        "<!DOCTYPE html><html><head><title>PageBundler.include.title</title></head>"
        '<body>PageBundler.include("partials/nav.html")<main>Home</main></body></html>'
    ),
    "src/about/index.html": (
        "<html><head><title>About</title></head>"
        '<body>PageBundler.include("../partials/nav.html")<main>About</main></body></html>'
    ),
    "src/contact.html": "<html><head></head><body><main>Contact</main></body></html>",
    "src/partials/nav.html": '<nav>PageBundler.include("links")</nav>',
    "src/partials/links.html": '<a href="/">Home</a>',
    "styles/site.css": '@import "base.css";\nbody { color: red; }\n',
    "styles/base.css": "html { margin: 0; }\n",
    "assets/data.json": '{\n  "a": 1,\n  "b": [1, 2]\n}\n',
    "assets/img/logo.txt": "logo",
}

SITE_CONFIG = {
    "mode": "development",
    "output_path": "dist",
    "includes": {"prefix": "PageBundler", "properties": {"title": "Welcome"}},
    "chunks": {"main": "js/main.js", "vendor": ["js/vendor.js", "js/vendor.js.map"]},
    "entry": {
        "global": {
            "styles": [{"import": "styles/site.css", "filename": "css/site.[contenthash].css"}],
            "jschunks": [{"name": "main"}],
        },
        "home": {"import": "src/index.html", "filename": "index.html"},
        "about": {
            "import": "src/about/index.html",
            "filename": "about/index.html",
            "jschunks": [{"name": "vendor", "inject": "head", "attributes": {"defer": True}}],
        },
        "contact": {
            "import": "src/contact.html",
            "filename": "contact.html",
            "canonical": {"origin_url": "https://example.com", "force_trailing_slash": True},
        },
        "static": {"src_path": "assets", "dest_path": "static"},
    },
    "sitemap": {"origin_url": "https://example.com", "lastmod": "2024-01-01"},
}


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch):
    """Drop PAGEBUNDLER_* overrides from the caller's environment."""
    import os

    for key in list(os.environ):
        if key.startswith("PAGEBUNDLER_"):
            monkeypatch.delenv(key, raising=False)
    yield
    reset_logging_for_tests()


@pytest.fixture
def site_project(tmp_path: Path) -> Path:
    """A small on-disk site: pages, nested fragments, stylesheets, assets and config."""
    root = tmp_path / "site"
    write_tree(root, SITE_FILES)
    (root / "pagebundler.yaml").write_text(yaml.safe_dump(SITE_CONFIG, sort_keys=False), encoding="utf-8")
    return root
