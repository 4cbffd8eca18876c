"""Tests for the default minifier, CSS compaction and chunk resolvers."""
from __future__ import annotations

import json
import os
from pathlib import Path

from pagebundler.core.pipeline import HtmlMinifier, ManifestChunkResolver, StaticChunkResolver, compact_css

ALL_ON = {
    "remove_comments": True,
    "collapse_whitespace": True,
    "keep_closing_slash": True,
    "use_short_doctype": True,
    "remove_script_type_attributes": True,
    "remove_style_link_type_attributes": True,
}


class TestHtmlMinifier:
    def test_collapses_whitespace_and_comments(self) -> None:
        html = '<!DOCTYPE html PUBLIC "x">\n<html>\n  <!-- note -->\n  <body>\n    <p>a   b</p>\n  </body>\n</html>\n'
        assert HtmlMinifier().minify(html, ALL_ON) == "<!DOCTYPE html><html><body><p>a b</p></body></html>"

    def test_keeps_conditional_comments(self) -> None:
        html = "<!--[if IE]><p>ie</p><![endif]--><!-- gone -->"
        assert HtmlMinifier().minify(html, ALL_ON) == "<!--[if IE]><p>ie</p><![endif]-->"

    def test_protected_blocks_are_untouched(self) -> None:
        html = "<pre>  a\n  b  </pre>\n<script type=\"text/javascript\">var  x = 1;</script>"
        out = HtmlMinifier().minify(html, ALL_ON)
        assert "<pre>  a\n  b  </pre>" in out
        assert "<script>var  x = 1;</script>" in out

    def test_style_link_type_removed(self) -> None:
        out = HtmlMinifier().minify('<link rel="stylesheet" type="text/css" href="a.css">', ALL_ON)
        assert out == '<link rel="stylesheet" href="a.css">'

    def test_closing_slash_dropped_when_not_kept(self) -> None:
        out = HtmlMinifier().minify("<br />", {"keep_closing_slash": False})
        assert out == "<br>"

    def test_default_options_apply(self) -> None:
        minifier = HtmlMinifier(default_options={"remove_comments": True})
        assert minifier.minify("a<!-- x -->b", {}) == "ab"
        assert minifier.minify("a<!-- x -->b", {"remove_comments": False}) == "a<!-- x -->b"


def test_compact_css_keeps_important_comments() -> None:
    css = "/*! keep */\n/* drop */\nbody {\n  color : red ;\n  margin: 0;\n}\n"
    assert compact_css(css) == "/*! keep */ body{color:red;margin:0}"


class TestChunkResolvers:
    def test_static_resolver_takes_first_file(self) -> None:
        resolver = StaticChunkResolver({"a": ["a.js", "a.js.map"], "b": "b.js", "c": []})
        assert resolver.lookup_output_file("a") == "a.js"
        assert resolver.lookup_output_file("b") == "b.js"
        assert resolver.lookup_output_file("c") is None
        assert resolver.lookup_output_file("missing") is None

    def test_manifest_is_reloaded_on_change(self, tmp_path: Path) -> None:
        manifest = tmp_path / "manifest.json"
        manifest.write_text(json.dumps({"main": "main.1.js"}), encoding="utf-8")
        resolver = ManifestChunkResolver(manifest, fallback={"other": "other.js"})
        assert resolver.lookup_output_file("main") == "main.1.js"
        assert resolver.lookup_output_file("other") == "other.js"

        manifest.write_text(json.dumps({"main": ["main.2.js"]}), encoding="utf-8")
        stat = manifest.stat()
        os.utime(manifest, (stat.st_atime, stat.st_mtime + 5))
        assert resolver.lookup_output_file("main") == "main.2.js"

    def test_missing_manifest_uses_fallback(self, tmp_path: Path) -> None:
        resolver = ManifestChunkResolver(tmp_path / "none.json", fallback={"main": "main.js"})
        assert resolver.lookup_output_file("main") == "main.js"
