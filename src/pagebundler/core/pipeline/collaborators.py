"""Collaborator interfaces consumed by the page pipeline, with default implementations.

- StylesheetCompiler: compile(path, optimized=...) -> CompiledStylesheet
- PostProcessor:      process(css) -> css (optimized mode only)
- Minifier:           minify(html, options) -> html (optimized mode only)
- ChunkResolver:      lookup_output_file(chunk_name) -> output file or None
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple, Union, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledStylesheet:
    css: str
    loaded_paths: Tuple[Path, ...] = ()


@runtime_checkable
class StylesheetCompiler(Protocol):
    def compile(self, path: Path, *, optimized: bool) -> CompiledStylesheet: ...


@runtime_checkable
class PostProcessor(Protocol):
    def process(self, css: str) -> str: ...


@runtime_checkable
class Minifier(Protocol):
    def minify(self, html: str, options: Mapping[str, bool]) -> str: ...


@runtime_checkable
class ChunkResolver(Protocol):
    def lookup_output_file(self, chunk_name: str) -> Optional[str]: ...


class IdentityPostProcessor:
    """Post-processor that returns the stylesheet unchanged."""

    def process(self, css: str) -> str:
        return css


# ----------------------------------------------------------------------
# HTML minification
# ----------------------------------------------------------------------

# Element bodies whose whitespace is significant or not HTML.
_PROTECTED_RE = re.compile(r"(<(pre|textarea|script|style)\b.*?</\2\s*>)", re.IGNORECASE | re.DOTALL)
# Comments, except conditional comments (<!--[if ...]>) and <!--! preserved -->.
_COMMENT_RE = re.compile(r"<!--(?!\[if|!)(?!<!).*?-->", re.DOTALL)
_DOCTYPE_RE = re.compile(r"<!doctype[^>]*>", re.IGNORECASE)
_BETWEEN_TAGS_RE = re.compile(r">\s+<")
_WS_RE = re.compile(r"\s+")
_CLOSING_SLASH_RE = re.compile(r"\s*/>")
_SCRIPT_TYPE_RE = re.compile(
    r"(<script\b[^>]*?)\s+type\s*=\s*[\"']?(?:text|application)/javascript[\"']?", re.IGNORECASE
)
_STYLE_LINK_TYPE_RE = re.compile(r"(<(?:style|link)\b[^>]*?)\s+type\s*=\s*[\"']?text/css[\"']?", re.IGNORECASE)


@dataclass
class HtmlMinifier:
    """Regex-based HTML minifier.

    Supported options (all booleans): ``remove_comments``,
    ``collapse_whitespace``, ``keep_closing_slash``, ``use_short_doctype``,
    ``remove_script_type_attributes``, ``remove_style_link_type_attributes``.
    Contents of ``pre``/``textarea``/``script``/``style`` are never rewritten.
    """

    default_options: Dict[str, bool] = field(default_factory=dict)

    def minify(self, html: str, options: Mapping[str, bool]) -> str:
        opts = {**self.default_options, **dict(options or {})}
        pieces = _PROTECTED_RE.split(html)
        out: List[str] = []
        # split() yields: text, protected, tag-name, text, protected, tag-name, ...
        for i in range(0, len(pieces), 3):
            out.append(self._minify_markup(pieces[i], opts))
            if i + 1 < len(pieces):
                out.append(self._minify_protected(pieces[i + 1], opts))
        return "".join(out).strip() if opts.get("collapse_whitespace") else "".join(out)

    def _minify_markup(self, text: str, opts: Mapping[str, bool]) -> str:
        if opts.get("remove_comments"):
            text = _COMMENT_RE.sub("", text)
        if opts.get("use_short_doctype"):
            text = _DOCTYPE_RE.sub("<!DOCTYPE html>", text)
        if opts.get("remove_style_link_type_attributes"):
            text = _STYLE_LINK_TYPE_RE.sub(r"\1", text)
        if opts.get("collapse_whitespace"):
            text = _BETWEEN_TAGS_RE.sub("><", text)
            text = _WS_RE.sub(" ", text)
        if not opts.get("keep_closing_slash", True):
            text = _CLOSING_SLASH_RE.sub(">", text)
        return text

    def _minify_protected(self, block: str, opts: Mapping[str, bool]) -> str:
        if opts.get("remove_script_type_attributes"):
            block = _SCRIPT_TYPE_RE.sub(r"\1", block)
        if opts.get("remove_style_link_type_attributes"):
            block = _STYLE_LINK_TYPE_RE.sub(r"\1", block)
        return block


def compact_css(css: str) -> str:
    """Strip comments (except ``/*! ... */``) and redundant whitespace from CSS."""
    css = re.sub(r"/\*[^!][\s\S]*?\*/", "", css)
    css = re.sub(r"\s+", " ", css)
    css = re.sub(r" ?([{};:,>]) ?", r"\1", css)
    return css.replace(";}", "}").strip()


# ----------------------------------------------------------------------
# Script chunk lookup
# ----------------------------------------------------------------------

ChunkFiles = Union[str, List[str]]


def _first_file(files: Optional[ChunkFiles]) -> Optional[str]:
    if isinstance(files, str):
        return files or None
    if isinstance(files, list) and files:
        return str(files[0])
    return None


class StaticChunkResolver:
    """Chunk lookup from an in-memory ``{name: file | [files]}`` mapping."""

    def __init__(self, mapping: Optional[Mapping[str, ChunkFiles]] = None) -> None:
        self.mapping: Dict[str, ChunkFiles] = dict(mapping or {})

    def lookup_output_file(self, chunk_name: str) -> Optional[str]:
        return _first_file(self.mapping.get(chunk_name))


class ManifestChunkResolver:
    """Chunk lookup from a JSON manifest written by the script bundler.

    The manifest is re-read whenever its modification time changes, so a
    long-lived coordinator picks up new hashed filenames.
    """

    def __init__(self, manifest_path: Path, fallback: Optional[Mapping[str, ChunkFiles]] = None) -> None:
        self.manifest_path = Path(manifest_path)
        self.fallback = StaticChunkResolver(fallback)
        self._mtime: Optional[float] = None
        self._mapping: Dict[str, Any] = {}

    def _load(self) -> Dict[str, Any]:
        try:
            mtime = self.manifest_path.stat().st_mtime
        except FileNotFoundError:
            logger.warning("Chunk manifest not found: %s", self.manifest_path)
            return {}
        if mtime != self._mtime:
            data = json.loads(self.manifest_path.read_text(encoding="utf-8"))
            self._mapping = data if isinstance(data, dict) else {}
            self._mtime = mtime
        return self._mapping

    def lookup_output_file(self, chunk_name: str) -> Optional[str]:
        found = _first_file(self._load().get(chunk_name))
        return found if found is not None else self.fallback.lookup_output_file(chunk_name)


__all__ = [
    "ChunkResolver",
    "CompiledStylesheet",
    "HtmlMinifier",
    "IdentityPostProcessor",
    "ManifestChunkResolver",
    "Minifier",
    "PostProcessor",
    "StaticChunkResolver",
    "StylesheetCompiler",
    "compact_css",
]
