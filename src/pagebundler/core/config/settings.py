"""Typed view over the merged PageBundler configuration."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pagebundler.core.utils.paths import absolute_path

GLOBAL_ENTRY_KEY = "global"

MODE_DEVELOPMENT = "development"
MODE_PRODUCTION = "production"


@dataclass(frozen=True)
class StylesheetEntry:
    """A stylesheet source and the output filename it compiles to."""

    import_path: Path
    filename: str

    @property
    def key(self) -> Tuple[Path, str]:
        return (self.import_path, self.filename)


@dataclass(frozen=True)
class ScriptChunkEntry:
    """A named script chunk and where its tag is injected ("body" or "head")."""

    name: str
    inject: str = "body"
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CanonicalOptions:
    origin_url: str
    force_trailing_slash: bool = False


@dataclass(frozen=True)
class AssetDirEntry:
    """A directory copied verbatim into the output tree."""

    key: str
    src_path: Path
    dest_path: str


@dataclass(frozen=True)
class PageEntry:
    """A page root file and its output filename, styles and script chunks.

    The ``global`` entry without an ``import`` carries shared styles/chunks
    only and never produces a page of its own.
    """

    key: str
    import_path: Optional[Path] = None
    filename: Optional[str] = None
    styles: Tuple[StylesheetEntry, ...] = ()
    jschunks: Tuple[ScriptChunkEntry, ...] = ()
    canonical: Optional[CanonicalOptions] = None

    @property
    def is_page(self) -> bool:
        return self.import_path is not None and bool(self.filename)

    @property
    def is_shared_global(self) -> bool:
        return self.key == GLOBAL_ENTRY_KEY and self.import_path is None


@dataclass(frozen=True)
class SitemapOptions:
    origin_url: str
    lastmod: Optional[str] = None
    exclude: Tuple[str, ...] = ()
    include: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class IncludeOptions:
    prefix: str = "PageBundler"
    pattern: str = "include"
    # Raw value; the resolver normalizes it (non-mapping -> {}).
    properties: Any = field(default_factory=dict)
    max_depth: int = 32


Entry = Union[PageEntry, AssetDirEntry]


@dataclass(frozen=True)
class BundlerSettings:
    """Resolved settings for one build session."""

    project_root: Path
    output_path: Path
    mode: str = MODE_DEVELOPMENT
    clean: bool = False
    includes: IncludeOptions = field(default_factory=IncludeOptions)
    minify: Dict[str, bool] = field(default_factory=dict)
    chunks: Dict[str, List[str]] = field(default_factory=dict)
    chunk_manifest: Optional[Path] = None
    entries: Tuple[Entry, ...] = ()
    sitemap: Optional[SitemapOptions] = None

    @property
    def optimized(self) -> bool:
        return self.mode == MODE_PRODUCTION

    @property
    def page_entries(self) -> List[PageEntry]:
        """All non-asset entries in configured order (global included)."""
        return [e for e in self.entries if isinstance(e, PageEntry)]

    @property
    def asset_dirs(self) -> List[AssetDirEntry]:
        return [e for e in self.entries if isinstance(e, AssetDirEntry)]

    @property
    def global_entry(self) -> Optional[PageEntry]:
        for entry in self.page_entries:
            if entry.is_shared_global:
                return entry
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], project_root: Path) -> "BundlerSettings":
        """Build settings from a merged (and validated) configuration dict.

        Relative paths are resolved against ``project_root``.
        """
        root = absolute_path(project_root)
        inc = data.get("includes") or {}
        includes = IncludeOptions(
            prefix=str(inc.get("prefix") or "PageBundler"),
            pattern=str(inc.get("pattern") or "include"),
            properties=inc.get("properties", {}),
            max_depth=int(inc.get("max_depth") or 32),
        )

        chunks: Dict[str, List[str]] = {}
        for name, files in (data.get("chunks") or {}).items():
            chunks[str(name)] = [files] if isinstance(files, str) else [str(f) for f in files]

        manifest = data.get("chunk_manifest")

        return cls(
            project_root=root,
            output_path=absolute_path(data.get("output_path") or "dist", root),
            mode=str(data.get("mode") or MODE_DEVELOPMENT),
            clean=bool(data.get("clean", False)),
            includes=includes,
            minify=dict(data.get("minify") or {}),
            chunks=chunks,
            chunk_manifest=absolute_path(manifest, root) if manifest else None,
            entries=tuple(_parse_entry(k, v, root) for k, v in (data.get("entry") or {}).items()),
            sitemap=_parse_sitemap(data.get("sitemap")),
        )


def _parse_entry(key: str, raw: Mapping[str, Any], root: Path) -> Entry:
    if "src_path" in raw:
        return AssetDirEntry(
            key=key,
            src_path=absolute_path(raw["src_path"], root),
            dest_path=str(raw.get("dest_path") or ""),
        )

    styles = tuple(
        StylesheetEntry(import_path=absolute_path(s["import"], root), filename=str(s["filename"]))
        for s in raw.get("styles") or []
    )
    jschunks = tuple(
        ScriptChunkEntry(
            name=str(c["name"]),
            inject=str(c.get("inject") or "body"),
            attributes=dict(c.get("attributes") or {}),
        )
        for c in raw.get("jschunks") or []
    )
    canonical_raw = raw.get("canonical")
    canonical = (
        CanonicalOptions(
            origin_url=str(canonical_raw["origin_url"]),
            force_trailing_slash=bool(canonical_raw.get("force_trailing_slash", False)),
        )
        if canonical_raw
        else None
    )
    import_raw = raw.get("import")
    return PageEntry(
        key=key,
        import_path=absolute_path(import_raw, root) if import_raw else None,
        filename=str(raw["filename"]) if raw.get("filename") else None,
        styles=styles,
        jschunks=jschunks,
        canonical=canonical,
    )


def _parse_sitemap(raw: Optional[Mapping[str, Any]]) -> Optional[SitemapOptions]:
    if not raw:
        return None
    include = raw.get("include")
    return SitemapOptions(
        origin_url=str(raw["origin_url"]),
        lastmod=str(raw["lastmod"]) if raw.get("lastmod") else None,
        exclude=tuple(str(p) for p in raw.get("exclude") or ()),
        include=tuple(str(p) for p in include) if include is not None else None,
    )


__all__ = [
    "GLOBAL_ENTRY_KEY",
    "MODE_DEVELOPMENT",
    "MODE_PRODUCTION",
    "AssetDirEntry",
    "BundlerSettings",
    "CanonicalOptions",
    "Entry",
    "IncludeOptions",
    "PageEntry",
    "ScriptChunkEntry",
    "SitemapOptions",
    "StylesheetEntry",
]
