"""Per-page pipeline: resolve, minify, inject tags, write."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from pagebundler.core.bundling import BundleResult, Resolver
from pagebundler.core.config import PageEntry

from .collaborators import ChunkResolver, Minifier
from .injection import inject_canonical_tag, inject_link_tags, inject_script_tags
from .output import OutputWriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageResult:
    """Outcome of building one page.

    ``bundle`` is the resolver result; when it is not ``ok`` the page was
    still written, with the diagnostic block as its content. ``warnings``
    holds missing properties and unknown script chunks.
    """

    key: str
    import_path: Path
    filename: str
    output_file: Path
    bundle: BundleResult
    warnings: Tuple[str, ...] = ()

    @property
    def dependencies(self) -> Tuple[Path, ...]:
        return self.bundle.dependencies


class PagePipeline:
    """Turn a page entry into an output file.

    Order: resolve -> minify (optimized only) -> global then own stylesheet
    links -> canonical link -> global then own script chunks -> write.
    """

    def __init__(
        self,
        resolver: Resolver,
        writer: OutputWriter,
        *,
        minifier: Minifier,
        chunk_resolver: ChunkResolver,
        style_names: Mapping[Tuple[Path, str], str],
        minify_options: Optional[Mapping[str, bool]] = None,
        optimized: bool = False,
    ) -> None:
        self.resolver = resolver
        self.writer = writer
        self.minifier = minifier
        self.chunk_resolver = chunk_resolver
        self.style_names = style_names
        self.minify_options = dict(minify_options or {})
        self.optimized = optimized

    def render(
        self,
        entry: PageEntry,
        global_entry: Optional[PageEntry] = None,
        warnings: Optional[List[str]] = None,
    ) -> Tuple[str, BundleResult]:
        """Return the final page text and the resolver result, without writing.

        Non-fatal problems are appended to ``warnings`` when it is given.
        """
        if entry.import_path is None:
            raise ValueError(f"Entry '{entry.key}' has no import path")

        bundle = self.resolver.resolve(entry.import_path)
        if warnings is not None:
            warnings.extend(bundle.warnings)
        source = bundle.content
        if self.optimized:
            source = self.minifier.minify(source, self.minify_options)

        if global_entry is not None:
            source = inject_link_tags(source, global_entry.styles, self.style_names)
        source = inject_link_tags(source, entry.styles, self.style_names)
        if entry.canonical is not None and entry.filename:
            source = inject_canonical_tag(source, entry.canonical, entry.filename)
        if global_entry is not None:
            source = inject_script_tags(source, global_entry.jschunks, self.chunk_resolver, warnings)
        source = inject_script_tags(source, entry.jschunks, self.chunk_resolver, warnings)
        return source, bundle

    def build(self, entry: PageEntry, global_entry: Optional[PageEntry] = None) -> PageResult:
        warnings: List[str] = []
        source, bundle = self.render(entry, global_entry, warnings)
        output_file = self.writer.write(str(entry.filename), source)
        logger.info("Page %s -> %s", entry.key, output_file)
        return PageResult(
            key=entry.key,
            import_path=entry.import_path,
            filename=str(entry.filename),
            output_file=output_file,
            bundle=bundle,
            warnings=tuple(warnings),
        )


__all__ = ["PagePipeline", "PageResult"]
