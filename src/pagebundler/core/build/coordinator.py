"""Build coordinator: full and incremental passes over configured pages.

The coordinator owns one ``DependencyRecord`` per successfully built page
and stylesheet output, keyed by ``(source root, output filename)``. A
changed file is mapped back to the pages (and stylesheets) whose records
contain it; only those are rebuilt.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from pagebundler.core.bundling import Resolver
from pagebundler.core.config import BundlerSettings, PageEntry, StylesheetEntry
from pagebundler.core.exceptions import PipelineError
from pagebundler.core.filestore import FileStore, LocalFileStore
from pagebundler.core.pipeline import (
    SITEMAP_FILENAME,
    ChunkResolver,
    CssImportCompiler,
    HtmlMinifier,
    IdentityPostProcessor,
    ManifestChunkResolver,
    Minifier,
    OutputWriter,
    PagePipeline,
    PostProcessor,
    StaticChunkResolver,
    StyleBundler,
    StylesheetCompiler,
    build_sitemap,
    copy_assets,
)
from pagebundler.core.utils.io import PathLike
from pagebundler.core.utils.paths import absolute_path

from .records import KIND_PAGE, KIND_STYLE, DependencyRecord, RecordKey
from .report import PASS_FULL, PASS_INCREMENTAL, BuildReport

logger = logging.getLogger(__name__)


class BuildState(str, Enum):
    IDLE = "idle"
    BUILDING = "building"


def default_chunk_resolver(settings: BundlerSettings) -> ChunkResolver:
    if settings.chunk_manifest is not None:
        return ManifestChunkResolver(settings.chunk_manifest, fallback=settings.chunks)
    return StaticChunkResolver(settings.chunks)


def _page_key(entry: PageEntry) -> RecordKey:
    return (entry.import_path, str(entry.filename))


class BuildCoordinator:
    """Run full and change-driven passes for one build session.

    Example:
        coordinator = BuildCoordinator(settings)
        coordinator.process_all()
        coordinator.handle_changes([Path("src/partials/nav.html")])
    """

    def __init__(
        self,
        settings: BundlerSettings,
        *,
        file_store: Optional[FileStore] = None,
        compiler: Optional[StylesheetCompiler] = None,
        post_processor: Optional[PostProcessor] = None,
        minifier: Optional[Minifier] = None,
        chunk_resolver: Optional[ChunkResolver] = None,
    ) -> None:
        self.settings = settings
        self.file_store: FileStore = file_store or LocalFileStore()
        self.writer = OutputWriter(settings.output_path, self.file_store)

        includes = settings.includes
        self.resolver = Resolver(
            includes.prefix,
            includes.pattern,
            includes.properties,
            file_store=self.file_store,
            max_depth=includes.max_depth,
        )
        self.styles = StyleBundler(
            self.writer,
            compiler=compiler or CssImportCompiler(self.file_store, max_depth=includes.max_depth),
            post_processor=post_processor or IdentityPostProcessor(),
            optimized=settings.optimized,
        )
        self.pages = PagePipeline(
            self.resolver,
            self.writer,
            minifier=minifier or HtmlMinifier(),
            chunk_resolver=chunk_resolver or default_chunk_resolver(settings),
            style_names=self.styles.output_names,
            minify_options=settings.minify,
            optimized=settings.optimized,
        )
        self._records: Dict[RecordKey, DependencyRecord] = {}
        self._state = BuildState.IDLE

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def state(self) -> BuildState:
        return self._state

    @property
    def records(self) -> Dict[RecordKey, DependencyRecord]:
        return dict(self._records)

    def watched_files(self) -> List[Path]:
        """Sorted union of every recorded dependency set."""
        files: Set[Path] = set()
        for record in self._records.values():
            files.update(record.dependencies)
        return sorted(files)

    def owners_of(self, path: PathLike) -> List[DependencyRecord]:
        target = absolute_path(path)
        return [r for r in self._records.values() if target in r]

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------
    def process_all(self) -> BuildReport:
        """Full pass: assets, every stylesheet, every page, then the sitemap."""
        with self._building():
            report = BuildReport(kind=PASS_FULL, mode=self.settings.mode)

            for asset in self.settings.asset_dirs:
                failures: List[str] = []
                try:
                    written = copy_assets(asset, self.writer, optimized=self.settings.optimized, errors=failures)
                except Exception as exc:
                    logger.error("Asset copy failed for %s: %s", asset.key, exc)
                    report.add_error(f"{asset.key}: {exc}")
                    continue
                for failure in failures:
                    report.add_error(f"{asset.key}: {failure}")
                report.assets.append(asset.key)
                report.written.extend(str(p) for p in written)

            cleaned = False
            for style in self._style_entries():
                if self.settings.clean and not cleaned:
                    self.styles.clean_output(style)
                    cleaned = True
                self._build_style(style, report)

            global_entry = self.settings.global_entry
            html_filenames: List[str] = []
            for entry in self.settings.page_entries:
                if not entry.is_page:
                    continue
                if self._build_page(entry, global_entry, report):
                    html_filenames.append(str(entry.filename))

            if self.settings.optimized and self.settings.sitemap is not None:
                self._write_sitemap(html_filenames, report)

            logger.info("Full pass finished: %d page(s), %d error(s)", len(report.pages), len(report.errors))
            return report

    def process_changed(self, changed_file: PathLike) -> BuildReport:
        """Incremental pass: rebuild only what recorded ``changed_file``.

        Pages never recorded are left alone. A stylesheet whose hashed
        filename changes also rebuilds every page that links it.
        """
        target = absolute_path(changed_file)
        with self._building():
            report = BuildReport(kind=PASS_INCREMENTAL, mode=self.settings.mode, changed_file=str(target))
            owners = [r for r in self._records.values() if target in r]

            page_keys: List[RecordKey] = [r.key for r in owners if r.kind == KIND_PAGE]
            for record in owners:
                if record.kind != KIND_STYLE:
                    continue
                for style in self._style_entries():
                    if style.key != record.key:
                        continue
                    previous = self.styles.output_names.get(style.key)
                    self._build_style(style, report)
                    if self.styles.output_names.get(style.key) != previous:
                        for key in self._pages_linking(style.key):
                            if key not in page_keys:
                                page_keys.append(key)

            global_entry = self.settings.global_entry
            for entry in self.settings.page_entries:
                if entry.is_page and _page_key(entry) in page_keys:
                    self._build_page(entry, global_entry, report)

            if not owners:
                logger.debug("No recorded page depends on %s", target)
            return report

    def handle_changes(self, changed_files: Iterable[PathLike]) -> BuildReport:
        """Pick the pass for a host change notification.

        Exactly one changed file that some record contains -> incremental
        pass; anything else (nothing reported, several files, or an unknown
        file) -> full pass.
        """
        files = [absolute_path(f) for f in changed_files]
        if len(files) == 1 and self.owners_of(files[0]):
            return self.process_changed(files[0])
        return self.process_all()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @contextmanager
    def _building(self) -> Iterator[None]:
        if self._state is BuildState.BUILDING:
            raise PipelineError("A build pass is already running")
        self._state = BuildState.BUILDING
        try:
            yield
        finally:
            self._state = BuildState.IDLE

    def _style_entries(self) -> List[StylesheetEntry]:
        """Every configured stylesheet output once, in configured order."""
        seen: Dict[Tuple[Path, str], StylesheetEntry] = {}
        for entry in self.settings.page_entries:
            for style in entry.styles:
                seen.setdefault(style.key, style)
        return list(seen.values())

    def _pages_linking(self, style_key: Tuple[Path, str]) -> List[RecordKey]:
        global_entry = self.settings.global_entry
        if global_entry is not None and any(s.key == style_key for s in global_entry.styles):
            return [_page_key(e) for e in self.settings.page_entries if e.is_page]
        return [
            _page_key(e)
            for e in self.settings.page_entries
            if e.is_page and any(s.key == style_key for s in e.styles)
        ]

    def _build_style(self, style: StylesheetEntry, report: BuildReport) -> bool:
        try:
            result = self.styles.bundle(style)
        except Exception as exc:
            logger.error("Stylesheet %s failed: %s", style.import_path, exc)
            report.add_error(f"{style.import_path}: {exc}")
            return False
        record = DependencyRecord(
            root=style.import_path, kind=KIND_STYLE, output=style.filename, dependencies=result.dependencies
        )
        self._records[record.key] = record
        report.styles.append(result.filename)
        report.written.append(str(result.output_file))
        return True

    def _build_page(self, entry: PageEntry, global_entry: Optional[PageEntry], report: BuildReport) -> bool:
        try:
            result = self.pages.build(entry, global_entry)
        except Exception as exc:
            logger.error("Page %s failed: %s", entry.key, exc)
            report.add_error(f"{entry.key}: {exc}")
            return False

        for warning in result.warnings:
            report.add_warning(f"{entry.key}: {warning}")
        if result.bundle.ok:
            record = DependencyRecord(
                root=result.import_path, kind=KIND_PAGE, output=result.filename, dependencies=result.dependencies
            )
            self._records[record.key] = record
        else:
            # Keep the last good record so later fixes to its fragments still trigger a rebuild.
            report.add_error(f"{entry.key}: {result.bundle.error}")
        report.pages.append(entry.key)
        report.written.append(str(result.output_file))
        return True

    def _write_sitemap(self, html_filenames: List[str], report: BuildReport) -> None:
        try:
            xml = build_sitemap(self.settings.sitemap, html_filenames)
            if xml is None:
                logger.info("Sitemap skipped: no URLs")
                return
            output_file = self.writer.write(SITEMAP_FILENAME, xml)
        except Exception as exc:
            logger.error("Sitemap generation failed: %s", exc)
            report.add_error(f"sitemap: {exc}")
            return
        report.sitemap = str(output_file)
        report.written.append(str(output_file))


__all__ = ["BuildCoordinator", "BuildState", "default_chunk_resolver"]
