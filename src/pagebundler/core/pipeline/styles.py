"""Stylesheet compilation, content hashing and output."""
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from pagebundler.core.bundling import MODE_IMPORT, Resolver
from pagebundler.core.config import StylesheetEntry
from pagebundler.core.exceptions import PipelineError
from pagebundler.core.filestore import FileStore, LocalFileStore
from pagebundler.core.utils.paths import absolute_path

from .collaborators import (
    CompiledStylesheet,
    IdentityPostProcessor,
    PostProcessor,
    StylesheetCompiler,
    compact_css,
)
from .output import OutputWriter

logger = logging.getLogger(__name__)

CONTENTHASH = "[contenthash]"
CONTENTHASH_LENGTH = 24


class CssImportCompiler:
    """Default stylesheet compiler for plain CSS.

    ``@import "file.css"`` directives are inlined recursively (import
    grammar); imports of URLs are kept as written. In optimized mode the
    result is compacted.
    """

    def __init__(self, file_store: Optional[FileStore] = None, max_depth: int = 32) -> None:
        self.file_store = file_store or LocalFileStore()
        self.max_depth = max_depth

    def compile(self, path: Path, *, optimized: bool) -> CompiledStylesheet:
        resolver = Resolver(
            pattern=MODE_IMPORT, file_store=self.file_store, max_depth=self.max_depth, keep_external=True
        )
        result = resolver.resolve(path)
        if not result.ok:
            raise PipelineError(f"Cannot compile stylesheet {path}: {result.error}", context={"path": str(path)})
        css = compact_css(result.content) if optimized else result.content
        return CompiledStylesheet(css=css, loaded_paths=(absolute_path(path), *result.dependencies))


def content_hash(css: str) -> str:
    return hashlib.md5(css.encode("utf-8")).hexdigest()[:CONTENTHASH_LENGTH]


@dataclass(frozen=True)
class StyleResult:
    import_path: Path
    filename: str
    output_file: Path
    dependencies: Tuple[Path, ...]


class StyleBundler:
    """Compile stylesheet entries and remember their emitted filenames.

    ``output_names`` maps each stylesheet ``(import_path, filename)`` key to
    the filename it was last written under, which differs from the
    configured one when the name contains ``[contenthash]``.
    """

    def __init__(
        self,
        writer: OutputWriter,
        *,
        compiler: StylesheetCompiler,
        post_processor: Optional[PostProcessor] = None,
        optimized: bool = False,
    ) -> None:
        self.writer = writer
        self.compiler = compiler
        self.post_processor = post_processor or IdentityPostProcessor()
        self.optimized = optimized
        self.output_names: Dict[Tuple[Path, str], str] = {}

    def clean_output(self, style: StylesheetEntry) -> Path:
        """Remove the output directory that ``style`` is written into."""
        directory = self.writer.output_file(style.filename).parent
        self.writer.file_store.remove_directory(directory)
        logger.info("Cleaned stylesheet output %s", directory)
        return directory

    def bundle(self, style: StylesheetEntry) -> StyleResult:
        compiled = self.compiler.compile(style.import_path, optimized=self.optimized)
        css = compiled.css
        if self.optimized:
            css = self.post_processor.process(css)

        filename = style.filename
        if CONTENTHASH in filename:
            filename = filename.replace(CONTENTHASH, content_hash(css))
            self.output_names[style.key] = filename

        output_file = self.writer.write(filename, css)
        logger.info("Stylesheet %s -> %s", style.import_path, output_file)
        return StyleResult(
            import_path=style.import_path,
            filename=filename,
            output_file=output_file,
            dependencies=tuple(absolute_path(p) for p in compiled.loaded_paths),
        )


__all__ = ["CONTENTHASH", "CssImportCompiler", "StyleBundler", "StyleResult", "content_hash"]
