"""Page pipeline: collaborators, tag injection, stylesheets, assets and sitemap."""
from __future__ import annotations

from .assets import copy_assets, copy_tree
from .collaborators import (
    ChunkResolver,
    CompiledStylesheet,
    HtmlMinifier,
    IdentityPostProcessor,
    ManifestChunkResolver,
    Minifier,
    PostProcessor,
    StaticChunkResolver,
    StylesheetCompiler,
    compact_css,
)
from .injection import (
    build_script_tag,
    canonical_url,
    inject_canonical_tag,
    inject_link_tags,
    inject_script_tags,
    public_path,
)
from .output import OutputWriter
from .page import PagePipeline, PageResult
from .sitemap import SITEMAP_FILENAME, build_sitemap
from .styles import CONTENTHASH, CssImportCompiler, StyleBundler, StyleResult, content_hash

__all__ = [
    "CONTENTHASH",
    "SITEMAP_FILENAME",
    "ChunkResolver",
    "CompiledStylesheet",
    "CssImportCompiler",
    "HtmlMinifier",
    "IdentityPostProcessor",
    "ManifestChunkResolver",
    "Minifier",
    "OutputWriter",
    "PagePipeline",
    "PageResult",
    "PostProcessor",
    "StaticChunkResolver",
    "StyleBundler",
    "StyleResult",
    "StylesheetCompiler",
    "build_script_tag",
    "build_sitemap",
    "canonical_url",
    "compact_css",
    "content_hash",
    "copy_assets",
    "copy_tree",
    "inject_canonical_tag",
    "inject_link_tags",
    "inject_script_tags",
    "public_path",
]
