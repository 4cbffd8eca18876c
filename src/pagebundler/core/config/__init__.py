"""Configuration loading for PageBundler."""
from __future__ import annotations

from .manager import CONFIG_FILENAMES, ENV_PREFIX, ConfigManager
from .settings import (
    GLOBAL_ENTRY_KEY,
    MODE_DEVELOPMENT,
    MODE_PRODUCTION,
    AssetDirEntry,
    BundlerSettings,
    CanonicalOptions,
    IncludeOptions,
    PageEntry,
    ScriptChunkEntry,
    SitemapOptions,
    StylesheetEntry,
)

__all__ = [
    "CONFIG_FILENAMES",
    "ENV_PREFIX",
    "ConfigManager",
    "GLOBAL_ENTRY_KEY",
    "MODE_DEVELOPMENT",
    "MODE_PRODUCTION",
    "AssetDirEntry",
    "BundlerSettings",
    "CanonicalOptions",
    "IncludeOptions",
    "PageEntry",
    "ScriptChunkEntry",
    "SitemapOptions",
    "StylesheetEntry",
]
