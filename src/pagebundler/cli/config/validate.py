"""
PageBundler config validate command.

SUMMARY: Validate project configuration

Validates the merged configuration against the config schema and checks
that configured source files and directories exist.
"""

from __future__ import annotations

import argparse
from typing import List, Tuple

from pagebundler.cli import OutputFormatter, add_standard_flags, load_settings
from pagebundler.core.config import BundlerSettings

SUMMARY = "Validate project configuration"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Enable strict validation (treat warnings as errors)",
    )
    add_standard_flags(parser)


def _check_sources(settings: BundlerSettings) -> List[Tuple[str, str]]:
    """Return (level, message) tuples for missing sources."""
    issues: List[Tuple[str, str]] = []
    for entry in settings.page_entries:
        if entry.import_path is not None and not entry.import_path.is_file():
            issues.append(("error", f"entry.{entry.key}.import not found: {entry.import_path}"))
        if entry.import_path is not None and not entry.filename:
            issues.append(("warning", f"entry.{entry.key} has an import but no filename; it will not be built"))
        for style in entry.styles:
            if not style.import_path.is_file():
                issues.append(("error", f"entry.{entry.key}.styles import not found: {style.import_path}"))
    for asset in settings.asset_dirs:
        if not asset.src_path.is_dir():
            issues.append(("error", f"entry.{asset.key}.src_path is not a directory: {asset.src_path}"))
    if settings.sitemap is not None and not settings.sitemap.origin_url.startswith("http"):
        issues.append(("warning", "sitemap.origin_url should start with http/https"))
    if settings.chunk_manifest is not None and not settings.chunk_manifest.is_file():
        issues.append(("warning", f"chunk_manifest not found: {settings.chunk_manifest}"))
    return issues


def main(args: argparse.Namespace) -> int:
    """Validate configuration."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        settings = load_settings(args)
    except Exception as e:
        formatter.error(e, error_code="invalid_config")
        return 1

    issues = _check_sources(settings)
    errors = [m for level, m in issues if level == "error"]
    warnings = [m for level, m in issues if level == "warning"]
    failed = bool(errors) or (args.strict and bool(warnings))

    if formatter.json_mode:
        formatter.json_output({"valid": not failed, "errors": errors, "warnings": warnings})
    else:
        for msg in errors:
            formatter.text(f"ERROR: {msg}")
        for msg in warnings:
            formatter.text(f"WARNING: {msg}")
        formatter.text("Configuration is invalid" if failed else "Configuration is valid")
    return 1 if failed else 0
