"""
PageBundler build command.

SUMMARY: Run a full build pass

Copies asset directories, compiles every stylesheet, builds every page and,
in production mode, writes the sitemap.
"""

from __future__ import annotations

import argparse

from pagebundler.cli import OutputFormatter, add_standard_flags, load_settings
from pagebundler.core.build import BuildCoordinator

SUMMARY = "Run a full build pass"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        settings = load_settings(args)
        report = BuildCoordinator(settings).process_all()
    except Exception as e:
        formatter.error(e, error_code="build_error")
        return 1

    formatter.success(report.to_dict(), report.summary(), status="success" if report.ok else "failed")
    return 0 if report.ok else 1
