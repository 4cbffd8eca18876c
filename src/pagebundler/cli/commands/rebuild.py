"""
PageBundler rebuild command.

SUMMARY: Rebuild the pages affected by changed files

Primes dependency records with a full pass, then applies the change set the
way a watcher would: one recorded file triggers an incremental pass, anything
else a full pass.
"""

from __future__ import annotations

import argparse

from pagebundler.cli import OutputFormatter, add_standard_flags, get_project_root, load_settings
from pagebundler.core.build import BuildCoordinator
from pagebundler.core.utils.paths import absolute_path

SUMMARY = "Rebuild the pages affected by changed files"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "files",
        nargs="+",
        metavar="FILE",
        help="Changed source file(s)",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        coordinator = BuildCoordinator(load_settings(args))
        coordinator.process_all()
        root = get_project_root(args)
        report = coordinator.handle_changes(absolute_path(f, root) for f in args.files)
    except Exception as e:
        formatter.error(e, error_code="rebuild_error")
        return 1

    formatter.success(report.to_dict(), report.summary(), status="success" if report.ok else "failed")
    return 0 if report.ok else 1
