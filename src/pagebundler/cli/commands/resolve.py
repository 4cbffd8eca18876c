"""
PageBundler resolve command.

SUMMARY: Expand include directives in one file

Runs the resolver alone and prints the merged text (or its dependencies).
Prefix, pattern and properties come from the project configuration unless
overridden on the command line.
"""

from __future__ import annotations

import argparse

from pagebundler.cli import OutputFormatter, add_standard_flags, get_config_manager, get_project_root
from pagebundler.cli._utils import cli_overrides
from pagebundler.core.bundling import MODE_IMPORT, MODE_INCLUDE, Resolver
from pagebundler.core.config import BundlerSettings
from pagebundler.core.utils.paths import absolute_path

SUMMARY = "Expand include directives in one file"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("file", metavar="FILE", help="Root file to resolve")
    parser.add_argument(
        "--pattern",
        choices=[MODE_INCLUDE, MODE_IMPORT],
        help="Directive grammar (default: includes.pattern)",
    )
    parser.add_argument("--prefix", help="Include prefix (default: includes.prefix)")
    parser.add_argument(
        "--list-deps",
        action="store_true",
        help="Print the dependency list instead of the merged text",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = get_config_manager(args)
        settings = BundlerSettings.from_dict(manager.load_config(overrides=cli_overrides(args)), manager.base_dir)
        includes = settings.includes
        resolver = Resolver(
            args.prefix or includes.prefix,
            args.pattern or includes.pattern,
            includes.properties,
            max_depth=includes.max_depth,
        )
        result = resolver.resolve(absolute_path(args.file, get_project_root(args)))
    except Exception as e:
        formatter.error(e, error_code="resolve_error")
        return 1

    if formatter.json_mode:
        formatter.json_output({"file": args.file, **result.to_dict()})
    elif args.list_deps:
        for dep in result.dependencies:
            formatter.text(str(dep))
    else:
        formatter.text(result.content)
    return 0 if result.ok else 1
