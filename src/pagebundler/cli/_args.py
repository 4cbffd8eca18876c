"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse

from pagebundler.core.config import MODE_DEVELOPMENT, MODE_PRODUCTION


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_project_root_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project-root",
        type=str,
        help="Override project root path (default: current directory)",
    )


def add_config_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=str,
        help="Path to a config file (default: pagebundler.yaml in the project root)",
    )


def add_mode_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mode",
        choices=[MODE_DEVELOPMENT, MODE_PRODUCTION],
        help="Override the configured build mode",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )


def add_log_file_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-file",
        type=str,
        help="Write log records to this file instead of stderr",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add the flags every command accepts.

    Adds: --json, --project-root, --config, --mode, --verbose, --log-file
    """
    add_json_flag(parser)
    add_project_root_flag(parser)
    add_config_flag(parser)
    add_mode_flag(parser)
    add_verbose_flag(parser)
    add_log_file_flag(parser)


__all__ = [
    "add_json_flag",
    "add_project_root_flag",
    "add_config_flag",
    "add_mode_flag",
    "add_verbose_flag",
    "add_log_file_flag",
    "add_standard_flags",
]
