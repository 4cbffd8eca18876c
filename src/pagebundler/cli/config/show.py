"""
PageBundler config show command.

SUMMARY: Show current configuration

Displays the merged configuration from bundled defaults, the project file
and environment variables. Supports filtering by dot-notation key.
"""

from __future__ import annotations

import argparse
from typing import Any

from pagebundler.cli import OutputFormatter, add_standard_flags, cli_overrides, get_config_manager
from pagebundler.core.utils.io import dump_yaml_string

SUMMARY = "Show current configuration"

_MISSING = object()


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'includes.prefix')",
    )
    parser.add_argument(
        "--format",
        choices=["json", "yaml", "table"],
        default="table",
        help="Output format (default: table)",
    )
    add_standard_flags(parser)


def _lookup(config: Any, key: str) -> Any:
    node = config
    for part in (p for p in key.split(".") if p):
        if not isinstance(node, dict) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _nest_key(key: str, value: Any) -> Any:
    """Nest a dot-notation key into a YAML/JSON-friendly mapping."""
    out = value
    for part in reversed([p for p in str(key).split(".") if p]):
        out = {part: out}
    return out


def _format_value(value: Any, indent: int = 0) -> str:
    """Format a value for table display."""
    prefix = "  " * indent
    if isinstance(value, dict):
        if not value:
            return "{}"
        lines = []
        for k, v in value.items():
            formatted = _format_value(v, indent + 1)
            if "\n" in formatted or (isinstance(v, (dict, list)) and v and not formatted.startswith("[")):
                lines.append(f"{prefix}{k}:")
                lines.append(formatted)
            else:
                lines.append(f"{prefix}{k}: {formatted}")
        return "\n".join(lines)
    if isinstance(value, list):
        if not value:
            return "[]"
        if all(isinstance(v, (str, int, float, bool)) for v in value):
            return f"[{', '.join(str(v) for v in value)}]"
        return "\n".join(f"{prefix}- {_format_value(v, indent + 1).strip()}" for v in value)
    return str(value)


def main(args: argparse.Namespace) -> int:
    """Show configuration - delegates to ConfigManager."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config_data = get_config_manager(args).load_config(validate=False, overrides=cli_overrides(args))
    except Exception as e:
        formatter.error(e, error_code="config_error")
        return 1

    output_format = "json" if args.json else args.format
    data: Any = config_data
    if args.key:
        data = _lookup(config_data, args.key)
        if data is _MISSING:
            formatter.text(f"Key not found: {args.key}")
            return 1

    if output_format == "json":
        formatter.json_output({args.key: data} if args.key else data)
    elif output_format == "yaml":
        payload = _nest_key(args.key, data) if args.key else data
        formatter.text(dump_yaml_string(payload, sort_keys=True).rstrip())
    elif args.key:
        formatter.text(f"{args.key}:")
        formatter.text(_format_value(data, indent=1))
    else:
        formatter.text("PageBundler Configuration")
        formatter.text("=" * 60)
        for section in config_data:
            formatter.text(f"[{section}]")
            formatter.text(_format_value(config_data[section], indent=1))
    return 0
