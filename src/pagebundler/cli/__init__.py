"""
PageBundler CLI package.

Provides the command-line interface with auto-discovery of commands
from ``commands/`` (top level) and domain subfolders (``config/``).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter
from ._args import (
    add_json_flag,
    add_project_root_flag,
    add_config_flag,
    add_mode_flag,
    add_verbose_flag,
    add_log_file_flag,
    add_standard_flags,
)
from ._utils import cli_overrides, get_config_manager, get_project_root, load_settings

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_project_root_flag",
    "add_config_flag",
    "add_mode_flag",
    "add_verbose_flag",
    "add_log_file_flag",
    "add_standard_flags",
    # Utilities
    "cli_overrides",
    "get_config_manager",
    "get_project_root",
    "load_settings",
]
