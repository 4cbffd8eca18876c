"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, Optional

from pagebundler.core.config import BundlerSettings, ConfigManager
from pagebundler.core.utils.paths import absolute_path


def get_project_root(args: argparse.Namespace) -> Optional[Path]:
    """Project root from ``--project-root``; ``None`` lets the config manager decide."""
    raw = getattr(args, "project_root", None)
    return absolute_path(raw) if raw else None


def get_config_manager(args: argparse.Namespace) -> ConfigManager:
    raw_config = getattr(args, "config", None)
    return ConfigManager(
        project_root=get_project_root(args),
        config_path=absolute_path(raw_config) if raw_config else None,
    )


def cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Configuration overrides taken from command-line flags."""
    overrides: Dict[str, Any] = {}
    if getattr(args, "mode", None):
        overrides["mode"] = args.mode
    return overrides


def load_settings(args: argparse.Namespace) -> BundlerSettings:
    return get_config_manager(args).load_settings(overrides=cli_overrides(args))


__all__ = ["cli_overrides", "get_config_manager", "get_project_root", "load_settings"]
