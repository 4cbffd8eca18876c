"""I/O utilities for PageBundler.

This package provides safe file operations:
- Core: atomic writes, directory management, text I/O
- YAML: read and dump with consistent error handling
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_directory,
    ensure_parent_dir,
    read_text,
    remove_directory,
    write_text,
)
from .yaml import dump_yaml_string, read_yaml

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    "read_text",
    "write_text",
    "remove_directory",
    # yaml
    "read_yaml",
    "dump_yaml_string",
]
