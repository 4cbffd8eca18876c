"""File store collaborator used by the resolver and the page pipeline.

All reads and writes the build performs go through a ``FileStore`` so tests
can substitute an in-memory or counting implementation.
"""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List, Protocol, runtime_checkable

from pagebundler.core.utils.io import ensure_directory, read_text, remove_directory, write_text

logger = logging.getLogger(__name__)


@runtime_checkable
class FileStore(Protocol):
    """Filesystem operations consumed by the build."""

    def read_text(self, path: Path) -> str: ...

    def write_text(self, path: Path, content: str) -> None: ...

    def remove_directory(self, path: Path) -> None: ...

    def ensure_directory(self, path: Path) -> None: ...

    def list_entries(self, path: Path) -> List[str]: ...

    def is_directory(self, path: Path) -> bool: ...

    def copy_file(self, src: Path, dest: Path) -> None: ...


class LocalFileStore:
    """``FileStore`` backed by the local filesystem (UTF-8 text)."""

    def read_text(self, path: Path) -> str:
        return read_text(path)

    def write_text(self, path: Path, content: str) -> None:
        write_text(path, content)

    def remove_directory(self, path: Path) -> None:
        # Missing or locked directories are tolerated: cleaning is best effort.
        if not remove_directory(path):
            logger.debug("Directory not removed: %s", path)

    def ensure_directory(self, path: Path) -> None:
        ensure_directory(path)

    def list_entries(self, path: Path) -> List[str]:
        return sorted(p.name for p in Path(path).iterdir())

    def is_directory(self, path: Path) -> bool:
        return Path(path).is_dir()

    def copy_file(self, src: Path, dest: Path) -> None:
        Path(dest).parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest)


__all__ = ["FileStore", "LocalFileStore"]
