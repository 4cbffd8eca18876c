"""Copy static asset directories into the output tree."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

from pagebundler.core.config import AssetDirEntry
from pagebundler.core.filestore import FileStore

from .output import OutputWriter

logger = logging.getLogger(__name__)


def _copy_file(src_file: Path, dest_file: Path, store: FileStore, *, optimized: bool) -> None:
    if optimized and src_file.name.endswith(".json"):
        data = json.loads(store.read_text(src_file))
        store.write_text(dest_file, json.dumps(data, separators=(",", ":"), ensure_ascii=False))
    else:
        store.copy_file(src_file, dest_file)


def copy_tree(
    src: Path,
    dest: Path,
    store: FileStore,
    *,
    optimized: bool,
    errors: Optional[List[str]] = None,
) -> List[Path]:
    """Recursively copy ``src`` into ``dest``; compact ``.json`` files when optimized.

    A file that cannot be copied is logged and skipped, and its siblings are
    still copied. Failures are appended to ``errors`` when it is given.
    """
    store.ensure_directory(dest)
    written: List[Path] = []
    for name in store.list_entries(src):
        src_file = src / name
        dest_file = dest / name
        if store.is_directory(src_file):
            written.extend(copy_tree(src_file, dest_file, store, optimized=optimized, errors=errors))
            continue
        try:
            _copy_file(src_file, dest_file, store, optimized=optimized)
        except (OSError, ValueError) as exc:
            logger.error("Cannot copy asset %s: %s", src_file, exc)
            if errors is not None:
                errors.append(f"{src_file}: {exc}")
            continue
        written.append(dest_file)
    return written


def copy_assets(
    entry: AssetDirEntry,
    writer: OutputWriter,
    *,
    optimized: bool,
    errors: Optional[List[str]] = None,
) -> List[Path]:
    dest = writer.output_file(entry.dest_path)
    written = copy_tree(entry.src_path, dest, writer.file_store, optimized=optimized, errors=errors)
    logger.info("Copied %d asset file(s) from %s to %s", len(written), entry.src_path, dest)
    return written


__all__ = ["copy_assets", "copy_tree"]
