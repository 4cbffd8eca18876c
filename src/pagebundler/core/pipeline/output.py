"""Writes pipeline products under the configured output directory."""
from __future__ import annotations

import logging
from pathlib import Path

from pagebundler.core.filestore import FileStore
from pagebundler.core.utils.paths import absolute_path

logger = logging.getLogger(__name__)


class OutputWriter:
    """Resolve output filenames and write text through a ``FileStore``.

    Configured filenames may start with ``/`` (``/css/site.css``); they are
    always placed under ``output_path``.
    """

    def __init__(self, output_path: Path, file_store: FileStore) -> None:
        self.output_path = absolute_path(output_path)
        self.file_store = file_store

    def output_file(self, filename: str) -> Path:
        return absolute_path(filename.replace("\\", "/").lstrip("/"), self.output_path)

    def write(self, filename: str, content: str) -> Path:
        target = self.output_file(filename)
        self.file_store.ensure_directory(target.parent)
        self.file_store.write_text(target, content)
        logger.debug("Wrote %s", target)
        return target


__all__ = ["OutputWriter"]
