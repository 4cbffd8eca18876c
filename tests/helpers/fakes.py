"""Recording collaborators used instead of mocks."""
from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from pagebundler.core.filestore import LocalFileStore
from pagebundler.core.pipeline import CompiledStylesheet


class CountingFileStore(LocalFileStore):
    """Local file store that counts reads and records writes."""

    def __init__(self) -> None:
        self.reads: Counter = Counter()
        self.writes: List[Path] = []
        self.removed: List[Path] = []

    def read_text(self, path: Path) -> str:
        self.reads[Path(path)] += 1
        return super().read_text(path)

    def write_text(self, path: Path, content: str) -> None:
        self.writes.append(Path(path))
        super().write_text(path, content)

    def remove_directory(self, path: Path) -> None:
        self.removed.append(Path(path))
        super().remove_directory(path)


class RecordingMinifier:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, Dict[str, bool]]] = []

    def minify(self, html: str, options: Mapping[str, bool]) -> str:
        self.calls.append((html, dict(options)))
        return html.replace("\n", "")


class FakeCompiler:
    """Stylesheet compiler returning canned CSS per path."""

    def __init__(self, outputs: Mapping[Path, str], loaded: Optional[Mapping[Path, Tuple[Path, ...]]] = None) -> None:
        self.outputs = dict(outputs)
        self.loaded = dict(loaded or {})
        self.calls: List[Tuple[Path, bool]] = []

    def compile(self, path: Path, *, optimized: bool) -> CompiledStylesheet:
        self.calls.append((path, optimized))
        return CompiledStylesheet(css=self.outputs[path], loaded_paths=self.loaded.get(path, (path,)))


class UpperPostProcessor:
    def process(self, css: str) -> str:
        return css.upper()
