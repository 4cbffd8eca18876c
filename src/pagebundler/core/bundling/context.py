"""Per-call state for one resolution.

A ``ResolutionContext`` lives only for a single ``Resolver.resolve`` call.
It is created by ``resolution_scope`` and cleared on every exit path, so no
cache entry, visited path or inclusion stack outlives the call.
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

from pagebundler.core.filestore import FileStore


@dataclass
class ResolutionContext:
    """Mutable state threaded through one recursive expansion.

    Attributes:
        root_path: Absolute path of the page being resolved.
        visited: Files read during the call, in first-visit order (root excluded).
        cache: Raw text per absolute path; each file is read at most once per call.
        stack: Active inclusion chain; the last element is the current container.
        warnings: Non-fatal problems (missing properties) met during the call.
    """

    root_path: Path
    visited: Dict[Path, None] = field(default_factory=dict)
    cache: Dict[Path, str] = field(default_factory=dict)
    stack: List[Path] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def current_container(self) -> Path:
        return self.stack[-1] if self.stack else self.root_path

    @property
    def dependencies(self) -> Tuple[Path, ...]:
        return tuple(self.visited)

    def read(self, path: Path, store: FileStore) -> str:
        if path not in self.cache:
            self.cache[path] = store.read_text(path)
        return self.cache[path]

    def record_visit(self, path: Path) -> None:
        if path != self.root_path:
            self.visited.setdefault(path, None)

    @contextmanager
    def entering(self, path: Path) -> Iterator[None]:
        """Push ``path`` as the current container for the duration of the block."""
        self.stack.append(path)
        try:
            yield
        finally:
            self.stack.pop()

    def chain(self, *extra: Path) -> str:
        return " -> ".join(str(p) for p in [*self.stack, *extra])

    def clear(self) -> None:
        self.visited.clear()
        self.cache.clear()
        self.stack.clear()
        self.warnings.clear()


@contextmanager
def resolution_scope(root_path: Path) -> Iterator[ResolutionContext]:
    """Create a fresh context for ``root_path`` and clear it on exit."""
    ctx = ResolutionContext(root_path=root_path, stack=[root_path])
    try:
        yield ctx
    finally:
        ctx.clear()


__all__ = ["ResolutionContext", "resolution_scope"]
