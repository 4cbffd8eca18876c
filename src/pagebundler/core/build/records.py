"""Dependency records kept by the build coordinator."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

KIND_PAGE = "page"
KIND_STYLE = "style"

RecordKey = Tuple[Path, str]


@dataclass(frozen=True)
class DependencyRecord:
    """Files that contributed to the last successful build of ``root``.

    ``output`` is the configured output filename; one source may be built
    into several outputs, each with its own record. For pages the root
    itself is not part of ``dependencies``; for stylesheets it is (the
    compiler reports every loaded file).
    """

    root: Path
    kind: str
    output: str = ""
    dependencies: Tuple[Path, ...] = ()

    @property
    def key(self) -> RecordKey:
        return (self.root, self.output)

    def __contains__(self, path: object) -> bool:
        return path in self.dependencies

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": str(self.root),
            "kind": self.kind,
            "output": self.output,
            "dependencies": [str(p) for p in self.dependencies],
        }


__all__ = ["KIND_PAGE", "KIND_STYLE", "DependencyRecord", "RecordKey"]
