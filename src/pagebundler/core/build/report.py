"""Build reporting dataclasses."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

PASS_FULL = "full"
PASS_INCREMENTAL = "incremental"


@dataclass
class BuildReport:
    """Report from one full or incremental pass.

    Pages whose resolution produced a diagnostic block are still written;
    they are listed in ``pages`` and their failure is also in ``errors``.
    """

    kind: str
    mode: str
    timestamp: datetime = field(default_factory=datetime.now)
    changed_file: Optional[str] = None

    pages: List[str] = field(default_factory=list)
    styles: List[str] = field(default_factory=list)
    assets: List[str] = field(default_factory=list)
    written: List[str] = field(default_factory=list)
    sitemap: Optional[str] = None

    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary for serialization."""
        return {
            "kind": self.kind,
            "mode": self.mode,
            "timestamp": self.timestamp.isoformat(),
            "changed_file": self.changed_file,
            "pages": self.pages,
            "styles": self.styles,
            "assets": self.assets,
            "written": self.written,
            "sitemap": self.sitemap,
            "warnings": self.warnings,
            "errors": self.errors,
            "ok": self.ok,
        }

    def summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            f"Build Report: {self.kind} ({self.mode})",
            f"  Pages: {len(self.pages)}",
            f"  Styles: {len(self.styles)}",
            f"  Assets: {len(self.assets)}",
            f"  Files written: {len(self.written)}",
        ]
        if self.changed_file:
            lines.insert(1, f"  Changed: {self.changed_file}")
        if self.sitemap:
            lines.append(f"  Sitemap: {self.sitemap}")

        if self.warnings:
            lines.append(f"  Warnings: {len(self.warnings)}")
            for w in self.warnings[:3]:  # Show first 3
                lines.append(f"    - {w}")

        if self.errors:
            lines.append(f"  Errors: {len(self.errors)}")
            for e in self.errors[:3]:  # Show first 3
                lines.append(f"    - {e}")

        return "\n".join(lines)


__all__ = ["PASS_FULL", "PASS_INCREMENTAL", "BuildReport"]
