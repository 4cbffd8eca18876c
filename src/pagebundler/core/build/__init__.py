"""Build coordination: dependency records, full and incremental passes."""
from __future__ import annotations

from .coordinator import BuildCoordinator, BuildState, default_chunk_resolver
from .records import KIND_PAGE, KIND_STYLE, DependencyRecord, RecordKey
from .report import PASS_FULL, PASS_INCREMENTAL, BuildReport

__all__ = [
    "KIND_PAGE",
    "KIND_STYLE",
    "PASS_FULL",
    "PASS_INCREMENTAL",
    "BuildCoordinator",
    "BuildReport",
    "BuildState",
    "DependencyRecord",
    "RecordKey",
    "default_chunk_resolver",
]
