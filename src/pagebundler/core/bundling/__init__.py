"""Include resolution: directive grammar, per-call context and resolver."""
from __future__ import annotations

from .context import ResolutionContext, resolution_scope
from .directives import (
    MODE_IMPORT,
    MODE_INCLUDE,
    Directive,
    DirectiveGrammar,
    DirectiveKind,
    LiteralSpan,
    sanitize_prefix,
)
from .resolver import BORDER, BundleResult, Resolver, normalize_properties

__all__ = [
    "MODE_IMPORT",
    "MODE_INCLUDE",
    "BORDER",
    "BundleResult",
    "Directive",
    "DirectiveGrammar",
    "DirectiveKind",
    "LiteralSpan",
    "ResolutionContext",
    "Resolver",
    "normalize_properties",
    "resolution_scope",
    "sanitize_prefix",
]
