"""Recursive include resolution.

``Resolver.resolve`` expands every directive in a root file, and transitively
in every file it pulls in, returning the merged text plus the ordered list of
files that contributed. Resolution never raises: failures become a bordered
diagnostic block in place of the page content.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from pagebundler.core.exceptions import BundleError, CircularIncludeError
from pagebundler.core.filestore import FileStore, LocalFileStore
from pagebundler.core.utils.io import PathLike
from pagebundler.core.utils.paths import absolute_path

from .context import ResolutionContext, resolution_scope
from .directives import MODE_INCLUDE, Directive, DirectiveGrammar, DirectiveKind, sanitize_prefix

logger = logging.getLogger(__name__)

DEFAULT_NAME = "PageBundler"
BORDER = "*" * 10
DEFAULT_MAX_DEPTH = 32

# Scheme-qualified or protocol-relative references (https://..., //cdn...).
# Schemes need two or more characters so Windows drive letters stay local.
EXTERNAL_REF_RE = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+.-]+:|//)")


@dataclass(frozen=True)
class BundleResult:
    """Merged text of one resolution and the files it depends on.

    ``error`` is set (and ``dependencies`` empty) when ``content`` is a
    diagnostic block rather than the expanded page. ``warnings`` lists
    properties that were not found and were replaced by an inline error.
    """

    content: str
    dependencies: Tuple[Path, ...] = ()
    error: Optional[str] = None
    warnings: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "dependencies": [str(p) for p in self.dependencies],
            "error": self.error,
            "warnings": list(self.warnings),
        }


def normalize_properties(raw: Any) -> Dict[str, str]:
    """Return a clean property map: non-mappings become ``{}``, non-string values are dropped."""
    if not isinstance(raw, Mapping):
        return {}
    return {str(k): v for k, v in raw.items() if isinstance(v, str)}


class Resolver:
    """Expand include/import directives found in source files.

    With ``keep_external`` set, file directives naming a URL
    (``https://...`` or ``//host/...``) are left in the output as written.

    Example:
        resolver = Resolver(prefix="site", properties={"title": "Home"})
        result = resolver.resolve(Path("src/index.html"))
        result.content, result.dependencies
    """

    def __init__(
        self,
        prefix: str = DEFAULT_NAME,
        pattern: str = MODE_INCLUDE,
        properties: Any = None,
        *,
        file_store: Optional[FileStore] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        keep_external: bool = False,
    ) -> None:
        self.name = sanitize_prefix(prefix) or DEFAULT_NAME
        self.grammar = DirectiveGrammar(self.name, pattern)
        self.properties = normalize_properties(properties)
        self.file_store: FileStore = file_store or LocalFileStore()
        self.max_depth = max_depth
        self.keep_external = keep_external

    @property
    def pattern(self) -> str:
        return self.grammar.mode

    def resolve(self, root_path: PathLike) -> BundleResult:
        """Resolve ``root_path`` into merged text and its dependency list."""
        try:
            root = absolute_path(root_path)
            with resolution_scope(root) as ctx:
                source = ctx.read(root, self.file_store)
                content = self._expand(source, ctx, depth=0)
                return BundleResult(content=content, dependencies=ctx.dependencies, warnings=tuple(ctx.warnings))
        except Exception as exc:
            message = str(exc)
            logger.error("%s Exception: %s", self.name, message)
            return BundleResult(content=self.format_error(message), error=message or exc.__class__.__name__)

    def format_error(self, message: str) -> str:
        if not message:
            return f"{self.name} ERROR: check logs"
        return f"{self.name} Exception:\n{BORDER} {message} {BORDER}"

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------
    def _expand(self, text: str, ctx: ResolutionContext, depth: int) -> str:
        parts = []
        for segment in self.grammar.tokenize(text):
            if not isinstance(segment, Directive):
                parts.append(segment.text)
            elif segment.kind is DirectiveKind.PROPERTY:
                parts.append(self._substitute_property(segment.value, ctx))
            elif self.keep_external and EXTERNAL_REF_RE.match(segment.value):
                parts.append(segment.raw)
            else:
                parts.append(self._include_file(segment.value, ctx, depth))
        return "".join(parts)

    def _substitute_property(self, name: str, ctx: ResolutionContext) -> str:
        value = self.properties.get(name)
        if value is not None:
            return value
        logger.warning("%s: property '%s' not found in include properties", self.name, name)
        ctx.warnings.append(f"Property '{name}' not found in include properties")
        return f"{self.name} Exception:\n{BORDER} ERROR: Property '{name}' not found in include properties {BORDER}"

    def _include_file(self, raw_path: str, ctx: ResolutionContext, depth: int) -> str:
        target = self._resolve_target(raw_path, ctx)
        if target in ctx.stack:
            raise CircularIncludeError(
                f"Circular include detected: {ctx.chain(target)}",
                context={"path": str(target)},
            )
        if depth >= self.max_depth:
            raise BundleError(
                f"Include depth exceeded (>{self.max_depth}) at {target}",
                context={"path": str(target), "max_depth": self.max_depth},
            )

        source = ctx.read(target, self.file_store)
        ctx.record_visit(target)
        with ctx.entering(target):
            return self._expand(source, ctx, depth + 1)

    def _resolve_target(self, raw_path: str, ctx: ResolutionContext) -> Path:
        """Resolve a file reference against the directory of the current container.

        Leading separators are ignored, so ``/nav.html`` and ``nav.html`` name
        the same sibling file. A reference without an extension inherits the
        root file's extension.
        """
        rel = raw_path.replace("\\", "/").lstrip("/")
        if not rel:
            raise BundleError(f"Empty include path in {ctx.current_container}")
        if not Path(rel).suffix:
            rel += ctx.root_path.suffix
        return absolute_path(rel, ctx.current_container.parent)


__all__ = ["BORDER", "BundleResult", "DEFAULT_NAME", "Resolver", "normalize_properties"]
