"""Directive grammar for include resolution.

Two directive shapes are recognized, one per grammar mode:

- ``include`` mode::

      Prefix.include.title            property reference
      Prefix.include("path/file")     file reference ('...' and `...` also accepted)

- ``import`` mode::

      import "path/file"              file reference (optional leading @)

Both accept an optional trailing ``;``. The prefix and keywords match
case-insensitively. A candidate whose body does not parse is passed through
verbatim as literal text.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

MODE_INCLUDE = "include"
MODE_IMPORT = "import"
MODES = (MODE_INCLUDE, MODE_IMPORT)

QUOTES = "\"'`"

# Characters allowed inside a quoted path: word chars, separators, - . : ~ and whitespace.
PATH_PATTERN = re.compile(r"[\\/\w\-.:~\s]+")
PROPERTY_PATTERN = re.compile(r"\.\w+")
WHITESPACE = re.compile(r"\s*")


class DirectiveKind(str, Enum):
    PROPERTY = "property"
    FILE = "file"


@dataclass(frozen=True)
class Directive:
    """A parsed directive.

    ``value`` is the property name (dots stripped) or the file path
    (delimiters and surrounding whitespace stripped); ``raw`` is the exact
    source text the directive replaces.
    """

    kind: DirectiveKind
    value: str
    raw: str


@dataclass(frozen=True)
class LiteralSpan:
    text: str


Segment = Union[LiteralSpan, Directive]


def sanitize_prefix(prefix: str) -> str:
    """Keep only word characters of ``prefix``."""
    return re.sub(r"[^\w]", "", prefix or "")


class DirectiveGrammar:
    """Tokenizer splitting text into literal spans and directives."""

    def __init__(self, prefix: str, mode: str = MODE_INCLUDE) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown directive mode: {mode!r} (expected one of {', '.join(MODES)})")
        self.prefix = sanitize_prefix(prefix)
        self.mode = mode
        if mode == MODE_INCLUDE:
            if not self.prefix:
                raise ValueError("include mode requires a non-empty prefix")
            self.anchor = re.compile(re.escape(self.prefix) + r"\.include", re.IGNORECASE)
        else:
            self.anchor = re.compile(r"@?import", re.IGNORECASE)

    def tokenize(self, text: str) -> Iterator[Segment]:
        """Yield segments covering ``text`` exactly, in order."""
        pos = 0
        literal_start = 0
        while True:
            match = self.anchor.search(text, pos)
            if match is None:
                break
            parsed = self._parse_body(text, match.end())
            if parsed is None:
                # Malformed candidate: keep it as literal text and scan past the anchor.
                pos = match.end()
                continue
            kind, value, end = parsed
            if match.start() > literal_start:
                yield LiteralSpan(text[literal_start:match.start()])
            yield Directive(kind=kind, value=value, raw=text[match.start():end])
            pos = literal_start = end
        if literal_start < len(text):
            yield LiteralSpan(text[literal_start:])

    def segments(self, text: str) -> List[Segment]:
        return list(self.tokenize(text))

    def directives(self, text: str) -> List[Directive]:
        return [s for s in self.tokenize(text) if isinstance(s, Directive)]

    # ------------------------------------------------------------------
    # Body parsing
    # ------------------------------------------------------------------
    def _parse_body(self, text: str, pos: int) -> Optional[Tuple[DirectiveKind, str, int]]:
        pos = _skip_ws(text, pos)
        if self.mode == MODE_INCLUDE:
            prop = PROPERTY_PATTERN.match(text, pos)
            if prop is not None:
                return DirectiveKind.PROPERTY, prop.group(0).replace(".", ""), _terminator_end(text, prop.end())
            if not text.startswith("(", pos):
                return None
            quoted = _parse_quoted(text, _skip_ws(text, pos + 1))
            if quoted is None:
                return None
            path, end = quoted
            end = _skip_ws(text, end)
            if not text.startswith(")", end):
                return None
            return DirectiveKind.FILE, path, _terminator_end(text, end + 1)

        quoted = _parse_quoted(text, pos)
        if quoted is None:
            return None
        path, end = quoted
        return DirectiveKind.FILE, path, _terminator_end(text, end)


def _skip_ws(text: str, pos: int) -> int:
    return WHITESPACE.match(text, pos).end()


def _parse_quoted(text: str, pos: int) -> Optional[Tuple[str, int]]:
    """Parse ``"path"`` at ``pos``; return (path, index after closing quote)."""
    if pos >= len(text) or text[pos] not in QUOTES:
        return None
    quote = text[pos]
    close = text.find(quote, pos + 1)
    if close == -1:
        return None
    body = text[pos + 1:close]
    if not body or PATH_PATTERN.fullmatch(body) is None:
        return None
    path = body.strip()
    if not path:
        return None
    return path, close + 1


def _terminator_end(text: str, pos: int) -> int:
    """Consume an optional ``;`` (with leading whitespace) after a directive."""
    after_ws = _skip_ws(text, pos)
    if text.startswith(";", after_ws):
        return after_ws + 1
    return pos


__all__ = [
    "MODE_INCLUDE",
    "MODE_IMPORT",
    "MODES",
    "Directive",
    "DirectiveGrammar",
    "DirectiveKind",
    "LiteralSpan",
    "Segment",
    "sanitize_prefix",
]
