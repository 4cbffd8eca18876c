"""Textual tag injection into merged pages.

Injection is a plain search-and-insert on ``</head>`` / ``</body>``; the
document is never parsed.
"""
from __future__ import annotations

import html
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from pagebundler.core.config import CanonicalOptions, ScriptChunkEntry, StylesheetEntry

from .collaborators import ChunkResolver
from .sitemap import page_url

logger = logging.getLogger(__name__)

HEAD_CLOSE = "</head>"
BODY_CLOSE = "</body>"


def public_path(filename: str) -> str:
    """Root-relative URL for an output file, with separators collapsed."""
    return re.sub(r"[\\/]+", "/", "/" + filename)


def insert_before_head_close(source: str, tags: str) -> str:
    """Insert ``tags`` before the first ``</head>``; unchanged when absent."""
    return source.replace(HEAD_CLOSE, tags + HEAD_CLOSE, 1)


def insert_before_body_close(source: str, tags: str) -> Optional[str]:
    """Insert ``tags`` before the last ``</body>``; ``None`` when absent."""
    idx = source.rfind(BODY_CLOSE)
    if idx == -1:
        return None
    return source[:idx] + tags + source[idx:]


def inject_link_tags(
    source: str,
    styles: Iterable[StylesheetEntry],
    output_names: Mapping[Tuple[Path, str], str],
) -> str:
    """Add one stylesheet ``<link>`` per style, batched before ``</head>``.

    ``output_names`` maps a stylesheet key to its emitted filename when
    that differs from the configured one (content-hashed names).
    """
    tags = "".join(
        f'<link rel="stylesheet" href="{public_path(output_names.get(s.key, s.filename))}">'
        for s in styles
    )
    if not tags:
        return source
    return insert_before_head_close(source, tags)


def build_script_tag(src: str, attributes: Mapping[str, object]) -> str:
    """Render a script tag; string attributes get values, other truthy ones are bare."""
    attrs = []
    for key, value in attributes.items():
        if isinstance(value, str):
            attrs.append(f'{key}="{html.escape(value, quote=True)}"')
        elif value:
            attrs.append(str(key))
    tag = f'<script {" ".join(attrs)} src="{src}"></script>'
    return re.sub(r"\s+", " ", tag)


def inject_script_tags(
    source: str,
    jschunks: Iterable[ScriptChunkEntry],
    chunk_resolver: ChunkResolver,
    warnings: Optional[List[str]] = None,
) -> str:
    """Inject script tags grouped by injection point.

    Tags for the same point are concatenated and inserted once: ``head``
    before the first ``</head>``, ``body`` before the last ``</body>`` (skipped
    when the page has no closing body). Chunks the resolver does not know are
    skipped and, when ``warnings`` is given, noted there.
    """
    groups: Dict[str, str] = {}
    for chunk in jschunks:
        output_file = chunk_resolver.lookup_output_file(chunk.name)
        if not output_file:
            logger.warning("Script chunk not found: %s", chunk.name)
            if warnings is not None:
                warnings.append(f"Script chunk not found: {chunk.name}")
            continue
        tag = build_script_tag(public_path(output_file), chunk.attributes)
        key = chunk.inject or "body"
        groups[key] = groups.get(key, "") + tag

    for key, tags in groups.items():
        if key == "head":
            source = insert_before_head_close(source, tags)
            continue
        injected = insert_before_body_close(source, tags)
        if injected is None:
            logger.debug("No %s in page; skipped body script injection", BODY_CLOSE)
            continue
        source = injected
    return source


def canonical_url(options: CanonicalOptions, filename: str) -> str:
    url = page_url(options.origin_url, filename)
    if options.force_trailing_slash and not url.endswith("/"):
        url = re.sub(r"\.html$", "", url) + "/"
    return url


def inject_canonical_tag(source: str, options: CanonicalOptions, filename: str) -> str:
    tag = f'<link rel="canonical" href="{html.escape(canonical_url(options, filename), quote=True)}">'
    return insert_before_head_close(source, tag)


__all__ = [
    "BODY_CLOSE",
    "HEAD_CLOSE",
    "build_script_tag",
    "canonical_url",
    "inject_canonical_tag",
    "inject_link_tags",
    "inject_script_tags",
    "insert_before_body_close",
    "insert_before_head_close",
    "public_path",
]
