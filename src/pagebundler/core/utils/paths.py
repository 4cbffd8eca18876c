"""Path normalization shared by configuration, resolver and coordinator."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from .io import PathLike


def absolute_path(path: PathLike, base_dir: Optional[PathLike] = None) -> Path:
    """Return an absolute, normalized path without resolving symlinks.

    Relative paths are joined to ``base_dir`` (or the working directory).
    Dependency records compare paths by value, so every producer and consumer
    of a path goes through this helper.
    """
    raw = os.path.expanduser(str(path))
    if not os.path.isabs(raw) and base_dir is not None:
        raw = os.path.join(str(base_dir), raw)
    return Path(os.path.normpath(os.path.abspath(raw)))


__all__ = ["absolute_path"]
