"""
PageBundler - static-site page bundling

Resolves include/import directives in HTML sources, injects stylesheet and
script tags, writes the pages, and rebuilds only the pages affected by a
changed source file.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
