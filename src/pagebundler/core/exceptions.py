from __future__ import annotations

from typing import Any, Dict, Mapping


class PageBundlerError(Exception):
    """Base exception for PageBundler."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(PageBundlerError, ValueError):
    """Raised when configuration cannot be loaded or is invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        PageBundlerError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class SchemaValidationError(ConfigError):
    """Raised when a payload violates its JSON Schema."""


class BundleError(PageBundlerError, RuntimeError):
    """Raised inside the resolver when an include cannot be expanded."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        PageBundlerError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class CircularIncludeError(BundleError):
    """Raised when an include target is already being expanded."""


class PipelineError(PageBundlerError, RuntimeError):
    """Raised for failures in the page pipeline or build coordinator."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        PageBundlerError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


__all__ = [
    "PageBundlerError",
    "ConfigError",
    "SchemaValidationError",
    "BundleError",
    "CircularIncludeError",
    "PipelineError",
]
