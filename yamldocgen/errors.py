"""Fatal error types raised by the generation pipeline."""

from __future__ import annotations


class GenerationError(RuntimeError):
    """Base class for failures that abort a generation run."""


class ConfigError(GenerationError):
    """Raised when the configuration file cannot be parsed."""


class ModuleLoadError(GenerationError):
    """Raised when Go packages cannot be loaded from disk."""


class TypeNotFoundError(GenerationError):
    """Raised when the requested root type yields no documentable struct."""


class RenderError(GenerationError):
    """Raised when documentation cannot be rendered or written."""


__all__ = [
    "ConfigError",
    "GenerationError",
    "ModuleLoadError",
    "RenderError",
    "TypeNotFoundError",
]
