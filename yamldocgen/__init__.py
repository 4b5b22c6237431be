"""Generate YAML configuration documentation from annotated Go structs."""

from __future__ import annotations

__version__ = "0.1.0"
