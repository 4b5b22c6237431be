"""Output rendering for synthesized documentation."""

from __future__ import annotations

from .renderer import TEMPLATES, Renderer, anchor, go_string

__all__ = ["Renderer", "TEMPLATES", "anchor", "go_string"]
