"""Rendering components for sunburst charts."""

from .sunburst_visual import Sunburst

__all__ = ["Sunburst"]
