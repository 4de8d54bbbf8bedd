"""Styling module for the story quiz window."""

from .color_palette import ColorPalette, Theme

__all__ = ["ColorPalette", "Theme"]
