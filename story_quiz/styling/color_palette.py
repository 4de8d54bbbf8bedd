"""Color palette for the chat window supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the application."""

    TEXT_PRIMARY = ThemeColors(light="#1B1B1F", dark="#F5F5F5")
    TEXT_SECONDARY = ThemeColors(light="#666666", dark="#AAAAAA")

    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#1E1E1E")
    BACKGROUND_SECONDARY = ThemeColors(light="#F3F4F8", dark="#2D2D2D")

    # Chat bubbles
    BUBBLE_SENT_BG = ThemeColors(light="#0078D4", dark="#2F6FB5")
    BUBBLE_SENT_TEXT = ThemeColors(light="#FFFFFF", dark="#FFFFFF")
    BUBBLE_RECEIVED_BG = ThemeColors(light="#E9EBF0", dark="#3A3A3A")
    BUBBLE_RECEIVED_TEXT = ThemeColors(light="#1B1B1F", dark="#F5F5F5")
    BUBBLE_ERROR_BG = ThemeColors(light="#FDE7E9", dark="#5A1E22")
    BUBBLE_ERROR_TEXT = ThemeColors(light="#A4262C", dark="#FF9A9E")

    # Seek track
    TRACK_BG = ThemeColors(light="#D1D1D1", dark="#555555")
    TRACK_FILL = ThemeColors(light="#0078D4", dark="#4A9EFF")

    BORDER_PRIMARY = ThemeColors(light="#D1D1D1", dark="#555555")
    BUTTON_SECONDARY_BG = ThemeColors(light="#F5F5F5", dark="#3A3A3A")
    BUTTON_HOVER_BG = ThemeColors(light="#E8E8E8", dark="#505050")
    TEXT_DISABLED = ThemeColors(light="#B0B0B0", dark="#666666")
