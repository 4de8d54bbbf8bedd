"""Centralized styles for the chat window."""

from .color_palette import ColorPalette, Theme

class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow, QWidget {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QScrollArea {{
                border: none;
                background-color: {ColorPalette.BACKGROUND_SECONDARY.get(theme)};
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QPushButton:disabled {{
                color: {ColorPalette.TEXT_DISABLED.get(theme)};
            }}
            QLineEdit {{
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px;
            }}
        """

    @staticmethod
    def get_bubble_style(sent: bool, error: bool = False, theme: Theme = Theme.LIGHT) -> str:
        if error:
            background, text = ColorPalette.BUBBLE_ERROR_BG, ColorPalette.BUBBLE_ERROR_TEXT
        elif sent:
            background, text = ColorPalette.BUBBLE_SENT_BG, ColorPalette.BUBBLE_SENT_TEXT
        else:
            background, text = ColorPalette.BUBBLE_RECEIVED_BG, ColorPalette.BUBBLE_RECEIVED_TEXT
        return (
            f"background-color: {background.get(theme)}; color: {text.get(theme)};"
            " border-radius: 10px; padding: 8px 12px;"
        )

    @staticmethod
    def get_loading_style(theme: Theme = Theme.LIGHT) -> str:
        return f"color: {ColorPalette.TEXT_SECONDARY.get(theme)}; font-style: italic; padding: 8px 12px;"
