"""
Theme definitions for the Mailbox Toolkit GUI.
"""


class Colors:
    # Primary Colors
    PRIMARY_BLUE = "#0364B8"
    PRIMARY_BLUE_HOVER = "#0A2767"
    PRIMARY_BLUE_PRESSED = "#0A2767"

    # Backgrounds
    BACKGROUND = "#f5f5f5"
    SURFACE = "#ffffff"
    HOVER = "#f0f0f0"
    DISABLED_BG = "#e0e0e0"
    STRIPE = "#f7f9fb"

    # Text
    TEXT_PRIMARY = "#1f1f1f"
    TEXT_SECONDARY = "#666666"
    TEXT_DISABLED = "#757575"
    TEXT_ON_PRIMARY = "#ffffff"

    # Borders & Dividers
    BORDER = "#e0e0e0"
    DIVIDER = "#eeeeee"
    BORDER_FOCUS = "#28A8EA"

    # Status
    ERROR = "#d32f2f"
    ERROR_BG = "#fdecea"
    SUCCESS = "#388e3c"
    WARNING = "#f57c00"
    INFO = "#1976d2"

    # Selection
    SELECTION_BG = "#F0F9FF"
    SELECTION_TEXT = "#1f1f1f"

    # Drag target while reordering
    DROP_INDICATOR = "#1490DF"


class ColorsDark:
    """Dark theme palette."""

    PRIMARY_BLUE = "#3794FF"
    PRIMARY_BLUE_HOVER = "#4FA3FF"
    PRIMARY_BLUE_PRESSED = "#2A7FE8"

    BACKGROUND = "#1e1e1e"
    SURFACE = "#252526"
    HOVER = "#21262D"
    DISABLED_BG = "#3D444D"
    STRIPE = "#2b2b2c"

    TEXT_PRIMARY = "#E6EDF3"
    TEXT_SECONDARY = "#8B949E"
    TEXT_DISABLED = "#9CA3AF"
    TEXT_ON_PRIMARY = "#FFFFFF"

    BORDER = "#30363D"
    DIVIDER = "#21262D"
    BORDER_FOCUS = "#3794FF"

    ERROR = "#F85149"
    ERROR_BG = "#3b1f1f"
    SUCCESS = "#3FB950"
    WARNING = "#D29922"
    INFO = "#58A6FF"

    SELECTION_BG = "#1F6FEB"
    SELECTION_TEXT = "#FFFFFF"

    DROP_INDICATOR = "#3794FF"


class Fonts:
    # Font Families
    UI_FONT = "-apple-system, 'SF Pro Text', 'Segoe UI', Roboto, Helvetica, Arial, sans-serif"
    MONO_FONT = "Consolas, Monaco, Menlo, 'Courier New', monospace"

    # Sizes
    H1 = "18pt"
    H2 = "16pt"
    BODY = "14pt"
    SMALL = "12pt"
    CONSOLE = "13pt"

    # Weights
    WEIGHT_REGULAR = "400"
    WEIGHT_MEDIUM = "500"
    WEIGHT_BOLD = "600"


def _button_styles(C) -> tuple[str, str]:
    primary = f"""
        QPushButton {{
            background-color: {C.PRIMARY_BLUE};
            color: {C.TEXT_ON_PRIMARY};
            border-radius: 6px;
            padding: 8px 16px;
            font-weight: {Fonts.WEIGHT_MEDIUM};
            border: none;
        }}
        QPushButton:hover {{
            background-color: {C.PRIMARY_BLUE_HOVER};
        }}
        QPushButton:pressed {{
            background-color: {C.PRIMARY_BLUE_PRESSED};
        }}
        QPushButton:disabled {{
            background-color: {C.DISABLED_BG};
            color: {C.TEXT_DISABLED};
        }}
    """
    secondary = f"""
        QPushButton {{
            background-color: {C.SURFACE};
            color: {C.TEXT_PRIMARY};
            border: 1px solid {C.BORDER};
            border-radius: 6px;
            padding: 8px 16px;
            font-weight: {Fonts.WEIGHT_MEDIUM};
        }}
        QPushButton:hover {{
            background-color: {C.HOVER};
            border-color: {C.BORDER_FOCUS};
        }}
        QPushButton:disabled {{
            background-color: {C.DISABLED_BG};
            color: {C.TEXT_DISABLED};
            border-color: {C.DISABLED_BG};
        }}
    """
    return primary, secondary


class Styles:
    # Common QSS fragments
    BUTTON_PRIMARY, BUTTON_SECONDARY = _button_styles(Colors)


class StylesDark:
    BUTTON_PRIMARY, BUTTON_SECONDARY = _button_styles(ColorsDark)


def _global_stylesheet(C) -> str:
    return f"""
    * {{
        font-family: {Fonts.UI_FONT};
        font-size: {Fonts.BODY};
        color: {C.TEXT_PRIMARY};
    }}

    QMainWindow, QWidget {{
        background-color: {C.BACKGROUND};
    }}

    QLabel {{
        background-color: transparent;
        color: {C.TEXT_PRIMARY};
    }}

    QMenuBar, QMenu {{
        background-color: {C.BACKGROUND};
        color: {C.TEXT_PRIMARY};
        border: none;
    }}
    QMenu::item:selected {{
        background-color: {C.SELECTION_BG};
        color: {C.SELECTION_TEXT};
    }}

    QStatusBar {{
        background-color: {C.SURFACE};
        color: {C.TEXT_SECONDARY};
    }}

    QGroupBox {{
        background-color: {C.SURFACE};
        border: 1px solid {C.BORDER};
        border-radius: 6px;
        margin-top: 12px;
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 8px;
        top: -2px;
        padding: 0 4px;
        background-color: {C.BACKGROUND};
        color: {C.TEXT_PRIMARY};
    }}

    QLineEdit, QSpinBox, QComboBox {{
        border: 1px solid {C.BORDER};
        border-radius: 6px;
        padding: 6px;
        background: {C.SURFACE};
        color: {C.TEXT_PRIMARY};
        selection-background-color: {C.SELECTION_BG};
        selection-color: {C.SELECTION_TEXT};
    }}
    QLineEdit:focus, QSpinBox:focus, QComboBox:focus {{
        border: 1px solid {C.BORDER_FOCUS};
    }}

    QPlainTextEdit, QTextEdit {{
        background-color: {C.SURFACE};
        color: {C.TEXT_PRIMARY};
        border: 1px solid {C.BORDER};
        border-radius: 6px;
    }}

    QTabWidget::pane {{
        background: {C.SURFACE};
        border: 1px solid {C.BORDER};
        border-radius: 6px;
        margin-top: 2px;
    }}
    QTabBar::tab {{
        background: {C.SURFACE};
        padding: 8px 12px;
        border: 1px solid {C.BORDER};
        border-top-left-radius: 6px;
        border-top-right-radius: 6px;
        margin-right: 2px;
    }}
    QTabBar::tab:selected {{
        color: {C.PRIMARY_BLUE};
        border-color: {C.BORDER_FOCUS};
    }}
    QTabBar::tab:hover {{
        background: {C.HOVER};
    }}

    QAbstractItemView {{
        background: {C.SURFACE};
        color: {C.TEXT_PRIMARY};
        alternate-background-color: {C.STRIPE};
        selection-background-color: {C.SELECTION_BG};
        selection-color: {C.SELECTION_TEXT};
        border: 1px solid {C.BORDER};
    }}
    QHeaderView::section {{
        background: {C.BACKGROUND};
        color: {C.TEXT_SECONDARY};
        border: none;
        border-bottom: 1px solid {C.BORDER};
        padding: 6px;
    }}

    #errorBanner {{
        background-color: {C.ERROR_BG};
        color: {C.ERROR};
        border: 1px solid {C.ERROR};
        border-radius: 6px;
        padding: 8px;
    }}
    #statusMessage {{
        color: {C.TEXT_SECONDARY};
    }}
"""


GLOBAL_STYLESHEET = _global_stylesheet(Colors)
GLOBAL_STYLESHEET_DARK = _global_stylesheet(ColorsDark)


_is_dark_mode = False


def set_dark_mode(is_dark: bool):
    """Explicitly set the dark mode state. Called by MainWindow._apply_theme."""
    global _is_dark_mode
    _is_dark_mode = is_dark


def is_dark_mode() -> bool:
    return _is_dark_mode


def get_colors():
    """Get the appropriate color palette based on current theme."""
    return ColorsDark if _is_dark_mode else Colors


def get_styles():
    """Get the appropriate styles based on current theme."""
    return StylesDark if _is_dark_mode else Styles


def get_stylesheet() -> str:
    return GLOBAL_STYLESHEET_DARK if _is_dark_mode else GLOBAL_STYLESHEET
