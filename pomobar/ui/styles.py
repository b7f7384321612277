"""QSS stylesheet, palettes and mode colours for Pomobar.

The popup follows the system appearance (dark or light) and tints its
primary button with the accent of the current timer mode.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QApplication

from ..timer.engine import TimerMode

# ── mode accents ──────────────────────────────────────────────────────────

MODE_COLORS: dict[TimerMode, str] = {
    TimerMode.WORK:        "#FF6B6B",   # coral
    TimerMode.SHORT_BREAK: "#4ECDC4",   # teal
    TimerMode.LONG_BREAK:  "#A18CD1",   # purple
}

# ── palettes ──────────────────────────────────────────────────────────────

DARK_PALETTE: dict[str, str] = {
    "bg":       "#1C1C28",
    "panel":    "#262636",
    "hover":    "#303044",
    "text":     "#ECECF4",
    "muted":    "#8A8AA3",
    "warning":  "#F9E2AF",
    "border":   "#34344A",
}

LIGHT_PALETTE: dict[str, str] = {
    "bg":       "#F6F6F8",
    "panel":    "#FFFFFF",
    "hover":    "#ECECF1",
    "text":     "#1F1F29",
    "muted":    "#6E6E80",
    "warning":  "#9A6B00",
    "border":   "#DCDCE4",
}


def system_palette() -> dict[str, str]:
    """Light palette when the OS is in light mode, dark otherwise."""
    app = QApplication.instance()
    if app is not None:
        hints = app.styleHints()
        if hints is not None and hints.colorScheme() == Qt.ColorScheme.Light:
            return dict(LIGHT_PALETTE)
    return dict(DARK_PALETTE)


def build_stylesheet(
    palette: dict[str, str] | None = None,
    mode: TimerMode = TimerMode.WORK,
) -> str:
    p = palette or DARK_PALETTE
    accent = MODE_COLORS[mode]
    return f"""
    QWidget {{
        background-color: {p['bg']}; color: {p['text']};
        font-family: "Helvetica Neue", Arial; font-size: 14px;
    }}
    QFrame#card {{
        background-color: {p['panel']};
        border: 1px solid {p['border']}; border-radius: 12px;
    }}

    QPushButton {{
        background-color: {p['panel']}; color: {p['text']};
        border: 1px solid {p['border']}; border-radius: 10px;
        padding: 7px 16px; font-weight: 600;
    }}
    QPushButton:hover {{ background-color: {p['hover']}; border-color: {accent}; }}
    QPushButton#primaryButton {{
        background-color: {accent}; color: #FFFFFF; border: none;
        border-radius: 12px; padding: 11px 34px; font-size: 16px; font-weight: 700;
    }}
    QPushButton#secondaryButton, QPushButton#modeButton {{
        background-color: transparent; color: {p['muted']};
        border-radius: 8px; padding: 5px 12px; font-size: 12px;
    }}
    QPushButton#modeButton:checked {{ color: {p['text']}; border-color: {accent}; }}

    QLabel#timeLabel {{ font-size: 56px; font-weight: 700; }}
    QLabel#modeLabel {{ color: {p['muted']}; font-size: 13px; letter-spacing: 2px; }}
    QLabel#mutedLabel {{ color: {p['muted']}; font-size: 12px; }}
    QLabel#warningLabel {{ color: {p['warning']}; font-size: 12px; }}

    QTabWidget::pane {{ border: none; }}
    QTabBar::tab {{
        background-color: transparent; color: {p['muted']};
        border: none; border-bottom: 2px solid transparent;
        padding: 8px 20px; font-weight: 600;
    }}
    QTabBar::tab:selected {{ color: {accent}; border-bottom-color: {accent}; }}
    """
