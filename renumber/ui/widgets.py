"""Shared building blocks: cards, stat tiles and the rounded progress bar."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QFont, QPainter
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QLabel,
    QLayout,
    QVBoxLayout,
    QWidget,
)

from renumber.ui.colors import AppColors


class Card(QFrame):
    """White rounded card with a soft shadow."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("card")
        self.setStyleSheet(
            f"""
            QFrame#card {{
                background: {AppColors.CARD_BG};
                border: 1px solid {AppColors.CARD_BORDER};
                border-radius: 16px;
            }}
            """
        )
        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(12)
        shadow.setOffset(0, 2)
        shadow.setColor(QColor(0, 0, 0, 20))
        self.setGraphicsEffect(shadow)


class StatCard(Card):
    """Card with a muted caption above a large value."""

    def __init__(self, label: str, value: str = "", parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(4)
        caption = QLabel(label)
        caption.setStyleSheet(f"color: {AppColors.TEXT_SECONDARY}; font-size: 13px;")
        layout.addWidget(caption)
        self.value_label = QLabel(str(value))
        self.value_label.setStyleSheet(
            f"color: {AppColors.TEXT_PRIMARY}; font-size: 28px; font-weight: 700;"
        )
        layout.addWidget(self.value_label)

    def set_value(self, value: str) -> None:
        self.value_label.setText(str(value))


class PercentBar(QWidget):
    """Rounded bar filled to a 0-100 percentage, with the value drawn on the fill."""

    def __init__(self, parent: Optional[QWidget] = None, *, height: int = 14) -> None:
        super().__init__(parent)
        self._value = 0
        self._fill_color = AppColors.PRIMARY
        self.setFixedHeight(height)
        self.setMinimumWidth(100)

    def set_value(self, value: int, fill_color: Optional[str] = None) -> None:
        self._value = max(0, min(100, int(value)))
        if fill_color:
            self._fill_color = fill_color
        self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setRenderHint(QPainter.TextAntialiasing, True)

        radius = min(8, self.height() // 2)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor(AppColors.PROGRESS_TRACK))
        painter.drawRoundedRect(0, 0, self.width(), self.height(), radius, radius)

        fill_width = int(self._value / 100 * self.width())
        if fill_width <= 0:
            return
        painter.setBrush(QColor(self._fill_color))
        painter.drawRoundedRect(0, 0, fill_width, self.height(), radius, radius)

        font = painter.font()
        font.setPointSize(max(8, self.height() - 6))
        font.setWeight(QFont.Weight.DemiBold)
        painter.setFont(font)
        painter.setPen(QColor("#ffffff"))
        painter.drawText(0, 0, fill_width, self.height(), Qt.AlignCenter, f"{self._value}%")


def title_label(text: str) -> QLabel:
    label = QLabel(text)
    label.setStyleSheet(f"color: {AppColors.TEXT_PRIMARY}; font-size: 28px; font-weight: 700;")
    return label


def muted_label(text: str, size: int = 14) -> QLabel:
    label = QLabel(text)
    label.setStyleSheet(f"color: {AppColors.TEXT_SECONDARY}; font-size: {size}px;")
    label.setWordWrap(True)
    return label


def button_style(background: str, color: str = "#ffffff", radius: int = 12) -> str:
    return f"""
        QPushButton {{
            background: {background};
            color: {color};
            border: none;
            border-radius: {radius}px;
            padding: 10px 16px;
            font-weight: 700;
        }}
        QPushButton:disabled {{ background: {AppColors.CHIP_BORDER}; }}
    """


CHIP_STYLE = f"""
    QPushButton {{
        background: {AppColors.CARD_BG};
        color: #333333;
        border: 1px solid {AppColors.CHIP_BORDER};
        border-radius: 14px;
        padding: 6px 12px;
    }}
    QPushButton:checked {{
        background: {AppColors.PRIMARY_DARK};
        border-color: {AppColors.PRIMARY_DARK};
        color: #ffffff;
        font-weight: 600;
    }}
"""

FIELD_STYLE = f"""
    QLineEdit {{
        border: 1px solid {AppColors.FIELD_BORDER};
        border-radius: 8px;
        padding: 6px 10px;
        background: {AppColors.CARD_BG};
    }}
"""


def clear_layout(layout: QLayout) -> None:
    """Remove and schedule deletion of everything inside ``layout``."""
    while layout.count():
        item = layout.takeAt(0)
        widget = item.widget()
        if widget is not None:
            widget.deleteLater()
        elif item.layout() is not None:
            clear_layout(item.layout())
