"""Profile tab: totals and average success per difficulty."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional

from PySide6.QtWidgets import QHBoxLayout, QLabel, QVBoxLayout, QWidget

from renumber.core.history import DAY, recent_count
from renumber.core.models import AppState
from renumber.core.store import AppStore
from renumber.ui.colors import AppColors, success_color
from renumber.ui.models import build_difficulty_rows
from renumber.ui.widgets import Card, StatCard, muted_label, title_label


class ProfileView(QWidget):
    def __init__(self, store: AppStore, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._store = store
        self._average_labels: Dict[str, QLabel] = {}
        self._count_labels: Dict[str, QLabel] = {}
        self._build_ui()
        self.refresh(store.state)
        self._unsubscribe = store.subscribe(self.refresh)

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)
        layout.addWidget(title_label("Profile"))

        stats_row = QHBoxLayout()
        self._total_card = StatCard("Total tests completed", "0")
        self._recent_card = StatCard("Tests in the last 24h", "0")
        stats_row.addWidget(self._total_card)
        stats_row.addWidget(self._recent_card)
        layout.addLayout(stats_row)

        section = QLabel("Success by difficulty")
        section.setStyleSheet(f"color: {AppColors.TEXT_PRIMARY}; font-size: 18px; font-weight: 600;")
        layout.addWidget(section)

        card = Card()
        rows = QVBoxLayout(card)
        rows.setContentsMargins(16, 12, 16, 12)
        for row in build_difficulty_rows(self._store.state):
            line = QHBoxLayout()
            name = QLabel(row.name)
            name.setStyleSheet(f"color: {AppColors.TEXT_PRIMARY}; font-size: 15px;")
            count = muted_label("", 13)
            average = QLabel("")
            line.addWidget(name)
            line.addStretch(1)
            line.addWidget(count)
            line.addSpacing(16)
            line.addWidget(average)
            rows.addLayout(line)
            self._count_labels[row.name] = count
            self._average_labels[row.name] = average
        layout.addWidget(card)
        layout.addStretch(1)

    def refresh(self, state: AppState) -> None:
        self._total_card.set_value(str(len(state.tests)))
        recent = recent_count(state.tests, DAY, datetime.now(timezone.utc))
        self._recent_card.set_value(str(recent))
        for row in build_difficulty_rows(state):
            self._count_labels[row.name].setText(f"{row.count} tests")
            label = self._average_labels[row.name]
            label.setText(f"{row.average}%")
            color = success_color(row.average) if row.count else AppColors.TEXT_MUTED
            label.setStyleSheet(f"color: {color}; font-size: 15px; font-weight: 600;")

    def detach(self) -> None:
        self._unsubscribe()
