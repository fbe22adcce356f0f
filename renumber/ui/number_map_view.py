"""Number Map tab: browse numbers by length, add and rename tags."""

from __future__ import annotations

from typing import Dict, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from renumber.core.mappings import MAX_NUMBER_LENGTH, mappings_of_length, numbers_of_length
from renumber.core.models import AppState
from renumber.core.stats import mapped_percentage
from renumber.core.store import AppStore
from renumber.core.suggestions import SuggestionCycler
from renumber.ui.colors import AppColors, success_color
from renumber.ui.models import NumberRow, build_number_row
from renumber.ui.widgets import CHIP_STYLE, FIELD_STYLE, Card, PercentBar, button_style, clear_layout, muted_label, title_label


def _row_text(row: NumberRow) -> str:
    if not row.mapped:
        return f"{row.number}    no tags yet"
    labels = ", ".join(tag.label for tag in row.tags)
    return f"{row.number}    {row.success}%    {labels}"


class NumberMapView(QWidget):
    def __init__(
        self,
        store: AppStore,
        suggestions: SuggestionCycler,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._suggestions = suggestions
        self._length = 1
        self._selected: Optional[str] = None
        self._items: Dict[str, QListWidgetItem] = {}
        self._build_ui()
        self._load_length(1)
        self._unsubscribe = store.subscribe(self._on_state_changed)

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)
        layout.addWidget(title_label("Number Map"))
        layout.addWidget(muted_label("Build your personal image system."))

        lengths = QHBoxLayout()
        group = QButtonGroup(self)
        group.setExclusive(True)
        for length in range(1, MAX_NUMBER_LENGTH + 1):
            button = QPushButton(f"{length} digit{'s' if length > 1 else ''}")
            button.setCheckable(True)
            button.setChecked(length == 1)
            button.setStyleSheet(CHIP_STYLE)
            button.clicked.connect(lambda _checked=False, n=length: self._load_length(n))
            group.addButton(button)
            lengths.addWidget(button)
        lengths.addStretch(1)
        layout.addLayout(lengths)

        progress_row = QHBoxLayout()
        self._mapped_label = muted_label("0% mapped", 13)
        self._mapped_bar = PercentBar()
        progress_row.addWidget(self._mapped_label)
        progress_row.addWidget(self._mapped_bar, 1)
        layout.addLayout(progress_row)

        body = QHBoxLayout()
        self._list = QListWidget()
        self._list.setMinimumWidth(260)
        self._list.currentItemChanged.connect(self._on_current_changed)
        body.addWidget(self._list, 1)

        self._detail = Card()
        detail_layout = QVBoxLayout(self._detail)
        detail_layout.setContentsMargins(16, 16, 16, 16)
        detail_layout.setSpacing(8)

        header = QHBoxLayout()
        self._number_label = QLabel("")
        self._number_label.setStyleSheet(f"color: {AppColors.TEXT_PRIMARY}; font-size: 22px; font-weight: 700;")
        self._success_label = QLabel("")
        header.addWidget(self._number_label)
        header.addStretch(1)
        header.addWidget(self._success_label)
        detail_layout.addLayout(header)

        self._tags_layout = QVBoxLayout()
        detail_layout.addLayout(self._tags_layout)

        add_row = QHBoxLayout()
        self._tag_input = QLineEdit()
        self._tag_input.setPlaceholderText("Add a tag")
        self._tag_input.setStyleSheet(FIELD_STYLE)
        self._tag_input.returnPressed.connect(self._add_tag)
        add_button = QPushButton("Add")
        add_button.setStyleSheet(button_style(AppColors.PRIMARY, radius=8))
        add_button.clicked.connect(self._add_tag)
        add_row.addWidget(self._tag_input, 1)
        add_row.addWidget(add_button)
        detail_layout.addLayout(add_row)

        suggestion_row = QHBoxLayout()
        suggestion_row.addWidget(muted_label("Suggestion:", 12))
        self._suggestion_label = QLabel(self._suggestions.current())
        self._suggestion_label.setStyleSheet("font-size: 12px; font-weight: 600;")
        another = QPushButton("Another")
        another.setFlat(True)
        another.setStyleSheet(f"color: {AppColors.PRIMARY}; font-size: 12px;")
        another.clicked.connect(self._next_suggestion)
        suggestion_row.addWidget(self._suggestion_label)
        suggestion_row.addWidget(another)
        suggestion_row.addStretch(1)
        detail_layout.addLayout(suggestion_row)
        detail_layout.addStretch(1)
        body.addWidget(self._detail, 1)
        layout.addLayout(body, 1)

    # -- list --------------------------------------------------------------

    def _load_length(self, length: int) -> None:
        self._length = length
        self._list.blockSignals(True)
        self._list.clear()
        self._items = {}
        state = self._store.state
        for number in numbers_of_length(length):
            mapping = state.mappings.get(number)
            if mapping is None:
                continue
            item = QListWidgetItem(_row_text(build_number_row(mapping)))
            item.setData(Qt.UserRole, number)
            self._list.addItem(item)
            self._items[number] = item
        self._list.blockSignals(False)
        self._update_mapped(state)
        if self._list.count():
            self._list.setCurrentRow(0)

    def _update_mapped(self, state: AppState) -> None:
        percent = mapped_percentage(mappings_of_length(state, self._length))
        self._mapped_label.setText(f"{percent}% mapped")
        self._mapped_bar.set_value(percent)

    def _on_current_changed(self, current: Optional[QListWidgetItem], _previous) -> None:
        self._selected = current.data(Qt.UserRole) if current is not None else None
        self._render_detail()

    def _on_state_changed(self, state: AppState) -> None:
        for number, item in self._items.items():
            mapping = state.mappings.get(number)
            if mapping is not None:
                item.setText(_row_text(build_number_row(mapping)))
        self._update_mapped(state)
        self._render_detail()

    # -- detail ------------------------------------------------------------

    def _render_detail(self) -> None:
        clear_layout(self._tags_layout)
        mapping = self._store.state.mappings.get(self._selected) if self._selected else None
        if mapping is None:
            self._number_label.setText("")
            self._success_label.setText("")
            return
        row = build_number_row(mapping)
        self._number_label.setText(row.number)
        self._success_label.setText(f"{row.success}% success")
        self._success_label.setStyleSheet(f"color: {success_color(row.success)}; font-weight: 600;")
        if not row.tags:
            self._tags_layout.addWidget(muted_label("No tags yet", 12))
        for tag in row.tags:
            line = QHBoxLayout()
            label = QLabel(tag.label)
            label.setStyleSheet("font-size: 14px; font-weight: 600;")
            line.addWidget(label, 1)
            line.addWidget(muted_label(f"{tag.success_rate}% success", 12))
            line.addWidget(muted_label(f"{tag.usage_rate}% usage", 12))
            rename = QPushButton("Rename")
            rename.setFlat(True)
            rename.setStyleSheet(f"color: {AppColors.PRIMARY}; font-size: 12px;")
            rename.clicked.connect(
                lambda _checked=False, n=row.number, t=tag.tag_id, old=tag.label: self._rename_tag(n, t, old)
            )
            line.addWidget(rename)
            self._tags_layout.addLayout(line)

    def _add_tag(self) -> None:
        if self._selected is None:
            return
        value = self._tag_input.text().strip() or self._suggestions.current()
        if self._store.add_tag(self._selected, value) is None:
            return
        self._tag_input.clear()
        self._next_suggestion()

    def _next_suggestion(self) -> None:
        self._suggestion_label.setText(self._suggestions.advance())

    def _rename_tag(self, number: str, tag_id: str, old_label: str) -> None:
        label, ok = QInputDialog.getText(self, "Rename tag", f"New label for {number}:", text=old_label)
        if ok:
            self._store.update_tag(number, tag_id, label)

    def detach(self) -> None:
        self._unsubscribe()
