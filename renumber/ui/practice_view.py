"""Practice tab: difficulty picker, timed recall drill and review."""

from __future__ import annotations

from datetime import datetime, timezone
from functools import partial
from typing import Dict, List, Optional

from PySide6.QtCore import QRegularExpression, Qt
from PySide6.QtGui import QRegularExpressionValidator
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from renumber.core.history import DAY, recent_count
from renumber.core.mappings import SINGLE_DIGITS, mapped_digits
from renumber.core.models import AppState, Difficulty
from renumber.core.session import DigitSlot, Phase, PracticeSession
from renumber.core.store import AppStore
from renumber.ui.colors import AppColors
from renumber.ui.widgets import CHIP_STYLE, FIELD_STYLE, Card, button_style, clear_layout, muted_label, title_label


class PracticeView(QWidget):
    """Renders a :class:`PracticeSession` and forwards user actions to it."""

    def __init__(self, store: AppStore, session: PracticeSession, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._store = store
        self._session = session
        self._rendered_phase: Optional[Phase] = None
        self._digit_inputs: List[QLineEdit] = []
        self._edit_texts: Dict[int, str] = {}
        self._difficulty_buttons: Dict[Difficulty, QPushButton] = {}

        self._stack = QStackedWidget()
        self._locked_page = self._build_locked_page()
        self._practice_page = self._build_practice_page()
        self._stack.addWidget(self._locked_page)
        self._stack.addWidget(self._practice_page)
        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.addWidget(self._stack)

        self._unsubscribe_store = store.subscribe(self._on_state_changed)
        self._unsubscribe_session = session.subscribe(self._render)
        self._on_state_changed(store.state)

    # -- construction ------------------------------------------------------

    def _build_locked_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.addStretch(1)
        title = title_label("Practice")
        title.setAlignment(Qt.AlignCenter)
        layout.addWidget(title)
        text = muted_label("Map the 10 single digits first to unlock practice.", 16)
        text.setAlignment(Qt.AlignCenter)
        layout.addWidget(text)
        self._locked_progress = QLabel("0/10 digits mapped")
        self._locked_progress.setAlignment(Qt.AlignCenter)
        self._locked_progress.setStyleSheet(f"color: {AppColors.PRIMARY}; font-size: 14px;")
        layout.addWidget(self._locked_progress)
        layout.addStretch(1)
        return page

    def _build_practice_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)
        layout.addWidget(title_label("Practice"))
        self._recent_label = muted_label("0 tests in the last 24h")
        layout.addWidget(self._recent_label)

        row = QHBoxLayout()
        group = QButtonGroup(self)
        group.setExclusive(True)
        for difficulty in Difficulty:
            button = QPushButton(difficulty.value)
            button.setCheckable(True)
            button.setCursor(Qt.PointingHandCursor)
            button.setStyleSheet(CHIP_STYLE)
            button.setChecked(difficulty is self._session.difficulty)
            button.clicked.connect(lambda _checked=False, d=difficulty: self._session.set_difficulty(d))
            group.addButton(button)
            row.addWidget(button)
            self._difficulty_buttons[difficulty] = button
        row.addStretch(1)
        layout.addLayout(row)

        start = QPushButton("Start new test")
        start.setCursor(Qt.PointingHandCursor)
        start.setStyleSheet(button_style(AppColors.PRIMARY, radius=14))
        start.clicked.connect(self._start)
        layout.addWidget(start)

        self._card = Card()
        self._card_layout = QVBoxLayout(self._card)
        self._card_layout.setContentsMargins(16, 16, 16, 16)
        self._card_layout.setSpacing(10)
        self._card.hide()
        layout.addWidget(self._card)
        layout.addStretch(1)
        return page

    # -- actions -----------------------------------------------------------

    def _start(self) -> None:
        self._edit_texts = {}
        self._session.start()

    def _on_digit_edited(self, index: int, text: str) -> None:
        if not self._session.enter_digit(index, text):
            slots = self._session.slots
            if index < len(slots) and index < len(self._digit_inputs):
                self._digit_inputs[index].setText(slots[index].entry)
            return
        if self._session.phase is Phase.INPUT and text:
            self._focus_next_empty(index)

    def _focus_next_empty(self, after: int) -> None:
        slots = self._session.slots
        order = list(range(after + 1, len(slots))) + list(range(0, after + 1))
        for i in order:
            if not slots[i].filled:
                self._digit_inputs[i].setFocus()
                return

    def _on_edit_text(self, index: int, text: str) -> None:
        self._edit_texts[index] = text

    def _save_mapping(self, index: int) -> None:
        label = self._edit_texts.get(index, "")
        if self._session.save_mapping(index, label) is not None:
            self._edit_texts.pop(index, None)

    # -- rendering ---------------------------------------------------------

    def _on_state_changed(self, state: AppState) -> None:
        mapped = len(mapped_digits(state))
        self._locked_progress.setText(f"{mapped}/{len(SINGLE_DIGITS)} digits mapped")
        recent = recent_count(state.tests, DAY, datetime.now(timezone.utc))
        self._recent_label.setText(f"{recent} tests in the last 24h")
        unlocked = self._session.is_unlocked()
        self._stack.setCurrentWidget(self._practice_page if unlocked else self._locked_page)
        if self._session.phase is Phase.REVIEW:
            self._render()

    def _render(self) -> None:
        session = self._session
        for difficulty, button in self._difficulty_buttons.items():
            button.setChecked(difficulty is session.difficulty)

        phase = session.phase
        if phase is Phase.INPUT and self._rendered_phase is Phase.INPUT:
            return
        self._rendered_phase = phase
        clear_layout(self._card_layout)
        self._digit_inputs = []
        if phase is Phase.IDLE:
            self._card.hide()
            return
        self._card.show()
        caption = QLabel("Current test")
        caption.setStyleSheet(f"color: {AppColors.TEXT_MUTED}; font-size: 12px;")
        self._card_layout.addWidget(caption)

        if phase is Phase.EXPOSURE:
            number = QLabel(session.target)
            number.setAlignment(Qt.AlignCenter)
            number.setStyleSheet(f"color: {AppColors.TEXT_PRIMARY}; font-size: 32px; font-weight: 700;")
            self._card_layout.addWidget(number)
            skip = QPushButton("I've got it")
            skip.setStyleSheet(button_style(AppColors.PRIMARY_DARK))
            skip.clicked.connect(session.skip_to_input)
            self._card_layout.addWidget(skip, 0, Qt.AlignCenter)
        elif phase is Phase.DELAY:
            wait = muted_label("Hold that number...", 18)
            wait.setAlignment(Qt.AlignCenter)
            self._card_layout.addWidget(wait)
        elif phase is Phase.INPUT:
            self._render_input(session.slots)
        elif phase is Phase.REVIEW:
            self._render_review(session.slots)

        abandon = QPushButton("Abandon test")
        abandon.setStyleSheet(button_style(AppColors.TEXT_MUTED, radius=8))
        abandon.clicked.connect(session.cancel)
        self._card_layout.addWidget(abandon, 0, Qt.AlignRight)

    def _render_input(self, slots: List[DigitSlot]) -> None:
        row = QHBoxLayout()
        row.addStretch(1)
        validator = QRegularExpressionValidator(QRegularExpression("[0-9]?"), self)
        for index, slot in enumerate(slots):
            field = QLineEdit(slot.entry)
            field.setMaxLength(1)
            field.setFixedSize(38, 46)
            field.setAlignment(Qt.AlignCenter)
            field.setValidator(validator)
            field.setStyleSheet(FIELD_STYLE + "QLineEdit { font-size: 20px; }")
            field.textEdited.connect(partial(self._on_digit_edited, index))
            row.addWidget(field)
            self._digit_inputs.append(field)
        row.addStretch(1)
        self._card_layout.addLayout(row)
        if self._digit_inputs:
            self._digit_inputs[0].setFocus()

    def _render_review(self, slots: List[DigitSlot]) -> None:
        session = self._session
        state = self._store.state

        digits = QHBoxLayout()
        digits.addStretch(1)
        for slot in slots:
            digit = QLabel(slot.target)
            color = AppColors.CORRECT if slot.correct else AppColors.INCORRECT
            digit.setStyleSheet(f"color: {color}; font-size: 24px; font-weight: 700;")
            digits.addWidget(digit)
        digits.addStretch(1)
        self._card_layout.addLayout(digits)

        heading = QLabel("Mappings used")
        heading.setStyleSheet(f"color: {AppColors.TEXT_PRIMARY}; font-size: 16px; font-weight: 600;")
        self._card_layout.addWidget(heading)

        for index, slot in enumerate(slots):
            verdict = "correct" if slot.correct else f"wrong, you entered {slot.entry}"
            header = QLabel(f"Digit {index + 1}: {slot.target} ({verdict})")
            header.setStyleSheet("font-size: 13px; font-weight: 600;")
            self._card_layout.addWidget(header)
            mapping = state.mappings.get(slot.target)
            if slot.correct:
                chips = QHBoxLayout()
                for tag in mapping.tags if mapping else ():
                    chip = QPushButton(tag.label)
                    chip.setCheckable(True)
                    chip.setChecked(slot.selected_tag_id == tag.id)
                    chip.setStyleSheet(CHIP_STYLE)
                    chip.clicked.connect(lambda _checked=False, i=index, t=tag.id: session.select_tag(i, t))
                    chips.addWidget(chip)
                chips.addStretch(1)
                self._card_layout.addLayout(chips)
                self._card_layout.addLayout(self._label_row(index, "New tag", "Add"))
            else:
                edited = mapping.find_tag(slot.edited_tag_id) if mapping and slot.edited_tag_id else None
                if edited is not None:
                    self._card_layout.addWidget(muted_label(f"Saved: {edited.label}", 12))
                self._card_layout.addLayout(self._label_row(index, "Edit mapping", "Save"))

        chosen = QLabel(f"Chosen string: {session.chosen_string()}")
        chosen.setWordWrap(True)
        chosen.setStyleSheet(
            f"background: {AppColors.CHOSEN_BG}; border-radius: 10px; padding: 10px;"
            " font-size: 14px; font-weight: 600;"
        )
        self._card_layout.addWidget(chosen)

        finish = QPushButton("Finish test")
        finish.setStyleSheet(button_style(AppColors.CORRECT))
        finish.setVisible(session.can_finish())
        finish.clicked.connect(session.finish)
        self._card_layout.addWidget(finish)

    def _label_row(self, index: int, placeholder: str, action: str) -> QHBoxLayout:
        row = QHBoxLayout()
        field = QLineEdit(self._edit_texts.get(index, ""))
        field.setPlaceholderText(placeholder)
        field.setStyleSheet(FIELD_STYLE)
        field.textChanged.connect(partial(self._on_edit_text, index))
        field.returnPressed.connect(partial(self._save_mapping, index))
        button = QPushButton(action)
        button.setStyleSheet(button_style(AppColors.PRIMARY_DARK, radius=8))
        button.clicked.connect(lambda _checked=False, i=index: self._save_mapping(i))
        row.addWidget(field, 1)
        row.addWidget(button)
        return row

    def detach(self) -> None:
        self._unsubscribe_store()
        self._unsubscribe_session()
