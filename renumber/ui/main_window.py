from __future__ import annotations

from typing import Optional

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QMainWindow, QTabWidget

from renumber.core.difficulty import DifficultyRepository
from renumber.core.persistence import StatePersister
from renumber.core.session import PracticeSession
from renumber.core.store import AppStore
from renumber.core.suggestions import SuggestionCycler
from renumber.ui.colors import AppColors
from renumber.ui.number_map_view import NumberMapView
from renumber.ui.practice_view import PracticeView
from renumber.ui.profile_view import ProfileView
from renumber.ui.scheduler import QtScheduler


class MainWindow(QMainWindow):
    """Tabbed window: Profile, Practice and Number Map.

    Owns the practice session; views only hold references to the store
    and the session they render.
    """

    def __init__(
        self,
        store: AppStore,
        difficulties: DifficultyRepository,
        suggestions: SuggestionCycler,
        persister: Optional[StatePersister] = None,
    ) -> None:
        super().__init__()
        self._store = store
        self._persister = persister
        self._session = PracticeSession(store, QtScheduler(self), difficulties)

        self.setWindowTitle("Renumber")
        self.setMinimumSize(900, 700)
        self.setStyleSheet(
            f"""
            QMainWindow, QTabWidget::pane {{ background: {AppColors.BG}; border: none; }}
            QTabBar::tab {{ padding: 8px 18px; }}
            QTabBar::tab:selected {{ color: {AppColors.PRIMARY}; font-weight: 600; }}
            """
        )

        self._profile_view = ProfileView(store)
        self._practice_view = PracticeView(store, self._session)
        self._number_map_view = NumberMapView(store, suggestions)

        tabs = QTabWidget()
        tabs.addTab(self._profile_view, "Profile")
        tabs.addTab(self._practice_view, "Practice")
        tabs.addTab(self._number_map_view, "Number Map")
        self.setCentralWidget(tabs)

    def closeEvent(self, event: QCloseEvent) -> None:
        """Stop pending session timers and drain queued writes before closing."""
        self._session.dispose()
        self._profile_view.detach()
        self._practice_view.detach()
        self._number_map_view.detach()
        if self._persister is not None:
            self._persister.close()
        super().closeEvent(event)
