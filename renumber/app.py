"""Application entry point and setup for Renumber."""

import logging
import sys

from PySide6.QtWidgets import QApplication

from renumber.core.config import AppConfig
from renumber.core.difficulty import DifficultyRepository
from renumber.core.persistence import StatePersister, load_state
from renumber.core.storage import JsonFileStorage
from renumber.core.store import AppStore
from renumber.core.suggestions import SuggestionCycler, load_suggestions
from renumber.ui.main_window import MainWindow


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_store(config: AppConfig) -> tuple[AppStore, StatePersister]:
    """Hydrate the store from storage and wire it to a background writer."""
    storage = JsonFileStorage(config.data_dir)
    state = load_state(storage, config.storage_key)
    persister = StatePersister(storage, config.storage_key)
    return AppStore(state, persister), persister


def run() -> None:
    """Initialize the application, load resources, and start the main window."""
    config = AppConfig.from_env()
    configure_logging(config.log_level)
    app = QApplication(sys.argv)
    app.setApplicationName("Renumber")
    app.setApplicationDisplayName("Renumber")

    difficulties = DifficultyRepository()
    suggestions = SuggestionCycler(load_suggestions())
    store, persister = build_store(config)
    logging.info("Using data directory %s", config.data_dir)

    window = MainWindow(store, difficulties, suggestions, persister)
    window.show()

    sys.exit(app.exec())
