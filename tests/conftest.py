"""Shared fixtures: an unlocked state, a store, a manual clock and a session."""

from __future__ import annotations

import itertools
import random
from datetime import datetime, timezone

import pytest

from renumber.core.difficulty import DifficultyRepository
from renumber.core.mappings import SINGLE_DIGITS, add_tag, seed_state
from renumber.core.models import AppState
from renumber.core.scheduler import ManualScheduler
from renumber.core.session import PracticeSession
from renumber.core.store import AppStore

DIGIT_LABELS = ["sun", "candle", "swan", "heart", "sailboat", "hook", "cherry", "cliff", "hourglass", "balloon"]
FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def unlocked_state() -> AppState:
    """Seeded state where every single digit has one tag, id ``tag-<digit>``."""
    state = seed_state()
    for digit, label in zip(SINGLE_DIGITS, DIGIT_LABELS):
        state = add_tag(state, digit, label, f"tag-{digit}")
    return state


@pytest.fixture()
def id_factory():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture()
def store(unlocked_state: AppState, id_factory) -> AppStore:
    return AppStore(unlocked_state, id_factory=id_factory)


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture(scope="session")
def difficulties() -> DifficultyRepository:
    return DifficultyRepository()


@pytest.fixture()
def session(store: AppStore, scheduler: ManualScheduler, difficulties: DifficultyRepository) -> PracticeSession:
    return PracticeSession(
        store,
        scheduler,
        difficulties,
        rng=random.Random(1234),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW
