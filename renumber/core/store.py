from __future__ import annotations

import logging
import threading
import uuid
from typing import Callable, Iterable, List, Optional

from renumber.core import mappings
from renumber.core.models import AppState, TestResult, UsedTag
from renumber.core.persistence import StatePersister

logger = logging.getLogger(__name__)

StateListener = Callable[[AppState], None]
Transition = Callable[[AppState], AppState]


def new_id() -> str:
    return uuid.uuid4().hex


class AppStore:
    """Single owner of the current :class:`AppState` snapshot.

    Every change goes through :meth:`dispatch`, which applies a pure
    transition to the latest snapshot under a lock, adopts the result,
    queues it for persistence and notifies subscribers. Readers only ever
    see whole snapshots.
    """

    def __init__(
        self,
        state: AppState,
        persister: Optional[StatePersister] = None,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self._state = state
        self._persister = persister
        self._id_factory = id_factory
        self._listeners: List[StateListener] = []
        self._lock = threading.RLock()

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, transition: Transition) -> AppState:
        with self._lock:
            previous = self._state
            updated = transition(previous)
            if updated is previous:
                return previous
            self._state = updated
            if self._persister is not None:
                self._persister.save(updated)
            for listener in list(self._listeners):
                listener(updated)
            return updated

    def add_tag(self, number: str, label: str) -> Optional[str]:
        """Create a tag on ``number`` and return its id, or ``None`` if nothing was added."""
        label = label.strip()
        if not label:
            return None
        with self._lock:
            mapping = self._state.mappings.get(number)
            if mapping is None:
                return None
            tag_id = self._id_factory()
            while mapping.find_tag(tag_id) is not None:
                tag_id = self._id_factory()
            self.dispatch(lambda state: mappings.add_tag(state, number, label, tag_id))
        return tag_id

    def update_tag(self, number: str, tag_id: str, label: str) -> None:
        label = label.strip()
        if not label:
            return
        self.dispatch(lambda state: mappings.update_tag(state, number, tag_id, label))

    def record_test(self, result: TestResult, used_tags: Iterable[UsedTag]) -> None:
        used = list(used_tags)
        self.dispatch(lambda state: mappings.record_test(state, result, used))
        logger.info(
            "Recorded %s test %s at %d%% with %d tagged digits",
            result.difficulty.value,
            result.id,
            result.success_rate,
            len(used),
        )
