from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

from renumber.core.difficulty import DifficultyRepository, DifficultySettings
from renumber.core.mappings import is_practice_unlocked
from renumber.core.models import Difficulty, TestResult, UsedTag
from renumber.core.scheduler import Scheduler, TimerHandle
from renumber.core.stats import percentage
from renumber.core.store import AppStore, new_id

logger = logging.getLogger(__name__)

_DIGIT_INPUT = re.compile(r"[0-9]?")

SessionListener = Callable[[], None]


class Phase(str, Enum):
    IDLE = "idle"
    EXPOSURE = "exposure"
    DELAY = "delay"
    INPUT = "input"
    REVIEW = "review"


@dataclass(frozen=True)
class DigitSlot:
    """One position of the target number and what the user did with it."""

    target: str
    entry: str = ""
    selected_tag_id: Optional[str] = None
    edited_tag_id: Optional[str] = None

    @property
    def filled(self) -> bool:
        return len(self.entry) == 1

    @property
    def correct(self) -> bool:
        return self.entry == self.target

    @property
    def resolved(self) -> bool:
        """Correct slots need a chosen tag; wrong ones need a saved correction."""
        if self.correct:
            return self.selected_tag_id is not None
        return self.edited_tag_id is not None


def random_number(digits: int, rng: random.Random) -> str:
    """Uniform number in ``[0, 10**digits)``, zero-padded to ``digits``."""
    return str(rng.randrange(10**digits)).zfill(digits)


class PracticeSession:
    """Timed recall drill: Idle → Exposure → Delay → Input → Review → Idle.

    Exposure and Delay end on scheduler timers; Input ends by itself once
    every slot holds a digit; Review ends with :meth:`finish`, which
    records the result and the used tags in the store. Invalid requests
    (wrong phase, bad index, non-digit input, blank label) are ignored and
    reported through the return value only.
    """

    def __init__(
        self,
        store: AppStore,
        scheduler: Scheduler,
        difficulties: DifficultyRepository,
        difficulty: Difficulty = Difficulty.EASY,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._difficulties = difficulties
        self._difficulty = difficulty
        self._rng = rng or random.Random()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._phase = Phase.IDLE
        self._active: Optional[DifficultySettings] = None
        self._target = ""
        self._slots: List[DigitSlot] = []
        self._timers: List[TimerHandle] = []
        self._listeners: List[SessionListener] = []

    # -- read side ---------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def difficulty(self) -> Difficulty:
        """Difficulty the next session will use."""
        return self._difficulty

    @property
    def active_settings(self) -> Optional[DifficultySettings]:
        """Settings captured when the current session started."""
        return self._active

    @property
    def target(self) -> str:
        return self._target

    @property
    def slots(self) -> List[DigitSlot]:
        return list(self._slots)

    @property
    def pending_timers(self) -> int:
        return sum(1 for timer in self._timers if timer.active)

    def is_unlocked(self) -> bool:
        return is_practice_unlocked(self._store.state)

    def correct_count(self) -> int:
        return sum(1 for slot in self._slots if slot.correct)

    def chosen_string(self) -> str:
        """Labels of the selected tags of correct slots, in slot order."""
        state = self._store.state
        labels: List[str] = []
        for slot in self._slots:
            if not slot.correct or slot.selected_tag_id is None:
                continue
            mapping = state.mappings.get(slot.target)
            tag = mapping.find_tag(slot.selected_tag_id) if mapping else None
            if tag is not None:
                labels.append(tag.label)
        return " ".join(labels)

    def can_finish(self) -> bool:
        return (
            self._phase is Phase.REVIEW
            and bool(self._slots)
            and all(slot.resolved for slot in self._slots)
        )

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- transitions -------------------------------------------------------

    def set_difficulty(self, difficulty: Difficulty) -> None:
        if difficulty is not self._difficulty:
            self._difficulty = difficulty
            self._notify()

    def start(self, target: Optional[str] = None) -> bool:
        """Begin a new session, drawing a number unless ``target`` is given.

        Returns False, and changes nothing, while practice is locked or
        when ``target`` is not a string of digits.
        """
        if not self.is_unlocked():
            logger.debug("Practice is locked; start ignored")
            return False
        if target is not None and not (target.isdigit() and target.isascii()):
            return False

        self._cancel_timers()
        settings = self._difficulties.get(self._difficulty)
        if target is None:
            low, high = settings.digit_range
            target = random_number(self._rng.randint(low, high), self._rng)

        self._active = settings
        self._target = target
        self._slots = [DigitSlot(target=digit) for digit in target]
        self._set_phase(Phase.EXPOSURE)
        self._schedule(settings.exposure_seconds, self._end_exposure)
        return True

    def skip_to_input(self) -> bool:
        """Cut Exposure/Delay short and accept input right away."""
        if self._phase not in (Phase.EXPOSURE, Phase.DELAY):
            return False
        self._cancel_timers()
        self._set_phase(Phase.INPUT)
        return True

    def enter_digit(self, index: int, value: str) -> bool:
        """Set (or clear, with "") the entry of one slot during Input."""
        if self._phase is not Phase.INPUT or not 0 <= index < len(self._slots):
            return False
        if not _DIGIT_INPUT.fullmatch(value):
            return False
        self._slots[index] = replace(self._slots[index], entry=value)
        if all(slot.filled for slot in self._slots):
            self._set_phase(Phase.REVIEW)
        else:
            self._notify()
        return True

    def select_tag(self, index: int, tag_id: str) -> bool:
        """Choose an existing tag of the digit's mapping for a correct slot."""
        slot = self._review_slot(index)
        if slot is None or not slot.correct:
            return False
        mapping = self._store.state.mappings.get(slot.target)
        if mapping is None or mapping.find_tag(tag_id) is None:
            return False
        self._slots[index] = replace(slot, selected_tag_id=tag_id)
        self._notify()
        return True

    def save_mapping(self, index: int, label: str) -> Optional[str]:
        """Create a tag for the slot's digit from ``label``.

        On a correct slot the new tag becomes the selection. On a wrong
        slot it is kept as a correction: it enriches the mapping and
        resolves the slot, but is not counted as a use.
        """
        slot = self._review_slot(index)
        if slot is None or not label.strip():
            return None
        tag_id = self._store.add_tag(slot.target, label)
        if tag_id is None:
            return None
        if slot.correct:
            self._slots[index] = replace(slot, selected_tag_id=tag_id)
        else:
            self._slots[index] = replace(slot, edited_tag_id=tag_id)
        self._notify()
        return tag_id

    def finish(self) -> Optional[TestResult]:
        """Score the session, hand it to the store and return to Idle."""
        if not self.can_finish() or self._active is None:
            return None
        result = TestResult(
            id=new_id(),
            date=self._clock(),
            difficulty=self._active.difficulty,
            success_rate=percentage(self.correct_count(), len(self._slots)),
        )
        used_tags = [
            UsedTag(number=slot.target, tag_id=slot.selected_tag_id, correct=slot.correct)
            for slot in self._slots
            if slot.selected_tag_id is not None
        ]
        self._store.record_test(result, used_tags)
        self._reset()
        return result

    def cancel(self) -> None:
        """Abandon the current session without recording anything."""
        if self._phase is Phase.IDLE and not self._timers:
            return
        self._reset()

    def dispose(self) -> None:
        """Stop every timer and drop listeners; the session must not be used afterwards."""
        self._cancel_timers()
        self._listeners.clear()

    # -- internals ---------------------------------------------------------

    def _review_slot(self, index: int) -> Optional[DigitSlot]:
        if self._phase is not Phase.REVIEW or not 0 <= index < len(self._slots):
            return None
        return self._slots[index]

    def _end_exposure(self) -> None:
        if self._phase is not Phase.EXPOSURE or self._active is None:
            return
        self._set_phase(Phase.DELAY)
        self._schedule(self._active.delay_seconds, self._end_delay)

    def _end_delay(self) -> None:
        if self._phase is Phase.DELAY:
            self._set_phase(Phase.INPUT)

    def _schedule(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        self._timers = [timer for timer in self._timers if timer.active]
        self._timers.append(self._scheduler.call_later(delay_seconds, callback))

    def _cancel_timers(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    def _reset(self) -> None:
        self._cancel_timers()
        self._active = None
        self._target = ""
        self._slots = []
        self._set_phase(Phase.IDLE)

    def _set_phase(self, phase: Phase) -> None:
        logger.debug("Session phase %s -> %s", self._phase.value, phase.value)
        self._phase = phase
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
