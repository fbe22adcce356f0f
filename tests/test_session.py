"""Tests for renumber.core.session – the timed practice state machine."""

from __future__ import annotations

import random

import pytest

from renumber.core.mappings import seed_state
from renumber.core.models import Difficulty
from renumber.core.scheduler import ManualScheduler
from renumber.core.session import DigitSlot, Phase, PracticeSession, random_number
from renumber.core.store import AppStore



def _to_review(session: PracticeSession, scheduler: ManualScheduler, target: str, typed: str) -> None:
    assert session.start(target)
    settings = session.active_settings
    scheduler.advance(settings.exposure_seconds + settings.delay_seconds)
    assert session.phase is Phase.INPUT
    for index, digit in enumerate(typed):
        assert session.enter_digit(index, digit)


# ---------------------------------------------------------------------------
# DigitSlot
# ---------------------------------------------------------------------------

class TestDigitSlot:
    def test_empty_slot(self):
        slot = DigitSlot(target="4")
        assert not slot.filled
        assert not slot.correct
        assert not slot.resolved

    def test_correct_needs_selection(self):
        slot = DigitSlot(target="4", entry="4")
        assert slot.correct
        assert not slot.resolved
        assert DigitSlot(target="4", entry="4", selected_tag_id="t").resolved

    def test_wrong_needs_edit(self):
        slot = DigitSlot(target="4", entry="5", selected_tag_id="t")
        assert not slot.correct
        assert not slot.resolved
        assert DigitSlot(target="4", entry="5", edited_tag_id="e").resolved


# ---------------------------------------------------------------------------
# Number generation
# ---------------------------------------------------------------------------

class TestRandomNumber:
    def test_width(self):
        rng = random.Random(0)
        for digits in (1, 3, 9, 12):
            value = random_number(digits, rng)
            assert len(value) == digits
            assert value.isdigit()

    def test_leading_zeros_kept(self):
        class ZeroRng:
            def randrange(self, stop: int) -> int:
                return 42

        assert random_number(5, ZeroRng()) == "00042"  # type: ignore[arg-type]

    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_start_draws_length_in_range(self, session: PracticeSession, difficulties, difficulty: Difficulty):
        session.set_difficulty(difficulty)
        low, high = difficulties.get(difficulty).digit_range
        lengths = set()
        for _ in range(60):
            assert session.start()
            assert session.target.isdigit()
            lengths.add(len(session.target))
            assert len(session.slots) == len(session.target)
        assert lengths <= set(range(low, high + 1))
        assert min(lengths) == low
        assert max(lengths) == high


# ---------------------------------------------------------------------------
# Start gate
# ---------------------------------------------------------------------------

class TestStart:
    def test_locked_practice_cannot_start(self, scheduler, difficulties):
        session = PracticeSession(AppStore(seed_state()), scheduler, difficulties)
        assert not session.is_unlocked()
        assert not session.start()
        assert session.phase is Phase.IDLE
        assert scheduler.pending == 0

    def test_start_enters_exposure(self, session: PracticeSession, scheduler: ManualScheduler):
        assert session.start("042")
        assert session.phase is Phase.EXPOSURE
        assert session.target == "042"
        assert [slot.entry for slot in session.slots] == ["", "", ""]
        assert session.pending_timers == 1

    def test_rejects_non_digit_target(self, session: PracticeSession):
        assert not session.start("04a")
        assert not session.start("")
        assert session.phase is Phase.IDLE

    def test_restart_cancels_old_timers(self, session: PracticeSession, scheduler: ManualScheduler):
        session.start("111")
        scheduler.advance(3)
        session.start("222")
        assert scheduler.pending == 1
        scheduler.advance(3.5)
        # only the second session's exposure timer is counting: 4s from restart
        assert session.phase is Phase.EXPOSURE
        scheduler.advance(0.5)
        assert session.phase is Phase.DELAY

    def test_restart_clears_selections(self, session: PracticeSession, scheduler: ManualScheduler):
        _to_review(session, scheduler, "042", "042")
        session.select_tag(0, "tag-0")
        session.start("042")
        assert all(slot.selected_tag_id is None for slot in session.slots)


# ---------------------------------------------------------------------------
# Timed phases
# ---------------------------------------------------------------------------

class TestTimedPhases:
    @pytest.mark.parametrize(
        "difficulty, exposure, delay",
        [
            (Difficulty.EASY, 4, 2),
            (Difficulty.MODERATE, 3, 2),
            (Difficulty.HARD, 2, 1),
            (Difficulty.EXPERT, 1, 1),
        ],
    )
    def test_exposure_then_delay_then_input(
        self, session: PracticeSession, scheduler: ManualScheduler, difficulty, exposure, delay
    ):
        session.set_difficulty(difficulty)
        session.start("1234")
        scheduler.advance(exposure - 0.5)
        assert session.phase is Phase.EXPOSURE
        scheduler.advance(0.5)
        assert session.phase is Phase.DELAY
        scheduler.advance(delay - 0.5)
        assert session.phase is Phase.DELAY
        scheduler.advance(0.5)
        assert session.phase is Phase.INPUT
        assert session.pending_timers == 0

    def test_no_input_before_input_phase(self, session: PracticeSession, scheduler: ManualScheduler):
        session.start("042")
        assert not session.enter_digit(0, "0")
        scheduler.advance(4)
        assert not session.enter_digit(0, "0")
        assert session.slots[0].entry == ""

    def test_skip_to_input(self, session: PracticeSession, scheduler: ManualScheduler):
        session.start("042")
        assert session.skip_to_input()
        assert session.phase is Phase.INPUT
        assert scheduler.pending == 0
        scheduler.advance(10)
        assert session.phase is Phase.INPUT

    def test_skip_from_delay(self, session: PracticeSession, scheduler: ManualScheduler):
        session.start("042")
        scheduler.advance(4)
        assert session.skip_to_input()
        assert session.phase is Phase.INPUT

    def test_skip_outside_timed_phases(self, session: PracticeSession):
        assert not session.skip_to_input()

    def test_dispose_cancels_timers(self, session: PracticeSession, scheduler: ManualScheduler):
        session.start("042")
        session.dispose()
        assert scheduler.pending == 0
        scheduler.advance(10)
        assert session.phase is Phase.EXPOSURE

    def test_dispose_during_delay(self, session: PracticeSession, scheduler: ManualScheduler):
        session.start("042")
        scheduler.advance(4)
        session.dispose()
        scheduler.advance(10)
        assert session.phase is Phase.DELAY


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

class TestInput:
    @pytest.fixture()
    def typing(self, session: PracticeSession, scheduler: ManualScheduler) -> PracticeSession:
        session.start("042")
        scheduler.advance(6)
        return session

    @pytest.mark.parametrize("value", ["a", "12", " ", "-", "٣", "+1"])
    def test_rejects_invalid_keystrokes(self, typing: PracticeSession, value: str):
        assert not typing.enter_digit(0, value)
        assert typing.slots[0].entry == ""

    def test_rejects_bad_index(self, typing: PracticeSession):
        assert not typing.enter_digit(3, "1")
        assert not typing.enter_digit(-1, "1")

    def test_clear_slot(self, typing: PracticeSession):
        typing.enter_digit(0, "7")
        assert typing.enter_digit(0, "")
        assert typing.slots[0].entry == ""

    def test_auto_review_when_all_filled(self, typing: PracticeSession):
        typing.enter_digit(2, "2")
        typing.enter_digit(0, "0")
        assert typing.phase is Phase.INPUT
        typing.enter_digit(1, "4")
        assert typing.phase is Phase.REVIEW

    def test_no_input_after_review(self, typing: PracticeSession):
        for i, d in enumerate("042"):
            typing.enter_digit(i, d)
        assert not typing.enter_digit(0, "9")


# ---------------------------------------------------------------------------
# Review and finish
# ---------------------------------------------------------------------------

class TestAllCorrect:
    def test_per_digit_correctness(self, session, scheduler):
        _to_review(session, scheduler, "042", "042")
        assert [slot.correct for slot in session.slots] == [True, True, True]
        assert session.correct_count() == 3

    def test_finish_requires_every_selection(self, session, scheduler):
        _to_review(session, scheduler, "042", "042")
        assert not session.can_finish()
        session.select_tag(0, "tag-0")
        session.select_tag(1, "tag-4")
        assert not session.can_finish()
        assert session.finish() is None
        session.select_tag(2, "tag-2")
        assert session.can_finish()

    def test_finish_records_result_and_usage(self, session, scheduler, store, fixed_now):
        _to_review(session, scheduler, "042", "042")
        for index, digit in enumerate("042"):
            assert session.select_tag(index, f"tag-{digit}")
        result = session.finish()
        assert result is not None
        assert result.success_rate == 100
        assert result.difficulty is Difficulty.EASY
        assert result.date == fixed_now
        assert store.state.tests[0] == result
        for digit in "042":
            tag = store.state.mappings[digit].tags[0]
            assert (tag.usage_count, tag.success_count) == (1, 1)
        untouched = store.state.mappings["1"].tags[0]
        assert untouched.usage_count == 0
        assert session.phase is Phase.IDLE
        assert session.slots == []

    def test_repeated_digit_counts_each_slot(self, session, scheduler, store):
        _to_review(session, scheduler, "777", "777")
        for index in range(3):
            session.select_tag(index, "tag-7")
        session.finish()
        tag = store.state.mappings["7"].tags[0]
        assert (tag.usage_count, tag.success_count) == (3, 3)

    def test_select_unknown_tag(self, session, scheduler):
        _to_review(session, scheduler, "042", "042")
        assert not session.select_tag(0, "tag-4")
        assert not session.select_tag(0, "missing")
        assert session.slots[0].selected_tag_id is None

    def test_select_outside_review(self, session):
        session.start("042")
        assert not session.select_tag(0, "tag-0")

    def test_create_tag_inline_selects_it(self, session, scheduler, store):
        _to_review(session, scheduler, "042", "042")
        tag_id = session.save_mapping(1, "sailboat")
        assert tag_id is not None
        assert session.slots[1].selected_tag_id == tag_id
        assert store.state.mappings["4"].tags[-1].label == "sailboat"

    def test_chosen_string(self, session, scheduler):
        _to_review(session, scheduler, "042", "042")
        assert session.chosen_string() == ""
        session.select_tag(2, "tag-2")
        session.select_tag(0, "tag-0")
        assert session.chosen_string() == "sun swan"
        session.select_tag(1, "tag-4")
        assert session.chosen_string() == "sun sailboat swan"

    def test_difficulty_captured_at_start(self, session, scheduler):
        _to_review(session, scheduler, "042", "042")
        session.set_difficulty(Difficulty.EXPERT)
        for index, digit in enumerate("042"):
            session.select_tag(index, f"tag-{digit}")
        assert session.finish().difficulty is Difficulty.EASY
        assert session.difficulty is Difficulty.EXPERT


class TestWithWrongDigit:
    def test_wrong_slot_marked(self, session, scheduler):
        _to_review(session, scheduler, "042", "043")
        assert [slot.correct for slot in session.slots] == [True, True, False]

    def test_finish_gate_stays_closed(self, session, scheduler):
        _to_review(session, scheduler, "042", "043")
        session.select_tag(0, "tag-0")
        session.select_tag(1, "tag-4")
        assert not session.can_finish()
        assert not session.select_tag(2, "tag-2")
        assert not session.can_finish()
        assert session.finish() is None
        assert session.phase is Phase.REVIEW

    def test_wrong_slot_excluded_from_chosen_string(self, session, scheduler):
        _to_review(session, scheduler, "042", "043")
        session.select_tag(0, "tag-0")
        session.select_tag(1, "tag-4")
        assert session.chosen_string() == "sun sailboat"

    def test_blank_edit_ignored(self, session, scheduler, store):
        _to_review(session, scheduler, "042", "043")
        assert session.save_mapping(2, "   ") is None
        assert len(store.state.mappings["2"].tags) == 1

    def test_edit_adds_tag_and_resolves_slot(self, session, scheduler, store):
        _to_review(session, scheduler, "042", "043")
        session.select_tag(0, "tag-0")
        session.select_tag(1, "tag-4")
        tag_id = session.save_mapping(2, "duck")
        assert tag_id is not None
        assert store.state.mappings["2"].tags[-1].label == "duck"
        assert session.slots[2].edited_tag_id == tag_id
        assert session.slots[2].selected_tag_id is None
        assert session.can_finish()

    def test_edit_not_counted_as_use(self, session, scheduler, store):
        _to_review(session, scheduler, "042", "043")
        session.select_tag(0, "tag-0")
        session.select_tag(1, "tag-4")
        tag_id = session.save_mapping(2, "duck")
        result = session.finish()
        assert result.success_rate == 67
        two = store.state.mappings["2"]
        assert two.find_tag(tag_id).usage_count == 0
        assert two.find_tag("tag-2").usage_count == 0
        assert store.state.mappings["0"].tags[0].success_count == 1

    def test_all_wrong(self, session, scheduler, store):
        _to_review(session, scheduler, "042", "999")
        for index in range(3):
            session.save_mapping(index, f"fix{index}")
        result = session.finish()
        assert result.success_rate == 0
        assert store.state.tests[0].success_rate == 0


# ---------------------------------------------------------------------------
# Cancel and notifications
# ---------------------------------------------------------------------------

class TestCancelAndListeners:
    def test_cancel_records_nothing(self, session, scheduler, store):
        _to_review(session, scheduler, "042", "042")
        session.cancel()
        assert session.phase is Phase.IDLE
        assert store.state.tests == ()

    def test_cancel_during_exposure_stops_timers(self, session, scheduler):
        session.start("042")
        session.cancel()
        assert scheduler.pending == 0
        scheduler.advance(10)
        assert session.phase is Phase.IDLE

    def test_listener_sees_phases(self, session, scheduler):
        phases: list[Phase] = []
        session.subscribe(lambda: phases.append(session.phase))
        session.start("1")
        scheduler.advance(6)
        session.enter_digit(0, "1")
        assert phases == [Phase.EXPOSURE, Phase.DELAY, Phase.INPUT, Phase.REVIEW]

    def test_unsubscribe_and_dispose(self, session):
        calls: list[int] = []
        unsubscribe = session.subscribe(lambda: calls.append(1))
        unsubscribe()
        session.subscribe(lambda: calls.append(2))
        session.dispose()
        session.start("1")
        assert calls == []

    def test_set_difficulty_notifies_on_change_only(self, session):
        calls: list[int] = []
        session.subscribe(lambda: calls.append(1))
        session.set_difficulty(Difficulty.EASY)
        session.set_difficulty(Difficulty.HARD)
        assert calls == [1]
