"""Pure transitions over :class:`AppState` for the number → tags dictionary.

Each function returns a new snapshot and leaves its input untouched. When a
transition has nothing to do (unknown number, unknown tag) the very same
snapshot object is returned so callers can detect the no-op with ``is``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List

from renumber.core.models import AppState, NumberMapping, Tag, TestResult, UsedTag

MAX_NUMBER_LENGTH = 3
SINGLE_DIGITS = tuple(str(d) for d in range(10))


def numbers_of_length(length: int) -> List[str]:
    """All zero-padded numbers of exactly ``length`` digits, in order."""
    return [str(value).zfill(length) for value in range(10**length)]


def generate_numbers(max_length: int = MAX_NUMBER_LENGTH) -> List[str]:
    numbers: List[str] = []
    for length in range(1, max_length + 1):
        numbers.extend(numbers_of_length(length))
    return numbers


def seed_mappings() -> Dict[str, NumberMapping]:
    return {number: NumberMapping(id=number, number=number) for number in generate_numbers()}


def seed_state() -> AppState:
    """Fresh state: every supported number present, none tagged, no tests."""
    return AppState(mappings=seed_mappings(), tests=())


def mappings_of_length(state: AppState, length: int) -> List[NumberMapping]:
    return [state.mappings[n] for n in numbers_of_length(length) if n in state.mappings]


def mapped_digits(state: AppState) -> List[str]:
    """Single digits that already have at least one tag."""
    return [
        digit
        for digit in SINGLE_DIGITS
        if digit in state.mappings and state.mappings[digit].tags
    ]


def is_practice_unlocked(state: AppState) -> bool:
    return len(mapped_digits(state)) == len(SINGLE_DIGITS)


def _with_mapping(state: AppState, mapping: NumberMapping) -> AppState:
    mappings = dict(state.mappings)
    mappings[mapping.number] = mapping
    return replace(state, mappings=mappings)


def add_tag(state: AppState, number: str, label: str, tag_id: str) -> AppState:
    """Append a zero-counter tag to ``number``'s mapping."""
    mapping = state.mappings.get(number)
    if mapping is None or mapping.find_tag(tag_id) is not None:
        return state
    tag = Tag(id=tag_id, label=label)
    return _with_mapping(state, replace(mapping, tags=mapping.tags + (tag,)))


def update_tag(state: AppState, number: str, tag_id: str, label: str) -> AppState:
    """Relabel one tag; counters are left as they are."""
    mapping = state.mappings.get(number)
    if mapping is None:
        return state
    current = mapping.find_tag(tag_id)
    if current is None or current.label == label:
        return state
    tags = tuple(replace(tag, label=label) if tag.id == tag_id else tag for tag in mapping.tags)
    return _with_mapping(state, replace(mapping, tags=tags))


def apply_test_outcome(state: AppState, used_tags: Iterable[UsedTag]) -> AppState:
    """Count one use (and one success when correct) for every matched tag.

    Entries naming an unknown number or tag are skipped.
    """
    mappings = dict(state.mappings)
    changed = False
    for used in used_tags:
        mapping = mappings.get(used.number)
        if mapping is None or mapping.find_tag(used.tag_id) is None:
            continue
        tags = tuple(
            replace(
                tag,
                usage_count=tag.usage_count + 1,
                success_count=tag.success_count + (1 if used.correct else 0),
            )
            if tag.id == used.tag_id
            else tag
            for tag in mapping.tags
        )
        mappings[used.number] = replace(mapping, tags=tags)
        changed = True
    if not changed:
        return state
    return replace(state, mappings=mappings)


def record_test(state: AppState, result: TestResult, used_tags: Iterable[UsedTag]) -> AppState:
    """Prepend ``result`` to the history and apply its tag usage in one step."""
    updated = apply_test_outcome(state, used_tags)
    return replace(updated, tests=(result,) + updated.tests)
