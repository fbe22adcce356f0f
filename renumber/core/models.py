"""Immutable domain records: tags, number mappings, test results and app state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping, Tuple


class Difficulty(str, Enum):
    EASY = "Easy"
    MODERATE = "Moderate"
    HARD = "Hard"
    EXPERT = "Expert"


@dataclass(frozen=True)
class Tag:
    """A mnemonic label bound to a number, with cumulative usage counters."""

    id: str
    label: str
    usage_count: int = 0
    success_count: int = 0


@dataclass(frozen=True)
class NumberMapping:
    """All tags attached to one zero-padded number ("7", "07", "007")."""

    id: str
    number: str
    tags: Tuple[Tag, ...] = ()

    def find_tag(self, tag_id: str) -> Tag | None:
        for tag in self.tags:
            if tag.id == tag_id:
                return tag
        return None


@dataclass(frozen=True)
class TestResult:
    """Outcome of one completed practice session."""

    __test__ = False  # keep pytest from collecting this as a test class

    id: str
    date: datetime
    difficulty: Difficulty
    success_rate: int


@dataclass(frozen=True)
class UsedTag:
    """A tag offered as evidence for one recalled digit."""

    number: str
    tag_id: str
    correct: bool


@dataclass(frozen=True)
class AppState:
    """Whole-application snapshot; replaced, never mutated."""

    mappings: Mapping[str, NumberMapping] = field(default_factory=dict)
    tests: Tuple[TestResult, ...] = ()
