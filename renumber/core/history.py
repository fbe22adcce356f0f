from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable

from renumber.core.models import Difficulty, TestResult
from renumber.core.stats import round_half_up

DAY = timedelta(hours=24)


@dataclass(frozen=True)
class DifficultySummary:
    difficulty: Difficulty
    count: int
    average_success_rate: int


def summary_by_difficulty(tests: Iterable[TestResult]) -> Dict[Difficulty, DifficultySummary]:
    """Test count and rounded mean success rate for each difficulty.

    All four difficulties are always present, in Easy..Expert order.
    """
    totals = {difficulty: [0, 0] for difficulty in Difficulty}
    for result in tests:
        bucket = totals[result.difficulty]
        bucket[0] += 1
        bucket[1] += result.success_rate
    return {
        difficulty: DifficultySummary(
            difficulty=difficulty,
            count=count,
            average_success_rate=round_half_up(total, count) if count else 0,
        )
        for difficulty, (count, total) in totals.items()
    }


def recent_count(tests: Iterable[TestResult], window: timedelta, now: datetime) -> int:
    """Number of tests dated within ``[now - window, now]``."""
    start = now - window
    return sum(1 for result in tests if start <= result.date <= now)
