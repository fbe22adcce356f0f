"""Row models the views render; built from store snapshots, never cached."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from renumber.core.history import summary_by_difficulty
from renumber.core.models import AppState, NumberMapping
from renumber.core.stats import mapping_success, max_usage, tag_rates


@dataclass
class TagRow:
    tag_id: str
    label: str
    success_rate: int
    usage_rate: int


@dataclass
class NumberRow:
    number: str
    success: int
    tags: List[TagRow]

    @property
    def mapped(self) -> bool:
        return bool(self.tags)


@dataclass
class DifficultyRow:
    name: str
    count: int
    average: int


def build_number_row(mapping: NumberMapping) -> NumberRow:
    group_max = max_usage(mapping)
    rows = []
    for tag in mapping.tags:
        rates = tag_rates(tag, group_max)
        rows.append(
            TagRow(
                tag_id=tag.id,
                label=tag.label,
                success_rate=rates.success_rate,
                usage_rate=rates.usage_rate,
            )
        )
    return NumberRow(number=mapping.number, success=mapping_success(mapping), tags=rows)


def build_difficulty_rows(state: AppState) -> List[DifficultyRow]:
    return [
        DifficultyRow(name=summary.difficulty.value, count=summary.count, average=summary.average_success_rate)
        for summary in summary_by_difficulty(state.tests).values()
    ]
