"""Display statistics derived from raw tag counters.

Every function here is pure and total: division-by-zero cases return 0.
Percentages are rounded half-up to the nearest integer, computed in integer
arithmetic so that values such as 12.5 always round to 13.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from renumber.core.models import NumberMapping, Tag


@dataclass(frozen=True)
class TagRates:
    usage_rate: int
    success_rate: int


def round_half_up(numerator: int, denominator: int) -> int:
    """Round ``numerator / denominator`` half-up for non-negative operands."""
    return (2 * numerator + denominator) // (2 * denominator)


def percentage(part: int, whole: int) -> int:
    """Return ``part / whole`` as a rounded percentage, or 0 when ``whole`` is 0."""
    if whole == 0:
        return 0
    return round_half_up(part * 100, whole)


def usage_rate(tag: Tag, max_usage_in_group: int) -> int:
    """Usage of ``tag`` relative to the most used tag of its mapping."""
    return percentage(tag.usage_count, max_usage_in_group)


def success_rate(tag: Tag) -> int:
    return percentage(tag.success_count, tag.usage_count)


def max_usage(mapping: NumberMapping) -> int:
    return max((tag.usage_count for tag in mapping.tags), default=0)


def tag_rates(tag: Tag, max_usage_in_group: int) -> TagRates:
    return TagRates(
        usage_rate=usage_rate(tag, max_usage_in_group),
        success_rate=success_rate(tag),
    )


def mapping_success(mapping: NumberMapping) -> int:
    """Mean success rate of a mapping's tags, 0 for an untagged mapping."""
    if not mapping.tags:
        return 0
    group_max = max_usage(mapping)
    scores = [tag_rates(tag, group_max).success_rate for tag in mapping.tags]
    return round_half_up(sum(scores), len(scores))


def mapped_percentage(mappings: Iterable[NumberMapping]) -> int:
    """Share of ``mappings`` that carry at least one tag."""
    items: Sequence[NumberMapping] = list(mappings)
    mapped = sum(1 for mapping in items if mapping.tags)
    return percentage(mapped, len(items))
