"""Aggregation of raw Copilot metrics into chart-ready series.

This module turns the nested upstream feed into two views:
- A daily series of suggested/accepted lines and acceptance rate, ordered by date.
- A ranking of accepted lines per language across the whole feed.

Both functions are pure. The feed shape is controlled by the vendor, so any
missing, ``null`` or wrongly-typed level of
``copilot_ide_code_completions -> editors -> models -> languages`` contributes
zero instead of raising.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterator, List, Mapping

from .models import DailyMetric, LanguageTotal

logger = logging.getLogger(__name__)

_NESTED_LEVELS = ("editors", "models", "languages")


def _as_count(value: Any) -> int:
    """Coerce a leaf counter to a non-negative integer, treating junk as zero.

    Whole-number floats such as ``3.0`` are accepted; fractional, NaN and
    infinite values are junk like strings and booleans.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        return 0
    if value < 0:
        return 0
    return int(value)


def _children(node: Any, key: str) -> List[Any]:
    if not isinstance(node, Mapping):
        return []
    items = node.get(key)
    if not isinstance(items, list):
        return []
    return items


def iter_language_leaves(record: Any) -> Iterator[Mapping[str, Any]]:
    """Yield every language leaf reachable from one daily record.

    Walks ``editors``, ``models`` and ``languages`` in order. An absent or
    malformed level yields nothing for that branch.
    """
    if not isinstance(record, Mapping):
        return

    nodes: List[Any] = [record.get("copilot_ide_code_completions")]
    for level in _NESTED_LEVELS:
        nodes = [child for node in nodes for child in _children(node, level)]

    for leaf in nodes:
        if isinstance(leaf, Mapping):
            yield leaf


def acceptance_rate(accepted: int, suggested: int) -> float:
    """Return accepted/suggested as a percentage in ``[0, 100]``.

    Zero suggested lines give ``0.0`` rather than a division error.
    """
    if suggested <= 0:
        return 0.0
    return min(100.0, max(0.0, accepted * 100 / suggested))


def to_daily_series(records: Any) -> List[DailyMetric]:
    """Aggregate each daily record into a ``DailyMetric`` sorted by day.

    Business logic:
    - Sum ``total_code_lines_suggested`` and ``total_code_lines_accepted`` over
      every editor/model/language leaf of the record.
    - ``acceptance_rate`` is accepted/suggested * 100, or ``0`` when nothing
      was suggested.
    - One entry per record; duplicate dates are kept as separate entries.
    - Output is sorted ascending by ISO date. The sort is stable.

    Non-list input returns an empty list.
    """
    if not isinstance(records, list):
        return []

    series: List[DailyMetric] = []
    skipped = 0

    for record in records:
        if not isinstance(record, Mapping):
            skipped += 1
            continue

        suggested = 0
        accepted = 0
        for leaf in iter_language_leaves(record):
            suggested += _as_count(leaf.get("total_code_lines_suggested"))
            accepted += _as_count(leaf.get("total_code_lines_accepted"))

        day = record.get("date")
        series.append(
            DailyMetric(
                day=day if isinstance(day, str) else "",
                total_lines_suggested=suggested,
                total_lines_accepted=accepted,
                active_users=_as_count(record.get("total_active_users")),
                acceptance_rate=acceptance_rate(accepted, suggested),
            )
        )

    if skipped:
        logger.debug("Skipped non-object daily records", extra={"skipped": skipped})

    return sorted(series, key=lambda metric: metric.day)


def to_language_ranking(records: Any) -> List[LanguageTotal]:
    """Rank languages by accepted lines summed across all days, editors and models.

    Languages with a zero total are dropped. Ties keep the order in which the
    languages were first seen in the feed.

    Non-list input returns an empty list.
    """
    if not isinstance(records, list):
        return []

    totals: Dict[str, int] = {}
    for record in records:
        for leaf in iter_language_leaves(record):
            name = leaf.get("name")
            if not isinstance(name, str):
                continue
            totals[name] = totals.get(name, 0) + _as_count(leaf.get("total_code_lines_accepted"))

    ranking = [LanguageTotal(name=name, value=value) for name, value in totals.items() if value > 0]
    return sorted(ranking, key=lambda item: item.value, reverse=True)
