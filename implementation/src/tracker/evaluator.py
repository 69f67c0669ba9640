"""Completion scoring: catalog + SaveState -> per-category results.

Primary categories contribute formula(unlocked items) to the total.
Supporting categories report raw counts (unlocked / total) and do not
contribute. The maximum score of a category is always computed over all of
its items, so the act filter changes which rows are shown but never the
denominator.

The total is an estimate; it can differ from the game's own
completionPercentage, which is exposed alongside for comparison.
"""
from __future__ import annotations

from typing import Any, Sequence

from tracker.errors import ConfigurationError
from tracker.save import SaveState
from tracker.types import (
    Catalog,
    CategoryItem,
    CategoryResult,
    CollectableCategory,
    CompletionReport,
    ItemResult,
    Necessity,
)
from tracker.unlocks import is_unlocked

ACT_FILTERS = (1, 2, 3)


def score_category(category: CollectableCategory, items: Sequence[CategoryItem]) -> int:
    if category.necessity is Necessity.PRIMARY:
        if category.scoring_function is None:
            raise ConfigurationError(f"Primary category {category.name!r} has no scoring function")
        return category.scoring_function(items)
    return len(items)


def _in_act(item: CategoryItem, act_filter: int | None) -> bool:
    return act_filter is None or item.act == 0 or item.act <= act_filter


def evaluate_category(
    category: CollectableCategory, save: SaveState, act_filter: int | None = None
) -> CategoryResult:
    rows: list[ItemResult] = []
    unlocked_items: list[CategoryItem] = []
    for item in category.items:
        if not _in_act(item, act_filter):
            continue
        unlocked = is_unlocked(item.parsing_info, save)
        if unlocked:
            unlocked_items.append(item)
        rows.append(ItemResult(
            name=item.name,
            act=item.act,
            prerequisites=item.prerequisites,
            location=item.location,
            unlocked=unlocked,
        ))

    unlocked_score = score_category(category, unlocked_items)
    max_score = score_category(category, category.items)
    return CategoryResult(
        name=category.name,
        tooltip=category.tooltip,
        necessity=category.necessity,
        unlocked_score=unlocked_score,
        max_score=max_score,
        completed=unlocked_score >= max_score,
        items=rows,
    )


def evaluate_catalog(
    catalog: Catalog, save: SaveState, act_filter: int | None = None
) -> CompletionReport:
    """Evaluate every category. act_filter: 1-3 shows items up to that act, None shows all."""
    if act_filter is not None and act_filter not in ACT_FILTERS:
        raise ValueError(f"act_filter must be one of {ACT_FILTERS} or None, got {act_filter!r}")

    report = CompletionReport(reported_completion=save.completion_percentage)
    for category in catalog:
        result = evaluate_category(category, save, act_filter)
        report.categories.append(result)
        if category.necessity is Necessity.PRIMARY:
            report.total_score += result.unlocked_score
            report.max_total_score += result.max_score
    return report


def report_to_dict(report: CompletionReport) -> dict[str, Any]:
    """Build the JSON-serializable view handed to renderers."""
    categories = []
    for cat in report.categories:
        categories.append({
            "name": cat.name,
            "tooltip": cat.tooltip,
            "necessity": cat.necessity.value,
            "unlockedScore": cat.unlocked_score,
            "maxScore": cat.max_score,
            "completed": cat.completed,
            "items": [
                {
                    "name": row.name,
                    "act": row.act,
                    "prerequisites": list(row.prerequisites),
                    "location": row.location,
                    "unlocked": row.unlocked,
                }
                for row in cat.items
            ],
        })
    return {
        "categories": categories,
        "totalScore": report.total_score,
        "maxTotalScore": report.max_total_score,
        "reportedCompletion": report.reported_completion,
    }
