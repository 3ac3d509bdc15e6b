"""Overall score pass-through and per-category status rollup."""

import math

from models import (
    CATEGORY_LABELS,
    STATUS_PASS,
    STATUS_SEVERITY,
    CategorySummary,
    CheckResult,
)

GOOD_SCORE = 80
FAIR_SCORE = 60


def normalize_score(raw: object) -> int | None:
    """
    Clamp an externally supplied score to 0-100.
    Returns None (unscored) when no usable score was supplied; a score is never invented.
    """
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    try:
        value = float(raw)
    except OverflowError:
        return None
    if not math.isfinite(value):
        return None
    return int(round(max(0, min(100, value))))


def score_band(score: int | None) -> str | None:
    if score is None:
        return None
    if score >= GOOD_SCORE:
        return "good"
    if score >= FAIR_SCORE:
        return "fair"
    return "poor"


def count_statuses(results: list[CheckResult]) -> dict[str, int]:
    counts = {status: 0 for status in STATUS_SEVERITY}
    for result in results:
        counts[result["status"]] = counts.get(result["status"], 0) + 1
    return counts


def worst_status(results: list[CheckResult]) -> str:
    """Most severe status among results (fail > warning > info > pass)."""
    present = {result["status"] for result in results}
    for status in STATUS_SEVERITY:
        if status in present:
            return status
    return STATUS_PASS


def summarize_categories(results: list[CheckResult]) -> dict[str, CategorySummary]:
    """Status counts per category. Every known category is listed, even when empty."""
    by_category: dict[str, list[CheckResult]] = {category: [] for category in CATEGORY_LABELS}
    for result in results:
        by_category.setdefault(result["category"], []).append(result)

    summary: dict[str, CategorySummary] = {}
    for category, category_results in by_category.items():
        summary[category] = {
            "label": CATEGORY_LABELS.get(category, category.title()),
            "status": worst_status(category_results),
            "total": len(category_results),
            "counts": count_statuses(category_results),
        }
    return summary
