import pytest

from audit_rules import evaluate_checks
from scoring import (
    count_statuses,
    normalize_score,
    score_band,
    summarize_categories,
    worst_status,
)


def _result(check_id, category, status):
    return {
        "check_id": check_id,
        "label": check_id,
        "category": category,
        "status": status,
        "value": "-",
        "recommendation": None,
    }


@pytest.mark.parametrize(
    "raw, expected",
    [(72, 72), (72.6, 73), (0, 0), (140, 100), (-5, 0), ("80", None), (None, None), (True, None),
     (float("nan"), None), (10**400, None), (float("inf"), None)],
)
def test_normalize_score_passes_through_or_reports_unscored(raw, expected):
    assert normalize_score(raw) == expected


@pytest.mark.parametrize("score, band", [(95, "good"), (80, "good"), (79, "fair"), (60, "fair"), (59, "poor"), (None, None)])
def test_score_band(score, band):
    assert score_band(score) == band


def test_worst_status_uses_severity_order():
    assert worst_status([_result("a", "basic", "pass"), _result("b", "basic", "info")]) == "info"
    assert worst_status([_result("a", "basic", "info"), _result("b", "basic", "warning")]) == "warning"
    assert worst_status([_result("a", "basic", "warning"), _result("b", "basic", "fail")]) == "fail"
    assert worst_status([]) == "pass"


def test_summarize_categories_counts_every_status():
    results = [
        _result("a", "basic", "pass"),
        _result("b", "basic", "fail"),
        _result("c", "basic", "warning"),
        _result("d", "social", "info"),
    ]
    summary = summarize_categories(results)

    assert summary["basic"]["counts"] == {"fail": 1, "warning": 1, "info": 0, "pass": 1}
    assert summary["basic"]["total"] == 3
    assert summary["basic"]["status"] == "fail"
    assert summary["basic"]["label"] == "Basic SEO"
    assert summary["social"]["status"] == "info"
    assert summary["local"] == {
        "label": "Local SEO",
        "status": "pass",
        "total": 0,
        "counts": {"fail": 0, "warning": 0, "info": 0, "pass": 0},
    }


def test_rollup_accounts_for_every_check_and_is_deterministic(full_snapshot):
    results = evaluate_checks({"technical_seo": {"https": True}})
    summary = summarize_categories(results)

    assert sum(item["total"] for item in summary.values()) == len(results)
    assert sum(count_statuses(results).values()) == len(results)
    assert summarize_categories(results) == summary
