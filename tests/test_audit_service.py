import json

from audit_rules import RULES
from audit_service import build_insights, evaluate_report, extract_narrative


def _record(scraped_data, **overrides):
    record = {
        "url": "https://acme.example/",
        "seo_score": 72,
        "scraped_data": scraped_data,
        "ai_report": {
            "summary": "Solid technical base.\nContent is thin.",
            "recommendations": "1. Add H2s\n2. Expand copy",
            "action_plan": "",
        },
        "created_at": "2026-10-01T12:00:00",
    }
    record.update(overrides)
    return record


def test_missing_record_is_not_found():
    assert evaluate_report(None) is None


def test_record_without_url_or_snapshot_is_not_found():
    assert evaluate_report({}) is None
    assert evaluate_report({"url": 42, "seo_score": 90}) is None
    assert evaluate_report({"scraped_data": {}})["url"] == ""
    assert evaluate_report({"url": "https://acme.example/"})["url"] == "https://acme.example/"


def test_oversized_score_is_unscored():
    report = evaluate_report({"url": "https://acme.example/", "seo_score": 10**400, "scraped_data": {}})
    assert report["overall_score"] is None
    assert report["score_band"] is None


def test_evaluate_report_shape(full_snapshot):
    report = evaluate_report(_record(full_snapshot))

    assert report["url"] == "https://acme.example/"
    assert report["overall_score"] == 72
    assert report["score_band"] == "fair"
    assert sum(len(items) for items in report["category_results"].values()) == len(RULES)
    assert report["status_counts"]["fail"] == 0
    json.dumps(report)


def test_report_without_snapshot_degrades_instead_of_failing():
    report = evaluate_report(_record(None, seo_score=None, ai_report=None))

    assert report["overall_score"] is None
    assert report["score_band"] is None
    assert report["narrative"] == {}
    assert report["category_summary"]["basic"]["status"] == "fail"
    assert report["insights"]["serp_preview"]["title"] == "Your Page Title Here"


def test_reevaluation_builds_new_equal_report(full_snapshot):
    record = _record(full_snapshot)
    first = evaluate_report(record)
    second = evaluate_report(record)

    assert first == second
    assert first is not second
    first["category_results"]["basic"].clear()
    assert evaluate_report(record)["category_results"]["basic"]


def test_narrative_is_passed_through_verbatim():
    narrative = extract_narrative(
        {"summary": "  Keep *this* exactly  ", "recommendations": None, "action_plan": "   ", "other": "x"}
    )
    assert narrative == {"summary": "  Keep *this* exactly  "}
    assert extract_narrative("plain text") == {}


def test_insights_limit_tables_and_skip_malformed_entries(full_snapshot):
    full_snapshot["backlinks"]["top_anchors"].append("not-an-object")
    insights = build_insights("https://acme.example/", full_snapshot)

    assert insights["serp_preview"]["title"] == full_snapshot["on_page_seo"]["title"]
    assert len(insights["top_linked_pages"]) == 5
    assert insights["top_linked_pages"][0] == {"url": "https://acme.example/p0", "links": 10}
    assert insights["top_anchors"] == [{"text": "acme plumbing", "count": 6}]
    assert insights["primary_keywords"] == [{"keyword": "plumber", "count": 14}]
    assert insights["top_backlinks"][0]["authority"] == 61


def test_malformed_field_only_affects_its_check(full_snapshot):
    full_snapshot["on_page_seo"]["h1_tags"] = "Emergency Plumbers"
    report = evaluate_report(_record(full_snapshot))

    basic = {r["check_id"]: r for r in report["category_results"]["basic"]}
    assert basic["h1_tag"]["status"] == "fail"
    assert basic["meta_title"]["status"] == "pass"
    assert report["status_counts"]["fail"] == 1
