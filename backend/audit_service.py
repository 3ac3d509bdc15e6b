"""Turn a stored report record into an evaluated audit report.

Pipeline: validate snapshot -> evaluate rule table -> roll up statuses ->
attach narrative and display insights. Nothing here performs I/O; every call
builds a new AuditReport.
"""

import logging

from audit_rules import evaluate_checks, group_by_category
from models import NARRATIVE_FIELDS, AuditReport, ScrapedReportData
from report_data import get_field, get_primary_keywords, normalize_report_data
from scoring import count_statuses, normalize_score, score_band, summarize_categories

logger = logging.getLogger(__name__)

TOP_ITEMS_LIMIT = 5
SERP_TITLE_PLACEHOLDER = "Your Page Title Here"
SERP_DESCRIPTION_PLACEHOLDER = "Your meta description will appear here..."


def extract_narrative(ai_report: object) -> dict[str, str]:
    """Return the non-empty narrative fields exactly as stored."""
    if not isinstance(ai_report, dict):
        return {}
    narrative: dict[str, str] = {}
    for field in NARRATIVE_FIELDS:
        value = ai_report.get(field)
        if isinstance(value, str) and value.strip():
            narrative[field] = value
    return narrative


def _pick(entries: list[dict], keys: tuple[str, ...], limit: int | None = None) -> list[dict]:
    picked = [{key: entry.get(key) for key in keys} for entry in entries]
    return picked if limit is None else picked[:limit]


def build_insights(url: str, data: ScrapedReportData) -> dict:
    """Non-graded data shown next to the checks: SERP preview and link/keyword tables."""
    title = get_field(data, "on_page_seo", "title")
    description = get_field(data, "on_page_seo", "meta_description")
    return {
        "serp_preview": {
            "title": title or SERP_TITLE_PLACEHOLDER,
            "url": url,
            "description": description or SERP_DESCRIPTION_PLACEHOLDER,
        },
        "primary_keywords": _pick(get_primary_keywords(data), ("keyword", "count")),
        "top_backlinks": _pick(
            get_field(data, "backlinks", "top_backlinks"),
            ("url", "domain", "authority"),
            TOP_ITEMS_LIMIT,
        ),
        "top_linked_pages": _pick(
            get_field(data, "internal_linking", "top_linked_pages"),
            ("url", "links"),
            TOP_ITEMS_LIMIT,
        ),
        "top_anchors": _pick(get_field(data, "backlinks", "top_anchors"), ("text", "count")),
        "top_countries": _pick(get_field(data, "backlinks", "top_countries"), ("name", "count")),
    }


def evaluate_report(record: dict | None) -> AuditReport | None:
    """
    Evaluate a stored report record.
    Returns None when there is no record, or the record has neither a url nor a
    snapshot; the caller decides how to report "not found".
    """
    if not isinstance(record, dict):
        return None

    url = record.get("url")
    url = url if isinstance(url, str) else ""
    if not url and record.get("scraped_data") is None:
        return None
    data = normalize_report_data(record.get("scraped_data")) or {}

    results = evaluate_checks(data)
    overall_score = normalize_score(record.get("seo_score"))
    if overall_score is None:
        logger.info(f"Report for {url or '<unknown url>'} has no supplied score")

    return {
        "url": url,
        "overall_score": overall_score,
        "score_band": score_band(overall_score),
        "category_results": group_by_category(results),
        "category_summary": summarize_categories(results),
        "status_counts": count_statuses(results),
        "narrative": extract_narrative(record.get("ai_report")),
        "insights": build_insights(url, data),
    }
