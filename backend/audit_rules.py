"""Audit rule table.

Each rule reads a few fields of a crawl snapshot and returns a status, a display
value and a recommendation. Rules are pure and independent of each other; the
order of RULES is only the display order.
"""

import logging
from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional

from models import (
    CATEGORY_ADVANCED,
    CATEGORY_BASIC,
    CATEGORY_KEYWORDS,
    CATEGORY_LABELS,
    CATEGORY_LOCAL,
    CATEGORY_PERFORMANCE,
    CATEGORY_SOCIAL,
    STATUS_FAIL,
    STATUS_INFO,
    STATUS_PASS,
    STATUS_WARNING,
    CheckResult,
    ScrapedReportData,
)
from report_data import get_field, get_social_profile

logger = logging.getLogger(__name__)

TITLE_MIN_CHARS = 50
TITLE_MAX_CHARS = 60
DESCRIPTION_MIN_CHARS = 150
DESCRIPTION_MAX_CHARS = 160
DESCRIPTION_PREVIEW_CHARS = 100
MIN_WORD_COUNT = 300
COMPETITIVE_WORD_COUNT = 1000
MAX_IMAGES_WITHOUT_ALT_WARNING = 3
MAX_LOAD_TIME_SECONDS = 3
MAX_PAGE_SIZE_MB = 3
MIN_BACKLINKS = 10
PAGESPEED_URL = "https://pagespeed.web.dev/"

# Checks that carry a suggestion even when their status is pass.
ALWAYS_SUGGEST_CHECKS = frozenset(
    {"content_length", "speed_desktop", "speed_mobile", "google_business_profile"}
)


class Outcome(NamedTuple):
    status: str
    value: str
    recommendation: Optional[str] = None


@dataclass(frozen=True)
class Rule:
    check_id: str
    category: str
    label: str
    check: Callable[[ScrapedReportData], Outcome]

    def evaluate(self, data: ScrapedReportData) -> CheckResult:
        outcome = self.check(data)
        return {
            "check_id": self.check_id,
            "label": self.label,
            "category": self.category,
            "status": outcome.status,
            "value": outcome.value,
            "recommendation": outcome.recommendation,
        }


def _format_number(value: float) -> str:
    # Shown as measured; only integral floats lose their ".0".
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _flag_check(
    section: str,
    key: str,
    *,
    missing_status: str,
    present_value: str,
    missing_value: str,
    recommendation: str,
) -> Callable[[ScrapedReportData], Outcome]:
    """Build a check that passes when a boolean field is set."""

    def check(data: ScrapedReportData) -> Outcome:
        if get_field(data, section, key):
            return Outcome(STATUS_PASS, present_value)
        return Outcome(missing_status, missing_value, recommendation)

    return check


def _social_check(platform: str, recommendation: str) -> Callable[[ScrapedReportData], Outcome]:
    def check(data: ScrapedReportData) -> Outcome:
        profile = get_social_profile(data, platform)
        if profile:
            return Outcome(STATUS_PASS, profile)
        return Outcome(STATUS_WARNING, "Not found", recommendation)

    return check


# --- Basic SEO ---


def check_meta_title(data: ScrapedReportData) -> Outcome:
    title = get_field(data, "on_page_seo", "title")
    if not title:
        return Outcome(STATUS_WARNING, "Not found", "Add a meta title (50-60 characters)")

    length = len(title)
    value = f'"{title}" ({length} characters)'
    if length < TITLE_MIN_CHARS:
        return Outcome(STATUS_WARNING, value, "Title is too short. Aim for 50-60 characters.")
    if length > TITLE_MAX_CHARS:
        return Outcome(STATUS_WARNING, value, "Title is too long. Keep it under 60 characters.")
    return Outcome(STATUS_PASS, value)


def check_meta_description(data: ScrapedReportData) -> Outcome:
    description = get_field(data, "on_page_seo", "meta_description")
    if not description:
        return Outcome(STATUS_WARNING, "Not found", "Add a meta description (150-160 characters)")

    length = len(description)
    value = f'"{description[:DESCRIPTION_PREVIEW_CHARS]}..." ({length} characters)'
    if length < DESCRIPTION_MIN_CHARS:
        return Outcome(
            STATUS_WARNING, value, "Description is too short. Aim for 150-160 characters."
        )
    if length > DESCRIPTION_MAX_CHARS:
        return Outcome(
            STATUS_WARNING, value, "Description is too long. Keep it under 160 characters."
        )
    return Outcome(STATUS_PASS, value)


def check_h1_tag(data: ScrapedReportData) -> Outcome:
    h1_tags = get_field(data, "on_page_seo", "h1_tags")
    if not h1_tags:
        return Outcome(STATUS_FAIL, "No H1 tag found", "Add exactly one H1 tag to your page")

    joined = '", "'.join(h1_tags)
    value = f'Found {len(h1_tags)}: "{joined}"'
    if len(h1_tags) > 1:
        return Outcome(STATUS_WARNING, value, "Use only one H1 tag per page")
    return Outcome(STATUS_PASS, value)


def check_heading_structure(data: ScrapedReportData) -> Outcome:
    h2 = len(get_field(data, "on_page_seo", "h2_tags"))
    h3 = len(get_field(data, "on_page_seo", "h3_tags"))
    h4 = len(get_field(data, "on_page_seo", "h4_tags"))
    value = f"H2: {h2}, H3: {h3}, H4: {h4}"
    if h2 == 0:
        return Outcome(STATUS_WARNING, value, "Add H2 tags to structure your content better")
    return Outcome(STATUS_PASS, value)


def check_content_length(data: ScrapedReportData) -> Outcome:
    word_count = get_field(data, "content_analysis", "word_count")
    value = f"{_format_number(word_count)} words"
    if word_count < MIN_WORD_COUNT:
        return Outcome(
            STATUS_WARNING, value, "Add more content. Aim for at least 300 words for better SEO."
        )
    if word_count < COMPETITIVE_WORD_COUNT:
        return Outcome(
            STATUS_PASS,
            value,
            "Good content length. Consider expanding to 1000+ words for competitive keywords.",
        )
    return Outcome(STATUS_PASS, value)


# --- Advanced SEO ---


def check_canonical_tag(data: ScrapedReportData) -> Outcome:
    canonical = get_field(data, "technical_seo", "canonical_tag")
    if canonical:
        return Outcome(STATUS_PASS, f"Present: {canonical}")
    return Outcome(
        STATUS_WARNING, "Not found", "Add a canonical tag to avoid duplicate content issues"
    )


def check_image_alt_text(data: ScrapedReportData) -> Outcome:
    missing = get_field(data, "content_analysis", "images_without_alt")
    total = get_field(data, "content_analysis", "total_images")
    value = (
        f"{_format_number(missing)} images without alt text "
        f"out of {_format_number(total)} total"
    )
    if missing <= 0:
        return Outcome(STATUS_PASS, value)

    recommendation = (
        f"Add alt text to {_format_number(missing)} images for better accessibility and SEO"
    )
    if missing <= MAX_IMAGES_WITHOUT_ALT_WARNING:
        return Outcome(STATUS_WARNING, value, recommendation)
    return Outcome(STATUS_FAIL, value, recommendation)


def check_noindex(data: ScrapedReportData) -> Outcome:
    if get_field(data, "technical_seo", "noindex"):
        return Outcome(
            STATUS_FAIL,
            "Noindex tag found (page will not be indexed)",
            "Remove noindex tag if you want this page to appear in search results",
        )
    return Outcome(STATUS_PASS, "Not present (good)")


def check_xml_sitemap(data: ScrapedReportData) -> Outcome:
    sitemap_url = get_field(data, "technical_seo", "sitemap_url")
    if get_field(data, "technical_seo", "sitemap_exists"):
        return Outcome(STATUS_PASS, sitemap_url or "Present")
    return Outcome(
        STATUS_WARNING,
        sitemap_url or "Not found",
        "Create and submit an XML sitemap to help search engines discover your pages",
    )


def check_analytics(data: ScrapedReportData) -> Outcome:
    found = ", ".join(get_field(data, "technical_seo", "analytics_found"))
    if get_field(data, "technical_seo", "has_analytics"):
        return Outcome(STATUS_PASS, found or "Detected")
    return Outcome(
        STATUS_WARNING,
        found or "Not detected",
        "Install Google Analytics or similar to track website performance",
    )


def check_schema_markup(data: ScrapedReportData) -> Outcome:
    schema_types = ", ".join(get_field(data, "technical_seo", "schema_types"))
    if get_field(data, "technical_seo", "schema_markup"):
        return Outcome(STATUS_PASS, schema_types or "Detected")
    return Outcome(
        STATUS_WARNING,
        schema_types or "Not found",
        "Add structured data (Schema.org) to help search engines understand your content",
    )


# --- Keywords & Backlinks ---


def check_backlinks_summary(data: ScrapedReportData) -> Outcome:
    total = get_field(data, "backlinks", "total_backlinks")
    domains = get_field(data, "backlinks", "unique_domains")
    value = (
        f"{_format_number(total)} total backlinks from {_format_number(domains)} domains"
    )
    if total > MIN_BACKLINKS:
        return Outcome(STATUS_PASS, value)
    return Outcome(
        STATUS_WARNING, value, "Build more quality backlinks to improve domain authority"
    )


# --- Performance ---


def check_page_speed(data: ScrapedReportData) -> Outcome:
    return Outcome(
        STATUS_INFO, "Use PageSpeed Insights for detailed metrics", f"Test at: {PAGESPEED_URL}"
    )


def check_load_time(data: ScrapedReportData) -> Outcome:
    load_time = get_field(data, "technical_seo", "load_time", default=None)
    recommendation = "Optimize images, minify CSS/JS, and enable caching to improve load time"
    if load_time is None:
        return Outcome(STATUS_WARNING, "N/A", recommendation)
    value = f"{_format_number(load_time)}s"
    if load_time < MAX_LOAD_TIME_SECONDS:
        return Outcome(STATUS_PASS, value)
    return Outcome(STATUS_WARNING, value, recommendation)


def check_page_size(data: ScrapedReportData) -> Outcome:
    page_size = get_field(data, "technical_seo", "page_size_mb", default=None)
    recommendation = "Compress images and minimize file sizes to reduce page weight"
    if page_size is None:
        return Outcome(STATUS_WARNING, "N/A", recommendation)
    value = f"{_format_number(page_size)} MB"
    if page_size < MAX_PAGE_SIZE_MB:
        return Outcome(STATUS_PASS, value)
    return Outcome(STATUS_WARNING, value, recommendation)


# --- Local SEO ---


def check_google_business_profile(data: ScrapedReportData) -> Outcome:
    recommendation = "Claim and optimize your Google Business Profile for local visibility"
    if get_field(data, "technical_seo", "google_business_verified"):
        return Outcome(STATUS_PASS, "Profile verified", recommendation)
    return Outcome(STATUS_INFO, "Not verified", recommendation)


RULES: tuple[Rule, ...] = (
    Rule("meta_title", CATEGORY_BASIC, "Meta Title", check_meta_title),
    Rule("meta_description", CATEGORY_BASIC, "Meta Description", check_meta_description),
    Rule("h1_tag", CATEGORY_BASIC, "H1 Header Tag", check_h1_tag),
    Rule("heading_structure", CATEGORY_BASIC, "H2-H6 Header Tags", check_heading_structure),
    Rule("content_length", CATEGORY_BASIC, "Amount of Content", check_content_length),
    Rule("canonical_tag", CATEGORY_ADVANCED, "Canonical Tag", check_canonical_tag),
    Rule("image_alt_text", CATEGORY_ADVANCED, "Image Alt Attributes", check_image_alt_text),
    Rule("noindex", CATEGORY_ADVANCED, "Noindex Tag Test", check_noindex),
    Rule(
        "robots_txt",
        CATEGORY_ADVANCED,
        "Robots.txt",
        _flag_check(
            "technical_seo",
            "robots_txt_exists",
            missing_status=STATUS_WARNING,
            present_value="Present and accessible",
            missing_value="Not found",
            recommendation="Create a robots.txt file to guide search engine crawlers",
        ),
    ),
    Rule(
        "https",
        CATEGORY_ADVANCED,
        "SSL Enabled",
        _flag_check(
            "technical_seo",
            "https",
            missing_status=STATUS_FAIL,
            present_value="HTTPS enabled",
            missing_value="No SSL certificate",
            recommendation="Enable HTTPS for security and better rankings",
        ),
    ),
    Rule("xml_sitemap", CATEGORY_ADVANCED, "XML Sitemaps", check_xml_sitemap),
    Rule(
        "llms_txt",
        CATEGORY_ADVANCED,
        "Llms.txt",
        _flag_check(
            "technical_seo",
            "llms_txt",
            missing_status=STATUS_INFO,
            present_value="Present",
            missing_value="Not found (optional)",
            recommendation="Consider adding llms.txt for AI crawler optimization",
        ),
    ),
    Rule("analytics", CATEGORY_ADVANCED, "Analytics", check_analytics),
    Rule("schema_markup", CATEGORY_ADVANCED, "Schema.org Structured Data", check_schema_markup),
    Rule(
        "identity_schema",
        CATEGORY_ADVANCED,
        "Identity Schema",
        _flag_check(
            "technical_seo",
            "identity_schema",
            missing_status=STATUS_INFO,
            present_value="Organization/Person schema found",
            missing_value="Not found",
            recommendation="Add Organization or Person schema to establish entity identity",
        ),
    ),
    Rule(
        "llm_readable",
        CATEGORY_ADVANCED,
        "Rendered Content (LLM Readability)",
        _flag_check(
            "content_analysis",
            "llm_readable",
            missing_status=STATUS_INFO,
            present_value="Content is easily readable by LLMs",
            missing_value="Content may be hard to parse",
            recommendation="Ensure content is in clean HTML without excessive JavaScript rendering",
        ),
    ),
    Rule("backlinks_summary", CATEGORY_KEYWORDS, "Backlinks Summary", check_backlinks_summary),
    Rule(
        "responsive_design",
        CATEGORY_PERFORMANCE,
        "Responsive Design",
        _flag_check(
            "technical_seo",
            "viewport_meta",
            missing_status=STATUS_FAIL,
            present_value="Mobile-friendly viewport detected",
            missing_value="No viewport meta tag",
            recommendation="Add viewport meta tag for mobile responsiveness",
        ),
    ),
    Rule("speed_desktop", CATEGORY_PERFORMANCE, "Website Speed (Desktop)", check_page_speed),
    Rule("speed_mobile", CATEGORY_PERFORMANCE, "Website Speed (Mobile)", check_page_speed),
    Rule("load_time", CATEGORY_PERFORMANCE, "Website Load Speed", check_load_time),
    Rule("page_size", CATEGORY_PERFORMANCE, "Website Download Size", check_page_size),
    Rule(
        "amp",
        CATEGORY_PERFORMANCE,
        "AMP (Accelerated Mobile Pages)",
        _flag_check(
            "technical_seo",
            "amp_enabled",
            missing_status=STATUS_INFO,
            present_value="AMP version detected",
            missing_value="Not implemented (optional)",
            recommendation="Consider implementing AMP for faster mobile experience",
        ),
    ),
    Rule(
        "contact_info",
        CATEGORY_LOCAL,
        "Address & Phone Shown on Website",
        _flag_check(
            "technical_seo",
            "has_contact_info",
            missing_status=STATUS_WARNING,
            present_value="Contact information found",
            missing_value="Not detected",
            recommendation="Display your business address and phone number prominently",
        ),
    ),
    Rule(
        "local_business_schema",
        CATEGORY_LOCAL,
        "Local Business Schema",
        _flag_check(
            "technical_seo",
            "local_business_schema",
            missing_status=STATUS_WARNING,
            present_value="LocalBusiness schema detected",
            missing_value="Not found",
            recommendation="Add LocalBusiness schema markup for better local SEO",
        ),
    ),
    Rule(
        "google_business_profile",
        CATEGORY_LOCAL,
        "Google Business Profile Identified",
        check_google_business_profile,
    ),
    Rule(
        "facebook_page",
        CATEGORY_SOCIAL,
        "Facebook Page Linked",
        _social_check("facebook", "Link your Facebook page for better social presence"),
    ),
    Rule(
        "facebook_pixel",
        CATEGORY_SOCIAL,
        "Facebook Pixel",
        _flag_check(
            "technical_seo",
            "facebook_pixel",
            missing_status=STATUS_INFO,
            present_value="Installed",
            missing_value="Not detected",
            recommendation="Install Facebook Pixel to track conversions and optimize ads",
        ),
    ),
    Rule(
        "x_account",
        CATEGORY_SOCIAL,
        "X (formerly Twitter) Account Linked",
        _social_check("twitter", "Link your X/Twitter account"),
    ),
    Rule(
        "instagram",
        CATEGORY_SOCIAL,
        "Instagram Linked",
        _social_check("instagram", "Link your Instagram profile"),
    ),
    Rule(
        "linkedin",
        CATEGORY_SOCIAL,
        "LinkedIn Page Linked",
        _social_check("linkedin", "Link your LinkedIn company page"),
    ),
    Rule(
        "youtube_channel",
        CATEGORY_SOCIAL,
        "YouTube Channel Linked",
        _social_check("youtube", "Link your YouTube channel if you create video content"),
    ),
    Rule(
        "youtube_activity",
        CATEGORY_SOCIAL,
        "YouTube Channel Activity",
        _flag_check(
            "technical_seo",
            "youtube_active",
            missing_status=STATUS_INFO,
            present_value="Active channel detected",
            missing_value="No recent activity",
            recommendation="Post regular video content to boost engagement",
        ),
    ),
)


def _unavailable_result(rule: Rule) -> CheckResult:
    return {
        "check_id": rule.check_id,
        "label": rule.label,
        "category": rule.category,
        "status": STATUS_WARNING,
        "value": "Not available",
        "recommendation": "Re-run the audit to collect data for this check",
    }


def evaluate_rule(rule: Rule, data: ScrapedReportData) -> CheckResult:
    """
    Evaluate one rule without letting it raise.
    A rule that fails on the snapshot is evaluated again as if its fields were missing.
    """
    try:
        return rule.evaluate(data)
    except Exception:
        logger.exception(f"Audit rule {rule.check_id} failed, treating its fields as missing")

    try:
        return rule.evaluate({})
    except Exception:
        logger.exception(f"Audit rule {rule.check_id} failed on an empty snapshot")
        return _unavailable_result(rule)


def evaluate_checks(
    data: ScrapedReportData, rules: tuple[Rule, ...] = RULES
) -> list[CheckResult]:
    """Evaluate every rule in table order. Always returns one result per rule."""
    return [evaluate_rule(rule, data) for rule in rules]


def group_by_category(results: list[CheckResult]) -> dict[str, list[CheckResult]]:
    """Group results by category, keeping table order inside each category."""
    grouped: dict[str, list[CheckResult]] = {category: [] for category in CATEGORY_LABELS}
    for result in results:
        grouped.setdefault(result["category"], []).append(result)
    return grouped
