"""Data models and types used across the backend.

Database table definitions are in database.py.
API request/response models are in schemas.py.
Types for the stored report snapshot and the evaluated audit live here.
"""

from typing import Optional, TypedDict

STATUS_PASS = "pass"
STATUS_WARNING = "warning"
STATUS_FAIL = "fail"
STATUS_INFO = "info"

# Most severe first.
STATUS_SEVERITY = (STATUS_FAIL, STATUS_WARNING, STATUS_INFO, STATUS_PASS)

CATEGORY_BASIC = "basic"
CATEGORY_ADVANCED = "advanced"
CATEGORY_KEYWORDS = "keywords"
CATEGORY_PERFORMANCE = "performance"
CATEGORY_LOCAL = "local"
CATEGORY_SOCIAL = "social"

CATEGORY_LABELS = {
    CATEGORY_BASIC: "Basic SEO",
    CATEGORY_ADVANCED: "Advanced SEO",
    CATEGORY_KEYWORDS: "Keywords & Backlinks",
    CATEGORY_PERFORMANCE: "Performance",
    CATEGORY_LOCAL: "Local SEO",
    CATEGORY_SOCIAL: "Social",
}

NARRATIVE_FIELDS = ("summary", "recommendations", "action_plan")


class OnPageSeo(TypedDict, total=False):
    title: str
    meta_description: str
    h1_tags: list[str]
    h2_tags: list[str]
    h3_tags: list[str]
    h4_tags: list[str]


class SocialProfiles(TypedDict, total=False):
    facebook: Optional[str]
    twitter: Optional[str]
    instagram: Optional[str]
    linkedin: Optional[str]
    youtube: Optional[str]


class TechnicalSeo(TypedDict, total=False):
    canonical_tag: str
    noindex: bool
    robots_txt_exists: bool
    https: bool
    sitemap_exists: bool
    sitemap_url: str
    llms_txt: bool
    has_analytics: bool
    analytics_found: list[str]
    schema_markup: bool
    schema_types: list[str]
    identity_schema: bool
    viewport_meta: bool
    load_time: float
    page_size_mb: float
    amp_enabled: bool
    has_contact_info: bool
    local_business_schema: bool
    google_business_verified: bool
    social: SocialProfiles
    facebook_pixel: bool
    youtube_active: bool


class ContentAnalysis(TypedDict, total=False):
    word_count: float
    images_without_alt: float
    total_images: float
    llm_readable: bool
    keywords: dict


class InternalLinking(TypedDict, total=False):
    top_linked_pages: list[dict]


class Backlinks(TypedDict, total=False):
    total_backlinks: float
    unique_domains: float
    top_backlinks: list[dict]
    top_anchors: list[dict]
    top_countries: list[dict]


class ScrapedReportData(TypedDict, total=False):
    """Pre-computed crawl metrics for one audited URL. Every field is optional."""

    on_page_seo: OnPageSeo
    technical_seo: TechnicalSeo
    content_analysis: ContentAnalysis
    internal_linking: InternalLinking
    backlinks: Backlinks


class ReportRecord(TypedDict):
    """Stored report as returned by database.get_report."""

    url: str
    seo_score: Optional[float]
    scraped_data: Optional[dict]
    ai_report: Optional[dict]
    created_at: str


class CheckResult(TypedDict):
    """Outcome of a single audit rule."""

    check_id: str
    label: str
    category: str
    status: str
    value: str
    recommendation: Optional[str]


class CategorySummary(TypedDict):
    label: str
    status: str
    total: int
    counts: dict[str, int]


class AuditReport(TypedDict):
    """Evaluated report handed to the rendering layer. JSON-serializable."""

    url: str
    overall_score: Optional[int]
    score_band: Optional[str]
    category_results: dict[str, list[CheckResult]]
    category_summary: dict[str, CategorySummary]
    status_counts: dict[str, int]
    narrative: dict[str, str]
    insights: dict
