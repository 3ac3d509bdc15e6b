"""Safe access to stored crawl snapshots.

Snapshots arrive from the report service as loosely shaped JSON. Every field
is optional, and a field holding the wrong type is treated exactly like a
missing one. Rules read fields only through get_field so that the defaulting
policy lives in one place.
"""

import copy
from typing import Any

from models import ScrapedReportData

STR = "str"
BOOL = "bool"
NUMBER = "number"
STR_LIST = "str_list"
DICT_LIST = "dict_list"
MAPPING = "mapping"

TYPE_DEFAULTS: dict[str, Any] = {
    STR: "",
    BOOL: False,
    NUMBER: 0,
    STR_LIST: [],
    DICT_LIST: [],
    MAPPING: {},
}

FIELD_TYPES: dict[str, dict[str, str]] = {
    "on_page_seo": {
        "title": STR,
        "meta_description": STR,
        "h1_tags": STR_LIST,
        "h2_tags": STR_LIST,
        "h3_tags": STR_LIST,
        "h4_tags": STR_LIST,
    },
    "technical_seo": {
        "canonical_tag": STR,
        "noindex": BOOL,
        "robots_txt_exists": BOOL,
        "https": BOOL,
        "sitemap_exists": BOOL,
        "sitemap_url": STR,
        "llms_txt": BOOL,
        "has_analytics": BOOL,
        "analytics_found": STR_LIST,
        "schema_markup": BOOL,
        "schema_types": STR_LIST,
        "identity_schema": BOOL,
        "viewport_meta": BOOL,
        "load_time": NUMBER,
        "page_size_mb": NUMBER,
        "amp_enabled": BOOL,
        "has_contact_info": BOOL,
        "local_business_schema": BOOL,
        "google_business_verified": BOOL,
        "social": MAPPING,
        "facebook_pixel": BOOL,
        "youtube_active": BOOL,
    },
    "content_analysis": {
        "word_count": NUMBER,
        "images_without_alt": NUMBER,
        "total_images": NUMBER,
        "llm_readable": BOOL,
        "keywords": MAPPING,
    },
    "internal_linking": {
        "top_linked_pages": DICT_LIST,
    },
    "backlinks": {
        "total_backlinks": NUMBER,
        "unique_domains": NUMBER,
        "top_backlinks": DICT_LIST,
        "top_anchors": DICT_LIST,
        "top_countries": DICT_LIST,
    },
}

SOCIAL_PLATFORMS = ("facebook", "twitter", "instagram", "linkedin", "youtube")

_MISSING = object()


def _is_number(value: object) -> bool:
    # bool is an int subclass; a flag is never a measurement.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _coerce(value: object, kind: str) -> object:
    """Return value if it has the expected kind, else _MISSING."""
    if kind == STR:
        return value if isinstance(value, str) else _MISSING
    if kind == BOOL:
        return value if isinstance(value, bool) else _MISSING
    if kind == NUMBER:
        return value if _is_number(value) else _MISSING
    if kind == STR_LIST:
        if not isinstance(value, (list, tuple)):
            return _MISSING
        return [item for item in value if isinstance(item, str)]
    if kind == DICT_LIST:
        if not isinstance(value, (list, tuple)):
            return _MISSING
        return [dict(item) for item in value if isinstance(item, dict)]
    if kind == MAPPING:
        return dict(value) if isinstance(value, dict) else _MISSING
    return _MISSING


def get_field(data: object, section: str, key: str, default: Any = _MISSING) -> Any:
    """
    Return data[section][key] when present and well-typed.
    Otherwise return `default`, or the typed default of the field ("", False, 0, [] or {}).
    Lists and mappings are returned as fresh copies.
    """
    kind = FIELD_TYPES.get(section, {}).get(key)
    if default is _MISSING:
        default = copy.copy(TYPE_DEFAULTS[kind]) if kind else None

    if not isinstance(data, dict):
        return default
    section_data = data.get(section)
    if not isinstance(section_data, dict) or key not in section_data:
        return default

    if kind is None:
        return section_data[key]
    value = _coerce(section_data[key], kind)
    return default if value is _MISSING else value


def get_social_profile(data: object, platform: str) -> str:
    """Profile URL for `platform`, or "" when not linked."""
    profile = get_field(data, "technical_seo", "social").get(platform)
    return profile.strip() if isinstance(profile, str) else ""


def get_primary_keywords(data: object) -> list[dict]:
    keywords = get_field(data, "content_analysis", "keywords")
    primary = _coerce(keywords.get("primary"), DICT_LIST)
    return [] if primary is _MISSING else primary


def normalize_report_data(raw: object) -> ScrapedReportData | None:
    """
    Validate a raw snapshot without ever failing.

    None means "report not found" and is returned as None. Anything that is not
    a mapping becomes an empty snapshot. Unknown sections and fields of the wrong
    type are dropped; the result is a new dict sharing nothing with `raw`.
    """
    if raw is None:
        return None
    if not isinstance(raw, dict):
        return {}

    normalized: dict[str, dict] = {}
    for section, fields in FIELD_TYPES.items():
        section_data = raw.get(section)
        if not isinstance(section_data, dict):
            continue

        cleaned: dict[str, Any] = {}
        for key, kind in fields.items():
            if key not in section_data:
                continue
            value = _coerce(section_data[key], kind)
            if value is not _MISSING:
                cleaned[key] = copy.deepcopy(value)

        if "social" in cleaned:
            cleaned["social"] = {
                platform: url
                for platform, url in cleaned["social"].items()
                if platform in SOCIAL_PLATFORMS and (url is None or isinstance(url, str))
            }
        if "keywords" in cleaned:
            primary = _coerce(cleaned["keywords"].get("primary"), DICT_LIST)
            cleaned["keywords"] = {"primary": [] if primary is _MISSING else primary}

        normalized[section] = cleaned

    return normalized
