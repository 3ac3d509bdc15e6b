import pytest


@pytest.fixture
def full_snapshot() -> dict:
    """A snapshot where every check is satisfied."""
    return {
        "on_page_seo": {
            "title": "Acme Plumbing | Emergency Plumbers in Springfield, 24/7",
            "meta_description": (
                "Acme Plumbing provides licensed emergency plumbers in Springfield. "
                "Fast response, upfront pricing and guaranteed repairs for homes and offices. Call today."
            ),
            "h1_tags": ["Emergency Plumbers in Springfield"],
            "h2_tags": ["Services", "Pricing"],
            "h3_tags": ["Leak repair"],
            "h4_tags": [],
        },
        "technical_seo": {
            "canonical_tag": "https://acme.example/",
            "noindex": False,
            "robots_txt_exists": True,
            "https": True,
            "sitemap_exists": True,
            "sitemap_url": "https://acme.example/sitemap.xml",
            "llms_txt": True,
            "has_analytics": True,
            "analytics_found": ["Google Analytics 4", "Plausible"],
            "schema_markup": True,
            "schema_types": ["Organization", "LocalBusiness"],
            "identity_schema": True,
            "viewport_meta": True,
            "load_time": 1.42,
            "page_size_mb": 1.8,
            "amp_enabled": True,
            "has_contact_info": True,
            "local_business_schema": True,
            "google_business_verified": True,
            "social": {
                "facebook": "https://facebook.com/acme",
                "twitter": "https://x.com/acme",
                "instagram": "https://instagram.com/acme",
                "linkedin": "https://linkedin.com/company/acme",
                "youtube": "https://youtube.com/@acme",
            },
            "facebook_pixel": True,
            "youtube_active": True,
        },
        "content_analysis": {
            "word_count": 1450,
            "images_without_alt": 0,
            "total_images": 12,
            "llm_readable": True,
            "keywords": {"primary": [{"keyword": "plumber", "count": 14}]},
        },
        "internal_linking": {
            "top_linked_pages": [{"url": f"https://acme.example/p{i}", "links": 10 - i} for i in range(7)],
        },
        "backlinks": {
            "total_backlinks": 15,
            "unique_domains": 4,
            "top_backlinks": [
                {"url": "https://news.example/acme", "domain": "news.example", "authority": 61}
            ],
            "top_anchors": [{"text": "acme plumbing", "count": 6}],
            "top_countries": [{"name": "United States", "count": 3}],
        },
    }
