"""Pydantic schemas for API request/response."""

import math
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from models import NARRATIVE_FIELDS
from report_data import normalize_report_data


class CreateReportRequest(BaseModel):
    """Request body for POST /reports. Produced by the crawler/report generator."""

    url: str = Field(min_length=1)
    seo_score: Optional[float] = None
    scraped_data: Optional[dict] = None
    ai_report: Optional[dict] = None

    @field_validator("url", mode="before")
    @classmethod
    def normalize_url(cls, value: object) -> str:
        return str(value or "").strip()

    @field_validator("seo_score", mode="before")
    @classmethod
    def normalize_score(cls, value: object) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            score = float(value)
        except (TypeError, ValueError, OverflowError):
            return None
        return score if math.isfinite(score) else None

    @field_validator("scraped_data", mode="before")
    @classmethod
    def normalize_scraped_data(cls, value: object) -> dict | None:
        return normalize_report_data(value)

    @field_validator("ai_report", mode="before")
    @classmethod
    def normalize_ai_report(cls, value: object) -> dict | None:
        if not isinstance(value, dict):
            return None
        return {field: value[field] for field in NARRATIVE_FIELDS if isinstance(value.get(field), str)}


class CreateReportResponse(BaseModel):
    """Response for POST /reports."""

    report_id: int


class CheckResultItem(BaseModel):
    """Single evaluated audit check."""

    check_id: str
    label: str
    category: str
    status: str
    value: str
    recommendation: Optional[str] = None


class CategorySummaryItem(BaseModel):
    """Status rollup for one category."""

    label: str
    status: str
    total: int
    counts: dict[str, int]


class AuditReportResponse(BaseModel):
    """Evaluated report returned by GET /reports/{id}."""

    report_id: int
    url: str
    overall_score: Optional[int]
    score_band: Optional[str]
    category_results: dict[str, list[CheckResultItem]]
    category_summary: dict[str, CategorySummaryItem]
    status_counts: dict[str, int]
    narrative: dict[str, str]
    insights: dict


class ShareLinkResponse(BaseModel):
    """Shareable link for a report."""

    url: str
    title: str
    text: str


class ReportHistoryItem(BaseModel):
    """Summary row for history list."""

    id: int
    url: str
    seo_score: Optional[float]
    created_at: str
