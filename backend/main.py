"""SEO Audit Report API – FastAPI app serving evaluated audit reports."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware

from audit_service import evaluate_report
from database import get_report, init_db, insert_report, list_reports
from report_pdf import build_report_pdf
from schemas import (
    AuditReportResponse,
    CreateReportRequest,
    CreateReportResponse,
    ReportHistoryItem,
    ShareLinkResponse,
)

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN", "http://localhost:3000").strip()
CORS_ALLOW_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if origin.strip()
]

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SEO Audit Report API",
    description="Stores crawl snapshots and serves evaluated SEO audit reports",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def build_share_url(origin: str, report_id: int) -> str:
    return f"{origin.rstrip('/')}/reports/{report_id}"


def _load_report(report_id: int) -> dict:
    record = get_report(report_id)
    if record is None:
        logger.info(f"Report {report_id} not found")
        raise HTTPException(status_code=404, detail="Report not found")
    return record


@app.on_event("startup")
def startup() -> None:
    init_db()


@app.post("/reports", response_model=CreateReportResponse)
def create_report(body: CreateReportRequest) -> CreateReportResponse:
    """Store a crawl snapshot with its score and AI narrative."""
    report_id = insert_report(
        url=body.url,
        seo_score=body.seo_score,
        scraped_data=body.scraped_data,
        ai_report=body.ai_report,
    )
    logger.info(f"Stored report {report_id} for {body.url}")
    return CreateReportResponse(report_id=report_id)


@app.get("/reports", response_model=list[ReportHistoryItem])
def get_reports(limit: int = 20) -> list[ReportHistoryItem]:
    """Return recent reports for frontend history page."""
    return [ReportHistoryItem(**row) for row in list_reports(limit=limit)]


@app.get("/reports/{report_id}", response_model=AuditReportResponse)
def get_audit_report(report_id: int) -> AuditReportResponse:
    """Evaluate the stored snapshot. Every call builds a fresh report."""
    audit = evaluate_report(_load_report(report_id))
    return AuditReportResponse(report_id=report_id, **audit)


@app.get("/reports/{report_id}/share", response_model=ShareLinkResponse)
def share_report(report_id: int) -> ShareLinkResponse:
    """Return the public link and share text for a report."""
    record = _load_report(report_id)
    return ShareLinkResponse(
        url=build_share_url(FRONTEND_ORIGIN, report_id),
        title="SEO Audit Report",
        text=f"Check out my SEO audit report for {record['url']}",
    )


@app.get("/reports/{report_id}/export/pdf")
def export_report_pdf(report_id: int) -> Response:
    """Download the evaluated report as a PDF."""
    audit = evaluate_report(_load_report(report_id))
    pdf_bytes = build_report_pdf(report_id=report_id, report=audit)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="SEO-Report-{report_id}.pdf"'},
    )


@app.get("/health")
def health() -> dict:
    """Health check for deployment."""
    return {"status": "ok"}
