"""SQLite database setup and report storage.

Table: reports
- id (integer, primary key)
- url (text)
- seo_score (real, nullable)
- scraped_data (text, JSON or NULL)
- ai_report (text, JSON or NULL)
- created_at (datetime)
"""

import json
import logging
import os
import sqlite3
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

logger = logging.getLogger(__name__)

DB_PATH = Path(os.getenv("REPORTS_DB_PATH", "").strip() or Path(__file__).parent / "reports.db")


def get_connection() -> sqlite3.Connection:
    """Return a connection to the SQLite database."""
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def _dump(value: dict | None) -> str | None:
    return None if value is None else json.dumps(value)


def _load(raw: str | None) -> dict | None:
    if raw is None:
        return None
    try:
        parsed = json.loads(raw)
    except ValueError:
        logger.warning("Stored report column is not valid JSON, treating it as missing")
        return None
    return parsed if isinstance(parsed, dict) else None


def init_db() -> None:
    """Create the reports table if it does not exist."""
    conn = get_connection()
    try:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS reports (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                url TEXT NOT NULL,
                seo_score REAL,
                scraped_data TEXT,
                ai_report TEXT,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.commit()
    finally:
        conn.close()


def insert_report(
    url: str,
    seo_score: float | None,
    scraped_data: dict | None,
    ai_report: dict | None,
) -> int:
    """Store a new report snapshot and return its id."""
    conn = get_connection()
    try:
        cursor = conn.execute(
            """
            INSERT INTO reports (url, seo_score, scraped_data, ai_report, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (url, seo_score, _dump(scraped_data), _dump(ai_report), datetime.utcnow().isoformat()),
        )
        conn.commit()
        return cursor.lastrowid
    finally:
        conn.close()


def get_report(report_id: int) -> dict | None:
    """Fetch a report by id. Returns the parsed record or None."""
    conn = get_connection()
    try:
        row = conn.execute(
            """
            SELECT url, seo_score, scraped_data, ai_report, created_at
            FROM reports WHERE id = ?
            """,
            (report_id,),
        ).fetchone()
        if row is None:
            return None
        return {
            "url": row["url"],
            "seo_score": row["seo_score"],
            "scraped_data": _load(row["scraped_data"]),
            "ai_report": _load(row["ai_report"]),
            "created_at": row["created_at"],
        }
    finally:
        conn.close()


def list_reports(limit: int = 20) -> list[dict]:
    """Return recent reports for the history view."""
    safe_limit = max(1, min(100, int(limit)))
    conn = get_connection()
    try:
        rows = conn.execute(
            """
            SELECT id, url, seo_score, created_at
            FROM reports
            ORDER BY id DESC
            LIMIT ?
            """,
            (safe_limit,),
        ).fetchall()
        return [
            {
                "id": row["id"],
                "url": row["url"],
                "seo_score": row["seo_score"],
                "created_at": row["created_at"],
            }
            for row in rows
        ]
    finally:
        conn.close()
