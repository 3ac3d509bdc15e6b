import pytest
from fastapi.testclient import TestClient

import database
import main


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(database, "DB_PATH", tmp_path / "reports.db")
    monkeypatch.setattr(main, "FRONTEND_ORIGIN", "https://audits.example/")
    with TestClient(main.app) as test_client:
        yield test_client


def _create(client, **body):
    payload = {"url": "https://acme.example/", **body}
    response = client.post("/reports", json=payload)
    assert response.status_code == 200
    return response.json()["report_id"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_store_and_fetch_evaluated_report(client, full_snapshot):
    report_id = _create(
        client,
        seo_score=84,
        scraped_data=full_snapshot,
        ai_report={"summary": "Looks good.", "action_plan": "Week 1: add FAQ"},
    )

    response = client.get(f"/reports/{report_id}")
    assert response.status_code == 200
    body = response.json()
    assert body["report_id"] == report_id
    assert body["overall_score"] == 84
    assert body["score_band"] == "good"
    assert body["narrative"] == {"summary": "Looks good.", "action_plan": "Week 1: add FAQ"}
    backlinks = body["category_results"]["keywords"][0]
    assert backlinks["value"] == "15 total backlinks from 4 domains"
    assert backlinks["recommendation"] is None


def test_partial_and_malformed_snapshot_is_accepted(client):
    report_id = _create(
        client,
        seo_score="n/a",
        scraped_data={"on_page_seo": {"title": 5, "h1_tags": ["A", "B"]}, "technical_seo": "oops"},
        ai_report="not an object",
    )

    body = client.get(f"/reports/{report_id}").json()
    basic = {item["check_id"]: item for item in body["category_results"]["basic"]}
    assert body["overall_score"] is None
    assert body["narrative"] == {}
    assert basic["meta_title"]["value"] == "Not found"
    assert basic["h1_tag"]["value"] == 'Found 2: "A", "B"'


def test_missing_url_is_rejected(client):
    assert client.post("/reports", json={"url": "   "}).status_code == 422


def test_unknown_report_is_not_found(client):
    for path in ("/reports/999", "/reports/999/share", "/reports/999/export/pdf"):
        response = client.get(path)
        assert response.status_code == 404
        assert response.json()["detail"] == "Report not found"


def test_share_link(client):
    report_id = _create(client)
    body = client.get(f"/reports/{report_id}/share").json()
    assert body == {
        "url": f"https://audits.example/reports/{report_id}",
        "title": "SEO Audit Report",
        "text": "Check out my SEO audit report for https://acme.example/",
    }


def test_export_pdf(client, full_snapshot):
    report_id = _create(client, scraped_data=full_snapshot)
    response = client.get(f"/reports/{report_id}/export/pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert f"SEO-Report-{report_id}.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_history_lists_newest_first(client):
    first = _create(client, seo_score=40)
    second = _create(client, url="https://other.example/")
    rows = client.get("/reports").json()
    assert [row["id"] for row in rows] == [second, first]
    assert rows[0]["seo_score"] is None
    assert rows[1]["seo_score"] == 40


def test_oversized_score_is_stored_unscored(client):
    response = client.post(
        "/reports",
        content='{"url": "https://acme.example/", "seo_score": 1' + "0" * 400 + "}",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 200

    body = client.get(f"/reports/{response.json()['report_id']}").json()
    assert body["overall_score"] is None
