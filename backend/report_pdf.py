"""Plain PDF export of an evaluated audit report."""

from datetime import datetime
import textwrap

from models import CATEGORY_LABELS, NARRATIVE_FIELDS, AuditReport

PAGE_WIDTH = 612
PAGE_HEIGHT = 792
LINES_PER_PAGE = 42
LINE_CHARS = 88

ACCENT = "0.31 0.27 0.90"
MUTED = "0.45 0.45 0.45"
BODY = "0.20 0.20 0.30"

# Object numbers 3 and 4; referenced as /F1 and /F2 by every page.
FONTS = (b"/Helvetica", b"/Helvetica-Bold")

NARRATIVE_TITLES = {
    "summary": "Summary",
    "recommendations": "AI-Powered Recommendations",
    "action_plan": "30-Day Action Plan",
}

_PDF_ESCAPES = str.maketrans({"\\": "\\\\", "(": "\\(", ")": "\\)"})


def _escape_pdf_text(value: str) -> str:
    return value.translate(_PDF_ESCAPES).encode("latin-1", "replace").decode("latin-1")


def _text(x: int, y: int, text: str, *, size: int = 12, bold: bool = False, color: str = BODY) -> str:
    font = "F2" if bold else "F1"
    return f"BT /{font} {size} Tf {color} rg {x} {y} Td ({_escape_pdf_text(text)}) Tj ET"


def _band(y: int, height: int, color: str, x: int = 0, width: int = PAGE_WIDTH) -> str:
    return f"q {color} rg {x} {y} {width} {height} re f Q"


def _assemble_pdf(page_streams: list[bytes]) -> bytes:
    """Serialize catalog, page tree, fonts and pages with a cross-reference table."""
    first_page = 3 + len(FONTS)
    page_numbers = [first_page + 2 * idx for idx in range(len(page_streams))]
    kids = " ".join(f"{num} 0 R" for num in page_numbers)

    objects: list[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {len(page_numbers)} >>".encode("latin-1"),
    ]
    objects += [b"<< /Type /Font /Subtype /Type1 /BaseFont " + name + b" >>" for name in FONTS]
    for page_num, stream in zip(page_numbers, page_streams):
        objects.append(
            (
                f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 {PAGE_WIDTH} {PAGE_HEIGHT}] "
                "/Resources << /Font << /F1 3 0 R /F2 4 0 R >> >> "
                f"/Contents {page_num + 1} 0 R >>"
            ).encode("latin-1")
        )
        objects.append(b"<< /Length %d >>\nstream\n%s\nendstream" % (len(stream), stream))

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n%s\nendobj\n" % (number, body)

    xref_at = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    out += b"".join(b"%010d 00000 n \n" % offset for offset in offsets)
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


def _cover_stream(*, report_id: int, url: str, score: int | None, created_at: str) -> bytes:
    score_text = f"Overall Score: {score}/100" if score is not None else "Overall Score: not scored"
    commands = [
        _band(PAGE_HEIGHT - 86, 86, ACCENT),
        _text(42, 742, "SEO Audit Report", size=30, bold=True, color="1 1 1"),
        _text(42, 650, f"Report ID: {report_id}"),
        _text(42, 628, f"Website: {url}"),
        _text(42, 606, f"Generated: {created_at}"),
        _text(42, 550, score_text, size=18, bold=True, color=ACCENT),
    ]
    return "\n".join(commands).encode("latin-1", "replace")


def _listing_stream(*, lines: list[str], report_id: int, page_number: int, total_pages: int) -> bytes:
    body = " T* ".join(f"({_escape_pdf_text(line)}) Tj" for line in lines)
    commands = [
        _band(748, 26, "0.93 0.94 1", x=30, width=552),
        _text(40, 758, f"SEO Audit Report - #{report_id}", bold=True, color=ACCENT),
        f"BT /F1 10 Tf 0 0 0 rg 40 730 Td 14 TL {body} ET",
        _text(500, 18, f"Page {page_number} of {total_pages}", size=9, color=MUTED),
    ]
    return "\n".join(commands).encode("latin-1", "replace")


def _wrap_lines(values: list[str], max_chars: int = LINE_CHARS) -> list[str]:
    out: list[str] = []
    for value in values:
        if not value:
            out.append("")
            continue
        for paragraph in value.splitlines():
            out.extend(textwrap.wrap(paragraph, width=max_chars) or [""])
    return out


def _report_lines(report: AuditReport) -> list[str]:
    lines: list[str] = []
    summary = report["narrative"].get("summary")
    if summary:
        lines.extend(["Summary", summary, ""])

    for category, results in report["category_results"].items():
        if not results:
            continue
        lines.append(CATEGORY_LABELS.get(category, category.title()))
        for result in results:
            lines.append(f"[{result['status'].upper()}] {result['label']}: {result['value']}")
            if result["recommendation"]:
                lines.append(f"    -> {result['recommendation']}")
        lines.append("")

    for field in NARRATIVE_FIELDS:
        text = report["narrative"].get(field)
        if field != "summary" and text:
            lines.extend([NARRATIVE_TITLES[field], text, ""])
    return lines


def build_report_pdf(*, report_id: int, report: AuditReport) -> bytes:
    """Render the evaluated report as a cover page plus paginated check listing."""
    created = datetime.utcnow().strftime("%Y-%m-%d %H:%M UTC")
    wrapped = _wrap_lines(_report_lines(report))
    chunks = [wrapped[i : i + LINES_PER_PAGE] for i in range(0, len(wrapped), LINES_PER_PAGE)]
    chunks = chunks or [["No data available."]]
    total_pages = len(chunks) + 1

    streams = [
        _cover_stream(
            report_id=report_id,
            url=report["url"],
            score=report["overall_score"],
            created_at=created,
        )
    ]
    streams += [
        _listing_stream(lines=chunk, report_id=report_id, page_number=number, total_pages=total_pages)
        for number, chunk in enumerate(chunks, start=2)
    ]
    return _assemble_pdf(streams)
