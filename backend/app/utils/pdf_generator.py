"""
PDF exports using ReportLab: the monthly collection report (admin) and the
tenant payment statement.
"""
import io
from datetime import date, datetime

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import (
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

HEADER_COLOR = colors.HexColor("#1f6f43")
LIGHT_GRAY = colors.HexColor("#f5f5f5")
DARK_GRAY = colors.HexColor("#333333")
ALERT_RED = colors.HexColor("#b42318")

PROPERTY_NAME = "Kwa Kamande"


def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name="ReportTitle",
        fontSize=14,
        fontName="Helvetica-Bold",
        textColor=colors.white,
        spaceAfter=6,
    ))
    styles.add(ParagraphStyle(
        name="SectionTitle",
        fontSize=10,
        fontName="Helvetica-Bold",
        textColor=HEADER_COLOR,
        spaceBefore=8,
        spaceAfter=4,
    ))
    styles.add(ParagraphStyle(
        name="FieldLabel",
        fontSize=8,
        fontName="Helvetica",
        textColor=DARK_GRAY,
    ))
    styles.add(ParagraphStyle(
        name="Footnote",
        fontSize=7,
        fontName="Helvetica-Oblique",
        textColor=colors.gray,
    ))
    return styles


def _money(amount, currency: str) -> str:
    return f"{currency} {amount:,.0f}"


def _header_table(title: str, subtitle: str, styles) -> Table:
    data = [
        [
            Paragraph(f"<b>{title}</b>", styles["ReportTitle"]),
            Paragraph(subtitle, styles["FieldLabel"]),
        ]
    ]
    t = Table(data, colWidths=[11 * cm, 6 * cm])
    t.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("TOPPADDING", (0, 0), (-1, 0), 8),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
        ("LEFTPADDING", (0, 0), (-1, 0), 6),
    ]))
    return t


def _kv_table(rows: list[tuple[str, str]], styles) -> Table:
    """Render a list of (label, value) pairs as a two-column table."""
    data = [[Paragraph(k, styles["FieldLabel"]), Paragraph(str(v), styles["FieldLabel"])]
            for k, v in rows]
    t = Table(data, colWidths=[9 * cm, 8 * cm])
    t.setStyle(TableStyle([
        ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
        ("ROWBACKGROUNDS", (0, 0), (-1, -1), [colors.white, LIGHT_GRAY]),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ("LEFTPADDING", (0, 0), (-1, -1), 4),
    ]))
    return t


def _grid_table(header: list[str], rows: list[list[str]], col_widths: list[float]) -> Table:
    t = Table([header] + rows, colWidths=col_widths, repeatRows=1)
    t.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, LIGHT_GRAY]),
        ("ALIGN", (-1, 1), (-1, -1), "RIGHT"),
    ]))
    return t


def _document(buf: io.BytesIO) -> SimpleDocTemplate:
    return SimpleDocTemplate(buf, pagesize=A4, rightMargin=2 * cm, leftMargin=2 * cm,
                             topMargin=2 * cm, bottomMargin=2 * cm)


def generate_collection_report_pdf(data: dict) -> bytes:
    """One-page collection report for a month: totals, then who still owes what."""
    currency = data.get("currency", "KSh")
    buf = io.BytesIO()
    doc = _document(buf)
    styles = _styles()

    story = [
        _header_table(
            f"Rent Collection {data['month_year']}",
            f"{PROPERTY_NAME}<br/>Status: {data.get('status', '')}",
            styles,
        ),
        Spacer(1, 0.4 * cm),
        Paragraph("SUMMARY", styles["SectionTitle"]),
        _kv_table([
            ("Expected", _money(data.get("expected_total", 0), currency)),
            ("Collected", _money(data.get("paid_total", 0), currency)),
            ("Remaining", _money(data.get("display_remaining", 0), currency)),
            ("Tenants paid", f"{data.get('paid_tenants', 0)} / {data.get('assigned_tenants', 0)}"),
            ("Collection rate", f"{data.get('collection_rate', 0):.1f} %"),
        ], styles),
        Spacer(1, 0.3 * cm),
        Paragraph("UNPAID TENANTS", styles["SectionTitle"]),
    ]

    unpaid = data.get("unpaid_tenants", [])
    if unpaid:
        rows = [
            [
                u["tenant_name"],
                u["room_name"],
                _money(u["expected_amount"], currency),
                _money(u["paid_amount"], currency),
                _money(u["outstanding"], currency),
            ]
            for u in unpaid
        ]
        story.append(_grid_table(
            ["Tenant", "Room", "Expected", "Paid", "Outstanding"],
            rows,
            [5 * cm, 3 * cm, 3 * cm, 3 * cm, 3 * cm],
        ))
    else:
        story.append(Paragraph("All tenants have paid for this month.", styles["FieldLabel"]))

    story += [
        Spacer(1, 0.5 * cm),
        Paragraph(f"Report generated on {date.today().strftime('%d/%m/%Y')}.", styles["Footnote"]),
    ]
    doc.build(story)
    return buf.getvalue()


def generate_tenant_statement_pdf(data: dict, generated_on: datetime | None = None) -> bytes:
    """Payment statement for one tenant, most recent month first."""
    currency = data.get("currency", "KSh")
    house = data.get("house")
    buf = io.BytesIO()
    doc = _document(buf)
    styles = _styles()

    story = [
        _header_table("Rent Payment Statement", PROPERTY_NAME, styles),
        Spacer(1, 0.4 * cm),
        Paragraph("TENANT", styles["SectionTitle"]),
        _kv_table([
            ("Name", data.get("tenant_name") or ""),
            ("Room", house["room_name"] if house else "No house assigned"),
            ("Monthly rent", _money(house["price"], currency) if house else "-"),
        ], styles),
        Spacer(1, 0.3 * cm),
        Paragraph("PAYMENT HISTORY", styles["SectionTitle"]),
    ]

    months = data.get("months", [])
    if months:
        rows = []
        for m in months:
            payment = m.get("payment")
            rows.append([
                f"{m['month_name']} {m['month_year'][:4]}",
                m["status"],
                str(payment["payment_date"]) if payment else "-",
                _money(payment["amount"], currency) if payment else "-",
                _money(m["penalty"], currency),
                _money(m["total_due"], currency),
            ])
        table = _grid_table(
            ["Month", "Status", "Paid on", "Amount", "Penalty", "Due"],
            rows,
            [3.5 * cm, 2.5 * cm, 2.5 * cm, 3 * cm, 2.5 * cm, 3 * cm],
        )
        for i, m in enumerate(months, start=1):
            if m["total_due"] > 0:
                table.setStyle(TableStyle([("TEXTCOLOR", (-1, i), (-1, i), ALERT_RED)]))
        story.append(table)
    else:
        story.append(Paragraph("No billable months yet.", styles["FieldLabel"]))

    generated_on = generated_on or datetime.now()
    story += [
        Spacer(1, 0.5 * cm),
        Paragraph(
            f"Statement generated on {generated_on.strftime('%d/%m/%Y %H:%M')}. "
            "Rent is due on the 1st; late payments carry a flat penalty.",
            styles["Footnote"],
        ),
    ]
    doc.build(story)
    return buf.getvalue()
