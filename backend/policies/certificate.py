# policies/certificate.py
import logging
import os
from io import BytesIO

from django.conf import settings

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from pypdf import PdfReader, PdfWriter

from .catalog import FEATURES as SERVICE_FEATURES
from .words import amount_in_words

logger = logging.getLogger(__name__)

HEADER_BLUE = colors.Color(0, 51 / 255, 153 / 255)
HEADER_TEAL = colors.Color(26 / 255, 188 / 255, 156 / 255)

NOTE = "Note: This is a computer-generated policy document and does not require a signature."


def _fmt_date(value):
    return value.strftime("%d/%m/%Y") if value else "N/A"


def _fmt_money(value):
    if value in (None, ""):
        return "N/A"
    return f"INR {float(value):,.2f}"


def certificate_filename(policy) -> str:
    return f"Policy_{policy.policy_number or policy.id}.pdf"


def _grid(head_color, font_size=11):
    return TableStyle(
        [
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("BACKGROUND", (0, 0), (-1, 0), head_color),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), font_size),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]
    )


def _section(title, rows, width):
    table = Table([[title, ""]] + rows, colWidths=[width * 0.35, width * 0.65])
    style = _grid(HEADER_BLUE)
    style.add("SPAN", (0, 0), (-1, 0))
    table.setStyle(style)
    return table


def _build_story(policy, width):
    customer = policy.customer
    styles = getSampleStyleSheet()
    amount = policy.amount

    certificate = Table(
        [
            ["Certificate Start Date", "Certificate End Date", "Vehicle Registration Number"],
            [
                _fmt_date(policy.start_date),
                _fmt_date(policy.expiry_date),
                getattr(customer, "vehicle_number", "") or "N/A",
            ],
        ],
        colWidths=[width / 3] * 3,
    )
    certificate.setStyle(_grid(HEADER_TEAL))

    address = getattr(customer, "address", "") or "N/A"
    city = getattr(customer, "city", "") or ""
    personal = _section(
        "PERSONAL DETAILS",
        [
            ["Customer Name", getattr(customer, "customer_name", "") or "N/A"],
            ["Mobile No", getattr(customer, "phone_number", "") or "N/A"],
            ["Email", getattr(customer, "email", "") or "N/A"],
            ["Address", f"{address}, {city}".strip(", ") if city else address],
        ],
        width,
    )

    payment = _section(
        "PAYMENT DETAILS",
        [
            ["Policy Number", policy.policy_number],
            ["Policy Type", policy.policy_type or "RSA Policy"],
            ["Duration", policy.duration or "N/A"],
            ["Plan Amount", _fmt_money(amount)],
            ["Total Amount Paid", _fmt_money(amount)],
            ["Amount In Words", amount_in_words(amount)],
        ],
        width,
    )

    features = Table(
        [["S.No", "Service Features", "Included"]]
        + [[str(idx), name, "Yes"] for idx, name in enumerate(SERVICE_FEATURES, start=1)],
        colWidths=[width * 0.12, width * 0.68, width * 0.2],
    )
    features_style = _grid(HEADER_BLUE, font_size=10)
    features_style.add("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke])
    features.setStyle(features_style)

    note_style = styles["Italic"]
    note_style.fontSize = 10

    gap = Spacer(1, 6 * mm)
    return [certificate, gap, personal, gap, payment, gap, features, Spacer(1, 10 * mm), Paragraph(NOTE, note_style)]


def _draw_header(company):
    def _on_page(c, doc):
        width, height = doc.pagesize
        c.saveState()
        c.setFillColor(HEADER_BLUE)
        c.rect(0, height - 15 * mm, width, 15 * mm, stroke=0, fill=1)
        c.setFillColor(colors.white)
        c.setFont("Helvetica-Bold", 18)
        c.drawCentredString(width / 2, height - 11 * mm, company)
        c.restoreState()

    return _on_page


def _merge_on_template(pdf_bytes, template_path):
    writer = PdfWriter()
    overlay = PdfReader(BytesIO(pdf_bytes))
    for overlay_page in overlay.pages:
        # fresh copy of the letterhead per page, merge_page mutates the base
        base_page = PdfReader(template_path).pages[0]
        base_page.merge_page(overlay_page)
        writer.add_page(base_page)
    out_buf = BytesIO()
    writer.write(out_buf)
    return out_buf.getvalue()


def render_certificate(policy, template_pdf=None) -> bytes:
    """
    Renders the RSA certificate for a policy and returns the PDF bytes.
    When a letterhead PDF is configured (CERTIFICATE_TEMPLATE_PDF) the
    certificate is laid over its first page.
    """
    company = getattr(settings, "COMPANY_NAME", "") or "RSA Policy Invoice"
    template_path = template_pdf or getattr(settings, "CERTIFICATE_TEMPLATE_PDF", "")

    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        topMargin=20 * mm,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        title=policy.policy_type or "RSA Policy Invoice",
        author=company,
    )
    doc.build(_build_story(policy, doc.width), onFirstPage=_draw_header(company), onLaterPages=_draw_header(company))
    pdf_bytes = buf.getvalue()

    if template_path and os.path.exists(template_path):
        pdf_bytes = _merge_on_template(pdf_bytes, template_path)
    logger.info(
        "certificate_rendered",
        extra={"policy_id": policy.id, "policy_number": policy.policy_number, "bytes": len(pdf_bytes)},
    )
    return pdf_bytes
