"""
PDF generation service for Fixing Maritime backend.
Handles invoice PDF generation using ReportLab.
"""
from io import BytesIO
from datetime import datetime
from fastapi.responses import StreamingResponse
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.enums import TA_RIGHT

from database import Store
from services.invoice_service import get_invoice_or_404

COMPANY_NAME = "Fixing Maritime"
COMPANY_TAGLINE = "Your Gateway to Global Maritime Solutions"


def format_currency(amount, currency="NGN"):
    """Format currency amount"""
    if amount is None:
        return "-"
    symbols = {"USD": "$", "EUR": "€", "GBP": "£"}
    symbol = symbols.get(currency, currency)
    return f"{symbol} {float(amount):,.2f}"


def format_date(value) -> str:
    if not value:
        return "-"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value[:10]
    return value.strftime("%d/%m/%Y")


def _line_items(invoice: dict) -> list:
    items = invoice.get("items") or []
    if items:
        return items
    return [{
        "description": invoice.get("service_name") or invoice.get("description", ""),
        "quantity": 1,
        "unit_price": invoice.get("amount", 0),
        "amount": invoice.get("amount", 0),
    }]


def render_invoice_pdf(invoice: dict) -> bytes:
    """Lay out a single invoice on an A4 page and return the PDF bytes."""
    currency = invoice.get("currency", "NGN")
    invoice_number = invoice.get("invoice_number", "")

    navy = colors.HexColor("#0B3D6B")
    light_gray = colors.HexColor("#F5F5F5")

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=A4, leftMargin=15*mm, rightMargin=15*mm, topMargin=15*mm, bottomMargin=12*mm,
        title=f"Invoice {invoice_number}",
    )

    def S(name, **kw):
        return ParagraphStyle(name=name, **kw)

    p_normal = S("p_normal", fontSize=9, fontName="Helvetica", leading=12)
    p_bold = S("p_bold", fontSize=9, fontName="Helvetica-Bold", leading=12)
    p_right = S("p_right", fontSize=9, fontName="Helvetica", alignment=TA_RIGHT, leading=12)
    p_right_bold = S("p_right_bold", fontSize=9, fontName="Helvetica-Bold", alignment=TA_RIGHT, leading=12)
    p_title = S("p_title", fontSize=16, fontName="Helvetica-Bold", textColor=navy, leading=20)
    p_tagline = S("p_tagline", fontSize=9, fontName="Helvetica-Oblique", textColor=navy, leading=12)

    elements = []
    pw = 180 * mm

    # Header: company left | invoice info right
    left = [Paragraph(COMPANY_NAME, p_title), Paragraph(COMPANY_TAGLINE, p_tagline)]
    right = [
        Paragraph(f"<b>INVOICE NO:</b> {invoice_number}", p_right_bold),
        Paragraph(f"<b>Date:</b> {format_date(invoice.get('created_at'))}", p_right),
        Paragraph(f"<b>Due:</b> {format_date(invoice.get('due_date'))}", p_right),
        Paragraph(f"<b>Status:</b> {str(invoice.get('status', '')).upper()}", p_right),
    ]
    header = Table([[left, right]], colWidths=[pw * 0.55, pw * 0.45])
    header.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    elements.append(header)
    elements.append(Spacer(1, 6*mm))

    # Bill to
    bill_to = [
        [Paragraph(f"<b>Bill to:</b>  {invoice.get('customer_name', '')}", p_normal),
         Paragraph(f"<b>Email:</b>  {invoice.get('customer_email', '')}", p_normal)],
        [Paragraph(f"<b>Phone:</b>  {invoice.get('customer_phone') or '-'}", p_normal),
         Paragraph(f"<b>Address:</b>  {invoice.get('customer_address') or '-'}", p_normal)],
    ]
    bill_t = Table(bill_to, colWidths=[pw / 2, pw / 2])
    bill_t.setStyle(TableStyle([
        ("BOX", (0, 0), (-1, -1), 0.8, colors.black),
        ("INNERGRID", (0, 0), (-1, -1), 0.4, colors.HexColor("#CCCCCC")),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]))
    elements.append(bill_t)
    elements.append(Spacer(1, 5*mm))

    # Items
    tbl_data = [["#", "Description", "Qty", "Unit price", "Amount"]]
    for idx, item in enumerate(_line_items(invoice), 1):
        tbl_data.append([
            str(idx),
            Paragraph(str(item.get("description", "")), p_normal),
            str(item.get("quantity", 1)),
            format_currency(item.get("unit_price"), currency),
            format_currency(item.get("amount"), currency),
        ])
    items_t = Table(tbl_data, colWidths=[10*mm, 90*mm, 15*mm, 32*mm, 33*mm], repeatRows=1)
    ts = TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), navy),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.4, colors.HexColor("#DDDDDD")),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ])
    # Alternate row shading
    for i in range(2, len(tbl_data), 2):
        ts.add("BACKGROUND", (0, i), (-1, i), light_gray)
    items_t.setStyle(ts)
    elements.append(items_t)
    elements.append(Spacer(1, 5*mm))

    # Totals
    totals_rows = [
        [Paragraph("Subtotal:", p_bold), Paragraph(format_currency(invoice.get("amount"), currency), p_right)],
        [Paragraph("Tax:", p_bold), Paragraph(format_currency(invoice.get("tax", 0), currency), p_right)],
        [Paragraph("<b>Total:</b>", p_bold), Paragraph(f"<b>{format_currency(invoice.get('total'), currency)}</b>", p_right_bold)],
    ]
    if invoice.get("paid_at"):
        totals_rows.append([
            Paragraph("Paid:", p_bold),
            Paragraph(f"{format_date(invoice['paid_at'])} {invoice.get('payment_method') or ''}", p_right),
        ])
    totals_t = Table(totals_rows, colWidths=[35*mm, 45*mm], hAlign="RIGHT")
    totals_t.setStyle(TableStyle([
        ("LINEABOVE", (0, 2), (-1, 2), 1, colors.black),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]))
    elements.append(totals_t)

    if invoice.get("notes"):
        elements.append(Spacer(1, 6*mm))
        elements.append(Paragraph("<b>Notes:</b>", p_bold))
        elements.append(Paragraph(str(invoice["notes"]), p_normal))

    elements.append(Spacer(1, 8*mm))
    elements.append(Paragraph(
        f"Please use invoice number {invoice_number} as your payment reference.", p_normal
    ))

    doc.build(elements)
    return buffer.getvalue()


async def generate_invoice_pdf(store: Store, invoice_id: str) -> StreamingResponse:
    """Generate the invoice PDF as a download response."""
    invoice = await get_invoice_or_404(store, invoice_id)
    buffer = BytesIO(render_invoice_pdf(invoice))
    return StreamingResponse(
        buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=Invoice-{invoice['invoice_number']}.pdf"},
    )
