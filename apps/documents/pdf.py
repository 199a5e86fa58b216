"""
PDF invoice and receipt (ReportLab). Pure: snapshot dict in, PDF bytes out.
"""

import io
from datetime import date, datetime

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Table, TableStyle

from .snapshots import company

BRAND = colors.HexColor("#2563eb")
GRAY  = colors.HexColor("#6b7280")
DARK  = colors.HexColor("#111827")
LINE  = colors.HexColor("#e5e7eb")
GREEN = colors.HexColor("#16a34a")
RED   = colors.HexColor("#dc2626")


def _fmt_date(d):
    if not d:
        return "-"
    if isinstance(d, (datetime, date)):
        return d.strftime("%d/%m/%Y")
    return str(d)


def _money(v, currency="NGN"):
    # Helvetica has no naira glyph; PDFs spell the currency out
    return f"{currency} {v:,.2f}" if v is not None else "-"


def _header(c, width, height, title, number_label, doc_date, info):
    c.setFillColor(BRAND)
    c.rect(0, height - 28 * mm, width, 28 * mm, stroke=0, fill=1)

    c.setFillColor(colors.white)
    c.setFont("Helvetica-Bold", 11)
    c.drawString(18 * mm, height - 14 * mm, info["name"][:60])
    c.setFont("Helvetica", 8)
    c.drawString(18 * mm, height - 20 * mm, "Cement Distribution & Haulage")

    c.setFont("Helvetica-Bold", 12)
    c.drawRightString(width - 18 * mm, height - 14 * mm, title)
    c.setFont("Helvetica", 9)
    c.drawRightString(width - 18 * mm, height - 20 * mm, f"{number_label} • {_fmt_date(doc_date)}")


def _footer(c, width, info):
    c.setFillColor(LINE)
    c.rect(0, 0, width, 12 * mm, stroke=0, fill=1)
    c.setFillColor(GRAY)
    c.setFont("Helvetica", 8)
    contact = " • ".join(p for p in (info["address"], info["phone"]) if p)
    c.drawString(18 * mm, 4 * mm, contact or info["name"][:80])
    c.drawRightString(width - 18 * mm, 4 * mm, f"Generated: {_fmt_date(date.today())}")


def _finish(c, buf) -> bytes:
    c.showPage()
    c.save()
    pdf = buf.getvalue()
    buf.close()
    return pdf


def render_invoice_pdf(snapshot: dict) -> bytes:
    info = company()
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    width, height = A4

    _header(c, width, height, "INVOICE", f"No. {snapshot['order_number']}", snapshot["date"], info)

    y = height - 40 * mm
    customer = snapshot["customer"]
    c.setFillColor(DARK)
    c.setFont("Helvetica-Bold", 10)
    c.drawString(18 * mm, y, "BILL TO:")
    c.setFont("Helvetica", 9)
    for line in (customer["name"], customer["address"], f"Phone: {customer['phone'] or 'N/A'}",
                 f"Email: {customer['email'] or 'N/A'}"):
        y -= 5 * mm
        c.drawString(18 * mm, y, (line or "")[:90])

    y -= 12 * mm
    data = [
        ["Description", "Qty", "Unit Price", "Amount"],
        [f"{snapshot['cement_type']} ({snapshot['unit']})", f"{snapshot['quantity']}",
         _money(snapshot["unit_price"]), _money(snapshot["total_amount"])],
    ]
    table = Table(data, colWidths=[84 * mm, 22 * mm, 35 * mm, 35 * mm], hAlign="LEFT")
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f3f4f6")),
        ("FONTNAME",   (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE",   (0, 0), (-1, -1), 9),
        ("GRID",       (0, 0), (-1, -1), 0.5, LINE),
        ("ALIGN",      (1, 1), (-1, -1), "RIGHT"),
        ("PADDING",    (0, 0), (-1, -1), 6),
    ]))
    _, th = table.wrapOn(c, width - 36 * mm, height)
    table.drawOn(c, 18 * mm, y - th)
    y = y - th - 10 * mm

    block_x = width - 18 * mm
    c.setFont("Helvetica", 9)
    c.setFillColor(GRAY)
    c.drawRightString(block_x - 40 * mm, y, "Subtotal")
    c.drawRightString(block_x - 40 * mm, y - 6 * mm, "VAT (0%)")
    c.setFillColor(DARK)
    c.drawRightString(block_x, y, _money(snapshot["total_amount"]))
    c.drawRightString(block_x, y - 6 * mm, _money(0))
    c.setFont("Helvetica-Bold", 10)
    c.drawRightString(block_x - 40 * mm, y - 14 * mm, "TOTAL")
    c.drawRightString(block_x, y - 14 * mm, _money(snapshot["total_amount"]))

    y -= 28 * mm
    paid = snapshot["payment_status"] == "Confirmed"
    c.setFillColor(GREEN if paid else RED)
    c.setFont("Helvetica-Bold", 14)
    c.drawString(18 * mm, y, "PAID" if paid else snapshot["payment_status"].upper())
    if paid and snapshot.get("payment_method"):
        c.setFillColor(DARK)
        c.setFont("Helvetica", 9)
        c.drawString(18 * mm, y - 6 * mm, f"Payment Method: {snapshot['payment_method']}")
        c.drawString(18 * mm, y - 12 * mm, f"Reference: {snapshot.get('payment_reference') or 'N/A'}")

    _footer(c, width, info)
    return _finish(c, buf)


def render_receipt_pdf(snapshot: dict) -> bytes:
    info = company()
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    width, height = A4

    _header(c, width, height, "PAYMENT RECEIPT", f"No. {snapshot['receipt_number']}", snapshot["date"], info)

    y = height - 40 * mm
    c.setFillColor(DARK)
    c.setFont("Helvetica-Bold", 10)
    c.drawString(18 * mm, y, "RECEIVED FROM:")
    c.setFont("Helvetica", 9)
    c.drawString(18 * mm, y - 6 * mm, snapshot["customer"]["name"][:90])
    c.drawString(18 * mm, y - 12 * mm, f"Phone: {snapshot['customer']['phone'] or 'N/A'}")

    y -= 24 * mm
    c.setStrokeColor(LINE)
    c.setFillColor(colors.HexColor("#f0fdf4"))
    c.roundRect(18 * mm, y - 26 * mm, width - 36 * mm, 26 * mm, 6, stroke=1, fill=1)
    c.setFillColor(GRAY)
    c.setFont("Helvetica", 9)
    c.drawString(24 * mm, y - 9 * mm, "AMOUNT PAID:")
    c.setFillColor(GREEN)
    c.setFont("Helvetica-Bold", 18)
    c.drawString(24 * mm, y - 20 * mm, _money(snapshot["amount"]))

    y -= 38 * mm
    c.setFillColor(DARK)
    c.setFont("Helvetica-Bold", 10)
    c.drawString(18 * mm, y, "PAYMENT DETAILS")
    c.setFont("Helvetica", 9)
    details = [f"Method: {snapshot['method']}", f"Reference: {snapshot['reference'] or 'N/A'}",
               f"Status: {snapshot['status']}"]
    if snapshot.get("order_number"):
        details.append(f"Order Number: {snapshot['order_number']}")
    for line in details:
        y -= 6 * mm
        c.drawString(18 * mm, y, line)

    y -= 20 * mm
    c.setFont("Helvetica-Oblique", 10)
    c.drawCentredString(width / 2, y, "Thank you for your business!")
    y -= 20 * mm
    c.setFont("Helvetica", 9)
    c.drawString(18 * mm, y, "Authorized Signature: ______________________")

    _footer(c, width, info)
    return _finish(c, buf)
