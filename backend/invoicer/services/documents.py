"""Printable invoice documents (fpdf2)."""

from fpdf import FPDF

from backend.invoicer.models.invoice import Invoice


def _latin1(value) -> str:
    # Core PDF fonts only cover Latin-1
    return str(value if value is not None else "").encode("latin-1", "replace").decode("latin-1")


def _money(value) -> str:
    return f"${value:,.2f}"


def render_invoice_pdf(invoice: Invoice, business_name: str) -> bytes:
    """Render an invoice with its client and line items to PDF bytes."""
    client = invoice.client

    pdf = FPDF()
    pdf.add_page()
    pdf.set_auto_page_break(auto=True, margin=15)

    # --- Header ---
    pdf.set_font("Helvetica", "B", 20)
    pdf.cell(0, 10, _latin1(business_name), new_x="LMARGIN", new_y="NEXT", align="C")
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, "INVOICE", new_x="LMARGIN", new_y="NEXT", align="C")
    pdf.ln(2)

    # --- Invoice info ---
    pdf.set_fill_color(240, 240, 240)
    pdf.set_font("Helvetica", "B", 11)
    pdf.cell(0, 7, "  Invoice Details", new_x="LMARGIN", new_y="NEXT", fill=True)
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(95, 6, _latin1(f"  Invoice #: {invoice.number}"), new_x="RIGHT")
    pdf.cell(95, 6, f"Issue Date: {invoice.issue_date.isoformat()}", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(95, 6, f"  Status: {invoice.status.upper()}", new_x="RIGHT")
    pdf.cell(95, 6, f"Due Date: {invoice.due_date.isoformat()}", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # --- Bill To ---
    pdf.set_font("Helvetica", "B", 11)
    pdf.cell(0, 7, "  Bill To", new_x="LMARGIN", new_y="NEXT", fill=True)
    pdf.set_font("Helvetica", "", 10)
    for line in (client.name, client.company, client.email, client.phone, client.address):
        if line:
            pdf.cell(0, 6, _latin1(f"  {line}"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # --- Line items ---
    pdf.set_font("Helvetica", "B", 9)
    pdf.cell(90, 6, "  Description", border="B")
    pdf.cell(25, 6, "Qty", border="B", align="C")
    pdf.cell(35, 6, "Rate", border="B", align="R")
    pdf.cell(40, 6, "Total", border="B", align="R", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 9)
    for item in invoice.line_items:
        pdf.cell(90, 5, _latin1(f"  {item.description}"))
        pdf.cell(25, 5, f"{item.quantity:g}", align="C")
        pdf.cell(35, 5, _money(item.rate), align="R")
        pdf.cell(40, 5, _money(item.total), align="R", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # --- Summary ---
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(120, 6, "  Subtotal:", new_x="RIGHT")
    pdf.cell(70, 6, _money(invoice.subtotal), align="R", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(120, 6, "  Tax:", new_x="RIGHT")
    pdf.cell(70, 6, _money(invoice.tax), align="R", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(120, 8, "  TOTAL:", new_x="RIGHT")
    pdf.cell(70, 8, _money(invoice.total), align="R", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    if invoice.notes:
        pdf.set_font("Helvetica", "B", 11)
        pdf.cell(0, 7, "  Notes", new_x="LMARGIN", new_y="NEXT", fill=True)
        pdf.set_font("Helvetica", "", 10)
        pdf.multi_cell(0, 5, _latin1(invoice.notes))

    return bytes(pdf.output())
