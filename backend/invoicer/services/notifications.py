"""Email delivery for invoice notices and payment reminders.

The SMTP transport is optional. ``load_smtp_config`` decides once, at startup,
whether mail can be sent; an ``EmailNotifier`` built without a config reports
every send as failed instead of raising.
"""

import enum
import html
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

from backend.invoicer.models.invoice import Invoice

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 30
IMPLICIT_TLS_PORT = 465


class ReminderKind(str, enum.Enum):
    DUE_SOON = "due_soon"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class SmtpConfig:
    host: str
    port: int
    username: str
    password: str
    from_address: str


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    text: str
    html: str


def load_smtp_config(settings) -> Optional[SmtpConfig]:
    """Build the SMTP capability from settings, or ``None`` when mail is not set up."""
    if not settings.email_host or not settings.email_user or not settings.email_pass:
        logger.info("Email service not configured - missing EMAIL_HOST, EMAIL_USER or EMAIL_PASS")
        return None
    return SmtpConfig(
        host=settings.email_host,
        port=settings.email_port,
        username=settings.email_user,
        password=settings.email_pass,
        from_address=settings.email_from or settings.email_user,
    )


def _money(value) -> str:
    return f"${value:,.2f}"


def _format_date(value) -> str:
    return value.strftime("%b %d, %Y").replace(" 0", " ")


def _line_item_rows_html(invoice: Invoice) -> str:
    rows = []
    for item in invoice.line_items:
        rows.append(
            "<tr>"
            f"<td>{html.escape(item.description)}</td>"
            f"<td style=\"text-align:center\">{item.quantity}</td>"
            f"<td style=\"text-align:right\">{_money(item.rate)}</td>"
            f"<td style=\"text-align:right\"><strong>{_money(item.total)}</strong></td>"
            "</tr>"
        )
    return "".join(rows)


def _line_item_rows_text(invoice: Invoice) -> str:
    return "\n".join(
        f"  - {item.description}: {item.quantity} x {_money(item.rate)} = {_money(item.total)}"
        for item in invoice.line_items
    )


def _wrap_html(title: str, accent: str, body: str, footer: str) -> str:
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>{html.escape(title)}</title></head>"
        "<body style=\"font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;\">"
        f"<div style=\"background: #f8f9fa; padding: 30px; border-radius: 8px; border-left: 4px solid {accent};\">"
        f"<h1 style=\"margin: 0 0 20px 0; color: {accent};\">{html.escape(title)}</h1>"
        f"{body}</div>"
        f"<p style=\"text-align: center; color: #6b7280; font-size: 12px;\">{html.escape(footer)}</p>"
        "</body></html>"
    )


def _details_table(invoice: Invoice, amount_label: str, status_label: str) -> str:
    return (
        "<table style=\"width: 100%; border-collapse: collapse;\">"
        f"<tr><td><strong>Invoice Number:</strong></td><td style=\"text-align:right\">#{html.escape(invoice.number)}</td></tr>"
        f"<tr><td><strong>{amount_label}:</strong></td><td style=\"text-align:right\">{_money(invoice.total)}</td></tr>"
        f"<tr><td><strong>Due Date:</strong></td><td style=\"text-align:right\">{_format_date(invoice.due_date)}</td></tr>"
        f"<tr><td><strong>Status:</strong></td><td style=\"text-align:right\">{status_label}</td></tr>"
        "</table>"
    )


def build_reminder_message(invoice: Invoice, kind: ReminderKind, business_name: str) -> OutgoingEmail:
    kind = ReminderKind(kind)
    client = invoice.client
    overdue = kind is ReminderKind.OVERDUE
    if overdue:
        subject = f"Overdue Payment Notice: Invoice #{invoice.number}"
        title = "Overdue Payment Notice"
        lead = f"This is a notice that your payment for Invoice #{invoice.number} is now overdue."
        closing = "Please arrange payment as soon as possible to avoid any service interruptions."
    else:
        subject = f"Payment Reminder: Invoice #{invoice.number} Due Soon"
        title = "Payment Reminder"
        lead = f"This is a friendly reminder that your payment for Invoice #{invoice.number} is due soon."
        closing = "Please ensure payment is made by the due date to avoid any late fees."

    text = "\n\n".join(
        part
        for part in (
            f"Dear {client.name},",
            lead,
            f"Invoice: #{invoice.number}\nAmount due: {_money(invoice.total)}\nDue date: {_format_date(invoice.due_date)}",
            _line_item_rows_text(invoice),
            closing,
            f"Best regards,\n{business_name}",
        )
        if part
    )

    items_html = ""
    if invoice.line_items:
        items_html = (
            "<h3>Services Provided</h3><table style=\"width: 100%; border-collapse: collapse;\">"
            f"{_line_item_rows_html(invoice)}</table>"
        )
    body = (
        f"<p>Dear {html.escape(client.name)},</p>"
        f"<p>{html.escape(lead)}</p>"
        f"{_details_table(invoice, 'Amount Due', 'OVERDUE' if overdue else 'DUE SOON')}"
        f"{items_html}"
        f"<p>{html.escape(closing)}</p>"
        f"<p>Best regards,<br><strong>{html.escape(business_name)}</strong></p>"
    )
    accent = "#dc2626" if overdue else "#ea580c"
    return OutgoingEmail(
        to=client.email,
        subject=subject,
        text=text,
        html=_wrap_html(title, accent, body, "This is an automated reminder. Please do not reply to this email."),
    )


def build_invoice_message(invoice: Invoice, business_name: str) -> OutgoingEmail:
    client = invoice.client
    subject = f"Invoice #{invoice.number} from {business_name}"
    due = _format_date(invoice.due_date)
    text = "\n\n".join(
        part
        for part in (
            f"Dear {client.name},",
            "Thank you for your business! Please find the details of your new invoice below.",
            f"Invoice: #{invoice.number}\nTotal amount: {_money(invoice.total)}\nDue date: {due}",
            _line_item_rows_text(invoice),
            f"Subtotal: {_money(invoice.subtotal)}\nTax: {_money(invoice.tax)}\nTotal: {_money(invoice.total)}",
            f"Payment is due by {due}.",
            f"Thank you for your business!\n{business_name}",
        )
        if part
    )
    items_html = ""
    if invoice.line_items:
        items_html = (
            "<h3>Services Provided</h3><table style=\"width: 100%; border-collapse: collapse;\">"
            "<thead><tr><th style=\"text-align:left\">Description</th><th>Qty</th>"
            "<th style=\"text-align:right\">Rate</th><th style=\"text-align:right\">Total</th></tr></thead>"
            f"<tbody>{_line_item_rows_html(invoice)}</tbody></table>"
        )
    body = (
        f"<p>Dear {html.escape(client.name)},</p>"
        "<p>Thank you for your business! Please find the details of your new invoice below.</p>"
        f"{_details_table(invoice, 'Total Amount', 'PENDING')}"
        f"{items_html}"
        f"<p>Payment is due by {due}. Please contact us if you have any questions about this invoice.</p>"
        f"<p>Thank you for your business!<br><strong>{html.escape(business_name)}</strong></p>"
    )
    return OutgoingEmail(
        to=client.email,
        subject=subject,
        text=text,
        html=_wrap_html("New Invoice", "#059669", body, "If you have any questions, please contact us."),
    )


class EmailNotifier:
    def __init__(self, config: Optional[SmtpConfig], business_name: str = "Your Business"):
        self.config = config
        self.business_name = business_name

    @property
    def is_configured(self) -> bool:
        return self.config is not None

    def send_reminder(self, invoice: Invoice, kind: ReminderKind) -> bool:
        if not self.is_configured:
            logger.info("Email service not configured - cannot send reminder for invoice %s", invoice.number)
            return False
        return self._deliver(build_reminder_message(invoice, kind, self.business_name), invoice)

    def send_invoice_notice(self, invoice: Invoice) -> bool:
        if not self.is_configured:
            logger.info("Email service not configured - cannot send invoice %s", invoice.number)
            return False
        return self._deliver(build_invoice_message(invoice, self.business_name), invoice)

    def _deliver(self, outgoing: OutgoingEmail, invoice: Invoice) -> bool:
        message = EmailMessage()
        message["From"] = self.config.from_address
        message["To"] = outgoing.to
        message["Subject"] = outgoing.subject
        message.set_content(outgoing.text)
        message.add_alternative(outgoing.html, subtype="html")

        try:
            if self.config.port == IMPLICIT_TLS_PORT:
                with smtplib.SMTP_SSL(self.config.host, self.config.port, timeout=SMTP_TIMEOUT_SECONDS) as server:
                    server.login(self.config.username, self.config.password)
                    server.send_message(message)
            else:
                with smtplib.SMTP(self.config.host, self.config.port, timeout=SMTP_TIMEOUT_SECONDS) as server:
                    server.ehlo()
                    if server.has_extn("starttls"):
                        server.starttls()
                        server.ehlo()
                    server.login(self.config.username, self.config.password)
                    server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email for invoice %s to %s: %s", invoice.number, outgoing.to, exc)
            return False

        logger.info("Email '%s' sent for invoice %s to %s", outgoing.subject, invoice.number, outgoing.to)
        return True
