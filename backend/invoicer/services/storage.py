"""Owner-scoped persistence for clients, invoices, line items and expenses.

Every user-facing method takes the owner id and treats a row owned by someone
else exactly like a missing row: getters return ``None``, deletes return
``False``. The single unscoped read, ``get_reminder_candidates``, exists for the
reminder scheduler, which has to look at every owner's invoices.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from backend.invoicer.models.client import Client
from backend.invoicer.models.expense import Expense
from backend.invoicer.models.invoice import Invoice
from backend.invoicer.models.line_item import LineItem
from backend.invoicer.services.invoice_totals import LineItemTotal, line_item_total

logger = logging.getLogger(__name__)


def _client_resolves(invoice: Invoice) -> bool:
    client = invoice.client
    return client is not None and client.owner_id == invoice.owner_id


def _build_line_item(row: LineItemTotal | Mapping[str, Any]) -> LineItem:
    if isinstance(row, LineItemTotal):
        return LineItem(**row.as_row())
    total = row.get("total")
    if total is None:
        total = line_item_total(row["quantity"], row["rate"])
    return LineItem(description=row["description"], quantity=row["quantity"], rate=row["rate"], total=total)


def _apply(instance: Any, data: Mapping[str, Any]) -> None:
    for key, value in data.items():
        setattr(instance, key, value)


class EntityStore:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def _invoice_query(self):
        return self.db.query(Invoice).options(selectinload(Invoice.client), selectinload(Invoice.line_items))

    def _owned_invoice(self, invoice_id: int, owner_id: int) -> Optional[Invoice]:
        return self.db.query(Invoice).filter(Invoice.id == invoice_id, Invoice.owner_id == owner_id).first()

    # Clients

    def get_clients(self, owner_id: int) -> List[Client]:
        return self.db.query(Client).filter(Client.owner_id == owner_id).order_by(Client.id).all()

    def get_client(self, client_id: int, owner_id: int) -> Optional[Client]:
        return self.db.query(Client).filter(Client.id == client_id, Client.owner_id == owner_id).first()

    def create_client(self, owner_id: int, data: Mapping[str, Any]) -> Client:
        client = Client(owner_id=owner_id, **data)
        self.db.add(client)
        self._commit()
        self.db.refresh(client)
        return client

    def update_client(self, client_id: int, owner_id: int, data: Mapping[str, Any]) -> Optional[Client]:
        client = self.get_client(client_id, owner_id)
        if client is None:
            return None
        _apply(client, data)
        self._commit()
        self.db.refresh(client)
        return client

    def delete_client(self, client_id: int, owner_id: int) -> bool:
        """Delete a client. Invoices referencing it are left in place."""
        client = self.get_client(client_id, owner_id)
        if client is None:
            return False
        self.db.delete(client)
        self._commit()
        return True

    # Invoices

    def get_invoices(self, owner_id: int) -> List[Invoice]:
        """Return the owner's invoices with client and line items.

        Invoices whose client no longer exists are left out.
        """
        invoices = self._invoice_query().filter(Invoice.owner_id == owner_id).order_by(Invoice.id).all()
        return [invoice for invoice in invoices if _client_resolves(invoice)]

    def get_invoice(self, invoice_id: int, owner_id: int) -> Optional[Invoice]:
        invoice = self._invoice_query().filter(Invoice.id == invoice_id, Invoice.owner_id == owner_id).first()
        if invoice is None or not _client_resolves(invoice):
            return None
        return invoice

    def get_invoice_by_number(self, owner_id: int, number: str) -> Optional[Invoice]:
        return self.db.query(Invoice).filter(Invoice.owner_id == owner_id, Invoice.number == number).first()

    def list_owner_invoices(self, owner_id: int) -> List[Invoice]:
        return self.db.query(Invoice).filter(Invoice.owner_id == owner_id).order_by(Invoice.id).all()

    def create_invoice(
        self,
        owner_id: int,
        invoice_data: Mapping[str, Any],
        line_items: Sequence[LineItemTotal | Mapping[str, Any]],
    ) -> Invoice:
        """Persist an invoice together with all of its line items, or nothing."""
        invoice = Invoice(owner_id=owner_id, **invoice_data)
        try:
            self.db.add(invoice)
            for row in line_items:
                invoice.line_items.append(_build_line_item(row))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to create invoice %s for owner %s", invoice_data.get("number"), owner_id)
            raise
        self.db.refresh(invoice)
        logger.info("Created invoice %s (id=%s) for owner %s", invoice.number, invoice.id, owner_id)
        return invoice

    def update_invoice(
        self,
        invoice_id: int,
        owner_id: int,
        data: Mapping[str, Any],
        line_items: Optional[Sequence[LineItemTotal | Mapping[str, Any]]] = None,
    ) -> Optional[Invoice]:
        """Apply a partial update; ``line_items``, when given, replace the existing set."""
        invoice = self._owned_invoice(invoice_id, owner_id)
        if invoice is None:
            return None
        _apply(invoice, data)
        if line_items is not None:
            self._replace_line_items(invoice, line_items)
        self._commit()
        self.db.refresh(invoice)
        return invoice

    def delete_invoice(self, invoice_id: int, owner_id: int) -> bool:
        invoice = self._owned_invoice(invoice_id, owner_id)
        if invoice is None:
            return False
        # delete-orphan cascade removes the line items before the invoice row
        self.db.delete(invoice)
        self._commit()
        logger.info("Deleted invoice %s for owner %s", invoice_id, owner_id)
        return True

    def mark_email_sent(self, invoice_id: int, owner_id: int) -> Optional[Invoice]:
        invoice = self._owned_invoice(invoice_id, owner_id)
        if invoice is None:
            return None
        invoice.email_sent = True
        if invoice.status == "draft":
            invoice.status = "sent"
        self._commit()
        self.db.refresh(invoice)
        return invoice

    # Line items

    def _replace_line_items(self, invoice: Invoice, line_items: Iterable[LineItemTotal | Mapping[str, Any]]) -> None:
        invoice.line_items.clear()
        self.db.flush()
        for row in line_items:
            invoice.line_items.append(_build_line_item(row))

    def get_line_items(self, invoice_id: int, owner_id: int) -> Optional[List[LineItem]]:
        invoice = self._owned_invoice(invoice_id, owner_id)
        if invoice is None:
            return None
        return list(invoice.line_items)

    def update_line_items(
        self,
        invoice_id: int,
        owner_id: int,
        line_items: Sequence[LineItemTotal | Mapping[str, Any]],
    ) -> Optional[List[LineItem]]:
        """Replace every line item of an invoice. Invoice totals are not touched."""
        invoice = self._owned_invoice(invoice_id, owner_id)
        if invoice is None:
            return None
        self._replace_line_items(invoice, line_items)
        self._commit()
        self.db.refresh(invoice)
        return list(invoice.line_items)

    # Expenses

    def get_expenses(self, owner_id: int) -> List[Expense]:
        return self.db.query(Expense).filter(Expense.owner_id == owner_id).order_by(Expense.id).all()

    def get_expense(self, expense_id: int, owner_id: int) -> Optional[Expense]:
        return self.db.query(Expense).filter(Expense.id == expense_id, Expense.owner_id == owner_id).first()

    def create_expense(self, owner_id: int, data: Mapping[str, Any]) -> Expense:
        expense = Expense(owner_id=owner_id, **data)
        self.db.add(expense)
        self._commit()
        self.db.refresh(expense)
        return expense

    def update_expense(self, expense_id: int, owner_id: int, data: Mapping[str, Any]) -> Optional[Expense]:
        expense = self.get_expense(expense_id, owner_id)
        if expense is None:
            return None
        _apply(expense, data)
        self._commit()
        self.db.refresh(expense)
        return expense

    def delete_expense(self, expense_id: int, owner_id: int) -> bool:
        expense = self.get_expense(expense_id, owner_id)
        if expense is None:
            return False
        self.db.delete(expense)
        self._commit()
        return True

    # Cross-owner access, reminder scheduler only

    def get_reminder_candidates(self, statuses: Iterable[str]) -> List[Invoice]:
        """Return invoices of every owner in the given statuses, client-joined."""
        invoices = self._invoice_query().filter(Invoice.status.in_(list(statuses))).order_by(Invoice.id).all()
        return [invoice for invoice in invoices if _client_resolves(invoice)]
