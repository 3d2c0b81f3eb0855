"""Invoice routes for account owners."""

import time
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from backend.invoicer.core.settings import get_settings
from backend.invoicer.dependencies.auth import get_current_user
from backend.invoicer.dependencies.services import get_notifier, get_store
from backend.invoicer.models.user import User
from backend.invoicer.schemas.invoice import (
    InvoiceCreate,
    InvoiceRead,
    InvoiceSendResult,
    InvoiceUpdate,
    InvoiceWithClientRead,
)
from backend.invoicer.schemas.line_item import LineItemRead
from backend.invoicer.services.documents import render_invoice_pdf
from backend.invoicer.services.invoice_totals import compute_invoice_totals
from backend.invoicer.services.notifications import EmailNotifier
from backend.invoicer.services.storage import EntityStore

router = APIRouter(prefix="/invoices", tags=["invoices"])


def generate_invoice_number() -> str:
    return f"INV-{str(int(time.time() * 1000))[-6:]}"


def _ensure_owned_client(store: EntityStore, client_id: int, owner_id: int) -> None:
    if store.get_client(client_id, owner_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")


def _ensure_number_free(store: EntityStore, owner_id: int, number: str, invoice_id: int | None = None) -> None:
    existing = store.get_invoice_by_number(owner_id, number)
    if existing is not None and existing.id != invoice_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Invoice number already exists")


def _get_owned_invoice(store: EntityStore, invoice_id: int, owner_id: int):
    invoice = store.get_invoice(invoice_id, owner_id)
    if not invoice:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return invoice


@router.get("/", response_model=List[InvoiceWithClientRead])
async def list_invoices(store: EntityStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    return store.get_invoices(current_user.id)


@router.post("/", response_model=InvoiceWithClientRead, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    payload: InvoiceCreate,
    store: EntityStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    _ensure_owned_client(store, payload.client_id, current_user.id)
    number = payload.number or generate_invoice_number()
    _ensure_number_free(store, current_user.id, number)

    totals = compute_invoice_totals(payload.line_items)
    invoice_data = {
        "number": number,
        "client_id": payload.client_id,
        "issue_date": payload.issue_date,
        "due_date": payload.due_date,
        "status": payload.status,
        "notes": payload.notes,
        **totals.as_fields(),
    }
    invoice = store.create_invoice(current_user.id, invoice_data, totals.line_items)
    return store.get_invoice(invoice.id, current_user.id)


@router.get("/{invoice_id}", response_model=InvoiceWithClientRead)
async def get_invoice(invoice_id: int, store: EntityStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    return _get_owned_invoice(store, invoice_id, current_user.id)


@router.patch("/{invoice_id}", response_model=InvoiceRead)
async def update_invoice(
    invoice_id: int,
    payload: InvoiceUpdate,
    store: EntityStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    existing = _get_owned_invoice(store, invoice_id, current_user.id)
    issue_date = payload.issue_date or existing.issue_date
    due_date = payload.due_date or existing.due_date
    if due_date < issue_date:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="due_date must not be before issue_date",
        )
    if payload.client_id is not None:
        _ensure_owned_client(store, payload.client_id, current_user.id)
    if payload.number is not None:
        _ensure_number_free(store, current_user.id, payload.number, invoice_id)

    data = payload.model_dump(exclude_unset=True, exclude={"line_items"})
    line_items = None
    if payload.line_items is not None:
        totals = compute_invoice_totals(payload.line_items)
        data.update(totals.as_fields())
        line_items = totals.line_items

    invoice = store.update_invoice(invoice_id, current_user.id, data, line_items=line_items)
    if not invoice:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return invoice


@router.delete("/{invoice_id}")
async def delete_invoice(invoice_id: int, store: EntityStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    deleted = store.delete_invoice(invoice_id, current_user.id)
    return {"deleted": deleted, "id": invoice_id}


@router.get("/{invoice_id}/line-items", response_model=List[LineItemRead])
async def list_line_items(invoice_id: int, store: EntityStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    line_items = store.get_line_items(invoice_id, current_user.id)
    if line_items is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return line_items


@router.get("/{invoice_id}/pdf")
def download_invoice_pdf(invoice_id: int, store: EntityStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    invoice = _get_owned_invoice(store, invoice_id, current_user.id)
    content = render_invoice_pdf(invoice, get_settings().business_name)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="invoice-{invoice.number}.pdf"'},
    )


@router.post("/{invoice_id}/send", response_model=InvoiceSendResult)
def send_invoice(
    invoice_id: int,
    store: EntityStore = Depends(get_store),
    notifier: EmailNotifier = Depends(get_notifier),
    current_user: User = Depends(get_current_user),
):
    invoice = _get_owned_invoice(store, invoice_id, current_user.id)
    if not notifier.is_configured:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Email service not configured")
    if not notifier.send_invoice_notice(invoice):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to send invoice email")
    store.mark_email_sent(invoice.id, current_user.id)
    return InvoiceSendResult(success=True, message=f"Invoice {invoice.number} sent to {invoice.client.email}")
