"""Invoice schemas.

Totals never come from the client: subtotal, tax and total are derived from the
submitted line items on every create and on every line item replacement.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from backend.invoicer.schemas.client import ClientRead
from backend.invoicer.schemas.line_item import LineItemCreate, LineItemRead

InvoiceStatus = Literal["draft", "sent", "paid", "overdue"]


class InvoiceCreate(BaseModel):
    number: Optional[str] = Field(default=None, min_length=1, max_length=64)
    client_id: int
    issue_date: date
    due_date: date
    status: InvoiceStatus = "draft"
    notes: Optional[str] = None
    line_items: List[LineItemCreate] = Field(min_length=1)

    @model_validator(mode="after")
    def check_dates(self):
        if self.due_date < self.issue_date:
            raise ValueError("due_date must not be before issue_date")
        return self


class InvoiceUpdate(BaseModel):
    number: Optional[str] = Field(default=None, min_length=1, max_length=64)
    client_id: Optional[int] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    status: Optional[InvoiceStatus] = None
    notes: Optional[str] = None
    line_items: Optional[List[LineItemCreate]] = Field(default=None, min_length=1)

    @field_validator("number", "client_id", "issue_date", "due_date", "status", "line_items")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value

    @model_validator(mode="after")
    def check_dates(self):
        if self.issue_date and self.due_date and self.due_date < self.issue_date:
            raise ValueError("due_date must not be before issue_date")
        return self


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    number: str
    client_id: int
    issue_date: date
    due_date: date
    status: str
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    notes: Optional[str] = None
    email_sent: bool

    created_at: datetime
    updated_at: datetime


class InvoiceWithClientRead(InvoiceRead):
    client: ClientRead
    line_items: List[LineItemRead]


class InvoiceSendResult(BaseModel):
    success: bool
    message: str
