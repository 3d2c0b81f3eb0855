"""Invoice model for billing."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from backend.invoicer.core.time import utc_now
from backend.invoicer.db.base_class import Base

INVOICE_STATUSES = ("draft", "sent", "paid", "overdue")


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (UniqueConstraint("owner_id", "number", name="uq_invoices_owner_number"),)

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    number = Column(String(64), nullable=False)
    # Non-owning reference: clients may be deleted while invoices still point at them.
    client_id = Column(Integer, nullable=False, index=True)

    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    status = Column(String, default="draft", nullable=False)

    subtotal = Column(Numeric(10, 2), default=0.00, nullable=False)
    tax = Column(Numeric(10, 2), default=0.00, nullable=False)
    total = Column(Numeric(10, 2), default=0.00, nullable=False)

    notes = Column(Text, nullable=True)
    email_sent = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    owner = relationship("User", back_populates="invoices")
    client = relationship("Client", primaryjoin="foreign(Invoice.client_id) == Client.id", viewonly=True)
    line_items = relationship(
        "LineItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="LineItem.id",
    )
