"""Expense schemas."""

import datetime as dt
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ExpenseCategory = Literal["office", "travel", "equipment", "software", "marketing", "meals", "utilities", "other"]


class ExpenseBase(BaseModel):
    description: str = Field(min_length=1, max_length=255)
    amount: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category: ExpenseCategory
    date: dt.date
    receipt: Optional[str] = Field(default=None, max_length=1024)


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(BaseModel):
    description: Optional[str] = Field(default=None, min_length=1, max_length=255)
    amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category: Optional[ExpenseCategory] = None
    date: Optional[dt.date] = None
    receipt: Optional[str] = Field(default=None, max_length=1024)

    @field_validator("description", "amount", "category", "date")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value


class ExpenseRead(ExpenseBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    created_at: Optional[dt.datetime] = None
