"""Line item schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class LineItemCreate(BaseModel):
    description: str = Field(min_length=1, max_length=255)
    quantity: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    rate: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


class LineItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_id: int
    description: str
    quantity: Decimal
    rate: Decimal
    total: Decimal
