from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Annotated
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

DateValue = date
Money = Annotated[Decimal, Field(max_digits=18, decimal_places=2)]


def _blank_to_none(value):
    # the billing tables store "" for fields nobody filled in
    if isinstance(value, str) and not value.strip():
        return None
    return value


class DownPaymentStatus(str, Enum):
    draft = "draft"
    sent = "sent"
    paid = "paid"


class LineItem(BaseModel):
    description: str = ""
    amount: Money = Field(default=Decimal("0"), ge=0)

    @field_validator("description", mode="before")
    @classmethod
    def _null_description(cls, v):
        return "" if v is None else v

    @field_validator("amount", mode="before")
    @classmethod
    def _null_amount(cls, v):
        return Decimal("0") if v is None else v

    @property
    def is_countable(self) -> bool:
        return bool(self.description.strip())


class DpItem(BaseModel):
    label: str
    amount: Money
    date: Optional[DateValue] = None


class SavedDpItem(BaseModel):
    """One entry of the down-payment breakdown saved on an invoice row."""
    label: Optional[str] = None
    amount: Optional[Money] = None
    date: Optional[DateValue] = None

    @field_validator("label", "date", mode="before")
    @classmethod
    def _blank_optional(cls, v):
        return _blank_to_none(v)


class Reimbursement(BaseModel):
    id: str
    invoice_number: str
    invoice_date: Optional[date] = None
    customer_name: str = ""
    customer_address: Optional[str] = None
    customer_city: Optional[str] = None
    bl_number: Optional[str] = None
    no_invoice: Optional[str] = None   # invoice_number of the linked Invoice
    total_amount: Money = Decimal("0")
    line_items: List[LineItem] = Field(default_factory=list)
    deleted_at: Optional[datetime] = None

    @field_validator("customer_address", "customer_city", "bl_number", "no_invoice", mode="before")
    @classmethod
    def _blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("customer_name", mode="before")
    @classmethod
    def _null_name(cls, v):
        return "" if v is None else v

    @field_validator("total_amount", mode="before")
    @classmethod
    def _null_total(cls, v):
        return Decimal("0") if v is None else v


class Invoice(BaseModel):
    id: str
    no_invoice: str
    invoice_date: Optional[date] = None
    customer_name: str = ""
    customer_address: Optional[str] = None
    customer_city: Optional[str] = None
    bl_number: Optional[str] = None
    total_amount: Money = Decimal("0")
    down_payment: Money = Decimal("0")
    dp_items: List[SavedDpItem] = Field(default_factory=list)
    line_items: List[LineItem] = Field(default_factory=list)
    deleted_at: Optional[datetime] = None

    @field_validator("customer_address", "customer_city", "bl_number", mode="before")
    @classmethod
    def _blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("customer_name", mode="before")
    @classmethod
    def _null_name(cls, v):
        return "" if v is None else v

    @field_validator("total_amount", "down_payment", mode="before")
    @classmethod
    def _null_money(cls, v):
        return Decimal("0") if v is None else v

    @field_validator("dp_items", mode="before")
    @classmethod
    def _null_dp_items(cls, v):
        return [] if v is None else v


class DownPayment(BaseModel):
    id: str
    invoice_dp_number: Optional[str] = None
    bl_number: Optional[str] = None
    part_number: int
    total_amount: Money = Decimal("0")
    invoice_date: Optional[date] = None
    status: DownPaymentStatus = DownPaymentStatus.draft
    deleted_at: Optional[datetime] = None

    # unset status is shown as Draft on the DP screens
    @field_validator("status", mode="before")
    @classmethod
    def _null_status(cls, v):
        return DownPaymentStatus.draft if v is None else v

    @property
    def is_eligible(self) -> bool:
        return self.status != DownPaymentStatus.draft and self.deleted_at is None
