from typing import List, Literal, Optional
from decimal import Decimal
from datetime import date
from pydantic import BaseModel, Field

from .invoice import DpItem, LineItem, Money

class CombinedLineItem(BaseModel):
    description: str
    amount: Money
    source: Literal["reimbursement", "invoice"]

class AggregationResult(BaseModel):
    """
    Combined "Invoice Final" view built from a reimbursement, its linked
    invoice and the down payments sharing its BL number.

    remaining_amount may be negative; that is a credit balance and must
    not be clamped.
    """
    reimbursement_found: bool = False
    invoice_found: bool = False
    dp_found: bool = False
    reimbursement_amount: Money = Decimal("0")
    invoice_amount: Money = Decimal("0")
    dp_count: int = 0
    combined_line_items: List[CombinedLineItem] = Field(default_factory=list)
    dp_items: List[DpItem] = Field(default_factory=list)
    subtotal: Money = Decimal("0")
    down_payment_total: Money = Decimal("0")
    remaining_amount: Money = Decimal("0")

    # display fields copied from the reimbursement
    invoice_number: Optional[str] = None
    customer_name: Optional[str] = None
    customer_address: Optional[str] = None
    customer_city: Optional[str] = None
    bl_number: Optional[str] = None
    no_invoice: Optional[str] = None

    @property
    def is_credit(self) -> bool:
        return self.remaining_amount < 0

class FinalInvoiceEntry(BaseModel):
    invoice_number: str
    customer_name: str = "-"
    customer_address: Optional[str] = None
    customer_city: Optional[str] = None
    invoice_date: Optional[date] = None
    bl_number: Optional[str] = None
    no_invoice: Optional[str] = None
    reimbursement_id: Optional[str] = None
    reimbursement_total: Money = Decimal("0")
    invoice_id: Optional[str] = None
    invoice_total: Money = Decimal("0")
    combined_total: Money = Decimal("0")
    down_payment: Money = Decimal("0")
    remaining_amount: Money = Decimal("0")
    dp_items: List[DpItem] = Field(default_factory=list)

class DetailedItems(BaseModel):
    items: List[CombinedLineItem] = Field(default_factory=list)
    dp_items: List[DpItem] = Field(default_factory=list)

class RemainingPreviewRequest(BaseModel):
    line_items: List[LineItem] = Field(default_factory=list)
    down_payments: List[Money] = Field(default_factory=list)
    reimbursement_remaining: Money = Decimal("0")

class RemainingPreview(BaseModel):
    total_amount: Money
    down_payment: Money
    reimbursement_remaining: Money
    remaining_amount: Money
    remaining_display: str
    terbilang: str
