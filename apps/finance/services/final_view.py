from typing import Dict, Iterable, List

from ..models.aggregation import DetailedItems, FinalInvoiceEntry
from ..models.invoice import DpItem, Invoice, Reimbursement
from ..repos.lookup import InvoiceLookup
from .aggregation import (
    INVOICE_FALLBACK,
    INVOICE_PREFIX,
    REIMBURSEMENT_FALLBACK,
    REIMBURSEMENT_PREFIX,
    tag_line_items,
)
from .money import ZERO, is_positive, sum_amounts, to_decimal


def _saved_dp_items(invoice: Invoice) -> List[DpItem]:
    if invoice.dp_items:
        return [
            DpItem(
                label=saved.label or f"DP {i + 1}",
                amount=to_decimal(saved.amount),
                date=saved.date or invoice.invoice_date,
            )
            for i, saved in enumerate(invoice.dp_items)
        ]
    if is_positive(invoice.down_payment):
        return [DpItem(label="DP 1", amount=invoice.down_payment, date=invoice.invoice_date)]
    return []


def _index_by_number(rows, attr: str) -> Dict[str, object]:
    # rows arrive newest first; the oldest row per number ends up holding the
    # value while the number keeps the position of its newest row
    index: Dict[str, object] = {}
    for row in rows:
        key = (getattr(row, attr) or "").strip()
        if key:
            index[key] = row
    return index


def build_final_entries(
    reimbursements: Iterable[Reimbursement],
    invoices: Iterable[Invoice],
) -> List[FinalInvoiceEntry]:
    """
    Pair reimbursements and invoices that share an invoice number into the
    "Invoice Final" overview rows.

    Reimbursement numbers come first, in the order given, followed by
    numbers that only have an invoice. Down payments are read from what was
    saved on the invoice itself, not from the DP table.
    """
    reimb_by_number = _index_by_number(reimbursements, "invoice_number")
    invoice_by_number = _index_by_number(invoices, "no_invoice")

    numbers = list(reimb_by_number)
    numbers += [n for n in invoice_by_number if n not in reimb_by_number]

    entries: List[FinalInvoiceEntry] = []
    for number in numbers:
        reimb = reimb_by_number.get(number)
        inv = invoice_by_number.get(number)
        source = reimb if reimb is not None else inv

        reimb_total = reimb.total_amount if reimb else ZERO
        inv_total = inv.total_amount if inv else ZERO
        combined_total = reimb_total + inv_total

        dp_items = _saved_dp_items(inv) if inv else []
        dp_total = sum_amounts(dp.amount for dp in dp_items)

        entries.append(FinalInvoiceEntry(
            invoice_number=number,
            customer_name=source.customer_name or "-",
            customer_address=source.customer_address,
            customer_city=source.customer_city,
            invoice_date=source.invoice_date,
            bl_number=source.bl_number,
            no_invoice=reimb.no_invoice if reimb else None,
            reimbursement_id=reimb.id if reimb else None,
            reimbursement_total=reimb_total,
            invoice_id=inv.id if inv else None,
            invoice_total=inv_total,
            combined_total=combined_total,
            down_payment=dp_total,
            remaining_amount=combined_total - dp_total,
            dp_items=dp_items,
        ))
    return entries


def get_detailed_items(lookup: InvoiceLookup, entry: FinalInvoiceEntry) -> DetailedItems:
    """Line-item breakdown of one overview row, reimbursement items first."""
    items = []
    if entry.reimbursement_id:
        items += tag_line_items(
            lookup.find_reimbursement_line_items(entry.reimbursement_id),
            source="reimbursement",
            prefix=REIMBURSEMENT_PREFIX,
            fallback_description=REIMBURSEMENT_FALLBACK,
            fallback_amount=entry.reimbursement_total,
        )
    if entry.invoice_id:
        items += tag_line_items(
            lookup.find_invoice_line_items(entry.invoice_id),
            source="invoice",
            prefix=INVOICE_PREFIX,
            fallback_description=INVOICE_FALLBACK,
            fallback_amount=entry.invoice_total,
        )
    return DetailedItems(items=items, dp_items=entry.dp_items)
