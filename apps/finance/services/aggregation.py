import logging
from decimal import Decimal
from typing import Iterable, List, Literal

from ..models.aggregation import AggregationResult, CombinedLineItem
from ..models.invoice import DownPayment, DpItem, LineItem
from ..repos.lookup import InvoiceLookup, is_lookup_key
from .money import sum_amounts, to_decimal

logger = logging.getLogger(__name__)

REIMBURSEMENT_PREFIX = "Reimbursement - "
INVOICE_PREFIX = "Invoice - "
REIMBURSEMENT_FALLBACK = "Invoice Reimbursement"
INVOICE_FALLBACK = "Invoice"


def tag_line_items(
    items: Iterable[LineItem],
    *,
    source: Literal["reimbursement", "invoice"],
    prefix: str,
    fallback_description: str,
    fallback_amount: Decimal,
) -> List[CombinedLineItem]:
    """
    Turn a parent record's line items into combined-view rows.

    Items with a blank description are not counted. When nothing is left,
    the parent's stored total stands in as a single row so the combined
    view still carries the whole amount.
    """
    tagged = [
        CombinedLineItem(description=f"{prefix}{item.description}", amount=item.amount, source=source)
        for item in items
        if item.is_countable
    ]
    if not tagged:
        tagged.append(
            CombinedLineItem(description=fallback_description, amount=fallback_amount, source=source)
        )
    return tagged


def down_payment_items(down_payments: Iterable[DownPayment]) -> List[DpItem]:
    # Labels follow position, not part_number: parts [1, 3] become "DP 1", "DP 2".
    return [
        DpItem(label=f"DP {i + 1}", amount=dp.total_amount, date=dp.invoice_date)
        for i, dp in enumerate(down_payments)
    ]


def aggregate_from_reimbursement_number(lookup: InvoiceLookup, number: str) -> AggregationResult:
    """
    Build the combined "Invoice Final" figures for one reimbursement number.

    Steps:
      1. find the reimbursement (short keys and misses give an empty result)
      2. its line items, or one "Invoice Reimbursement" row for the total
      3. the linked invoice via `no_invoice`, with its items or an "Invoice" row
      4. non-draft down payments sharing the reimbursement's BL number
      5. subtotal, down payment total and the remaining balance

    Storage errors from the lookup propagate; nothing partial is returned.
    The stored totals and the itemized sums are trusted independently and
    never reconciled against each other.
    """
    if not is_lookup_key(number):
        return AggregationResult()

    key = number.strip()
    reimbursement = lookup.find_reimbursement_by_invoice_number(key)
    if reimbursement is None:
        logger.info("no reimbursement for %r", key)
        return AggregationResult()

    result = AggregationResult(
        reimbursement_found=True,
        reimbursement_amount=reimbursement.total_amount,
        invoice_number=reimbursement.invoice_number,
        customer_name=reimbursement.customer_name or None,
        customer_address=reimbursement.customer_address,
        customer_city=reimbursement.customer_city,
        bl_number=reimbursement.bl_number,
        no_invoice=reimbursement.no_invoice,
    )

    combined = tag_line_items(
        lookup.find_reimbursement_line_items(reimbursement.id),
        source="reimbursement",
        prefix=REIMBURSEMENT_PREFIX,
        fallback_description=REIMBURSEMENT_FALLBACK,
        fallback_amount=reimbursement.total_amount,
    )

    # a reimbursement may stand alone; a missing invoice is not an error
    if reimbursement.no_invoice:
        invoice = lookup.find_invoice_by_no_invoice(reimbursement.no_invoice.strip())
        if invoice is not None:
            result.invoice_found = True
            result.invoice_amount = invoice.total_amount
            combined += tag_line_items(
                lookup.find_invoice_line_items(invoice.id),
                source="invoice",
                prefix=INVOICE_PREFIX,
                fallback_description=INVOICE_FALLBACK,
                fallback_amount=invoice.total_amount,
            )
        else:
            logger.info("reimbursement %r links to unknown invoice %r", key, reimbursement.no_invoice)

    dp_items: List[DpItem] = []
    if reimbursement.bl_number:
        down_payments = lookup.find_down_payments_by_bl_number(reimbursement.bl_number.strip())
        if down_payments:
            dp_items = down_payment_items(down_payments)
            result.dp_found = True
            result.dp_count = len(dp_items)

    result.combined_line_items = combined
    result.dp_items = dp_items
    result.subtotal = sum_amounts(item.amount for item in combined)
    result.down_payment_total = sum_amounts(dp.amount for dp in dp_items)
    result.remaining_amount = result.subtotal - result.down_payment_total
    return result


def compute_remaining(
    line_items_total,
    down_payments: Iterable,
    reimbursement_remaining=Decimal("0"),
) -> Decimal:
    """
    Balance shown on a printable invoice when there is no reimbursement
    chain to walk: line items plus any carried-over reimbursement balance,
    minus the down payments entered for it. May be negative (credit).
    """
    return to_decimal(line_items_total) + to_decimal(reimbursement_remaining) - sum_amounts(down_payments)
