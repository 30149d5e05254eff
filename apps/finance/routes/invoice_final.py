import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from ..db import get_lookup
from ..models.aggregation import (
    AggregationResult,
    DetailedItems,
    RemainingPreview,
    RemainingPreviewRequest,
)
from ..repos.lookup import InvoiceLookup
from ..services.aggregation import aggregate_from_reimbursement_number, compute_remaining
from ..services.errors import StorageFailure, describe_storage_failure
from ..services.final_view import build_final_entries, get_detailed_items
from ..services.money import format_rupiah, sum_amounts, terbilang

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoice-final", tags=["invoice-final"])


def _storage_error(e: StorageFailure) -> HTTPException:
    logger.exception("invoice lookup failed")
    return HTTPException(status_code=502, detail=describe_storage_failure(e))


# Combined overview: one row per invoice number across reimbursements and invoices
@router.get("")
def list_final_invoices(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    lookup: InvoiceLookup = Depends(get_lookup),
) -> Dict[str, Any]:
    try:
        entries = build_final_entries(lookup.list_reimbursements(), lookup.list_invoices())
    except StorageFailure as e:
        raise _storage_error(e)
    return {
        "items": entries[offset:offset + limit],
        "total": len(entries),
        "limit": limit,
        "offset": offset,
    }


# Autofill figures for the Invoice Final form, keyed by reimbursement number
@router.get("/aggregate", response_model=AggregationResult)
def aggregate(
    number: str = Query(..., description="Reimbursement invoice number"),
    lookup: InvoiceLookup = Depends(get_lookup),
):
    try:
        return aggregate_from_reimbursement_number(lookup, number)
    except StorageFailure as e:
        raise _storage_error(e)


@router.get("/items", response_model=DetailedItems)
def detailed_items(
    number: str = Query(..., description="Invoice number of the overview row"),
    lookup: InvoiceLookup = Depends(get_lookup),
):
    key = number.strip()
    try:
        entries = build_final_entries(lookup.list_reimbursements(), lookup.list_invoices())
        entry = next((e for e in entries if e.invoice_number == key), None)
        if entry is None:
            raise HTTPException(status_code=404, detail="Invoice not found")
        return get_detailed_items(lookup, entry)
    except StorageFailure as e:
        raise _storage_error(e)


# Print preview totals; no lookups, down payments are typed in by hand
@router.post("/remaining", response_model=RemainingPreview)
def remaining_preview(payload: RemainingPreviewRequest = Body(...)):
    total = sum_amounts(item.amount for item in payload.line_items)
    remaining = compute_remaining(total, payload.down_payments, payload.reimbursement_remaining)
    return RemainingPreview(
        total_amount=total,
        down_payment=sum_amounts(payload.down_payments),
        reimbursement_remaining=payload.reimbursement_remaining,
        remaining_amount=remaining,
        remaining_display=format_rupiah(remaining),
        terbilang=terbilang(remaining),
    )
