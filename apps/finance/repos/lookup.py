from typing import List, Optional, Protocol

from ..models.invoice import DownPayment, Invoice, LineItem, Reimbursement

# Shorter keys are treated as "still typing" and never hit storage.
MIN_LOOKUP_LENGTH = 3


class InvoiceLookup(Protocol):
    """
    Read-only access to the billing tables used by the aggregation service.

    Every finder skips soft-deleted rows. Nothing found is reported as None
    or an empty list; only storage problems raise (as StorageFailure).
    """

    def find_reimbursement_by_invoice_number(self, number: str) -> Optional[Reimbursement]: ...

    def find_invoice_by_no_invoice(self, number: str) -> Optional[Invoice]: ...

    # creation order, oldest first
    def find_reimbursement_line_items(self, reimbursement_id: str) -> List[LineItem]: ...

    def find_invoice_line_items(self, invoice_id: str) -> List[LineItem]: ...

    # non-draft only, part_number ascending
    def find_down_payments_by_bl_number(self, bl_number: str) -> List[DownPayment]: ...

    # newest first
    def list_reimbursements(self) -> List[Reimbursement]: ...

    def list_invoices(self) -> List[Invoice]: ...


def is_lookup_key(number: Optional[str]) -> bool:
    return number is not None and len(number.strip()) >= MIN_LOOKUP_LENGTH
