from typing import Iterable, List, Optional

from ..models.invoice import DownPayment, Invoice, LineItem, Reimbursement
from .lookup import is_lookup_key


class InMemoryLookup:
    """
    InvoiceLookup over plain lists, for tests and local experiments.

    Records are kept in the order given, which stands in for creation order
    (oldest first). Line items are served from each record's own
    `line_items`.
    """

    def __init__(
        self,
        reimbursements: Iterable[Reimbursement] = (),
        invoices: Iterable[Invoice] = (),
        down_payments: Iterable[DownPayment] = (),
    ):
        self.reimbursements: List[Reimbursement] = list(reimbursements)
        self.invoices: List[Invoice] = list(invoices)
        self.down_payments: List[DownPayment] = list(down_payments)

    def find_reimbursement_by_invoice_number(self, number: str) -> Optional[Reimbursement]:
        if not is_lookup_key(number):
            return None
        key = number.strip()
        for r in self.reimbursements:
            if r.deleted_at is None and r.invoice_number.strip() == key:
                return r
        return None

    def find_invoice_by_no_invoice(self, number: str) -> Optional[Invoice]:
        key = number.strip()
        for inv in self.invoices:
            if inv.deleted_at is None and inv.no_invoice.strip() == key:
                return inv
        return None

    def find_reimbursement_line_items(self, reimbursement_id: str) -> List[LineItem]:
        for r in self.reimbursements:
            if r.id == reimbursement_id:
                return list(r.line_items)
        return []

    def find_invoice_line_items(self, invoice_id: str) -> List[LineItem]:
        for inv in self.invoices:
            if inv.id == invoice_id:
                return list(inv.line_items)
        return []

    def find_down_payments_by_bl_number(self, bl_number: str) -> List[DownPayment]:
        key = bl_number.strip()
        rows = [
            dp for dp in self.down_payments
            if dp.is_eligible and dp.bl_number == key
        ]
        # sorted() is stable, so equal part numbers keep insertion order
        return sorted(rows, key=lambda dp: dp.part_number)

    def list_reimbursements(self) -> List[Reimbursement]:
        return [r for r in reversed(self.reimbursements) if r.deleted_at is None]

    def list_invoices(self) -> List[Invoice]:
        return [inv for inv in reversed(self.invoices) if inv.deleted_at is None]
