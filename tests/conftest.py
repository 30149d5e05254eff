import pytest

from apps.finance.repos.memory import InMemoryLookup

from factories import make_down_payment, make_invoice, make_reimbursement


@pytest.fixture
def scenario_lookup():
    """Reimbursement + linked invoice + two live down payments for BL123."""
    return InMemoryLookup(
        reimbursements=[make_reimbursement()],
        invoices=[make_invoice()],
        down_payments=[
            make_down_payment(1, "300000", status="paid"),
            make_down_payment(2, "200000", status="sent"),
        ],
    )
