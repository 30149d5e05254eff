from datetime import date
from decimal import Decimal

from apps.finance.models.invoice import SavedDpItem
from apps.finance.repos.memory import InMemoryLookup
from apps.finance.services.final_view import build_final_entries, get_detailed_items

from factories import make_invoice, make_reimbursement


def test_pairs_reimbursement_and_invoice_by_number():
    reimb = make_reimbursement(invoice_number="INV-900", total_amount=Decimal("800000"))
    inv = make_invoice(no_invoice="INV-900", total_amount=Decimal("1200000"))

    [entry] = build_final_entries([reimb], [inv])

    assert entry.invoice_number == "INV-900"
    assert entry.reimbursement_id == "r-1"
    assert entry.invoice_id == "i-1"
    assert entry.combined_total == Decimal("2000000")
    assert entry.remaining_amount == Decimal("2000000")
    assert entry.dp_items == []


def test_reimbursement_numbers_first_then_invoice_only_numbers():
    reimbs = [make_reimbursement(id="r-b", invoice_number="B-001"), make_reimbursement(id="r-a", invoice_number="A-001")]
    invs = [make_invoice(id="i-c", no_invoice="C-001"), make_invoice(id="i-a", no_invoice=" A-001 ")]

    entries = build_final_entries(reimbs, invs)

    assert [e.invoice_number for e in entries] == ["B-001", "A-001", "C-001"]
    assert entries[1].invoice_id == "i-a"
    assert entries[2].reimbursement_id is None
    assert entries[2].reimbursement_total == 0


def test_oldest_row_wins_for_duplicate_numbers():
    # listed newest first, as list_reimbursements returns them
    reimbs = [
        make_reimbursement(id="newest", invoice_number="A-001", total_amount=Decimal("2")),
        make_reimbursement(id="other", invoice_number="B-001", total_amount=Decimal("5")),
        make_reimbursement(id="older", invoice_number="A-001", total_amount=Decimal("1")),
    ]

    entries = build_final_entries(reimbs, [])

    # the number keeps the position of its newest row
    assert [e.invoice_number for e in entries] == ["A-001", "B-001"]
    assert entries[0].reimbursement_id == "older"
    assert entries[0].combined_total == Decimal("1")


def test_overview_agrees_with_lookup_on_duplicate_numbers():
    lookup = InMemoryLookup(reimbursements=[
        make_reimbursement(id="older", invoice_number="A-001"),
        make_reimbursement(id="newest", invoice_number="A-001"),
    ])

    [entry] = build_final_entries(lookup.list_reimbursements(), [])

    assert entry.reimbursement_id == lookup.find_reimbursement_by_invoice_number("A-001").id == "older"


def test_blank_numbers_are_skipped():
    assert build_final_entries([make_reimbursement(invoice_number="  ")], [make_invoice(no_invoice="")]) == []


def test_display_fields_fall_back_to_invoice_and_dash():
    inv = make_invoice(no_invoice="C-001", customer_name="", customer_city="Surabaya")

    [entry] = build_final_entries([], [inv])

    assert entry.customer_name == "-"
    assert entry.customer_city == "Surabaya"
    assert entry.invoice_date == date(2026, 1, 15)


def test_saved_dp_items_fill_in_label_and_date():
    inv = make_invoice(
        no_invoice="INV-900",
        total_amount=Decimal("1000000"),
        dp_items=[
            SavedDpItem(label="Uang Muka", amount=Decimal("100000"), date=date(2026, 1, 2)),
            SavedDpItem(amount=Decimal("50000")),
        ],
    )

    [entry] = build_final_entries([], [inv])

    assert [(d.label, d.amount, d.date) for d in entry.dp_items] == [
        ("Uang Muka", Decimal("100000"), date(2026, 1, 2)),
        ("DP 2", Decimal("50000"), date(2026, 1, 15)),
    ]
    assert entry.down_payment == Decimal("150000")
    assert entry.remaining_amount == Decimal("850000")


def test_plain_down_payment_becomes_single_dp_item():
    inv = make_invoice(no_invoice="INV-900", total_amount=Decimal("1000000"), down_payment=Decimal("1200000"))

    [entry] = build_final_entries([], [inv])

    assert [d.label for d in entry.dp_items] == ["DP 1"]
    assert entry.remaining_amount == Decimal("-200000")


def test_detailed_items_reimbursement_first(scenario_lookup):
    [entry] = build_final_entries(
        [make_reimbursement(invoice_number="INV-900")], [make_invoice(no_invoice="INV-900")],
    )

    details = get_detailed_items(scenario_lookup, entry)

    assert [i.description for i in details.items] == [
        "Reimbursement - Jasa Reimbursement",
        "Invoice - Trucking",
        "Invoice - Materai",
    ]


def test_detailed_items_fall_back_to_totals():
    reimb = make_reimbursement(line_items=[])
    lookup = InMemoryLookup(reimbursements=[reimb])
    [entry] = build_final_entries([reimb], [])

    details = get_detailed_items(lookup, entry)

    assert [(i.description, i.amount) for i in details.items] == [
        ("Invoice Reimbursement", Decimal("800000")),
    ]
