import logging
from typing import Any, Dict, List, Optional

import psycopg
from psycopg import Connection
from pydantic import ValidationError

from ..models.invoice import DownPayment, Invoice, LineItem, Reimbursement
from ..services.errors import StorageFailure
from .lookup import is_lookup_key

logger = logging.getLogger(__name__)

_REIMBURSEMENT_COLUMNS = """
    id::text AS id, invoice_number, invoice_date, customer_name, customer_address,
    customer_city, bl_number, no_invoice, total_amount, deleted_at
"""

_INVOICE_COLUMNS = """
    id::text AS id, invoice_number AS no_invoice, invoice_date, customer_name,
    customer_address, customer_city, bl_number, total_amount, down_payment,
    dp_items, deleted_at
"""


def _fetch_all(conn: Connection, sql: str, params: tuple) -> List[Dict[str, Any]]:
    try:
        with conn.cursor() as cur:
            cur.execute(sql, params)
            rows = cur.fetchall()
            columns = [c[0] for c in cur.description] # DB metadata
    except psycopg.Error as e:
        raise StorageFailure(str(e), sqlstate=getattr(e, "sqlstate", None)) from e
    return [dict(zip(columns, row)) for row in rows]


def _fetch_one(conn: Connection, sql: str, params: tuple) -> Optional[Dict[str, Any]]:
    rows = _fetch_all(conn, sql, params)
    if not rows:
        return None
    if len(rows) > 1:
        logger.warning("expected one row, got %d; using the first", len(rows))
    return rows[0]


# Fetches a non-deleted reimbursement by its invoice number. Returns None if not found.
def find_reimbursement_by_invoice_number(conn: Connection, number: str) -> Optional[Dict[str, Any]]:
    return _fetch_one(
        conn,
        f"""
        SELECT {_REIMBURSEMENT_COLUMNS}
        FROM invoices_reimbursement
        WHERE invoice_number = %s AND deleted_at IS NULL
        ORDER BY created_at ASC
        LIMIT 2
        """,
        (number,),
    )


# Fetches a non-deleted invoice by its invoice number (the reimbursement's no_invoice).
def find_invoice_by_number(conn: Connection, number: str) -> Optional[Dict[str, Any]]:
    return _fetch_one(
        conn,
        f"""
        SELECT {_INVOICE_COLUMNS}
        FROM invoices
        WHERE invoice_number = %s AND deleted_at IS NULL
        ORDER BY created_at ASC
        LIMIT 2
        """,
        (number,),
    )


# Line items of one parent row, oldest first. `table` is one of the two item tables.
def list_line_items(conn: Connection, table: str, parent_id: str) -> List[Dict[str, Any]]:
    if table not in {"invoice_reimbursement_items", "invoice_items"}:
        raise ValueError(f"unknown line item table: {table}")
    return _fetch_all(
        conn,
        f"""
        SELECT description, amount
        FROM {table}
        WHERE invoice_id = %s
        ORDER BY created_at ASC, id ASC
        """,
        (parent_id,),
    )


# Non-draft, non-deleted down payments for a BL number, part 1 first.
# A NULL status is a draft, same as on the DP screens.
def list_down_payments_by_bl(conn: Connection, bl_number: str) -> List[Dict[str, Any]]:
    return _fetch_all(
        conn,
        """
        SELECT id::text AS id, invoice_dp_number, bl_number, part_number,
               total_amount, invoice_date, status, deleted_at
        FROM invoice_dp
        WHERE bl_number = %s
          AND deleted_at IS NULL
          AND COALESCE(status, 'draft') <> 'draft'
        ORDER BY part_number ASC, created_at ASC
        """,
        (bl_number,),
    )


def list_reimbursements(conn: Connection) -> List[Dict[str, Any]]:
    return _fetch_all(
        conn,
        f"""
        SELECT {_REIMBURSEMENT_COLUMNS}
        FROM invoices_reimbursement
        WHERE deleted_at IS NULL
        ORDER BY created_at DESC
        """,
        (),
    )


def list_invoices(conn: Connection) -> List[Dict[str, Any]]:
    return _fetch_all(
        conn,
        f"""
        SELECT {_INVOICE_COLUMNS}
        FROM invoices
        WHERE deleted_at IS NULL
        ORDER BY created_at DESC
        """,
        (),
    )


def _build(model, row: Dict[str, Any]):
    # a row the models reject (e.g. a negative amount) is bad stored data
    try:
        return model.model_validate(row)
    except ValidationError as e:
        raise StorageFailure(f"invalid {model.__name__} row: {e}") from e


class PostgresLookup:
    """InvoiceLookup backed by a psycopg connection."""

    def __init__(self, conn: Connection):
        self.conn = conn

    def find_reimbursement_by_invoice_number(self, number: str) -> Optional[Reimbursement]:
        if not is_lookup_key(number):
            return None
        row = find_reimbursement_by_invoice_number(self.conn, number.strip())
        return _build(Reimbursement, row) if row else None

    def find_invoice_by_no_invoice(self, number: str) -> Optional[Invoice]:
        row = find_invoice_by_number(self.conn, number.strip())
        return _build(Invoice, row) if row else None

    def find_reimbursement_line_items(self, reimbursement_id: str) -> List[LineItem]:
        rows = list_line_items(self.conn, "invoice_reimbursement_items", reimbursement_id)
        return [_build(LineItem, r) for r in rows]

    def find_invoice_line_items(self, invoice_id: str) -> List[LineItem]:
        rows = list_line_items(self.conn, "invoice_items", invoice_id)
        return [_build(LineItem, r) for r in rows]

    def find_down_payments_by_bl_number(self, bl_number: str) -> List[DownPayment]:
        rows = list_down_payments_by_bl(self.conn, bl_number.strip())
        return [_build(DownPayment, r) for r in rows]

    def list_reimbursements(self) -> List[Reimbursement]:
        return [_build(Reimbursement, r) for r in list_reimbursements(self.conn)]

    def list_invoices(self) -> List[Invoice]:
        return [_build(Invoice, r) for r in list_invoices(self.conn)]
