from typing import Iterator

from psycopg_pool import ConnectionPool

from .settings import settings
from .repos.invoices import PostgresLookup

# Opened by the app lifespan; stays closed under tests that override get_lookup.
pool = ConnectionPool(
    conninfo=settings.DATABASE_URL,
    min_size=settings.DB_POOL_MIN_SIZE,
    max_size=settings.DB_POOL_MAX_SIZE,
    open=False,
)

def get_lookup() -> Iterator[PostgresLookup]:
    """FastAPI dependency: one pooled connection per request."""
    with pool.connection() as conn:
        yield PostgresLookup(conn)

def db_ok() -> bool:
    try:
        with pool.connection(timeout=2) as conn, conn.cursor() as cur:
            cur.execute('select 1;')
            cur.fetchone()
        return True
    except Exception:
        return False
