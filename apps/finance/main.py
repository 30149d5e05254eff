import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from .settings import settings
from .db import pool
from .routes.health import router as health_router
from .routes.invoice_final import router as invoice_final_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    pool.open()
    try:
        yield
    finally:
        pool.close()


app = FastAPI(
    title="Mitra Finance API",
    version="0.1.0",
    description="Invoice Final aggregation over reimbursements, invoices and down payments.",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(invoice_final_router)
