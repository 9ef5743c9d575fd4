"""Storefront FastAPI application.

Every request runs inside the storefront domain context; synchronous command
processing means a response is only sent once the unit of work committed.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay (memory providers by default,
# PostgreSQL under "production").
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from storefront.domain import init_storefront, storefront
from storefront.utils.logging import add_context, clear_context

init_storefront()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Variant pricing, carts, orders and payment verification",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and bind request details to the log context."""
    clear_context()
    add_context(
        request_id=request.headers.get("x-request-id") or uuid4().hex,
        path=request.url.path,
        user_id=request.headers.get("x-user-id") or None,
    )
    try:
        with storefront.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.catalogue.api import catalog_router, product_router  # noqa: E402
from storefront.ordering.api import cart_router, order_router  # noqa: E402
from storefront.payments.api import payment_router  # noqa: E402
from storefront.shared.exception_handlers import register_exception_handlers  # noqa: E402

app.include_router(catalog_router)
app.include_router(product_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(payment_router)

register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
