"""Marketplace FastAPI application.

Processes commands synchronously over HTTP. Every request runs inside its
own domain context, so each command gets its own unit of work.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Settings and domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the domain.toml overlay (memory providers by default,
# PostgreSQL in staging/production) and the log format.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from marketplace.config import configure
from marketplace.domain import marketplace

settings = configure()
marketplace.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Marketplace API",
    description="Multi-store marketplace: catalogue, carts, checkout and orders",
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
    """Push the Protean domain context and the logging context for each request."""
    if request.url.path in ("/health", "/docs", "/openapi.json"):
        return await call_next(request)
    with request_log_context(request) as request_id, marketplace.domain_context():
        response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


# ---------------------------------------------------------------------------
# Routers and error mapping
# ---------------------------------------------------------------------------
from marketplace.api import REQUEST_ID_HEADER, register_error_handlers, request_log_context, routers  # noqa: E402

for router in routers:
    app.include_router(router)

register_exception_handlers(app)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domain": marketplace.name,
            "environment": settings.environment,
        }
    )
