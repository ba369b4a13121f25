"""HTTP mapping for marketplace errors."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from marketplace.errors import MarketplaceError

logger = structlog.get_logger(__name__)


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    logger.info(
        "request_rejected",
        path=request.url.path,
        code=exc.code,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
