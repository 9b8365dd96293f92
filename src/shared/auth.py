"""Caller identity as issued by the external auth collaborator.

The acting seller arrives in the ``X-Seller-Id`` header. When it is missing
the caller's session is treated as expired.
"""

import structlog
from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)

SELLER_HEADER = "X-Seller-Id"


class AuthExpired(Exception):
    """The caller's session is no longer valid."""

    def __init__(self, message="Session expired, sign in again"):
        super().__init__(message)
        self.message = message


async def acting_seller(x_seller_id: str | None = Header(default=None)) -> str | None:
    """Seller identity of the caller, if any."""
    return x_seller_id.strip() if x_seller_id and x_seller_id.strip() else None


async def _auth_expired_handler(request: Request, exc: AuthExpired) -> JSONResponse:
    logger.info("Caller session expired", path=request.url.path)
    structlog.contextvars.clear_contextvars()
    return JSONResponse(status_code=401, content={"error": exc.message})


def register_auth_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthExpired, _auth_expired_handler)
