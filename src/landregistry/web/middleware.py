"""Caller identity middleware and dependencies."""

from __future__ import annotations

from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

PRINCIPAL_HEADER = "X-Principal"


class CallerMiddleware(BaseHTTPMiddleware):
    """Middleware that copies the caller principal header onto request.state.caller."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        principal = request.headers.get(PRINCIPAL_HEADER, "").strip()
        request.state.caller = principal or None
        return await call_next(request)


def require_caller(request: Request) -> str:
    """FastAPI dependency that requires an identified caller."""
    caller = getattr(request.state, "caller", None)
    if not caller:
        raise HTTPException(
            status_code=401,
            detail=f"Missing {PRINCIPAL_HEADER} header",
        )
    return caller
