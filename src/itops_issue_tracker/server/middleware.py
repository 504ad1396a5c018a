"""HTTP middleware for the REST server."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class OptionsMiddleware(BaseHTTPMiddleware):
    """Answer every ``OPTIONS`` request with an empty 200.

    Browser preflights (``Origin`` + ``Access-Control-Request-Method``) are
    answered by the CORS middleware wrapped around this one; any other
    ``OPTIONS`` request ends here instead of falling through to a 405.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200)
        return await call_next(request)
