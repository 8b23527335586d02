"""CORS and HTTP-cache headers applied to every response."""

from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class ResponseHeadersMiddleware(BaseHTTPMiddleware):
    """Answers CORS preflights and stamps permissive CORS headers on responses.

    With ``disable_http_caching`` the responses also forbid browser and proxy
    caching; freshness is handled by the server-side snapshot cache.
    """

    def __init__(self, app: Callable, disable_http_caching: bool = True) -> None:
        super().__init__(app)
        self.headers = dict(CORS_HEADERS)
        if disable_http_caching:
            self.headers.update(NO_CACHE_HEADERS)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)
        response.headers.update(self.headers)
        return response
