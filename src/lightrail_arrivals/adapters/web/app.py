"""Starlette application exposing the routes snapshot."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from lightrail_arrivals.adapters.web.rate_limit_middleware import RateLimitMiddleware
from lightrail_arrivals.adapters.web.response_headers_middleware import (
    ResponseHeadersMiddleware,
)
from lightrail_arrivals.domain.errors import AggregationError

if TYPE_CHECKING:
    from starlette.exceptions import HTTPException

    from lightrail_arrivals.adapters.config import AppConfig
    from lightrail_arrivals.domain.ports import RoutesProvider

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch route data"
ALLOWED_METHODS = "GET, OPTIONS"


def method_not_allowed_response() -> Response:
    """JSON 405 advertising the methods the front answers."""
    return JSONResponse(
        {"error": "Method not allowed"}, status_code=405, headers={"Allow": ALLOWED_METHODS}
    )


def create_app(routes_provider: RoutesProvider, config: AppConfig) -> Starlette:
    """Build the HTTP front.

    Args:
        routes_provider: Source of the (cached) routes snapshot.
        config: Application configuration.

    Returns:
        The Starlette application, with CORS/no-cache headers and optional rate limiting.
    """

    async def get_routes(request: Request) -> Response:
        # Starlette answers HEAD on GET routes; a HEAD must not trigger an aggregation
        if request.method != "GET":
            return method_not_allowed_response()
        logger.info("Fetching route data...")
        try:
            snapshot = await routes_provider.get_routes()
        except AggregationError as e:
            logger.error(f"Error fetching routes: {e}")
            return JSONResponse({"error": FETCH_FAILED_MESSAGE}, status_code=500)
        except Exception:
            logger.exception("Unexpected error fetching routes")
            return JSONResponse({"error": FETCH_FAILED_MESSAGE}, status_code=500)
        logger.info("Route data fetched successfully")
        return JSONResponse(snapshot.to_payload())

    async def healthz(_request: Request) -> Response:
        """Liveness probe for load balancers and monitoring."""
        return Response(content="Ok", media_type="text/plain")

    async def not_found(_request: Request, _exc: HTTPException) -> Response:
        return JSONResponse({"error": "Not found"}, status_code=404)

    async def method_not_allowed(_request: Request, _exc: HTTPException) -> Response:
        return method_not_allowed_response()

    middleware = [
        Middleware(ResponseHeadersMiddleware, disable_http_caching=config.disable_http_caching)
    ]
    if config.rate_limit_per_minute > 0:
        middleware.append(
            Middleware(RateLimitMiddleware, requests_per_minute=config.rate_limit_per_minute)
        )

    exception_handlers: dict[Any, Any] = {404: not_found, 405: method_not_allowed}

    return Starlette(
        routes=[
            Route("/routes", get_routes, methods=["GET"]),
            Route("/healthz", healthz, methods=["GET"]),
        ],
        middleware=middleware,
        exception_handlers=exception_handlers,
    )
