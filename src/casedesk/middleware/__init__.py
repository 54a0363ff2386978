"""HTTP middleware stack for the casedesk API."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from casedesk.config import Settings
from casedesk.middleware.error_handler import setup_error_handlers
from casedesk.middleware.logging import setup_logging
from casedesk.middleware.rate_limit import RateLimitMiddleware
from casedesk.middleware.request_id import RequestContextMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure logging and error bodies, then stack the middleware.

    Added last runs first: CORS wraps everything, including 429s, and the
    request context is bound before the rate limiter logs anything.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-Id"],
        expose_headers=["X-Request-Id", "X-RateLimit-Limit", "X-RateLimit-Remaining"],
    )
