"""FastAPI application for the directions proxy."""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from commuteopt.core.errors import ConfigError, GovernorDeniedError, ProviderError
from commuteopt.directions.client import SERVER_CONFIG_ERROR, GoogleDirectionsClient
from commuteopt.governor.limiter import RequestGovernor
from commuteopt.settings import AppSettings, get_settings

from .routes import directions, health

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(GovernorDeniedError)
    async def governor_denied(request: Request, exc: GovernorDeniedError) -> JSONResponse:
        content = {"error": str(exc)}
        headers = None
        if exc.retry_after is not None:
            content["retryAfter"] = exc.retry_after
            headers = {"Retry-After": str(exc.retry_after)}
        return JSONResponse(status_code=status.HTTP_429_TOO_MANY_REQUESTS, content=content, headers=headers)

    @app.exception_handler(ConfigError)
    async def config_error(request: Request, exc: ConfigError) -> JSONResponse:
        logger.error(f"Configuration error: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": SERVER_CONFIG_ERROR},
        )

    @app.exception_handler(ProviderError)
    async def provider_error(request: Request, exc: ProviderError) -> JSONResponse:
        content = {"error": str(exc)}
        if exc.details:
            content["details"] = exc.details
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = "Method not allowed" if exc.status_code == 405 else exc.detail
        return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)


def create_app(
    settings: Optional[AppSettings] = None,
    governor: Optional[RequestGovernor] = None,
    provider: Optional[GoogleDirectionsClient] = None,
) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="commuteopt directions proxy")
    app.state.settings = settings
    app.state.governor = governor if governor is not None else RequestGovernor(
        per_window=settings.rate_limit_per_minute,
        per_day=settings.rate_limit_per_day,
    )
    app.state.provider = provider

    _register_exception_handlers(app)

    app.include_router(health.router, prefix=API_PREFIX)
    app.include_router(directions.router, prefix=API_PREFIX)
    return app
