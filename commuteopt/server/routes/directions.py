"""Directions proxy endpoint."""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from commuteopt.core.errors import ConfigError, GovernorDeniedError, ProviderError
from commuteopt.directions.client import GoogleDirectionsClient
from commuteopt.directions.models import DirectionsRequest

router = APIRouter(tags=["directions"])
logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields: origin, destination, departureTime"


def client_identity(request: Request) -> str:
    """
    Socket peer address
    Forwarded headers are never read here; uvicorn rewrites the peer from
    X-Forwarded-For only for connections from forwarded_allow_ips
    """
    return request.client.host if request.client else "unknown"


def get_provider(request: Request) -> GoogleDirectionsClient:
    """Provider is built on first use so a missing key fails the request, not startup"""
    provider = request.app.state.provider
    if provider is None:
        api_key = request.app.state.settings.google_api_key
        if not api_key:
            logger.error("GOOGLE_API_KEY environment variable not set")
            raise ConfigError("GOOGLE_API_KEY environment variable not set")
        provider = request.app.state.provider = GoogleDirectionsClient(api_key=api_key)
    return provider


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@router.post("/directions", status_code=status.HTTP_200_OK)
async def directions(request: Request) -> JSONResponse:
    decision = request.app.state.governor.check(client_identity(request))
    if not decision.allowed:
        raise GovernorDeniedError(decision.reason, retry_after=decision.retry_after)

    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        return _bad_request(MISSING_FIELDS_MESSAGE)

    try:
        payload = DirectionsRequest.model_validate(body)
    except ValidationError as exc:
        return _bad_request(f"Invalid request: {exc.errors()[0]['msg']}")

    if payload.missing_fields():
        return _bad_request(MISSING_FIELDS_MESSAGE)

    try:
        departure_time = payload.departure_datetime()
    except ValueError as exc:
        return _bad_request(str(exc))

    provider = get_provider(request)

    try:
        result = await provider.get_directions(
            payload.origin,
            payload.destination,
            departure_time,
            payload.traffic_model,
        )
    except (ProviderError, ConfigError):
        raise
    except Exception as exc:
        logger.exception(f"Directions API error: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to fetch directions"},
        )

    return JSONResponse(content=result.model_dump(by_alias=True))
