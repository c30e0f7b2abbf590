"""Health endpoints."""

from fastapi import APIRouter, Request, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root(request: Request) -> dict:
    """Liveness plus whether the provider key is configured."""
    return {
        "status": "ok",
        "provider_configured": bool(request.app.state.settings.google_api_key),
    }
