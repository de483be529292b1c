"""Health check and favicon routes."""

from fastapi import APIRouter, Response
from fastapi.responses import PlainTextResponse

from errors import USAGE

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
@router.get("/health", response_class=PlainTextResponse)
async def health() -> str:
    """Lightweight liveness check with usage hint. No upstream calls."""
    return f"ThingSpeak Proxy is running\n{USAGE}"


@router.get("/favicon.ico", include_in_schema=False)
async def favicon() -> Response:
    return Response(status_code=204)
