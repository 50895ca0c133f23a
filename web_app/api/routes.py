"""API routes implementation."""

from fastapi import APIRouter, Request, Response, status

from .schemas import ShortenRequest

router = APIRouter()


@router.post(
    "/urls",
    response_model=str,
    responses={
        400: {"description": "Invalid URL or short code"},
        409: {"description": "Short code already exists"},
        500: {"description": "Internal server error"},
    },
    summary="Create short URL",
    description="Create a shortened URL and return its short code. Optionally provide a name to use as the code.",
)
async def create_short_url(request: Request, body: ShortenRequest) -> str:
    """Create a shortened URL."""
    service = request.app.state.service
    request.app.state.logger.info(f"Shorten request: url={body.url!r} name={body.name!r}")

    return await service.shorten(body.url, name=body.name)


@router.get(
    "/{short_code}",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    response_class=Response,
    responses={404: {"description": "Short code not found"}},
    summary="Follow short URL",
    description="Redirect to the original URL of a short code.",
)
async def fetch_short_url(request: Request, short_code: str):
    """Redirect to the original URL."""
    resolver = request.app.state.resolver

    target = await resolver.resolve(short_code)

    # Targets are validated as URL-safe ASCII, so they go out unquoted
    return Response(status_code=status.HTTP_307_TEMPORARY_REDIRECT, headers={"Location": target})
