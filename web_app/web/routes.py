"""Operational routes: health check and metrics."""

from fastapi import APIRouter, Request, Response, status

router = APIRouter()


@router.get(
    "/healthz",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Health check",
)
async def healthz():
    """Liveness probe; does not touch the store."""
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/metrics", include_in_schema=False)
async def metrics(request: Request):
    """Prometheus metrics endpoint."""
    app_metrics = request.app.state.metrics
    return Response(content=app_metrics.render(), media_type=app_metrics.content_type)
