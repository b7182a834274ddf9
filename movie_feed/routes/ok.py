from __future__ import annotations

from fastapi import APIRouter, Response

router = APIRouter(tags=["health"])


@router.get("/ok")
async def ok() -> Response:
    """Liveness probe used by container health checks."""
    return Response(status_code=200)
