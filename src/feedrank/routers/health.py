import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(tags=["health"])

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str
    elasticsearch: str


@router.get("/health", response_model=HealthResponse, status_code=200)
async def healthcheck(request: Request):
    """Liveness plus a best-effort store ping; never fails the check itself."""
    es = getattr(request.app.state, "es", None)
    if es is None:
        return {"status": "ok", "elasticsearch": "unconfigured"}

    try:
        reachable = await es.ping()
    except Exception:
        logger.warning("Elasticsearch ping failed", exc_info=True)
        reachable = False
    return {"status": "ok", "elasticsearch": "up" if reachable else "down"}
