"""Health check endpoint with database connectivity check (no auth)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from farmapp.core.config import Settings, get_settings
from farmapp.core.database import check_db_connected, get_db
from farmapp.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Service status and database connectivity, for load balancers and monitoring."""
    return HealthResponse(
        environment=settings.APP_ENV,
        version=request.app.version,
        ai_features_enabled=settings.AI_FEATURES_ENABLED,
        database="connected" if check_db_connected(db) else "disconnected",
    )
