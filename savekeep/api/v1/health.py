"""Health check endpoint with database connectivity check."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from savekeep import __version__
from savekeep.core.database import check_db_connected, get_db
from savekeep.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(request: Request, db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        environment=request.app.state.settings.APP_ENV,
        version=__version__,
        database=db_status,
    )
