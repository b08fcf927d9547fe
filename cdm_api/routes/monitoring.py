"""Health endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cdm_api.database import get_db
from cdm_api.services.monitoring_service import get_health

router = APIRouter(tags=["monitoring"])


@router.get("/health", summary="Health check")
def health(db: Session = Depends(get_db)):
    """Health check for load balancers and orchestration. Reports database status."""
    return get_health(db)
