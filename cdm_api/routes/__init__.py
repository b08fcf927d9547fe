"""API routes for the CDM store."""

from fastapi import APIRouter

from cdm_api.routes import assets, models, monitoring

# Versioned CDM API
v0_router = APIRouter(prefix="/v0")
v0_router.include_router(models.router, prefix="/models", tags=["models"])
v0_router.include_router(assets.router, prefix="/assets", tags=["assets"])

# Operational endpoints
api_router = APIRouter(prefix="/api", tags=["api"])
api_router.include_router(monitoring.router)
