"""
CDM store FastAPI application entrypoint.

Run with: uvicorn cdm_api.main:app --reload
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cdm_api import models_db  # noqa: F401  (registers tables on Base.metadata)
from cdm_api.database import Base, engine
from cdm_api.routes import api_router, v0_router
from cdm_api.utils.logging import configure_logging

CORS_ORIGINS = [o.strip() for o in os.getenv("CDM_CORS_ORIGINS", "*").split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and create DB tables on startup."""
    configure_logging()
    Base.metadata.create_all(bind=engine)
    yield
    # Shutdown: release pooled connections
    engine.dispose()


app = FastAPI(
    title="CDM API",
    description="""Storage and retrieval of Causal Decision Models (CDMs).

Models are versioned by appending: `PUT` stores a new version under the same
`meta.uuid` and every read returns the latest one. `DELETE` removes all versions
of a model but leaves its diagrams and elements addressable under `/v0/assets`.
""",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Origin", "Content-Type", "Accept"],
)

app.include_router(v0_router)
app.include_router(api_router)


@app.get("/")
def root():
    return {"service": "CDM API", "docs": "/docs", "api": "/v0/models"}
