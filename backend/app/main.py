# File: backend/app/main.py
# Version: v0.4.0
"""
FastAPI app entry.

- Keeps route assembly in backend/app/api/v1/api.py.
- Mounts /api/* via `api_router` and the primer endpoints at /api/v1/primers.
- Creates missing tables on startup (non-destructive).
"""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api.v1.api import api_router
from backend.app.api.v1.primers.router import router as primers_router
from backend.app.core.config import settings
from backend.app.db.maintenance import ensure_schema
from backend.app.db.session import engine

logging.basicConfig(level=settings.log_level_value)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    version=settings.APP_VERSION,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Primers endpoints
app.include_router(primers_router)


@app.get("/healthz")
def healthz():
    return {"status": "ok"}


# APIs under /api
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.on_event("startup")
def _startup_schema() -> None:
    actions = ensure_schema(engine)
    logger.info("[schema] %s", ", ".join(actions))
