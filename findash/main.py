"""
FinDash — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from findash.api.dependencies import set_store
from findash.api.router_dashboard import router as dashboard_router
from findash.api.router_explore import router as explore_router
from findash.api.router_meta import router as meta_router
from findash.config import DATA_FOLDER
from findash.data.store import DataStore
from findash.errors import SourceLoadFailed
from findash.logging_setup import configure_logging, get_logger

logger = get_logger("findash.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load all sources at startup. A failed load keeps serving /api/health."""
    configure_logging()
    logger.info("FINDASH data folder = %s (exists = %s)", DATA_FOLDER, DATA_FOLDER.exists())

    store = DataStore()
    try:
        store.load()
    except (SourceLoadFailed, ValueError):
        logger.error("FinDash started without data — fix the sources and POST /api/reload")
    else:
        logger.info("FinDash ready — %d transactions, %s", store.row_count(), store.date_range())
    set_store(store)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="FinDash API",
        description="Personal transaction analytics — yearly trends, variation, exploration",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(dashboard_router)
    app.include_router(explore_router)
    return app


app = create_app()
