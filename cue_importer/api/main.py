"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cue_importer.api import providers
from cue_importer.api.routes import imports, patterns, tracks
from cue_importer.api.websockets import progress
from cue_importer.mongodb.client import get_mongodb_client
from cue_importer.mongodb.config import is_mongodb_configured
from cue_importer.pattern_engine import seed_default_patterns

load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize and cleanup resources."""
    # Startup - indexes and the default library patterns
    logger = logging.getLogger(__name__)
    store = providers.pattern_store()
    if store is not None:
        try:
            await store.ensure_indexes()
            seeded = await seed_default_patterns(store)
            if seeded > 0:
                logger.info("Seeded %d default patterns", seeded)
        except Exception as e:
            logger.warning("Failed to prepare pattern store: %s", e)

    tracks = providers.track_database()
    if tracks is not None:
        try:
            await tracks.ensure_indexes()
        except Exception as e:
            logger.warning("Failed to prepare track database: %s", e)

    yield
    # Shutdown
    if is_mongodb_configured():
        await get_mongodb_client().close()


app = FastAPI(
    title="Cue Importer API",
    description="Imports NLE project files into music cue sheets",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(imports.router, prefix="/api/imports", tags=["imports"])
app.include_router(patterns.router, prefix="/api/patterns", tags=["patterns"])
app.include_router(tracks.router, prefix="/api/tracks", tags=["tracks"])
app.include_router(progress.router, prefix="/ws", tags=["websocket"])


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
