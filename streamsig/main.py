"""
Streamsig - FastAPI application entry point.

Repairs ciphered and throttled media URLs from a video player response by
running the signing functions of the platform's player script, and picks a
format by capability and quality.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import get_settings
from .routes.api import router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if get_settings().debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Streamsig starting up...")

    settings = get_settings()
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Player base URL: {settings.base_url}")

    yield

    from .core.player import get_player_function_set

    await get_player_function_set().clear()
    logger.info("Streamsig shutting down...")


app = FastAPI(
    title="Streamsig",
    description=(
        "Deciphers media URL signatures and throttling parameters using the "
        "platform's own player script, and selects formats by quality."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router, prefix="/api")


@app.get("/", tags=["root"])
async def root():
    return {
        "name": "Streamsig",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "player_functions": "/api/player/functions",
            "resolve": "/api/formats/resolve",
            "select": "/api/formats/select",
            "health": "/api/health",
        },
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "streamsig.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
