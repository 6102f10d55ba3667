"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from balloon_studio.api import register_error_handlers, router
from balloon_studio.config import get_settings
from balloon_studio.state.manager import get_state_manager
from balloon_studio.utils.logging import get_logger, setup_logging

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("application_starting")

    state_manager = await get_state_manager()
    logger.info("state_manager_initialized")

    yield

    logger.info("application_shutting_down")
    await state_manager.disconnect()


app = FastAPI(
    title="Balloon Studio",
    description="Balloon design, inventory and supplier ordering service",
    version="0.1.0",
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "balloon-studio"}


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "message": "Balloon Studio API",
        "docs": "/docs",
        "health": "/health",
    }


app.include_router(router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "balloon_studio.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development",
    )
