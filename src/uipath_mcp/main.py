"""FastAPI application entry point for the UiPath adapter."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from uipath_mcp import __version__
from uipath_mcp.api.routes import router
from uipath_mcp.config import get_settings

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logger.info(f"Starting UiPath Orchestrator adapter v{__version__}")
    if settings.uipath_url:
        logger.info(
            f"Default tenant '{settings.uipath_tenant_name}' at {settings.uipath_url} "
            f"(folder={settings.uipath_folder_id})"
        )
    else:
        logger.info("No UIPATH_URL set, requests must carry credential headers")

    yield

    logger.info("Shutting down UiPath Orchestrator adapter")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="UiPath Orchestrator Adapter",
        description="Tools and resources over the UiPath Orchestrator API",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    return app


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "uipath_mcp.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
