"""
FastAPI application entry point.

Sets up the FastAPI application with middleware, error handlers and routers,
and provisions the board index in the background on startup.
"""

import logging
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables first
load_dotenv()

# Import configuration
from .config import close_client, get_document_store, get_settings

from .auto_init import schedule_auto_init
from .domains.board.error_handlers import register_exception_handlers
from .routes import build_api_router
from shared.utils.logging import setup_logging

# Get settings instance
settings = get_settings()

setup_logging(settings.log_level, settings.log_format)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Bulletin board backed by an Elasticsearch document index",
    version=settings.app_version,
    debug=settings.debug
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

register_exception_handlers(app)

# Make sure the index exists; serving does not wait for this.
@app.on_event("startup")
async def _ensure_index_initialized():
    app.state.auto_init_task = schedule_auto_init(
        get_document_store(),
        settings.index_name,
        shards=settings.index_shards,
        replicas=settings.index_replicas,
    )

@app.on_event("shutdown")
async def _close_search_client():
    task = getattr(app.state, "auto_init_task", None)
    if task is not None and not task.done():
        task.cancel()
    await close_client()
    logger.info("Search client closed")

# Include routers
app.include_router(build_api_router())

@app.get("/health")
def read_health():
    """Health check endpoint."""
    return {
        "message": f"{settings.app_name} is running!",
        "version": settings.app_version,
        "environment": settings.environment
    }
