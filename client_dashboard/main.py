"""
FastAPI application entry point for the client dashboard API.

Configures logging and CORS, creates the session services in the lifespan
(shared HTTP client, data source controller, update channel), performs the
initial sheet load and registers the API routers.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from client_dashboard import __version__
from client_dashboard.api import api_router
from client_dashboard.core.config import get_settings
from client_dashboard.core.exceptions import DashboardError
from client_dashboard.core.http import close_http_client, init_http_client
from client_dashboard.services.data_source import DataSourceController
from client_dashboard.services.update_channel import UpdateChannel

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for application startup and shutdown.

    On startup:
        - Apply the configured log level
        - Create the shared HTTP client and the session services
        - Load the sheet once; a failure leaves the controller in the error
          state for the client to retry

    On shutdown:
        - Close the shared HTTP client
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    logger.info("Client Dashboard API starting")
    client = await init_http_client()

    data_source = DataSourceController(client, settings.sheet_csv_url, settings)
    app.state.data_source = data_source
    app.state.update_channel = UpdateChannel(
        client,
        settings.webhook_url,
        data_source,
        greeting=settings.chat_greeting or None,
    )

    try:
        await data_source.load()
        logger.info("Initial sheet load complete")
    except DashboardError as e:
        logger.error(f"Initial sheet load failed: {e.message}")

    yield

    logger.info("Client Dashboard API shutting down")
    await close_http_client()


# Create FastAPI application
app = FastAPI(
    title="Client Dashboard API",
    version=__version__,
    description=(
        "Backend for the client dashboard. Serves records, metrics and chart "
        "series derived from the client spreadsheet, and relays chat messages "
        "to the assistant webhook."
    ),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:8080",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring probes."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """
    Root endpoint providing API information.
    """
    return {
        "name": "Client Dashboard API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "client_dashboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
