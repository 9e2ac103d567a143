"""
Main FastAPI application bootstrap.
Configures middleware and includes routers.
"""
import logging
from typing import Any, Dict

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from price_calculator.core.config import config
from price_calculator.api.mcp import router as mcp_router
from price_calculator.middleware.request_size_limiter import RequestSizeLimiterMiddleware


logger = logging.getLogger(__name__)

SERVICE_NAME = "Azure Price Calculator Agent - MCP Server"
SERVICE_VERSION = "1.0.0"

# Validate configuration on startup
try:
    config.validate()
except ValueError as error:
    raise RuntimeError(f"Configuration error: {error}") from error


app = FastAPI(
    title=SERVICE_NAME,
    version=SERVICE_VERSION,
    description="Azure resource pricing and cost estimation tools",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestSizeLimiterMiddleware)

app.include_router(mcp_router)


@app.get("/")
async def root() -> Dict[str, Any]:
    """
    Root endpoint describing the service.

    Returns:
        Service name, version and tool endpoints
    """
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "endpoints": [
            "/mcp/tools",
            "/mcp/extract-resources",
            "/mcp/get-pricing",
            "/mcp/calculate-cost",
            "/mcp/estimate-cost",
        ],
    }


@app.get("/health")
async def health() -> Dict[str, str]:
    """Liveness probe."""
    return {"status": "healthy"}


def run() -> None:
    """Run the server with uvicorn."""
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Starting {SERVICE_NAME} on {config.HOST}:{config.PORT}")
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
