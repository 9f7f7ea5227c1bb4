"""FastAPI application for the StableSwap calculator."""

import os

import structlog
import uvicorn
from fastapi import FastAPI

from stableswap import __version__
from stableswap.api.endpoints import router

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("STABLESWAP_HOST", "127.0.0.1")
PORT = int(os.environ.get("STABLESWAP_PORT", "8000"))
DEBUG = os.environ.get("STABLESWAP_DEBUG", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="StableSwap Calculator",
    description="Swap amounts, price impact and bonding curves for two-token StableSwap pools",
    version=__version__,
)

app.include_router(router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def configure_logging() -> None:
    """Console logging for the server process."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
    )


def run() -> None:
    """Run the calculator API server.

    Configuration via environment variables:
    - STABLESWAP_HOST: Host to bind to (default: 127.0.0.1)
    - STABLESWAP_PORT: Port to bind to (default: 8000)
    - STABLESWAP_DEBUG: Enable debug/reload mode (default: false)
    """
    configure_logging()
    uvicorn.run(
        "stableswap.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
