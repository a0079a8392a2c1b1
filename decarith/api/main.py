"""FastAPI application for the decimal evaluation service."""

from __future__ import annotations

import os
from dataclasses import dataclass

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from decarith import __version__
from decarith.api.endpoints import router
from decarith.api.models import MAX_LITERAL_LENGTH, MAX_OPERANDS

logger = structlog.get_logger()

# Largest body an evaluation can need: every operand at full length, plus
# room for the operation name, context overrides and JSON framing
MAX_REQUEST_SIZE = MAX_OPERANDS * MAX_LITERAL_LENGTH + 4096


@dataclass(frozen=True)
class ServerConfig:
    """Where and how the API server listens."""

    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    @classmethod
    def from_env(cls, prefix: str = "DECARITH_") -> ServerConfig:
        """Read ``<prefix>HOST``, ``<prefix>PORT`` and ``<prefix>DEBUG``."""
        defaults = cls()
        debug = os.environ.get(prefix + "DEBUG", "false")
        return cls(
            host=os.environ.get(prefix + "HOST", defaults.host),
            port=int(os.environ.get(prefix + "PORT", str(defaults.port))),
            reload=debug.lower() in ("true", "1", "yes"),
        )


app = FastAPI(
    title="decarith",
    description="General decimal arithmetic evaluation service",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(  # type: ignore[no-untyped-def]
    request: Request, call_next
):
    """Reject bodies larger than any valid evaluation request."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        logger.warning(
            "request_too_large",
            content_length=int(content_length),
            limit=MAX_REQUEST_SIZE,
        )
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


app.include_router(router)


def run() -> None:
    """Run the evaluation API server with settings from the environment."""
    config = ServerConfig.from_env()
    logger.info("server_starting", host=config.host, port=config.port)
    uvicorn.run(
        "decarith.api.main:app",
        host=config.host,
        port=config.port,
        reload=config.reload,
    )


if __name__ == "__main__":
    run()
