"""FastAPI application entry point."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pythonjsonlogger import jsonlogger

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from api.rooms import rooms
from api.routes import rooms as room_routes
from api.schemas import HealthResponse
from api.websocket import router as ws_router
from config import LoggingConfig, config
from core.game.errors import (
    GameError,
    NotPlayersTurnError,
    PlayerNotFoundError,
    RoundInProgressError,
    RoundNotInProgressError,
)

logger = logging.getLogger(__name__)


def configure_logging(settings: LoggingConfig) -> None:
    """Install a stream handler on the root logger unless one is already set up."""
    handler = logging.StreamHandler()
    if settings.format == "json":
        handler.setFormatter(
            jsonlogger.JsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s")
        )
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )

    root = logging.getLogger()
    if not root.handlers:
        root.addHandler(handler)
    root.setLevel(settings.level)


configure_logging(config.logging)

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)

_CONFLICT_ERRORS = (NotPlayersTurnError, RoundInProgressError, RoundNotInProgressError)


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


def _game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    """Turn a rejected game command into a client error."""
    if isinstance(exc, PlayerNotFoundError):
        status_code = 404
    elif isinstance(exc, _CONFLICT_ERRORS):
        status_code = 409
    else:
        status_code = 400
    logger.info("rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


app = FastAPI(
    title="Blackjack Table",
    description="Turn-based multiplayer blackjack table API",
    version="0.1.0",
)

# Add rate limiter to app state and exception handlers
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(GameError, _game_error_handler)

# CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
@limiter.limit(f"{config.rate_limit.requests_per_minute}/minute")
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="OK", rooms=len(rooms), timestamp=datetime.now(timezone.utc))


# Include routers
app.include_router(room_routes.router, prefix="/api/rooms", tags=["rooms"])
app.include_router(ws_router, prefix="/ws", tags=["websocket"])

