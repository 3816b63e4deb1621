"""Application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from techdebt.api.dependencies import get_config, limiter
from techdebt.api.routes.scan import router as scan_router
from techdebt.shared.logging import setup_logging

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: load config, setup logging."""
    config = get_config()
    setup_logging(
        level=config.log_level,
        file_path=config.log_file or "",
        rotation_max_mb=config.log_rotation_max_mb,
        rotation_backups=config.log_rotation_backups,
    )
    log.info(
        "startup_complete",
        max_workers=config.scan.max_workers,
        ai_detection=config.scan.ai_detection.enabled,
    )
    yield
    log.info("shutdown_complete")


app = FastAPI(
    title="TechDebt Scanner",
    version="0.1.0",
    description="Technical debt, complexity and security scanner",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().security.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scan_router)


@app.get("/health")
@limiter.limit(lambda: f"{get_config().security.rate_limit_requests_per_minute}/minute")
async def health(request: Request) -> dict:
    return {"status": "ok", "service": "techdebt"}
