"""
FastAPI application factory for the IPEDS Comps API.

Usage:
    python -m api.app                          # Dev server on PORT (default 3000)
    APP_DATA_DIR=/data/ipeds python -m api.app

OpenAPI docs available at http://localhost:3000/docs after starting.

Startup loads the HD institution directory and registers the completions
years.  A directory that cannot be loaded aborts startup: the API never
serves requests with a partial or missing directory.

Structured JSON logging when APP_LOG_FORMAT=json.
CORS middleware with configurable origins via APP_CORS_ORIGINS.
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models import HealthOut
from api.routes import comps
from ipeds.errors import MissingParameterError, QueryCancelled, ScanError
from ipeds.service import CompsService
from utils.config import AppConfig

# ── Configuration ─────────────────────────────────────────────────────────────
_cfg = AppConfig.from_env()

# ── Structured JSON logging ───────────────────────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


_logger = logging.getLogger("ipeds_comps_api")
_handler = logging.StreamHandler()
if _cfg.log_format == "json":
    _handler.setFormatter(_JsonFormatter())
else:
    _handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
logging.basicConfig(handlers=[_handler], level=logging.INFO, force=True)

# ── Application metrics ───────────────────────────────────────────────────────
# Simple in-memory counters; reset on process restart.
_app_start_time: float = time.time()
_metrics: dict = {
    "request_count": 0,
    "error_count": 0,
    "response_times_ms": [],  # capped at last 100 entries
}
_RESPONSE_TIME_WINDOW = 100


def create_app(
    config: AppConfig | None = None,
    service: CompsService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings to load the dataset from at startup (defaults to
            the environment).
        service: A ready CompsService; when given, no dataset is loaded at
            startup (useful for testing).

    Returns:
        Configured FastAPI application instance.
    """
    cfg = config or _cfg

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load the directory and year registry once, before serving."""
        if app.state.service is None:
            # DirectoryLoadError propagates and aborts startup.
            app.state.service = CompsService.from_config(cfg)
        svc = app.state.service
        _logger.info(
            "Ready: %d institutions, years %s, cache size %d",
            len(svc.directory), svc.registry.years(), svc.cache.stats()["maxsize"],
        )
        yield

    app = FastAPI(
        title="IPEDS Comps API",
        summary="Per-institution completions by CIP code and award level across IPEDS survey years.",
        description=(
            "## IPEDS Comps API\n\n"
            "Answers: *for a CIP program code (and optionally an award level), "
            "how many completions did each institution record per year?*\n\n"
            "### Key concepts\n"
            "- **CIP codes** are normalized to `NN.NNNN`; `512001`, `51.2` and "
            "`51.2001` are all accepted.\n"
            "- **Award level** (`awlevel`) is the IPEDS AWLEVEL credential code.\n"
            "- **Completions** are CTOTALT counts from the IPEDS Completions survey.\n\n"
            "Responses for repeated identical queries are served from a bounded "
            "in-memory cache."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {
                "name": "comps",
                "description": "Completions aggregated per institution for one CIP code.",
            },
            {
                "name": "meta",
                "description": "Health check and API metadata.",
            },
        ],
    )
    app.state.service = service

    # ── CORS middleware ───────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging middleware ────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request and record metrics."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        path = request.url.path

        _metrics["request_count"] += 1
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000

        _metrics["response_times_ms"].append(duration_ms)
        if len(_metrics["response_times_ms"]) > _RESPONSE_TIME_WINDOW:
            _metrics["response_times_ms"] = (
                _metrics["response_times_ms"][-_RESPONSE_TIME_WINDOW:]
            )
        if response.status_code >= 500:
            _metrics["error_count"] += 1

        response.headers["X-Request-ID"] = request_id

        if cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f rid=%s",
                request.method, path, response.status_code, duration_ms,
                request_id,
            )
        if duration_ms > 500:
            _logger.warning(
                "slow_query method=%s path=%s query=%s duration_ms=%.1f",
                request.method, path, request.url.query, duration_ms,
            )
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(MissingParameterError)
    async def missing_parameter_handler(request: Request, exc: MissingParameterError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(ScanError)
    async def scan_error_handler(request: Request, exc: ScanError):
        _logger.error("scan_failed path=%s query=%s: %s",
                      request.url.path, request.url.query, exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Server error", "detail": str(exc)},
        )

    @app.exception_handler(QueryCancelled)
    async def cancelled_handler(request: Request, exc: QueryCancelled):
        _logger.info("cancelled path=%s: %s", request.url.path, exc)
        return JSONResponse(status_code=499, content={"error": "Client closed request"})

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions and return JSON instead of HTML traceback."""
        _logger.exception("unhandled path=%s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Server error", "detail": str(exc)},
        )

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/", tags=["meta"], summary="Root sanity check")
    def root():
        """Return 200 OK if the process is up (load-balancer probe)."""
        return {"ok": True, "service": app.title}

    @app.get("/health", tags=["meta"], summary="Health check", response_model=HealthOut)
    def health(request: Request):
        """Return loaded years and institution count."""
        return request.app.state.service.health()

    @app.get(
        "/health/detailed",
        tags=["meta"],
        summary="Detailed health metrics",
        response_description="Operational metrics for monitoring dashboards",
    )
    def health_detailed(request: Request):
        """Return uptime, request/error counters, response time and cache stats.

        Counters reset on process restart.
        """
        svc: CompsService = request.app.state.service
        rts = _metrics["response_times_ms"]
        avg_rt = round(sum(rts) / len(rts), 2) if rts else 0.0
        return {
            **svc.health(),
            "uptime_seconds": round(time.time() - _app_start_time, 2),
            "request_count": _metrics["request_count"],
            "error_count": _metrics["error_count"],
            "avg_response_time_ms": avg_rt,
            "cache": svc.cache.stats(),
        }

    # ── Register routers ──────────────────────────────────────────────────────

    app.include_router(comps.router, prefix="/api")

    return app


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
