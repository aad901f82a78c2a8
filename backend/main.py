# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Instantiate the FastAPI app.
* Register CORS middleware from ``settings.allow_origins``.
* Render every error as ``{"type": "error", "status": ..., "message": ...}``.
* Mount the exchange router (/api/submit, /api/fetch/{id}).
* Run the periodic sweep of expired records in the background.
* Expose a /health endpoint for container liveness checks.

Run with:
    uvicorn main:app --app-dir backend
"""

import asyncio
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from core.config import settings
from core.logger import logger
from database import Base, SessionLocal, engine
from exchange.router import router as exchange_router
from exchange.schemas import ErrorResponse
from records.store import RecordStore

app = FastAPI(title="Sealnote", version="1.0.0")

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
# ["*"] allows every origin; list explicit origins for a locked-down deploy.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Cache-Control", "Authorization", "X-Requested-With"],
)


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs method, path, client IP, status, latency.  Bodies are never echoed –
# they carry ciphertext.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            client_ip,
            response.status_code,
            elapsed_ms,
        )
        return response


app.add_middleware(_RequestLogMiddleware)

# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(status=status_code, message=message).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError):
    # Malformed JSON and wrongly typed fields both end up here
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'][1:]) or 'body'}: {err['msg']}"
        for err in exc.errors()
    )
    return _error(400, f"Invalid request: {problems}")


@app.exception_handler(Exception)
async def _unhandled_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(exchange_router)

# ---------------------------------------------------------------------------
# Background sweep
# ---------------------------------------------------------------------------


def sweep_expired() -> int:
    """Delete every expired record using a short-lived session."""
    db = SessionLocal()
    try:
        return RecordStore(db).sweep()
    finally:
        db.close()


async def _sweep_loop(interval: int) -> None:
    while True:
        await asyncio.sleep(interval)
        try:
            removed = await run_in_threadpool(sweep_expired)
        except Exception:
            # Keep sweeping; reads enforce expiry regardless
            logger.exception("Sweep of expired texts failed")
            continue
        if removed:
            logger.info("Sweep removed %d expired text(s)", removed)


_sweep_task: asyncio.Task | None = None

# ---------------------------------------------------------------------------
# Lifecycle & health check
# ---------------------------------------------------------------------------


@app.on_event("startup")
async def _on_startup():
    global _sweep_task
    logger.info("Sealnote service starting up (database backend: %s)", engine.url.get_backend_name())
    # Idempotent; production schemas are managed by alembic
    Base.metadata.create_all(bind=engine)
    if settings.sweep_interval_seconds > 0:
        _sweep_task = asyncio.create_task(_sweep_loop(settings.sweep_interval_seconds))


@app.on_event("shutdown")
async def _on_shutdown():
    logger.info("Sealnote service shutting down")
    if _sweep_task is not None:
        _sweep_task.cancel()


@app.get("/health")
def health():
    return {"status": "ok"}
