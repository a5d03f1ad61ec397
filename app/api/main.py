"""FastAPI application: trip validation endpoints."""

from __future__ import annotations

import logging
import os
import threading
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Header, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.schemas import DismissIssueRequest, HealthResponse, RestoreIssueRequest, SweepResponse
from app.application.context import AppContext, make_app_context
from app.domain.exceptions import InvalidIssueCategoryError, TripAccessDeniedError, TripNotFoundError
from app.domain.models import QuickStatus, ValidationResult

_api_logger = logging.getLogger("trip-health.api")

load_dotenv()

app = FastAPI(
    title="trip-health",
    version="1.0.0",
    docs_url="/docs" if os.getenv("ENABLE_DOCS", "false").lower() == "true" else None,
    redoc_url=None,
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds security response headers to every reply."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Cache-Control"] = "no-store"
        return response


app.add_middleware(SecurityHeadersMiddleware)

_context: Optional[AppContext] = None
_context_lock = threading.Lock()


def get_app_context() -> AppContext:
    """Lazily built process-wide context; tests override this dependency."""
    global _context
    if _context is None:
        with _context_lock:
            if _context is None:
                _context = make_app_context()
    return _context


def current_user_id(x_user_id: Optional[str] = Header(default=None)) -> int:
    """Caller identity from the X-User-Id header; 401 when absent or not numeric."""
    raw = (x_user_id or "").strip()
    if not raw.isdigit():
        raise HTTPException(status_code=401, detail="missing or invalid X-User-Id header")
    return int(raw)


def _safe_log_exception(context: str, exc: Exception) -> None:
    """Log an exception with credentials scrubbed."""
    from app.security.key_manager import get_key_manager

    _api_logger.warning("%s: %s", context, get_key_manager().scrub_text(str(exc)))


@app.exception_handler(TripNotFoundError)
async def _trip_not_found(request: Request, exc: TripNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(TripAccessDeniedError)
async def _trip_access_denied(request: Request, exc: TripAccessDeniedError) -> JSONResponse:
    _safe_log_exception(f"access denied on {request.url.path}", exc)
    return JSONResponse(status_code=403, content={"detail": "not allowed to modify this trip"})


@app.exception_handler(InvalidIssueCategoryError)
async def _invalid_category(request: Request, exc: InvalidIssueCategoryError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/health", response_model=HealthResponse)
def health(ctx: AppContext = Depends(get_app_context)):
    return HealthResponse(
        status="ok",
        routing_provider="openrouteservice" if ctx.resolver.has_client else "haversine",
        persistence=getattr(ctx.dismissals, "backend", "unknown"),
    )


@app.get("/trips/{trip_id}/validation", response_model=ValidationResult)
def validate_trip(
    trip_id: int,
    user_id: int = Depends(current_user_id),
    ctx: AppContext = Depends(get_app_context),
):
    """Full report grouped by category, dismissals applied."""
    return ctx.service.validate_trip(trip_id, user_id)


@app.get("/trips/{trip_id}/validation/status", response_model=QuickStatus)
def validation_status(
    trip_id: int,
    user_id: int = Depends(current_user_id),
    ctx: AppContext = Depends(get_app_context),
):
    """Overall status and active issue count only."""
    return ctx.service.get_quick_status(trip_id, user_id)


@app.post("/trips/{trip_id}/validation/dismiss", status_code=204)
def dismiss_issue(
    trip_id: int,
    req: DismissIssueRequest,
    user_id: int = Depends(current_user_id),
    ctx: AppContext = Depends(get_app_context),
):
    ctx.service.dismiss_issue(trip_id, user_id, req.issue_type, req.issue_key, req.category)
    return Response(status_code=204)


@app.post("/trips/{trip_id}/validation/restore", status_code=204)
def restore_issue(
    trip_id: int,
    req: RestoreIssueRequest,
    user_id: int = Depends(current_user_id),
    ctx: AppContext = Depends(get_app_context),
):
    ctx.service.restore_issue(trip_id, user_id, req.issue_type, req.issue_key)
    return Response(status_code=204)


@app.post("/maintenance/route-cache/sweep", response_model=SweepResponse)
def sweep_route_cache(ctx: AppContext = Depends(get_app_context)):
    """Run one route cache expiry sweep now."""
    return SweepResponse(**ctx.sweeper.run_once())
