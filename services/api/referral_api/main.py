from __future__ import annotations

import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from referral_api.core.config import Settings
from referral_api.db import make_engine
from referral_api.errors import ReferralError, StorageError
from referral_api.logs import error_text, log_event, log_json
from referral_api.store import ReferralStore


def _parse_csv(value: str) -> list[str]:
    raw = str(value or "").strip()
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _error_response(request: Request, *, status_code: int, message: str) -> JSONResponse:
    resp = JSONResponse(status_code=status_code, content={"error": message})
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        resp.headers["X-Request-Id"] = str(request_id)
    return resp


def create_app(
    *, settings: Settings | None = None, store: ReferralStore | None = None
) -> FastAPI:
    settings = settings or Settings()
    store = store or ReferralStore(make_engine(settings))

    app = FastAPI(
        title="Referral API",
        version="0.1.0",
        openapi_url="/api/openapi.json",
        docs_url="/docs",
    )
    app.state.settings = settings
    app.state.store = store
    app.state.schema_ready = False

    if settings.trust_proxy_headers:
        app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

    allowed_hosts = _parse_csv(settings.allowed_hosts) or ["*"]
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=allowed_hosts)

    cors_origins = _parse_csv(settings.cors_allowed_origins)
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def _request_context(request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get("x-request-id") or f"req_{uuid4().hex}"
        request.state.request_id = request_id

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start) * 1000.0
        response.headers["X-Request-Id"] = request_id

        if settings.log_json:
            log_json(
                {
                    "level": "info",
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                }
            )

        return response

    @app.exception_handler(ReferralError)
    async def _referral_error(request: Request, exc: ReferralError):
        if isinstance(exc, StorageError):
            log_event(
                "error",
                "request_failed",
                request_id=getattr(request.state, "request_id", None),
                method=request.method,
                path=request.url.path,
                operation=exc.operation,
            )
        return _error_response(
            request, status_code=exc.status_code, message=exc.message
        )

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError):
        _ = exc
        return _error_response(request, status_code=400, message="Invalid request body")

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        log_event(
            "error",
            "unhandled_exception",
            request_id=getattr(request.state, "request_id", None),
            method=request.method,
            path=request.url.path,
            error=error_text(exc),
        )
        return _error_response(
            request, status_code=500, message="Internal Server Error"
        )

    @app.on_event("startup")
    def _ensure_schema() -> None:
        # Keep serving when the backend is down; requests fail until it recovers.
        result = app.state.store.ensure_schema()
        app.state.schema_ready = result.ok
        if not result.ok:
            log_event("error", "bootstrap_degraded", error=result.error)

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/ready")
    def ready() -> dict[str, object]:
        db_ok = False
        db_err: str | None = None
        try:
            app.state.store.ping()
            db_ok = True
        except StorageError as exc:
            cause = exc.__cause__ or exc
            db_err = error_text(cause)

        return {
            "status": "ok" if db_ok else "fail",
            "schema_ready": bool(app.state.schema_ready),
            "db": {"ok": db_ok, "error": db_err},
        }

    from referral_api.routers import referrals, statistics

    app.include_router(referrals.router)
    app.include_router(statistics.router)

    return app


app = create_app()
