from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from expense_api.core.config import Settings, get_settings
from expense_api.core.log_config import configure_logging
from expense_api.routers import expenses as expenses_router
from expense_api.services.expense_service import ExpenseService, build_expense_service

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers on every JSON response."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


async def _invalid_input_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(err.get("loc", ())[:1] == ("path",) for err in errors):
        detail = "Invalid expense ID"
    else:
        detail = "Invalid input"
    logger.info("Rejected %s %s: %s", request.method, request.url.path, detail)
    return JSONResponse({"detail": detail}, status_code=400)


def _cors_origins(settings: Settings) -> list[str]:
    allowed = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed.update(
            {
                "http://localhost:8080",
                "http://127.0.0.1:8080",
                "http://localhost:5173",
                "http://127.0.0.1:5173",
            }
        )
    return sorted(origin for origin in allowed if origin)


def create_app(
    settings: Settings | None = None,
    expense_service: ExpenseService | None = None,
) -> FastAPI:
    """Factory compatível com uvicorn/gunicorn (uvicorn --factory)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Expense API")
    app.state.settings = settings
    app.state.expense_service = expense_service or build_expense_service()

    origins = _cors_origins(settings)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.add_exception_handler(RequestValidationError, _invalid_input_handler)

    @app.get("/health")
    def health(request: Request):
        svc: ExpenseService = request.app.state.expense_service
        return {"ok": True, "store_exists": svc.storage.exists()}

    app.include_router(expenses_router.router)

    logger.info(
        "Expense API ready (env=%s, file=%s, single_writer=%s)",
        settings.app_env,
        app.state.expense_service.storage.path,
        app.state.expense_service.lock.enabled,
    )
    return app
