"""Factory de la aplicación FastAPI."""

from __future__ import annotations

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.routes import router
from core.config import AppSettings
from core.errors import AuditFixError


def create_app(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Construye la app del gateway.

    `transport` se entrega a cada cliente httpx saliente; los tests pasan
    aquí un `httpx.MockTransport`.
    """

    settings = settings or AppSettings()

    app = FastAPI(title="AuditFix gateway", version="0.1.0")
    app.state.settings = settings
    app.state.transport = transport

    @app.exception_handler(AuditFixError)
    async def _auditfix_error(_: Request, exc: AuditFixError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.payload())

    @app.get("/health")
    def health() -> dict[str, object]:
        return {
            "status": "ok",
            "backend_url": settings.backend_url,
            "gemini_configured": bool((settings.gemini_api_key or "").strip()),
            "github_token_configured": bool((settings.github_token or "").strip()),
        }

    app.include_router(router)
    return app
