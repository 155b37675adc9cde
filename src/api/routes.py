"""Endpoints HTTP.

Por qué handlers finos:
- Cada handler es una cadena corta de llamadas salientes.
- Los fallos suben como subclases de `AuditFixError` y la app los convierte
  en el sobre de error; cualquier otra excepción se loguea y se envuelve para
  que el cliente siempre reciba un sobre.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import APIRouter, Request, Response
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from adapters.analysis_backend import UploadPart, forward_upload
from core.config import AppSettings
from core.domain.models import FixRequest
from core.errors import AuditFixError, BackendError, FixProviderError, InvalidRequestError
from core.services.fix_generation import generate_fix
from core.services.repository_listing import list_repository, parse_github_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

CORS_PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _settings(request: Request) -> AppSettings:
    return request.app.state.settings


def _transport(request: Request) -> httpx.AsyncBaseTransport | None:
    return request.app.state.transport


async def _json_object(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError as exc:
        raise InvalidRequestError("Request body must be valid JSON") from exc
    if not isinstance(body, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    return body


def _preflight() -> Response:
    return Response(status_code=200, headers=CORS_PREFLIGHT_HEADERS)


@router.post("/analyze")
async def analyze(request: Request) -> dict[str, Any]:
    """Reenvía el formulario subido al backend de análisis."""

    content_type = request.headers.get("content-type", "").lower()
    if not content_type.startswith(FORM_CONTENT_TYPES):
        raise InvalidRequestError("Request must be multipart/form-data")

    try:
        form = await request.form()
        fields: list[tuple[str, str]] = []
        files: list[UploadPart] = []
        for name, value in form.multi_items():
            if isinstance(value, UploadFile):
                files.append(
                    UploadPart(
                        field=name,
                        filename=value.filename or name,
                        content=await value.read(),
                        content_type=value.content_type,
                    )
                )
            else:
                fields.append((name, value))

        result = await forward_upload(
            fields=fields,
            files=files,
            settings=_settings(request),
            transport=_transport(request),
        )
    except AuditFixError:
        logger.exception("Analysis request failed")
        raise
    except Exception as exc:
        logger.exception("Analysis request failed")
        raise BackendError(str(exc) or "Analysis failed") from exc

    return {"success": True, "data": result}


@router.options("/analyze")
async def analyze_preflight() -> Response:
    return _preflight()


@router.post("/gemini-fix")
async def gemini_fix(request: Request) -> dict[str, Any]:
    """Genera un fix para un issue reportado."""

    body = await _json_object(request)
    if not body.get("originalCode") or body.get("issue") is None:
        raise InvalidRequestError("Missing required fields: originalCode or issue")
    try:
        fix_request = FixRequest.model_validate(body)
    except ValidationError as exc:
        raise InvalidRequestError(f"Invalid fix request: {exc.errors()[0]['msg']}") from exc

    try:
        result = await generate_fix(fix_request, settings=_settings(request), transport=_transport(request))
    except FixProviderError:
        logger.exception("Fix generation failed")
        raise
    except Exception as exc:
        logger.exception("Fix generation failed")
        raise FixProviderError(str(exc) or "Failed to generate security fix") from exc

    return {"success": True, "data": result.to_wire()}


@router.options("/gemini-fix")
async def gemini_fix_preflight() -> Response:
    return _preflight()


@router.post("/github-repo")
async def github_repo(request: Request) -> dict[str, Any]:
    """Lista los archivos de código de un repositorio público de GitHub."""

    body = await _json_object(request)
    github_url = body.get("githubUrl")
    if not github_url:
        raise InvalidRequestError("GitHub URL is required")
    if not isinstance(github_url, str):
        raise InvalidRequestError("Invalid GitHub URL format")

    info = parse_github_url(github_url)
    if info is None:
        raise InvalidRequestError("Invalid GitHub URL format")

    try:
        listing = await list_repository(info, settings=_settings(request), transport=_transport(request))
    except AuditFixError:
        raise
    except Exception as exc:
        logger.exception("GitHub repo fetch failed")
        raise AuditFixError(str(exc) or "Failed to fetch repository") from exc

    return {"success": True, "data": listing.to_wire()}


@router.options("/github-repo")
async def github_repo_preflight() -> Response:
    return _preflight()
