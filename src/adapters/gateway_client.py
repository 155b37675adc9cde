"""Cliente de la propia API (lo que en el navegador hace el front-end).

Por qué en adapters:
- Es I/O puro (HTTP) contra el gateway; la CLI solo presenta resultados.
- Valida el archivo localmente antes de cualquier llamada de red.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx

from adapters.http_client import build_async_client, describe_status
from core.config import AppSettings
from core.domain.files import validate_file
from core.errors import ClientValidationError, GatewayError


def _gateway_url(settings: AppSettings, path: str) -> str:
    return settings.gateway_url.rstrip("/") + path


def _unwrap(resp: httpx.Response) -> Any:
    try:
        envelope = resp.json()
    except ValueError:
        raise GatewayError(f"HTTP error! status: {describe_status(resp)}", status_code=resp.status_code)

    if not isinstance(envelope, dict):
        raise GatewayError("Gateway returned an unexpected body", status_code=resp.status_code)
    if not resp.is_success or not envelope.get("success"):
        message = envelope.get("error") or f"HTTP error! status: {describe_status(resp)}"
        raise GatewayError(str(message), status_code=resp.status_code)
    if "data" not in envelope or envelope["data"] is None:
        raise GatewayError("Gateway response carried no data", status_code=resp.status_code)
    return envelope["data"]


async def _send(
    method: str,
    path: str,
    *,
    settings: AppSettings,
    transport: httpx.AsyncBaseTransport | None,
    timeout_seconds: float | None = None,
    **kwargs: Any,
) -> Any:
    url = _gateway_url(settings, path)
    try:
        async with build_async_client(settings, timeout_seconds=timeout_seconds, transport=transport) as client:
            resp = await client.request(method, url, **kwargs)
    except httpx.HTTPError as exc:
        raise GatewayError(f"Gateway unreachable at {settings.gateway_url}: {exc}") from exc
    return _unwrap(resp)


async def analyze_file(
    path: Path,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Valida y envía un archivo a `/api/analyze`; devuelve `data` del envelope."""

    settings = settings or AppSettings()
    size = path.stat().st_size
    check = validate_file(path.name, size)
    if not check.valid:
        raise ClientValidationError(check.error or "Invalid file")

    content = path.read_bytes()
    return await _send(
        "POST",
        "/api/analyze",
        settings=settings,
        transport=transport,
        data={"file_name": path.name, "file_size": str(size)},
        files={"file": (path.name, content, "text/plain")},
    )


async def list_repository(
    github_url: str,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    settings = settings or AppSettings()
    return await _send(
        "POST",
        "/api/github-repo",
        settings=settings,
        transport=transport,
        json={"githubUrl": github_url},
    )


async def request_fix(
    *,
    original_code: str,
    issue: dict[str, Any],
    file_name: str,
    language: str = "javascript",
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    settings = settings or AppSettings()
    return await _send(
        "POST",
        "/api/gemini-fix",
        settings=settings,
        transport=transport,
        timeout_seconds=settings.ai_timeout_seconds,
        json={
            "originalCode": original_code,
            "issue": issue,
            "fileName": file_name,
            "language": language,
        },
    )
