"""Adaptador del backend de análisis (servicio externo).

Responsabilidad:
- Reenviar sin cambios el multipart recibido por la API.
- Devolver el cuerpo JSON del backend tal cual; el Core no lo interpreta.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from adapters.http_client import build_async_client, describe_status
from core.config import AppSettings
from core.errors import BackendError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadPart:
    """A file part of the incoming multipart form."""

    field: str
    filename: str
    content: bytes
    content_type: str | None = None


async def forward_upload(
    *,
    fields: list[tuple[str, str]],
    files: list[UploadPart],
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """POSTs the form to the backend and returns its decoded JSON body."""

    settings = settings or AppSettings()
    url = settings.backend_analyze_url

    data: dict[str, list[str]] = {}
    for name, value in fields:
        data.setdefault(name, []).append(value)
    multipart = [
        (part.field, (part.filename, part.content, part.content_type or "application/octet-stream"))
        for part in files
    ]

    logger.debug("Forwarding %d field(s) and %d file(s) to %s", len(fields), len(files), url)
    try:
        async with build_async_client(settings, transport=transport) as client:
            # Sin Content-Type explícito: httpx genera el boundary.
            resp = await client.post(url, data=data, files=multipart or None)
    except httpx.HTTPError as exc:
        raise BackendError(f"Analysis backend unreachable: {exc}") from exc

    if not resp.is_success:
        raise BackendError(f"Analysis backend error: {describe_status(resp)}")

    try:
        return resp.json()
    except ValueError as exc:
        raise BackendError("Analysis backend returned a non-JSON body") from exc
