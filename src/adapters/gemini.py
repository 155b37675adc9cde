"""Adaptador para la API de Gemini (`generateContent`).

Responsabilidad:
- Enviar un prompt con parámetros de muestreo y umbrales de seguridad fijos.
- Devolver el texto del primer candidato; el parseo vive en el Core.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from adapters.http_client import build_async_client, describe_status
from core.config import AppSettings
from core.errors import FixProviderError

logger = logging.getLogger(__name__)

# Baja temperatura: fixes consistentes y reproducibles.
GENERATION_CONFIG: dict[str, Any] = {
    "temperature": 0.1,
    "maxOutputTokens": 2048,
    "topP": 0.8,
    "topK": 10,
}

SAFETY_CATEGORIES: tuple[str, ...] = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
SAFETY_THRESHOLD = "BLOCK_MEDIUM_AND_ABOVE"


def build_generate_payload(prompt: str) -> dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": dict(GENERATION_CONFIG),
        "safetySettings": [
            {"category": category, "threshold": SAFETY_THRESHOLD} for category in SAFETY_CATEGORIES
        ],
    }


def generate_content_url(settings: AppSettings) -> str:
    return f"{settings.gemini_api_base.rstrip('/')}/models/{settings.gemini_model}:generateContent"


def _first_candidate_text(data: Any) -> str:
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not candidates:
        raise FixProviderError("No response from Gemini")
    try:
        text = candidates[0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        reason = candidates[0].get("finishReason") if isinstance(candidates[0], dict) else None
        detail = f" (finishReason={reason})" if reason else ""
        raise FixProviderError(f"Gemini returned a candidate without text{detail}") from exc
    if not isinstance(text, str):
        raise FixProviderError("Gemini returned a candidate without text")
    return text


async def generate_text(
    prompt: str,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Calls `generateContent` and returns the first candidate's text."""

    settings = settings or AppSettings()
    api_key = (settings.gemini_api_key or "").strip()
    if not api_key:
        raise FixProviderError("Gemini API key is not configured (set GEMINI_API_KEY)")

    url = generate_content_url(settings)
    try:
        async with build_async_client(
            settings,
            timeout_seconds=settings.ai_timeout_seconds,
            transport=transport,
        ) as client:
            resp = await client.post(url, params={"key": api_key}, json=build_generate_payload(prompt))
    except httpx.HTTPError as exc:
        # El mensaje de httpx incluye la URL con la key: no propagarlo.
        raise FixProviderError(f"Gemini API request failed: {type(exc).__name__}") from exc

    if not resp.is_success:
        raise FixProviderError(f"Gemini API error: {describe_status(resp)}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise FixProviderError("Gemini API returned a non-JSON body") from exc

    text = _first_candidate_text(data)
    logger.debug("Gemini returned %d characters", len(text))
    return text
