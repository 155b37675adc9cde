"""Generación de fixes para issues reportados.

Por qué un servicio:
- Arma el prompt, llama al adapter del modelo y convierte su respuesta libre
  en un `FixResult`.
- Una respuesta sin objeto JSON utilizable no es un error: el resultado
  vuelve al código original para que la UI siempre tenga algo que mostrar.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import httpx

from adapters.gemini import generate_text
from core.config import AppSettings
from core.domain.models import FixRequest, FixResult

logger = logging.getLogger(__name__)

FALLBACK_EXPLANATION_CHARS = 500
FALLBACK_RECOMMENDATIONS: tuple[str, ...] = (
    "Review the generated fix carefully",
    "Test thoroughly before deployment",
)
DEFAULT_EXPLANATION = "Security fix applied"

_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)


def build_fix_prompt(request: FixRequest) -> str:
    issue = request.issue
    language = request.language
    return f"""
You are a security expert. I have a security issue in my code that needs to be fixed.

**File:** {request.file_name}
**Language:** {language}
**Security Issue:** {issue.message}
**Severity:** {issue.severity}
**Line:** {issue.line}

**Original Code:**
```{language}
{request.original_code}
```

Please provide:
1. A fixed version of the ENTIRE code with the security issue resolved
2. A brief explanation of what was wrong and how you fixed it
3. Additional security recommendations if applicable

Requirements:
- Maintain the exact same functionality
- Fix only the security issue, don't change unrelated code structure
- Use best practices for {language} security
- Provide working, production-ready code
- Keep the same variable names and function signatures where possible

Please respond in this JSON format:
{{
  "fixedCode": "complete fixed code here",
  "explanation": "explanation of the fix",
  "recommendations": ["additional security tip 1", "additional security tip 2"]
}}
"""


def extract_json_object(text: str) -> dict[str, Any]:
    """Obtiene el primer objeto JSON presente en la respuesta del modelo.

    Raises `ValueError` when no candidate decodes to a JSON object.
    """

    candidates: list[str] = []
    match = _JSON_FENCE_RE.search(text)
    if match:
        candidates.append(match.group(1).strip())

    stripped = text.strip()
    if stripped.startswith("{") and stripped.endswith("}"):
        candidates.append(stripped)

    start = stripped.find("{")
    end = stripped.rfind("}")
    if 0 <= start < end:
        candidates.append(stripped[start : end + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    raise ValueError("Could not locate a valid JSON object in the model response.")


def _clean_recommendations(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None and str(item).strip()]


def parse_fix_response(text: str, request: FixRequest) -> FixResult:
    """Normaliza la respuesta del modelo como `FixResult`."""

    try:
        parsed = extract_json_object(text)
    except ValueError:
        logger.warning("Model response carried no JSON object; echoing the original code")
        return FixResult(
            fixedCode=request.original_code,
            explanation=text[:FALLBACK_EXPLANATION_CHARS] + "...",
            recommendations=list(FALLBACK_RECOMMENDATIONS),
            originalIssue=request.issue.as_received(),
        )

    fixed_code = parsed.get("fixedCode")
    explanation = parsed.get("explanation")
    return FixResult(
        fixedCode=fixed_code if isinstance(fixed_code, str) and fixed_code else request.original_code,
        explanation=explanation if isinstance(explanation, str) and explanation else DEFAULT_EXPLANATION,
        recommendations=_clean_recommendations(parsed.get("recommendations")),
        originalIssue=request.issue.as_received(),
    )


async def generate_fix(
    request: FixRequest,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FixResult:
    """Genera un fix para el issue; los fallos del proveedor se propagan."""

    prompt = build_fix_prompt(request)
    text = await generate_text(prompt, settings=settings, transport=transport)
    return parse_fix_response(text, request)
