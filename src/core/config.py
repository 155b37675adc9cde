"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la API ni la CLI.
- Permite que adaptadores (backend/Gemini/GitHub) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "auditfix"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "auditfix"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "auditfix"
    return Path.home() / ".config" / "auditfix"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# AuditFix user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para API/CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUDITFIX_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    backend_url: str = Field(
        default="http://localhost:8888",
        min_length=8,
        description="Base URL of the external analysis backend.",
    )
    backend_analyze_path: str = Field(
        default="/api/analyze",
        min_length=1,
        description="Path on the backend that receives multipart uploads.",
    )

    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("AUDITFIX_GEMINI_API_KEY", "GEMINI_API_KEY"),
        description="API key for the generative-language API.",
    )
    gemini_api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        min_length=8,
        description="Base URL of the generative-language API.",
    )
    gemini_model: str = Field(
        default="gemini-pro",
        min_length=1,
        description="Model used for fix generation.",
    )

    github_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("AUDITFIX_GITHUB_TOKEN", "GITHUB_TOKEN"),
        description="Optional GitHub token (higher rate limits).",
    )
    github_api_base: str = Field(
        default="https://api.github.com",
        min_length=8,
        description="Base URL of the GitHub REST API.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per request to backend/GitHub (seconds).",
    )
    ai_timeout_seconds: float = Field(
        default=45.0,
        gt=0,
        description="Timeout for calls to the model provider (seconds).",
    )
    user_agent: str = Field(
        default="AuditFix-Security-Tool",
        min_length=1,
        description="User-Agent for outbound requests.",
    )

    host: str = Field(default="127.0.0.1", description="Bind address for `auditfix serve`.")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port for `auditfix serve`.")
    gateway_url: str = Field(
        default="http://127.0.0.1:8000",
        min_length=8,
        description="Gateway URL used by the CLI client commands.",
    )

    log_level: str = Field(default="INFO", description="Root log level.")

    @property
    def backend_analyze_url(self) -> str:
        return self.backend_url.rstrip("/") + "/" + self.backend_analyze_path.lstrip("/")
