"""Jerarquía de excepciones compartida por adapters, API y CLI.

Por qué una jerarquía propia:
- La capa API mapea cada clase a un status HTTP y renderiza el sobre
  `{success: false, error}`.
- La CLI solo imprime el mensaje.
"""

from __future__ import annotations

from typing import Any


class AuditFixError(Exception):
    """Error base. Lleva el status code que usa la capa API."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def payload(self) -> dict[str, Any]:
        return {"success": False, "error": self.message}


class InvalidRequestError(AuditFixError):
    status_code = 400


class RepositoryNotFoundError(AuditFixError):
    status_code = 404


class BackendError(AuditFixError):
    """El backend de análisis falló o respondió con un status no-2xx."""


class FixProviderError(AuditFixError):
    """Falló el proveedor del modelo. El sobre le indica a la UI que use su fallback."""

    def payload(self) -> dict[str, Any]:
        return {**super().payload(), "fallback": True}


class GitHubError(AuditFixError):
    """Falló una descarga puntual del árbol (red o no-2xx)."""


class ClientValidationError(AuditFixError):
    """Archivo local rechazado antes de cualquier llamada de red."""

    status_code = 400


class GatewayError(AuditFixError):
    """El gateway respondió con un sobre de error o un status no-2xx."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
