"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta en el borde (JSON de navegador, backend, Gemini, GitHub)
  sin acoplar el Core a librerías de I/O.
- La serialización por alias reproduce exactamente el contrato camelCase
  que consume el front-end.

Nota:
- Estos modelos describen *qué* viaja por la red, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


def _camel(**kwargs: Any) -> ConfigDict:
    return ConfigDict(populate_by_name=True, **kwargs)


class ReportedIssue(BaseModel):
    """Issue tal como lo reporta el backend y lo reenvía la UI.

    Los campos son libres (`Any`): el issue se interpola en el prompt y se
    devuelve tal cual en `originalIssue`, sin coerción de tipos.
    """

    model_config = _camel(extra="allow")

    message: Any = Field(default=None, description="Human readable issue description.")
    severity: Any = Field(default=None, description="Severity label as reported.")
    line: Any = Field(default=None, description="1-based line of the issue.")
    column: Any = Field(default=None, description="1-based column of the issue.")

    def as_received(self) -> dict[str, Any]:
        """Solo las claves que vinieron en el JSON (incluidas las extra)."""

        return self.model_dump(exclude_unset=True)


class FixRequest(BaseModel):
    """Body de `POST /api/gemini-fix`."""

    model_config = _camel(extra="ignore")

    original_code: str = Field(..., alias="originalCode", min_length=1)
    issue: ReportedIssue
    file_name: str | None = Field(default=None, alias="fileName")
    language: str = Field(default="javascript")


class FixResult(BaseModel):
    """`data` de una respuesta de fix exitosa."""

    model_config = _camel()

    fixed_code: str = Field(..., alias="fixedCode")
    explanation: str
    recommendations: list[str] = Field(default_factory=list)
    original_issue: dict[str, Any] = Field(default_factory=dict, alias="originalIssue")
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="generatedAt",
    )

    def to_wire(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, mode="json")
        data["generatedAt"] = format_timestamp(self.generated_at)
        return data


class RepoInfo(BaseModel):
    """Terna owner/repo/branch extraída de una URL de GitHub."""

    owner: str = Field(..., min_length=1)
    repo: str = Field(..., min_length=1)
    branch: str = Field(default="main", min_length=1)


class RepositoryFile(BaseModel):
    """Un archivo de código dentro del listado de un repositorio."""

    model_config = _camel()

    path: str
    size: int
    sha: str | None = None
    display_name: str = Field(..., alias="displayName")
    directory: str
    extension: str
    owner: str
    repo: str
    branch: str


class RepositoryRef(BaseModel):
    owner: str
    repo: str
    branch: str
    url: str


class RepositoryListing(BaseModel):
    """`data` de una respuesta de listado exitosa."""

    model_config = _camel()

    repository: RepositoryRef
    files: list[RepositoryFile] = Field(default_factory=list)
    total_files: int = Field(default=0, alias="totalFiles")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


Severity = Literal["critical", "high", "medium", "low"]


class ScanIssue(BaseModel):
    """Issue tal como lo produce el backend de análisis (vista del cliente)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    severity: Severity
    type: str
    line_number: int | None = None
    description: str
    suggestion: str
    code_snippet: str | None = None


class ScanSummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    total_issues: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0


class AnalysisResult(BaseModel):
    """Resultado del backend de análisis, ya extraído del sobre del gateway."""

    model_config = ConfigDict(extra="ignore")

    file_name: str
    status: Literal["success", "error"]
    issues: list[ScanIssue] = Field(default_factory=list)
    summary: ScanSummary = Field(default_factory=ScanSummary)


def format_timestamp(value: datetime) -> str:
    """UTC ISO-8601 con milisegundos y sufijo `Z`."""

    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
