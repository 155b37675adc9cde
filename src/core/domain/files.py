"""Reglas de archivos: validación de uploads y filtro de código en repositorios.

Por qué en el dominio:
- La CLI (lado cliente) y la API (lado servidor) deben aplicar las mismas reglas.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

MAX_UPLOAD_BYTES = 5 * 1024 * 1024

UPLOAD_EXTENSIONS: tuple[str, ...] = (
    ".js", ".ts", ".jsx", ".tsx", ".py", ".go", ".java", ".php",
    ".rb", ".cs", ".cpp", ".c", ".rs", ".kt", ".json", ".yml",
    ".yaml", ".env", ".html", ".css", ".scss",
)

# Repository listings skip markup/stylesheets.
REPOSITORY_EXTENSIONS: tuple[str, ...] = (
    ".js", ".ts", ".jsx", ".tsx", ".py", ".go", ".java", ".php",
    ".rb", ".cs", ".cpp", ".c", ".rs", ".kt", ".json", ".yml",
    ".yaml", ".env",
)

MAX_REPOSITORY_FILE_BYTES = 1_000_000

SKIP_DIRS = frozenset({"node_modules", ".git", "dist", "build", "target", "vendor", ".next"})


@dataclass(frozen=True)
class FileValidation:
    valid: bool
    error: str | None = None


def is_supported_file_type(file_name: str) -> bool:
    return file_name.lower().endswith(UPLOAD_EXTENSIONS)


def validate_file(file_name: str, size: int) -> FileValidation:
    """Valida un archivo antes de subirlo a análisis."""

    if size > MAX_UPLOAD_BYTES:
        return FileValidation(False, "File too large (max 5MB)")
    if not is_supported_file_type(file_name):
        return FileValidation(False, "Unsupported file type")
    if size == 0:
        return FileValidation(False, "File is empty")
    return FileValidation(True)


def in_skipped_directory(path: str) -> bool:
    directories = PurePosixPath(path).parts[:-1]
    return any(part in SKIP_DIRS for part in directories)


def is_repository_code_file(path: str, size: int) -> bool:
    if not path.lower().endswith(REPOSITORY_EXTENSIONS):
        return False
    if size >= MAX_REPOSITORY_FILE_BYTES:
        return False
    return not in_skipped_directory(path)


def split_path(path: str) -> tuple[str, str]:
    """Devuelve (directorio, nombre); el directorio es "" para archivos en la raíz."""

    directory, _, name = path.rpartition("/")
    return directory, name


def file_extension(path: str) -> str:
    return path.rsplit(".", 1)[-1].lower()
