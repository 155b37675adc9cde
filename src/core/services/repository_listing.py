"""Orquestación del listado de repositorios.

Por qué un servicio:
- Parsea la URL de GitHub, resuelve la rama (cadena de fallback) y convierte
  el árbol git recursivo en una lista filtrada y ordenada de archivos de código.
- La CLI y la API pasan ambas por `list_repository`.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

import httpx

from adapters.github_tree import fetch_tree
from core.config import AppSettings
from core.domain.files import file_extension, is_repository_code_file, split_path
from core.domain.models import RepoInfo, RepositoryFile, RepositoryListing, RepositoryRef
from core.errors import GitHubError, RepositoryNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"
FALLBACK_BRANCHES: tuple[str, ...] = ("main", "master")

_URL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^https?://github\.com/([^/]+)/([^/]+)(?:/tree/([^/]+))?"),
    re.compile(r"^github\.com/([^/]+)/([^/]+)(?:/tree/([^/]+))?"),
    re.compile(r"^([^/]+)/([^/]+)$"),
)


def parse_github_url(url: str) -> RepoInfo | None:
    """Extrae owner/repo/branch; `None` si ningún patrón coincide."""

    value = url.strip()
    for pattern in _URL_PATTERNS:
        match = pattern.match(value)
        if match:
            # El patrón `owner/repo` no tiene grupo de rama.
            owner, repo, branch = (*match.groups(), None, None)[:3]
            return RepoInfo(owner=owner, repo=repo, branch=branch or DEFAULT_BRANCH)
    return None


def collation_key(value: str) -> tuple[str, str]:
    """Clave tipo `localeCompare`: compara ignorando mayúsculas y, en empate, las minúsculas van antes."""

    return value.casefold(), value.swapcase()


def branch_candidates(branch: str) -> list[str]:
    """`[branch, "main", "master"]` sin repetidos, conservando el orden."""

    seen: set[str] = set()
    out: list[str] = []
    for name in (branch, *FALLBACK_BRANCHES):
        if name in seen:
            continue
        seen.add(name)
        out.append(name)
    return out


def filter_code_files(tree: Iterable[Any], *, info: RepoInfo, branch: str) -> list[RepositoryFile]:
    """Conserva los blobs de código y los ordena por directorio y luego por nombre."""

    files: list[RepositoryFile] = []
    for item in tree:
        if not isinstance(item, dict) or item.get("type") != "blob":
            continue
        path = item.get("path")
        size = item.get("size")
        if not isinstance(path, str) or not isinstance(size, int):
            continue
        if not is_repository_code_file(path, size):
            continue

        directory, name = split_path(path)
        files.append(
            RepositoryFile(
                path=path,
                size=size,
                sha=item.get("sha"),
                displayName=name,
                directory=directory,
                extension=file_extension(path),
                owner=info.owner,
                repo=info.repo,
                branch=branch,
            )
        )

    files.sort(key=lambda f: (collation_key(f.directory), collation_key(f.display_name)))
    return files


async def resolve_tree(
    info: RepoInfo,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[str, dict[str, Any]]:
    """Primera rama cuyo árbol se puede obtener, junto con su payload."""

    for branch in branch_candidates(info.branch):
        try:
            data = await fetch_tree(
                owner=info.owner,
                repo=info.repo,
                branch=branch,
                settings=settings,
                transport=transport,
            )
        except GitHubError as exc:
            logger.info("Branch %r not available: %s", branch, exc)
            continue
        return branch, data

    raise RepositoryNotFoundError("Repository not found or not accessible. Make sure it's public.")


async def list_repository(
    info: RepoInfo,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RepositoryListing:
    branch, data = await resolve_tree(info, settings=settings, transport=transport)
    tree = data.get("tree")
    files = filter_code_files(tree if isinstance(tree, list) else [], info=info, branch=branch)
    logger.info("Listed %d code file(s) in %s/%s@%s", len(files), info.owner, info.repo, branch)

    return RepositoryListing(
        repository=RepositoryRef(
            owner=info.owner,
            repo=info.repo,
            branch=branch,
            url=f"https://github.com/{info.owner}/{info.repo}",
        ),
        files=files,
        totalFiles=len(files),
    )
