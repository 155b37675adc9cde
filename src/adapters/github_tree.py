"""Scraper de GitHub: árbol recursivo de un repositorio.

Usa la API oficial (`git/trees/<ref>?recursive=1`). Un token opcional sube
el límite de rate limit; sin token la API es pública.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from adapters.http_client import build_async_client, describe_status
from core.config import AppSettings
from core.errors import GitHubError

logger = logging.getLogger(__name__)


def github_headers(settings: AppSettings) -> dict[str, str]:
    headers = {
        # GitHub requiere UA. Accept JSON versión estable.
        "Accept": "application/vnd.github+json",
    }
    token = (settings.github_token or "").strip()
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


async def fetch_tree(
    *,
    owner: str,
    repo: str,
    branch: str,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Returns the decoded tree payload for one branch.

    Raises `GitHubError` for transport errors and non-2xx answers.
    """

    settings = settings or AppSettings()
    url = f"{settings.github_api_base.rstrip('/')}/repos/{owner}/{repo}/git/trees/{branch}"

    try:
        async with build_async_client(settings, extra_headers=github_headers(settings), transport=transport) as client:
            resp = await client.get(url, params={"recursive": "1"})
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise GitHubError(f"GitHub request failed: {exc}") from exc

    if not resp.is_success:
        remaining = resp.headers.get("x-ratelimit-remaining")
        if resp.status_code == 403 and remaining == "0":
            logger.warning("GitHub rate limit exhausted (set GITHUB_TOKEN for higher limits)")
        raise GitHubError(f"GitHub API error for {owner}/{repo}@{branch}: {describe_status(resp)}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise GitHubError("GitHub returned a non-JSON body") from exc
    if not isinstance(data, dict):
        raise GitHubError("GitHub returned an unexpected tree payload")

    if data.get("truncated"):
        logger.warning("Tree for %s/%s@%s is truncated by GitHub", owner, repo, branch)
    return data
