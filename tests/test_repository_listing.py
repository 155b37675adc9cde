from __future__ import annotations

import asyncio

import httpx
import pytest

from core.domain.models import RepoInfo
from core.errors import RepositoryNotFoundError
from core.services.repository_listing import (
    branch_candidates,
    filter_code_files,
    list_repository,
    parse_github_url,
)


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("octocat/hello-world", ("octocat", "hello-world", "main")),
        ("github.com/octocat/hello-world", ("octocat", "hello-world", "main")),
        ("https://github.com/octocat/hello-world", ("octocat", "hello-world", "main")),
        ("http://github.com/octocat/hello-world/tree/dev", ("octocat", "hello-world", "dev")),
        ("https://github.com/octocat/hello-world/tree/release/extra", ("octocat", "hello-world", "release")),
        ("github.com/octocat/hello-world/tree/v2", ("octocat", "hello-world", "v2")),
        ("  octocat/spaces  ", ("octocat", "spaces", "main")),
    ],
)
def test_parse_github_url(url: str, expected: tuple[str, str, str]) -> None:
    info = parse_github_url(url)
    assert info is not None
    assert (info.owner, info.repo, info.branch) == expected


@pytest.mark.parametrize("url", ["", "octocat", "https://gitlab.com/a/b", "a/b/c"])
def test_parse_github_url_rejects(url: str) -> None:
    assert parse_github_url(url) is None


def test_branch_candidates_dedupe() -> None:
    assert branch_candidates("main") == ["main", "master"]
    assert branch_candidates("dev") == ["dev", "main", "master"]
    assert branch_candidates("master") == ["master", "main"]


def _tree() -> list[dict[str, object]]:
    return [
        {"path": "src", "type": "tree", "sha": "t1"},
        {"path": "src/zeta.py", "type": "blob", "size": 10, "sha": "a"},
        {"path": "src/Alpha.py", "type": "blob", "size": 10, "sha": "b"},
        {"path": "README.md", "type": "blob", "size": 10, "sha": "c"},
        {"path": "main.go", "type": "blob", "size": 10, "sha": "d"},
        {"path": "node_modules/pkg/index.js", "type": "blob", "size": 10, "sha": "e"},
        {"path": "lib/vendor/dep.rb", "type": "blob", "size": 10, "sha": "f"},
        {"path": "big/data.json", "type": "blob", "size": 2_000_000, "sha": "g"},
        {"path": "a/b/c.ts", "type": "blob", "size": 5, "sha": "h"},
    ]


def test_filter_code_files_filters_and_sorts() -> None:
    info = RepoInfo(owner="o", repo="r", branch="main")
    files = filter_code_files(_tree(), info=info, branch="master")

    assert [f.path for f in files] == ["main.go", "a/b/c.ts", "src/Alpha.py", "src/zeta.py"]
    root = files[0]
    assert root.directory == ""
    assert root.display_name == "main.go"
    assert root.extension == "go"
    assert root.branch == "master"
    assert root.sha == "d"


def test_filter_code_files_serializes_camel_case() -> None:
    info = RepoInfo(owner="o", repo="r")
    files = filter_code_files(_tree(), info=info, branch="main")
    wire = files[0].model_dump(by_alias=True)
    assert set(wire) == {"path", "size", "sha", "displayName", "directory", "extension", "owner", "repo", "branch"}


def _github_handler(available: dict[str, list[dict[str, object]]], calls: list[str]):
    def handler(request: httpx.Request) -> httpx.Response:
        branch = request.url.path.rsplit("/", 1)[-1]
        calls.append(branch)
        assert request.url.params["recursive"] == "1"
        if branch in available:
            return httpx.Response(200, json={"sha": "x", "tree": available[branch], "truncated": False})
        return httpx.Response(404, json={"message": "Not Found"})

    return handler


def test_list_repository_falls_back_to_master(settings) -> None:
    calls: list[str] = []
    transport = httpx.MockTransport(_github_handler({"master": _tree()}, calls))
    info = RepoInfo(owner="octocat", repo="legacy")

    listing = asyncio.run(list_repository(info, settings=settings, transport=transport))

    assert calls == ["main", "master"]
    assert listing.repository.branch == "master"
    assert listing.repository.url == "https://github.com/octocat/legacy"
    assert listing.total_files == len(listing.files) == 4
    assert all(f.branch == "master" for f in listing.files)


def test_list_repository_prefers_parsed_branch(settings) -> None:
    calls: list[str] = []
    transport = httpx.MockTransport(_github_handler({"dev": [], "main": _tree()}, calls))

    listing = asyncio.run(list_repository(RepoInfo(owner="o", repo="r", branch="dev"), settings=settings, transport=transport))

    assert calls == ["dev"]
    assert listing.repository.branch == "dev"
    assert listing.files == []


def test_list_repository_skips_transport_errors(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/main"):
            raise httpx.ConnectError("boom", request=request)
        return httpx.Response(200, json={"tree": _tree()})

    listing = asyncio.run(
        list_repository(RepoInfo(owner="o", repo="r"), settings=settings, transport=httpx.MockTransport(handler))
    )
    assert listing.repository.branch == "master"


def test_list_repository_not_found(settings) -> None:
    calls: list[str] = []
    transport = httpx.MockTransport(_github_handler({}, calls))

    with pytest.raises(RepositoryNotFoundError) as excinfo:
        asyncio.run(list_repository(RepoInfo(owner="o", repo="gone", branch="x"), settings=settings, transport=transport))

    assert calls == ["x", "main", "master"]
    assert excinfo.value.status_code == 404


def test_github_token_sent_as_bearer(settings) -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update({k.lower(): v for k, v in request.headers.items()})
        return httpx.Response(200, json={"tree": []})

    with_token = settings.model_copy(update={"github_token": "ghp_secret"})
    asyncio.run(list_repository(RepoInfo(owner="o", repo="r"), settings=with_token, transport=httpx.MockTransport(handler)))

    assert seen["authorization"] == "Bearer ghp_secret"
    assert seen["user-agent"] == "AuditFix-Security-Tool"
    assert seen["accept"] == "application/vnd.github+json"


def test_filter_code_files_orders_like_locale_compare() -> None:
    tree = [
        {"path": p, "type": "blob", "size": 10, "sha": p}
        for p in ("Zeta.js", "alpha.js", "src/b.js", "Src/a.js", "lib/x.js")
    ]

    files = filter_code_files(tree, info=RepoInfo(owner="o", repo="r"), branch="main")

    assert [f.path for f in files] == ["alpha.js", "Zeta.js", "lib/x.js", "src/b.js", "Src/a.js"]


def test_list_repository_skips_invalid_branch_urls(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/main"):
            raise httpx.InvalidURL("bad branch")
        return httpx.Response(200, json={"tree": _tree()})

    listing = asyncio.run(
        list_repository(RepoInfo(owner="o", repo="r"), settings=settings, transport=httpx.MockTransport(handler))
    )
    assert listing.repository.branch == "master"
