from __future__ import annotations

from pathlib import Path

import pytest

from core.config import AppSettings, write_user_env_vars
from core.errors import FixProviderError, InvalidRequestError, RepositoryNotFoundError


def test_defaults() -> None:
    settings = AppSettings(_env_file=None)
    assert settings.backend_analyze_url == "http://localhost:8888/api/analyze"
    assert settings.user_agent == "AuditFix-Security-Tool"
    assert settings.gemini_model == "gemini-pro"
    assert settings.gemini_api_key is None


def test_unprefixed_keys_are_read(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    monkeypatch.setenv("AUDITFIX_BACKEND_URL", "http://scanner:9000/")
    settings = AppSettings(_env_file=None)
    assert settings.gemini_api_key == "from-env"
    assert settings.github_token == "gh-token"
    assert settings.backend_analyze_url == "http://scanner:9000/api/analyze"


def test_write_user_env_vars_merges(tmp_path: Path) -> None:
    env_path = tmp_path / "cfg" / ".env"
    env_path.parent.mkdir()
    env_path.write_text("# old\nAUDITFIX_GEMINI_MODEL='gemini-1.5-flash'\nAUDITFIX_PORT=9000\n", encoding="utf-8")

    write_user_env_vars(
        {"AUDITFIX_GEMINI_MODEL": "gemini-pro", "AUDITFIX_GITHUB_TOKEN": None},
        env_path=env_path,
    )

    lines = env_path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "# AuditFix user config (.env)"
    assert "AUDITFIX_GEMINI_MODEL=gemini-pro" in lines
    assert "AUDITFIX_PORT=9000" in lines
    assert not any(line.startswith("AUDITFIX_GITHUB_TOKEN") for line in lines)


def test_error_payloads() -> None:
    assert InvalidRequestError("bad").status_code == 400
    assert RepositoryNotFoundError("gone").status_code == 404
    assert FixProviderError("down").payload() == {"success": False, "error": "down", "fallback": True}
